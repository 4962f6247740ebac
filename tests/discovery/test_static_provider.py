"""
Tests for the Static (griffe) Introspection Provider.

Verifies:
1. Resolution through source files and import aliases.
2. Annotation flattening of griffe expressions (typing aliases, TypeVars, Literal).
3. Member and relationship answers consistent with the runtime provider.
4. Opaque handling of unresolvable references, and strict mode.
"""

import textwrap

import pytest

from api_closure.core.engine import ClosureEngine
from api_closure.core.errors import TypeNotFoundError
from api_closure.discovery.static import StaticIntrospector, canonical_type_path
from api_closure.enums import MemberKind, Visibility

EXTRAS_SOURCE = '''
import enum
from typing import Dict, Literal, TypeVar

from missing_dependency import Widget

T = TypeVar("T", bound="Item")
Alias = Dict[str, int]


class Mode(enum.Enum):
  FAST = 1


class Item:
  label = "x"
  tags = []

  def pick(self, choice: T) -> Alias:
    return {}

  def mode(self, m: Literal[Mode.FAST]) -> None:
    pass

  @staticmethod
  def build(count: int) -> "Item":
    return Item()

  @property
  def size(self) -> int:
    return 1

  def widget(self) -> Widget:
    """
    Returns the widget.

    Raises:
        KeyError: If nothing is attached.
    """
    raise KeyError("widget")
'''


@pytest.fixture
def provider(sample_package):
  return StaticIntrospector(search_paths=[sample_package])


@pytest.fixture
def extras_path(tmp_path):
  root = tmp_path / "extras_src"
  root.mkdir()
  (root / "static_extras.py").write_text(textwrap.dedent(EXTRAS_SOURCE).lstrip(), encoding="utf-8")
  return root


def by_name(members):
  return {m.name: m for m in members}


def refs(types):
  return [t.qualified_name for t in types]


# --- Names ---


@pytest.mark.parametrize(
  "path, expected",
  [
    ("int", "builtins.int"),
    ("typing.List", "builtins.list"),
    ("typing.Mapping", "collections.abc.Mapping"),
    ("typing_extensions.Sequence", "collections.abc.Sequence"),
    ("typing.OrderedDict", "collections.OrderedDict"),
    ("None", "builtins.NoneType"),
    ("types.NoneType", "builtins.NoneType"),
    ("pkg.mod.Thing", "pkg.mod.Thing"),
    ("typing.Optional", "typing.Optional"),
  ],
)
def test_canonical_type_path(path, expected):
  assert canonical_type_path(path) == expected


def test_resolve_by_name(provider):
  canvas = provider.resolve_by_name("closure_sample.model.Canvas")

  assert canvas.qualified_name == "closure_sample.model.Canvas"
  assert canvas.namespace == "closure_sample.model"


def test_resolve_follows_reexports(provider):
  assert provider.resolve_by_name("closure_sample.Canvas").qualified_name == "closure_sample.model.Canvas"


def test_resolve_colon_spelling(provider):
  layer = provider.resolve_by_name("closure_sample.model:Canvas.Layer")
  assert layer.qualified_name == "closure_sample.model.Canvas.Layer"


def test_resolve_primitives(provider):
  assert provider.resolve_by_name("None").primitive


@pytest.mark.parametrize("name", ["", "closure_sample.model.Nothing", "closure_sample.model", "not_a_package_xyz.Thing"])
def test_resolve_failures(provider, name):
  with pytest.raises(TypeNotFoundError):
    provider.resolve_by_name(name)


# --- Members ---


def test_constructor(provider):
  canvas = provider.resolve_by_name("closure_sample.model.Canvas")

  (ctor,) = provider.exported_constructors(canvas)

  assert ctor.kind == MemberKind.CONSTRUCTOR
  assert ctor.signature == "(width: int, height: int)"
  assert refs(ctor.parameter_types) == ["builtins.int"]


def test_constructor_is_inherited_from_the_mro(provider):
  layer = provider.resolve_by_name("closure_sample.model.Canvas.Layer")

  (ctor,) = provider.exported_constructors(layer)

  assert ctor.declaring_type == layer
  assert ctor.parameter_types == ()


def test_method_surface(provider):
  canvas = provider.resolve_by_name("closure_sample.model.Canvas")
  shape = provider.resolve_by_name("closure_sample.model.Shape")

  layers = by_name(provider.exported_methods(canvas))["layers"]
  area = by_name(provider.exported_methods(shape))["area"]

  assert layers.parameter_types == ()
  assert refs(layers.return_types) == ["closure_sample.model.Canvas.Layer[]"]
  assert refs(area.exception_types) == ["closure_sample.errors.ShapeError"]
  assert area.signature == "() -> float"


def test_visibility_and_inheritance(provider):
  square = provider.resolve_by_name("closure_sample.model.Square")
  shape = provider.resolve_by_name("closure_sample.model.Shape")

  inherited = by_name(provider.exported_methods(square))
  declared = by_name(provider.declared_methods(shape))

  assert inherited["area"].declaring_type == square
  assert "_outline" not in inherited
  assert declared["_outline"].visibility == Visibility.PROTECTED
  assert declared["__hidden"].visibility == Visibility.OTHER


def test_fields_include_instance_attributes(provider):
  shape = provider.resolve_by_name("closure_sample.model.Shape")
  square = provider.resolve_by_name("closure_sample.model.Square")

  color = by_name(provider.exported_fields(shape))["color"]
  square_fields = by_name(provider.exported_fields(square))

  assert refs(color.value_types) == ["closure_sample.model.Color"]
  assert "side" in square_fields
  assert square_fields["color"].declaring_type == shape


def test_relationships(provider):
  canvas = provider.resolve_by_name("closure_sample.model.Canvas")
  layer = provider.resolve_by_name("closure_sample.model.Canvas.Layer")
  square = provider.resolve_by_name("closure_sample.model.Square")

  assert provider.declared_nested_types(canvas) == [layer]
  assert provider.enclosing_type_of(layer) == canvas
  assert provider.enclosing_type_of(canvas) is None
  assert provider.supertype_of(square).qualified_name == "closure_sample.model.Shape"
  assert provider.supertype_of(canvas).qualified_name == "builtins.object"
  assert provider.implemented_contracts_of(square) == []


def test_extras_annotations(extras_path, recording_console):
  provider = StaticIntrospector(search_paths=[extras_path])
  item = provider.resolve_by_name("static_extras.Item")

  methods = by_name(provider.exported_methods(item))
  fields = by_name(provider.exported_fields(item))

  assert "static_extras.Item" in refs(methods["pick"].parameter_types)
  assert "builtins.dict" in refs(methods["pick"].return_types)
  assert refs(methods["mode"].parameter_types) == ["static_extras.Mode"]
  assert refs(methods["mode"].return_types) == ["builtins.NoneType"]
  assert refs(methods["build"].parameter_types) == ["builtins.int"]
  assert refs(methods["build"].return_types) == ["static_extras.Item"]
  assert refs(methods["widget"].exception_types) == ["builtins.KeyError"]
  assert refs(fields["size"].value_types) == ["builtins.int"]
  assert refs(fields["label"].value_types) == ["builtins.str"]
  assert refs(fields["tags"].value_types) == ["builtins.list"]
  assert "size" not in methods


def test_unresolvable_reference_is_opaque(extras_path, recording_console):
  provider = StaticIntrospector(search_paths=[extras_path])
  item = provider.resolve_by_name("static_extras.Item")

  widget = by_name(provider.exported_methods(item))["widget"]
  (opaque,) = widget.return_types

  assert opaque.qualified_name == "missing_dependency.Widget"
  assert provider.exported_methods(opaque) == []
  assert provider.supertype_of(opaque) is None
  assert "opaque" in recording_console.export_text()


def test_strict_mode_rejects_unresolvable_reference(extras_path):
  provider = StaticIntrospector(search_paths=[extras_path], strict=True)
  item = provider.resolve_by_name("static_extras.Item")

  with pytest.raises(TypeNotFoundError, match="missing_dependency.Widget"):
    provider.exported_methods(item)


def test_object_is_the_root_and_never_opaque(provider, recording_console):
  canvas = provider.resolve_by_name("closure_sample.model.Canvas")

  root = provider.supertype_of(canvas)

  assert root == provider.resolve_by_name("builtins.object")
  assert root.namespace == "builtins"
  assert provider.supertype_of(root) is None
  assert "opaque" not in recording_console.export_text()


def test_strict_closure_of_resolvable_sources(sample_package, recording_console):
  provider = StaticIntrospector(
    search_paths=[sample_package],
    primitives=["builtins.float", "builtins.int", "builtins.str"],
    strict=True,
  )
  point = provider.resolve_by_name("closure_sample.model.Point")

  engine = ClosureEngine([point], provider)

  assert set(refs(engine.classes_and_interfaces())) == {"closure_sample.model.Point", "builtins.object"}
  assert "opaque" not in recording_console.export_text()


# --- Closure ---


def test_closure_matches_runtime_types(provider):
  canvas = provider.resolve_by_name("closure_sample.model.Canvas")

  engine = ClosureEngine([canvas], provider)
  types = set(refs(engine.classes_and_interfaces()))

  assert {
    "closure_sample.model.Canvas",
    "closure_sample.model.Canvas.Layer",
    "closure_sample.model.Shape",
    "closure_sample.model.Color",
    "closure_sample.model.Point",
    "closure_sample.errors.ShapeError",
    "builtins.Exception",
    "builtins.object",
    "builtins.int",
  } <= types
  assert "closure_sample.model.Secret" not in types
  assert "closure_sample.model.Square" not in types
  assert "builtins.NoneType" not in types


def test_configured_primitives_are_excluded(sample_package):
  provider = StaticIntrospector(search_paths=[sample_package], primitives=["closure_sample.model.Point"])
  shape = provider.resolve_by_name("closure_sample.model.Shape")

  engine = ClosureEngine([shape], provider)

  assert "closure_sample.model.Point" not in refs(engine.classes_and_interfaces())
