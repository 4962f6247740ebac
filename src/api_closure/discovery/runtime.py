"""
Runtime Introspection Provider.

:class:`RuntimeIntrospector` answers the engine's questions by importing
modules and inspecting live class objects with :mod:`inspect` and
:mod:`typing`. It is the default provider of the CLI.

Mapping of the Python object model onto the closure vocabulary:

- **Constructor**: the call signature of the class (``inspect.signature(cls)``),
  declared by the class itself.
- **Methods**: routines, ``staticmethod`` and ``classmethod`` objects found in
  class namespaces (``__init__``/``__new__`` excluded). Exported scans walk the
  MRO and the first owner of a name wins.
- **Fields**: properties, annotated attributes and plain non-dunder class
  attributes.
- **Raised types**: exception names listed in the raises sections of
  docstrings (parsed with griffe), resolved in the defining module.
- **Supertype / contracts**: first direct base / remaining direct bases.
"""

import builtins
import functools
import importlib
import inspect
import logging
import types
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from api_closure.core.descriptors import MemberDescriptor, TypeDescriptor
from api_closure.core.errors import TypeNotFoundError
from api_closure.core.provider import DescriptorShapeMixin, visibility_of_name
from api_closure.discovery.annotations import (
  PRIMITIVE_CLASSES,
  AnnotationFlattener,
  module_globals,
  qualified_name_of,
  raised_names,
)
from api_closure.enums import MemberKind, Visibility

logger = logging.getLogger(__name__)

_CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})
_MISSING = object()
_SLOT_DESCRIPTORS = (types.MemberDescriptorType, types.GetSetDescriptorType)


class RuntimeIntrospector(DescriptorShapeMixin):
  """
  Introspection provider backed by live Python objects.

  Attributes:
      primitives (frozenset): Extra qualified names treated as primitive.
      docstring_style (str): griffe parser used to read raises sections.
  """

  def __init__(self, primitives: Iterable[str] = (), docstring_style: str = "google"):
    """
    Args:
        primitives: Qualified names (e.g. ``'builtins.int'``) to exclude from
            closures in addition to ``None``, ``NotImplemented`` and ``...``.
        docstring_style: ``'google'``, ``'numpy'`` or ``'sphinx'``.
    """
    self.primitives = frozenset(primitives)
    self.docstring_style = docstring_style
    self._names: Dict[int, str] = {}
    self._classes: Dict[str, type] = {}
    self._flattener = AnnotationFlattener(self.describe)

  # --- Resolution ---

  def describe(self, cls: type) -> TypeDescriptor:
    """
    Builds the descriptor of a live class and remembers the class.

    Args:
        cls: The class object.

    Returns:
        TypeDescriptor: Its descriptor.
    """
    name = self._name_of(cls)
    return TypeDescriptor(
      qualified_name=name,
      namespace=getattr(cls, "__module__", None) or "builtins",
      primitive=cls in PRIMITIVE_CLASSES or name in self.primitives,
    )

  def _name_of(self, cls: type) -> str:
    """
    Names a class, keeping distinct classes that share a qualname apart.

    Classes built by factory functions or redefined by a reload have the same
    ``module.qualname``; the second and later ones are numbered ``#2``, ``#3``...
    """
    name = self._names.get(id(cls))
    if name is not None:
      return name
    base = name = qualified_name_of(cls)
    index = 2
    while self._classes.get(name, cls) is not cls:
      name = f"{base}#{index}"
      index += 1
    if name != base:
      logger.debug(f"Class {cls!r} shares the name '{base}' with another class, describing it as '{name}'")
    self._classes[name] = cls
    self._names[id(cls)] = name
    return name

  def resolve_by_name(self, qualified_name: str) -> TypeDescriptor:
    """
    Imports and describes a class.

    Accepted spellings: ``'pkg.mod.Class'``, ``'pkg.mod:Outer.Inner'`` and
    bare builtin names such as ``'str'``.

    Args:
        qualified_name: The name to resolve.

    Returns:
        TypeDescriptor: The class descriptor.

    Raises:
        TypeNotFoundError: If nothing importable matches, or the match is not a class.
    """
    name = (qualified_name or "").strip()
    if not name:
      raise TypeNotFoundError(qualified_name or "", "empty name")

    found = self._lookup(name)
    if not inspect.isclass(found):
      raise TypeNotFoundError(name, f"resolves to {type(found).__name__}, not a class")
    return self.describe(found)

  def class_of(self, type_: TypeDescriptor) -> type:
    """
    Returns the live class behind a descriptor.

    Raises:
        TypeNotFoundError: If the descriptor names no importable class.
    """
    cls = self._classes.get(type_.qualified_name)
    if cls is None:
      cls = self._lookup(type_.qualified_name)
      if not inspect.isclass(cls):
        raise TypeNotFoundError(type_.qualified_name, "not a class")
      self._classes[type_.qualified_name] = cls
      self._names.setdefault(id(cls), type_.qualified_name)
    return cls

  def _lookup(self, name: str) -> Any:
    if name in self._classes:
      return self._classes[name]

    if ":" in name:
      module_name, _, attr_path = name.partition(":")
      try:
        module = importlib.import_module(module_name)
      except ImportError as e:
        raise TypeNotFoundError(name, str(e)) from e
      return self._walk(module, attr_path.split("."), name)

    parts = name.split(".")
    if len(parts) == 1:
      if hasattr(builtins, name):
        return getattr(builtins, name)
      raise TypeNotFoundError(name)

    # Longest importable module prefix first: 'a.b.C.D' tries 'a.b.C', then 'a.b', then 'a'.
    for split in range(len(parts) - 1, 0, -1):
      module_name = ".".join(parts[:split])
      try:
        module = importlib.import_module(module_name)
      except ImportError:
        continue
      try:
        return self._walk(module, parts[split:], name)
      except TypeNotFoundError:
        continue
    raise TypeNotFoundError(name)

  @staticmethod
  def _walk(root: Any, attrs: Sequence[str], name: str) -> Any:
    current = root
    for attr in attrs:
      try:
        current = getattr(current, attr)
      except AttributeError as e:
        raise TypeNotFoundError(name, str(e)) from e
    return current

  # --- Constructors ---

  def exported_constructors(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [self._constructor(self.class_of(type_), type_)]

  def declared_constructors(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [self._constructor(self.class_of(type_), type_)]

  def _constructor(self, cls: type, declaring: TypeDescriptor) -> MemberDescriptor:
    init = getattr(cls, "__init__", None)
    params, _, exceptions, signature = self._callable_surface(cls, init, owner=cls, drop_first=False)
    return MemberDescriptor(
      declaring_type=declaring,
      name="__init__",
      kind=MemberKind.CONSTRUCTOR,
      visibility=Visibility.EXPORTED,
      signature=signature,
      parameter_types=tuple(params),
      exception_types=tuple(exceptions),
    )

  # --- Methods ---

  def exported_methods(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [m for m in self._methods(type_, inherited=True) if m.visibility == Visibility.EXPORTED]

  def declared_methods(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return list(self._methods(type_, inherited=False))

  def _methods(self, type_: TypeDescriptor, inherited: bool) -> Iterator[MemberDescriptor]:
    cls = self.class_of(type_)
    for owner, name, raw in self._scan(cls, inherited):
      if name in _CONSTRUCTOR_NAMES or raw is _MISSING:
        continue
      func, is_static = _unwrap_routine(raw)
      if func is None:
        continue

      params, returns, exceptions, signature = self._callable_surface(func, func, owner=owner, drop_first=not is_static)
      yield MemberDescriptor(
        declaring_type=self.describe(owner),
        name=name,
        kind=MemberKind.METHOD,
        visibility=visibility_of_name(name, owner.__name__),
        signature=signature,
        parameter_types=tuple(params),
        exception_types=tuple(exceptions),
        return_types=tuple(returns),
      )

  def _callable_surface(
    self, target: Any, doc_source: Any, owner: type, drop_first: bool
  ) -> Tuple[List[TypeDescriptor], List[TypeDescriptor], List[TypeDescriptor], str]:
    """
    Collects parameter, return and raised types plus the signature text of a callable.

    Builtins without an introspectable signature get the signature ``'(...)'``
    and no parameter types.
    """
    globalns = module_globals(owner)
    localns = vars(owner)
    params: List[TypeDescriptor] = []
    returns: List[TypeDescriptor] = []
    try:
      sig = _signature(target)
    except (ValueError, TypeError):
      signature = "(...)"
    else:
      parameters = list(sig.parameters.values())
      if drop_first and parameters and parameters[0].kind in _POSITIONAL and parameters[0].annotation is _EMPTY:
        parameters = parameters[1:]
      for param in parameters:
        params.extend(self._flattener.flatten(param.annotation, globalns, localns, owner))
      returns = self._flattener.flatten(sig.return_annotation, globalns, localns, owner)
      signature = str(sig.replace(parameters=parameters))

    exceptions = self._raised_types(doc_source, globalns)
    return _unique(params), returns, exceptions, signature

  def _raised_types(self, func: Any, globalns: Dict[str, Any]) -> List[TypeDescriptor]:
    if func is None or func is object.__init__:
      return []
    result: List[TypeDescriptor] = []
    for exc_name in raised_names(inspect.getdoc(func), self.docstring_style):
      exc = self._resolve_exception(exc_name, globalns)
      if exc is None:
        logger.warning(f"Could not resolve raised type '{exc_name}' of {getattr(func, '__qualname__', func)!r}")
        continue
      result.append(self.describe(exc))
    return _unique(result)

  def _resolve_exception(self, exc_name: str, globalns: Dict[str, Any]) -> Optional[type]:
    head, *rest = exc_name.split(".")
    candidate = globalns.get(head, getattr(builtins, head, None))
    for attr in rest:
      candidate = getattr(candidate, attr, None)
    if inspect.isclass(candidate):
      return candidate
    try:
      found = self._lookup(exc_name)
    except TypeNotFoundError:
      return None
    return found if inspect.isclass(found) else None

  # --- Fields ---

  def exported_fields(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [f for f in self._fields(type_, inherited=True) if f.visibility == Visibility.EXPORTED]

  def declared_fields(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return list(self._fields(type_, inherited=False))

  def _fields(self, type_: TypeDescriptor, inherited: bool) -> Iterator[MemberDescriptor]:
    cls = self.class_of(type_)
    for owner, name, raw in self._scan(cls, inherited):
      if _is_dunder(name) or name in _CONSTRUCTOR_NAMES:
        continue
      annotation = _own_annotations(owner).get(name, _EMPTY)
      globalns = module_globals(owner)

      if isinstance(raw, (property, functools.cached_property)):
        getter = raw.fget if isinstance(raw, property) else raw.func
        try:
          annotation = _signature(getter).return_annotation
        except (ValueError, TypeError):
          annotation = _EMPTY
        value_types = self._flattener.flatten(annotation, module_globals(getter), vars(owner), owner)
      elif raw is not _MISSING and (inspect.isclass(raw) or _unwrap_routine(raw)[0] is not None):
        continue
      elif raw is _MISSING or annotation is not _EMPTY:
        value_types = self._flattener.flatten(annotation, globalns, vars(owner), owner)
      elif isinstance(raw, _SLOT_DESCRIPTORS):
        value_types = []
      else:
        value_types = [self.describe(type(raw))]

      yield MemberDescriptor(
        declaring_type=self.describe(owner),
        name=name,
        kind=MemberKind.FIELD,
        visibility=visibility_of_name(name, owner.__name__),
        signature=_annotation_text(annotation),
        value_types=tuple(_unique(value_types)),
      )

  # --- Type relationships ---

  def declared_nested_types(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    cls = self.class_of(type_)
    nested = []
    for name, raw in vars(cls).items():
      if not inspect.isclass(raw) or raw.__qualname__ != f"{cls.__qualname__}.{name}":
        continue
      if visibility_of_name(name, cls.__name__) == Visibility.EXPORTED:
        nested.append(self.describe(raw))
    return nested

  def supertype_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    bases = self.class_of(type_).__bases__
    return self.describe(bases[0]) if bases else None

  def implemented_contracts_of(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    return [self.describe(base) for base in self.class_of(type_).__bases__[1:]]

  def enclosing_type_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    cls = self.class_of(type_)
    parts = cls.__qualname__.split(".")
    if len(parts) < 2 or "<locals>" in parts:
      return None
    module = importlib.import_module(cls.__module__)
    try:
      enclosing = self._walk(module, parts[:-1], type_.qualified_name)
    except TypeNotFoundError:
      return None
    return self.describe(enclosing) if inspect.isclass(enclosing) else None

  # --- Helpers ---

  @staticmethod
  def _scan(cls: type, inherited: bool) -> Iterator[Tuple[type, str, Any]]:
    """
    Yields ``(owner, name, raw value)`` for every name in the class namespaces.

    Names that are only annotated yield the ``_MISSING`` marker as value.
    With ``inherited`` the whole MRO is scanned; the first owner of a name wins.
    """
    owners = inspect.getmro(cls) if inherited else (cls,)
    seen = set()
    for owner in owners:
      namespace = vars(owner)
      names = list(namespace) + [n for n in _own_annotations(owner) if n not in namespace]
      for name in names:
        if name in seen:
          continue
        seen.add(name)
        yield owner, name, namespace.get(name, _MISSING)


_EMPTY = inspect.Parameter.empty
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _signature(obj: Any) -> inspect.Signature:
  try:
    return inspect.signature(obj, eval_str=True)
  except (NameError, SyntaxError, AttributeError):
    # Unresolvable string annotations: keep them as strings for per-annotation resolution.
    return inspect.signature(obj)


def _own_annotations(owner: type) -> Dict[str, Any]:
  try:
    return dict(inspect.get_annotations(owner, eval_str=True))
  except Exception:
    try:
      return dict(inspect.get_annotations(owner))
    except Exception:
      return {}


def _unwrap_routine(raw: Any) -> Tuple[Optional[Any], bool]:
  """Returns ``(function, is_static)`` for routine-like class attributes."""
  if isinstance(raw, staticmethod):
    return raw.__func__, True
  if isinstance(raw, classmethod):
    return raw.__func__, False
  if inspect.isroutine(raw):
    return raw, False
  return None, False


def _is_dunder(name: str) -> bool:
  return name.startswith("__") and name.endswith("__") and len(name) > 4


def _annotation_text(annotation: Any) -> str:
  if annotation is _EMPTY:
    return ""
  return inspect.formatannotation(annotation)


def _unique(items: List[TypeDescriptor]) -> List[TypeDescriptor]:
  return list(dict.fromkeys(items))
