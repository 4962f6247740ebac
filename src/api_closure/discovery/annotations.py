"""
Annotation Flattening for Live Objects.

Python annotations are richer than the single "type" slot of a classic
signature: a parameter may be ``Optional[Foo]``, ``dict[str, Bar]`` or
``list[list[Baz]]``. This module converts an annotation into the flat list of
:class:`TypeDescriptor` it mentions:

- unions (``A | B``, ``Optional[A]``) contribute each member,
- ``list[X]`` and ``tuple[X, ...]`` become array descriptors of ``X``,
- other generics contribute their origin class and their arguments,
- ``Annotated``/``ClassVar``/``Final`` unwrap to the wrapped annotation,
- ``Literal`` values contribute the types of the literal values,
- an unbounded ``TypeVar`` erases to ``object``,
- string and ``ForwardRef`` annotations are evaluated in the owner's module.

It also extracts the exception names declared in a docstring's raises
section (parsed with griffe), which stand in for declared thrown types.
"""

import collections.abc
import inspect
import logging
import sys
import types
import typing
from typing import Any, Callable, Dict, List, Mapping, Optional

import griffe

from api_closure.core.descriptors import TypeDescriptor

logger = logging.getLogger(__name__)

ANY_TYPE = TypeDescriptor(qualified_name="typing.Any", namespace="typing", primitive=True)

#: Classes treated as primitive: they carry no API surface worth following.
PRIMITIVE_CLASSES = (type(None), type(NotImplemented), type(Ellipsis))

#: Marker for "no annotation".
_EMPTY = inspect.Parameter.empty

_UNION_TYPE = getattr(types, "UnionType", None)
_WRAPPER_FORMS = tuple(
  form
  for form in (
    typing.Annotated,
    typing.ClassVar,
    typing.Final,
    getattr(typing, "Required", None),
    getattr(typing, "NotRequired", None),
    getattr(typing, "ReadOnly", None),
  )
  if form is not None
)
_BOTTOM_FORMS = tuple(form for form in (typing.NoReturn, getattr(typing, "Never", None)) if form is not None)


def qualified_name_of(cls: type) -> str:
  """
  Returns ``module.QualName`` for a class.

  Args:
      cls: Any class object.

  Returns:
      str: The qualified name, e.g. ``'collections.OrderedDict'``.
  """
  module = getattr(cls, "__module__", None) or "builtins"
  return f"{module}.{cls.__qualname__}"


def _dedupe(items: List[TypeDescriptor]) -> List[TypeDescriptor]:
  return list(dict.fromkeys(items))


class AnnotationFlattener:
  """
  Converts live annotations into descriptors through a describe callback.

  Attributes:
      describe (Callable[[type], TypeDescriptor]): Builds (and registers) the
          descriptor of a class.
  """

  def __init__(self, describe: Callable[[type], TypeDescriptor]):
    self.describe = describe

  def flatten(
    self,
    annotation: Any,
    globalns: Optional[Mapping[str, Any]] = None,
    localns: Optional[Mapping[str, Any]] = None,
    owner: Optional[type] = None,
  ) -> List[TypeDescriptor]:
    """
    Lists the types mentioned by ``annotation``.

    Args:
        annotation: A runtime annotation (class, typing construct or string).
        globalns: Module namespace used to evaluate string annotations.
        localns: Class namespace used to evaluate string annotations.
        owner: Class substituted for ``typing.Self``.

    Returns:
        List[TypeDescriptor]: Mentioned types, in order, without duplicates.
    """
    if annotation is _EMPTY:
      return []
    if annotation is None or annotation is type(None):
      return [self.describe(type(None))]
    if annotation is typing.Any:
      return [ANY_TYPE]
    if isinstance(annotation, str):
      return self._flatten_forward(annotation, globalns, localns, owner)
    if isinstance(annotation, typing.ForwardRef):
      return self._flatten_forward(annotation.__forward_arg__, globalns, localns, owner)
    if isinstance(annotation, typing.TypeVar):
      if annotation.__bound__ is not None:
        return self.flatten(annotation.__bound__, globalns, localns, owner)
      if annotation.__constraints__:
        return self._flatten_all(annotation.__constraints__, globalns, localns, owner)
      return [self.describe(object)]
    if annotation in _BOTTOM_FORMS:
      return []
    if annotation is getattr(typing, "Self", None):
      return [self.describe(owner)] if owner is not None else []
    if annotation is getattr(typing, "LiteralString", None):
      return [self.describe(str)]

    origin = typing.get_origin(annotation)
    if origin is not None:
      return self._flatten_generic(origin, typing.get_args(annotation), globalns, localns, owner)

    if isinstance(annotation, type):
      return [self.describe(annotation)]

    logger.debug(f"Ignoring unsupported annotation {annotation!r}")
    return []

  def _flatten_all(self, annotations, globalns, localns, owner) -> List[TypeDescriptor]:
    result: List[TypeDescriptor] = []
    for item in annotations:
      if item is Ellipsis:
        continue
      if isinstance(item, (list, tuple)):
        # Callable parameter lists: Callable[[A, B], R]
        result.extend(self._flatten_all(item, globalns, localns, owner))
        continue
      result.extend(self.flatten(item, globalns, localns, owner))
    return _dedupe(result)

  def _flatten_generic(self, origin, args, globalns, localns, owner) -> List[TypeDescriptor]:
    if origin is typing.Union or (_UNION_TYPE is not None and origin is _UNION_TYPE):
      return self._flatten_all(args, globalns, localns, owner)

    if origin in _WRAPPER_FORMS:
      return self.flatten(args[0], globalns, localns, owner) if args else []

    if origin is typing.Literal:
      return _dedupe([self.describe(type(value)) for value in args])

    if origin is list and len(args) == 1:
      return [TypeDescriptor.array_of(elem) for elem in self.flatten(args[0], globalns, localns, owner)]

    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
      return [TypeDescriptor.array_of(elem) for elem in self.flatten(args[0], globalns, localns, owner)]

    result: List[TypeDescriptor] = []
    if isinstance(origin, type):
      result.append(self.describe(origin))
    elif origin is collections.abc.Callable:
      result.append(self.describe(collections.abc.Callable))
    result.extend(self._flatten_all(args, globalns, localns, owner))
    return _dedupe(result)

  def _flatten_forward(self, text: str, globalns, localns, owner) -> List[TypeDescriptor]:
    namespace: Dict[str, Any] = dict(globalns or {})
    if owner is not None:
      namespace.setdefault(owner.__name__, owner)
    # get_type_hints evaluates the text as a typing.ForwardRef
    holder = types.SimpleNamespace(__annotations__={"ref": text})
    try:
      value = typing.get_type_hints(holder, namespace, dict(localns or {}), include_extras=True)["ref"]
    except Exception as e:
      logger.warning(f"Could not resolve forward reference '{text}': {e}")
      return []
    return self.flatten(value, globalns, localns, owner)


def module_globals(obj: Any) -> Dict[str, Any]:
  """
  Returns the global namespace of the module that defined ``obj``.

  Args:
      obj: A class or function.

  Returns:
      Dict[str, Any]: The module namespace (empty if unknown).
  """
  module = sys.modules.get(getattr(obj, "__module__", "") or "")
  return vars(module) if module is not None else {}


def raised_names(doc: Optional[str], style: str = "google") -> List[str]:
  """
  Extracts exception names from a docstring's raises sections.

  Args:
      doc: A cleaned docstring (``inspect.getdoc``) or None.
      style: griffe docstring parser, ``'google'``, ``'numpy'`` or ``'sphinx'``.

  Returns:
      List[str]: Exception names in order of appearance, without duplicates.
  """
  if not doc:
    return []

  names: List[str] = []
  for section in griffe.Docstring(doc).parse(style):
    if section.kind is not griffe.DocstringSectionKind.raises:
      continue
    for raised in section.value:
      if raised.annotation:
        names.append(str(raised.annotation))
  return list(dict.fromkeys(names))
