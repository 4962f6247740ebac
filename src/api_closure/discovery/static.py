"""
Static Introspection Provider.

:class:`StaticIntrospector` answers the engine's questions from source code
parsed with griffe. Packages are loaded lazily, one top-level package at a
time, the first time one of their names is needed; nothing is imported unless
griffe has to fall back to inspection for compiled modules.

Annotations are griffe expressions. Names are resolved through their
``canonical_path`` (following imports), bare names are builtins, and the
``typing`` aliases (``List``, ``Dict``, ``Callable``...) map onto the classes
they stand for, so the static and runtime providers describe a type with the
same qualified names.

References that cannot be found in any loadable source become *opaque*
types: they are reported in the closure (with a warning) but have no surface.
With ``strict=True`` they raise :class:`TypeNotFoundError` instead.
"""

import ast
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Union

import griffe

from api_closure.core.descriptors import MemberDescriptor, TypeDescriptor
from api_closure.core.errors import TypeNotFoundError
from api_closure.core.provider import DescriptorShapeMixin, visibility_of_name
from api_closure.discovery.annotations import ANY_TYPE
from api_closure.discovery.mro import linearize
from api_closure.enums import MemberKind, Visibility
from api_closure.utils.console import escape, log_warning

logger = logging.getLogger(__name__)

# Suppress Griffe warnings, unresolved imports are expected outside the loaded packages
logging.getLogger("griffe").setLevel(logging.CRITICAL)

GriffeAnnotation = Union[str, griffe.Expr, None]

_CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})
_POSITIONAL = (griffe.ParameterKind.positional_only, griffe.ParameterKind.positional_or_keyword)


def _typing(*names: str) -> frozenset:
  return frozenset(f"{module}.{name}" for module in ("typing", "typing_extensions") for name in names)


_UNION_FORMS = _typing("Union", "Optional")
_WRAPPER_FORMS = _typing("Annotated", "ClassVar", "Final", "Required", "NotRequired", "ReadOnly")
_LITERAL_FORMS = _typing("Literal")
_ANY_FORMS = _typing("Any")
_BOTTOM_FORMS = _typing("NoReturn", "Never")
_SELF_FORMS = _typing("Self")
_TYPEVAR_FACTORIES = _typing("TypeVar")

#: ``typing`` aliases and the classes they are generic versions of.
_TYPING_ALIASES = {
  "List": "builtins.list",
  "Dict": "builtins.dict",
  "Set": "builtins.set",
  "FrozenSet": "builtins.frozenset",
  "Tuple": "builtins.tuple",
  "Type": "builtins.type",
  "Text": "builtins.str",
  "LiteralString": "builtins.str",
  "DefaultDict": "collections.defaultdict",
  "OrderedDict": "collections.OrderedDict",
  "Counter": "collections.Counter",
  "Deque": "collections.deque",
  "ChainMap": "collections.ChainMap",
  "Pattern": "re.Pattern",
  "Match": "re.Match",
  "AbstractSet": "collections.abc.Set",
  "ContextManager": "contextlib.AbstractContextManager",
  "AsyncContextManager": "contextlib.AbstractAsyncContextManager",
}
for _abc_name in (
  "Awaitable",
  "AsyncGenerator",
  "AsyncIterable",
  "AsyncIterator",
  "Callable",
  "Collection",
  "Container",
  "Coroutine",
  "Generator",
  "Hashable",
  "ItemsView",
  "Iterable",
  "Iterator",
  "KeysView",
  "Mapping",
  "MappingView",
  "MutableMapping",
  "MutableSequence",
  "MutableSet",
  "Reversible",
  "Sequence",
  "Sized",
  "ValuesView",
):
  _TYPING_ALIASES[_abc_name] = f"collections.abc.{_abc_name}"

#: Canonical spellings of the primitive classes.
_PRIMITIVE_ALIASES = {
  "None": "builtins.NoneType",
  "builtins.None": "builtins.NoneType",
  "types.NoneType": "builtins.NoneType",
  "types.NotImplementedType": "builtins.NotImplementedType",
  "types.EllipsisType": "builtins.ellipsis",
}
_PRIMITIVE_PATHS = frozenset({"builtins.NoneType", "builtins.NotImplementedType", "builtins.ellipsis"})

#: The implicit base of every class.
_ROOT_PATH = "builtins.object"


def canonical_type_path(path: str) -> str:
  """
  Normalizes a dotted name as found in source to the name of the runtime class.

  Args:
      path: A canonical path from griffe (``'int'``, ``'typing.List'``...).

  Returns:
      str: The normalized path (``'builtins.int'``, ``'builtins.list'``...).
  """
  if path in _PRIMITIVE_ALIASES:
    return _PRIMITIVE_ALIASES[path]
  if "." not in path:
    return f"builtins.{path}"
  module, _, name = path.rpartition(".")
  if module in ("typing", "typing_extensions") and name in _TYPING_ALIASES:
    return _TYPING_ALIASES[name]
  return path


class StaticIntrospector(DescriptorShapeMixin):
  """
  Introspection provider backed by griffe's static analysis.

  Attributes:
      primitives (frozenset): Extra qualified names treated as primitive.
      docstring_style (str): griffe parser used to read ``Raises:`` sections.
      strict (bool): Whether unresolvable references raise instead of becoming opaque.
  """

  def __init__(
    self,
    search_paths: Iterable[Union[str, Path]] = (),
    primitives: Iterable[str] = (),
    docstring_style: str = "google",
    strict: bool = False,
    allow_inspection: bool = True,
  ):
    """
    Args:
        search_paths: Directories searched before ``sys.path``.
        primitives: Qualified names to exclude from closures.
        docstring_style: ``'google'``, ``'numpy'`` or ``'sphinx'``.
        strict: Raise :class:`TypeNotFoundError` for unresolvable references.
        allow_inspection: Let griffe import compiled modules it has no source for.
    """
    self.primitives = frozenset(primitives)
    self.docstring_style = docstring_style
    self.strict = strict
    paths = [str(p) for p in search_paths] + [p for p in sys.path if p]
    self._loader = griffe.GriffeLoader(
      search_paths=paths,
      docstring_parser=docstring_style,
      allow_inspection=allow_inspection,
    )
    self._loaded: Dict[str, bool] = {}
    self._classes: Dict[str, griffe.Class] = {}
    self._opaque: Set[str] = set()
    self._expanding: Set[str] = set()

  # --- Loading ---

  def _load(self, package: str) -> bool:
    if package not in self._loaded:
      try:
        self._loader.load(package)
        self._loaded[package] = True
        logger.debug(f"Loaded package '{package}'")
      except Exception as e:
        # griffe raises a wide range of errors for unparsable or compiled packages
        logger.debug(f"Could not load package '{package}': {e}")
        self._loaded[package] = False
    return self._loaded[package]

  def _find(self, path: str) -> Optional[griffe.Object]:
    """
    Looks an object up by dotted path, following import aliases.

    Returns:
        Optional[griffe.Object]: The object, or None if no loadable source defines it.
    """
    seen = set()
    while path not in seen:
      seen.add(path)
      if not self._load(path.split(".", 1)[0]):
        return None
      try:
        found = self._loader.modules_collection.get_member(path)
      except (KeyError, ValueError, griffe.AliasResolutionError, griffe.CyclicAliasError):
        return None
      if not found.is_alias:
        return found
      path = found.target_path
    return None

  # --- Descriptors ---

  def _describe_class(self, cls: griffe.Class) -> TypeDescriptor:
    path = cls.path
    self._classes.setdefault(path, cls)
    return TypeDescriptor(
      qualified_name=path,
      namespace=cls.module.path,
      primitive=path in self.primitives,
    )

  def _primitive(self, path: str) -> TypeDescriptor:
    return TypeDescriptor(qualified_name=path, namespace=path.rpartition(".")[0], primitive=True)

  def _opaque_type(self, path: str, reason: str) -> TypeDescriptor:
    if self.strict:
      raise TypeNotFoundError(path, reason)
    if path not in self._opaque:
      self._opaque.add(path)
      log_warning(f"Treating '{escape(path)}' as opaque: {escape(reason)}")
    return TypeDescriptor(
      qualified_name=path,
      namespace=path.rpartition(".")[0] or "builtins",
      primitive=path in self.primitives,
    )

  def _root(self) -> TypeDescriptor:
    """
    Describes ``builtins.object``.

    The root is a known class even when griffe's inspection of ``builtins``
    does not list it; it then has no bases and no surface, but is never opaque.
    """
    found = self._find(_ROOT_PATH)
    if found is not None and found.is_class:
      return self._describe_class(found)
    return TypeDescriptor(qualified_name=_ROOT_PATH, namespace="builtins", primitive=_ROOT_PATH in self.primitives)

  def _class_of(self, type_: TypeDescriptor) -> Optional[griffe.Class]:
    """
    Returns the griffe class behind a descriptor, or None for opaque types.

    Raises:
        TypeNotFoundError: If the descriptor names nothing loadable.
    """
    path = type_.qualified_name
    if path in self._opaque:
      return None
    cls = self._classes.get(path)
    if cls is None:
      found = self._find(path)
      if found is None and path == _ROOT_PATH:
        return None
      if found is None or not found.is_class:
        raise TypeNotFoundError(path, "not a class in the loaded sources")
      cls = self._classes[path] = found
    return cls

  def resolve_by_name(self, qualified_name: str) -> TypeDescriptor:
    """
    Finds a class in source.

    Accepted spellings: ``'pkg.mod.Class'``, ``'pkg.mod:Outer.Inner'`` and
    bare builtin names such as ``'str'``.

    Raises:
        TypeNotFoundError: If no loadable source defines a class by that name.
    """
    name = (qualified_name or "").strip()
    if not name:
      raise TypeNotFoundError(qualified_name or "", "empty name")

    path = canonical_type_path(name.replace(":", "."))
    if path in _PRIMITIVE_PATHS or path in self.primitives:
      return self._primitive(path)
    if path == _ROOT_PATH:
      return self._root()
    found = self._find(path)
    if found is None:
      raise TypeNotFoundError(name, "not found in the loaded sources")
    if not found.is_class:
      raise TypeNotFoundError(name, f"resolves to a {found.kind.value}, not a class")
    return self._describe_class(found)

  # --- Annotations ---

  def _flatten(self, annotation: GriffeAnnotation, owner: Optional[griffe.Class]) -> List[TypeDescriptor]:
    """
    Lists the types mentioned by a griffe annotation.

    Args:
        annotation: A griffe expression, a literal string or None.
        owner: Class substituted for ``typing.Self``.

    Returns:
        List[TypeDescriptor]: Mentioned types, in order, without duplicates.
    """
    if annotation is None:
      return []
    if isinstance(annotation, str):
      return self._flatten_text(annotation)
    if isinstance(annotation, griffe.ExprConstant):
      return self._flatten_text(annotation.value)
    if isinstance(annotation, (griffe.ExprName, griffe.ExprAttribute)):
      return self._flatten_path(annotation.canonical_path, owner)
    if isinstance(annotation, griffe.ExprSubscript):
      return self._flatten_subscript(annotation, owner)
    if isinstance(annotation, griffe.ExprBinOp) and annotation.operator == "|":
      return _unique(self._flatten(annotation.left, owner) + self._flatten(annotation.right, owner))
    if isinstance(annotation, (griffe.ExprTuple, griffe.ExprList)):
      return self._flatten_all(annotation.elements, owner)

    logger.debug(f"Ignoring unsupported annotation '{annotation}'")
    return []

  def _flatten_all(self, annotations: Iterable[GriffeAnnotation], owner) -> List[TypeDescriptor]:
    result: List[TypeDescriptor] = []
    for annotation in annotations:
      result.extend(self._flatten(annotation, owner))
    return _unique(result)

  def _flatten_text(self, text: str) -> List[TypeDescriptor]:
    text = text.strip()
    if text == "None":
      return [self._primitive("builtins.NoneType")]
    # Ellipses and string literals left unparsed by griffe carry no type
    return []

  def _flatten_path(self, path: str, owner: Optional[griffe.Class]) -> List[TypeDescriptor]:
    if "[" in path:
      # PEP 695 type parameter ('pkg.Box[T]'), erased like an unbounded TypeVar
      return self._flatten_path("builtins.object", owner)

    path = canonical_type_path(path)
    if path in _ANY_FORMS:
      return [ANY_TYPE]
    if path in _BOTTOM_FORMS:
      return []
    if path in _SELF_FORMS:
      return [self._describe_class(owner)] if owner is not None else []
    if path in _PRIMITIVE_PATHS:
      return [self._primitive(path)]
    if path == _ROOT_PATH:
      return [self._root()]

    found = self._find(path)
    if found is None:
      return [self._opaque_type(path, "not found in any loadable source")]
    if found.is_class:
      return [self._describe_class(found)]
    if found.is_attribute or found.is_type_alias:
      return self._flatten_alias(found, owner)
    return []

  def _flatten_alias(self, obj: griffe.Object, owner) -> List[TypeDescriptor]:
    """Expands module-level type aliases and TypeVars to the types they stand for."""
    if obj.path in self._expanding:
      return []
    value = obj.value
    self._expanding.add(obj.path)
    try:
      if isinstance(value, griffe.ExprCall) and value.function.canonical_path in _TYPEVAR_FACTORIES:
        return self._flatten_typevar(value, owner)
      if isinstance(value, griffe.Expr):
        return self._flatten(value, owner)
      return []
    finally:
      self._expanding.discard(obj.path)

  def _flatten_typevar(self, call: griffe.ExprCall, owner) -> List[TypeDescriptor]:
    bound = None
    constraints = []
    for argument in call.arguments[1:]:
      if isinstance(argument, griffe.ExprKeyword):
        if argument.name == "bound":
          bound = argument.value
      else:
        constraints.append(argument)
    if bound is not None:
      if isinstance(bound, str):
        # String bounds are not parsed as annotations
        bound = _parse_annotation(bound, owner)
      return self._flatten(bound, owner)
    if constraints:
      return self._flatten_all(constraints, owner)
    return self._flatten_path("builtins.object", owner)

  def _flatten_subscript(self, expr: griffe.ExprSubscript, owner) -> List[TypeDescriptor]:
    left = expr.left
    path = canonical_type_path(left.canonical_path if isinstance(left, griffe.Expr) else str(left))
    args = list(expr.slice.elements) if isinstance(expr.slice, griffe.ExprTuple) else [expr.slice]

    if path in _UNION_FORMS:
      return self._flatten_all(args, owner)
    if path in _WRAPPER_FORMS:
      return self._flatten(args[0], owner)
    if path in _LITERAL_FORMS:
      return _unique([t for t in (self._literal_type(arg) for arg in args) if t is not None])
    if path == "builtins.list" and len(args) == 1:
      return [TypeDescriptor.array_of(elem) for elem in self._flatten(args[0], owner)]
    if path == "builtins.tuple" and len(args) == 2 and str(args[1]) == "...":
      return [TypeDescriptor.array_of(elem) for elem in self._flatten(args[0], owner)]

    return _unique(self._flatten_path(path, owner) + self._flatten_all(args, owner))

  def _literal_type(self, value: GriffeAnnotation) -> Optional[TypeDescriptor]:
    try:
      literal = ast.literal_eval(str(value))
    except (ValueError, SyntaxError):
      pass
    else:
      return self._flatten_path(f"builtins.{type(literal).__name__}", None)[0]

    # Enum members: Literal[Color.RED] mentions Color
    if isinstance(value, griffe.ExprAttribute):
      enclosing = self._find(value.canonical_path.rpartition(".")[0])
      if enclosing is not None and enclosing.is_class:
        return self._describe_class(enclosing)
    return None

  def _value_types(self, value: GriffeAnnotation, owner) -> List[TypeDescriptor]:
    """Infers the class of an unannotated class attribute from its value expression."""
    if value is None:
      return []
    for expr_type, path in _DISPLAY_TYPES:
      if isinstance(value, expr_type):
        return self._flatten_path(path, owner)
    if isinstance(value, griffe.ExprCall):
      found = self._find(canonical_type_path(value.function.canonical_path))
      return [self._describe_class(found)] if found is not None and found.is_class else []
    if isinstance(value, (str, griffe.ExprConstant, griffe.ExprUnaryOp)):
      literal = self._literal_type(value.value if isinstance(value, griffe.ExprConstant) else value)
      return [literal] if literal is not None else []
    return []

  # --- Members ---

  def _mro(self, cls: griffe.Class) -> List[griffe.Class]:
    def bases_of(path: str) -> List[str]:
      # Opaque bases have no griffe class and end the chain
      if path not in self._classes:
        return []
      return [base.qualified_name for base in self._bases(self._classes[path])]

    return [self._classes[path] for path in linearize(cls.path, bases_of) if path in self._classes]

  def _declared(self, cls: Optional[griffe.Class]) -> Iterator[griffe.Object]:
    if cls is None:
      return
    for member in cls.members.values():
      if not member.is_alias:
        yield member

  def _member(self, cls: griffe.Class, member: griffe.Object) -> Optional[MemberDescriptor]:
    if member.is_function and member.name not in _CONSTRUCTOR_NAMES:
      return self._method(cls, member)
    if member.is_attribute and not _is_dunder(member.name):
      return self._field(cls, member)
    return None

  def _method(self, cls: griffe.Class, func: griffe.Function) -> MemberDescriptor:
    parameters = list(func.parameters)
    if "staticmethod" not in func.labels and parameters and parameters[0].kind in _POSITIONAL:
      if parameters[0].annotation is None:
        parameters = parameters[1:]
    return MemberDescriptor(
      declaring_type=self._describe_class(cls),
      name=func.name,
      kind=MemberKind.METHOD,
      visibility=visibility_of_name(func.name, cls.name),
      signature=_format_signature(parameters, func.returns),
      parameter_types=tuple(self._flatten_all((p.annotation for p in parameters), cls)),
      exception_types=tuple(self._raised_types(func, cls)),
      return_types=tuple(self._flatten(func.returns, cls)),
    )

  def _field(self, cls: griffe.Class, attribute: griffe.Attribute) -> MemberDescriptor:
    annotation = attribute.annotation
    if annotation is not None:
      value_types = self._flatten(annotation, cls)
    elif "property" in attribute.labels:
      value_types = []
    else:
      value_types = self._value_types(attribute.value, cls)
    return MemberDescriptor(
      declaring_type=self._describe_class(cls),
      name=attribute.name,
      kind=MemberKind.FIELD,
      visibility=visibility_of_name(attribute.name, cls.name),
      signature=str(annotation) if annotation is not None else "",
      value_types=tuple(_unique(value_types)),
    )

  def _constructor(self, cls: griffe.Class) -> MemberDescriptor:
    init = None
    for owner in self._mro(cls):
      candidate = owner.members.get("__init__")
      if candidate is not None and not candidate.is_alias and candidate.is_function:
        init = candidate
        break

    parameters = list(init.parameters) if init is not None else []
    if parameters and parameters[0].kind in _POSITIONAL:
      parameters = parameters[1:]
    return MemberDescriptor(
      declaring_type=self._describe_class(cls),
      name="__init__",
      kind=MemberKind.CONSTRUCTOR,
      visibility=Visibility.EXPORTED,
      signature=_format_signature(parameters),
      parameter_types=tuple(self._flatten_all((p.annotation for p in parameters), cls)),
      exception_types=tuple(self._raised_types(init, cls)),
    )

  def _raised_types(self, func: Optional[griffe.Function], owner: griffe.Class) -> List[TypeDescriptor]:
    if func is None or func.docstring is None:
      return []
    result: List[TypeDescriptor] = []
    for section in func.docstring.parse(self.docstring_style):
      if section.kind is not griffe.DocstringSectionKind.raises:
        continue
      for raised in section.value:
        annotation = raised.annotation
        if isinstance(annotation, str):
          annotation = _parse_annotation(annotation, func.parent)
        result.extend(self._flatten(annotation, owner))
    return _unique(result)

  def _scan(self, type_: TypeDescriptor, kind: MemberKind, inherited: bool) -> Iterator[MemberDescriptor]:
    cls = self._class_of(type_)
    if cls is None:
      return
    owners = self._mro(cls) if inherited else [cls]
    seen = set()
    for owner in owners:
      for member in self._declared(owner):
        if member.name in seen:
          continue
        seen.add(member.name)
        descriptor = self._member(owner, member)
        if descriptor is not None and descriptor.kind == kind:
          yield descriptor

  def exported_constructors(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    cls = self._class_of(type_)
    return [self._constructor(cls)] if cls is not None else []

  def declared_constructors(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return self.exported_constructors(type_)

  def exported_methods(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [m for m in self._scan(type_, MemberKind.METHOD, True) if m.visibility == Visibility.EXPORTED]

  def declared_methods(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return list(self._scan(type_, MemberKind.METHOD, False))

  def exported_fields(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [f for f in self._scan(type_, MemberKind.FIELD, True) if f.visibility == Visibility.EXPORTED]

  def declared_fields(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return list(self._scan(type_, MemberKind.FIELD, False))

  # --- Type relationships ---

  def _bases(self, cls: griffe.Class) -> List[TypeDescriptor]:
    bases: List[TypeDescriptor] = []
    for base in cls.bases:
      if isinstance(base, griffe.ExprSubscript):
        # Generic[T], list[int]: the base class is the subscripted one
        base = base.left
      path = canonical_type_path(base.canonical_path if isinstance(base, griffe.Expr) else str(base))
      if path == _ROOT_PATH:
        bases.append(self._root())
        continue
      found = self._find(path)
      if found is None:
        bases.append(self._opaque_type(path, f"unresolvable base of '{cls.path}'"))
      elif found.is_class:
        bases.append(self._describe_class(found))
    if not bases and cls.path != _ROOT_PATH:
      return [self._root()]
    return _unique(bases)

  def declared_nested_types(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    return [
      self._describe_class(member)
      for member in self._declared(self._class_of(type_))
      if member.is_class and visibility_of_name(member.name, type_.simple_name) == Visibility.EXPORTED
    ]

  def supertype_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    cls = self._class_of(type_)
    if cls is None:
      return None
    bases = self._bases(cls)
    return bases[0] if bases else None

  def implemented_contracts_of(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    cls = self._class_of(type_)
    return self._bases(cls)[1:] if cls is not None else []

  def enclosing_type_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    cls = self._class_of(type_)
    if cls is None or cls.parent is None or not cls.parent.is_class:
      return None
    return self._describe_class(cls.parent)


_DISPLAY_TYPES = (
  (griffe.ExprList, "builtins.list"),
  (griffe.ExprListComp, "builtins.list"),
  (griffe.ExprTuple, "builtins.tuple"),
  (griffe.ExprDict, "builtins.dict"),
  (griffe.ExprDictComp, "builtins.dict"),
  (griffe.ExprSet, "builtins.set"),
  (griffe.ExprSetComp, "builtins.set"),
  (griffe.ExprJoinedStr, "builtins.str"),
  (griffe.ExprLambda, "types.FunctionType"),
)


def _parse_annotation(text: str, scope: Optional[griffe.Object]) -> GriffeAnnotation:
  """Builds a griffe expression from annotation text, resolving names in ``scope``."""
  try:
    node = ast.parse(text, mode="eval").body
  except SyntaxError:
    return text
  if scope is None:
    return text
  return griffe.safe_get_annotation(node, parent=scope) or text


def _format_signature(parameters: Sequence[griffe.Parameter], returns: GriffeAnnotation = None) -> str:
  """Renders parameters the way ``inspect.Signature`` does."""
  parts = []
  star_seen = False
  for index, param in enumerate(parameters):
    if param.kind is griffe.ParameterKind.var_positional:
      text = f"*{param.name}"
      star_seen = True
    elif param.kind is griffe.ParameterKind.var_keyword:
      text = f"**{param.name}"
    else:
      if param.kind is griffe.ParameterKind.keyword_only and not star_seen:
        parts.append("*")
        star_seen = True
      text = param.name
    if param.annotation is not None:
      text += f": {param.annotation}"
    if param.default is not None:
      text += f" = {param.default}" if param.annotation is not None else f"={param.default}"
    parts.append(text)
    next_kind = parameters[index + 1].kind if index + 1 < len(parameters) else None
    if param.kind is griffe.ParameterKind.positional_only and next_kind is not griffe.ParameterKind.positional_only:
      parts.append("/")

  signature = f"({', '.join(parts)})"
  if returns is not None:
    signature += f" -> {returns}"
  return signature


def _is_dunder(name: str) -> bool:
  return name.startswith("__") and name.endswith("__") and len(name) > 4


def _unique(items: List[TypeDescriptor]) -> List[TypeDescriptor]:
  return list(dict.fromkeys(items))
