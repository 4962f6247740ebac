"""
Descriptors of Type-System Facts.

This module defines the immutable value objects exchanged between the
:class:`~api_closure.core.engine.ClosureEngine` and an introspection provider.

Classes:
    TypeDescriptor: Identity of a type (class, protocol, array form, primitive).
    MemberDescriptor: A constructor, method or field declared by one type.
    NamespaceDescriptor: The module a type lives in (reporting only).

All three are frozen pydantic models, so they are hashable and compare by
value. Descriptors carry no behaviour of their own; relationships between
types (bases, nested types, ...) are answered by the provider on demand.
"""

from typing import Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from api_closure.enums import MemberKind, Visibility


class NamespaceDescriptor(BaseModel):
  """
  A grouping key for types (the Python module name).
  """

  model_config = ConfigDict(frozen=True)

  name: str

  def __str__(self) -> str:
    return self.name


class TypeDescriptor(BaseModel):
  """
  Identity of a single logical type.

  Array forms (``list[X]``, ``tuple[X, ...]``) are descriptors whose
  ``element`` points at the descriptor of ``X``; they are never part of a
  closure themselves.
  """

  model_config = ConfigDict(frozen=True)

  qualified_name: str = Field(description="Fully qualified name, e.g. 'collections.OrderedDict'.")
  namespace: str = Field("", description="Module (package-equivalent) containing the type.")
  primitive: bool = Field(False, description="Primitive types are excluded from closures.")
  element: Optional["TypeDescriptor"] = Field(None, description="Element descriptor for array forms.")

  @property
  def is_array(self) -> bool:
    return self.element is not None

  @property
  def simple_name(self) -> str:
    """The last dotted segment of the qualified name."""
    return self.qualified_name.rsplit(".", 1)[-1]

  @classmethod
  def array_of(cls, element: "TypeDescriptor") -> "TypeDescriptor":
    """
    Builds the array descriptor whose elements are ``element``.

    Args:
        element: The element type (may itself be an array).

    Returns:
        TypeDescriptor: An array descriptor named ``<element>[]``.
    """
    return cls(
      qualified_name=f"{element.qualified_name}[]",
      namespace=element.namespace,
      element=element,
    )

  def ultimate_element(self) -> "TypeDescriptor":
    """Strips every level of array nesting."""
    current = self
    while current.element is not None:
      current = current.element
    return current

  def __str__(self) -> str:
    return self.qualified_name


class MemberDescriptor(BaseModel):
  """
  A constructor, method or field belonging to exactly one declaring type.

  The type slots are tuples because one Python annotation can name several
  types (``A | B``, ``dict[K, V]``). Which slots are meaningful depends on
  ``kind``: constructors use parameters and exceptions, methods additionally
  use return types, fields use only ``value_types``.

  Two descriptors are equal when they share declaring type, kind, name and
  signature. The same declaration reported by both an exported scan and a
  declared scan therefore counts once.
  """

  model_config = ConfigDict(frozen=True)

  declaring_type: TypeDescriptor
  name: str
  kind: MemberKind
  visibility: Visibility = Visibility.EXPORTED
  signature: str = ""
  parameter_types: Tuple[TypeDescriptor, ...] = ()
  exception_types: Tuple[TypeDescriptor, ...] = ()
  return_types: Tuple[TypeDescriptor, ...] = ()
  value_types: Tuple[TypeDescriptor, ...] = ()

  @property
  def key(self) -> Tuple[TypeDescriptor, MemberKind, str, str]:
    """The identity key of this declaration."""
    return (self.declaring_type, self.kind, self.name, self.signature)

  def referenced_types(self) -> Iterator[TypeDescriptor]:
    """
    Yields every type this member mentions, according to its kind.

    Methods yield return, parameter and exception types; constructors
    parameter and exception types; fields their value types.
    """
    if self.kind == MemberKind.FIELD:
      yield from self.value_types
      return
    if self.kind == MemberKind.METHOD:
      yield from self.return_types
    yield from self.parameter_types
    yield from self.exception_types

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, MemberDescriptor):
      return NotImplemented
    return self.key == other.key

  def __hash__(self) -> int:
    return hash(self.key)

  def __str__(self) -> str:
    owner = self.declaring_type.qualified_name
    if self.kind == MemberKind.FIELD:
      return f"{owner}.{self.name}: {self.signature}" if self.signature else f"{owner}.{self.name}"
    return f"{owner}.{self.name}{self.signature}"
