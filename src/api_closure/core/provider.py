"""
Introspection Provider Protocol.

The closure engine never looks at classes, source files or snapshots
directly. Everything it knows about a type comes from an object implementing
:class:`IntrospectionProvider`. Three implementations ship with the package:

- :class:`~api_closure.discovery.runtime.RuntimeIntrospector` (live objects),
- :class:`~api_closure.discovery.static.StaticIntrospector` (griffe, source only),
- :class:`~api_closure.discovery.snapshot.SnapshotIntrospector` (JSON universe).

Conventions shared by all providers:

- ``exported_*`` scans include members inherited from ancestors (the first
  owner along the MRO wins), and report each member with its real declaring type.
- ``declared_*`` scans only report members written on the type itself,
  regardless of visibility.
- Type-valued answers are descriptors that can be passed back into any other
  method of the same provider.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

from api_closure.core.descriptors import MemberDescriptor, NamespaceDescriptor, TypeDescriptor
from api_closure.enums import Visibility


@runtime_checkable
class IntrospectionProvider(Protocol):
  """
  Capability consumed by the closure engine.
  """

  def resolve_by_name(self, qualified_name: str) -> TypeDescriptor:
    """
    Locates a type by name.

    Raises:
        TypeNotFoundError: If no such type exists.
    """
    ...

  def exported_constructors(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]: ...

  def declared_constructors(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]: ...

  def exported_methods(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]: ...

  def declared_methods(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]: ...

  def exported_fields(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]: ...

  def declared_fields(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]: ...

  def declared_nested_types(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]: ...

  def supertype_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]: ...

  def implemented_contracts_of(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]: ...

  def enclosing_type_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]: ...

  def namespace_of(self, type_: TypeDescriptor) -> NamespaceDescriptor: ...

  def is_array(self, type_: TypeDescriptor) -> bool: ...

  def element_type_of(self, type_: TypeDescriptor) -> TypeDescriptor: ...

  def is_primitive(self, type_: TypeDescriptor) -> bool: ...

  def visibility(self, member: MemberDescriptor) -> Visibility: ...


class DescriptorShapeMixin:
  """
  Default answers for the questions that only depend on descriptor fields.

  Providers that build their descriptors with ``element``/``primitive``
  filled in can inherit these instead of re-implementing them.
  """

  def is_array(self, type_: TypeDescriptor) -> bool:
    return type_.is_array

  def element_type_of(self, type_: TypeDescriptor) -> TypeDescriptor:
    if type_.element is None:
      raise ValueError(f"'{type_.qualified_name}' is not an array type")
    return type_.element

  def is_primitive(self, type_: TypeDescriptor) -> bool:
    return type_.primitive

  def namespace_of(self, type_: TypeDescriptor) -> NamespaceDescriptor:
    return NamespaceDescriptor(name=type_.namespace)

  def visibility(self, member: MemberDescriptor) -> Visibility:
    return member.visibility


def visibility_of_name(name: str, owner_name: str = "") -> Visibility:
  """
  Classifies a Python attribute name.

  Dunder names and names without a leading underscore are exported; a single
  underscore marks a protected name; ``__name`` (and its mangled form
  ``_Owner__name``) is private.

  Args:
      name: The attribute name as it appears in the class namespace.
      owner_name: Simple name of the declaring class, used to spot mangled names.

  Returns:
      Visibility: The classification.
  """
  if name.startswith("__") and name.endswith("__") and len(name) > 4:
    return Visibility.EXPORTED
  if name.startswith("__"):
    return Visibility.OTHER
  if owner_name and name.startswith(f"_{owner_name.lstrip('_')}__"):
    return Visibility.OTHER
  if name.startswith("_"):
    return Visibility.PROTECTED
  return Visibility.EXPORTED
