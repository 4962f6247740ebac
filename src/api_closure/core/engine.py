"""
Closure Engine.

Computes the reflexive transitive closure of a set of types under API
dependency: the seed types plus every type that must be available for the
seeds' exported surface to be usable, together with every exported member
reached along the way.

The computation is an eager worklist traversal driven entirely from the
constructor:

1.  Every seed is visited.
2.  While the worklist is non-empty, its oldest entry is removed and visited.
3.  Visiting a type records it, records its namespace, records every exported
    member (plus the protected members it declares itself) and schedules
    every type those members mention, followed by its nested types, its whole
    supertype chain, its contracts and its whole enclosing-type chain.

Scheduling unwraps array forms to their ultimate element type and drops
primitives and types that were already visited, so each type is expanded
exactly once.
"""

import logging
from typing import Dict, Iterable, KeysView, Optional, Tuple

from api_closure.core.descriptors import MemberDescriptor, NamespaceDescriptor, TypeDescriptor
from api_closure.core.provider import IntrospectionProvider
from api_closure.enums import Visibility

logger = logging.getLogger(__name__)


class ClosureEngine:
  """
  The API of a set of types: the types themselves and everything they depend on.

  Results are exposed as read-only, insertion-ordered, set-like views. The
  order of :meth:`classes_and_interfaces` is the order of discovery (seeds
  first, then breadth-first by worklist order).

  Attributes:
      provider (IntrospectionProvider): Source of all type metadata.
  """

  def __init__(self, seeds: Iterable[TypeDescriptor], provider: IntrospectionProvider):
    """
    Computes the closure of ``seeds``.

    Args:
        seeds: The types contained in the API. Duplicates are ignored.
        provider: The introspection capability used to expand each type.

    Raises:
        ValueError: If ``seeds`` or any of its elements is None.
        TypeNotFoundError: If the provider cannot resolve a referenced type.
    """
    if seeds is None:
      raise ValueError("Seed collection must not be None")
    if provider is None:
      raise ValueError("An introspection provider is required")

    seed_list = list(seeds)
    if any(seed is None for seed in seed_list):
      raise ValueError("Seed collection must not contain None")

    self.provider = provider
    self._seeds: Tuple[TypeDescriptor, ...] = tuple(dict.fromkeys(seed_list))

    # Ordered sets: dict keys preserve insertion order and give O(1) membership.
    self._to_visit: Dict[TypeDescriptor, None] = {}
    self._visited: Dict[TypeDescriptor, None] = {}
    self._namespaces: Dict[NamespaceDescriptor, None] = {}
    self._members: Dict[MemberDescriptor, None] = {}

    for seed in self._seeds:
      target = self._unwrap(seed)
      if target is None or target in self._visited:
        continue
      self._to_visit.pop(target, None)
      self._visit(target)

    while self._to_visit:
      self._visit(self._remove_unvisited())

    logger.debug(
      f"Closure of {len(self._seeds)} seed(s): {len(self._visited)} types, "
      f"{len(self._namespaces)} namespaces, {len(self._members)} members"
    )

  # --- Traversal ---

  def _visit(self, type_: TypeDescriptor) -> None:
    """
    Expands a single type.

    Args:
        type_: A non-array, non-primitive type that has not been visited yet.
    """
    logger.debug(f"Visiting {type_.qualified_name}")
    self._visited[type_] = None
    self._namespaces[self.provider.namespace_of(type_)] = None

    self._visit_members(self.provider.exported_constructors(type_))
    self._visit_members(self._declared_protected(self.provider.declared_constructors(type_)))

    self._visit_members(self.provider.exported_methods(type_))
    self._visit_members(self._declared_protected(self.provider.declared_methods(type_)))

    self._visit_members(self.provider.exported_fields(type_))
    self._visit_members(self._declared_protected(self.provider.declared_fields(type_)))

    self._ensure_visit_all(self.provider.declared_nested_types(type_))

    superclass = self.provider.supertype_of(type_)
    while superclass is not None:
      self._ensure_visit(superclass)
      superclass = self.provider.supertype_of(superclass)

    self._ensure_visit_all(self.provider.implemented_contracts_of(type_))

    enclosing = self.provider.enclosing_type_of(type_)
    while enclosing is not None:
      self._ensure_visit(enclosing)
      enclosing = self.provider.enclosing_type_of(enclosing)

  def _declared_protected(self, members: Iterable[MemberDescriptor]) -> Iterable[MemberDescriptor]:
    for member in members:
      if self.provider.visibility(member) == Visibility.PROTECTED:
        yield member

  def _visit_members(self, members: Iterable[MemberDescriptor]) -> None:
    for member in members:
      self._members[member] = None
      self._ensure_visit_all(member.referenced_types())

  def _ensure_visit_all(self, types: Iterable[TypeDescriptor]) -> None:
    for type_ in types:
      self._ensure_visit(type_)

  def _ensure_visit(self, type_: TypeDescriptor) -> None:
    """
    Schedules a type unless it is primitive or already visited.

    Args:
        type_: Any type mentioned by the surface being expanded.
    """
    target = self._unwrap(type_)
    if target is None or target in self._visited:
      return
    self._to_visit[target] = None

  def _unwrap(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    """Returns the ultimate element type, or None for primitives."""
    while self.provider.is_array(type_):
      type_ = self.provider.element_type_of(type_)
    if self.provider.is_primitive(type_):
      return None
    return type_

  def _remove_unvisited(self) -> TypeDescriptor:
    oldest = next(iter(self._to_visit))
    del self._to_visit[oldest]
    return oldest

  # --- Results ---

  @property
  def seeds(self) -> Tuple[TypeDescriptor, ...]:
    """The distinct seed types, in the order given."""
    return self._seeds

  def classes_and_interfaces(self) -> KeysView[TypeDescriptor]:
    """
    Returns the types in this API.

    This is the reflexive transitive closure of the seeds under API
    dependency, in order of discovery.

    Returns:
        KeysView[TypeDescriptor]: A read-only set-like view.
    """
    return self._visited.keys()

  def members(self) -> KeysView[MemberDescriptor]:
    """
    Returns the exported (public and protected) members of the types in this API.

    Returns:
        KeysView[MemberDescriptor]: A read-only set-like view.
    """
    return self._members.keys()

  def packages(self) -> KeysView[NamespaceDescriptor]:
    """
    Returns the namespaces containing the types in this API.

    Returns:
        KeysView[NamespaceDescriptor]: A read-only set-like view.
    """
    return self._namespaces.keys()

  namespaces = packages

  def __contains__(self, type_: object) -> bool:
    return type_ in self._visited

  def __len__(self) -> int:
    return len(self._visited)

  def __repr__(self) -> str:
    return (
      f"{type(self).__name__}(seeds={len(self._seeds)}, types={len(self._visited)}, "
      f"namespaces={len(self._namespaces)}, members={len(self._members)})"
    )
