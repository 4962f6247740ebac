"""
Snapshot Introspection Provider.

A snapshot is a JSON document describing a closed universe of types: for each
type its namespace, bases, nested and enclosing types, and the members it
declares. :class:`SnapshotIntrospector` answers the engine's questions from
such a document, so a closure can be recomputed without importing (or even
installing) the libraries it describes.

Snapshots are normally produced by :func:`capture_snapshot` from a closure
computed with the runtime or static provider, but they can also be written by
hand (see ``tests/discovery/test_snapshot_provider.py`` for the format).

Type references inside a snapshot are qualified names; array forms append
``[]`` (``'pkg.Item[][]'``). A reference to a type that is neither described
nor primitive makes the traversal fail with :class:`TypeNotFoundError`.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from pydantic import BaseModel, Field

from api_closure.core.descriptors import MemberDescriptor, TypeDescriptor
from api_closure.core.engine import ClosureEngine
from api_closure.core.errors import TypeNotFoundError
from api_closure.core.provider import DescriptorShapeMixin, IntrospectionProvider
from api_closure.discovery.mro import linearize
from api_closure.enums import MemberKind, Visibility
from api_closure.utils.console import log_success

SNAPSHOT_FORMAT_VERSION = 1

#: Names every snapshot treats as primitive.
DEFAULT_PRIMITIVE_NAMES = frozenset(
  {
    "None",
    "builtins.NoneType",
    "builtins.NotImplementedType",
    "builtins.ellipsis",
    "typing.Any",
  }
)


class MemberSnapshot(BaseModel):
  """
  Serializable form of a member declaration.
  """

  name: str
  kind: MemberKind
  visibility: Visibility = Visibility.EXPORTED
  signature: str = ""
  parameters: List[str] = Field(default_factory=list, description="Parameter type references.")
  raises: List[str] = Field(default_factory=list, description="Raised type references.")
  returns: List[str] = Field(default_factory=list, description="Return type references (methods).")
  values: List[str] = Field(default_factory=list, description="Value type references (fields).")


class TypeSnapshot(BaseModel):
  """
  Serializable form of one type and the members it declares.
  """

  name: str
  namespace: Optional[str] = Field(None, description="Defaults to the name minus its last segment.")
  supertype: Optional[str] = None
  contracts: List[str] = Field(default_factory=list)
  nested: List[str] = Field(default_factory=list)
  enclosing: Optional[str] = None
  members: List[MemberSnapshot] = Field(default_factory=list)

  @property
  def effective_namespace(self) -> str:
    if self.namespace is not None:
      return self.namespace
    return self.name.rsplit(".", 1)[0] if "." in self.name else ""


class UniverseSnapshot(BaseModel):
  """
  A closed universe of types.
  """

  format_version: int = SNAPSHOT_FORMAT_VERSION
  provider: str = Field("", description="Provider the snapshot was captured with.")
  seeds: List[str] = Field(default_factory=list)
  primitives: List[str] = Field(default_factory=list, description="Extra primitive type names.")
  types: List[TypeSnapshot] = Field(default_factory=list)


class SnapshotIntrospector(DescriptorShapeMixin):
  """
  Introspection provider backed by a :class:`UniverseSnapshot`.
  """

  def __init__(self, snapshot: Union[UniverseSnapshot, Dict[str, Any], str, Path]):
    """
    Args:
        snapshot: A snapshot model, its dict form, or the path of a JSON file.
    """
    if isinstance(snapshot, (str, Path)):
      snapshot = load_snapshot(Path(snapshot))
    elif isinstance(snapshot, dict):
      snapshot = UniverseSnapshot.model_validate(snapshot)
    self.snapshot: UniverseSnapshot = snapshot
    self.primitives = DEFAULT_PRIMITIVE_NAMES | frozenset(snapshot.primitives)
    self._types: Dict[str, TypeSnapshot] = {t.name: t for t in snapshot.types}

  # --- Resolution ---

  def resolve_by_name(self, qualified_name: str) -> TypeDescriptor:
    return self._ref((qualified_name or "").strip())

  def _ref(self, name: str) -> TypeDescriptor:
    if name.endswith("[]"):
      return TypeDescriptor.array_of(self._ref(name[:-2]))
    if name in self.primitives:
      namespace = name.rsplit(".", 1)[0] if "." in name else "builtins"
      return TypeDescriptor(qualified_name=name, namespace=namespace, primitive=True)
    entry = self._types.get(name)
    if entry is None:
      raise TypeNotFoundError(name, "not described by the snapshot")
    return TypeDescriptor(qualified_name=name, namespace=entry.effective_namespace)

  def _entry(self, type_: TypeDescriptor) -> TypeSnapshot:
    entry = self._types.get(type_.qualified_name)
    if entry is None:
      raise TypeNotFoundError(type_.qualified_name, "not described by the snapshot")
    return entry

  def _bases(self, name: str) -> List[str]:
    entry = self._types.get(name)
    if entry is None:
      raise TypeNotFoundError(name, "not described by the snapshot")
    bases = [entry.supertype] if entry.supertype else []
    return bases + list(entry.contracts)

  # --- Members ---

  def _member(self, owner: TypeSnapshot, member: MemberSnapshot) -> MemberDescriptor:
    return MemberDescriptor(
      declaring_type=self._ref(owner.name),
      name=member.name,
      kind=member.kind,
      visibility=member.visibility,
      signature=member.signature,
      parameter_types=tuple(self._ref(p) for p in member.parameters),
      exception_types=tuple(self._ref(r) for r in member.raises),
      return_types=tuple(self._ref(r) for r in member.returns),
      value_types=tuple(self._ref(v) for v in member.values),
    )

  def _declared(self, type_: TypeDescriptor, kind: MemberKind) -> List[MemberDescriptor]:
    entry = self._entry(type_)
    return [self._member(entry, m) for m in entry.members if m.kind == kind]

  def _inherited(self, type_: TypeDescriptor, kind: MemberKind) -> Iterator[MemberDescriptor]:
    seen = set()
    for owner_name in linearize(type_.qualified_name, self._bases):
      owner = self._types[owner_name]
      for member in owner.members:
        if member.kind == MemberKind.CONSTRUCTOR or member.name in seen:
          continue
        seen.add(member.name)
        if member.kind == kind and member.visibility == Visibility.EXPORTED:
          yield self._member(owner, member)

  def exported_constructors(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return [m for m in self._declared(type_, MemberKind.CONSTRUCTOR) if m.visibility == Visibility.EXPORTED]

  def declared_constructors(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return self._declared(type_, MemberKind.CONSTRUCTOR)

  def exported_methods(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return list(self._inherited(type_, MemberKind.METHOD))

  def declared_methods(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return self._declared(type_, MemberKind.METHOD)

  def exported_fields(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return list(self._inherited(type_, MemberKind.FIELD))

  def declared_fields(self, type_: TypeDescriptor) -> List[MemberDescriptor]:
    return self._declared(type_, MemberKind.FIELD)

  # --- Type relationships ---

  def declared_nested_types(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    return [self._ref(name) for name in self._entry(type_).nested]

  def supertype_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    supertype = self._entry(type_).supertype
    return self._ref(supertype) if supertype else None

  def implemented_contracts_of(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    return [self._ref(name) for name in self._entry(type_).contracts]

  def enclosing_type_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    enclosing = self._entry(type_).enclosing
    return self._ref(enclosing) if enclosing else None


# --- Capture & persistence ---


def _refs(types: Iterable[TypeDescriptor]) -> List[str]:
  return [t.qualified_name for t in types]


def capture_snapshot(engine: ClosureEngine, provider: Optional[IntrospectionProvider] = None) -> UniverseSnapshot:
  """
  Records the universe visited by a closure computation.

  Every type of the closure is written with its relationships and the members
  of the closure it declares. Replaying the snapshot from the same seeds
  yields the same types, namespaces and members.

  Args:
      engine: A completed closure.
      provider: Provider to query for relationships (defaults to the engine's).

  Returns:
      UniverseSnapshot: The captured universe.
  """
  provider = provider or engine.provider

  members_by_owner: Dict[TypeDescriptor, List[MemberDescriptor]] = {}
  primitives: Dict[str, None] = {}

  def note_primitives(refs: Iterable[Optional[TypeDescriptor]]) -> None:
    for ref in refs:
      if ref is None:
        continue
      ultimate = ref.ultimate_element()
      if ultimate.primitive:
        primitives[ultimate.qualified_name] = None

  for member in engine.members():
    members_by_owner.setdefault(member.declaring_type, []).append(member)
    note_primitives(member.referenced_types())

  types: List[TypeSnapshot] = []
  for type_ in engine.classes_and_interfaces():
    supertype = provider.supertype_of(type_)
    enclosing = provider.enclosing_type_of(type_)
    note_primitives([supertype, enclosing])
    note_primitives(provider.implemented_contracts_of(type_))
    note_primitives(provider.declared_nested_types(type_))
    types.append(
      TypeSnapshot(
        name=type_.qualified_name,
        namespace=provider.namespace_of(type_).name,
        supertype=supertype.qualified_name if supertype else None,
        contracts=_refs(provider.implemented_contracts_of(type_)),
        nested=_refs(provider.declared_nested_types(type_)),
        enclosing=enclosing.qualified_name if enclosing else None,
        members=[
          MemberSnapshot(
            name=m.name,
            kind=m.kind,
            visibility=m.visibility,
            signature=m.signature,
            parameters=_refs(m.parameter_types),
            raises=_refs(m.exception_types),
            returns=_refs(m.return_types),
            values=_refs(m.value_types),
          )
          for m in members_by_owner.get(type_, [])
        ],
      )
    )

  return UniverseSnapshot(
    provider=type(provider).__name__,
    seeds=_refs(engine.seeds),
    primitives=sorted(set(primitives) - DEFAULT_PRIMITIVE_NAMES),
    types=types,
  )


def save_snapshot(snapshot: UniverseSnapshot, path: Path) -> Path:
  """
  Writes a snapshot as indented JSON.

  Args:
      snapshot: The snapshot to write.
      path: Destination file; parent directories are created.

  Returns:
      Path: The written path.
  """
  path = Path(path)
  path.parent.mkdir(parents=True, exist_ok=True)
  with open(path, "w", encoding="utf-8") as f:
    json.dump(snapshot.model_dump(mode="json", exclude_defaults=True), f, indent=2)
  log_success(f"Saved snapshot: [path]{path}[/path]")
  return path


def load_snapshot(path: Path) -> UniverseSnapshot:
  """
  Reads a snapshot written by :func:`save_snapshot`.

  Raises:
      FileNotFoundError: If ``path`` does not exist.
      pydantic.ValidationError: If the document does not match the schema.
  """
  with open(path, "r", encoding="utf-8") as f:
    data = json.load(f)
  return UniverseSnapshot.model_validate(data)
