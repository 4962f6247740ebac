"""
Discovery Package.

This package implements the introspection providers consumed by the closure
engine, one per source of type metadata.

Modules:
    - ``runtime``: Live classes via ``importlib``/``inspect``/``typing``.
    - ``static``: Source code parsed with griffe (nothing imported).
    - ``snapshot``: A closed universe replayed from JSON, plus capture and persistence.
    - ``annotations``: Live annotation flattening and docstring raises sections.
    - ``mro``: C3 linearization for providers without live classes.
"""

from api_closure.config import RuntimeConfig
from api_closure.core.provider import IntrospectionProvider
from api_closure.discovery.runtime import RuntimeIntrospector
from api_closure.discovery.snapshot import (
  SnapshotIntrospector,
  UniverseSnapshot,
  capture_snapshot,
  load_snapshot,
  save_snapshot,
)
from api_closure.discovery.static import StaticIntrospector
from api_closure.enums import ProviderKind


def build_provider(config: RuntimeConfig) -> IntrospectionProvider:
  """
  Instantiates the provider selected by a configuration.

  Args:
      config (RuntimeConfig): The resolved configuration.

  Returns:
      IntrospectionProvider: A ready-to-use provider.

  Raises:
      ValueError: If the snapshot provider is selected without a snapshot path.
      FileNotFoundError: If the snapshot file does not exist.
  """
  if config.provider == ProviderKind.STATIC:
    return StaticIntrospector(
      search_paths=config.search_paths,
      primitives=config.primitives,
      docstring_style=config.docstring_style,
      strict=config.strict,
    )
  if config.provider == ProviderKind.SNAPSHOT:
    if config.snapshot is None:
      raise ValueError("The snapshot provider requires a snapshot file (--snapshot)")
    return SnapshotIntrospector(config.snapshot)
  return RuntimeIntrospector(primitives=config.primitives, docstring_style=config.docstring_style)


__all__ = [
  "RuntimeIntrospector",
  "SnapshotIntrospector",
  "StaticIntrospector",
  "UniverseSnapshot",
  "build_provider",
  "capture_snapshot",
  "load_snapshot",
  "save_snapshot",
]
