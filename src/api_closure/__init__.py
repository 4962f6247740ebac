"""
api-closure Package.

Computes the reflexive transitive closure of a set of Python types under API
dependency: the given types plus every type their exported surface mentions
(parameter, return, raised and field types, bases, nested and enclosing
classes), recursively.

Usage
-----

Closure of a few classes
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import api_closure

    engine = api_closure.compute_closure(["collections.OrderedDict"])
    print(len(engine.classes_and_interfaces()), "types")
    print(sorted(ns.name for ns in engine.packages()))

Choosing a provider
^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from api_closure import ClosureEngine
    from api_closure.discovery import StaticIntrospector

    provider = StaticIntrospector(search_paths=["src"])
    seeds = [provider.resolve_by_name("mypkg.api.Client")]
    engine = ClosureEngine(seeds, provider)
"""

from typing import Iterable, Optional

from api_closure.config import RuntimeConfig
from api_closure.core.descriptors import MemberDescriptor, NamespaceDescriptor, TypeDescriptor
from api_closure.core.engine import ClosureEngine
from api_closure.core.errors import ClosureError, TypeNotFoundError
from api_closure.core.provider import IntrospectionProvider
from api_closure.discovery.runtime import RuntimeIntrospector
from api_closure.seeds import resolve_seeds

__version__ = "0.1.0"


def compute_closure(
  names: Optional[Iterable[str]] = None,
  provider: Optional[IntrospectionProvider] = None,
  primitives: Iterable[str] = (),
) -> ClosureEngine:
  """
  Resolves type names and computes their closure.

  This is a convenience wrapper around :class:`ClosureEngine`. For snapshots
  or static analysis, build the provider yourself.

  Args:
      names (Iterable[str], optional): Qualified type names. If None, the
          built-in Python Language Reference catalog is used.
      provider (IntrospectionProvider, optional): Defaults to a
          :class:`RuntimeIntrospector`.
      primitives (Iterable[str]): Extra primitive names for the default provider.

  Returns:
      ClosureEngine: The computed closure.

  Raises:
      TypeNotFoundError: If a name cannot be resolved.
  """
  provider = provider or RuntimeIntrospector(primitives=primitives)
  return ClosureEngine(resolve_seeds(provider, names), provider)


__all__ = [
  "ClosureEngine",
  "ClosureError",
  "IntrospectionProvider",
  "MemberDescriptor",
  "NamespaceDescriptor",
  "RuntimeConfig",
  "TypeDescriptor",
  "TypeNotFoundError",
  "compute_closure",
  "__version__",
]
