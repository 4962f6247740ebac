"""
Method Resolution Order for providers without live classes.

The static and snapshot providers only know each type's direct bases. This
module computes the C3 linearization Python itself uses, so that inherited
member scans pick the same owner for each name as the runtime provider does.
"""

from typing import Callable, Dict, Hashable, List, Sequence, TypeVar

K = TypeVar("K", bound=Hashable)


def linearize(start: K, bases_of: Callable[[K], Sequence[K]]) -> List[K]:
  """
  Computes the MRO of ``start``.

  Inconsistent hierarchies (which Python would reject) fall back to a
  depth-first, left-to-right order without duplicates.

  Args:
      start: The type whose MRO is wanted.
      bases_of: Returns the direct bases of a type, in declaration order.

  Returns:
      List[K]: ``start`` followed by its ancestors.
  """
  cache: Dict[K, List[K]] = {}
  try:
    return _c3(start, bases_of, cache, ())
  except _Inconsistent:
    return _depth_first(start, bases_of)


class _Inconsistent(Exception):
  pass


def _c3(node: K, bases_of, cache: Dict[K, List[K]], stack: tuple) -> List[K]:
  if node in cache:
    return cache[node]
  if node in stack:
    raise _Inconsistent(f"cyclic inheritance through {node!r}")

  bases = list(bases_of(node))
  sequences = [list(_c3(base, bases_of, cache, stack + (node,))) for base in bases]
  sequences.append(list(bases))

  result = [node]
  while True:
    sequences = [seq for seq in sequences if seq]
    if not sequences:
      break
    for seq in sequences:
      head = seq[0]
      if not any(head in other[1:] for other in sequences):
        break
    else:
      raise _Inconsistent(f"no consistent MRO for {node!r}")
    result.append(head)
    for seq in sequences:
      if seq[0] == head:
        del seq[0]

  cache[node] = result
  return result


def _depth_first(start: K, bases_of) -> List[K]:
  seen: Dict[K, None] = {}
  pending = [start]
  while pending:
    node = pending.pop()
    if node in seen:
      continue
    seen[node] = None
    pending.extend(reversed(list(bases_of(node))))
  return list(seen)
