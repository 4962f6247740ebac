"""
Snapshot Command Handler.

Captures the universe visited by a closure so that the closure can later be
recomputed with the snapshot provider, without the described libraries being
installed.
"""

from pathlib import Path
from typing import List, Optional

from api_closure.cli.handlers.closure import load_config, run_closure
from api_closure.discovery.snapshot import capture_snapshot, save_snapshot
from api_closure.enums import ProviderKind
from api_closure.utils.console import log_error, log_info


def handle_snapshot(
  names: Optional[List[str]],
  out: Path,
  provider: Optional[str] = None,
  search_paths: Optional[List[Path]] = None,
  primitives: Optional[List[str]] = None,
  strict: Optional[bool] = None,
) -> int:
  """
  Handles the 'snapshot' command.

  Args:
      names: Seed type names (configured seeds or the built-in catalog when empty).
      out: Destination JSON file.
      provider: 'runtime' or 'static'.
      search_paths: Source directories for the static provider.
      primitives: Extra qualified names treated as primitive.
      strict: Fail on unresolvable static references.

  Returns:
      int: Exit code.
  """
  config = load_config(
    provider=provider,
    seeds=names,
    search_paths=search_paths,
    primitives=primitives,
    strict=strict,
  )
  if config is None:
    return 1
  if config.provider == ProviderKind.SNAPSHOT:
    log_error("Snapshots are captured with the runtime or static provider.")
    return 1

  engine = run_closure(config)
  if engine is None:
    return 1

  snapshot = capture_snapshot(engine)
  log_info(f"Captured {len(snapshot.types)} types and {len(engine.members())} members.")
  save_snapshot(snapshot, out)
  return 0
