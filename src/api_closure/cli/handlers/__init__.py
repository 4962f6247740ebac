from .closure import handle_closure, handle_seeds, load_config, run_closure
from .snapshots import handle_snapshot

__all__ = [
  "handle_closure",
  "handle_seeds",
  "handle_snapshot",
  "load_config",
  "run_closure",
]
