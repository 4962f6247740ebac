"""
CLI Command Handlers Facade.

This module re-exports the handlers from `api_closure.cli.handlers` so that
the dispatcher (and tests patching it) has a single import point.
"""

from api_closure.cli.handlers.closure import handle_closure, handle_seeds
from api_closure.cli.handlers.snapshots import handle_snapshot

__all__ = [
  "handle_closure",
  "handle_seeds",
  "handle_snapshot",
]
