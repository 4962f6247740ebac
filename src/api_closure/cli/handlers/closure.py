"""
Closure Command Handlers.

This module implements the ``closure`` and ``seeds`` commands:
1.  **Closure**: Resolves the seed names, computes their closure and prints
    the report (text or JSON, to the terminal or a file).
2.  **Seeds**: Lists the built-in Python Language Reference catalog.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from api_closure.config import RuntimeConfig
from api_closure.core.engine import ClosureEngine
from api_closure.core.errors import ClosureError
from api_closure.discovery import build_provider
from api_closure.enums import OutputFormat
from api_closure.report import ClosureReport
from api_closure.seeds import language_seed_names, resolve_seeds
from api_closure.utils.console import console, escape, log_error, log_info, log_success


def handle_closure(
  names: Optional[List[str]],
  provider: Optional[str] = None,
  snapshot: Optional[Path] = None,
  search_paths: Optional[List[Path]] = None,
  primitives: Optional[List[str]] = None,
  output_format: Optional[str] = None,
  out: Optional[Path] = None,
  strict: Optional[bool] = None,
) -> int:
  """
  Handles the 'closure' command.

  Seeds come from ``names``, else from the ``seeds`` configuration key, else
  from the built-in catalog. Nothing is printed unless the whole closure
  could be computed.

  Args:
      names: Seed type names given on the command line.
      provider: Provider override ('runtime', 'static' or 'snapshot').
      snapshot: Snapshot file for the snapshot provider.
      search_paths: Source directories for the static provider.
      primitives: Extra qualified names treated as primitive.
      output_format: 'text' or 'json'.
      out: Write the report to this file instead of the terminal.
      strict: Fail on unresolvable static references.

  Returns:
      int: Exit code (0 on success, 1 on configuration or resolution errors).
  """
  config = load_config(
    provider=provider,
    seeds=names,
    snapshot=snapshot,
    search_paths=search_paths,
    primitives=primitives,
    output_format=output_format,
    strict=strict,
  )
  if config is None:
    return 1

  engine = run_closure(config)
  if engine is None:
    return 1

  report = ClosureReport.from_engine(engine)
  text = report.render_json() if config.output_format == OutputFormat.JSON else report.render_text()

  if out is not None:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    log_success(f"Report written to [path]{escape(str(out))}[/path]")
  else:
    console.print(text, markup=False, highlight=False)
  return 0


def handle_seeds() -> int:
  """
  Handles the 'seeds' command.

  Returns:
      int: Exit code.
  """
  for name in language_seed_names():
    console.print(name, markup=False, highlight=False)
  return 0


# --- Helpers ---


def load_config(**overrides) -> Optional[RuntimeConfig]:
  """
  Loads the configuration, logging validation errors.

  Args:
      **overrides: Arguments for :meth:`RuntimeConfig.load`.

  Returns:
      Optional[RuntimeConfig]: The configuration, or None if it is invalid.
  """
  try:
    return RuntimeConfig.load(**overrides)
  except ValidationError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return None


def run_closure(config: RuntimeConfig) -> Optional[ClosureEngine]:
  """
  Builds the provider, resolves the seeds and computes the closure.

  Args:
      config (RuntimeConfig): The resolved configuration.

  Returns:
      Optional[ClosureEngine]: The closure, or None if any step failed (the error is logged).
  """
  try:
    provider = build_provider(config)
  except (ValueError, OSError) as e:
    log_error(escape(str(e)))
    return None

  seed_names = config.seeds if config.seeds is not None else language_seed_names()
  log_info(f"Computing the closure of {len(seed_names)} seed(s) with the {config.provider.value} provider")

  try:
    seeds = resolve_seeds(provider, seed_names)
    return ClosureEngine(seeds, provider)
  except ClosureError as e:
    log_error(escape(str(e)))
    return None
  except Exception as e:
    # Provider faults met mid-traversal (failing imports, analysis errors)
    log_error(f"Closure failed: {escape(f'{type(e).__name__}: {e}')}")
    return None
