"""
Main Entry Point for api-closure CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `api_closure.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from api_closure import __version__
from api_closure.cli import commands
from api_closure.enums import OutputFormat, ProviderKind
from api_closure.utils.console import set_verbose


def _add_provider_arguments(cmd: argparse.ArgumentParser, providers: List[str]) -> None:
  cmd.add_argument(
    "--provider",
    choices=providers,
    default=None,
    help="Introspection back-end (default: from toml, else runtime)",
  )
  cmd.add_argument(
    "--search-path",
    dest="search_paths",
    type=Path,
    action="append",
    default=None,
    help="Source directory for the static provider (repeatable)",
  )
  cmd.add_argument(
    "--primitive",
    dest="primitives",
    action="append",
    default=None,
    help="Qualified name to treat as primitive (repeatable)",
  )
  cmd.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Fail on references the static provider cannot resolve (Overrides config)",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="api-closure: API dependency closure of Python types")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Show engine and provider debug traces")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CLOSURE ---
  cmd_closure = subparsers.add_parser("closure", help="Compute and print the closure of some types")
  cmd_closure.add_argument(
    "names",
    nargs="*",
    help="Seed types, e.g. collections.OrderedDict (default: from toml, else the Language Reference catalog)",
  )
  _add_provider_arguments(cmd_closure, [kind.value for kind in ProviderKind])
  cmd_closure.add_argument("--snapshot", type=Path, default=None, help="Snapshot file for the snapshot provider")
  cmd_closure.add_argument(
    "--format",
    dest="output_format",
    choices=[fmt.value for fmt in OutputFormat],
    default=None,
    help="Report format (default: text)",
  )
  cmd_closure.add_argument("--out", type=Path, default=None, help="Write the report to a file")

  # --- Command: SNAPSHOT ---
  cmd_snap = subparsers.add_parser("snapshot", help="Capture the universe of a closure as JSON")
  cmd_snap.add_argument("names", nargs="*", help="Seed types (default: from toml, else the catalog)")
  cmd_snap.add_argument("--out", type=Path, required=True, help="Output JSON file")
  _add_provider_arguments(cmd_snap, [ProviderKind.RUNTIME.value, ProviderKind.STATIC.value])

  # --- Command: SEEDS ---
  subparsers.add_parser("seeds", help="List the built-in Language Reference seed catalog")

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "closure":
    return commands.handle_closure(
      args.names,
      provider=args.provider,
      snapshot=args.snapshot,
      search_paths=args.search_paths,
      primitives=args.primitives,
      output_format=args.output_format,
      out=args.out,
      strict=args.strict,
    )
  elif args.command == "snapshot":
    return commands.handle_snapshot(
      args.names,
      args.out,
      provider=args.provider,
      search_paths=args.search_paths,
      primitives=args.primitives,
      strict=args.strict,
    )
  elif args.command == "seeds":
    return commands.handle_seeds()
  return 0


if __name__ == "__main__":
  sys.exit(main())
