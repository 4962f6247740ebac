"""
Runtime Configuration Store.

Settings are read from the ``[tool.api_closure]`` table of the nearest
``pyproject.toml`` (searched upward from the working directory) and
overridden by command line arguments.

Example::

    [tool.api_closure]
    provider = "static"
    seeds = ["mypkg.api.Client"]
    primitives = ["builtins.int", "builtins.str"]
    search_paths = ["src"]
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from api_closure.enums import OutputFormat, ProviderKind

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

TOOL_SECTION = "api_closure"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for closure runs.
  """

  provider: ProviderKind = Field(ProviderKind.RUNTIME, description="Introspection back-end.")
  seeds: Optional[List[str]] = Field(None, description="Seed type names. None selects the built-in catalog.")
  primitives: List[str] = Field(default_factory=list, description="Extra qualified names treated as primitive.")
  search_paths: List[Path] = Field(default_factory=list, description="Source directories for the static provider.")
  snapshot: Optional[Path] = Field(None, description="Snapshot file for the snapshot provider.")
  output_format: OutputFormat = Field(OutputFormat.TEXT, description="Report format.")
  strict: bool = Field(False, description="If True, unresolvable static references fail the run.")
  docstring_style: str = Field("google", description="griffe docstring parser used to read raises sections.")

  @field_validator("provider", mode="before")
  @classmethod
  def validate_provider(cls, v: Any) -> Any:
    """
    Normalizes the provider name and rejects unknown ones.

    Args:
        v: The raw provider value.

    Returns:
        The lowercase provider name, or ``v`` unchanged if it is already a ProviderKind.

    Raises:
        ValueError: If the provider is not one of the known back-ends.
    """
    if isinstance(v, ProviderKind):
      return v
    v_clean = str(v).lower().strip()
    known = [kind.value for kind in ProviderKind]
    if v_clean not in known:
      raise ValueError(f"Unknown provider: '{v_clean}'. Supported providers: {known}")
    return v_clean

  @classmethod
  def load(
    cls,
    provider: Optional[str] = None,
    seeds: Optional[List[str]] = None,
    primitives: Optional[List[str]] = None,
    search_paths: Optional[List[Path]] = None,
    snapshot: Optional[Path] = None,
    output_format: Optional[str] = None,
    strict: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Paths found in the TOML file are relative to the directory holding it.

    Args:
        provider (Optional[str]): Override for the provider.
        seeds (Optional[List[str]]): Override for the seed names (empty means unset).
        primitives (Optional[List[str]]): Extra primitives, added to the configured ones.
        search_paths (Optional[List[Path]]): Source directories, searched before the configured ones.
        snapshot (Optional[Path]): Override for the snapshot path.
        output_format (Optional[str]): Override for the report format.
        strict (Optional[bool]): Override for strict mode.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    def _relative(raw: Any) -> Path:
      path = Path(raw)
      if toml_dir and not path.is_absolute():
        return (toml_dir / path).resolve()
      return path.resolve()

    final_seeds = list(seeds) if seeds else toml_config.get("seeds")

    final_primitives = list(toml_config.get("primitives", []))
    final_primitives += [p for p in primitives or [] if p not in final_primitives]

    final_paths = [Path(p).resolve() for p in search_paths or []]
    final_paths += [_relative(p) for p in toml_config.get("search_paths", [])]

    final_snapshot = snapshot
    if final_snapshot is None and "snapshot" in toml_config:
      final_snapshot = _relative(toml_config["snapshot"])

    return cls(
      provider=provider or toml_config.get("provider", ProviderKind.RUNTIME),
      seeds=final_seeds,
      primitives=final_primitives,
      search_paths=final_paths,
      snapshot=final_snapshot,
      output_format=output_format or toml_config.get("output_format", OutputFormat.TEXT),
      strict=strict if strict is not None else toml_config.get("strict", False),
      docstring_style=toml_config.get("docstring_style", "google"),
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
