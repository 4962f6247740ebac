"""
Tests for the CLI commands ('closure', 'snapshot', 'seeds').

Verifies:
1. Exit codes for successful runs, resolution failures and invalid configuration.
2. Text and JSON report output (terminal and file).
3. Snapshot capture followed by a snapshot-provider closure.
"""

import json
from unittest.mock import patch

import pytest

from api_closure.cli.__main__ import main
from api_closure.cli.handlers.closure import handle_closure, handle_seeds
from api_closure.seeds import language_seed_names


def test_closure_text_report(sample_package, recording_console):
  ret = main(["closure", "closure_sample.model.Shape"])

  output = recording_console.export_text()
  assert ret == 0
  assert "1 types are named directly by the seeds." in output
  assert "With dependencies," in output
  assert "Namespaces" in output
  assert "closure_sample.model.Color" in output
  assert "closure_sample.errors" in output


def test_closure_json_report_to_file(sample_package, tmp_path, recording_console):
  out = tmp_path / "reports" / "closure.json"

  ret = main(["closure", "closure_sample.model.Canvas", "--format", "json", "--out", str(out)])

  assert ret == 0
  data = json.loads(out.read_text(encoding="utf-8"))
  assert data["seed_count"] == 1
  assert data["type_count"] == len(data["types"])
  assert data["namespace_count"] == len(data["namespaces"])
  assert "closure_sample.model.Canvas.Layer" in data["types"]
  assert data["types"] == sorted(data["types"])
  assert "Report written" in recording_console.export_text()


def test_unknown_seed_fails(recording_console):
  ret = main(["closure", "no_such_module_xyz.Thing"])

  output = recording_console.export_text()
  assert ret == 1
  assert "no_such_module_xyz.Thing" in output
  assert "Types" not in output


def test_snapshot_provider_requires_file(recording_console):
  ret = main(["closure", "builtins.object", "--provider", "snapshot"])

  assert ret == 1
  assert "requires a snapshot file" in recording_console.export_text()


def test_snapshot_provider_missing_file(tmp_path, recording_console):
  ret = handle_closure(["builtins.object"], provider="snapshot", snapshot=tmp_path / "missing.json")

  assert ret == 1


def test_provider_fault_during_traversal_fails(sample_package, recording_console):
  with patch(
    "api_closure.discovery.runtime.RuntimeIntrospector.enclosing_type_of",
    side_effect=ImportError("module vanished"),
  ):
    ret = main(["closure", "closure_sample.model.Shape"])

  output = recording_console.export_text()
  assert ret == 1
  assert "ImportError: module vanished" in output
  assert "Types" not in output


def test_invalid_provider_in_config(tmp_path, recording_console):
  (tmp_path / "pyproject.toml").write_text('[tool.api_closure]\nprovider = "telepathy"\n', encoding="utf-8")

  with patch("api_closure.config.Path.cwd", return_value=tmp_path):
    ret = handle_closure(["builtins.object"])

  assert ret == 1
  assert "Invalid configuration" in recording_console.export_text()


def test_snapshot_then_replay(sample_package, tmp_path, recording_console):
  snapshot = tmp_path / "universe.json"
  direct = tmp_path / "direct.json"
  replayed = tmp_path / "replayed.json"

  assert main(["snapshot", "closure_sample.model.Canvas", "--out", str(snapshot)]) == 0
  assert main(["closure", "closure_sample.model.Canvas", "--format", "json", "--out", str(direct)]) == 0
  ret = main(
    [
      "closure",
      "closure_sample.model.Canvas",
      "--provider",
      "snapshot",
      "--snapshot",
      str(snapshot),
      "--format",
      "json",
      "--out",
      str(replayed),
    ]
  )

  assert ret == 0
  assert json.loads(replayed.read_text()) == json.loads(direct.read_text())


def test_snapshot_rejects_snapshot_provider(tmp_path, recording_console):
  with pytest.raises(SystemExit):
    main(["snapshot", "builtins.object", "--out", str(tmp_path / "x.json"), "--provider", "snapshot"])


@patch("api_closure.cli.handlers.closure.language_seed_names", return_value=["builtins.object", "builtins.int"])
def test_catalog_is_the_default_seed_set(mock_names, recording_console):
  ret = main(["closure"])

  output = recording_console.export_text()
  assert ret == 0
  assert "2 types are named directly by the seeds." in output
  mock_names.assert_called()


def test_seeds_command(recording_console):
  ret = handle_seeds()

  output = recording_console.export_text()
  assert ret == 0
  for name in language_seed_names():
    assert name in output


def test_verbose_flag_sets_debug(recording_console):
  with patch("api_closure.cli.__main__.set_verbose") as mock_verbose:
    main(["-v", "seeds"])

  mock_verbose.assert_called_once_with(True)


def test_version(capsys):
  with pytest.raises(SystemExit) as exc:
    main(["--version"])

  assert exc.value.code == 0
  assert "0.1.0" in capsys.readouterr().out
