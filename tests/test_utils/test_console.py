"""
Tests for the Console Proxy and Logging Helpers.

Verifies:
1. Proxy delegation and backend injection (`set_console`).
2. The log_* wrappers and their prefixes.
3. Verbosity switching for debug traces.
"""

import logging

from rich.console import Console

from api_closure.utils.console import (
  console,
  get_console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
  set_verbose,
)


def test_console_proxy_forwards_to_backend():
  assert callable(console.print)
  assert hasattr(console, "export_text")
  assert isinstance(get_console(), Console)
  assert console.width > 0


def test_injected_console_captures_logs():
  capture = Console(record=True, width=200)
  set_console(capture)

  log_info("Computing closure")
  log_success("Saved snapshot")
  log_warning("Treating 'x.Y' as opaque")
  log_error("Type not found")

  output = capture.export_text()
  assert "Computing closure" in output
  assert "✅ Saved snapshot" in output
  assert "⚠️" in output
  assert "❌ Type not found" in output


def test_markup_in_messages_is_rendered():
  capture = Console(record=True, width=200)
  set_console(capture)

  log_info("Seed [type]pkg.Item[/type]")

  output = capture.export_text()
  assert "Seed pkg.Item" in output
  assert "[type]" not in output


def test_reset_creates_fresh_backend():
  temp = Console()
  set_console(temp)
  assert get_console() is temp

  reset_console()

  assert get_console() is not temp


def test_logging_wrappers_default_to_stdout(capsys):
  reset_console()

  log_info("InfoText")
  log_error("ErrorText")

  captured = capsys.readouterr()
  assert "InfoText" in captured.out
  assert "ErrorText" in captured.out


def test_set_verbose_toggles_debug():
  set_verbose(True)
  assert logging.getLogger().level == logging.DEBUG

  set_verbose(False)
  assert logging.getLogger().level == logging.INFO
