"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation, so tests capturing output never leak a recording console.
- A small on-disk sample package shared by the runtime, static and snapshot tests.
"""

import sys
import textwrap
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'api_closure' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from api_closure.utils.console import reset_console, set_console  # noqa: E402

SAMPLE_PACKAGE = "closure_sample"

SAMPLE_SOURCES = {
  "__init__.py": '''
    """Sample package for closure tests."""

    from closure_sample.model import Canvas, Shape
  ''',
  "errors.py": '''
    class ShapeError(Exception):
      """Raised for invalid shapes."""
  ''',
  "model.py": '''
    from typing import List, Optional

    from closure_sample.errors import ShapeError


    class Color:
      def __init__(self, name: str):
        self.name = name


    class Point:
      x: float
      y: float

      def __init__(self, x: float, y: float):
        self.x = x
        self.y = y


    class Secret:
      pass


    class Shape:
      """Base class of everything drawable."""

      color: Optional[Color] = None

      def area(self) -> float:
        """
        Computes the area.

        Raises:
            ShapeError: If the shape is degenerate.
        """
        raise ShapeError("degenerate")

      def _outline(self) -> List[Point]:
        return []

      def __hidden(self) -> Secret:
        return Secret()


    class Square(Shape):
      def __init__(self, side: float):
        self.side = side

      def area(self) -> float:
        return self.side * self.side


    class Canvas:
      class Layer:
        def shapes(self) -> List[Shape]:
          return []

      def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

      def layers(self) -> "tuple[Canvas.Layer, ...]":
        return ()
  ''',
}


@pytest.fixture(autouse=True)
def isolate_console():
  """Ensures console is reset to stdout after every test."""
  reset_console()
  yield
  reset_console()


@pytest.fixture
def recording_console():
  """
  Installs a recording console for output and logging.

  Returns:
      Console: Read the captured output with ``export_text()``.
  """
  capture = Console(record=True, width=200)
  set_console(capture)
  return capture


@pytest.fixture
def sample_package(tmp_path, monkeypatch):
  """
  Writes the ``closure_sample`` package to a temporary directory and makes it importable.

  Returns:
      Path: The directory containing the package (a static search path).
  """
  package_dir = tmp_path / SAMPLE_PACKAGE
  package_dir.mkdir()
  for filename, source in SAMPLE_SOURCES.items():
    (package_dir / filename).write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")

  monkeypatch.syspath_prepend(str(tmp_path))
  yield tmp_path

  for module_name in list(sys.modules):
    if module_name == SAMPLE_PACKAGE or module_name.startswith(f"{SAMPLE_PACKAGE}."):
      del sys.modules[module_name]
