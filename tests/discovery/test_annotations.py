"""
Tests for live annotation flattening and docstring 'Raises' extraction.
"""

import collections
import typing
from typing import Annotated, Any, Callable, ClassVar, Dict, List, Literal, Optional, Tuple, TypeVar, Union

import pytest

from api_closure.discovery.annotations import AnnotationFlattener, qualified_name_of, raised_names
from api_closure.discovery.runtime import RuntimeIntrospector


class Node:
  pass


class Leaf(Node):
  pass


Bounded = TypeVar("Bounded", bound=Node)
Constrained = TypeVar("Constrained", int, str)
Free = TypeVar("Free")


@pytest.fixture
def flatten():
  flattener = AnnotationFlattener(RuntimeIntrospector().describe)

  def _flatten(annotation, owner=None):
    return [t.qualified_name for t in flattener.flatten(annotation, globals(), {}, owner)]

  return _flatten


NODE = f"{__name__}.Node"
LEAF = f"{__name__}.Leaf"


@pytest.mark.parametrize(
  "annotation, expected",
  [
    (Node, [NODE]),
    (Optional[Node], [NODE, "builtins.NoneType"]),
    (Union[Node, Leaf], [NODE, LEAF]),
    (Node | Leaf, [NODE, LEAF]),
    (List[Node], [f"{NODE}[]"]),
    (list[list[Leaf]], [f"{LEAF}[][]"]),
    (Tuple[Node, ...], [f"{NODE}[]"]),
    (Tuple[Node, Leaf], ["builtins.tuple", NODE, LEAF]),
    (Dict[str, Node], ["builtins.dict", "builtins.str", NODE]),
    (Annotated[Node, "meta"], [NODE]),
    (ClassVar[Leaf], [LEAF]),
    (Literal["a", 1], ["builtins.str", "builtins.int"]),
    (Callable[[Node], Leaf], ["collections.abc.Callable", NODE, LEAF]),
    (Bounded, [NODE]),
    (Constrained, ["builtins.int", "builtins.str"]),
    (Free, ["builtins.object"]),
    (Any, ["typing.Any"]),
    (None, ["builtins.NoneType"]),
    (typing.NoReturn, []),
    ("Leaf", [LEAF]),
    ("Optional[Node]", [NODE, "builtins.NoneType"]),
    ("tuple[Leaf, ...]", [f"{LEAF}[]"]),
    (typing.ForwardRef("Leaf"), [LEAF]),
  ],
)
def test_flatten(flatten, annotation, expected):
  assert flatten(annotation) == expected


def test_self_is_the_owner(flatten):
  self_form = getattr(typing, "Self", None)
  if self_form is None:
    pytest.skip("typing.Self requires Python 3.11")
  assert flatten(self_form, owner=Leaf) == [LEAF]


def test_unresolvable_forward_reference_is_dropped(flatten):
  assert flatten("DoesNotExist") == []


def test_ordered_dict_generic_keeps_origin(flatten):
  assert flatten(collections.OrderedDict[str, int]) == [
    "collections.OrderedDict",
    "builtins.str",
    "builtins.int",
  ]


def test_qualified_name_of_nested_class():
  class Outer:
    class Inner:
      pass

  assert qualified_name_of(int) == "builtins.int"
  assert qualified_name_of(Outer.Inner).endswith("Outer.Inner")


def test_raised_names_google_style():
  doc = """Does things.

Args:
    x: A value.

Raises:
    ValueError: If x is negative.
    pkg.errors.CustomError: On custom failure.
        Continued description: with a colon.
    ValueError: Again.

Returns:
    int: The result.
"""
  assert raised_names(doc) == ["ValueError", "pkg.errors.CustomError"]


def test_raised_names_sphinx_style():
  doc = "Does things.\n\n:param x: A value.\n:raises KeyError: If missing.\n:raise OSError: On I/O failure."
  assert raised_names(doc, "sphinx") == ["KeyError", "OSError"]


def test_raised_names_numpy_style():
  doc = "Does things.\n\nRaises\n------\nKeyError\n    If missing.\nOSError\n    On I/O failure.\n"
  assert raised_names(doc, "numpy") == ["KeyError", "OSError"]
  assert raised_names(doc, "google") == []


def test_raised_names_empty():
  assert raised_names(None) == []
  assert raised_names("No sections here.") == []
