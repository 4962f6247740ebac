"""
Seed Catalog of the Python Language Reference.

The types below are the ones the Python Language Reference requires by
normative text: the interpreter creates, raises or special-cases them, so no
implementation of the language can do without them. Section numbers refer to
the "Data model", "Execution model", "The import system", "Expressions",
"Simple statements" and "Compound statements" chapters of the Reference.

The list was compiled by hand and may be incomplete. A closure computed from
it is therefore a lower bound: the language may depend on more types than it
reports, but not fewer.

Names are spelled the way the Reference and the standard library document
them. Providers describe a class by its defining module and qualname, so a
closure lists ``types.FunctionType`` as ``builtins.function``.
"""

import sys
from typing import Iterable, List, Optional, Sequence, Tuple

from api_closure.core.descriptors import TypeDescriptor
from api_closure.core.provider import IntrospectionProvider

LANGUAGE_REFERENCE_TYPES: Tuple[str, ...] = (
  # The root of the class hierarchy [3.1]
  "builtins.object",
  # The type of classes, and the default metaclass [3.3.3]
  "builtins.type",
  # Numbers [3.2]
  "builtins.int",
  "builtins.bool",
  "builtins.float",
  "builtins.complex",
  # Immutable sequences [3.2]
  "builtins.str",
  "builtins.bytes",
  "builtins.tuple",
  # Mutable sequences [3.2]
  "builtins.list",
  "builtins.bytearray",
  # Set types [3.2]
  "builtins.set",
  "builtins.frozenset",
  # Mappings [3.2]
  "builtins.dict",
  # Slicing [6.3.3]
  "builtins.slice",
  # Callable types [3.2]
  "types.FunctionType",
  "types.MethodType",
  "types.BuiltinFunctionType",
  "types.GeneratorType",
  "types.CoroutineType",
  "types.AsyncGeneratorType",
  # Modules [3.2]
  "types.ModuleType",
  # Internal types [3.2]
  "types.CodeType",
  "types.FrameType",
  "types.TracebackType",
  "builtins.staticmethod",
  "builtins.classmethod",
  # Descriptors [3.3.2.2]
  "builtins.property",
  # Generic alias objects created by subscription [3.3.5]
  "types.GenericAlias",
  # Module specs [5.4.3]
  "importlib.machinery.ModuleSpec",
  # Finders and loaders [5.3]
  "importlib.abc.MetaPathFinder",
  "importlib.abc.PathEntryFinder",
  "importlib.abc.Loader",
  # The root of the exception hierarchy [4.3]
  "builtins.BaseException",
  "builtins.Exception",
  # Exceptions raised by the interpreter
  "builtins.StopIteration",  # [8.3]
  "builtins.StopAsyncIteration",  # [8.3]
  "builtins.GeneratorExit",  # [6.2.9.1]
  "builtins.AttributeError",  # [6.3.1]
  "builtins.IndexError",  # [6.3.2]
  "builtins.KeyError",  # [6.3.2]
  "builtins.NameError",  # [4.2.2]
  "builtins.UnboundLocalError",  # [4.2.2]
  "builtins.TypeError",  # [6.3.4]
  "builtins.ValueError",  # [6.7]
  "builtins.ZeroDivisionError",  # [6.7]
  "builtins.OverflowError",  # [6.8]
  "builtins.AssertionError",  # [7.3]
  "builtins.ImportError",  # [5.2]
  "builtins.ModuleNotFoundError",  # [5.2.1]
  "builtins.SyntaxError",  # [2.3]
  "builtins.RuntimeError",  # [8.8.2]
  "builtins.RecursionError",  # [4.3]
  "builtins.SystemExit",  # [4.3]
  "builtins.KeyboardInterrupt",  # [4.3]
  "builtins.MemoryError",  # [4.3]
)

if sys.version_info >= (3, 11):
  # except* clauses [8.4.2]
  LANGUAGE_REFERENCE_TYPES += ("builtins.BaseExceptionGroup", "builtins.ExceptionGroup")


def language_seed_names() -> List[str]:
  """
  Returns the qualified names of the built-in seed catalog.

  Returns:
      List[str]: Names in catalog order.
  """
  return list(LANGUAGE_REFERENCE_TYPES)


def resolve_seeds(provider: IntrospectionProvider, names: Optional[Iterable[str]] = None) -> List[TypeDescriptor]:
  """
  Resolves seed names through a provider.

  Args:
      provider: The provider that will also compute the closure.
      names: Qualified names; the built-in catalog when None.

  Returns:
      List[TypeDescriptor]: Seed descriptors, in the order given.

  Raises:
      TypeNotFoundError: If any name fails to resolve.
  """
  seed_names: Sequence[str] = list(names) if names is not None else language_seed_names()
  return [provider.resolve_by_name(name) for name in seed_names]
