"""
Enumerations for api-closure.

Shared vocabulary used by the descriptors, the providers and the CLI.
"""

from enum import Enum


class Visibility(str, Enum):
  """
  Accessibility of a member, in the sense of who may rely on it.

  ``EXPORTED`` members are usable by any code (public names and dunders),
  ``PROTECTED`` members by subclasses only (single leading underscore), and
  ``OTHER`` covers everything else (name-mangled ``__private`` members).
  """

  EXPORTED = "exported"
  PROTECTED = "protected"
  OTHER = "other"


class MemberKind(str, Enum):
  """Kinds of members that make up a type's surface."""

  CONSTRUCTOR = "constructor"
  METHOD = "method"
  FIELD = "field"


class ProviderKind(str, Enum):
  """
  Selectable introspection back-ends.

  ``RUNTIME`` imports and inspects live classes, ``STATIC`` parses source
  with griffe, ``SNAPSHOT`` replays a captured JSON universe.
  """

  RUNTIME = "runtime"
  STATIC = "static"
  SNAPSHOT = "snapshot"


class OutputFormat(str, Enum):
  TEXT = "text"
  JSON = "json"
