"""
Exceptions raised by the closure engine and the introspection providers.
"""


class ClosureError(Exception):
  """Base class for failures while computing an API closure."""


class TypeNotFoundError(ClosureError, LookupError):
  """
  Raised when a type name does not correspond to any known type.

  Attributes:
      name (str): The qualified name that failed to resolve.
  """

  def __init__(self, name: str, reason: str = ""):
    self.name = name
    self.reason = reason
    message = f"Type not found: '{name}'"
    if reason:
      message = f"{message} ({reason})"
    super().__init__(message)
