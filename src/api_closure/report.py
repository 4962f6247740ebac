"""
Closure Reports.

:class:`ClosureReport` is the printable summary of a closure: how many seeds
it started from, how many types, namespaces and members it reached, and the
sorted names of the namespaces and types. It renders as plain text (for the
terminal) or JSON (for tooling).
"""

from typing import List

from pydantic import BaseModel, Field

from api_closure.core.engine import ClosureEngine


class ClosureReport(BaseModel):
  """
  Summary of a computed closure.
  """

  seed_count: int = Field(description="Distinct seed types.")
  type_count: int
  namespace_count: int
  member_count: int
  namespaces: List[str] = Field(default_factory=list, description="Namespace names, sorted.")
  types: List[str] = Field(default_factory=list, description="Qualified type names, sorted.")

  @classmethod
  def from_engine(cls, engine: ClosureEngine) -> "ClosureReport":
    """
    Builds the report of a completed closure.

    Args:
        engine (ClosureEngine): The computed closure.

    Returns:
        ClosureReport: Counts and sorted names.
    """
    return cls(
      seed_count=len(engine.seeds),
      type_count=len(engine.classes_and_interfaces()),
      namespace_count=len(engine.packages()),
      member_count=len(engine.members()),
      namespaces=sorted(ns.name for ns in engine.packages()),
      types=sorted(t.qualified_name for t in engine.classes_and_interfaces()),
    )

  def render_text(self) -> str:
    """
    Renders the report the way the CLI prints it.

    Returns:
        str: A headline, the namespace list and the type list.
    """
    lines = [
      f"{self.seed_count} types are named directly by the seeds.",
      f"With dependencies, {self.type_count} types in {self.namespace_count} namespaces are required, "
      f"totalling {self.member_count} members",
      "",
      "Namespaces",
      "",
      *self.namespaces,
      "",
      "Types",
      "",
      *self.types,
    ]
    return "\n".join(lines)

  def render_json(self) -> str:
    return self.model_dump_json(indent=2)
