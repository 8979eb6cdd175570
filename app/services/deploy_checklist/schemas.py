"""
Analysis result and checklist models for the Deploy Checklist agent.

- ChecklistItem / OpenConcern / AnalysisResult: the structured-output schema
  the model must return. Validation failures are hard failures.
- ChecklistItemState / ChecklistState: a checklist comment parsed back from text.
- PRMetadata: pull request facts handed to the prompt.
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

Priority = Literal["high", "medium", "low"]

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace, newlines included, to single spaces."""
    return " ".join(text.split())


# -----------------------------------------------------------------------------
# Structured output (model reply)
# -----------------------------------------------------------------------------
class ChecklistItem(BaseModel):
    """One actionable deploy check for this pull request."""

    rule_id: str = Field(min_length=1, description="Id of the rule this item comes from.")
    check: str = Field(
        min_length=1, description="The specific check, used as the item title."
    )
    description: str = Field(
        description="What to verify in this PR, referencing concrete files or symbols."
    )
    reasoning: str = Field(description="One-line rationale for including the item.")
    priority: Priority = Field(description="high, medium or low.")

    @field_validator("rule_id", "check", mode="before")
    @classmethod
    def _single_line(cls, value):
        # Rendered as one markdown line; blank text would leave the item unparsable
        if isinstance(value, str):
            return normalize_text(value)
        return value

    @property
    def identity(self) -> Tuple[str, str]:
        """Key used to carry checked state across analyses."""
        return (
            normalize_text(self.rule_id).replace("`", "'"),
            normalize_text(self.description),
        )


class OpenConcern(BaseModel):
    """A deploy risk spotted in a file no rule covered."""

    file: str = Field(description="Path of the uncovered file.")
    concern: str = Field(description="Free-text description of the risk.")


class AnalysisResult(BaseModel):
    """Deploy checklist analysis for a pull request."""

    items: List[ChecklistItem] = Field(
        description="Checklist items genuinely relevant to this diff."
    )
    summary: str = Field(description="One-sentence deploy risk summary.")
    uncovered_files: List[str] = Field(
        default_factory=list,
        description="Changed files that no active rule covered.",
    )
    open_concerns: List[OpenConcern] = Field(
        default_factory=list,
        description="Deploy risks found in uncovered files.",
    )


# -----------------------------------------------------------------------------
# Parsed checklist comment
# -----------------------------------------------------------------------------
class ChecklistItemState(BaseModel):
    item: ChecklistItem
    checked: bool = False


class ChecklistState(BaseModel):
    """Checklist recovered from a rendered comment."""

    sha: str = Field(default="", description="Commit the checklist was rendered for.")
    summary: Optional[str] = None
    items: List[ChecklistItemState] = Field(default_factory=list)

    @property
    def all_complete(self) -> bool:
        return all(state.checked for state in self.items)

    @property
    def unchecked_count(self) -> int:
        return sum(1 for state in self.items if not state.checked)


# -----------------------------------------------------------------------------
# Pull request facts
# -----------------------------------------------------------------------------
class PRMetadata(BaseModel):
    title: str = ""
    body: str = ""
    base_branch: str = ""
    head_sha: str = ""
    author: str = ""
    is_draft: bool = False
    files_changed: List[str] = Field(default_factory=list)
