"""
Rule models for the deploy checklist catalog.

Pure data models, validated on load. Parsed from the built-in YAML catalog
or from a repository's config file, never stored in a database.
"""

import re
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.services.deploy_checklist.rules.matching import compile_glob


class ContentPattern(BaseModel):
    """A regular expression searched for anywhere in the raw diff."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(description="Python regular expression.")
    ignore_case: bool = Field(
        default=False, description="Match without regard to letter case."
    )

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data):
        # A bare string in YAML means a case-sensitive pattern
        if isinstance(data, str):
            return {"pattern": data}
        return data

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value


class Trigger(BaseModel):
    """Matching condition that activates a rule."""

    model_config = ConfigDict(frozen=True)

    paths: Tuple[str, ...] = Field(
        default_factory=tuple, description="Globs matched against changed paths."
    )
    content: Tuple[ContentPattern, ...] = Field(
        default_factory=tuple, description="Regexes matched against the diff text."
    )
    missing_companion: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Globs for files expected alongside `paths`; their absence fires the rule.",
    )
    include_full_files: bool = Field(
        default=False,
        description="Send full bodies of files matching `paths` to the model.",
    )

    @field_validator("paths", "missing_companion")
    @classmethod
    def _globs_compile(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for pattern in value:
            try:
                compile_glob(pattern)
            except re.error as e:
                raise ValueError(f"invalid glob {pattern!r}: {e}") from e
        return value


class Rule(BaseModel):
    """
    A named, pattern-triggered bundle of deploy checks.

    Built-in rules carry `context`, domain knowledge handed to the model when
    the rule is active. User rules may add their own.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique rule identifier.")
    description: str = Field(description="Human readable description.")
    trigger: Trigger = Field(default_factory=Trigger)
    checks: Tuple[str, ...] = Field(description="Natural-language checks, in order.")
    context: Optional[str] = Field(
        default=None, description="Domain knowledge for the model."
    )

    @property
    def coverage_patterns(self) -> Tuple[str, ...]:
        """Primary and companion globs; a matching file is 'covered' by this rule."""
        return self.trigger.paths + self.trigger.missing_companion
