"""
Diff budgeting.

Fits an oversized unified diff into a character budget for the model.
Sections of files claimed by a rule are placed first and are never dropped
entirely; remaining files fill what is left in their original order, and
the ones that do not fit are omitted and listed in a trailing comment block.
"""

from typing import Iterable, List

from pydantic import BaseModel, Field

from app.services.deploy_checklist.diff import DiffSection, split_sections
from app.services.deploy_checklist.rules import Rule, path_matches_any

PRIORITY_SECTION_SHARE = 0.5
PRIORITY_FILL_LIMIT = 0.9
OVERSIZED_SECTION_LINES = 100
LATE_SECTION_LINES = 50
TRUNCATION_NOTE = "... (truncated)"


class TruncationResult(BaseModel):
    diff: str
    truncated: bool = False
    omitted: List[str] = Field(default_factory=list)


def _is_prioritized(filename: str, rules: Iterable[Rule]) -> bool:
    return any(path_matches_any(filename, rule.coverage_patterns) for rule in rules)


def _head(content: str, max_lines: int, max_chars: int) -> str:
    """Keep at most *max_lines* lines within *max_chars* characters, note included.

    The header line always survives so the section stays identifiable.
    """
    lines = content.split("\n")
    clipped = "\n".join(lines[:max_lines])
    if clipped == content and len(content) <= max_chars:
        return content
    room = max_chars - len(TRUNCATION_NOTE) - 1
    if len(clipped) > room:
        clipped = clipped[: max(room, len(lines[0]))]
    return f"{clipped}\n{TRUNCATION_NOTE}"


def _omitted_block(filenames: List[str]) -> str:
    listing = "\n".join(f"# - {name}" for name in filenames)
    return f"# Files omitted from diff (not matching rule triggers):\n{listing}"


def truncate_diff(diff: str, max_chars: int, rules: List[Rule]) -> TruncationResult:
    """
    Fit *diff* within *max_chars*.

    Args:
        diff: Raw unified diff.
        max_chars: Character budget.
        rules: Rules whose primary and companion globs mark a file as prioritized.

    Returns:
        TruncationResult. ``truncated`` is True whenever the input exceeded the
        budget, even if every section still fit after reorganisation.
    """
    if len(diff) <= max_chars:
        return TruncationResult(diff=diff)

    prioritized: List[DiffSection] = []
    background: List[DiffSection] = []
    for section in split_sections(diff):
        if _is_prioritized(section.filename, rules):
            prioritized.append(section)
        else:
            background.append(section)

    parts: List[str] = []
    used = 0
    section_cap = int(max_chars * PRIORITY_SECTION_SHARE)

    for section in prioritized:
        content = section.content
        if len(content) > section_cap:
            content = _head(content, OVERSIZED_SECTION_LINES, section_cap)

        if used + len(content) + 1 >= max_chars * PRIORITY_FILL_LIMIT:
            content = _head(section.content, LATE_SECTION_LINES, max_chars - used - 1)

        parts.append(content)
        used += len(content) + 1

    omitted: List[str] = []
    for section in background:
        if used + len(section.content) + 1 <= max_chars:
            parts.append(section.content)
            used += len(section.content) + 1
        else:
            omitted.append(section.filename)

    if omitted:
        parts.append(_omitted_block(omitted))

    return TruncationResult(diff="\n".join(parts), truncated=True, omitted=omitted)
