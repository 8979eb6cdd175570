"""
Checklist comment rendering, parsing and reconciliation.

The rendered markdown comment on the pull request is the only place the
checklist's completion state lives. An item's identity across analyses is
its (rule id, description) pair, read straight from the text.

Layout of one item::

    - [ ] **<check>** · `<rule id>` · _<priority>_
      <description>
      _Why:_ <reasoning>
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from app.services.deploy_checklist.schemas import (
    PRIORITY_ORDER,
    AnalysisResult,
    ChecklistItem,
    ChecklistItemState,
    ChecklistState,
    normalize_text,
)

BOT_MARKER = "<!-- deploy-checklist-bot -->"
TITLE = "## Deploy Checklist"
EMPTY_NOTICE = "No deploy checklist items identified for this PR."
FOOTER = (
    "---\n"
    "<sub>Check each item once it has been handled; the PR is approved when every "
    "box is checked. Re-analyze: push a new commit.</sub>"
)

_SHA_LINE = re.compile(r"<!-- sha:(\S*) -->")
_ITEM_LINE = re.compile(
    r"^- \[(?P<mark>[ xX])\] \*\*(?P<check>.+)\*\* · `(?P<rule_id>[^`]+)` · "
    r"_(?P<priority>high|medium|low)_\s*$"
)
_BODY_INDENT = "  "
_WHY_PREFIX = "_Why:_ "


def _sorted_items(items: Sequence[ChecklistItem]) -> List[ChecklistItem]:
    # sorted() is stable: analysis order survives within a priority tier
    return sorted(items, key=lambda item: PRIORITY_ORDER[item.priority])


def _render_item(item: ChecklistItem, checked: bool) -> str:
    mark = "x" if checked else " "
    rule_id = item.identity[0]
    lines = [
        f"- [{mark}] **{normalize_text(item.check)}** · `{rule_id}` · _{item.priority}_",
        f"{_BODY_INDENT}{normalize_text(item.description)}",
    ]
    if item.reasoning.strip():
        lines.append(f"{_BODY_INDENT}{_WHY_PREFIX}{normalize_text(item.reasoning)}")
    return "\n".join(lines)


def _render_informational(result: AnalysisResult) -> Optional[str]:
    if not result.uncovered_files and not result.open_concerns:
        return None

    lines = [
        "### Needs a second look",
        "",
        "_Informational only, not part of the checklist._",
    ]
    if result.uncovered_files:
        lines += ["", "**Files without rule coverage**"]
        lines += [f"- `{path}`" for path in result.uncovered_files]
    if result.open_concerns:
        lines += ["", "**Open concerns**"]
        lines += [
            f"- `{c.file}`: {normalize_text(c.concern)}" for c in result.open_concerns
        ]
    return "\n".join(lines)


def _render(
    result: AnalysisResult, sha: str, checked: Dict[Tuple[str, str], bool]
) -> str:
    blocks = [TITLE, f"{BOT_MARKER}\n<!-- sha:{sha} -->"]

    if result.summary.strip():
        blocks.append(f"> {normalize_text(result.summary)}")

    if result.items:
        blocks.append(
            "\n\n".join(
                _render_item(item, checked.get(item.identity, False))
                for item in _sorted_items(result.items)
            )
        )
    else:
        blocks.append(EMPTY_NOTICE)

    informational = _render_informational(result)
    if informational:
        blocks.append(informational)

    blocks.append(FOOTER)
    return "\n\n".join(blocks) + "\n"


def render_checklist(result: AnalysisResult, sha: str) -> str:
    """
    Render a fresh checklist comment with every item unchecked.

    Args:
        result: Validated analysis result.
        sha: Head commit the analysis ran against.
    """
    return _render(result, sha, {})


def _finish(pending: Optional[dict], items: List[ChecklistItemState]) -> None:
    if pending is None:
        return
    try:
        item = ChecklistItem(
            rule_id=pending["rule_id"],
            check=pending["check"],
            description=pending["description"] or "",
            reasoning=pending["reasoning"] or "",
            priority=pending["priority"],
        )
    except ValidationError:
        # Hand-edited title or rule id left blank
        return
    items.append(ChecklistItemState(item=item, checked=pending["checked"]))


def parse_checklist(text: str) -> Optional[ChecklistState]:
    """
    Parse a rendered checklist comment.

    Returns:
        None when the bot marker is absent. Otherwise the recovered state;
        lines that do not parse are skipped.
    """
    if not text or BOT_MARKER not in text:
        return None

    sha_match = _SHA_LINE.search(text)
    state = ChecklistState(sha=sha_match.group(1) if sha_match else "")

    items: List[ChecklistItemState] = []
    pending: Optional[dict] = None

    for raw in text.splitlines():
        line = raw.rstrip()
        match = _ITEM_LINE.match(line)
        if match:
            _finish(pending, items)
            pending = {
                "checked": match.group("mark") in ("x", "X"),
                "check": match.group("check"),
                "rule_id": match.group("rule_id"),
                "priority": match.group("priority"),
                "description": None,
                "reasoning": None,
            }
            continue

        if pending is not None and line.startswith(_BODY_INDENT) and line.strip():
            body = line.strip()
            if body.startswith(_WHY_PREFIX):
                pending["reasoning"] = body[len(_WHY_PREFIX) :]
            elif pending["description"] is None:
                pending["description"] = body
            continue

        _finish(pending, items)
        pending = None

        if state.summary is None and not items and line.startswith("> "):
            state.summary = line[2:]

    _finish(pending, items)
    state.items = items
    return state


def is_complete(text: str) -> bool:
    """True if there is no checklist to block on or every item is checked."""
    state = parse_checklist(text)
    if state is None:
        return True
    return state.all_complete


def merge_checklist(
    old_state: Optional[ChecklistState], new_result: AnalysisResult, sha: str
) -> str:
    """
    Re-render a checklist for a new analysis, keeping the user's progress.

    Items of *new_result* whose (rule id, description) matched an item of
    *old_state* inherit its checked flag; new items start unchecked; items
    no longer present are dropped.
    """
    checked: Dict[Tuple[str, str], bool] = {}
    if old_state is not None:
        for state in old_state.items:
            checked[state.item.identity] = state.checked
    return _render(new_result, sha, checked)
