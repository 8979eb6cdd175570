"""
PR I/O nodes for the Deploy Checklist workflow.

These nodes read the diff and rule-requested file bodies from GitHub.
"""

from typing import Dict, List

from langgraph.runtime import Runtime

from app.core.logging import get_logger
from app.services.deploy_checklist.context import Ctx
from app.services.deploy_checklist.diff import extract_changed_paths
from app.services.deploy_checklist.rules import Rule, path_matches_any
from app.services.deploy_checklist.state import ChecklistAgentState

logger = get_logger(__name__)

MAX_FULL_FILES = 5
MAX_LINES_PER_FILE = 500


async def fetch_diff(state: ChecklistAgentState, runtime: Runtime[Ctx]) -> dict:
    """Fetch the PR's unified diff and the paths it touches."""
    diff = await runtime.context.github.get_pr_diff(
        state.owner, state.repo, state.pr_number
    )
    changed_files = extract_changed_paths(diff)
    logger.info(
        "Fetched diff for %s/%s#%s: %d chars, %d file(s)",
        state.owner,
        state.repo,
        state.pr_number,
        len(diff),
        len(changed_files),
    )
    pr = state.pr.model_copy(update={"files_changed": changed_files})
    return {"diff": diff, "changed_files": changed_files, "pr": pr}


def _full_file_patterns(rules: List[Rule]) -> List[str]:
    return [
        pattern
        for rule in rules
        if rule.trigger.include_full_files
        for pattern in rule.trigger.paths
    ]


def _cap_lines(content: str, max_lines: int = MAX_LINES_PER_FILE) -> str:
    lines = content.split("\n")
    if len(lines) <= max_lines:
        return content
    remaining = len(lines) - max_lines
    return "\n".join(lines[:max_lines]) + f"\n... (truncated, {remaining} more lines)"


async def fetch_full_files(state: ChecklistAgentState, runtime: Runtime[Ctx]) -> dict:
    """
    Fetch full bodies of changed files that focus rules asked to see.

    At most MAX_FULL_FILES files, each cut to MAX_LINES_PER_FILE lines. Files
    missing at the head commit (deleted) are skipped; other errors propagate.
    """
    patterns = _full_file_patterns(state.focus_rules)
    if not patterns:
        return {}

    targets = [f for f in state.changed_files if path_matches_any(f, patterns)]
    contents: Dict[str, str] = {}
    for path in targets[:MAX_FULL_FILES]:
        content = await runtime.context.github.get_file_content(
            state.owner, state.repo, path, state.pr.head_sha
        )
        if content is None:
            continue
        contents[path] = _cap_lines(content)

    return {"file_contents": contents}
