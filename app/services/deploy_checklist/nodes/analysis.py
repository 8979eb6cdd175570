"""Analysis nodes for the Deploy Checklist workflow."""

from langgraph.runtime import Runtime

from app.core.logging import get_logger
from app.services.deploy_checklist.budget import truncate_diff
from app.services.deploy_checklist.classifier import classify
from app.services.deploy_checklist.context import Ctx
from app.services.deploy_checklist.prompts import build_user_prompt
from app.services.deploy_checklist.state import ChecklistAgentState

logger = get_logger(__name__)


def classify_change(state: ChecklistAgentState) -> dict:
    """Pick the rules that apply to this change set."""
    result = classify(state.changed_files, state.diff, state.repo_config.catalog)
    logger.info(
        "Active rules for %s/%s#%s: %s (%d uncovered file(s))",
        state.owner,
        state.repo,
        state.pr_number,
        ", ".join(rule.id for rule in result.active) or "none",
        len(result.uncovered),
    )
    return {"active_rules": result.active, "uncovered_files": result.uncovered}


def budget_diff(state: ChecklistAgentState) -> dict:
    """Fit the diff into the repository's size budget, rule-matched files first."""
    result = truncate_diff(
        state.diff, state.repo_config.settings.max_diff_size, state.focus_rules
    )
    if result.truncated:
        logger.info(
            "Diff truncated to %d chars, %d file(s) omitted",
            len(result.diff),
            len(result.omitted),
        )
    return {
        "budgeted_diff": result.diff,
        "diff_truncated": result.truncated,
        "omitted_files": result.omitted,
    }


async def request_analysis(state: ChecklistAgentState, runtime: Runtime[Ctx]) -> dict:
    """Ask the model for the checklist. A None analysis means no result."""
    payload = build_user_prompt(
        state.repo_config,
        state.pr,
        state.budgeted_diff,
        state.active_rules,
        state.uncovered_files,
        state.file_contents,
        truncated=state.diff_truncated,
    )
    analysis = await runtime.context.requester.request(payload)
    return {"analysis": analysis}
