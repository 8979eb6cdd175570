"""
Publishing node for the Deploy Checklist workflow.

Writes the checklist comment and gates the merge with a review.
"""

from typing import Any, Dict, Optional

from langgraph.runtime import Runtime

from app.core.logging import get_logger
from app.integrations.github import GitHubClient
from app.services.deploy_checklist.checklist import (
    BOT_MARKER,
    is_complete,
    merge_checklist,
    parse_checklist,
    render_checklist,
)
from app.services.deploy_checklist.context import Ctx
from app.services.deploy_checklist.review_manager import (
    approve_pr,
    block_pr,
    post_error_comment,
)
from app.services.deploy_checklist.state import ChecklistAgentState

logger = get_logger(__name__)

NO_RESULT_MESSAGE = "The deploy analysis failed or returned an invalid response."
EMPTY_APPROVE_MESSAGE = "No deploy checklist items needed for this PR."


async def find_bot_comment(
    github: GitHubClient, owner: str, repo: str, pr_number: int
) -> Optional[Dict[str, Any]]:
    """Return the bot's checklist comment on the PR, if one exists."""
    comments = await github.list_issue_comments(owner, repo, pr_number)
    for comment in comments:
        body = comment.get("body") or ""
        user_type = (comment.get("user") or {}).get("type")
        if BOT_MARKER in body and user_type == "Bot":
            return comment
    return None


async def _upsert_comment(
    github: GitHubClient,
    state: ChecklistAgentState,
    existing: Optional[Dict[str, Any]],
    body: str,
) -> int:
    if existing is not None:
        await github.update_issue_comment(state.owner, state.repo, existing["id"], body)
        logger.info("Updated checklist comment %s", existing["id"])
        return existing["id"]
    created = await github.create_issue_comment(
        state.owner, state.repo, state.pr_number, body
    )
    logger.info(
        "Posted checklist on %s/%s#%s", state.owner, state.repo, state.pr_number
    )
    return created.get("id")


async def publish_checklist(state: ChecklistAgentState, runtime: Runtime[Ctx]) -> dict:
    """
    Create or update the checklist comment, then block or approve the PR.

    - No analysis: post an error notice and leave the PR unblocked.
    - Empty analysis: refresh an existing comment (or post one if the repo asks
      for it) and approve.
    - Otherwise merge with the previous checklist so checked boxes survive,
      and block while anything is left unchecked.
    """
    github = runtime.context.github
    owner, repo, pr_number = state.owner, state.repo, state.pr_number
    analysis = state.analysis

    if analysis is None:
        await post_error_comment(github, owner, repo, pr_number, NO_RESULT_MESSAGE)
        return {"outcome": "error"}

    existing = await find_bot_comment(github, owner, repo, pr_number)
    sha = state.pr.head_sha

    if not analysis.items:
        comment_id = None
        if existing is not None or state.repo_config.settings.post_empty_checklist:
            comment_id = await _upsert_comment(
                github, state, existing, render_checklist(analysis, sha)
            )
        await approve_pr(github, owner, repo, pr_number, EMPTY_APPROVE_MESSAGE)
        return {"outcome": "approved", "comment_id": comment_id}

    old_state = parse_checklist(existing.get("body") or "") if existing else None
    body = merge_checklist(old_state, analysis, sha)
    comment_id = await _upsert_comment(github, state, existing, body)

    if is_complete(body):
        await approve_pr(github, owner, repo, pr_number)
        return {"outcome": "approved", "comment_id": comment_id}

    unchecked = parse_checklist(body).unchecked_count
    await block_pr(
        github,
        owner,
        repo,
        pr_number,
        f"Deploy checklist has {unchecked} unchecked item(s). "
        "Please address them in the checklist comment before merging.",
    )
    return {"outcome": "blocked", "comment_id": comment_id}
