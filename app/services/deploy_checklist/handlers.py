"""
Event handlers for the Deploy Checklist Bot.

pull_request events schedule an analysis run of the graph; edited checklist
comments re-evaluate the merge gate from the checkbox state alone.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from app.core.config import settings
from app.core.debounce import Debouncer, debounce_key, get_debouncer
from app.core.logging import get_logger
from app.integrations.github import GitHubClient, get_access_token
from app.services.deploy_checklist.analyzer import AnalysisRequester
from app.services.deploy_checklist.checklist import BOT_MARKER, parse_checklist
from app.services.deploy_checklist.context import Ctx
from app.services.deploy_checklist.graph import deploy_checklist_graph
from app.services.deploy_checklist.repo_config import (
    ChecklistSettings,
    RepoConfig,
    load_repo_config,
)
from app.services.deploy_checklist.review_manager import (
    approve_pr,
    block_pr,
    post_error_comment,
)
from app.services.deploy_checklist.schemas import PRMetadata

logger = get_logger(__name__)

# Analysed at once; synchronize is debounced so rapid pushes collapse into one run.
IMMEDIATE_ACTIONS = frozenset({"opened", "reopened", "ready_for_review"})
DEBOUNCED_ACTIONS = frozenset({"synchronize"})

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during analysis."


class PullRequestEvent(BaseModel):
    action: str
    owner: str
    repo: str
    pr_number: int
    installation_id: Optional[int] = None
    pr: PRMetadata


def read_pr_from_webhook(payload: Dict[str, Any]) -> Optional[PullRequestEvent]:
    """
    Extract the pull request facts from a pull_request webhook payload.

    Returns None if the payload lacks the repository or the PR.
    """
    repo_data = payload.get("repository") or {}
    pr_data = payload.get("pull_request") or {}
    if not pr_data or not repo_data:
        return None

    owner = (repo_data.get("owner") or {}).get("login") or repo_data.get(
        "full_name", ""
    ).split("/")[0]
    pr_number = int(pr_data.get("number") or payload.get("number") or 0)
    if not owner or not pr_number:
        return None

    return PullRequestEvent(
        action=payload.get("action", ""),
        owner=owner,
        repo=repo_data.get("name", ""),
        pr_number=pr_number,
        installation_id=(payload.get("installation") or {}).get("id"),
        pr=PRMetadata(
            title=pr_data.get("title") or "",
            body=pr_data.get("body") or "",
            base_branch=(pr_data.get("base") or {}).get("ref", ""),
            head_sha=(pr_data.get("head") or {}).get("sha", ""),
            author=(pr_data.get("user") or {}).get("login", ""),
            is_draft=bool(pr_data.get("draft", False)),
        ),
    )


def skip_reason(pr: PRMetadata, checklist_settings: ChecklistSettings) -> Optional[str]:
    """Return why the repository's settings exclude this PR, or None to analyse it."""
    if pr.is_draft and not checklist_settings.analyze_drafts:
        return "Draft PR, skipped"
    if pr.author in checklist_settings.ignore_authors:
        return f"Author {pr.author} is ignored"
    if (
        checklist_settings.target_branches
        and pr.base_branch not in checklist_settings.target_branches
    ):
        return f"Base branch {pr.base_branch} is not a target branch"
    return None


async def github_client_for(installation_id: Optional[int]) -> GitHubClient:
    """Build a client authenticated as the app installation, when there is one."""
    token = None
    if installation_id:
        token = await get_access_token(installation_id)
    return GitHubClient(token)


async def run_checklist_workflow(
    event: PullRequestEvent,
    repo_config: RepoConfig,
    github: GitHubClient,
    requester: Optional[AnalysisRequester] = None,
) -> Dict[str, Any]:
    """
    Run the checklist graph for one PR.

    Any failure is reported on the PR and leaves it unblocked.
    """
    try:
        final_state = await deploy_checklist_graph.ainvoke(
            {
                "owner": event.owner,
                "repo": event.repo,
                "pr_number": event.pr_number,
                "pr": event.pr,
                "repo_config": repo_config,
            },
            context=Ctx(github=github, requester=requester or AnalysisRequester()),
        )
        logger.info(
            "Checklist run for %s/%s#%s finished: %s",
            event.owner,
            event.repo,
            event.pr_number,
            final_state.get("outcome"),
        )
        return final_state
    except Exception as e:
        logger.error(
            "Checklist run for %s/%s#%s failed: %s",
            event.owner,
            event.repo,
            event.pr_number,
            e,
            exc_info=True,
        )
        await post_error_comment(
            github, event.owner, event.repo, event.pr_number, UNEXPECTED_ERROR_MESSAGE
        )
        return {"outcome": "error"}


async def handle_pull_request(
    payload: Dict[str, Any],
    github: Optional[GitHubClient] = None,
    debouncer: Optional[Debouncer] = None,
    requester: Optional[AnalysisRequester] = None,
) -> Dict[str, Any]:
    """
    Handle a pull_request webhook.

    Loads the repository config at the head commit, applies its filters and
    schedules the analysis. Returns the webhook response body right away.
    """
    event = read_pr_from_webhook(payload)
    if event is None:
        return {"message": "Malformed pull_request payload, ignored"}

    if event.action not in IMMEDIATE_ACTIONS | DEBOUNCED_ACTIONS:
        return {"message": "Action ignored", "action": event.action}

    if github is None:
        github = await github_client_for(event.installation_id)

    repo_config, warning = await load_repo_config(
        github, event.owner, event.repo, event.pr.head_sha
    )
    if warning:
        try:
            await github.create_issue_comment(
                event.owner, event.repo, event.pr_number, warning
            )
        except Exception as e:
            logger.error("Failed to post config warning: %s", e)

    reason = skip_reason(event.pr, repo_config.settings)
    if reason:
        logger.info("%s/%s#%s: %s", event.owner, event.repo, event.pr_number, reason)
        return {"message": reason}

    delay = 0.0 if event.action in IMMEDIATE_ACTIONS else settings.ANALYSIS_DEBOUNCE_SECONDS
    key = debounce_key(event.owner, event.repo, event.pr_number)

    async def job() -> None:
        await run_checklist_workflow(event, repo_config, github, requester)

    (debouncer or get_debouncer()).schedule(key, job, delay)
    logger.info("Scheduled analysis for %s in %.1fs", key, delay)
    return {"message": "Analysis scheduled", "key": key, "delay": delay}


async def handle_issue_comment_edited(
    payload: Dict[str, Any], github: Optional[GitHubClient] = None
) -> Dict[str, Any]:
    """
    Handle an edited comment: when a user ticks boxes in the checklist,
    approve the PR once every item is checked, otherwise keep it blocked.
    """
    if payload.get("action") != "edited":
        return {"message": "Action ignored", "action": payload.get("action")}

    body = (payload.get("comment") or {}).get("body") or ""
    if BOT_MARKER not in body:
        return {"message": "Not a checklist comment, ignored"}

    issue = payload.get("issue") or {}
    if not issue.get("pull_request"):
        return {"message": "Comment is not on a pull request, ignored"}

    # The bot's own rewrites already decided the review
    if (payload.get("sender") or {}).get("type") == "Bot":
        return {"message": "Bot edit, ignored"}

    state = parse_checklist(body)
    if state is None:
        logger.warning("Could not parse checklist comment %s", payload["comment"].get("id"))
        return {"message": "Checklist could not be parsed, ignored"}

    repo_data = payload.get("repository") or {}
    owner = (repo_data.get("owner") or {}).get("login", "")
    repo = repo_data.get("name", "")
    pr_number = int(issue.get("number", 0))

    if github is None:
        github = await github_client_for((payload.get("installation") or {}).get("id"))

    if state.all_complete:
        await approve_pr(github, owner, repo, pr_number)
        return {"message": "Checklist complete, PR approved"}

    await block_pr(
        github,
        owner,
        repo,
        pr_number,
        f"Deploy checklist has {state.unchecked_count} unchecked item(s). "
        "Please address them in the checklist comment before merging.",
    )
    return {"message": "Checklist incomplete, PR blocked"}
