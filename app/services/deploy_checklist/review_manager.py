"""
Pull request reviews and notices posted by the bot.

Blocking is a REQUEST_CHANGES review, unblocking an APPROVE review. Earlier
CHANGES_REQUESTED reviews by this app are dismissed first so they do not
stack. Human reviews are never touched.
"""

from typing import Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.integrations.github import GitHubClient

logger = get_logger(__name__)

DEFAULT_APPROVE_MESSAGE = (
    "All deploy checklist items have been addressed. Ready to merge."
)
DISMISS_MESSAGE = "Superseded by updated checklist analysis."


def bot_login() -> str:
    """Login GitHub shows for reviews created by this app."""
    return f"{settings.GITHUB_APP_SLUG}[bot]"


async def dismiss_stale_reviews(
    github: GitHubClient, owner: str, repo: str, pr_number: int
) -> None:
    """Dismiss this app's CHANGES_REQUESTED reviews. Failures are only logged."""
    login = bot_login()
    try:
        reviews = await github.list_reviews(owner, repo, pr_number)
        for review in reviews:
            author = (review.get("user") or {}).get("login")
            if author == login and review.get("state") == "CHANGES_REQUESTED":
                await github.dismiss_review(
                    owner, repo, pr_number, review["id"], DISMISS_MESSAGE
                )
    except Exception as e:
        logger.warning(
            "Failed to dismiss stale reviews on %s/%s#%s: %s", owner, repo, pr_number, e
        )


async def block_pr(
    github: GitHubClient, owner: str, repo: str, pr_number: int, body: str
) -> None:
    """Post a REQUEST_CHANGES review to block the PR from merging."""
    await dismiss_stale_reviews(github, owner, repo, pr_number)
    await github.create_review(owner, repo, pr_number, "REQUEST_CHANGES", body)
    logger.info("Blocked %s/%s#%s", owner, repo, pr_number)


async def approve_pr(
    github: GitHubClient,
    owner: str,
    repo: str,
    pr_number: int,
    body: Optional[str] = None,
) -> None:
    """Post an APPROVE review to unblock the PR."""
    await dismiss_stale_reviews(github, owner, repo, pr_number)
    await github.create_review(
        owner, repo, pr_number, "APPROVE", body or DEFAULT_APPROVE_MESSAGE
    )
    logger.info("Approved %s/%s#%s", owner, repo, pr_number)


async def post_error_comment(
    github: GitHubClient, owner: str, repo: str, pr_number: int, message: str
) -> None:
    """
    Post an error notice without blocking the PR.

    The bot must never become a merge blocker because of its own failures.
    """
    body = (
        "**Deploy Checklist Bot**: Analysis could not be completed.\n\n"
        f"{message}\n\n"
        "The PR has **not** been blocked. Please perform a manual deploy review.\n\n"
        "_This error has been logged. If it persists, check the bot configuration._"
    )
    try:
        await github.create_issue_comment(owner, repo, pr_number, body)
    except Exception as e:
        logger.error(
            "Failed to post error comment on %s/%s#%s: %s", owner, repo, pr_number, e
        )
