"""
Tests for PR review management.
"""

import pytest

from app.services.deploy_checklist.review_manager import (
    DEFAULT_APPROVE_MESSAGE,
    approve_pr,
    block_pr,
    bot_login,
    post_error_comment,
)
from tests.conftest import FakeGitHub


def _review(review_id, login, state):
    return {"id": review_id, "user": {"login": login}, "state": state}


class FailingGitHub(FakeGitHub):
    async def create_issue_comment(self, owner, repo, issue_number, body):
        raise RuntimeError("GitHub is down")

    async def list_reviews(self, owner, repo, pr_number):
        raise RuntimeError("GitHub is down")


def test_bot_login_uses_app_slug(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "GITHUB_APP_SLUG", "my-checklist")
    assert bot_login() == "my-checklist[bot]"


class TestReviews:
    @pytest.mark.asyncio
    async def test_block_dismisses_only_own_change_requests(self):
        github = FakeGitHub(
            reviews=[
                _review(1, bot_login(), "CHANGES_REQUESTED"),
                _review(2, bot_login(), "APPROVED"),
                _review(3, "alice", "CHANGES_REQUESTED"),
            ]
        )

        await block_pr(github, "octo", "shop", 7, "2 unchecked items")

        assert github.dismissed == [1]
        assert github.created_reviews == [("REQUEST_CHANGES", "2 unchecked items")]

    @pytest.mark.asyncio
    async def test_approve_uses_default_message(self):
        github = FakeGitHub()

        await approve_pr(github, "octo", "shop", 7)

        assert github.created_reviews == [("APPROVE", DEFAULT_APPROVE_MESSAGE)]

    @pytest.mark.asyncio
    async def test_dismiss_failure_does_not_stop_review(self):
        github = FailingGitHub()

        await approve_pr(github, "octo", "shop", 7, "Looks good")

        assert github.created_reviews == [("APPROVE", "Looks good")]


class TestErrorComment:
    @pytest.mark.asyncio
    async def test_posts_non_blocking_notice(self):
        github = FakeGitHub()

        await post_error_comment(github, "octo", "shop", 7, "Model timed out.")

        body = github.created_comments[0]
        assert "Analysis could not be completed." in body
        assert "Model timed out." in body
        assert "The PR has **not** been blocked." in body
        assert github.created_reviews == []

    @pytest.mark.asyncio
    async def test_never_raises(self):
        await post_error_comment(FailingGitHub(), "octo", "shop", 7, "boom")
