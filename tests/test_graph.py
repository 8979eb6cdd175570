"""
End-to-end tests of the checklist graph with fake GitHub and model.
"""

import pytest

from app.services.deploy_checklist.checklist import BOT_MARKER, render_checklist
from app.services.deploy_checklist.handlers import PullRequestEvent, run_checklist_workflow
from app.services.deploy_checklist.nodes.pr_io import MAX_FULL_FILES
from app.services.deploy_checklist.repo_config import ChecklistSettings, RepoConfig
from app.services.deploy_checklist.schemas import AnalysisResult, PRMetadata
from tests.conftest import BOT_USER, FakeGitHub, FakeRequester, make_diff, make_item

EVENT = PullRequestEvent(
    action="opened",
    owner="octo",
    repo="shop",
    pr_number=7,
    installation_id=1,
    pr=PRMetadata(
        title="Add email to users",
        base_branch="main",
        head_sha="headsha",
        author="octocat",
    ),
)

ENTITY_ITEM = make_item(
    rule_id="migration-entity",
    check="Determine if the entity/model changes require a new database migration",
    description="app/models/user.py adds an email column with no migration",
)


def _bot_comment(body, comment_id=55):
    return {"id": comment_id, "body": body, "user": dict(BOT_USER)}


class TestChecklistWorkflow:
    @pytest.mark.asyncio
    async def test_new_checklist_blocks_pr(self):
        github = FakeGitHub(
            diff=make_diff("app/models/user.py", body="+    email = Column(String)"),
            files={"app/models/user.py": "class User(Base):\n    email = Column(String)"},
        )
        requester = FakeRequester(AnalysisResult(items=[ENTITY_ITEM], summary="Schema change."))

        state = await run_checklist_workflow(EVENT, RepoConfig(), github, requester)

        assert state["outcome"] == "blocked"
        assert [rule.id for rule in state["active_rules"]] == ["migration-entity"]
        assert len(github.created_comments) == 1
        assert BOT_MARKER in github.created_comments[0]
        assert "<!-- sha:headsha -->" in github.created_comments[0]
        assert github.created_reviews[0][0] == "REQUEST_CHANGES"

        payload = requester.payloads[0]
        assert "### Rule: migration-entity" in payload
        assert "## Full File Contents (for context)" in payload
        assert "class User(Base):" in payload
        assert "Files changed: app/models/user.py" in payload

    @pytest.mark.asyncio
    async def test_existing_checklist_is_updated_and_progress_kept(self):
        old_body = render_checklist(
            AnalysisResult(items=[ENTITY_ITEM], summary="Old."), "oldsha"
        ).replace("- [ ]", "- [x]")
        github = FakeGitHub(
            diff=make_diff("app/models/user.py"),
            comments=[{"id": 1, "body": "LGTM", "user": {"login": "alice", "type": "User"}},
                      _bot_comment(old_body)],
        )
        requester = FakeRequester(AnalysisResult(items=[ENTITY_ITEM], summary="New."))

        state = await run_checklist_workflow(EVENT, RepoConfig(), github, requester)

        assert state["outcome"] == "approved"
        assert state["comment_id"] == 55
        assert github.created_comments == []
        comment_id, body = github.updated_comments[0]
        assert comment_id == 55
        assert "- [x]" in body
        assert "<!-- sha:headsha -->" in body
        assert github.created_reviews[0][0] == "APPROVE"

    @pytest.mark.asyncio
    async def test_new_items_on_reanalysis_block_again(self):
        old_body = render_checklist(
            AnalysisResult(items=[ENTITY_ITEM], summary="Old."), "oldsha"
        ).replace("- [ ]", "- [x]")
        github = FakeGitHub(diff=make_diff("app/models/user.py"), comments=[_bot_comment(old_body)])
        new_item = make_item(rule_id="migration-entity", description="Check old code against new schema")
        requester = FakeRequester(
            AnalysisResult(items=[ENTITY_ITEM, new_item], summary="New.")
        )

        state = await run_checklist_workflow(EVENT, RepoConfig(), github, requester)

        assert state["outcome"] == "blocked"
        assert "1 unchecked item(s)" in github.created_reviews[0][1]

    @pytest.mark.asyncio
    async def test_no_result_posts_error_without_blocking(self):
        github = FakeGitHub(diff=make_diff("README.md"))

        state = await run_checklist_workflow(EVENT, RepoConfig(), github, FakeRequester(None))

        assert state["outcome"] == "error"
        assert "Analysis could not be completed." in github.created_comments[0]
        assert github.created_reviews == []

    @pytest.mark.asyncio
    async def test_empty_result_approves_without_comment(self):
        github = FakeGitHub(diff=make_diff("README.md"))
        requester = FakeRequester(AnalysisResult(items=[], summary="Docs only."))

        state = await run_checklist_workflow(EVENT, RepoConfig(), github, requester)

        assert state["outcome"] == "approved"
        assert github.created_comments == []
        assert github.created_reviews[0][0] == "APPROVE"

    @pytest.mark.asyncio
    async def test_empty_result_posted_when_configured(self):
        github = FakeGitHub(diff=make_diff("README.md"))
        requester = FakeRequester(AnalysisResult(items=[], summary="Docs only."))
        config = RepoConfig(settings=ChecklistSettings(post_empty_checklist=True))

        await run_checklist_workflow(EVENT, config, github, requester)

        assert "No deploy checklist items identified" in github.created_comments[0]

    @pytest.mark.asyncio
    async def test_unexpected_failure_fails_open(self):
        class BrokenGitHub(FakeGitHub):
            async def get_pr_diff(self, owner, repo, pr_number):
                raise RuntimeError("diff unavailable")

        github = BrokenGitHub()

        state = await run_checklist_workflow(
            EVENT, RepoConfig(), github, FakeRequester(None)
        )

        assert state == {"outcome": "error"}
        assert "An unexpected error occurred during analysis." in github.created_comments[0]
        assert github.created_reviews == []

    @pytest.mark.asyncio
    async def test_full_file_fetch_is_capped(self):
        paths = [f"app/models/m{i}.py" for i in range(MAX_FULL_FILES + 2)]
        github = FakeGitHub(diff=make_diff(*paths), files={p: "x" for p in paths})
        requester = FakeRequester(AnalysisResult(items=[], summary="ok"))

        state = await run_checklist_workflow(EVENT, RepoConfig(), github, requester)

        assert len(state["file_contents"]) == MAX_FULL_FILES
        assert github.file_requests == paths[:MAX_FULL_FILES]

    @pytest.mark.asyncio
    async def test_oversized_diff_is_budgeted(self):
        diff = "\n".join(
            [
                make_diff("docs/guide.md", body="+" + "x" * 500),
                make_diff("Dockerfile", body="+FROM python:3.12"),
            ]
        )
        github = FakeGitHub(diff=diff)
        requester = FakeRequester(AnalysisResult(items=[], summary="ok"))
        config = RepoConfig(settings=ChecklistSettings(max_diff_size=300))

        state = await run_checklist_workflow(EVENT, config, github, requester)

        assert state["diff_truncated"] is True
        assert state["omitted_files"] == ["docs/guide.md"]
        assert "shortened to fit the size budget" in requester.payloads[0]
