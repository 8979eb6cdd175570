"""Shared fakes for the Deploy Checklist Bot tests."""

from typing import Any, Dict, List, Optional

from app.services.deploy_checklist.schemas import AnalysisResult, ChecklistItem

BOT_USER = {"login": "deploy-checklist-bot[bot]", "type": "Bot"}


class FakeGitHub:
    """In-memory stand-in for GitHubClient that records every write."""

    def __init__(
        self,
        diff: str = "",
        files: Optional[Dict[str, str]] = None,
        comments: Optional[List[Dict[str, Any]]] = None,
        reviews: Optional[List[Dict[str, Any]]] = None,
    ):
        self.diff = diff
        self.files = files or {}
        self.comments = list(comments or [])
        self.reviews = list(reviews or [])
        self.created_comments: List[str] = []
        self.updated_comments: List[tuple] = []
        self.created_reviews: List[tuple] = []
        self.dismissed: List[int] = []
        self.file_requests: List[str] = []
        self._next_id = 1000

    async def get_pr_diff(self, owner, repo, pr_number):
        return self.diff

    async def get_file_content(self, owner, repo, path, ref):
        self.file_requests.append(path)
        return self.files.get(path)

    async def list_issue_comments(self, owner, repo, issue_number):
        return list(self.comments)

    async def create_issue_comment(self, owner, repo, issue_number, body):
        self._next_id += 1
        comment = {"id": self._next_id, "body": body, "user": dict(BOT_USER)}
        self.comments.append(comment)
        self.created_comments.append(body)
        return comment

    async def update_issue_comment(self, owner, repo, comment_id, body):
        for comment in self.comments:
            if comment["id"] == comment_id:
                comment["body"] = body
        self.updated_comments.append((comment_id, body))
        return {"id": comment_id, "body": body}

    async def list_reviews(self, owner, repo, pr_number):
        return list(self.reviews)

    async def create_review(self, owner, repo, pr_number, event, body):
        self.created_reviews.append((event, body))
        return {"id": len(self.created_reviews)}

    async def dismiss_review(self, owner, repo, pr_number, review_id, message):
        self.dismissed.append(review_id)
        return {"id": review_id, "state": "DISMISSED"}


class FakeRequester:
    """Returns a canned analysis and keeps the payloads it was sent."""

    def __init__(self, result: Optional[AnalysisResult] = None):
        self.result = result
        self.payloads: List[str] = []

    async def request(self, payload: str) -> Optional[AnalysisResult]:
        self.payloads.append(payload)
        return self.result


def make_item(
    rule_id: str = "migration-review",
    check: str = "Verify rollback strategy exists",
    description: str = "Add a downgrade() to alembic/versions/0042_add_orders.py",
    reasoning: str = "The migration has no downgrade.",
    priority: str = "high",
) -> ChecklistItem:
    return ChecklistItem(
        rule_id=rule_id,
        check=check,
        description=description,
        reasoning=reasoning,
        priority=priority,
    )


def make_diff(*paths: str, body: str = "+print('hello')") -> str:
    """Build a minimal unified diff touching *paths*."""
    sections = []
    for path in paths:
        sections.append(
            f"diff --git a/{path} b/{path}\n"
            f"--- a/{path}\n"
            f"+++ b/{path}\n"
            "@@ -0,0 +1 @@\n"
            f"{body}"
        )
    return "\n".join(sections)
