"""
GitHub REST API client for pull request diffs, file contents, comments and reviews.

REST is used over GraphQL because only REST serves the unified diff of a pull
request. Each call opens a short-lived httpx.AsyncClient.
"""

import base64
from typing import Any, Dict, List, Optional

import httpx


class GitHubClient:
    """Client for interacting with GitHub REST API."""

    def __init__(
        self,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub Personal Access Token or GitHub App installation token
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.token = token
        self.base_url = "https://api.github.com"
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "Deploy-Checklist-Bot/1.0",
        }
        if token:
            self.headers["Authorization"] = f"token {token}"
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, headers=self.headers, transport=self._transport
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        async with self._client() as client:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
            return response

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------
    async def get_pr_diff(self, owner: str, repo: str, pr_number: int) -> str:
        """
        Get full diff content for a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Full diff content as text (unified diff format)
        """
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{pr_number}",
            headers={"Accept": "application/vnd.github.v3.diff"},
        )
        return response.text

    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> Optional[str]:
        """
        Fetch a file's text at a given ref.

        Returns:
            Decoded UTF-8 content, or None when the file does not exist at
            *ref* or the path is a directory.

        Raises:
            httpx.HTTPStatusError: for any non-404 error response.
        """
        try:
            response = await self._request(
                "GET", f"/repos/{owner}/{repo}/contents/{path}", params={"ref": ref}
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

        data = response.json()
        # Directories come back as a list
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            return None
        return base64.b64decode(data["content"]).decode("utf-8", errors="replace")

    # ------------------------------------------------------------------
    # Issue comments
    # ------------------------------------------------------------------
    async def list_issue_comments(
        self, owner: str, repo: str, issue_number: int
    ) -> List[Dict[str, Any]]:
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            params={"per_page": 100},
        )
        return response.json()

    async def create_issue_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            json={"body": body},
        )
        return response.json()

    async def update_issue_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> Dict[str, Any]:
        response = await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/comments/{comment_id}",
            json={"body": body},
        )
        return response.json()

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------
    async def list_reviews(
        self, owner: str, repo: str, pr_number: int
    ) -> List[Dict[str, Any]]:
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{pr_number}/reviews",
            params={"per_page": 100},
        )
        return response.json()

    async def create_review(
        self, owner: str, repo: str, pr_number: int, event: str, body: str
    ) -> Dict[str, Any]:
        """
        Submit a review.

        Args:
            event: "APPROVE", "REQUEST_CHANGES" or "COMMENT"
        """
        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{pr_number}/reviews",
            json={"event": event, "body": body},
        )
        return response.json()

    async def dismiss_review(
        self, owner: str, repo: str, pr_number: int, review_id: int, message: str
    ) -> Dict[str, Any]:
        response = await self._request(
            "PUT",
            f"/repos/{owner}/{repo}/pulls/{pr_number}/reviews/{review_id}/dismissals",
            json={"message": message, "event": "DISMISS"},
        )
        return response.json()
