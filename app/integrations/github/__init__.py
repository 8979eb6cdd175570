"""
GitHub integration package.
"""

from app.integrations.github.auth import build_app_jwt, get_access_token
from app.integrations.github.client import GitHubClient

__all__ = [
    "build_app_jwt",
    "get_access_token",
    "GitHubClient",
]
