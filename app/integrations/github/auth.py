"""
GitHub App authentication utilities.
"""

import time

import httpx
import jwt

from app.core.config import settings


def build_app_jwt(now: int | None = None) -> str:
    """Sign the short-lived JWT that identifies the GitHub App itself."""
    issued = int(time.time()) if now is None else now
    payload = {
        "iat": issued - 60,
        "exp": issued + (10 * 60),
        "iss": settings.GITHUB_APP_ID,
    }
    return jwt.encode(payload, settings.GITHUB_APP_PRIVATE_KEY, algorithm="RS256")


async def get_access_token(installation_id: int) -> str:
    """Exchanges Private Key + Installation ID for a temporary Token"""
    jwt_token = build_app_jwt()

    async with httpx.AsyncClient() as client:
        resp = await client.post(
            f"https://api.github.com/app/installations/{installation_id}/access_tokens",
            headers={
                "Authorization": f"Bearer {jwt_token}",
                "Accept": "application/vnd.github+json",
            },
        )
        resp.raise_for_status()
        return resp.json()["token"]
