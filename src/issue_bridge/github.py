"""Read-only access to GitHub issues."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from .config import GITHUB_API_BASE, GITHUB_USER_AGENT, REQUEST_TIMEOUT_S
from .models import Issue

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Raised when the tracker answers with a non-success status."""

    def __init__(self, status_code: int, status_text: str) -> None:
        super().__init__(f"Failed to fetch issue: {status_code} {status_text}".rstrip())
        self.status_code = status_code
        self.status_text = status_text


def _issue_headers(token: Optional[str]) -> Dict[str, str]:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": GITHUB_USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


async def fetch_issue(
    repo: str,
    issue_number: int,
    token: Optional[str] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    api_base: str = GITHUB_API_BASE,
) -> Issue:
    """Fetch a single issue and return its URL, title and body."""
    url = f"{api_base.rstrip('/')}/repos/{repo}/issues/{issue_number}"
    headers = _issue_headers(token)
    logger.debug("GET %s (authenticated=%s)", url, bool(token))

    if client is not None:
        response = await client.get(url, headers=headers)
    else:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_S) as owned_client:
            response = await owned_client.get(url, headers=headers)

    if not response.is_success:
        raise FetchError(response.status_code, response.reason_phrase)

    return Issue.from_api(response.json())
