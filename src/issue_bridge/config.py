"""Configuration for the issue bridge."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .models import CompletionIndicator, SelectorSet

# Load environment variables from a .env file when present.
load_dotenv()

GITHUB_API_BASE = "https://api.github.com"
GITHUB_USER_AGENT = "ai-ci-automation"

TARGET_URL = "https://claude.ai/code"

USER_DATA_DIR = Path("playwright-user-data")

DEFAULT_BROWSER = "yandex"

# Timings (milliseconds for Playwright waits, seconds for poll loops).
LOCATOR_TIMEOUT_MS = 5000
FILL_SETTLE_MS = 1000
CLICK_SETTLE_MS = 2000
NETWORK_IDLE_TIMEOUT_MS = 30000
NAVIGATION_TIMEOUT_MS = 60000
POLL_INTERVAL_S = 10.0
COMPLETION_TIMEOUT_S = 30 * 60.0
URL_CHANGE_TIMEOUT_S = 15.0
URL_POLL_INTERVAL_S = 1.0
REQUEST_TIMEOUT_S = 30.0

INPUT_SELECTORS = (
    'textarea[placeholder*="Ask"]',
    'textarea[placeholder*="chat"]',
    'textarea[placeholder*="message"]',
    'div[contenteditable="true"]',
    "textarea",
    '[role="textbox"]',
)

SUBMIT_SELECTORS = (
    'button[type="submit"]',
    'button:has-text("Send")',
    'button:has-text("Submit")',
    'button[aria-label*="Send"]',
    'button[aria-label*="Submit"]',
)

COMPLETION_INDICATORS = (
    CompletionIndicator(selector='button:has-text("Create PR")', actionable=True),
    CompletionIndicator(selector='button:has-text("Create Pull Request")', actionable=True),
    CompletionIndicator(selector='text="Pull request created"'),
    CompletionIndicator(selector='text="PR created"'),
)


def get_github_token() -> Optional[str]:
    """Return the GitHub token or None when it is not configured."""
    return os.getenv("GITHUB_TOKEN") or None


def get_browser_path() -> Optional[str]:
    return os.getenv("BROWSER_PATH") or None


def default_selector_set() -> SelectorSet:
    return SelectorSet(
        input=list(INPUT_SELECTORS),
        submit=list(SUBMIT_SELECTORS),
        completion=list(COMPLETION_INDICATORS),
    )


def load_selector_set(path: Optional[Path]) -> SelectorSet:
    """Merge a JSON override file over the default candidate lists.

    Keys missing from the file keep their defaults, so a file containing only
    ``{"submit": [...]}`` replaces just the submit candidates.
    """
    defaults = default_selector_set()
    if path is None:
        return defaults
    override = SelectorSet.model_validate_json(Path(path).read_text(encoding="utf-8"))
    merged = defaults.model_dump()
    merged.update(override.model_dump(exclude_unset=True))
    return SelectorSet.model_validate(merged)
