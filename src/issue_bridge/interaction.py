"""Paste the issue into the assistant's chat input and submit it."""

from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError, Page

from .config import FILL_SETTLE_MS, LOCATOR_TIMEOUT_MS
from .console import ConfirmGate, wait_for_enter
from .models import FillOutcome, Issue, SelectorSet
from .robustness import first_enabled, wait_for_first_visible

logger = logging.getLogger(__name__)

ISSUE_TEXT_TEMPLATE = "{url}\n\nTitle: {title}\n\nDescription:\n{body}"


def build_issue_text(issue: Issue) -> str:
    return ISSUE_TEXT_TEMPLATE.format(url=issue.url, title=issue.title, body=issue.body)


async def locate_and_fill(
    page: Page,
    text: str,
    selectors: SelectorSet,
    *,
    confirm: ConfirmGate = wait_for_enter,
    timeout_ms: int = LOCATOR_TIMEOUT_MS,
    settle_ms: int = FILL_SETTLE_MS,
) -> FillOutcome:
    """Fill the first matching input with ``text`` and press the first enabled submit control.

    Falls back to the operator when no input or no enabled submit control is found.
    """
    logger.info("Looking for the chat input area...")
    input_selector = await wait_for_first_visible(page, selectors.input, timeout_ms=timeout_ms)

    if input_selector is None:
        logger.warning("Could not find input area automatically.")
        logger.info(
            "Please manually paste the following text into the chat:\n"
            "=== START OF ISSUE ===\n%s\n=== END OF ISSUE ===",
            text,
        )
        await confirm("Press Enter after you have pasted the issue and started the task...")
        return FillOutcome.AWAITING_MANUAL

    logger.info("Found input area using selector: %s", input_selector)
    await page.click(input_selector)
    logger.info("Pasting issue text (%s chars)...", len(text))
    await page.fill(input_selector, text)
    await page.wait_for_timeout(settle_ms)

    if await _click_submit(page, selectors):
        return FillOutcome.SUBMITTED

    logger.warning("Could not find an enabled submit button.")
    await confirm("Submit the issue in the browser, then press Enter here...")
    return FillOutcome.AWAITING_MANUAL


async def _click_submit(page: Page, selectors: SelectorSet) -> bool:
    remaining = list(selectors.submit)
    while remaining:
        match = await first_enabled(page, remaining)
        if match is None:
            return False
        selector, handle = match
        try:
            logger.info("Clicking submit button: %s", selector)
            await handle.click()
            return True
        except PlaywrightError as exc:
            logger.debug("Submit click failed for %s: %s", selector, exc)
            remaining = remaining[remaining.index(selector) + 1 :]
    return False
