"""Poll the assistant page until the task looks finished."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError, Page

from .config import CLICK_SETTLE_MS, COMPLETION_TIMEOUT_S, POLL_INTERVAL_S
from .models import CompletionIndicator, PollOutcome
from .robustness import is_detached_error

logger = logging.getLogger(__name__)


async def find_indicator(
    page: Page,
    indicators: Sequence[CompletionIndicator],
) -> Optional[Tuple[CompletionIndicator, Any]]:
    """Return the first indicator present on the page together with its handle.

    Query errors count as "not found" for this cycle.
    """
    for indicator in indicators:
        try:
            handle = await page.query_selector(indicator.selector)
        except PlaywrightError as exc:
            if not is_detached_error(exc):
                logger.warning("Completion check failed for %s: %s", indicator.selector, exc)
            continue
        if handle is not None:
            return indicator, handle
    return None


async def poll_for_completion(
    page: Page,
    indicators: Sequence[CompletionIndicator],
    timeout_s: float = COMPLETION_TIMEOUT_S,
    interval_s: float = POLL_INTERVAL_S,
    settle_ms: int = CLICK_SETTLE_MS,
) -> PollOutcome:
    start = time.monotonic()
    checks = 0
    while True:
        checks += 1
        match = await find_indicator(page, indicators)
        if match is not None:
            indicator, handle = match
            logger.info("Found completion indicator: %s", indicator.selector)
            if indicator.actionable:
                await _activate(page, indicator, handle, settle_ms)
            return PollOutcome.COMPLETED

        elapsed = time.monotonic() - start
        remaining = timeout_s - elapsed
        if remaining <= 0:
            logger.info("No completion indicator after %s checks (%.0fs).", checks, elapsed)
            return PollOutcome.TIMED_OUT
        if checks % 6 == 0:
            logger.info("Still waiting for completion (%.0fs elapsed)...", elapsed)
        await asyncio.sleep(min(interval_s, remaining))


async def _activate(page: Page, indicator: CompletionIndicator, handle: Any, settle_ms: int) -> None:
    try:
        logger.info("Clicking %s...", indicator.selector)
        await handle.click()
        await page.wait_for_timeout(settle_ms)
        logger.info("PR creation initiated!")
    except PlaywrightError as exc:
        logger.warning("Could not click %s: %s", indicator.selector, exc)
