"""Page helpers that tolerate slow, shifting or detached pages."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from .config import LOCATOR_TIMEOUT_MS, URL_CHANGE_TIMEOUT_S, URL_POLL_INTERVAL_S

logger = logging.getLogger(__name__)


def is_detached_error(exc: BaseException) -> bool:
    """Detached frames show up whenever the operator switches tabs."""
    return "detached" in str(exc).lower()


async def wait_for_first_visible(
    page: Page,
    selectors: Sequence[str],
    timeout_ms: int = LOCATOR_TIMEOUT_MS,
) -> Optional[str]:
    """Return the first selector that becomes visible, trying each in order."""
    for selector in selectors:
        try:
            await page.wait_for_selector(selector, timeout=timeout_ms, state="visible")
        except PlaywrightTimeoutError:
            logger.debug("Element not found: %s", selector)
            continue
        except PlaywrightError as exc:
            logger.debug("Element lookup failed for %s: %s", selector, exc)
            continue
        return selector
    return None


async def first_enabled(page: Page, selectors: Sequence[str]) -> Optional[Tuple[str, Any]]:
    """Return (selector, handle) for the first present element that is not disabled."""
    for selector in selectors:
        try:
            handle = await page.query_selector(selector)
            if handle is None:
                continue
            if await handle.is_disabled():
                logger.debug("Skipping disabled element: %s", selector)
                continue
        except PlaywrightError as exc:
            logger.debug("Element check failed for %s: %s", selector, exc)
            continue
        return selector, handle
    return None


async def wait_for_network_idle(page: Page, timeout_ms: int) -> bool:
    """Best-effort wait for the page to stop loading; never raises on timeout."""
    try:
        await page.wait_for_load_state("networkidle", timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        logger.warning("Page did not reach network idle within %sms; continuing.", timeout_ms)
    except PlaywrightError as exc:
        logger.warning("Waiting for network idle failed: %s", exc)
    return False


async def wait_for_url_change(
    page: Page,
    current_url: str,
    timeout_s: float = URL_CHANGE_TIMEOUT_S,
    interval_s: float = URL_POLL_INTERVAL_S,
) -> Optional[str]:
    """Poll page.url until it differs from current_url; None on timeout."""
    deadline = time.monotonic() + timeout_s
    while True:
        try:
            new_url = page.url
            if new_url != current_url:
                return new_url
        except PlaywrightError as exc:
            if not is_detached_error(exc):
                logger.error("Error checking URL: %s", exc)
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        await asyncio.sleep(min(interval_s, remaining))
