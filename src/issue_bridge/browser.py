"""Browser resolution and the persistent Playwright session."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from playwright.async_api import BrowserContext, Error as PlaywrightError, Page, Playwright, async_playwright

from .models import BrowserKind, LaunchConfig, ResolvedBrowser

logger = logging.getLogger(__name__)

LAUNCH_ARGS = ["--start-maximized"]


class BrowserNotFoundError(RuntimeError):
    """Raised when an explicitly configured browser executable does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Browser not found at: {path}")
        self.path = path


def default_alternate_path(
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return the usual Yandex Browser install location for the platform."""
    platform = platform or sys.platform
    env = os.environ if env is None else env

    if platform == "win32":
        local_app_data = env.get("LOCALAPPDATA")
        if not local_app_data:
            return None
        return local_app_data.rstrip("\\/") + "\\Yandex\\YandexBrowser\\Application\\browser.exe"
    if platform == "darwin":
        return "/Applications/Yandex.app/Contents/MacOS/Yandex"
    return "/usr/bin/yandex-browser"


def resolve_executable(config: LaunchConfig) -> ResolvedBrowser:
    """Pick the browser kind and executable to launch.

    A missing explicit Chromium path is fatal. A missing Yandex install,
    explicit or default, degrades to Playwright's bundled Chromium.
    """
    if config.executable_path:
        if not Path(config.executable_path).exists():
            if config.browser is not BrowserKind.YANDEX:
                raise BrowserNotFoundError(config.executable_path)
            logger.warning("Yandex Browser not found at: %s", config.executable_path)
            logger.info("Falling back to Chromium (downloaded by `playwright install chromium`)")
            return ResolvedBrowser(browser=BrowserKind.CHROMIUM)
        logger.info("Using custom %s path: %s", config.browser.value, config.executable_path)
        return ResolvedBrowser(browser=config.browser, executable_path=config.executable_path)

    if config.browser is BrowserKind.YANDEX:
        candidate = default_alternate_path()
        if candidate and Path(candidate).exists():
            logger.info("Using default Yandex Browser path: %s", candidate)
            return ResolvedBrowser(browser=BrowserKind.YANDEX, executable_path=candidate)
        logger.warning("Yandex Browser not found at: %s", candidate or "<unknown>")
        logger.info("Falling back to Chromium (downloaded by `playwright install chromium`)")

    return ResolvedBrowser(browser=BrowserKind.CHROMIUM)


class BrowserSession:
    """One Playwright driver, one persistent context, one page."""

    def __init__(
        self,
        playwright: Playwright,
        context: BrowserContext,
        page: Page,
        resolved: ResolvedBrowser,
    ) -> None:
        self.playwright = playwright
        self.context = context
        self.page = page
        self.resolved = resolved
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.info("Cleaning up...")
        try:
            await self.context.close()
        except PlaywrightError as exc:
            logger.warning("Browser context did not close cleanly: %s", exc)
        try:
            await self.playwright.stop()
        except Exception as exc:  # noqa: BLE001 - driver may already be gone
            logger.warning("Playwright driver did not stop cleanly: %s", exc)


def _launch_kwargs(config: LaunchConfig, resolved: ResolvedBrowser) -> Dict[str, Any]:
    user_data_dir = Path(config.user_data_dir).expanduser()
    user_data_dir.mkdir(parents=True, exist_ok=True)
    launch_kwargs: Dict[str, Any] = {
        "user_data_dir": str(user_data_dir),
        "headless": config.headless,
        "viewport": config.viewport.model_dump(),
        "args": list(LAUNCH_ARGS),
    }
    if resolved.executable_path:
        launch_kwargs["executable_path"] = resolved.executable_path
    return launch_kwargs


async def launch_session(config: LaunchConfig) -> BrowserSession:
    """Resolve the executable and open the persistent profile."""
    resolved = resolve_executable(config)
    launch_kwargs = _launch_kwargs(config, resolved)
    logger.info("Browser: %s (profile %s)", resolved.browser.value, launch_kwargs["user_data_dir"])

    playwright = await async_playwright().start()
    try:
        context = await playwright.chromium.launch_persistent_context(**launch_kwargs)
        page = context.pages[0] if context.pages else await context.new_page()
    except BaseException:
        # Stopping the driver also tears down a half-started browser.
        await playwright.stop()
        raise

    return BrowserSession(playwright, context, page, resolved)
