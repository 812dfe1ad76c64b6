"""Run one issue through the assistant: fetch → browse → paste → wait → PR."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from playwright.async_api import Page

from .browser import BrowserNotFoundError, BrowserSession, launch_session
from .completion import poll_for_completion
from .config import NAVIGATION_TIMEOUT_MS, NETWORK_IDLE_TIMEOUT_MS
from .console import ConfirmGate, wait_for_enter
from .github import FetchError, fetch_issue
from .interaction import build_issue_text, locate_and_fill
from .models import FillOutcome, Issue, LaunchConfig, PollOutcome, RunOptions, RunResult, RunStatus
from .robustness import wait_for_network_idle, wait_for_url_change
from .shutdown import ShutdownController

logger = logging.getLogger(__name__)

IssueFetcher = Callable[[str, int, Optional[str]], Awaitable[Issue]]
SessionLauncher = Callable[[LaunchConfig], Awaitable[BrowserSession]]


async def run_issue_task(
    options: RunOptions,
    *,
    confirm: ConfirmGate = wait_for_enter,
    fetcher: IssueFetcher = fetch_issue,
    launcher: SessionLauncher = launch_session,
) -> RunResult:
    """Run every stage under one shutdown hook and one cleanup path.

    Fetch failures and a missing explicit browser are ``failed`` (exit 1).
    Errors once the browser is up are logged and reported as ``errored``;
    like interrupts they still end with the session closed and exit 0.
    """
    task = asyncio.current_task()
    assert task is not None
    shutdown = ShutdownController(task)
    shutdown.install()

    issue: Optional[Issue] = None
    session: Optional[BrowserSession] = None
    try:
        logger.info("Starting automation...")
        logger.info("Repository: %s", options.repo)
        logger.info("Issue: #%s", options.issue_number)

        logger.info("Fetching GitHub issue...")
        issue = await fetcher(options.repo, options.issue_number, options.github_token)
        logger.info('Issue fetched: "%s"', issue.title)
        logger.info("Issue URL: %s", issue.url)

        logger.info("Launching browser...")
        session = await launcher(options.launch)

        return await _drive_session(session.page, issue, options, confirm)
    except asyncio.CancelledError:
        if not shutdown.triggered:
            raise
        task.uncancel()
        return RunResult(status=RunStatus.INTERRUPTED, issue=issue)
    except FetchError as exc:
        logger.error("%s", exc)
        return RunResult(status=RunStatus.FAILED, error=str(exc))
    except BrowserNotFoundError as exc:
        logger.error("ERROR: %s. Please check the path and try again.", exc)
        return RunResult(status=RunStatus.FAILED, issue=issue, error=str(exc))
    except Exception as exc:
        if session is None:
            raise
        logger.exception("Error during automation: %s", exc)
        return RunResult(status=RunStatus.ERRORED, issue=issue, error=str(exc))
    finally:
        shutdown.begin_cleanup()
        if session is not None:
            await session.close()
        shutdown.uninstall()


async def _drive_session(page: Page, issue: Issue, options: RunOptions, confirm: ConfirmGate) -> RunResult:
    logger.info("Navigating to %s...", options.target_url)
    await page.goto(options.target_url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)

    if options.manual_login:
        logger.info("Please log in in the browser window if needed.")
        await confirm("Press Enter in this terminal once you are logged in and see the main interface...")
        logger.info("Proceeding with automation...")

    logger.info("Waiting for the interface to load...")
    await wait_for_network_idle(page, NETWORK_IDLE_TIMEOUT_MS)

    issue_text = build_issue_text(issue)
    logger.info("Prepared issue text to paste")

    start_url = page.url
    fill = await locate_and_fill(page, issue_text, options.selectors, confirm=confirm)
    logger.info("Issue submitted%s.", " by the operator" if fill is FillOutcome.AWAITING_MANUAL else "")

    session_url = await wait_for_url_change(page, start_url, timeout_s=options.url_change_timeout_s)
    if session_url:
        logger.info("Assistant session: %s", session_url)

    completion = await _poll_with_fallback(page, options, confirm)
    if fill is FillOutcome.SUBMITTED and completion is PollOutcome.COMPLETED:
        status = RunStatus.COMPLETED
    else:
        status = RunStatus.MANUAL

    return RunResult(
        status=status,
        issue=issue,
        session_url=session_url,
        fill=fill,
        completion=completion,
    )


async def _poll_with_fallback(page: Page, options: RunOptions, confirm: ConfirmGate) -> PollOutcome:
    logger.info("Waiting for the task to complete; this may take several minutes.")
    logger.info('Looking for a "Create PR" button or similar completion indicator...')
    completion = await poll_for_completion(
        page,
        options.selectors.completion,
        timeout_s=options.completion_timeout_s,
        interval_s=options.poll_interval_s,
    )
    if completion is PollOutcome.COMPLETED:
        logger.info("Task completed successfully! The PR should appear in the repository.")
        return completion

    logger.warning("Timeout reached. The task may still be running.")
    await confirm('Check the browser, click "Create PR" when ready, then press Enter to exit...')
    return completion
