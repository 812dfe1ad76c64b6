import logging
import sys
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fakes import FakeHandle, FakePage, detached_error  # noqa: E402
from issue_bridge.completion import find_indicator, poll_for_completion  # noqa: E402
from issue_bridge.models import CompletionIndicator, PollOutcome  # noqa: E402

CREATE_PR = CompletionIndicator(selector='button:has-text("Create PR")', actionable=True)
CREATED_TEXT = CompletionIndicator(selector='text="PR created"')


@pytest.mark.asyncio
async def test_completes_as_soon_as_any_indicator_appears():
    page = FakePage()
    page.appear_after[CREATED_TEXT.selector] = (3, FakeHandle())

    outcome = await poll_for_completion(page, [CREATE_PR, CREATED_TEXT], timeout_s=5, interval_s=0.01)

    assert outcome is PollOutcome.COMPLETED
    assert page.queried.count(CREATED_TEXT.selector) == 3
    assert page.timeouts == []


@pytest.mark.asyncio
async def test_actionable_indicator_is_clicked_then_settles():
    button = FakeHandle()
    page = FakePage(elements={CREATE_PR.selector: button})

    outcome = await poll_for_completion(page, [CREATE_PR, CREATED_TEXT], timeout_s=1, interval_s=0.01, settle_ms=2000)

    assert outcome is PollOutcome.COMPLETED
    assert button.clicks == 1
    assert page.timeouts == [2000]
    assert page.queried == [CREATE_PR.selector]


@pytest.mark.asyncio
async def test_click_failure_still_reports_completed():
    button = FakeHandle(click_error=PlaywrightError("Element is outside of the viewport"))
    page = FakePage(elements={CREATE_PR.selector: button})

    outcome = await poll_for_completion(page, [CREATE_PR], timeout_s=1, interval_s=0.01)

    assert outcome is PollOutcome.COMPLETED


@pytest.mark.asyncio
async def test_times_out_with_short_budget():
    page = FakePage()

    outcome = await poll_for_completion(page, [CREATE_PR, CREATED_TEXT], timeout_s=0.2, interval_s=0.05)

    assert outcome is PollOutcome.TIMED_OUT
    assert page.queried.count(CREATE_PR.selector) >= 2


@pytest.mark.asyncio
async def test_transient_errors_are_swallowed(caplog):
    page = FakePage(elements={CREATE_PR.selector: PlaywrightError("Execution context was destroyed")})
    page.appear_after[CREATED_TEXT.selector] = (2, FakeHandle())

    with caplog.at_level(logging.WARNING, logger="issue_bridge.completion"):
        outcome = await poll_for_completion(page, [CREATE_PR, CREATED_TEXT], timeout_s=5, interval_s=0.01)

    assert outcome is PollOutcome.COMPLETED
    assert "Execution context was destroyed" in caplog.text


@pytest.mark.asyncio
async def test_detached_frame_errors_are_not_logged(caplog):
    page = FakePage(elements={CREATE_PR.selector: detached_error()})

    with caplog.at_level(logging.DEBUG, logger="issue_bridge.completion"):
        match = await find_indicator(page, [CREATE_PR])

    assert match is None
    assert "detached" not in caplog.text.lower()
