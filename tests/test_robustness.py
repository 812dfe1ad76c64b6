import logging
import sys
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fakes import FakePage, detached_error  # noqa: E402
from issue_bridge.robustness import (  # noqa: E402
    is_detached_error,
    wait_for_network_idle,
    wait_for_url_change,
)


class UrlSequencePage:
    """page.url yields queued values; exceptions in the queue are raised."""

    def __init__(self, values):
        self._values = list(values)

    @property
    def url(self):
        value = self._values.pop(0) if len(self._values) > 1 else self._values[0]
        if isinstance(value, Exception):
            raise value
        return value


def test_is_detached_error_matches_message():
    assert is_detached_error(detached_error())
    assert not is_detached_error(PlaywrightError("Target closed"))


@pytest.mark.asyncio
async def test_wait_for_url_change_returns_new_url():
    page = UrlSequencePage(["https://a/code", "https://a/code", "https://a/code/session_1"])

    new_url = await wait_for_url_change(page, "https://a/code", timeout_s=1, interval_s=0.01)

    assert new_url == "https://a/code/session_1"


@pytest.mark.asyncio
async def test_wait_for_url_change_silences_detached_frames(caplog):
    page = UrlSequencePage([detached_error(), PlaywrightError("boom"), "https://a/code/s"])

    with caplog.at_level(logging.DEBUG, logger="issue_bridge.robustness"):
        new_url = await wait_for_url_change(page, "https://a/code", timeout_s=1, interval_s=0.01)

    assert new_url == "https://a/code/s"
    assert "boom" in caplog.text
    assert "detached" not in caplog.text.lower()


@pytest.mark.asyncio
async def test_wait_for_url_change_times_out():
    page = UrlSequencePage(["https://a/code"])

    assert await wait_for_url_change(page, "https://a/code", timeout_s=0.05, interval_s=0.01) is None


@pytest.mark.asyncio
async def test_network_idle_timeout_returns_false():
    page = FakePage()
    page.load_state_error = PlaywrightTimeoutError("Timeout 10ms exceeded.")

    assert await wait_for_network_idle(page, 10) is False
    assert page.load_states == ["networkidle"]


@pytest.mark.asyncio
async def test_network_idle_success_returns_true():
    assert await wait_for_network_idle(FakePage(), 10) is True
