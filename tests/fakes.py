"""Minimal stand-ins for the Playwright objects the bridge touches."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError


class FakeHandle:
    def __init__(self, disabled: bool = False, click_error: Optional[Exception] = None) -> None:
        self.disabled = disabled
        self.click_error = click_error
        self.clicks = 0

    async def is_disabled(self) -> bool:
        return self.disabled

    async def click(self) -> None:
        if self.click_error is not None:
            raise self.click_error
        self.clicks += 1


class FakePage:
    """Records every call; elements can be present, raising, or appear later."""

    def __init__(
        self,
        visible: Iterable[str] = (),
        elements: Optional[Dict[str, Any]] = None,
        url: str = "about:blank",
    ) -> None:
        self.visible = set(visible)
        self.elements: Dict[str, Any] = dict(elements or {})
        self.appear_after: Dict[str, Tuple[int, Any]] = {}
        self.url = url
        self.waited: List[str] = []
        self.queried: List[str] = []
        self.clicked: List[str] = []
        self.filled: List[Tuple[str, str]] = []
        self.timeouts: List[int] = []
        self.visited: List[str] = []
        self.load_states: List[str] = []
        self.goto_error: Optional[Exception] = None
        self.load_state_error: Optional[Exception] = None

    async def wait_for_selector(self, selector: str, timeout: Optional[float] = None, state: str = "visible"):
        self.waited.append(selector)
        if selector in self.visible:
            return FakeHandle()
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def query_selector(self, selector: str):
        self.queried.append(selector)
        if selector in self.appear_after:
            needed, handle = self.appear_after[selector]
            return handle if self.queried.count(selector) >= needed else None
        value = self.elements.get(selector)
        if isinstance(value, Exception):
            raise value
        return value

    async def click(self, selector: str) -> None:
        self.clicked.append(selector)

    async def fill(self, selector: str, text: str) -> None:
        self.filled.append((selector, text))

    async def wait_for_timeout(self, timeout: float) -> None:
        self.timeouts.append(timeout)

    async def goto(self, url: str, **kwargs: Any) -> None:
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)
        self.url = url

    async def wait_for_load_state(self, state: str, timeout: Optional[float] = None) -> None:
        self.load_states.append(state)
        if self.load_state_error is not None:
            raise self.load_state_error


class FakeSession:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.close_calls = 0

    async def close(self) -> None:
        self.close_calls += 1


class RecordingGate:
    """Operator gate that answers immediately and remembers the prompts."""

    def __init__(self) -> None:
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return "\n"


def detached_error() -> PlaywrightError:
    return PlaywrightError("Frame was detached")
