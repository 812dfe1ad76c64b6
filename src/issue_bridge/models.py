"""Core data models for the issue bridge."""

from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    body: str = ""

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Issue":
        return cls(
            url=payload["html_url"],
            title=payload["title"],
            body=payload.get("body") or "",
        )


class BrowserKind(str, Enum):
    CHROMIUM = "chromium"
    YANDEX = "yandex"


class Viewport(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = 1920
    height: int = 1080


class LaunchConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    browser: BrowserKind = BrowserKind.YANDEX
    executable_path: Optional[str] = None
    headless: bool = False
    viewport: Viewport = Field(default_factory=Viewport)
    user_data_dir: Path = Path("playwright-user-data")


class ResolvedBrowser(BaseModel):
    browser: BrowserKind
    executable_path: Optional[str] = None


class CompletionIndicator(BaseModel):
    selector: str
    actionable: bool = False  # True for controls that should be clicked on match


class SelectorSet(BaseModel):
    input: List[str] = Field(default_factory=list)
    submit: List[str] = Field(default_factory=list)
    completion: List[CompletionIndicator] = Field(default_factory=list)


class FillOutcome(str, Enum):
    SUBMITTED = "submitted"
    AWAITING_MANUAL = "awaiting_manual"


class PollOutcome(str, Enum):
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    MANUAL = "manual"
    INTERRUPTED = "interrupted"
    ERRORED = "errored"
    FAILED = "failed"


class RunOptions(BaseModel):
    repo: str
    issue_number: int
    github_token: Optional[str] = None
    manual_login: bool = True
    launch: LaunchConfig = Field(default_factory=LaunchConfig)
    selectors: SelectorSet = Field(default_factory=SelectorSet)
    target_url: str = "https://claude.ai/code"
    completion_timeout_s: float = 30 * 60.0
    poll_interval_s: float = 10.0
    url_change_timeout_s: float = 15.0


class RunResult(BaseModel):
    status: RunStatus
    issue: Optional[Issue] = None
    session_url: Optional[str] = None
    fill: Optional[FillOutcome] = None
    completion: Optional[PollOutcome] = None
    error: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.status is RunStatus.FAILED else 0
