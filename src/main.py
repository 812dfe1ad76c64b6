"""CLI entrypoint: hand a GitHub issue to the hosted coding assistant."""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from issue_bridge.config import (
    COMPLETION_TIMEOUT_S,
    DEFAULT_BROWSER,
    POLL_INTERVAL_S,
    TARGET_URL,
    USER_DATA_DIR,
    get_browser_path,
    get_github_token,
    load_selector_set,
)
from issue_bridge.models import BrowserKind, LaunchConfig, RunOptions, SelectorSet
from issue_bridge.runner import run_issue_task

REPO_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Paste a GitHub issue into claude.ai/code and wait for the pull request."
    )
    parser.add_argument("--repo", "-r", required=True, help="GitHub repository in format owner/repo.")
    parser.add_argument("--issue", "-i", required=True, type=int, help="GitHub issue number.")
    parser.add_argument(
        "--github-token",
        "-t",
        default=get_github_token(),
        help="GitHub personal access token (or use GITHUB_TOKEN env var).",
    )
    parser.add_argument(
        "--manual-login",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Wait for manual login before automating the page.",
    )
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Run the browser in headless mode.",
    )
    parser.add_argument(
        "--browser",
        "-b",
        choices=[kind.value for kind in BrowserKind],
        default=DEFAULT_BROWSER,
        help="Browser to use (chromium or yandex).",
    )
    parser.add_argument(
        "--browser-path",
        "-p",
        default=get_browser_path(),
        help="Path to browser executable (or use BROWSER_PATH env var).",
    )
    parser.add_argument("--profile-dir", default=str(USER_DATA_DIR), help="Persistent browser profile directory.")
    parser.add_argument("--selectors", help="JSON file overriding the input/submit/completion selector lists.")
    parser.add_argument(
        "--timeout-minutes",
        type=float,
        default=COMPLETION_TIMEOUT_S / 60,
        help="How long to wait for a completion indicator.",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL_S,
        help="Seconds between completion checks.",
    )
    parser.add_argument("--log-level", default="INFO", help="Python logging level.")
    parser.add_argument("--log-file", help="Optional file to mirror log output into.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    _configure_logging(args.log_level, args.log_file)
    _validate_args(args)
    options = build_options(args)

    try:
        result = asyncio.run(run_issue_task(options))
    except KeyboardInterrupt:
        logging.warning("Interrupted before the browser started.")
        sys.exit(0)
    except Exception:  # noqa: BLE001 - last line of defence, report and fail
        logging.exception("Fatal error")
        sys.exit(1)

    logging.info("Run finished: %s", result.status.value)
    sys.exit(result.exit_code)


def build_options(args: argparse.Namespace) -> RunOptions:
    launch = LaunchConfig(
        browser=BrowserKind(args.browser),
        executable_path=args.browser_path or None,
        headless=args.headless,
        user_data_dir=Path(args.profile_dir).expanduser(),
    )
    return RunOptions(
        repo=args.repo,
        issue_number=args.issue,
        github_token=args.github_token or None,
        manual_login=args.manual_login,
        launch=launch,
        selectors=_load_selectors(args.selectors),
        target_url=TARGET_URL,
        completion_timeout_s=args.timeout_minutes * 60,
        poll_interval_s=args.poll_interval,
    )


def _load_selectors(path: Optional[str]) -> SelectorSet:
    try:
        return load_selector_set(Path(path).expanduser() if path else None)
    except ValueError as exc:
        raise SystemExit(f"Invalid selectors file {path}: {exc}")


def _validate_args(args: argparse.Namespace) -> None:
    if not REPO_PATTERN.match(args.repo):
        raise SystemExit(f"Repository must look like owner/repo: {args.repo}")
    if args.issue <= 0:
        raise SystemExit(f"Issue number must be positive: {args.issue}")
    if args.selectors:
        selectors_path = Path(args.selectors).expanduser()
        if not selectors_path.is_file():
            raise SystemExit(f"Selectors file not found: {selectors_path}")
    if args.timeout_minutes <= 0 or args.poll_interval <= 0:
        raise SystemExit("--timeout-minutes and --poll-interval must be positive")
    profile_path = Path(args.profile_dir).expanduser()
    if profile_path.exists() and not profile_path.is_dir():
        raise SystemExit(f"Profile directory must be a directory path: {profile_path}")


def _configure_logging(log_level: str, log_file: Optional[str]) -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    handlers: List[logging.Handler] = [stream_handler]
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    logging.basicConfig(level=level, handlers=handlers)


if __name__ == "__main__":
    main()
