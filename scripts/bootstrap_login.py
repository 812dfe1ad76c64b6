"""Open the persistent profile headed so the operator can log in once.

Later runs reuse the cookies stored in the profile directory and can skip
the manual-login pause with ``--no-manual-login``.

Usage:
  python scripts/bootstrap_login.py [--browser chromium] [--profile-dir playwright-user-data]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from issue_bridge.browser import BrowserNotFoundError, launch_session  # noqa: E402
from issue_bridge.config import DEFAULT_BROWSER, TARGET_URL, USER_DATA_DIR, get_browser_path  # noqa: E402
from issue_bridge.console import wait_for_enter  # noqa: E402
from issue_bridge.models import BrowserKind, LaunchConfig  # noqa: E402


async def bootstrap(config: LaunchConfig) -> None:
    session = await launch_session(config)
    try:
        await session.page.goto(TARGET_URL, wait_until="domcontentloaded")
        await wait_for_enter("Log in in the browser window, then press Enter here to save the session...")
    finally:
        await session.close()
    logging.info("Profile saved in %s", config.user_data_dir)


def main() -> None:
    parser = argparse.ArgumentParser(description="Log in once and keep the session in the browser profile.")
    parser.add_argument("--browser", choices=[kind.value for kind in BrowserKind], default=DEFAULT_BROWSER)
    parser.add_argument("--browser-path", default=get_browser_path())
    parser.add_argument("--profile-dir", default=str(USER_DATA_DIR))
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    config = LaunchConfig(
        browser=BrowserKind(args.browser),
        executable_path=args.browser_path or None,
        headless=False,
        user_data_dir=Path(args.profile_dir).expanduser(),
    )
    try:
        asyncio.run(bootstrap(config))
    except BrowserNotFoundError as exc:
        raise SystemExit(str(exc))


if __name__ == "__main__":
    main()
