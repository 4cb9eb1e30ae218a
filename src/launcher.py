"""
Browser Launcher - Open a YouTube Music URL with a platform-specific command.

Only macOS (AppleScript via osascript) and Windows (cmd start) are wired to a
command. Other platforms report UNSUPPORTED instead of attempting anything.
"""

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


logger = logging.getLogger(__name__)

DEFAULT_BROWSERS = {
    "darwin": "Google Chrome",
    "win32": "chrome",
}

APPLESCRIPT_TEMPLATE = """tell application "{browser}"
    activate
    open location "{url}"
end tell"""


class UnsupportedPlatformError(Exception):
    """Raised when no launch command exists for the host platform."""


class LaunchStatus(str, Enum):
    """Outcome of a launch attempt."""
    PENDING = "pending"
    LAUNCHED = "launched"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


@dataclass
class LaunchOutcome:
    """Result of opening a URL in the browser."""

    url: str
    platform: str
    status: LaunchStatus = LaunchStatus.PENDING
    command: list[str] = field(default_factory=list)
    returncode: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == LaunchStatus.LAUNCHED


class Launcher:
    """
    Opens URLs in a browser on macOS and Windows.

    Launches run as tracked asyncio tasks so their outcome can be observed
    after the tool reply has already been sent.
    """

    def __init__(self, platform: Optional[str] = None, browser: Optional[str] = None):
        self.platform = platform or sys.platform
        self.browser = browser or DEFAULT_BROWSERS.get(self.platform, "")
        self._pending: set[asyncio.Task] = set()

    def is_supported(self) -> bool:
        return self.platform in DEFAULT_BROWSERS

    def build_command(self, url: str) -> list[str]:
        """Build the argv that opens url on this platform."""
        if self.platform == "darwin":
            script = APPLESCRIPT_TEMPLATE.format(browser=self.browser, url=url)
            return ["osascript", "-e", script]
        if self.platform == "win32":
            # Empty title argument so start does not treat the browser name as one
            return ["cmd", "/c", "start", "", self.browser, url]
        raise UnsupportedPlatformError(f"No launch command for platform: {self.platform}")

    async def launch(self, url: str) -> LaunchOutcome:
        """Run the launch command and wait for it to exit. Never raises."""
        outcome = LaunchOutcome(url=url, platform=self.platform)

        try:
            outcome.command = self.build_command(url)
        except UnsupportedPlatformError as e:
            outcome.status = LaunchStatus.UNSUPPORTED
            outcome.error = str(e)
            return outcome

        try:
            process = await asyncio.create_subprocess_exec(
                *outcome.command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
        except OSError as e:
            outcome.status = LaunchStatus.FAILED
            outcome.error = str(e)
            logger.warning("Could not run %s: %s", outcome.command[0], e)
            return outcome

        outcome.returncode = process.returncode
        if process.returncode == 0:
            outcome.status = LaunchStatus.LAUNCHED
        else:
            outcome.status = LaunchStatus.FAILED
            detail = (stderr or b"").decode(errors="replace").strip()
            outcome.error = detail or f"exit status {process.returncode}"
        return outcome

    def schedule(
        self,
        url: str,
        on_done: Optional[Callable[[LaunchOutcome], None]] = None,
    ) -> asyncio.Task:
        """
        Start a launch in the background and return its task.

        Args:
            url: URL to open
            on_done: Called with the LaunchOutcome once the command finishes

        Returns:
            The task running the launch; awaiting it yields the LaunchOutcome
        """
        task = asyncio.create_task(self.launch(url))
        self._pending.add(task)

        def _finished(t: asyncio.Task):
            self._pending.discard(t)
            if t.cancelled():
                logger.debug("Launch of %s cancelled", url)
                return
            if on_done is not None:
                on_done(t.result())

        task.add_done_callback(_finished)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def wait_pending(self, timeout: float = 5.0):
        """Wait for in-flight launches, cancelling any still running after timeout."""
        if not self._pending:
            return
        tasks = list(self._pending)
        _, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
