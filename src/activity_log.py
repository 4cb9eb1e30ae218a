"""
In-process activity log for the YouTube Music MCP server.

Keeps a bounded trail of what each tool call did (searches, launches,
errors). Nothing here is served over MCP; entries are mirrored to logging.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime


logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500


@dataclass
class ActivityEntry:
    """A single activity log entry."""
    timestamp: str
    level: int
    message: str


class ActivityLog:
    """Bounded, append-only trace of server activity."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self._entries: deque[ActivityEntry] = deque(maxlen=max_entries)

    def record(self, message: str, level: int = logging.INFO) -> ActivityEntry:
        entry = ActivityEntry(
            timestamp=datetime.now().isoformat(),
            level=level,
            message=message,
        )
        self._entries.append(entry)
        logger.log(level, message)
        return entry

    def entries(self) -> list[ActivityEntry]:
        """Snapshot of the current entries, oldest first."""
        return list(self._entries)

    def messages(self) -> list[str]:
        return [e.message for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)
