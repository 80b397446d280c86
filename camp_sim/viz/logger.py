"""Camp event log: the short on-screen feed plus a structured session record."""

from __future__ import annotations

import json
import os
from collections import deque
from dataclasses import dataclass, field
from typing import Optional, TextIO

from camp_sim.core.config import LOG_CAPACITY


@dataclass
class LogEntry:
    """A single log entry."""

    time: float
    day: int
    category: str
    message: str
    meeple_ids: list[int] = field(default_factory=list)
    data: dict = field(default_factory=dict)


class SimLogger:
    """Structured logging with categories, verbosity control, and a rolling feed.

    Every entry lands in the rolling feed (``recent``), newest first and
    capped at ``capacity``. Entries are also buffered and written to the
    optional stdout/file sinks on ``flush`` according to verbosity.
    """

    # Category constants
    COMBAT = "COMBAT"
    HARVEST = "HARVEST"
    FIRE = "FIRE"
    ACTION = "ACTION"
    COMMAND = "COMMAND"
    LIFECYCLE = "LIFECYCLE"

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = False,
        capacity: int = LOG_CAPACITY,
    ) -> None:
        """
        verbosity levels:
            0 = only lifecycle and combat
            1 = + harvests and fire
            2 = + timed actions
            3 = everything (command feedback included)
        """
        self.verbosity = verbosity
        self.revision: int = 0
        self._recent: deque[str] = deque(maxlen=capacity)
        self._buffer: list[LogEntry] = []
        self._all_entries: list[LogEntry] = []
        self._file: Optional[TextIO] = None
        self._stdout = stdout

        if log_file:
            os.makedirs(os.path.dirname(log_file) if os.path.dirname(log_file) else ".", exist_ok=True)
            self._file = open(log_file, "w", encoding="utf-8")

    @property
    def recent(self) -> list[str]:
        """On-screen feed, most recent first."""
        return list(self._recent)

    @property
    def entries(self) -> list[LogEntry]:
        return self._all_entries + self._buffer

    def log(
        self,
        category: str,
        message: str,
        meeple_ids: Optional[list[int]] = None,
        time: float = 0.0,
        day: int = 0,
        **data,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            time=time,
            day=day,
            category=category,
            message=message,
            meeple_ids=meeple_ids or [],
            data=data,
        )
        self._recent.appendleft(message)
        self._buffer.append(entry)
        self.revision += 1

    def flush(self) -> None:
        """Write buffered entries to the sinks."""
        _VERBOSITY_MAP = {
            self.LIFECYCLE: 0,
            self.COMBAT: 0,
            self.HARVEST: 1,
            self.FIRE: 1,
            self.ACTION: 2,
            self.COMMAND: 3,
        }

        for entry in self._buffer:
            required_verbosity = _VERBOSITY_MAP.get(entry.category, 1)
            if required_verbosity <= self.verbosity:
                line = f"[Day {entry.day:>3} {entry.time:>8.2f}s] [{entry.category:<9}] {entry.message}"
                if self._stdout:
                    print(line)
                if self._file:
                    self._file.write(line + "\n")

        self._all_entries.extend(self._buffer)
        self._buffer.clear()

        if self._file:
            self._file.flush()

    def get_narrative(self, day: int) -> str:
        """Generate a human-readable summary of a specific day."""
        day_entries = [e for e in self.entries if e.day == day]
        if not day_entries:
            return f"Day {day}: Nothing notable happened."

        lines = [f"=== Day {day} ==="]
        for entry in day_entries:
            lines.append(f"  [{entry.category}] {entry.message}")
        return "\n".join(lines)

    def export_json(self, filepath: str) -> None:
        """Export all log entries to JSON."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        data = [
            {
                "time": round(e.time, 3),
                "day": e.day,
                "category": e.category,
                "message": e.message,
                "meeple_ids": e.meeple_ids,
                "data": e.data,
            }
            for e in self.entries
        ]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def close(self) -> None:
        """Flush and close the log file."""
        self.flush()
        if self._file:
            self._file.close()
            self._file = None
