"""
Console transcript: every executed line, its result, and daemon events, kept
as a bounded sequence of typed entries the REPL, HTTP routes and stream read.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Tuple

from .errors import is_error_result

COMMAND_EVENT = "command"
RESULT_EVENT = "result"


def _utc_timestamp() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass(frozen=True)
class LogEntry:
    id: int
    event: str
    level: str = "info"
    timestamp: str = field(default_factory=_utc_timestamp)
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "level": self.level,
            "event": self.event,
            "details": dict(self.details),
        }


class LogBuffer:
    def __init__(self, max_events: int = 300) -> None:
        self.max_events = max_events
        self._entries: Deque[LogEntry] = deque(maxlen=max_events)
        self._lock = threading.Lock()
        self._seq = 0

    def append(self, event: str, level: str = "info", **details: Any) -> LogEntry:
        with self._lock:
            self._seq += 1
            entry = LogEntry(id=self._seq, event=event, level=level, details=details)
            self._entries.append(entry)
        return entry

    def record_command(self, line: str) -> LogEntry:
        return self.append(COMMAND_EVENT, line=line)

    def record_result(self, line: str, text: str) -> LogEntry:
        """Record the result string of ``line``; failures are logged at error level."""
        failed = is_error_result(text)
        return self.append(RESULT_EVENT, level="error" if failed else "info", line=line, text=text)

    def history(self, limit: Optional[int] = None, event: Optional[str] = None) -> List[LogEntry]:
        with self._lock:
            entries = list(self._entries)
        if event:
            entries = [entry for entry in entries if entry.event == event]
        if limit is None or limit <= 0:
            return entries
        return entries[-limit:]

    def transcript(self, limit: Optional[int] = None) -> List[Tuple[str, str]]:
        """(line, result) pairs for executed commands, oldest first."""
        return [(entry.details.get("line", ""), entry.details.get("text", "")) for entry in self.history(limit, RESULT_EVENT)]

    def snapshot_after(self, last_id: int) -> Tuple[List[LogEntry], int]:
        with self._lock:
            entries = [entry for entry in self._entries if entry.id > last_id]
            latest = self._seq
        return entries, latest

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def log_event(buffer: LogBuffer, event: str, level: str = "info", **details: Any) -> LogEntry:
    try:
        return buffer.append(event, level=level, **details)
    except Exception:
        return LogEntry(id=-1, event=event, level=level, details=details)
