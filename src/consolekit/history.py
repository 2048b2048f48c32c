"""
Bounded, newest-first command history with cursor navigation.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional


class CommandHistory:
    def __init__(self, max_size: int = 50) -> None:
        self.max_size = max_size
        self._entries: Deque[str] = deque(maxlen=max_size)
        self._cursor = -1

    def add(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        if not self._entries or self._entries[0] != line:
            self._entries.appendleft(line)
        self._cursor = -1

    def previous(self) -> Optional[str]:
        """Step back to an older entry; stays on the oldest once reached."""
        if not self._entries:
            return None
        self._cursor = min(self._cursor + 1, len(self._entries) - 1)
        return self._entries[self._cursor]

    def next(self) -> Optional[str]:
        """Step towards newer entries; ``None`` once past the newest."""
        if self._cursor <= 0:
            self._cursor = -1
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1

    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
