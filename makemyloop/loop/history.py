# makemyloop/loop/history.py
# -*- coding: utf-8 -*-

"""
Session history of generated loops.

Append-only and unbounded; the UI only shows the most recent few. Every
mutation goes through one lock so that, with several generations in flight,
insertion order is completion order and each loop's color matches its index.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterator, List

from makemyloop.core.models import Loop
from makemyloop.infra.logging import get_logger

_log = get_logger(__name__)


class HistoryStore:
    """Ordered, append-only collection of Loop records."""

    def __init__(self) -> None:
        self._loops: List[Loop] = []
        self._lock = threading.Lock()

    def append(self, loop: Loop) -> None:
        with self._lock:
            self._loops.append(loop)
            size = len(self._loops)
        _log.debug("history: appended loop id=%s (size=%s)", loop.id, size)

    def commit(self, factory: Callable[[int], Loop]) -> Loop:
        """
        Build a loop from its insertion index and append it, atomically.

        `factory(index)` runs under the lock and must not block on I/O.
        """
        with self._lock:
            index = len(self._loops)
            loop = factory(index)
            self._loops.append(loop)
        _log.debug("history: committed loop id=%s at index=%s", loop.id, index)
        return loop

    def recent(self, n: int) -> List[Loop]:
        """Last `n` loops, oldest first. n <= 0 gives an empty list."""
        if n <= 0:
            return []
        with self._lock:
            return list(self._loops[-n:])

    def snapshot(self) -> List[Loop]:
        with self._lock:
            return list(self._loops)

    def __len__(self) -> int:
        with self._lock:
            return len(self._loops)

    def __iter__(self) -> Iterator[Loop]:
        return iter(self.snapshot())
