# simdash/orchestrator/guard.py
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class SingleFlightGuard:
    """
    Run-lock: at most one holder at a time, contenders are dropped (not queued).

    Backed by a real lock so the timer thread and the startup trigger
    cannot both get in.
    """

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """
        Yields True when acquired, False when another holder is in flight.
        Release happens on every exit path of the with-block.
        """
        acquired = self._lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                self._lock.release()
