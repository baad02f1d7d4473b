# simdash/client/sync.py
from __future__ import annotations

import threading
from typing import Callable

from simdash.utils.errors import SnapshotFetchError
from simdash.utils.logger import logs
from simdash.client.fetcher import SnapshotFetcher
from simdash.client.types import AppData

ChangeListener = Callable[[AppData], None]


class SyncSession:
    """
    SyncSession = client-side change detection over the live snapshot

    Lifecycle:
      - one per client, alive for the whole session, no teardown

    Protocol (per poll):
      1. read commit (cheap)
      2. unchanged -> done
      3. changed   -> fetch + decode the full batch, swap `data` as one unit,
                      only then remember the new commit
      4. any required part fails -> keep previous data, set `error`,
                                    retry on the next poll (no backoff)
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        poll_interval: float = 30.0,
        on_change: ChangeListener | None = None,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        self.fetcher = fetcher
        self.poll_interval = poll_interval
        self.on_change = on_change

        self._lock = threading.Lock()
        self._data: AppData | None = None
        self._last_commit: int | None = None
        self._error: str | None = None

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    # --------------------------------------------------
    # read side
    # --------------------------------------------------
    @property
    def data(self) -> AppData | None:
        with self._lock:
            return self._data

    @property
    def last_commit(self) -> int | None:
        with self._lock:
            return self._last_commit

    @property
    def error(self) -> str | None:
        with self._lock:
            return self._error

    @property
    def stale(self) -> bool:
        return self.error is not None

    # --------------------------------------------------
    # protocol
    # --------------------------------------------------
    def poll(self) -> bool:
        """
        One sync step. Returns True when a new snapshot was installed.
        """
        try:
            commit = self.fetcher.fetch_commit()
            if commit == self.last_commit:
                return False

            logs.info(f"[Sync] commit {self.last_commit} -> {commit}, refreshing")
            data = self.fetcher.fetch_app_data()
        except SnapshotFetchError as e:
            with self._lock:
                self._error = "Failed to fetch data"
            logs.warning(f"[Sync] refresh failed, keeping previous snapshot: {e}")
            return False

        with self._lock:
            self._data = data
            self._last_commit = commit
            self._error = None

        if self.on_change is not None:
            try:
                self.on_change(data)
            except Exception as e:
                logs.exception(f"[Sync] on_change listener failed: {e!r}")
        return True

    # --------------------------------------------------
    # loop
    # --------------------------------------------------
    def run(self) -> None:
        """
        Blocking loop: poll now, then every poll_interval until stop().
        """
        self.poll()
        while not self._stop.wait(self.poll_interval):
            self.poll()

    def start(self) -> None:
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="simdash-sync", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
