# simdash/orchestrator/registry.py
from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from simdash.orchestrator.stage import StageResult

CycleStatus = Literal["RUNNING", "SUCCESS", "FAILED"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass
class CycleRecord:
    cycle_id: int
    trigger: str                  # "startup" | "timer" | "manual"
    status: CycleStatus = "RUNNING"
    started_at: str = field(default_factory=_now)
    finished_at: str | None = None
    stages: list[StageResult] = field(default_factory=list)
    simulation: StageResult | None = None
    error: str | None = None

    def finish(self) -> None:
        self.finished_at = _now()
        if self.error is None and self.simulation is not None and self.simulation.ok:
            self.status = "SUCCESS"
        else:
            self.status = "FAILED"

    def to_dict(self) -> dict:
        return {
            "cycle_id": self.cycle_id,
            "trigger": self.trigger,
            "status": self.status,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "stages": [
                {"name": r.name, "exit_code": r.exit_code, "ok": r.ok, "error": r.error,
                 "elapsed": round(r.elapsed, 3)}
                for r in self.stages
            ],
            "simulation": None if self.simulation is None else {
                "exit_code": self.simulation.exit_code,
                "ok": self.simulation.ok,
                "error": self.simulation.error,
                "timed_out": self.simulation.timed_out,
                "elapsed": round(self.simulation.elapsed, 3),
            },
            "error": self.error,
        }


class CycleRegistry:
    """
    In-memory history of the most recent cycles (never persisted).

    Written by the scheduler thread, read by the HTTP server thread.
    """

    def __init__(self, maxlen: int = 50):
        self._cycles: deque[CycleRecord] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._next_id = 1

    def open(self, trigger: str) -> CycleRecord:
        with self._lock:
            record = CycleRecord(cycle_id=self._next_id, trigger=trigger)
            self._next_id += 1
            self._cycles.append(record)
            return record

    def list(self) -> list[CycleRecord]:
        """
        Newest first (read-only view).
        """
        with self._lock:
            return list(reversed(self._cycles))

    def get(self, cycle_id: int) -> CycleRecord:
        """
        Raises KeyError when the cycle is unknown or already evicted.
        """
        with self._lock:
            for record in self._cycles:
                if record.cycle_id == cycle_id:
                    return record
        raise KeyError(cycle_id)

    def last(self) -> CycleRecord | None:
        with self._lock:
            return self._cycles[-1] if self._cycles else None
