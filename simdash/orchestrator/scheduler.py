#!filepath: simdash/orchestrator/scheduler.py
from __future__ import annotations

import threading
import time
from pathlib import Path

from simdash.utils.logger import logs
from simdash.utils.path import PathManager
from simdash.config.scheduler_config import SchedulerConfig
from simdash.orchestrator.guard import SingleFlightGuard
from simdash.orchestrator.pipeline import RefreshPipeline
from simdash.orchestrator.registry import CycleRegistry
from simdash.orchestrator.simulation import SimulationInvoker
from simdash.orchestrator.stage import PipelineStage


class Orchestrator:
    """
    Orchestrator = one cycle (refresh pipeline -> simulation) behind the run-lock

    Lifecycle:
      - created once at process start
      - lives for the whole process, no teardown

    Guarantees:
      - at most one cycle in flight (contenders log "skip" and return)
      - run-lock released on every exit path
      - nothing raised from a cycle escapes trigger_cycle
    """

    def __init__(
            self,
            pipeline: RefreshPipeline,
            simulation: SimulationInvoker,
            registry: CycleRegistry | None = None,
            guard: SingleFlightGuard | None = None,
    ):
        self.pipeline = pipeline
        self.simulation = simulation
        self.registry = registry if registry is not None else CycleRegistry()
        self.guard = guard if guard is not None else SingleFlightGuard()

        # executed (not skipped) cycles; only written while the guard is held
        self.executions = 0

    @classmethod
    def from_config(cls, cfg: SchedulerConfig, root: Path | None = None) -> "Orchestrator":
        root = root if root is not None else PathManager.root()
        pipeline = RefreshPipeline(
            stages=[PipelineStage.from_config(s) for s in cfg.stages],
            cwd=root,
            timeout=cfg.stage_timeout,
        )
        simulation = SimulationInvoker(
            stage=PipelineStage.from_config(cfg.simulation),
            cwd=root,
            timeout=cfg.simulation_timeout,
        )
        return cls(pipeline, simulation, registry=CycleRegistry(maxlen=cfg.history))

    @property
    def running(self) -> bool:
        return self.guard.busy

    def trigger_cycle(self, trigger: str = "manual") -> bool:
        """
        Returns True if a cycle ran, False if it was skipped.
        """
        with self.guard.hold() as acquired:
            if not acquired:
                logs.warning(f"[Orchestrator] cycle already running - skipping (trigger={trigger})")
                return False

            self.executions += 1
            record = self.registry.open(trigger)
            logs.info(f"[Orchestrator] cycle #{record.cycle_id} START (trigger={trigger})")

            try:
                record.stages = self.pipeline.run()
                record.simulation = self.simulation.run()
            except Exception as e:
                record.error = repr(e)
                logs.exception(f"[Orchestrator] cycle #{record.cycle_id} crashed: {e!r}")
            finally:
                record.finish()
                logs.info(f"[Orchestrator] cycle #{record.cycle_id} DONE status={record.status}")

            return True


class Scheduler:
    """
    Fires one cycle at start, then one every `interval` seconds, until stop().

    Ticks keep a fixed cadence: each tick hands the cycle to its own worker
    thread, so a cycle that outlives the interval makes the next tick a
    logged no-op instead of delaying the timer.
    """

    def __init__(self, orchestrator: Orchestrator, interval: float):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.orchestrator = orchestrator
        self.interval = interval

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._workers: list[threading.Thread] = []

    # --------------------------------------------------
    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            logs.warning("[Scheduler] already started")
            return

        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="simdash-scheduler", daemon=True)
        self._thread.start()
        logs.info(f"[Scheduler] cycle every {self.interval / 60:g} min")

    def stop(self, timeout: float | None = None) -> None:
        """
        Stops future ticks; an in-flight cycle is left to finish.
        """
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def join_workers(self, timeout: float | None = None) -> None:
        for t in list(self._workers):
            t.join(timeout)

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # --------------------------------------------------
    def fire(self, trigger: str) -> threading.Thread:
        t = threading.Thread(
            target=self._safe_trigger,
            args=(trigger,),
            name=f"simdash-cycle-{trigger}",
            daemon=True,
        )
        self._workers = [w for w in self._workers if w.is_alive()]
        self._workers.append(t)
        t.start()
        return t

    def _safe_trigger(self, trigger: str) -> None:
        try:
            self.orchestrator.trigger_cycle(trigger)
        except Exception as e:
            # the scheduler itself never dies on a cycle error
            logs.exception(f"[Scheduler] trigger failed: {e!r}")

    def _loop(self) -> None:
        self.fire("startup")

        next_tick = time.monotonic() + self.interval
        while not self._stop.wait(max(0.0, next_tick - time.monotonic())):
            self.fire("timer")
            next_tick += self.interval
            now = time.monotonic()
            if next_tick < now:
                # missed ticks (host suspend) collapse into one
                next_tick = now + self.interval

        logs.info("[Scheduler] stopped")
