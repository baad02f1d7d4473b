# simdash/orchestrator/simulation.py
from __future__ import annotations

from pathlib import Path

from simdash.utils.logger import logs
from simdash.orchestrator.pipeline import StageRunner
from simdash.orchestrator.stage import PipelineStage, StageResult, run_stage


class SimulationInvoker:
    """
    Runs the simulation binary once per cycle (cwd = project root).

    Output is captured for logging only, never interpreted.
    timeout=None waits forever; a hang then blocks later cycles
    through the run-lock, so production configs should set one.
    """

    def __init__(
        self,
        stage: PipelineStage,
        cwd: Path,
        timeout: float | None = None,
        runner: StageRunner = run_stage,
    ):
        self.stage = stage
        self.cwd = cwd
        self.timeout = timeout
        self.runner = runner

    def run(self) -> StageResult:
        logs.info(f"[Simulation] running {self.stage.name}...")
        result = self.runner(self.stage, self.cwd, self.timeout)

        if result.stdout:
            logs.info(result.stdout)
        if result.stderr:
            logs.info(f"[Simulation] stderr: {result.stderr}")

        if result.error is not None:
            logs.error(f"[Simulation] {self.stage.name} error: {result.error}")
        else:
            logs.info(f"[Simulation] {self.stage.name} exited with code {result.exit_code}")

        return result
