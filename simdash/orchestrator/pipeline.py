#!filepath: simdash/orchestrator/pipeline.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from simdash.utils.logger import logs
from simdash.orchestrator.stage import PipelineStage, StageResult, run_stage

StageRunner = Callable[[PipelineStage, Path, "float | None"], StageResult]


class RefreshPipeline:
    """
    RefreshPipeline = ordered list of independent data-refresh stages

    Rules:
    - strictly sequential: stage N+1 starts after stage N's process exits
    - a failed stage is logged and skipped, never aborts later stages
    - no retries inside a cycle (stale data until the next cycle)
    """

    def __init__(
            self,
            stages: Sequence[PipelineStage],
            cwd: Path,
            timeout: float | None = None,
            runner: StageRunner = run_stage,
    ):
        self.stages = list(stages)
        self.cwd = cwd
        self.timeout = timeout
        self.runner = runner

    def run(self) -> list[StageResult]:
        logs.info(f"[Pipeline] ====== START ({len(self.stages)} stages) ======")

        results: list[StageResult] = []
        for stage in self.stages:
            logs.info(f"[Pipeline] running {stage.name}...")
            result = self.runner(stage, self.cwd, self.timeout)
            self._log_result(result)
            results.append(result)

        failed = [r.name for r in results if not r.ok]
        logs.info(
            f"[Pipeline] ====== DONE ok={len(results) - len(failed)} failed={len(failed)} ======"
        )
        return results

    @staticmethod
    def _log_result(result: StageResult) -> None:
        if result.stdout:
            logs.info(result.stdout)

        if result.ok:
            return

        if result.error is not None and result.exit_code is None:
            logs.error(f"[Pipeline] {result.name} error: {result.error}")
        else:
            logs.error(
                f"[Pipeline] {result.name} failed (code {result.exit_code}): {result.stderr}"
            )
