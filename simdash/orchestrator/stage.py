# simdash/orchestrator/stage.py
from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter

from simdash.config.scheduler_config import StageConfig


@dataclass(frozen=True)
class PipelineStage:
    """
    One external command (data download, benchmark build, the simulation itself).

    Immutable, built once at startup from config.
    """

    name: str
    command: str
    args: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, cfg: StageConfig) -> "PipelineStage":
        return cls(name=cfg.name, command=cfg.command, args=tuple(cfg.args))

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


@dataclass
class StageResult:
    name: str
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None      # spawn failure
    timed_out: bool = False
    elapsed: float = 0.0
    cmd: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and self.error is None and not self.timed_out


def run_stage(
    stage: PipelineStage,
    cwd: Path | str,
    timeout: float | None = None,
) -> StageResult:
    """
    Run one stage to completion and capture its output.

    Never raises: spawn errors and timeouts become fields of the result.
    subprocess.run kills the child when the timeout expires.
    """
    result = StageResult(name=stage.name, cmd=stage.argv)
    start = perf_counter()

    try:
        proc = subprocess.run(
            stage.argv,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        result.exit_code = proc.returncode
        result.stdout = (proc.stdout or "").strip()
        result.stderr = (proc.stderr or "").strip()
    except subprocess.TimeoutExpired as e:
        result.timed_out = True
        result.error = f"timed out after {timeout}s"
        result.stdout = _to_text(e.stdout).strip()
        result.stderr = _to_text(e.stderr).strip()
    except Exception as e:
        result.error = repr(e)

    result.elapsed = perf_counter() - start
    return result


def _to_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
