# simdash/config/scheduler_config.py
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class StageConfig(BaseModel):
    name: str
    command: str
    args: list[str] = Field(default_factory=list)


def _default_stages() -> list[StageConfig]:
    scripts = [
        "download_svxy.ts",
        "download_gold.ts",
        "download_nanc.ts",
        "download_pelosi_stocks.ts",
        "download_goog.ts",
        "gen_benchmark.ts",
    ]
    return [StageConfig(name=s, command="bun", args=["run", s]) for s in scripts]


class SchedulerConfig(BaseModel):
    interval_minutes: float = 30.0
    stages: list[StageConfig] = Field(default_factory=_default_stages)
    simulation: StageConfig = StageConfig(name="live.ua", command="uiua", args=["run", "live.ua"])

    # None = wait forever
    stage_timeout: float | None = None
    simulation_timeout: float | None = None

    # cycle records kept in memory for /cycles
    history: int = 50

    @field_validator("interval_minutes")
    @classmethod
    def _positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("interval_minutes must be > 0")
        return v

    @field_validator("stage_timeout", "simulation_timeout")
    @classmethod
    def _positive_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("timeouts must be > 0 (or null)")
        return v

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60.0
