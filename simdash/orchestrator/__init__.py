from .stage import PipelineStage, StageResult, run_stage
from .pipeline import RefreshPipeline
from .guard import SingleFlightGuard
from .simulation import SimulationInvoker
from .registry import CycleRecord, CycleRegistry
from .scheduler import Orchestrator, Scheduler

__all__ = [
    "PipelineStage", "StageResult", "run_stage",
    "RefreshPipeline",
    "SingleFlightGuard",
    "SimulationInvoker",
    "CycleRecord", "CycleRegistry",
    "Orchestrator", "Scheduler",
]
