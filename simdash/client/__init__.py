from .types import AppData, GlobalState, LogEvent, StrategySnapshot, STRATEGIES, STRATEGY_IDS
from .fetcher import SnapshotFetcher
from .sync import SyncSession

__all__ = [
    "AppData", "GlobalState", "LogEvent", "StrategySnapshot",
    "STRATEGIES", "STRATEGY_IDS",
    "SnapshotFetcher",
    "SyncSession",
]
