# simdash/client/types.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

StrategyId = Literal["s1", "s2", "s3", "s4", "s5", "s6"]
STRATEGY_IDS: tuple[StrategyId, ...] = ("s1", "s2", "s3", "s4", "s5", "s6")


# =============================================================================
# Global state
# =============================================================================

@dataclass(frozen=True)
class GlobalState:
    capital: float
    seq: float
    year: float
    month: float
    day: float

    @property
    def date(self) -> str:
        if any(math.isnan(v) for v in (self.year, self.month, self.day)):
            return "--"
        return f"{int(self.year)}-{int(self.month):02d}-{int(self.day):02d}"


# =============================================================================
# Strategy snapshots: shared core + per-strategy extension, tagged by id
# =============================================================================

@dataclass(frozen=True)
class StrategyCore:
    position: float     # -1 / 0 / 1
    allocation: float
    pnl: float
    trades: float
    equity: float


@dataclass(frozen=True)
class PelosiExtra:
    nanc: float


@dataclass(frozen=True)
class NatGasExtra:
    peak_ng: float
    ng: float
    stopped: float


@dataclass(frozen=True)
class NasdaqExtra:
    nq: float


@dataclass(frozen=True)
class SvxyExtra:
    svxy: float


@dataclass(frozen=True)
class GoldExtra:
    gold: float


StrategyExtra = Union[PelosiExtra, NatGasExtra, NasdaqExtra, SvxyExtra, GoldExtra]


@dataclass(frozen=True)
class StrategySnapshot:
    strategy_id: StrategyId
    core: StrategyCore
    extra: StrategyExtra


@dataclass(frozen=True)
class StrategySpec:
    """
    Static description of one strategy slot.

    `layout` is the positional field order of its snapshot array; it is the
    wire contract with the simulation and must only change together with it.
    """

    strategy_id: StrategyId
    filename: str
    layout: tuple[str, ...]
    extra_type: type
    short_name: str
    title: str
    subtitle: str
    color: str


STRATEGIES: Mapping[StrategyId, StrategySpec] = {
    "s1": StrategySpec(
        "s1", "strat_one.json", ("pos", "alloc", "pnl", "nanc", "trades", "eq"),
        PelosiExtra, "Pelosi", "S1: Pelosi Tracker", "NANC > 50d MA", "#ef4444",
    ),
    "s2": StrategySpec(
        "s2", "strat_two.json", ("pos", "peak_ng", "alloc", "pnl", "ng", "trades", "eq", "stopped"),
        NatGasExtra, "NG Seasonal", "S2: NG Seasonal", "Winter long, NG>$3.50, trail", "#22c55e",
    ),
    "s3": StrategySpec(
        "s3", "strat_three.json", ("pos", "alloc", "pnl", "nq", "trades", "eq"),
        NasdaqExtra, "NQ Trend", "S3: NQ Trend", "NQ > 200d MA, VIX < 30", "#eab308",
    ),
    "s4": StrategySpec(
        "s4", "strat_four.json", ("pos", "alloc", "pnl", "svxy", "trades", "eq"),
        SvxyExtra, "SVXY Vol", "S4: SVXY Vol", "Long SVXY, VIX>mean+RV", "#a855f7",
    ),
    "s5": StrategySpec(
        "s5", "strat_five.json", ("pos", "alloc", "pnl", "nq", "trades", "eq"),
        NasdaqExtra, "LinReg", "S5: LinReg", "NAS100 1-min W=200", "#f97316",
    ),
    "s6": StrategySpec(
        "s6", "strat_six.json", ("pos", "alloc", "pnl", "gold", "trades", "eq"),
        GoldExtra, "Gold Trend", "S6: Gold Trend", "Long GLD > 200d MA", "#06b6d4",
    ),
}


# =============================================================================
# Event log
# =============================================================================

@dataclass(frozen=True)
class TradeEvent:
    strategy: str
    action: str         # ENTRY | EXIT
    price: float

    @property
    def is_entry(self) -> bool:
        return self.action == "ENTRY"


@dataclass(frozen=True)
class PriceEvent:
    fields: tuple[str, ...]


@dataclass(frozen=True)
class EquityEvent:
    value: float


@dataclass(frozen=True)
class StratEvent:
    strategy: str
    position: float
    equity: float


@dataclass(frozen=True)
class RawEvent:
    fields: tuple[str, ...]


EventPayload = Union[TradeEvent, PriceEvent, EquityEvent, StratEvent, RawEvent]


@dataclass(frozen=True)
class LogEvent:
    seq: float                   # int when well-formed, nan otherwise
    date: str
    type: str
    details: tuple[str, ...]
    payload: EventPayload | None = field(default=None, compare=False, repr=False)


# =============================================================================
# Whole snapshot
# =============================================================================

@dataclass(frozen=True)
class AppData:
    """
    One fully decoded snapshot. Never mutated; replaced as a unit.
    """

    state: GlobalState
    strategies: Mapping[StrategyId, StrategySnapshot]
    equity: tuple[float, ...]
    strategy_equities: Mapping[StrategyId, tuple[float, ...]]
    events: tuple[LogEvent, ...]
    benchmark: tuple[float, ...]
    commit: int
