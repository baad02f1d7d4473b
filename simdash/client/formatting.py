# simdash/client/formatting.py
"""
Display helpers for decoded snapshots. Every helper accepts nan.
"""
from __future__ import annotations

import math
from typing import Sequence

from simdash.client.types import (
    STRATEGIES,
    AppData,
    EquityEvent,
    LogEvent,
    PriceEvent,
    StratEvent,
    TradeEvent,
)

MISSING = "--"


def _bad(v: float) -> bool:
    return v is None or not math.isfinite(v)


def fmt_usd(v: float, signed: bool = False) -> str:
    if _bad(v):
        return MISSING
    sign = "+" if signed and v >= 0 else ""
    if v < 0:
        return f"-${abs(v):,.2f}"
    return f"{sign}${v:,.2f}"


def fmt_num(v: float) -> str:
    if _bad(v):
        return MISSING
    return f"{v:,.2f}"


def fmt_int(v: float) -> str:
    if _bad(v):
        return MISSING
    return f"{int(v):,}"


def position_label(pos: float) -> str:
    if pos == 1:
        return "LONG"
    if pos == -1:
        return "SHORT"
    return "FLAT"


def strategy_name(ref: str) -> str:
    """
    "1".."6" (event log) or "s1".."s6" -> short display name.
    """
    sid = ref if ref.startswith("s") else f"s{ref}"
    spec = STRATEGIES.get(sid)
    return spec.short_name if spec is not None else f"S{ref}"


def format_event(ev: LogEvent) -> str:
    p = ev.payload
    if isinstance(p, TradeEvent):
        name = strategy_name(p.strategy)
        price = ev.details[2] if len(ev.details) > 2 else MISSING
        if p.is_entry:
            return f"{name} entered long @ {price}"
        return f"{name} exited @ {price}"
    if isinstance(p, PriceEvent):
        return "  ".join(p.fields)
    if isinstance(p, EquityEvent):
        return f"Portfolio {fmt_usd(p.value)}"
    if isinstance(p, StratEvent):
        return f"{strategy_name(p.strategy)}: {position_label(p.position)}, equity {fmt_usd(p.equity)}"
    return " | ".join(ev.details)


def recent_trades(events: Sequence[LogEvent], n: int = 20) -> list[LogEvent]:
    """Last n TRADE events, newest first."""
    trades = [e for e in events if e.type == "TRADE"]
    return list(reversed(trades[-n:])) if n > 0 else []


def total_trades(data: AppData) -> float:
    total = 0.0
    for snap in data.strategies.values():
        if not _bad(snap.core.trades):
            total += snap.core.trades
    return total


def total_pnl(data: AppData, initial_capital: float) -> float:
    return data.state.capital - initial_capital
