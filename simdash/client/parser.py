# simdash/client/parser.py
"""
Snapshot decoding: raw JSON arrays / event-log text -> typed records.

Numeric fields are parsed leniently: a malformed value becomes nan and the
record still decodes. Only a payload of the wrong *shape* (e.g. an object
where an array is expected) raises ValueError.
"""
from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Sequence

from simdash.client.types import (
    STRATEGIES,
    STRATEGY_IDS,
    EquityEvent,
    EventPayload,
    GlobalState,
    LogEvent,
    PriceEvent,
    RawEvent,
    StratEvent,
    StrategyCore,
    StrategyId,
    StrategySnapshot,
    TradeEvent,
)

NAN = float("nan")

STATE_LAYOUT: tuple[str, ...] = ("capital", "seq", "year", "month", "day")

# positional name -> StrategyCore field
_CORE_FIELDS = {
    "pos": "position",
    "alloc": "allocation",
    "pnl": "pnl",
    "trades": "trades",
    "eq": "equity",
}


# ---------------------------------------------------------------------------
# scalars
# ---------------------------------------------------------------------------

def to_number(value: Any) -> float:
    """
    Lenient float parse; never raises.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return NAN
    return NAN


def to_int(value: Any) -> float:
    """
    Integer parse (seq numbers); nan when malformed.
    """
    n = to_number(value)
    if math.isnan(n) or math.isinf(n):
        return NAN
    return int(n)


def _require_list(raw: Any, what: str) -> list:
    if not isinstance(raw, list):
        raise ValueError(f"{what}: expected array, got {type(raw).__name__}")
    return raw


def decode_positional(raw: Any, layout: Sequence[str], what: str = "record") -> dict[str, float]:
    """
    Fixed index -> field name decode. Missing trailing values become nan,
    extra values are ignored.
    """
    arr = _require_list(raw, what)
    return {
        name: to_number(arr[i]) if i < len(arr) else NAN
        for i, name in enumerate(layout)
    }


# ---------------------------------------------------------------------------
# records
# ---------------------------------------------------------------------------

def parse_state(raw: Any) -> GlobalState:
    return GlobalState(**decode_positional(raw, STATE_LAYOUT, "state"))


def parse_strategy(strategy_id: StrategyId, raw: Any) -> StrategySnapshot:
    spec = STRATEGIES[strategy_id]
    values = decode_positional(raw, spec.layout, spec.filename)

    core = StrategyCore(**{_CORE_FIELDS[k]: v for k, v in values.items() if k in _CORE_FIELDS})
    extra = spec.extra_type(**{k: v for k, v in values.items() if k not in _CORE_FIELDS})
    return StrategySnapshot(strategy_id=strategy_id, core=core, extra=extra)


def parse_series(raw: Any, what: str = "series") -> tuple[float, ...]:
    return tuple(to_number(v) for v in _require_list(raw, what))


def parse_strategy_equities(raw: Any) -> dict[StrategyId, tuple[float, ...]]:
    if not isinstance(raw, dict):
        raise ValueError(f"equity_strats: expected object, got {type(raw).__name__}")
    # absent strategy -> empty series
    return {sid: parse_series(raw.get(sid, []), f"equity_strats.{sid}") for sid in STRATEGY_IDS}


# ---------------------------------------------------------------------------
# event log
# ---------------------------------------------------------------------------

def _strip_prefix(value: str, prefix: str) -> str:
    return value[len(prefix):] if value.startswith(prefix) else value


def _at(d: Sequence[str], i: int) -> str:
    return d[i] if i < len(d) else ""


def _decode_trade(d: Sequence[str]) -> EventPayload:
    return TradeEvent(strategy=_at(d, 0), action=_at(d, 1), price=to_number(_at(d, 2)))


def _decode_price(d: Sequence[str]) -> EventPayload:
    return PriceEvent(fields=tuple(d))


def _decode_equity(d: Sequence[str]) -> EventPayload:
    return EquityEvent(value=to_number(_at(d, 0)))


def _decode_strat(d: Sequence[str]) -> EventPayload:
    return StratEvent(
        strategy=_at(d, 0),
        position=to_number(_strip_prefix(_at(d, 1), "pos=")),
        equity=to_number(_strip_prefix(_at(d, 2), "eq=")),
    )


EVENT_DECODERS: Mapping[str, Callable[[Sequence[str]], EventPayload]] = {
    "TRADE": _decode_trade,
    "PRICE": _decode_price,
    "EQUITY": _decode_equity,
    "STRAT": _decode_strat,
}


def decode_payload(event_type: str, details: Sequence[str]) -> EventPayload:
    decoder = EVENT_DECODERS.get(event_type)
    if decoder is None:
        return RawEvent(fields=tuple(details))
    return decoder(details)


def parse_event_line(line: str) -> LogEvent:
    parts = line.split("|")
    event_type = _at(parts, 2)
    details = tuple(parts[3:])
    return LogEvent(
        seq=to_int(_at(parts, 0)),
        date=_at(parts, 1),
        type=event_type,
        details=details,
        payload=decode_payload(event_type, details),
    )


def parse_events(text: str) -> tuple[LogEvent, ...]:
    """
    Append-only, pipe-delimited log: seq|date|type|details...
    Lines end at LF only (CRLF tolerated); details may hold any other character.
    Blank lines are skipped.
    """
    lines = (line.removesuffix("\r") for line in text.strip().split("\n"))
    return tuple(parse_event_line(line) for line in lines if line.strip())
