# simdash/analytics/metrics.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

from simdash.client.types import STRATEGY_IDS, AppData

PERIODS_PER_YEAR = 252


def sharpe_ratio(series: Sequence[float]) -> float:
    """
    Annualized mean/std of simple period returns.

    No risk-free rate; population std. Fewer than 3 points or zero
    variance -> 0.0. Never raises, never returns nan/inf.
    """
    eq = np.asarray(series, dtype=float)
    if eq.size < 3:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        ret = np.diff(eq) / eq[:-1]
        mean = np.mean(ret)
        std = np.std(ret)

    if std == 0 or not np.isfinite(std):
        return 0.0

    value = float(mean / std * math.sqrt(PERIODS_PER_YEAR))
    return value if math.isfinite(value) else 0.0


def max_drawdown(series: Sequence[float]) -> float:
    """
    Largest (peak - value) / peak over the series, in percent [0, 100].

    Fewer than 2 points -> 0.0. nan values neither raise the peak nor count.
    """
    eq = np.asarray(series, dtype=float)
    if eq.size < 2:
        return 0.0

    peak = np.fmax.accumulate(eq)
    with np.errstate(divide="ignore", invalid="ignore"):
        dd = np.where(peak > 0, (peak - eq) / peak, 0.0)

    dd = np.nan_to_num(dd, nan=0.0, posinf=0.0, neginf=0.0)
    return float(np.clip(dd.max(), 0.0, 1.0) * 100.0)


@dataclass(frozen=True)
class SeriesMetrics:
    sharpe: float
    max_drawdown: float

    @classmethod
    def of(cls, series: Sequence[float]) -> "SeriesMetrics":
        return cls(sharpe=sharpe_ratio(series), max_drawdown=max_drawdown(series))


def compute_metrics(data: AppData) -> Dict[str, SeriesMetrics]:
    """
    Portfolio + per-strategy metrics for one snapshot.

    Keys: "portfolio", "s1".."s6".
    """
    metrics = {"portfolio": SeriesMetrics.of(data.equity)}
    for sid in STRATEGY_IDS:
        metrics[sid] = SeriesMetrics.of(data.strategy_equities.get(sid, ()))
    return metrics
