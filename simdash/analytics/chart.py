# simdash/analytics/chart.py
"""
Chart geometry for the equity panel.

Pure functions: same series + canvas in, same coordinates out. Nothing here
knows about SVG elements or colors; a renderer only joins the points.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

# minimum visible span, as a fraction of the midpoint value
MIN_RANGE_FRACTION = 0.02
DEFAULT_TICKS = 4

Point = tuple[float, float]


@dataclass(frozen=True)
class Padding:
    top: float = 20
    right: float = 20
    bottom: float = 30
    left: float = 70


@dataclass(frozen=True)
class Gridline:
    value: float
    y: float
    label: str


@dataclass(frozen=True)
class ChartLayout:
    width: float
    height: float
    padding: Padding
    value_min: float
    value_max: float
    primary: tuple[Point, ...]
    overlays: tuple[tuple[Point, ...], ...]
    benchmark: tuple[Point, ...]
    area: tuple[Point, ...]
    gridlines: tuple[Gridline, ...]

    @property
    def value_range(self) -> float:
        return self.value_max - self.value_min

    @property
    def ready(self) -> bool:
        """Fewer than 2 primary points: nothing worth drawing yet."""
        return len(self.primary) >= 2

    @property
    def last_point(self) -> Point | None:
        return self.primary[-1] if self.primary else None


def format_axis_value(v: float) -> str:
    if v >= 1000:
        return f"${v / 1000:.1f}k"
    return f"${v:.0f}"


def value_range(series: Iterable[Sequence[float]]) -> tuple[float, float]:
    """
    Global [min, max] over every finite value, widened to the 2% floor
    around the midpoint when the data is (nearly) flat.
    """
    lo, hi = math.inf, -math.inf
    for data in series:
        for v in data:
            if not math.isfinite(v):
                continue
            lo = min(lo, v)
            hi = max(hi, v)

    if lo > hi:
        return 0.0, 1.0

    mid = (lo + hi) / 2
    min_range = abs(mid) * MIN_RANGE_FRACTION
    if hi - lo < min_range:
        lo = mid - min_range / 2
        hi = mid + min_range / 2
    return lo, hi


def points(
    data: Sequence[float],
    lo: float,
    span: float,
    width: float,
    height: float,
    pad: Padding,
) -> tuple[Point, ...]:
    """
    index -> x (spread over the full plot width), value -> y (inverted).
    Non-finite values leave a gap in the output.
    """
    cw = width - pad.left - pad.right
    ch = height - pad.top - pad.bottom
    n = len(data)

    out = []
    for i, v in enumerate(data):
        if not math.isfinite(v):
            continue
        x = pad.left + (i / (n - 1)) * cw if n > 1 else pad.left
        y = pad.top + ch - ((v - lo) / span) * ch
        out.append((x, y))
    return tuple(out)


def compute_chart(
    primary: Sequence[float],
    overlays: Sequence[Sequence[float]] = (),
    benchmark: Sequence[float] = (),
    width: float = 800,
    height: float = 200,
    padding: Padding = Padding(),
    ticks: int = DEFAULT_TICKS,
) -> ChartLayout:
    if ticks < 1:
        raise ValueError("ticks must be >= 1")

    lo, hi = value_range([primary, *overlays, benchmark])
    span = (hi - lo) or 1.0

    def project(data: Sequence[float]) -> tuple[Point, ...]:
        return points(data, lo, span, width, height, padding)

    primary_pts = project(primary)

    bottom = height - padding.bottom
    area: tuple[Point, ...] = ()
    if primary_pts:
        first, last = primary_pts[0], primary_pts[-1]
        area = (first, *primary_pts, (last[0], bottom), (first[0], bottom))

    ch = height - padding.top - padding.bottom
    gridlines = []
    for i in range(ticks + 1):
        v = lo + span * i / ticks
        y = padding.top + ch - ((v - lo) / span) * ch
        gridlines.append(Gridline(value=v, y=y, label=format_axis_value(v)))

    return ChartLayout(
        width=width,
        height=height,
        padding=padding,
        value_min=lo,
        value_max=hi,
        primary=primary_pts,
        overlays=tuple(project(o) for o in overlays),
        benchmark=project(benchmark),
        area=area,
        gridlines=tuple(gridlines),
    )


def polyline(pts: Sequence[Point]) -> str:
    """SVG `points` attribute: "x,y x,y ..."."""
    return " ".join(f"{x:g},{y:g}" for x, y in pts)
