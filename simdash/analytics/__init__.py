from .metrics import sharpe_ratio, max_drawdown, SeriesMetrics, compute_metrics
from .chart import Padding, Gridline, ChartLayout, compute_chart, polyline

__all__ = [
    "sharpe_ratio", "max_drawdown", "SeriesMetrics", "compute_metrics",
    "Padding", "Gridline", "ChartLayout", "compute_chart", "polyline",
]
