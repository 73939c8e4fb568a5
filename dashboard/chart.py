"""Usage-history chart: summary statistics and the Chart.js line config.

Drawing is left to Chart.js on the page; this module only decides what it is
given. A chart is never patched in place: each render destroys the previous
``LineChart`` and builds a fresh one.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union

Number = Union[int, float]

TREND_UP = "📈"
TREND_DOWN = "📉"

_chart_ids = itertools.count(1)


@dataclass
class ChartSummary:
    total: Number
    average: str
    maximum: Optional[Number]
    minimum: Optional[Number]
    trend: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "average": self.average,
            "max": self.maximum,
            "min": self.minimum,
            "trend": self.trend,
            "items": [
                {"label": "Total", "value": str(self.total)},
                {"label": "Average", "value": self.average},
                {"label": "Max", "value": "" if self.maximum is None else str(self.maximum)},
                {"label": "Trend", "value": self.trend},
            ],
        }


def summarize_usage(data: Sequence[Number]) -> ChartSummary:
    values = list(data)
    total = sum(values)
    if not values:
        return ChartSummary(total=0, average="0.0", maximum=None, minimum=None, trend=TREND_DOWN)
    average = f"{total / len(values):.1f}"
    # Ties resolve to the downward glyph; there is no flat trend.
    trend = TREND_UP if values[-1] > values[0] else TREND_DOWN
    return ChartSummary(total=total, average=average, maximum=max(values), minimum=min(values), trend=trend)


def format_date_label(raw: str) -> str:
    """'2024-01-05' -> 'Jan 5'. Labels that are not dates are returned unchanged."""
    text = (raw or "").strip()
    parsed: Optional[date] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        try:
            parsed = date.fromisoformat(text[:10])
        except ValueError:
            return raw
    return f"{parsed:%b} {parsed.day}"


@dataclass
class LineChart:
    labels: List[str]
    data: List[Number]
    chart_id: int = field(default_factory=lambda: next(_chart_ids))
    destroyed: bool = False

    def destroy(self) -> None:
        self.destroyed = True

    def config(self) -> Dict[str, Any]:
        return {
            "type": "line",
            "data": {
                "labels": list(self.labels),
                "datasets": [
                    {
                        "label": "Daily API Usage",
                        "data": list(self.data),
                        "borderColor": "#6366f1",
                        "backgroundColor": "rgba(99, 102, 241, 0.1)",
                        "borderWidth": 4,
                        "fill": True,
                        "tension": 0.4,
                        "pointBackgroundColor": "#8b5cf6",
                        "pointBorderColor": "#fff",
                        "pointBorderWidth": 2,
                        "pointRadius": 6,
                        "pointHoverRadius": 8,
                    }
                ],
            },
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "interaction": {"mode": "index", "intersect": False},
                "plugins": {"legend": {"display": False}},
                "scales": {
                    "x": {"grid": {"display": False}, "ticks": {"color": "#94a3b8"}},
                    "y": {"beginAtZero": True, "grid": {"color": "rgba(148, 163, 184, 0.1)"}, "ticks": {"color": "#94a3b8"}},
                },
                "animation": {"duration": 1000, "easing": "easeInOutQuart"},
            },
            # Page-side callbacks: tooltip "Usage: N requests", y ticks "N req".
            "tick_suffix": " req",
            "tooltip_template": "Usage: {y} requests",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.chart_id, "config": self.config()}


def build_chart(labels: Sequence[str], data: Sequence[Number], previous: Optional[LineChart] = None) -> LineChart:
    if previous is not None:
        previous.destroy()
    return LineChart(labels=[format_date_label(label) for label in labels], data=list(data))
