from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Optional

from dashboard.chart import ChartSummary, LineChart
from dashboard.rendering import (
    GlobalStatsPanel,
    RateCard,
    ServiceIndicator,
    StatusIndicator,
    UsageTotals,
    UserInfoPanel,
)


@dataclass
class ErrorBanner:
    message: Optional[str] = None
    expires_at: Optional[float] = None

    def show(self, message: str, now: float, duration: float) -> None:
        self.message = message
        self.expires_at = now + duration

    def hide(self) -> None:
        self.message = None
        self.expires_at = None

    def visible(self, now: float) -> bool:
        return self.message is not None and (self.expires_at is None or now < self.expires_at)


@dataclass
class DashboardView:
    """Everything the page displays, as rendered by the session.

    Regions are replaced wholesale on render; a failed fetch leaves them as
    they were.
    """

    clock: Callable[[], float] = time.monotonic
    visible: bool = False
    refresh_visible: bool = False
    loading: bool = False
    token_input: str = ""
    status: StatusIndicator = field(default_factory=StatusIndicator)
    service: ServiceIndicator = field(default_factory=ServiceIndicator)
    user_info: Optional[UserInfoPanel] = None
    rate_cards: Dict[str, RateCard] = field(default_factory=dict)
    totals: Optional[UsageTotals] = None
    global_stats: Optional[GlobalStatsPanel] = None
    chart: Optional[LineChart] = None
    chart_summary: Optional[ChartSummary] = None
    last_updated: Optional[str] = None
    banner: ErrorBanner = field(default_factory=ErrorBanner)

    def show_error(self, message: str, duration: float) -> None:
        self.banner.show(message, self.clock(), duration)

    def hide_error(self) -> None:
        self.banner.hide()

    @property
    def error(self) -> Optional[str]:
        return self.banner.message if self.banner.visible(self.clock()) else None

    def show_dashboard(self) -> None:
        self.visible = True
        self.refresh_visible = True

    def hide_dashboard(self) -> None:
        self.visible = False
        self.refresh_visible = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visible": self.visible,
            "refresh_visible": self.refresh_visible,
            "loading": self.loading,
            "token_input": self.token_input,
            "error": self.error,
            "status": asdict(self.status),
            "service": asdict(self.service),
            "user_info": self.user_info.to_dict() if self.user_info else None,
            "rate_cards": {kind: card.to_dict() for kind, card in self.rate_cards.items()},
            "totals": asdict(self.totals) if self.totals else None,
            "global_stats": asdict(self.global_stats) if self.global_stats else None,
            "chart": self.chart.to_dict() if self.chart else None,
            "chart_summary": self.chart_summary.to_dict() if self.chart_summary else None,
            "last_updated": self.last_updated,
        }
