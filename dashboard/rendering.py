from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from dashboard.models import UNLIMITED, KeyUsageSnapshot, RateValue, ServiceStatus


LIMITED_BADGE_THRESHOLD = 80.0
DANGER_THRESHOLD = 90.0
WARNING_THRESHOLD = 70.0

FILL_STYLES = {
    "danger": {
        "background": "linear-gradient(135deg, #f87171 0%, #ef4444 100%)",
        "box_shadow": "0 0 10px rgba(248, 113, 113, 0.3)",
    },
    "warning": {
        "background": "linear-gradient(135deg, #fbbf24 0%, #f59e0b 100%)",
        "box_shadow": "0 0 10px rgba(251, 191, 36, 0.3)",
    },
    "normal": {
        "background": "linear-gradient(135deg, #6366f1 0%, #8b5cf6 100%)",
        "box_shadow": "0 0 10px rgba(139, 92, 246, 0.3)",
    },
}


def parse_int(value: Any) -> int:
    """Integer prefix of a number or numeric string ('850' -> 850, 12.7 -> 12)."""
    if isinstance(value, bool):
        raise ValueError(f"Not a count: {value!r}")
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, float):
            return int(value)
        return int(float(str(value).strip()))
    except OverflowError as e:
        raise ValueError(f"Not a count: {value!r}") from e


def fmt_count(value: Any) -> str:
    return f"{parse_int(value):,}"


@dataclass
class RateCard:
    kind: str
    label: str
    unlimited: bool
    card_class: str
    badge_text: str
    badge_class: str
    value_text: str
    progress_visible: bool
    percentage: Optional[float] = None
    fill_width: Optional[float] = None
    fill_tier: Optional[str] = None
    fill_background: Optional[str] = None
    fill_shadow: Optional[str] = None
    usage_text: Optional[str] = None

    @property
    def limited(self) -> bool:
        return "limited" in self.badge_class.split()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["limited"] = self.limited
        return data


def fill_tier(percentage: float) -> str:
    if percentage > DANGER_THRESHOLD:
        return "danger"
    if percentage > WARNING_THRESHOLD:
        return "warning"
    return "normal"


def render_rate_card(kind: str, limit: RateValue, used: RateValue, label: str) -> RateCard:
    """Render one RPM/RPD card.

    The badge "limited" flag (> 80%) and the fill color bands (> 90, > 70,
    otherwise) are computed independently. The fill width is clamped to 100
    while the usage text shows the true percentage.
    """
    if limit == UNLIMITED:
        return RateCard(
            kind=kind,
            label=label,
            unlimited=True,
            card_class="stat-card infinite",
            badge_text="♾️ Unlimited",
            badge_class="usage-badge infinite",
            value_text="∞",
            progress_visible=False,
        )

    limit_num = parse_int(limit)
    used_num = parse_int(used)
    if limit_num == 0:
        percentage = 100.0 if used_num > 0 else 0.0
    else:
        percentage = used_num / limit_num * 100

    tier = fill_tier(percentage)
    return RateCard(
        kind=kind,
        label=label,
        unlimited=False,
        card_class="stat-card",
        badge_text=label,
        badge_class="usage-badge limited" if percentage > LIMITED_BADGE_THRESHOLD else "usage-badge",
        value_text=f"{used_num} / {limit_num}",
        progress_visible=True,
        percentage=percentage,
        fill_width=min(percentage, 100.0),
        fill_tier=tier,
        fill_background=FILL_STYLES[tier]["background"],
        fill_shadow=FILL_STYLES[tier]["box_shadow"],
        usage_text=f"{percentage:.1f}% used",
    )


@dataclass
class UserInfoPanel:
    title: str
    username: str
    handle: str
    plan: str
    admin: bool
    admin_text: str
    css_class: str
    banned: bool
    ban_reason: Optional[str] = None
    ban_expires: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def render_user_info(key: KeyUsageSnapshot) -> UserInfoPanel:
    return UserInfoPanel(
        title=f"User: {key.username}",
        username=key.username,
        handle=f"@{key.username}",
        plan=key.plan,
        admin=key.admin,
        admin_text="Yes" if key.admin else "No",
        css_class="user-info admin fade-in" if key.admin else "user-info fade-in",
        banned=key.banned,
        ban_reason=(key.ban_reason or "Not specified") if key.banned else None,
        ban_expires=(key.ban_expires or "Never") if key.banned else None,
    )


@dataclass
class UsageTotals:
    total_usage: str
    total_tokens: str


def render_totals(key: KeyUsageSnapshot) -> UsageTotals:
    return UsageTotals(total_usage=fmt_count(key.total_usage), total_tokens=fmt_count(key.total_tokens_used))


@dataclass
class GlobalStatsPanel:
    total_requests: str
    total_tokens: str
    endpoint_count: int
    endpoint_count_text: str
    endpoints: List[str] = field(default_factory=list)


def render_global_stats(status: ServiceStatus) -> GlobalStatsPanel:
    return GlobalStatsPanel(
        total_requests=fmt_count(status.requests),
        total_tokens=fmt_count(status.total_tokens_used),
        endpoint_count=len(status.endpoints),
        endpoint_count_text=f"{len(status.endpoints)} endpoints available",
        endpoints=list(status.endpoints),
    )


@dataclass
class StatusIndicator:
    state: str = "loading"
    text: str = ""


@dataclass
class ServiceIndicator:
    state: str = "loading"
    text: str = "Checking service..."
    environment: str = ""
    offline: bool = False
    visible: bool = False


def render_service_online(status: ServiceStatus) -> ServiceIndicator:
    return ServiceIndicator(
        state="active",
        text=f"Service {status.status} - {fmt_count(status.requests)} requests served",
        environment=status.environment,
        offline=False,
        visible=True,
    )


def render_service_offline() -> ServiceIndicator:
    return ServiceIndicator(state="error", text="Service unreachable", environment="offline", offline=True, visible=True)
