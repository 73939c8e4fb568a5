import pytest

from dashboard.chart import TREND_DOWN, TREND_UP, build_chart, format_date_label, summarize_usage
from dashboard.models import KeyUsageSnapshot, ServiceStatus
from dashboard.rendering import (
    parse_int,
    render_global_stats,
    render_rate_card,
    render_service_offline,
    render_service_online,
    render_totals,
    render_user_info,
)


def test_unlimited_card_hides_progress():
    card = render_rate_card("rpm", "unlimited", 500, "RPM")
    assert card.unlimited is True
    assert card.value_text == "∞"
    assert card.badge_text == "♾️ Unlimited"
    assert card.badge_class == "usage-badge infinite"
    assert card.card_class == "stat-card infinite"
    assert card.progress_visible is False
    assert card.limited is False
    assert card.percentage is None


def test_rpd_at_85_percent_is_limited_and_warning():
    card = render_rate_card("rpd", "1000", "850", "RPD")
    assert card.percentage == pytest.approx(85.0)
    assert card.value_text == "850 / 1000"
    assert card.usage_text == "85.0% used"
    assert card.limited is True
    assert card.fill_tier == "warning"
    assert card.fill_width == pytest.approx(85.0)
    assert "#fbbf24" in card.fill_background


def test_over_limit_clamps_fill_but_not_label():
    card = render_rate_card("rpm", 60, 90, "RPM")
    assert card.percentage == pytest.approx(150.0)
    assert card.fill_width == 100.0
    assert card.usage_text == "150.0% used"
    assert card.fill_tier == "danger"
    assert card.limited is True


@pytest.mark.parametrize(
    "used, tier, limited",
    [
        (50, "normal", False),
        (70, "normal", False),
        (71, "warning", False),
        (80, "warning", False),
        (81, "warning", True),
        (90, "warning", True),
        (91, "danger", True),
    ],
)
def test_badge_and_fill_thresholds_are_independent(used, tier, limited):
    card = render_rate_card("rpd", 100, used, "RPD")
    assert card.fill_tier == tier
    assert card.limited is limited
    assert card.badge_text == "RPD"


def test_usage_text_has_one_decimal():
    card = render_rate_card("rpm", 3, 1, "RPM")
    assert card.usage_text == "33.3% used"


def test_zero_limit_does_not_divide_by_zero():
    assert render_rate_card("rpm", 0, 0, "RPM").percentage == 0.0
    assert render_rate_card("rpm", 0, 4, "RPM").percentage == 100.0


def test_parse_int_accepts_numeric_strings():
    assert parse_int("850") == 850
    assert parse_int(" 12 ") == 12
    assert parse_int(12.9) == 12
    with pytest.raises(ValueError):
        parse_int("lots")


def test_parse_int_rejects_out_of_range_numbers():
    for value in ("1e400", "Infinity", float("inf"), float("-inf")):
        with pytest.raises(ValueError):
            parse_int(value)


def test_summary_stats():
    summary = summarize_usage([10, 20, 15])
    assert summary.total == 45
    assert summary.average == "15.0"
    assert summary.maximum == 20
    assert summary.minimum == 10
    assert summary.trend == TREND_UP


def test_average_rounds_to_one_decimal():
    assert summarize_usage([1, 2, 2]).average == "1.7"
    assert summarize_usage([1.5, 2.5]).total == 4.0


def test_trend_ties_resolve_down():
    assert summarize_usage([5, 9, 5]).trend == TREND_DOWN
    assert summarize_usage([7, 1, 3]).trend == TREND_DOWN
    assert summarize_usage([7]).trend == TREND_DOWN


def test_empty_series_summary():
    summary = summarize_usage([])
    assert summary.total == 0
    assert summary.average == "0.0"
    assert summary.maximum is None
    assert summary.trend == TREND_DOWN


def test_date_labels_are_shortened():
    assert format_date_label("2024-01-05") == "Jan 5"
    assert format_date_label("2024-12-31T10:00:00Z") == "Dec 31"
    assert format_date_label("yesterday") == "yesterday"


def test_build_chart_destroys_previous():
    first = build_chart(["2024-03-01"], [1])
    second = build_chart(["2024-03-02"], [2], previous=first)
    assert first.destroyed is True
    assert second.destroyed is False
    assert second.chart_id != first.chart_id
    config = second.config()
    assert config["type"] == "line"
    assert config["data"]["labels"] == ["Mar 2"]
    assert config["data"]["datasets"][0]["label"] == "Daily API Usage"


def _key(**extra):
    data = {
        "username": "bob",
        "plan": "free",
        "rpm": "unlimited",
        "rpm_used": 0,
        "rpd": 100,
        "rpd_used": 1,
        "total_usage": 1500,
        "total_tokens_used": "2000000",
    }
    data.update(extra)
    return KeyUsageSnapshot.from_json(data)


def test_user_info_for_banned_admin():
    panel = render_user_info(_key(admin=True, banned=True))
    assert panel.title == "User: bob"
    assert panel.handle == "@bob"
    assert panel.admin_text == "Yes"
    assert panel.css_class == "user-info admin fade-in"
    assert panel.ban_reason == "Not specified"
    assert panel.ban_expires == "Never"


def test_user_info_for_regular_user():
    panel = render_user_info(_key())
    assert panel.admin_text == "No"
    assert panel.css_class == "user-info fade-in"
    assert panel.banned is False
    assert panel.ban_reason is None


def test_totals_use_thousands_separators():
    totals = render_totals(_key())
    assert totals.total_usage == "1,500"
    assert totals.total_tokens == "2,000,000"


def test_service_indicators():
    status = ServiceStatus.from_json(
        {"status": "online", "requests": 1234567, "environment": "staging", "total_tokens_used": 10, "endpoints": ["/a"]}
    )
    online = render_service_online(status)
    assert online.state == "active"
    assert online.text == "Service online - 1,234,567 requests served"
    assert online.environment == "staging"
    assert online.offline is False

    offline = render_service_offline()
    assert offline.state == "error"
    assert offline.environment == "offline"
    assert offline.offline is True

    stats = render_global_stats(status)
    assert stats.endpoint_count == 1
    assert stats.endpoint_count_text == "1 endpoints available"
    assert stats.total_requests == "1,234,567"
