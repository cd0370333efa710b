from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from p2p_desk.domain.services.analytics_engine import equity_curve, monthly_profit, summarize

UTC = ZoneInfo("UTC")


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def test_equity_curve_runs_oldest_first(make_record):
    # ledger is newest first
    ledger = [
        make_record("c", timestamp=_ms(2026, 5, 3), sell="17.50", date="2026-05-03 09:00:00"),
        make_record("b", timestamp=_ms(2026, 5, 2), sell="19.00", date="2026-05-02 09:00:00"),
        make_record("a", timestamp=_ms(2026, 5, 1), date="2026-05-01 09:00:00"),
    ]

    curve = equity_curve(ledger)

    assert [p["name"] for p in curve] == ["2026-05-01", "2026-05-02", "2026-05-03"]
    assert [p["trade"] for p in curve] == [50.0, 100.0, -50.0]
    assert [p["equity"] for p in curve] == [50.0, 150.0, 100.0]


def test_monthly_profit_buckets_by_timestamp(make_record):
    ledger = [
        make_record("a", timestamp=_ms(2026, 4, 30, 23, 0)),
        make_record("b", timestamp=_ms(2026, 5, 1, 1, 0), sell="19.00"),
        make_record("c", timestamp=_ms(2026, 5, 20)),
    ]

    months = monthly_profit(ledger, tz=UTC)

    assert months == [
        {"month": "2026-04", "profit": 50.0},
        {"month": "2026-05", "profit": 150.0},
    ]


def test_monthly_profit_uses_desk_timezone(make_record):
    # 03:00 UTC on May 1st is still April 30th in Mexico City
    ledger = [make_record("a", timestamp=_ms(2026, 5, 1, 3, 0))]
    months = monthly_profit(ledger, tz=ZoneInfo("America/Mexico_City"))
    assert months[0]["month"] == "2026-04"


def test_summarize(make_record):
    ledger = [make_record("a"), make_record("b", sell="19.00", amount="200")]
    summary = summarize(ledger)

    assert summary["trades"] == 2
    assert summary["total_profit"] == 250.0
    assert summary["total_volume"] == 300.0
    assert summary["avg_roi"] == round((50 / 1800 * 100 + 200 / 3600 * 100) / 2, 2)


def test_empty_ledger():
    assert equity_curve([]) == []
    assert monthly_profit([]) == []
    assert summarize([]) == {"trades": 0, "total_profit": 0.0, "total_volume": 0.0, "avg_roi": 0.0}
