"""Ledger analytics: equity curve, monthly profit, headline KPIs."""

from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

import pandas as pd

from p2p_desk.domain.models import TradeRecord
from p2p_desk.utils.time import LOCAL_TZ


def _frame(records: Sequence[TradeRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": [r.date for r in records],
            "timestamp": [r.timestamp for r in records],
            "profit": [float(r.profit) for r in records],
            "amount": [float(r.amount_sold) for r in records],
            "roi": [float(r.roi) for r in records],
        }
    )


def equity_curve(records: Sequence[TradeRecord]) -> List[Dict[str, Any]]:
    """
    Cumulative profit in execution order.

    Returns:
        [{name: short date, equity: running total, trade: trade profit}, ...]
        oldest first
    """
    if not records:
        return []

    df = _frame(records).sort_values("timestamp", kind="stable")
    df["equity"] = df["profit"].cumsum()
    df["name"] = df["date"].str.split(" ").str[0]

    return [
        {"name": row.name, "equity": round(row.equity, 2), "trade": round(row.profit, 2)}
        for row in df[["name", "equity", "profit"]].itertuples(index=False)
    ]


def monthly_profit(
    records: Sequence[TradeRecord],
    tz: Optional[ZoneInfo] = None,
) -> List[Dict[str, Any]]:
    """
    Profit per calendar month (YYYY-MM), ascending.

    Months are bucketed on the epoch timestamp in the desk timezone,
    not on the display date.
    """
    if not records:
        return []

    df = _frame(records)
    stamps = pd.to_datetime(df["timestamp"], unit="ms", utc=True).dt.tz_convert(tz or LOCAL_TZ)
    df["month"] = stamps.dt.strftime("%Y-%m")

    grouped = df.groupby("month", sort=True)["profit"].sum()
    return [{"month": month, "profit": round(float(total), 2)} for month, total in grouped.items()]


def summarize(records: Sequence[TradeRecord]) -> Dict[str, Any]:
    """Headline KPIs for the dashboard."""
    if not records:
        return {"trades": 0, "total_profit": 0.0, "total_volume": 0.0, "avg_roi": 0.0}

    df = _frame(records)
    return {
        "trades": len(df),
        "total_profit": round(float(df["profit"].sum()), 2),
        "total_volume": round(float(df["amount"].sum()), 2),
        "avg_roi": round(float(df["roi"].mean()), 2),
    }
