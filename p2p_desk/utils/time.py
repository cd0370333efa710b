"""Time utilities (desk local timezone)."""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from p2p_desk.config import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """Current time as a timezone-aware datetime in the desk timezone."""
    return datetime.now(LOCAL_TZ)


def to_local(dt: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """Convert datetime to the desk timezone. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz or LOCAL_TZ)


def month_index(dt: datetime) -> int:
    """Zero-based month index (January = 0) used by the quota tracker."""
    return dt.month - 1


def epoch_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def display_timestamp(dt: datetime) -> str:
    """Human readable timestamp stored on ledger records.

    Aware datetimes keep their own zone; naive ones are taken as UTC.
    """
    if dt.tzinfo is None:
        dt = to_local(dt)
    return dt.strftime("%Y-%m-%d %H:%M:%S")
