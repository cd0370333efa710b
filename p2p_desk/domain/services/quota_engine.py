"""
QUOTA ENGINE
Rolling monthly venue quota

RESPONSIBILITIES:
- Reset usage when the calendar month changes (evaluated once per load)
- Accumulate sold volume from committed sales
- Overwrite limit / reference rate from settings edits

RULES:
✅ Limit and rate survive a reset
✅ Usage only grows within a month
❌ No validation of limit / rate (direct overwrite)
"""

import logging
from dataclasses import replace
from decimal import Decimal

from p2p_desk.domain.models import QuotaState
from p2p_desk.utils.numeric import ZERO, NumericInput, parse_decimal

logger = logging.getLogger(__name__)


def default_quota(
    current_month: int,
    limit_usd: Decimal,
    exchange_rate: Decimal,
) -> QuotaState:
    """Fresh quota for a first run (nothing persisted)"""
    return QuotaState(
        limit_usd=limit_usd,
        used_usd=ZERO,
        exchange_rate=exchange_rate,
        last_reset_month=current_month,
    )


def apply_month_rollover(state: QuotaState, current_month: int) -> tuple[QuotaState, bool]:
    """
    Reset usage if the persisted month differs from the current one

    Args:
        state: Quota as loaded from storage
        current_month: Current month index (0-11)

    Returns:
        (quota, reset_happened)
    """
    if state.last_reset_month == current_month:
        return state, False

    logger.info(
        "Quota month rollover: month %s -> %s, clearing used %s",
        state.last_reset_month,
        current_month,
        state.used_usd,
    )
    return replace(state, used_usd=ZERO, last_reset_month=current_month), True


def accumulate(state: QuotaState, amount: Decimal) -> QuotaState:
    """Add sold volume to the month's usage"""
    return replace(state, used_usd=state.used_usd + amount)


def update_settings(
    state: QuotaState,
    limit_usd: NumericInput,
    exchange_rate: NumericInput,
) -> QuotaState:
    """Overwrite limit and reference rate; usage is untouched"""
    return replace(
        state,
        limit_usd=parse_decimal(limit_usd),
        exchange_rate=parse_decimal(exchange_rate),
    )
