"""
LEDGER ENGINE
Completed-trade ledger: commit checks, record construction, delete, import merge

RULES:
✅ Newest first, by insertion (never re-sorted)
✅ Records are immutable once built
✅ Import is all-or-nothing; duplicates by id are dropped
❌ Deleting a record never refunds quota or restores inventory
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import ValidationError

from p2p_desk.domain.models import CommitRejection, TradeCalculation, TradeRecord
from p2p_desk.domain.schemas.ledger import TradeRecordList, dump_records, load_records
from p2p_desk.utils.numeric import ZERO, NumericInput, parse_decimal, try_parse_decimal
from p2p_desk.utils.time import display_timestamp, epoch_millis

logger = logging.getLogger(__name__)


def check_commit(amount: NumericInput, inventory: NumericInput) -> Optional[CommitRejection]:
    """
    Evaluate commit preconditions in order; first failure wins

    Returns:
        None if the sale may be committed, otherwise the rejection
    """
    qty = try_parse_decimal(amount)
    if qty is None or qty <= ZERO:
        return CommitRejection.INVALID_AMOUNT
    if qty > parse_decimal(inventory):
        return CommitRejection.INSUFFICIENT_INVENTORY
    return None


def build_trade_record(
    record_id: str,
    executed_at: datetime,
    buy_price: NumericInput,
    sell_price: NumericInput,
    amount: Decimal,
    calculation: TradeCalculation,
    notes: Optional[str] = None,
) -> TradeRecord:
    """Freeze the calculator outputs for a committed sale"""
    return TradeRecord(
        id=record_id,
        date=display_timestamp(executed_at),
        timestamp=epoch_millis(executed_at),
        buy_price=parse_decimal(buy_price),
        sell_price=parse_decimal(sell_price),
        amount_sold=amount,
        cost_basis=calculation.cost_basis,
        revenue=calculation.gross_revenue,
        profit=calculation.net_profit,
        roi=calculation.roi_pct,
        notes=notes or None,
    )


def prepend(ledger: Sequence[TradeRecord], record: TradeRecord) -> List[TradeRecord]:
    return [record, *ledger]


def delete_record(ledger: Sequence[TradeRecord], record_id: str) -> tuple[List[TradeRecord], bool]:
    """
    Remove a record by id

    Returns:
        (new ledger, whether anything was removed)
    """
    remaining = [r for r in ledger if r.id != record_id]
    return remaining, len(remaining) != len(ledger)


def find_record(ledger: Sequence[TradeRecord], record_id: str) -> Optional[TradeRecord]:
    for record in ledger:
        if record.id == record_id:
            return record
    return None


def parse_import(payload: Any) -> List[TradeRecord]:
    """
    Turn an import payload into records

    Accepts JSON text/bytes or an already-decoded sequence of dicts /
    TradeRecords.

    Raises:
        ValueError: Payload is not a sequence or any element is malformed
    """
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return load_records(payload)

        if not isinstance(payload, Sequence):
            raise ValueError(f"Expected a list of records, got {type(payload).__name__}")

        if all(isinstance(item, TradeRecord) for item in payload):
            return list(payload)

        return [item.to_domain() for item in TradeRecordList.validate_python(list(payload))]
    except ValidationError as exc:
        raise ValueError(f"Malformed ledger import ({exc.error_count()} errors)") from exc


def merge_import(
    ledger: Sequence[TradeRecord],
    candidates: Sequence[TradeRecord],
) -> tuple[List[TradeRecord], int, int]:
    """
    Prepend candidates whose id is not already known

    Import order is kept. A repeated id inside the batch keeps its first
    occurrence.

    Returns:
        (new ledger, added count, skipped count)
    """
    seen = {r.id for r in ledger}
    fresh: List[TradeRecord] = []
    for candidate in candidates:
        if candidate.id in seen:
            continue
        seen.add(candidate.id)
        fresh.append(candidate)

    skipped = len(candidates) - len(fresh)
    if skipped:
        logger.debug("Import dropped %d duplicate records", skipped)
    return [*fresh, *ledger], len(fresh), skipped


def export_ledger(ledger: Sequence[TradeRecord]) -> str:
    """Whole ledger as a JSON array, re-importable by parse_import"""
    return dump_records(list(ledger))
