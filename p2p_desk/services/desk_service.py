"""
DESK SERVICE
Single owner of the desk's application state

RESPONSIBILITIES:
- Route field edits through the position sync rule
- Recompute the trade calculation on demand from current inputs
- Commit sales as one transaction (ledger + quota + inventory + inputs)
- Ledger delete / restore / export / import
- Quota settings and month rollover on load
- Notify observers after every settled transition

RULES:
❌ No ad hoc field writes from outside
❌ A rejected commit or import mutates nothing
✅ Observer failures never leak into the transition result
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, List, Optional
from uuid import uuid4

from p2p_desk.config import settings
from p2p_desk.domain.models import (
    CommitResult,
    ImportResult,
    PositionField,
    PositionState,
    QuotaState,
    SaleInput,
    StateChange,
    TradeCalculation,
    TradeRecord,
)
from p2p_desk.domain.services import analytics_engine, ledger_engine, quota_engine
from p2p_desk.domain.services.position_sync_engine import apply_position_edit, position_after_sale
from p2p_desk.domain.services.trade_calculator import calculate_trade
from p2p_desk.infrastructure.db.repositories.state_repository import DeskStateStore
from p2p_desk.services.advisory_service import AdvisoryGateway
from p2p_desk.utils.numeric import TWO_PLACES, ZERO, NumericInput, format_plain, parse_decimal
from p2p_desk.utils.time import month_index, now_local

logger = logging.getLogger(__name__)

Listener = Callable[["DeskState", FrozenSet[StateChange]], None]

NEW_MONTH_NOTICE = "New month detected: the monthly quota has been reset."
ADVICE_MISSING_INPUT = "Fill in the trade details first."


@dataclass
class DeskState:
    """Everything the desk holds for the current session"""
    quota: QuotaState
    position: PositionState = field(default_factory=PositionState)
    sale: SaleInput = field(default_factory=SaleInput)
    ledger: List[TradeRecord] = field(default_factory=list)
    advice: Optional[str] = None
    advice_loading: bool = False


@dataclass(frozen=True)
class LoadResult:
    """What was found in storage at startup"""
    records: int
    quota_reset: bool
    inventory_restored: bool

    @property
    def notices(self) -> List[str]:
        return [NEW_MONTH_NOTICE] if self.quota_reset else []


@dataclass(frozen=True)
class AdviceResult:
    requested: bool
    text: str


class DeskService:
    """Controller for the calculator, quota tracker and ledger"""

    def __init__(
        self,
        state: Optional[DeskState] = None,
        advisor: Optional[AdvisoryGateway] = None,
        clock: Callable[[], datetime] = now_local,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ):
        self._clock = clock
        self._id_factory = id_factory
        self.advisor = advisor or AdvisoryGateway()
        self.state = state or DeskState(
            quota=quota_engine.default_quota(
                current_month=month_index(clock()),
                limit_usd=settings.DEFAULT_LIMIT_USD,
                exchange_rate=settings.DEFAULT_EXCHANGE_RATE,
            )
        )
        self._listeners: List[Listener] = []

    # ---------- observers ----------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, *changes: StateChange) -> None:
        if not changes:
            return
        frozen = frozenset(changes)
        for listener in self._listeners:
            try:
                listener(self.state, frozen)
            except Exception:
                logger.exception("State listener failed for %s", sorted(c.value for c in frozen))

    # ---------- load ----------
    def load(self, store: DeskStateStore) -> LoadResult:
        """
        Restore persisted state and apply the monthly quota rollover

        Missing or invalid entries fall back to the current in-memory
        defaults.
        """
        ledger = store.load_ledger()
        if ledger is not None:
            self.state.ledger = ledger

        quota = store.load_quota()
        reset = False
        if quota is not None:
            quota, reset = quota_engine.apply_month_rollover(quota, month_index(self._clock()))
            self.state.quota = quota

        inventory = store.load_inventory()
        if inventory is not None:
            self.state.position = replace(self.state.position, inventory_quantity=inventory)

        logger.info(
            "Desk loaded: %d records, quota used %s / %s",
            len(self.state.ledger),
            self.state.quota.used_usd,
            self.state.quota.limit_usd,
        )
        if reset:
            self._notify(StateChange.QUOTA)

        return LoadResult(
            records=len(self.state.ledger),
            quota_reset=reset,
            inventory_restored=inventory is not None,
        )

    # ---------- position edits ----------
    def _edit_position(self, edited: PositionField, text: str) -> PositionState:
        before = self.state.position
        self.state.position = apply_position_edit(before, edited, text)
        if self.state.position.inventory_quantity != before.inventory_quantity:
            self._notify(StateChange.INVENTORY)
        return self.state.position

    def edit_buy_price(self, text: str) -> PositionState:
        return self._edit_position(PositionField.BUY_PRICE, text)

    def edit_acquisition_cost(self, text: str) -> PositionState:
        return self._edit_position(PositionField.ACQUISITION_COST, text)

    def edit_inventory(self, text: str) -> PositionState:
        return self._edit_position(PositionField.INVENTORY_QUANTITY, text)

    # ---------- sale inputs ----------
    def set_sell_price(self, text: str) -> None:
        self.state.sale = replace(self.state.sale, sell_price=text)

    def set_amount(self, text: str) -> None:
        self.state.sale = replace(self.state.sale, amount=text)

    def sell_max(self) -> None:
        """Sell the whole inventory"""
        self.set_amount(self.state.position.inventory_quantity)

    @property
    def calculation(self) -> TradeCalculation:
        return calculate_trade(
            self.state.position.buy_price,
            self.state.sale.sell_price,
            self.state.sale.amount,
            self.state.position.inventory_quantity,
        )

    # ---------- commit ----------
    def commit_sale(self, note: Optional[str] = None) -> CommitResult:
        """
        Finalize the pending sale

        Either every effect applies (ledger prepend, quota accumulate,
        inventory decrement, cost recompute, inputs cleared) or none does.
        """
        state = self.state
        rejection = ledger_engine.check_commit(state.sale.amount, state.position.inventory_quantity)
        if rejection is not None:
            logger.warning(
                "Commit rejected (%s): amount=%r inventory=%r",
                rejection.value,
                state.sale.amount,
                state.position.inventory_quantity,
            )
            return CommitResult(accepted=False, rejection=rejection)

        amount = parse_decimal(state.sale.amount)
        calc = self.calculation
        record = ledger_engine.build_trade_record(
            record_id=self._id_factory(),
            executed_at=self._clock(),
            buy_price=state.position.buy_price,
            sell_price=state.sale.sell_price,
            amount=amount,
            calculation=calc,
            notes=note,
        )

        # Everything is built; apply in one go
        state.ledger = ledger_engine.prepend(state.ledger, record)
        state.quota = quota_engine.accumulate(state.quota, amount)
        state.position = position_after_sale(state.position, calc.remaining_inventory)
        state.sale = SaleInput()
        state.advice = None

        logger.info(
            "Trade committed id=%s amount=%s profit=%s roi=%s%%",
            record.id,
            record.amount_sold,
            record.profit,
            record.roi.quantize(TWO_PLACES),
        )
        self._notify(StateChange.LEDGER, StateChange.QUOTA, StateChange.INVENTORY)
        return CommitResult(accepted=True, record=record)

    # ---------- ledger ----------
    def delete_record(self, record_id: str) -> bool:
        """Remove a record; quota and inventory are not refunded"""
        ledger, removed = ledger_engine.delete_record(self.state.ledger, record_id)
        if not removed:
            return False
        self.state.ledger = ledger
        logger.info("Trade record deleted id=%s", record_id)
        self._notify(StateChange.LEDGER)
        return True

    def restore_record(self, record_id: str) -> Optional[TradeRecord]:
        """Load a past trade's prices and amount into the calculator"""
        record = ledger_engine.find_record(self.state.ledger, record_id)
        if record is None:
            return None
        self.state.position = replace(self.state.position, buy_price=format_plain(record.buy_price))
        self.state.sale = SaleInput(
            sell_price=format_plain(record.sell_price),
            amount=format_plain(record.amount_sold),
        )
        return record

    def export_ledger(self) -> str:
        return ledger_engine.export_ledger(self.state.ledger)

    def import_ledger(self, payload: Any) -> ImportResult:
        """Merge an exported ledger; malformed payloads change nothing"""
        try:
            candidates = ledger_engine.parse_import(payload)
        except ValueError as exc:
            logger.warning("Ledger import rejected: %s", exc)
            return ImportResult(error=str(exc))

        ledger, added, skipped = ledger_engine.merge_import(self.state.ledger, candidates)
        self.state.ledger = ledger
        logger.info("Ledger import: %d added, %d already present", added, skipped)
        if added:
            self._notify(StateChange.LEDGER)
        return ImportResult(added=added, skipped=skipped)

    def dashboard(self) -> Dict[str, Any]:
        """KPIs, equity curve and monthly profit for the current ledger"""
        ledger = self.state.ledger
        return {
            "summary": analytics_engine.summarize(ledger),
            "equity": analytics_engine.equity_curve(ledger),
            "monthly": analytics_engine.monthly_profit(ledger),
        }

    # ---------- quota ----------
    def update_quota_settings(self, limit_usd: NumericInput, exchange_rate: NumericInput) -> QuotaState:
        self.state.quota = quota_engine.update_settings(self.state.quota, limit_usd, exchange_rate)
        self._notify(StateChange.QUOTA)
        return self.state.quota

    # ---------- advisor ----------
    async def request_advice(self) -> AdviceResult:
        """
        Ask the advisor about the pending trade

        Only the advice text and loading flag change. A response that
        lands after the inputs moved on is still shown.
        """
        state = self.state
        amount = parse_decimal(state.sale.amount)
        if amount <= ZERO or not state.position.buy_price or not state.sale.sell_price:
            return AdviceResult(requested=False, text=ADVICE_MISSING_INPUT)

        calc = self.calculation
        state.advice_loading = True
        try:
            advice = await self.advisor.analyze_trade(
                float(parse_decimal(state.position.buy_price)),
                float(parse_decimal(state.sale.sell_price)),
                float(amount),
                float(calc.net_profit),
                float(calc.roi_pct),
            )
        finally:
            state.advice_loading = False

        state.advice = advice
        return AdviceResult(requested=True, text=advice)
