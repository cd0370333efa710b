"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from p2p_desk.utils.numeric import HUNDRED, ZERO

class PositionField(str, Enum):
    """Editable field of the position group"""
    BUY_PRICE = "buy_price"
    ACQUISITION_COST = "acquisition_cost"
    INVENTORY_QUANTITY = "inventory_quantity"

class CommitRejection(str, Enum):
    """Why a sale commit was refused"""
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"

    @property
    def message(self) -> str:
        if self is CommitRejection.INVALID_AMOUNT:
            return "Enter a valid amount to sell."
        return "Not enough inventory for this sale."

class QuotaLevel(str, Enum):
    """Monthly quota usage band"""
    NORMAL = "NORMAL"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

class StateChange(str, Enum):
    """Persisted entry touched by a settled transition"""
    LEDGER = "LEDGER"
    QUOTA = "QUOTA"
    INVENTORY = "INVENTORY"

@dataclass(frozen=True)
class TradeRecord:
    """Completed sale - Immutable"""
    id: str
    date: str
    timestamp: int
    buy_price: Decimal
    sell_price: Decimal
    amount_sold: Decimal
    cost_basis: Decimal
    revenue: Decimal
    profit: Decimal
    roi: Decimal
    notes: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Trade record id cannot be empty")
        if self.amount_sold <= ZERO:
            raise ValueError("Amount sold must be positive")

    @property
    def is_profitable(self) -> bool:
        return self.profit >= ZERO

@dataclass(frozen=True)
class PositionState:
    """Buy price / acquisition cost / inventory, held as raw input text"""
    buy_price: str = ""
    acquisition_cost: str = ""
    inventory_quantity: str = ""

@dataclass(frozen=True)
class SaleInput:
    """Pending sale inputs (raw text)"""
    sell_price: str = ""
    amount: str = ""

@dataclass(frozen=True)
class TradeCalculation:
    """Derived results for the current inputs - Immutable"""
    gross_revenue: Decimal
    cost_basis: Decimal
    net_profit: Decimal
    roi_pct: Decimal
    spread_pct: Decimal
    remaining_inventory: Decimal

    @property
    def is_profitable(self) -> bool:
        return self.net_profit >= ZERO

@dataclass(frozen=True)
class QuotaState:
    """Monthly venue quota - Immutable snapshot"""
    limit_usd: Decimal
    used_usd: Decimal
    exchange_rate: Decimal
    last_reset_month: int

    def __post_init__(self):
        if not 0 <= self.last_reset_month <= 11:
            raise ValueError("last_reset_month must be within 0-11")

    @property
    def used_pct(self) -> Decimal:
        """Used share of the limit, capped at 100"""
        if self.limit_usd <= ZERO:
            return HUNDRED if self.used_usd > ZERO else ZERO
        return min(self.used_usd / self.limit_usd * HUNDRED, HUNDRED)

    @property
    def remaining_usd(self) -> Decimal:
        return max(self.limit_usd - self.used_usd, ZERO)

    @property
    def remaining_local(self) -> Decimal:
        """Remaining quota in the reference currency"""
        return self.remaining_usd * self.exchange_rate

    @property
    def level(self) -> QuotaLevel:
        pct = self.used_pct
        if pct >= Decimal("90"):
            return QuotaLevel.CRITICAL
        if pct >= Decimal("75"):
            return QuotaLevel.WARNING
        return QuotaLevel.NORMAL

@dataclass(frozen=True)
class CommitResult:
    """Outcome of a sale commit"""
    accepted: bool
    record: Optional[TradeRecord] = None
    rejection: Optional[CommitRejection] = None

    @property
    def message(self) -> str:
        if self.rejection is not None:
            return self.rejection.message
        return "Trade saved."

@dataclass(frozen=True)
class ImportResult:
    """Outcome of a ledger import"""
    added: int = 0
    skipped: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is not None:
            return f"Could not read the import file: {self.error}"
        return f"{self.added} records imported."
