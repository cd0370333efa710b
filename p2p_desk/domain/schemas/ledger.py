"""
Wire schemas for persisted state and ledger export files.

Keys follow the backup format written by earlier versions of the desk
(camelCase, fiat amounts suffixed MXN), so old exports import unchanged.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer

from p2p_desk.domain.models import QuotaState, TradeRecord


class TradeRecordSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    date: str
    timestamp: int
    buy_price: Decimal = Field(alias="buyPrice")
    sell_price: Decimal = Field(alias="sellPrice")
    amount_sold: Decimal = Field(alias="amountSold", gt=0)
    cost_basis: Decimal = Field(alias="investmentMXN")
    revenue: Decimal = Field(alias="revenueMXN")
    profit: Decimal = Field(alias="profitMXN")
    roi: Decimal
    notes: Optional[str] = None

    @field_serializer(
        "buy_price", "sell_price", "amount_sold", "cost_basis", "revenue", "profit", "roi",
        when_used="json",
    )
    def _as_number(self, value: Decimal) -> float:
        return float(value)

    @classmethod
    def from_domain(cls, record: TradeRecord) -> "TradeRecordSchema":
        return cls(
            id=record.id,
            date=record.date,
            timestamp=record.timestamp,
            buy_price=record.buy_price,
            sell_price=record.sell_price,
            amount_sold=record.amount_sold,
            cost_basis=record.cost_basis,
            revenue=record.revenue,
            profit=record.profit,
            roi=record.roi,
            notes=record.notes,
        )

    def to_domain(self) -> TradeRecord:
        return TradeRecord(
            id=self.id,
            date=self.date,
            timestamp=self.timestamp,
            buy_price=self.buy_price,
            sell_price=self.sell_price,
            amount_sold=self.amount_sold,
            cost_basis=self.cost_basis,
            revenue=self.revenue,
            profit=self.profit,
            roi=self.roi,
            notes=self.notes,
        )


class QuotaSettingsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    limit_usd: Decimal = Field(alias="limitUSD")
    used_usd: Decimal = Field(alias="usedUSD")
    exchange_rate: Decimal = Field(alias="exchangeRate")
    last_reset_month: int = Field(alias="lastResetMonth", ge=0, le=11)

    @field_serializer("limit_usd", "used_usd", "exchange_rate", when_used="json")
    def _as_number(self, value: Decimal) -> float:
        return float(value)

    @classmethod
    def from_domain(cls, state: QuotaState) -> "QuotaSettingsSchema":
        return cls(
            limit_usd=state.limit_usd,
            used_usd=state.used_usd,
            exchange_rate=state.exchange_rate,
            last_reset_month=state.last_reset_month,
        )

    def to_domain(self) -> QuotaState:
        return QuotaState(
            limit_usd=self.limit_usd,
            used_usd=self.used_usd,
            exchange_rate=self.exchange_rate,
            last_reset_month=self.last_reset_month,
        )


TradeRecordList = TypeAdapter(List[TradeRecordSchema])


def dump_records(records: List[TradeRecord]) -> str:
    """Serialize records (newest first) as a JSON array."""
    payload = [TradeRecordSchema.from_domain(r) for r in records]
    return TradeRecordList.dump_json(payload, by_alias=True, exclude_none=True).decode("utf-8")


def load_records(raw: str | bytes) -> List[TradeRecord]:
    """
    Parse a JSON array of records.

    Raises:
        pydantic.ValidationError: On bad JSON, a non-array payload or any
            malformed element (all or nothing)
    """
    return [item.to_domain() for item in TradeRecordList.validate_json(raw)]
