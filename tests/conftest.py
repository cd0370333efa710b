from datetime import datetime
from decimal import Decimal
from itertools import count
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from p2p_desk.domain.models import TradeRecord
from p2p_desk.infrastructure.db.database import build_engine, build_session_factory, init_db
from p2p_desk.infrastructure.db.repositories.state_repository import DeskStateStore
from p2p_desk.services.advisory_service import AdvisoryGateway
from p2p_desk.services.desk_service import DeskService

DESK_TZ = ZoneInfo("America/Mexico_City")

# May 2026 -> month index 4
FIXED_NOW = datetime(2026, 5, 14, 10, 30, 0, tzinfo=DESK_TZ)


@pytest.fixture()
def clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def id_factory():
    counter = count(1)
    return lambda: f"trade-{next(counter)}"


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def store(session_factory) -> DeskStateStore:
    return DeskStateStore(session_factory)


@pytest.fixture()
def offline_advisor() -> AdvisoryGateway:
    """Advisor with no API key: always answers with the fallback"""
    return AdvisoryGateway(api_key="")


@pytest.fixture()
def desk(offline_advisor, clock, id_factory) -> DeskService:
    return DeskService(advisor=offline_advisor, clock=clock, id_factory=id_factory)


@pytest.fixture()
def make_record():
    """Build a consistent TradeRecord from buy/sell/amount"""

    def _make(
        record_id: str,
        timestamp: int = 1_778_776_200_000,
        buy: str = "18.00",
        sell: str = "18.50",
        amount: str = "100",
        date: str = "2026-05-14 10:30:00",
        notes: Optional[str] = None,
    ) -> TradeRecord:
        buy_d, sell_d, amount_d = Decimal(buy), Decimal(sell), Decimal(amount)
        cost = buy_d * amount_d
        revenue = sell_d * amount_d
        profit = revenue - cost
        roi = profit / cost * Decimal("100") if cost > 0 else Decimal("0")
        return TradeRecord(
            id=record_id,
            date=date,
            timestamp=timestamp,
            buy_price=buy_d,
            sell_price=sell_d,
            amount_sold=amount_d,
            cost_basis=cost,
            revenue=revenue,
            profit=profit,
            roi=roi,
            notes=notes,
        )

    return _make
