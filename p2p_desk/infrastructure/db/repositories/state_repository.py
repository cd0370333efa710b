"""
State Repository
Read/write the desk's three persisted entries
"""

import logging
from typing import Callable, List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from p2p_desk.domain.models import QuotaState, TradeRecord
from p2p_desk.domain.schemas.ledger import QuotaSettingsSchema, dump_records, load_records
from p2p_desk.infrastructure.db.models import (
    HISTORY_KEY,
    INVENTORY_KEY,
    SETTINGS_KEY,
    AppStateModel,
)

logger = logging.getLogger(__name__)


class StateRepository:
    """Raw key/value access to app_state"""

    def __init__(self, session: Session):
        """Initialize with database session"""
        self.session = session

    def get_raw(self, key: str) -> Optional[str]:
        model = self.session.execute(
            select(AppStateModel).where(AppStateModel.key == key)
        ).scalar_one_or_none()
        return model.value if model else None

    def set_raw(self, key: str, value: str) -> None:
        model = self.session.get(AppStateModel, key)
        if model is None:
            self.session.add(AppStateModel(key=key, value=value))
        else:
            model.value = value
        self.session.flush()

    def delete(self, key: str) -> bool:
        model = self.session.get(AppStateModel, key)
        if model is None:
            return False
        self.session.delete(model)
        self.session.flush()
        return True


class DeskStateStore:
    """
    Typed load/save of ledger, quota settings and inventory echo

    Each call runs in its own short transaction. Structurally invalid
    history or settings read back as absent (None).
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _read(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            return StateRepository(session).get_raw(key)

    def _write(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            StateRepository(session).set_raw(key, value)
            session.commit()

    # ---------- ledger ----------
    def load_ledger(self) -> Optional[List[TradeRecord]]:
        raw = self._read(HISTORY_KEY)
        if raw is None:
            return None
        try:
            return load_records(raw)
        except ValidationError as exc:
            logger.warning("Stored ledger is invalid, ignoring it (%d errors)", exc.error_count())
            return None

    def save_ledger(self, records: List[TradeRecord]) -> None:
        self._write(HISTORY_KEY, dump_records(records))

    # ---------- quota ----------
    def load_quota(self) -> Optional[QuotaState]:
        raw = self._read(SETTINGS_KEY)
        if raw is None:
            return None
        try:
            return QuotaSettingsSchema.model_validate_json(raw).to_domain()
        except ValidationError as exc:
            logger.warning("Stored quota settings are invalid, ignoring them (%d errors)", exc.error_count())
            return None

    def save_quota(self, state: QuotaState) -> None:
        self._write(SETTINGS_KEY, QuotaSettingsSchema.from_domain(state).model_dump_json(by_alias=True))

    # ---------- inventory echo ----------
    def load_inventory(self) -> Optional[str]:
        return self._read(INVENTORY_KEY)

    def save_inventory(self, text: str) -> None:
        self._write(INVENTORY_KEY, text)
