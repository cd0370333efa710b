"""
PERSISTENCE SERVICE

Observer that writes settled desk state to the store.
Best effort: a failed write is logged and never undoes a transition.
"""

import logging
from typing import TYPE_CHECKING, Iterable

from p2p_desk.domain.models import StateChange
from p2p_desk.infrastructure.db.repositories.state_repository import DeskStateStore

if TYPE_CHECKING:
    from p2p_desk.services.desk_service import DeskState

_logger = logging.getLogger(__name__)


class PersistenceObserver:
    def __init__(self, store: DeskStateStore):
        self.store = store

    def __call__(self, state: "DeskState", changes: Iterable[StateChange]) -> None:
        for change in changes:
            try:
                if change is StateChange.LEDGER:
                    self.store.save_ledger(state.ledger)
                elif change is StateChange.QUOTA:
                    self.store.save_quota(state.quota)
                elif change is StateChange.INVENTORY:
                    self.store.save_inventory(state.position.inventory_quantity)
            except Exception:
                _logger.exception("Failed to persist %s", change.value)
