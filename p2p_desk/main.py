"""
Desk bootstrap
Wire settings, logging, storage and the controller for a UI to drive
"""

from typing import Optional

from p2p_desk.config import settings
from p2p_desk.core.logging import get_logger, setup_logging
from p2p_desk.infrastructure.db.database import build_engine, build_session_factory, init_db
from p2p_desk.infrastructure.db.repositories.state_repository import DeskStateStore
from p2p_desk.services.advisory_service import AdvisoryGateway
from p2p_desk.services.desk_service import DeskService, LoadResult
from p2p_desk.services.persistence_service import PersistenceObserver

logger = get_logger(__name__)


def create_desk(
    database_url: Optional[str] = None,
    advisor: Optional[AdvisoryGateway] = None,
    configure_logging: bool = True,
) -> tuple[DeskService, LoadResult]:
    """
    Build a ready-to-use desk

    Loads persisted state, applies the monthly quota rollover and
    subscribes the persistence observer.

    Returns:
        (desk, load result carrying startup notices)
    """
    if configure_logging:
        setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    engine = build_engine(database_url)
    init_db(engine)
    store = DeskStateStore(build_session_factory(engine))

    desk = DeskService(advisor=advisor)
    desk.subscribe(PersistenceObserver(store))
    result = desk.load(store)

    for notice in result.notices:
        logger.info(notice)
    return desk, result
