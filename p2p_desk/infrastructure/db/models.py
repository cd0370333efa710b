"""
Database Models (SQLAlchemy ORM)
Key/value entries for the desk's persisted state
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from p2p_desk.infrastructure.db.database import Base


# Storage keys (kept from the browser-storage era so backups line up)
HISTORY_KEY = "p2p_pro_history"
SETTINGS_KEY = "p2p_pro_settings"
INVENTORY_KEY = "p2p_pro_inventory"


class AppStateModel(Base):
    """One persisted entry: ledger, quota settings or inventory echo"""
    __tablename__ = "app_state"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
