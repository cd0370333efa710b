"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    CommitRejection,
    PositionField,
    QuotaLevel,
    StateChange,

    # Entities
    CommitResult,
    ImportResult,
    PositionState,
    QuotaState,
    SaleInput,
    TradeCalculation,
    TradeRecord,
)

__all__ = [
    # Enums
    "CommitRejection",
    "PositionField",
    "QuotaLevel",
    "StateChange",

    # Entities
    "CommitResult",
    "ImportResult",
    "PositionState",
    "QuotaState",
    "SaleInput",
    "TradeCalculation",
    "TradeRecord",
]
