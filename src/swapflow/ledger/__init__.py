"""Ledger module for recorded swap transactions and orders."""

from swapflow.ledger.database import close_db, get_db, init_db
from swapflow.ledger.models import (
    OrderStatus,
    SwapOrder,
    SwapTransaction,
    TransactionStatus,
)
from swapflow.ledger.recorder import OutcomeRecorder
from swapflow.ledger.repository import SwapRepository

__all__ = [
    # Models
    "SwapOrder",
    "SwapTransaction",
    # Enums
    "OrderStatus",
    "TransactionStatus",
    # Database
    "close_db",
    "get_db",
    "init_db",
    "OutcomeRecorder",
    "SwapRepository",
]
