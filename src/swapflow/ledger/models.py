"""SQLAlchemy models for recorded swaps."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import JSON, BigInteger, DateTime, Index, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TransactionStatus(str, Enum):
    """Confirmation status of an on-chain swap transaction."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class OrderStatus(str, Enum):
    """Lifecycle of a UniswapX order."""

    OPEN = "open"
    FILLED = "filled"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    ERROR = "error"


class SwapTransaction(Base):
    """Classic swap submitted on-chain, keyed by transaction hash.

    Created once by the outcome recorder; only confirmation tracking
    updates it afterwards.
    """

    __tablename__ = "swap_transactions"
    __table_args__ = (Index("ix_swap_transactions_status", "status"),)

    hash: Mapped[str] = mapped_column(String(66), primary_key=True)
    chain_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    from_address: Mapped[Optional[str]] = mapped_column(String(42), nullable=True)
    nonce: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    swap_info: Mapped[dict] = mapped_column(JSON, nullable=False)
    deadline: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)  # unix seconds
    status: Mapped[str] = mapped_column(
        String(20), default=TransactionStatus.PENDING.value, nullable=False
    )
    receipt: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class SwapOrder(Base):
    """UniswapX order handed to fillers, keyed by order hash."""

    __tablename__ = "swap_orders"
    __table_args__ = (Index("ix_swap_orders_offerer", "offerer"),)

    order_hash: Mapped[str] = mapped_column(String(66), primary_key=True)
    offerer: Mapped[str] = mapped_column(String(42), nullable=False)
    chain_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expiry: Mapped[int] = mapped_column(BigInteger, nullable=False)  # unix seconds
    encoded_order: Mapped[str] = mapped_column(Text, nullable=False)
    offchain_order_type: Mapped[str] = mapped_column(String(20), nullable=False)
    swap_info: Mapped[dict] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=OrderStatus.OPEN.value, nullable=False)
    fill_tx_hash: Mapped[Optional[str]] = mapped_column(String(66), nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
