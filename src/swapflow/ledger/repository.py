"""Repository for recorded swap transactions and orders."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from swapflow.ledger.models import OrderStatus, SwapOrder, SwapTransaction, TransactionStatus
from swapflow.swap.errors import DuplicateRecordError


class SwapRepository:
    """Database operations for the transaction and order stores."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Transaction operations
    async def add_transaction(
        self,
        tx_hash: str,
        swap_info: dict,
        chain_id: Optional[int] = None,
        from_address: Optional[str] = None,
        nonce: Optional[int] = None,
        deadline: Optional[int] = None,
    ) -> SwapTransaction:
        """Create a pending transaction. Raises DuplicateRecordError if the hash exists."""
        if await self.get_transaction(tx_hash) is not None:
            raise DuplicateRecordError("transaction", tx_hash)

        tx = SwapTransaction(
            hash=tx_hash,
            chain_id=chain_id,
            from_address=from_address,
            nonce=nonce,
            swap_info=swap_info,
            deadline=deadline,
            status=TransactionStatus.PENDING.value,
        )
        self.session.add(tx)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateRecordError("transaction", tx_hash) from e
        return tx

    async def get_transaction(self, tx_hash: str) -> Optional[SwapTransaction]:
        """Get transaction by hash."""
        stmt = select(SwapTransaction).where(SwapTransaction.hash == tx_hash)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_transactions(self, limit: int = 50) -> list[SwapTransaction]:
        """Pending transactions, oldest first."""
        stmt = (
            select(SwapTransaction)
            .where(SwapTransaction.status == TransactionStatus.PENDING.value)
            .order_by(SwapTransaction.added_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def finalize_transaction(
        self,
        tx_hash: str,
        status: TransactionStatus,
        receipt: Optional[dict] = None,
    ) -> SwapTransaction:
        """Mark a pending transaction as confirmed or failed."""
        if status == TransactionStatus.PENDING:
            raise ValueError("Cannot finalize a transaction as pending")

        tx = await self.get_transaction(tx_hash)
        if tx is None:
            raise ValueError(f"Transaction {tx_hash} not found")
        if tx.status != TransactionStatus.PENDING.value:
            raise ValueError(f"Transaction {tx_hash} already finalized as {tx.status}")

        tx.status = status.value
        tx.receipt = receipt
        tx.confirmed_at = datetime.now(timezone.utc)
        await self.session.flush()
        return tx

    # Order operations
    async def add_order(
        self,
        order_hash: str,
        offerer: str,
        chain_id: int,
        expiry: int,
        encoded_order: str,
        offchain_order_type: str,
        swap_info: dict,
    ) -> SwapOrder:
        """Create an open order. Raises DuplicateRecordError if the hash exists."""
        if await self.get_order(order_hash) is not None:
            raise DuplicateRecordError("order", order_hash)

        order = SwapOrder(
            order_hash=order_hash,
            offerer=offerer,
            chain_id=chain_id,
            expiry=expiry,
            encoded_order=encoded_order,
            offchain_order_type=offchain_order_type,
            swap_info=swap_info,
            status=OrderStatus.OPEN.value,
        )
        self.session.add(order)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateRecordError("order", order_hash) from e
        return order

    async def get_order(self, order_hash: str) -> Optional[SwapOrder]:
        """Get order by hash."""
        stmt = select(SwapOrder).where(SwapOrder.order_hash == order_hash)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_orders_by_offerer(self, offerer: str, limit: int = 20) -> list[SwapOrder]:
        """Most recent orders signed by an address."""
        stmt = (
            select(SwapOrder)
            .where(SwapOrder.offerer == offerer)
            .order_by(SwapOrder.added_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_order_status(
        self,
        order_hash: str,
        status: OrderStatus,
        fill_tx_hash: Optional[str] = None,
    ) -> SwapOrder:
        """Move an open order to its next status."""
        order = await self.get_order(order_hash)
        if order is None:
            raise ValueError(f"Order {order_hash} not found")
        if order.status != OrderStatus.OPEN.value:
            raise ValueError(f"Order {order_hash} is already {order.status}")

        order.status = status.value
        if fill_tx_hash:
            order.fill_tx_hash = fill_tx_hash
        await self.session.flush()
        return order
