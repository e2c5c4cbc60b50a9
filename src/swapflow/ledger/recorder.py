"""Sinks that persist swap outcomes.

Classic results go to the transaction store keyed by transaction hash,
UniswapX results to the order store keyed by order hash. Each write holds
the record lock for its key, so two writers for the same hash are
serialized and the second one gets a DuplicateRecordError.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from swapflow.ledger.database import get_db
from swapflow.ledger.models import TransactionStatus
from swapflow.ledger.repository import SwapRepository
from swapflow.swap.types import ClassicSwapResponse, TransactionInfo, UniswapXOrderDetails
from swapflow.utils.locks import record_lock

logger = logging.getLogger(__name__)


class OutcomeRecorder:
    """Writes settled swaps to the database."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory

    async def add_transaction(
        self,
        response: ClassicSwapResponse,
        swap_info: TransactionInfo,
        deadline: Optional[int] = None,
    ) -> None:
        async with record_lock(response.hash, operation="add_transaction"):
            async with get_db(self._session_factory) as session:
                await SwapRepository(session).add_transaction(
                    tx_hash=response.hash,
                    swap_info=swap_info.to_dict(),
                    chain_id=response.chain_id,
                    from_address=response.from_address,
                    nonce=response.nonce,
                    deadline=deadline,
                )
        logger.info(f"Recorded swap transaction {response.hash}")

    async def add_order(self, order: UniswapXOrderDetails) -> None:
        async with record_lock(order.order_hash, operation="add_order"):
            async with get_db(self._session_factory) as session:
                await SwapRepository(session).add_order(
                    order_hash=order.order_hash,
                    offerer=order.offerer,
                    chain_id=order.chain_id,
                    expiry=order.expiry,
                    encoded_order=order.encoded_order,
                    offchain_order_type=order.offchain_order_type.value,
                    swap_info=order.swap_info.to_dict(),
                )
        logger.info(
            f"Recorded {order.offchain_order_type.value} order {order.order_hash} "
            f"on chain {order.chain_id}"
        )

    async def get_transaction_status(self, tx_hash: str) -> Optional[TransactionStatus]:
        """Stored status for a transaction hash, None if it was never recorded."""
        async with get_db(self._session_factory) as session:
            tx = await SwapRepository(session).get_transaction(tx_hash)
            return TransactionStatus(tx.status) if tx else None
