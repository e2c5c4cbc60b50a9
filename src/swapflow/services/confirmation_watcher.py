"""Confirmation tracking for recorded classic swaps.

Polls receipts of pending swap transactions and finalizes them. UniswapX
orders are not touched here; their fills are reported by the order relay.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from swapflow.config import get_settings
from swapflow.ledger.database import get_db
from swapflow.ledger.models import TransactionStatus
from swapflow.ledger.repository import SwapRepository
from swapflow.rpc.clients import RpcClientCache
from swapflow.rpc.transport import RpcError
from swapflow.utils.locks import record_lock

logger = logging.getLogger(__name__)


def receipt_status(receipt: Optional[dict]) -> TransactionStatus:
    """Map an eth_getTransactionReceipt result to a transaction status.

    A receipt without a status field (pre-Byzantium chains, broken nodes)
    leaves the transaction pending.
    """
    if receipt is None:
        return TransactionStatus.PENDING
    raw_status = receipt.get("status")
    if not isinstance(raw_status, str):
        logger.warning(f"Receipt {receipt.get('transactionHash')} has no usable status: {raw_status!r}")
        return TransactionStatus.PENDING
    try:
        status = int(raw_status, 16)
    except ValueError:
        logger.warning(f"Receipt {receipt.get('transactionHash')} has malformed status {raw_status!r}")
        return TransactionStatus.PENDING
    return TransactionStatus.SUCCESS if status == 1 else TransactionStatus.FAILED


class ConfirmationWatcher:
    """Finalizes pending swap transactions once they are mined."""

    def __init__(
        self,
        clients: RpcClientCache,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        interval: Optional[float] = None,
        batch_size: Optional[int] = None,
    ):
        settings = get_settings()
        self.clients = clients
        self.interval = interval if interval is not None else settings.confirmation_poll_interval_seconds
        self.batch_size = batch_size if batch_size is not None else settings.confirmation_batch_size
        self._session_factory = session_factory
        self._stop_event = asyncio.Event()

    async def check_transaction(self, tx_hash: str, chain_id: Optional[int]) -> TransactionStatus:
        """Fetch the current status of one transaction from its chain."""
        transport = self.clients.get(chain_id) if chain_id is not None else None
        if transport is None:
            logger.warning(f"No RPC transport for chain {chain_id}, cannot track {tx_hash}")
            return TransactionStatus.PENDING

        try:
            receipt = await transport.get_transaction_receipt(tx_hash)
        except RpcError as e:
            logger.warning(f"Receipt lookup for {tx_hash} on chain {chain_id} failed: {e}")
            return TransactionStatus.PENDING
        return receipt_status(receipt)

    async def run_once(self) -> int:
        """Check one batch of pending transactions. Returns how many were finalized."""
        async with get_db(self._session_factory) as session:
            pending = await SwapRepository(session).get_pending_transactions(self.batch_size)
            candidates = [(tx.hash, tx.chain_id) for tx in pending]

        finalized = 0
        for tx_hash, chain_id in candidates:
            try:
                status = await self.check_transaction(tx_hash, chain_id)
                if status == TransactionStatus.PENDING:
                    continue

                async with record_lock(tx_hash, operation="finalize_transaction"):
                    async with get_db(self._session_factory) as session:
                        await SwapRepository(session).finalize_transaction(tx_hash, status)
            except Exception:
                logger.exception(f"Could not finalize swap transaction {tx_hash}")
                continue

            logger.info(f"Swap transaction {tx_hash} finalized as {status.value}")
            finalized += 1

        return finalized

    async def run(self) -> None:
        """Poll until stop() is called."""
        logger.info(f"Starting confirmation watcher (interval: {self.interval}s)")
        while not self._stop_event.is_set():
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Confirmation cycle failed: {e}")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Confirmation watcher stopped")

    def stop(self) -> None:
        self._stop_event.set()
