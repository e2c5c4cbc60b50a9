"""Simulated wallet and execution primitives (no signing, no broadcast).

Used for local runs and tests. Hashes are derived from the trade and a
random nonce so repeated swaps of the same trade get distinct keys.
"""

import hashlib
import logging
import secrets
import time
from decimal import Decimal
from typing import Optional

from swapflow.chains import to_supported_chain_id
from swapflow.swap.types import (
    AccountState,
    ClassicSwapResponse,
    ClassicSwapResult,
    ExecutionOptions,
    FiatValues,
    UniswapXOrderResponse,
    UniswapXSwapResult,
)
from swapflow.trade.models import ClassicTrade, UniswapXTrade

logger = logging.getLogger(__name__)


def _simulated_hash(*parts: object) -> str:
    seed = ":".join(str(p) for p in parts) + f":{secrets.token_hex(8)}"
    return "0x" + hashlib.sha256(seed.encode()).hexdigest()


class DryRunWallet:
    """A connected wallet that accepts or declines network switches."""

    def __init__(
        self,
        address: Optional[str] = None,
        chain_id: Optional[int] = 1,
        accept_switch: bool = True,
    ):
        self.address = address
        self.chain_id = chain_id
        self.accept_switch = accept_switch
        self.switch_requests: list[int] = []

    def account(self) -> AccountState:
        return AccountState(
            is_connected=self.address is not None,
            address=self.address,
            chain_id=self.chain_id,
        )

    async def switch_chain(self, chain_id: int) -> Optional[int]:
        self.switch_requests.append(chain_id)
        if not self.accept_switch or to_supported_chain_id(chain_id) is None:
            logger.info(f"[DRY RUN] Wallet declined switch to chain {chain_id}")
            return None
        self.chain_id = chain_id
        logger.info(f"[DRY RUN] Wallet switched to chain {chain_id}")
        return chain_id


class DryRunClassicExecutor:
    """Pretends to submit a router transaction."""

    def __init__(self, wallet: DryRunWallet, deadline_seconds: int = 30 * 60):
        self.wallet = wallet
        self.deadline_seconds = deadline_seconds
        self.calls: list[tuple[ClassicTrade, FiatValues, ExecutionOptions]] = []

    async def __call__(
        self,
        trade: ClassicTrade,
        fiat_values: FiatValues,
        options: ExecutionOptions,
    ) -> ClassicSwapResult:
        self.calls.append((trade, fiat_values, options))
        tx_hash = _simulated_hash(
            self.wallet.address, trade.input_amount.quotient, trade.output_amount.quotient
        )
        logger.info(f"[DRY RUN] Submitted classic swap {tx_hash}")
        return ClassicSwapResult(
            response=ClassicSwapResponse(
                hash=tx_hash,
                from_address=self.wallet.address,
                chain_id=self.wallet.chain_id,
            ),
            deadline=int(time.time()) + self.deadline_seconds,
        )


class DryRunUniswapXExecutor:
    """Pretends to sign an order and hand it to the order relay."""

    def __init__(self, wallet: DryRunWallet, order_ttl_seconds: int = 60):
        self.wallet = wallet
        self.order_ttl_seconds = order_ttl_seconds
        self.calls: list[tuple[UniswapXTrade, Decimal, FiatValues]] = []

    async def __call__(
        self,
        trade: UniswapXTrade,
        allowed_slippage: Decimal,
        fiat_values: FiatValues,
    ) -> UniswapXSwapResult:
        self.calls.append((trade, allowed_slippage, fiat_values))
        order_hash = _simulated_hash(
            self.wallet.address, trade.offchain_order_type.value, trade.input_amount.quotient
        )
        logger.info(f"[DRY RUN] Signed {trade.offchain_order_type.value} order {order_hash}")
        return UniswapXSwapResult(
            type=trade.fill_type,
            response=UniswapXOrderResponse(
                order_hash=order_hash,
                deadline=int(time.time()) + self.order_ttl_seconds,
                encoded_order="0x" + secrets.token_hex(64),
            ),
        )
