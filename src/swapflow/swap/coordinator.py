"""Swap execution coordinator.

Turns a validated swap request into exactly one settlement attempt and one
recorded outcome:

1. Validate the trade, the wallet connection and the swap chain
2. Ask the wallet to switch networks if it is on the wrong chain
3. Execute through the classic router or as a UniswapX order
4. Record the result in the transaction store or the order store

Precondition failures raise a SwapPreconditionError before the wallet is asked
to execute anything. Execution errors propagate unchanged. Recording errors are
logged and reported through on_recording_error: by then the swap has settled
and the chain or order relay is the source of truth.
"""

import logging
import uuid
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Optional

from swapflow.chains import is_evm_chain, to_supported_chain_id
from swapflow.ledger.models import TransactionStatus
from swapflow.swap.dispatcher import select_swap_callback
from swapflow.swap.errors import (
    MissingSwapChainError,
    MissingTradeError,
    UnsupportedChainError,
    WalletNotConnectedError,
    WrongNetworkError,
)
from swapflow.swap.reconciler import AlignmentStatus, ChainReconciler
from swapflow.swap.types import (
    AccountSource,
    ClassicSwapExecutor,
    ClassicSwapResult,
    ExactInputSwapTransactionInfo,
    ExactOutputSwapTransactionInfo,
    OrderSink,
    SupportedChainResolver,
    SwapChainSource,
    SwapRequest,
    SwapResult,
    TransactionInfo,
    TransactionSink,
    UniswapXOrderDetails,
    UniswapXSwapExecutor,
    UniswapXSwapResult,
)
from swapflow.trade.models import (
    InterfaceTrade,
    OffchainOrderType,
    TradeType,
    UniswapXTrade,
    currency_id,
)

logger = logging.getLogger(__name__)

TransactionStatusSource = Callable[[str], Awaitable[Optional[TransactionStatus]]]
RecordingErrorHandler = Callable[[SwapResult, Exception], None]


class SwapState(str, Enum):
    """Stages of a single swap execution."""

    IDLE = "idle"
    VALIDATING = "validating"
    RECONCILING = "reconciling"
    EXECUTING = "executing"
    RECORDING = "recording"
    DONE = "done"
    FAILED = "failed"


def build_swap_info(
    trade: InterfaceTrade,
    result: SwapResult,
    allowed_slippage: Decimal,
) -> TransactionInfo:
    """Normalized record of what was swapped, in raw currency units."""
    is_uniswapx_order = isinstance(result, UniswapXSwapResult)
    input_id = currency_id(trade.input_amount.currency)
    output_id = currency_id(trade.output_amount.currency)

    if trade.trade_type == TradeType.EXACT_INPUT:
        return ExactInputSwapTransactionInfo(
            input_currency_id=input_id,
            output_currency_id=output_id,
            is_uniswapx_order=is_uniswapx_order,
            input_currency_amount_raw=str(trade.input_amount.quotient),
            expected_output_currency_amount_raw=str(trade.output_amount.quotient),
            minimum_output_currency_amount_raw=str(
                trade.minimum_amount_out(allowed_slippage).quotient
            ),
        )

    return ExactOutputSwapTransactionInfo(
        input_currency_id=input_id,
        output_currency_id=output_id,
        is_uniswapx_order=is_uniswapx_order,
        maximum_input_currency_amount_raw=str(
            trade.maximum_amount_in(allowed_slippage).quotient
        ),
        output_currency_amount_raw=str(trade.output_amount.quotient),
        expected_input_currency_amount_raw=str(trade.input_amount.quotient),
    )


def _offchain_order_type(trade: InterfaceTrade) -> OffchainOrderType:
    if isinstance(trade, UniswapXTrade):
        return trade.offchain_order_type
    # Only reachable if a classic executor returns an order result
    logger.warning("UniswapX result for a classic trade, assuming a Dutch auction order")
    return OffchainOrderType.DUTCH_AUCTION


class SwapCoordinator:
    """Executes swaps for one wallet session.

    Holds only collaborators, so concurrent execute_swap calls for different
    trades do not interfere with each other.
    """

    def __init__(
        self,
        account_source: AccountSource,
        swap_chain_source: SwapChainSource,
        reconciler: ChainReconciler,
        classic_executor: ClassicSwapExecutor,
        uniswapx_executor: UniswapXSwapExecutor,
        add_transaction: TransactionSink,
        add_order: OrderSink,
        get_transaction_status: Optional[TransactionStatusSource] = None,
        supported_chain_resolver: SupportedChainResolver = to_supported_chain_id,
        on_recording_error: Optional[RecordingErrorHandler] = None,
    ):
        self.account_source = account_source
        self.swap_chain_source = swap_chain_source
        self.reconciler = reconciler
        self.classic_executor = classic_executor
        self.uniswapx_executor = uniswapx_executor
        self.add_transaction = add_transaction
        self.add_order = add_order
        self.get_transaction_status = get_transaction_status
        self.supported_chain_resolver = supported_chain_resolver
        self.on_recording_error = on_recording_error

    async def execute_swap(self, request: SwapRequest) -> SwapResult:
        """Execute a swap and record its outcome.

        Args:
            request: Trade, allowed slippage, fiat values and optional permit

        Returns:
            The raw settlement result from the execution primitive

        Raises:
            SwapPreconditionError: If the swap cannot be attempted
        """
        swap_id = uuid.uuid4().hex[:8]
        state = SwapState.IDLE
        try:
            state = self._transition(swap_id, state, SwapState.VALIDATING)
            trade = request.trade
            if trade is None:
                raise MissingTradeError()
            account = self.account_source()
            if not account.is_connected or not account.address:
                raise WalletNotConnectedError()
            swap_chain_id = self.swap_chain_source()
            if not swap_chain_id:
                raise MissingSwapChainError()
            if not is_evm_chain(swap_chain_id):
                raise UnsupportedChainError(swap_chain_id)

            connected_chain_id = self.supported_chain_resolver(account.chain_id)
            if connected_chain_id != swap_chain_id:
                state = self._transition(swap_id, state, SwapState.RECONCILING)
                alignment = await self.reconciler.reconcile(swap_chain_id, connected_chain_id)
                if alignment.status == AlignmentStatus.UNSUPPORTED_CHAIN_FAMILY:
                    raise UnsupportedChainError(swap_chain_id)
                if not alignment.aligned:
                    raise WrongNetworkError(swap_chain_id, account.chain_id)

            state = self._transition(swap_id, state, SwapState.EXECUTING)
            swap_callback = select_swap_callback(
                trade,
                request.allowed_slippage,
                request.fiat_values,
                request.permit_signature,
                self.classic_executor,
                self.uniswapx_executor,
            )
            try:
                result = await swap_callback()
            except Exception as e:
                logger.warning(
                    f"Swap {swap_id} failed during {trade.fill_type.value} execution "
                    f"on chain {swap_chain_id}: {e}"
                )
                raise

            state = self._transition(swap_id, state, SwapState.RECORDING)
            swap_info = build_swap_info(trade, result, request.allowed_slippage)
            await self._record(swap_id, result, trade, swap_info, account.address, swap_chain_id)

            self._transition(swap_id, state, SwapState.DONE)
            return result

        except Exception:
            self._transition(swap_id, state, SwapState.FAILED)
            raise

    async def get_swap_status(self, result: Optional[SwapResult]) -> Optional[TransactionStatus]:
        """Confirmation status of a classic swap.

        UniswapX orders are tracked by the order store, so their status is None.
        """
        if not isinstance(result, ClassicSwapResult) or self.get_transaction_status is None:
            return None
        return await self.get_transaction_status(result.response.hash)

    async def _record(
        self,
        swap_id: str,
        result: SwapResult,
        trade: InterfaceTrade,
        swap_info: TransactionInfo,
        offerer: str,
        chain_id: int,
    ) -> None:
        if not isinstance(result, (ClassicSwapResult, UniswapXSwapResult)):
            raise TypeError(f"Unhandled swap result type: {type(result).__name__}")

        try:
            if isinstance(result, UniswapXSwapResult):
                await self.add_order(
                    UniswapXOrderDetails(
                        offerer=offerer,
                        order_hash=result.response.order_hash,
                        chain_id=chain_id,
                        expiry=result.response.deadline,
                        encoded_order=result.response.encoded_order,
                        offchain_order_type=_offchain_order_type(trade),
                        swap_info=swap_info,
                    )
                )
            else:
                await self.add_transaction(result.response, swap_info, result.deadline)
        except Exception as e:
            logger.exception(f"Swap {swap_id} settled but recording its {result.type.value} result failed")
            if self.on_recording_error is not None:
                self.on_recording_error(result, e)

    @staticmethod
    def _transition(swap_id: str, current: SwapState, new: SwapState) -> SwapState:
        logger.debug(f"Swap {swap_id}: {current.value} -> {new.value}")
        return new
