"""Select the execution callback for a trade's settlement path."""

from decimal import Decimal
from functools import partial
from typing import Optional, Union

from swapflow.trade.models import ClassicTrade, InterfaceTrade, TradeType, UniswapXTrade
from swapflow.swap.types import (
    ClassicSwapExecutor,
    ExecutionOptions,
    FeeOptions,
    FiatValues,
    FlatFeeOptions,
    PermitSignature,
    SwapCallback,
    UniswapXSwapExecutor,
)

RouterFeeField = Union[FeeOptions, FlatFeeOptions]


def get_router_fee_fields(trade: Optional[InterfaceTrade]) -> dict[str, RouterFeeField]:
    """Fee fields for the router's execution options.

    Only classic trades that carry a swap fee get one: exact-input trades
    take a percentage of the output, exact-output trades a flat amount.
    """
    if not isinstance(trade, ClassicTrade) or trade.swap_fee is None:
        return {}

    fee = trade.swap_fee
    if trade.trade_type == TradeType.EXACT_INPUT:
        if fee.percent is None:
            raise ValueError("Exact-input swap fee requires a percent")
        return {"fee_options": FeeOptions(fee=fee.percent, recipient=fee.recipient)}

    if fee.amount is None:
        raise ValueError("Exact-output swap fee requires a flat amount")
    return {"flat_fee_options": FlatFeeOptions(amount=int(fee.amount), recipient=fee.recipient)}


def build_execution_options(
    trade: InterfaceTrade,
    allowed_slippage: Decimal,
    permit_signature: Optional[PermitSignature] = None,
) -> ExecutionOptions:
    return ExecutionOptions(
        slippage_tolerance=allowed_slippage,
        permit=permit_signature,
        **get_router_fee_fields(trade),
    )


def select_swap_callback(
    trade: InterfaceTrade,
    allowed_slippage: Decimal,
    fiat_values: FiatValues,
    permit_signature: Optional[PermitSignature],
    classic_executor: ClassicSwapExecutor,
    uniswapx_executor: UniswapXSwapExecutor,
) -> SwapCallback:
    """Bind the trade to the executor for its settlement path.

    The returned callback takes no arguments; nothing runs until it is awaited.
    """
    if isinstance(trade, UniswapXTrade):
        return partial(uniswapx_executor, trade, allowed_slippage, fiat_values)

    options = build_execution_options(trade, allowed_slippage, permit_signature)
    return partial(classic_executor, trade, fiat_values, options)
