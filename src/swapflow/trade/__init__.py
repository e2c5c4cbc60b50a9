"""Quoted trade models and slippage arithmetic."""

from swapflow.trade.models import (
    NATIVE_TOKEN,
    ClassicTrade,
    Currency,
    CurrencyAmount,
    InterfaceTrade,
    OffchainOrderType,
    SwapFee,
    TradeFillType,
    TradeType,
    UniswapXTrade,
    currency_id,
    is_classic_trade,
    is_uniswapx_trade,
    validate_slippage,
)

__all__ = [
    "NATIVE_TOKEN",
    "ClassicTrade",
    "Currency",
    "CurrencyAmount",
    "InterfaceTrade",
    "OffchainOrderType",
    "SwapFee",
    "TradeFillType",
    "TradeType",
    "UniswapXTrade",
    "currency_id",
    "is_classic_trade",
    "is_uniswapx_trade",
    "validate_slippage",
]
