"""Trade models for quoted swaps.

A trade is an already-computed quote. It is immutable: pricing and routing
happen upstream, this package only executes and records trades.

Amounts are held as raw integer quotients in the currency's smallest unit
(wei for ETH, 10^-6 for USDC). Slippage is a Decimal percentage, so
Decimal("0.5") means 0.5%.
"""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, localcontext
from enum import Enum
from typing import Optional, Union

# Native token address used for currency ids of native assets
NATIVE_TOKEN = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

MAX_SLIPPAGE_PERCENT = Decimal("100")


class TradeType(str, Enum):
    """Which side of a trade is exact."""

    EXACT_INPUT = "EXACT_INPUT"
    EXACT_OUTPUT = "EXACT_OUTPUT"


class TradeFillType(str, Enum):
    """Settlement path of a trade or swap result."""

    CLASSIC = "classic"            # On-chain transaction through the router
    UNISWAP_X = "uniswap_x"        # Signed off-chain order, filled by a third party
    UNISWAP_X_V2 = "uniswap_x_v2"  # Second generation off-chain order


UNISWAP_X_FILL_TYPES = frozenset({TradeFillType.UNISWAP_X, TradeFillType.UNISWAP_X_V2})


class OffchainOrderType(str, Enum):
    """Kind of off-chain order a UniswapX trade produces."""

    DUTCH_AUCTION = "Dutch"
    DUTCH_V2_AUCTION = "Dutch_V2"
    DUTCH_V3_AUCTION = "Dutch_V3"
    LIMIT_ORDER = "Limit"
    PRIORITY_ORDER = "Priority"


@dataclass(frozen=True)
class Currency:
    """A token or native asset on a specific chain."""

    chain_id: int
    symbol: str
    decimals: int
    address: Optional[str] = None  # None for the chain's native asset

    @property
    def is_native(self) -> bool:
        return self.address is None


def currency_id(currency: Currency) -> str:
    """Stable identifier for a currency: '<chain_id>-<address>'."""
    return f"{currency.chain_id}-{currency.address or NATIVE_TOKEN}"


@dataclass(frozen=True)
class CurrencyAmount:
    """An amount of a currency in raw units."""

    currency: Currency
    quotient: int

    def __post_init__(self):
        if self.quotient < 0:
            raise ValueError(f"Amount cannot be negative: {self.quotient}")

    @classmethod
    def from_decimal(cls, currency: Currency, amount: Decimal) -> "CurrencyAmount":
        """Build an amount from a human-readable value (0.05 ETH)."""
        raw = (Decimal(amount) * (Decimal(10) ** currency.decimals)).to_integral_value(
            rounding=ROUND_DOWN
        )
        return cls(currency=currency, quotient=int(raw))

    def to_decimal(self) -> Decimal:
        return Decimal(self.quotient) / (Decimal(10) ** self.currency.decimals)


def validate_slippage(slippage: Decimal) -> Decimal:
    """Check a slippage percentage is in [0, 100)."""
    slippage = Decimal(slippage)
    if slippage < 0 or slippage >= MAX_SLIPPAGE_PERCENT:
        raise ValueError(f"Slippage must be between 0 and 100 percent, got {slippage}")
    return slippage


def _scale(quotient: int, factor: Decimal) -> int:
    # Raw amounts can reach 78 digits (uint256), beyond Decimal's default precision
    with localcontext() as ctx:
        ctx.prec = 100
        return int((Decimal(quotient) * factor).to_integral_value(rounding=ROUND_DOWN))


@dataclass(frozen=True)
class SwapFee:
    """Interface fee taken from a trade.

    percent is used for exact-input trades, amount (raw units of the output
    currency) for exact-output trades.
    """

    recipient: str
    percent: Optional[Decimal] = None
    amount: Optional[int] = None


@dataclass(frozen=True)
class BaseTrade:
    """Fields shared by every settlement path."""

    trade_type: TradeType
    input_amount: CurrencyAmount
    output_amount: CurrencyAmount

    @property
    def fill_type(self) -> TradeFillType:
        raise NotImplementedError

    def minimum_amount_out(self, slippage: Decimal) -> CurrencyAmount:
        """Smallest output the trade accepts at the given slippage."""
        if self.trade_type == TradeType.EXACT_OUTPUT:
            return self.output_amount
        slippage = validate_slippage(slippage)
        factor = Decimal(1) - slippage / Decimal(100)
        return CurrencyAmount(
            currency=self.output_amount.currency,
            quotient=_scale(self.output_amount.quotient, factor),
        )

    def maximum_amount_in(self, slippage: Decimal) -> CurrencyAmount:
        """Largest input the trade spends at the given slippage."""
        if self.trade_type == TradeType.EXACT_INPUT:
            return self.input_amount
        slippage = validate_slippage(slippage)
        factor = Decimal(1) + slippage / Decimal(100)
        return CurrencyAmount(
            currency=self.input_amount.currency,
            quotient=_scale(self.input_amount.quotient, factor),
        )


@dataclass(frozen=True)
class ClassicTrade(BaseTrade):
    """Trade settled by an on-chain router transaction."""

    swap_fee: Optional[SwapFee] = None

    @property
    def fill_type(self) -> TradeFillType:
        return TradeFillType.CLASSIC


@dataclass(frozen=True)
class UniswapXTrade(BaseTrade):
    """Trade settled by a signed off-chain order."""

    offchain_order_type: OffchainOrderType = OffchainOrderType.DUTCH_AUCTION
    order_fill_type: TradeFillType = TradeFillType.UNISWAP_X
    swap_fee: Optional[SwapFee] = None

    def __post_init__(self):
        if self.order_fill_type not in UNISWAP_X_FILL_TYPES:
            raise ValueError(f"Invalid UniswapX fill type: {self.order_fill_type}")

    @property
    def fill_type(self) -> TradeFillType:
        return self.order_fill_type


InterfaceTrade = Union[ClassicTrade, UniswapXTrade]


def is_classic_trade(trade: Optional[InterfaceTrade]) -> bool:
    return isinstance(trade, ClassicTrade)


def is_uniswapx_trade(trade: Optional[InterfaceTrade]) -> bool:
    return isinstance(trade, UniswapXTrade)
