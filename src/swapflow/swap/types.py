"""Types exchanged between the swap coordinator and its collaborators."""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional, Union

from swapflow.trade.models import (
    ClassicTrade,
    InterfaceTrade,
    OffchainOrderType,
    TradeFillType,
    TradeType,
    UNISWAP_X_FILL_TYPES,
    UniswapXTrade,
)


@dataclass(frozen=True)
class AccountState:
    """Wallet connection as reported by the connector."""

    is_connected: bool
    address: Optional[str] = None
    chain_id: Optional[int] = None


@dataclass(frozen=True)
class FiatValues:
    """USD estimates attached to a swap for analytics."""

    amount_in: Optional[float] = None
    amount_out: Optional[float] = None
    fee_usd: Optional[float] = None


@dataclass(frozen=True)
class PermitSignature:
    """Permit2 signature that lets the router spend tokens without an approval tx."""

    signature: str
    spender: str
    sig_deadline: int
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class FeeOptions:
    """Percentage fee taken from the output of an exact-input trade."""

    fee: Decimal
    recipient: str


@dataclass(frozen=True)
class FlatFeeOptions:
    """Flat fee taken from the output of an exact-output trade."""

    amount: int
    recipient: str


@dataclass(frozen=True)
class ExecutionOptions:
    """Options handed to the classic execution primitive."""

    slippage_tolerance: Decimal
    permit: Optional[PermitSignature] = None
    fee_options: Optional[FeeOptions] = None
    flat_fee_options: Optional[FlatFeeOptions] = None


@dataclass(frozen=True)
class SwapRequest:
    """Input to one swap execution. Never persisted."""

    trade: Optional[InterfaceTrade]
    allowed_slippage: Decimal
    fiat_values: FiatValues = field(default_factory=FiatValues)
    permit_signature: Optional[PermitSignature] = None


# ======================
# Settlement outcomes
# ======================


@dataclass(frozen=True)
class ClassicSwapResponse:
    """Submitted on-chain transaction."""

    hash: str
    from_address: Optional[str] = None
    chain_id: Optional[int] = None
    nonce: Optional[int] = None


@dataclass(frozen=True)
class ClassicSwapResult:
    """Outcome of a classic swap: a transaction awaiting confirmation."""

    response: ClassicSwapResponse
    deadline: Optional[int] = None  # unix seconds

    @property
    def type(self) -> TradeFillType:
        return TradeFillType.CLASSIC


@dataclass(frozen=True)
class UniswapXOrderResponse:
    """Signed off-chain order accepted by the order relay."""

    order_hash: str
    deadline: int  # unix seconds
    encoded_order: str


@dataclass(frozen=True)
class UniswapXSwapResult:
    """Outcome of a UniswapX swap: an order awaiting a filler."""

    type: TradeFillType
    response: UniswapXOrderResponse

    def __post_init__(self):
        if self.type not in UNISWAP_X_FILL_TYPES:
            raise ValueError(f"Invalid UniswapX result type: {self.type}")


SwapResult = Union[ClassicSwapResult, UniswapXSwapResult]


# ======================
# Recorded info
# ======================


@dataclass(frozen=True)
class ExactInputSwapTransactionInfo:
    input_currency_id: str
    output_currency_id: str
    is_uniswapx_order: bool
    input_currency_amount_raw: str
    expected_output_currency_amount_raw: str
    minimum_output_currency_amount_raw: str
    trade_type: TradeType = TradeType.EXACT_INPUT
    type: str = "swap"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["trade_type"] = self.trade_type.value
        return data


@dataclass(frozen=True)
class ExactOutputSwapTransactionInfo:
    input_currency_id: str
    output_currency_id: str
    is_uniswapx_order: bool
    maximum_input_currency_amount_raw: str
    output_currency_amount_raw: str
    expected_input_currency_amount_raw: str
    trade_type: TradeType = TradeType.EXACT_OUTPUT
    type: str = "swap"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["trade_type"] = self.trade_type.value
        return data


TransactionInfo = Union[ExactInputSwapTransactionInfo, ExactOutputSwapTransactionInfo]


@dataclass(frozen=True)
class UniswapXOrderDetails:
    """Off-chain order as handed to the order store."""

    offerer: str
    order_hash: str
    chain_id: int
    expiry: int
    encoded_order: str
    offchain_order_type: OffchainOrderType
    swap_info: TransactionInfo


# ======================
# Collaborator contracts
# ======================

AccountSource = Callable[[], AccountState]
SupportedChainResolver = Callable[[Optional[int]], Optional[int]]
SwapChainSource = Callable[[], Optional[int]]
SwitchChainPrompt = Callable[[int], Awaitable[Optional[int]]]
ClassicSwapExecutor = Callable[
    [ClassicTrade, FiatValues, ExecutionOptions], Awaitable[ClassicSwapResult]
]
UniswapXSwapExecutor = Callable[
    [UniswapXTrade, Decimal, FiatValues], Awaitable[UniswapXSwapResult]
]
SwapCallback = Callable[[], Awaitable[SwapResult]]
TransactionSink = Callable[[ClassicSwapResponse, TransactionInfo, Optional[int]], Awaitable[None]]
OrderSink = Callable[[UniswapXOrderDetails], Awaitable[None]]
