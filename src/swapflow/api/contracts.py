"""Request and response contracts for the swap API."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from swapflow.ledger.models import TransactionStatus
from swapflow.trade.models import TradeFillType


class SwapStatusRequest(BaseModel):
    """Identifies a swap result by its settlement path and key."""

    type: TradeFillType = Field(..., description="Settlement path of the swap result")
    hash: Optional[str] = Field(None, description="Transaction hash (classic swaps)")
    order_hash: Optional[str] = Field(None, description="Order hash (UniswapX swaps)")

    @model_validator(mode="after")
    def check_key(self) -> "SwapStatusRequest":
        if self.type == TradeFillType.CLASSIC and not self.hash:
            raise ValueError("hash is required for classic swaps")
        if self.type != TradeFillType.CLASSIC and not self.order_hash:
            raise ValueError("order_hash is required for UniswapX swaps")
        return self


class SwapStatusResponse(BaseModel):
    """Confirmation status; None for UniswapX orders and unknown hashes."""

    type: TradeFillType
    status: Optional[TransactionStatus] = None


class SwapTransactionResponse(BaseModel):
    """A recorded classic swap."""

    hash: str
    chain_id: Optional[int] = None
    from_address: Optional[str] = None
    status: TransactionStatus
    deadline: Optional[int] = None
    swap_info: dict[str, Any] = Field(default_factory=dict)
    added_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None


class SwapOrderResponse(BaseModel):
    """A recorded UniswapX order."""

    order_hash: str
    offerer: str
    chain_id: int
    expiry: int
    encoded_order: str
    offchain_order_type: str
    status: str
    swap_info: dict[str, Any] = Field(default_factory=dict)
    added_at: Optional[datetime] = None
