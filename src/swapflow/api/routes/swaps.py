"""Read-only endpoints for recorded swaps."""

from fastapi import APIRouter, HTTPException

from swapflow.api.contracts import (
    SwapOrderResponse,
    SwapStatusRequest,
    SwapStatusResponse,
    SwapTransactionResponse,
)
from swapflow.ledger.database import get_db
from swapflow.ledger.models import TransactionStatus
from swapflow.ledger.recorder import OutcomeRecorder
from swapflow.ledger.repository import SwapRepository
from swapflow.trade.models import TradeFillType

router = APIRouter(prefix="/swaps", tags=["swaps"])

_recorder = OutcomeRecorder()


@router.post("/status", response_model=SwapStatusResponse)
async def get_swap_status(request: SwapStatusRequest) -> SwapStatusResponse:
    """Confirmation status of a swap result.

    Only classic swaps have a status here; UniswapX orders are tracked by
    the order relay and always report null.
    """
    if request.type != TradeFillType.CLASSIC:
        return SwapStatusResponse(type=request.type)

    status = await _recorder.get_transaction_status(request.hash)
    return SwapStatusResponse(type=request.type, status=status)


@router.get("/transactions/{tx_hash}", response_model=SwapTransactionResponse)
async def get_transaction(tx_hash: str) -> SwapTransactionResponse:
    async with get_db() as session:
        tx = await SwapRepository(session).get_transaction(tx_hash)
    if tx is None:
        raise HTTPException(status_code=404, detail=f"Transaction {tx_hash} not found")

    return SwapTransactionResponse(
        hash=tx.hash,
        chain_id=tx.chain_id,
        from_address=tx.from_address,
        status=TransactionStatus(tx.status),
        deadline=tx.deadline,
        swap_info=tx.swap_info,
        added_at=tx.added_at,
        confirmed_at=tx.confirmed_at,
    )


@router.get("/orders/{order_hash}", response_model=SwapOrderResponse)
async def get_order(order_hash: str) -> SwapOrderResponse:
    async with get_db() as session:
        order = await SwapRepository(session).get_order(order_hash)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_hash} not found")

    return SwapOrderResponse(
        order_hash=order.order_hash,
        offerer=order.offerer,
        chain_id=order.chain_id,
        expiry=order.expiry,
        encoded_order=order.encoded_order,
        offchain_order_type=order.offchain_order_type,
        status=order.status,
        swap_info=order.swap_info,
        added_at=order.added_at,
    )
