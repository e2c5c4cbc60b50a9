"""Swap execution: network reconciliation, settlement dispatch and recording.

Provides:
- SwapCoordinator: validates, executes and records one swap per call
- ChainReconciler: prompts the wallet to switch networks
- select_swap_callback: binds a trade to its settlement path
"""

from swapflow.swap.coordinator import SwapCoordinator, SwapState, build_swap_info
from swapflow.swap.dispatcher import get_router_fee_fields, select_swap_callback
from swapflow.swap.errors import (
    DuplicateRecordError,
    MissingSwapChainError,
    MissingTradeError,
    PreconditionReason,
    SwapError,
    SwapPreconditionError,
    UnsupportedChainError,
    WalletNotConnectedError,
    WrongNetworkError,
)
from swapflow.swap.reconciler import AlignmentStatus, ChainAlignment, ChainReconciler
from swapflow.swap.types import (
    AccountState,
    ClassicSwapResponse,
    ClassicSwapResult,
    ExecutionOptions,
    FiatValues,
    PermitSignature,
    SwapRequest,
    SwapResult,
    UniswapXOrderDetails,
    UniswapXOrderResponse,
    UniswapXSwapResult,
)

__all__ = [
    # Coordinator
    "SwapCoordinator",
    "SwapState",
    "build_swap_info",
    # Dispatch and reconciliation
    "get_router_fee_fields",
    "select_swap_callback",
    "AlignmentStatus",
    "ChainAlignment",
    "ChainReconciler",
    # Errors
    "DuplicateRecordError",
    "MissingSwapChainError",
    "MissingTradeError",
    "PreconditionReason",
    "SwapError",
    "SwapPreconditionError",
    "UnsupportedChainError",
    "WalletNotConnectedError",
    "WrongNetworkError",
    # Types
    "AccountState",
    "ClassicSwapResponse",
    "ClassicSwapResult",
    "ExecutionOptions",
    "FiatValues",
    "PermitSignature",
    "SwapRequest",
    "SwapResult",
    "UniswapXOrderDetails",
    "UniswapXOrderResponse",
    "UniswapXSwapResult",
]
