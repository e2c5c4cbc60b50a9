"""Swap errors.

Precondition errors are raised before anything is sent to the wallet and map
to a user action (connect wallet, switch network). Errors raised by the
execution primitives are not wrapped and reach the caller as-is.
"""

from enum import Enum


class PreconditionReason(str, Enum):
    """Why a swap was refused before execution."""

    MISSING_TRADE = "missing trade"
    WALLET_NOT_CONNECTED = "wallet must be connected to swap"
    MISSING_SWAP_CHAIN = "missing swap chainId"
    UNSUPPORTED_CHAIN_FAMILY = "non EVM chain in legacy limits flow"
    WRONG_NETWORK = "wallet must be connected to correct chain to swap"


class SwapError(Exception):
    """Base class for errors raised by this package."""

    pass


class SwapPreconditionError(SwapError):
    """A swap precondition failed; nothing was executed."""

    reason: PreconditionReason

    def __init__(self, reason: PreconditionReason):
        super().__init__(reason.value)
        self.reason = reason


class MissingTradeError(SwapPreconditionError):
    def __init__(self):
        super().__init__(PreconditionReason.MISSING_TRADE)


class WalletNotConnectedError(SwapPreconditionError):
    def __init__(self):
        super().__init__(PreconditionReason.WALLET_NOT_CONNECTED)


class MissingSwapChainError(SwapPreconditionError):
    def __init__(self):
        super().__init__(PreconditionReason.MISSING_SWAP_CHAIN)


class UnsupportedChainError(SwapPreconditionError):
    def __init__(self, chain_id: int):
        super().__init__(PreconditionReason.UNSUPPORTED_CHAIN_FAMILY)
        self.chain_id = chain_id


class WrongNetworkError(SwapPreconditionError):
    def __init__(self, required_chain_id: int, connected_chain_id=None):
        super().__init__(PreconditionReason.WRONG_NETWORK)
        self.required_chain_id = required_chain_id
        self.connected_chain_id = connected_chain_id


class DuplicateRecordError(SwapError):
    """A transaction or order with this key was already recorded."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} {key} already recorded")
        self.kind = kind
        self.key = key
