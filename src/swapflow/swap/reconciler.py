"""Align the wallet's active network with the chain a swap settles on."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from swapflow.chains import is_evm_chain
from swapflow.swap.types import SwitchChainPrompt

logger = logging.getLogger(__name__)


class AlignmentStatus(str, Enum):
    ALIGNED = "aligned"
    SWITCH_REJECTED = "switch_rejected"
    UNSUPPORTED_CHAIN_FAMILY = "unsupported_chain_family"


@dataclass(frozen=True)
class ChainAlignment:
    """Result of a reconciliation attempt."""

    status: AlignmentStatus
    chain_id: Optional[int] = None

    @property
    def aligned(self) -> bool:
        return self.status == AlignmentStatus.ALIGNED


class ChainReconciler:
    """Prompts the wallet to switch networks when it is on the wrong chain.

    At most one switch prompt is issued per call. A rejected or failed
    prompt is reported as SWITCH_REJECTED, never retried.
    """

    def __init__(self, switch_chain: SwitchChainPrompt):
        self._switch_chain = switch_chain

    async def reconcile(
        self,
        required_chain_id: int,
        connected_chain_id: Optional[int],
    ) -> ChainAlignment:
        if not is_evm_chain(required_chain_id):
            logger.warning(f"Refusing to switch to non-EVM chain {required_chain_id}")
            return ChainAlignment(AlignmentStatus.UNSUPPORTED_CHAIN_FAMILY)

        if connected_chain_id == required_chain_id:
            return ChainAlignment(AlignmentStatus.ALIGNED, required_chain_id)

        logger.info(f"Prompting wallet to switch from chain {connected_chain_id} to {required_chain_id}")
        try:
            switched_to = await self._switch_chain(required_chain_id)
        except Exception as e:
            # Wallets report user rejection and closed prompts as errors
            logger.info(f"Chain switch to {required_chain_id} failed: {e}")
            return ChainAlignment(AlignmentStatus.SWITCH_REJECTED, connected_chain_id)

        if switched_to != required_chain_id:
            logger.info(f"Chain switch to {required_chain_id} declined (wallet on {switched_to})")
            return ChainAlignment(AlignmentStatus.SWITCH_REJECTED, connected_chain_id)

        return ChainAlignment(AlignmentStatus.ALIGNED, required_chain_id)
