"""Cache of RPC transports for connected wallets and read-only access.

Entries are keyed by (connector id, chain id). A connector's entries are
dropped explicitly through invalidate() when the wallet reconnects, instead
of living as long as some object happens to reference them.
"""

import logging
from typing import Callable, Optional

from swapflow.chains import ChainInfo, get_chain
from swapflow.rpc.transport import FallbackTransport
from swapflow.swap.types import AccountState

logger = logging.getLogger(__name__)

READ_ONLY = "read-only"

TransportFactory = Callable[[ChainInfo, str], FallbackTransport]


def _default_factory(chain: ChainInfo, connector_id: str) -> FallbackTransport:
    return FallbackTransport(chain)


class RpcClientCache:
    """Hands out one transport per (connector, chain)."""

    def __init__(self, transport_factory: TransportFactory = _default_factory):
        self._factory = transport_factory
        self._transports: dict[tuple[str, int], FallbackTransport] = {}

    def get(self, chain_id: int, connector_id: str = READ_ONLY) -> Optional[FallbackTransport]:
        """Transport for a chain, None if the chain is unsupported."""
        chain = get_chain(chain_id)
        if chain is None:
            return None

        key = (connector_id, chain_id)
        transport = self._transports.get(key)
        if transport is None:
            transport = self._factory(chain, connector_id)
            self._transports[key] = transport
        return transport

    def get_provider(
        self,
        account: AccountState,
        chain_id: int,
        connector_id: Optional[str] = None,
    ) -> Optional[FallbackTransport]:
        """Transport to use for a chain given the wallet's state.

        The connector's transport is only used while the wallet is on the
        requested chain; otherwise reads go through the read-only transport.
        """
        if connector_id is None or account.chain_id != chain_id:
            return self.get(chain_id)
        return self.get(chain_id, connector_id)

    async def invalidate(self, connector_id: str) -> int:
        """Close and drop every transport of a connector. Returns how many were dropped."""
        keys = [key for key in self._transports if key[0] == connector_id]
        for key in keys:
            await self._transports.pop(key).close()
        if keys:
            logger.debug(f"Dropped {len(keys)} cached transports for connector {connector_id}")
        return len(keys)

    async def close(self) -> None:
        for transport in self._transports.values():
            await transport.close()
        self._transports.clear()

    def __len__(self) -> int:
        return len(self._transports)
