"""JSON-RPC transport with ordered endpoint fallback.

Requests go to the first URL of the chain's ordered endpoint list. Transport
errors and non-200 responses move on to the next URL; a JSON-RPC error
returned by a healthy node does not, since another node would give the same
answer.
"""

import itertools
import logging
from typing import Any, Callable, Optional

import httpx

from swapflow.chains import ChainInfo, is_testnet_chain, ordered_transport_urls
from swapflow.config import get_settings

logger = logging.getLogger(__name__)

FetchResponseHook = Callable[[httpx.Response, ChainInfo, str], None]


class RpcError(Exception):
    """Raised when no endpoint could answer or the node returned an error."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


def default_on_fetch_response(response: httpx.Response, chain: ChainInfo, url: str) -> None:
    """Log non-200 RPC responses; testnet hiccups are only warnings."""
    if response.status_code == 200:
        return

    message = f"RPC provider returned non-200 status: {response.status_code}"
    if is_testnet_chain(chain.chain_id):
        logger.warning(f"{message} (chain {chain.chain_id}, {url})")
    else:
        logger.error(f"{message} (chain {chain.chain_id}, {url})")


class FallbackTransport:
    """Sends JSON-RPC requests to a chain, trying its endpoints in order."""

    def __init__(
        self,
        chain: ChainInfo,
        client: Optional[httpx.AsyncClient] = None,
        on_fetch_response: FetchResponseHook = default_on_fetch_response,
        timeout: Optional[float] = None,
    ):
        self.chain = chain
        self.urls = ordered_transport_urls(chain)
        if not self.urls:
            raise ValueError(f"No RPC URLs configured for chain {chain.chain_id}")
        self.on_fetch_response = on_fetch_response
        self._timeout = timeout if timeout is not None else get_settings().rpc_timeout_seconds
        self._client = client
        self._owns_client = client is None
        self._ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """Send one JSON-RPC request and return its result."""
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        client = await self._get_client()
        last_error: Optional[Exception] = None

        for url in self.urls:
            try:
                response = await client.post(url, json=payload)
            except httpx.HTTPError as e:
                logger.debug(f"RPC {method} to {url} failed: {e}")
                last_error = e
                continue

            self.on_fetch_response(response, self.chain, url)
            if response.status_code != 200:
                last_error = RpcError(f"{url} returned {response.status_code}")
                continue

            data = response.json()
            if data.get("error"):
                error = data["error"]
                raise RpcError(error.get("message", "RPC error"), code=error.get("code"))
            return data.get("result")

        raise RpcError(
            f"All {len(self.urls)} RPC endpoints failed for {method} "
            f"on chain {self.chain.chain_id}: {last_error}"
        )

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        """Receipt for a mined transaction, None while it is pending."""
        return await self.request("eth_getTransactionReceipt", [tx_hash])

    async def get_block_number(self) -> int:
        return int(await self.request("eth_blockNumber"), 16)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
