"""JSON-RPC access to supported chains."""

from swapflow.rpc.clients import RpcClientCache
from swapflow.rpc.transport import FallbackTransport, RpcError, default_on_fetch_response

__all__ = [
    "FallbackTransport",
    "RpcClientCache",
    "RpcError",
    "default_on_fetch_response",
]
