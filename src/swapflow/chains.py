"""Chain registry for swap settlement.

Swaps can only be executed on chains listed here. Each chain carries its
platform (EVM or SVM) and its RPC endpoints grouped by priority tier:
- interface: endpoints operated for this app
- default: the chain's canonical endpoint
- public: community endpoints
- fallback: last-resort endpoints
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Execution platform family of a chain."""

    EVM = "evm"
    SVM = "svm"


RPC_TIERS = ("interface", "default", "public", "fallback")


@dataclass(frozen=True)
class ChainInfo:
    """Static metadata for a supported chain."""

    chain_id: int
    name: str
    native_asset: str
    explorer_url: str
    platform: Platform = Platform.EVM
    is_testnet: bool = False
    rpc_urls: dict[str, tuple[str, ...]] = field(default_factory=dict)


# ======================
# Chain Configurations
# ======================

SUPPORTED_CHAINS: dict[int, ChainInfo] = {
    1: ChainInfo(
        chain_id=1,
        name="Ethereum",
        native_asset="ETH",
        explorer_url="https://etherscan.io",
        rpc_urls={
            "default": ("https://eth.llamarpc.com",),
            "public": ("https://ethereum-rpc.publicnode.com", "https://eth.llamarpc.com"),
            "fallback": ("https://rpc.ankr.com/eth",),
        },
    ),
    10: ChainInfo(
        chain_id=10,
        name="Optimism",
        native_asset="ETH",
        explorer_url="https://optimistic.etherscan.io",
        rpc_urls={
            "default": ("https://mainnet.optimism.io",),
            "public": ("https://optimism-rpc.publicnode.com",),
        },
    ),
    56: ChainInfo(
        chain_id=56,
        name="BNB Smart Chain",
        native_asset="BNB",
        explorer_url="https://bscscan.com",
        rpc_urls={
            "default": ("https://bsc-dataseed.binance.org",),
            "public": ("https://bsc-rpc.publicnode.com",),
        },
    ),
    137: ChainInfo(
        chain_id=137,
        name="Polygon",
        native_asset="POL",
        explorer_url="https://polygonscan.com",
        rpc_urls={
            "default": ("https://polygon-rpc.com",),
            "public": ("https://polygon-bor-rpc.publicnode.com",),
        },
    ),
    8453: ChainInfo(
        chain_id=8453,
        name="Base",
        native_asset="ETH",
        explorer_url="https://basescan.org",
        rpc_urls={
            "default": ("https://mainnet.base.org",),
            "public": ("https://base-rpc.publicnode.com",),
        },
    ),
    42161: ChainInfo(
        chain_id=42161,
        name="Arbitrum One",
        native_asset="ETH",
        explorer_url="https://arbiscan.io",
        rpc_urls={
            "default": ("https://arb1.arbitrum.io/rpc",),
            "public": ("https://arbitrum-one-rpc.publicnode.com",),
        },
    ),
    43114: ChainInfo(
        chain_id=43114,
        name="Avalanche C-Chain",
        native_asset="AVAX",
        explorer_url="https://snowtrace.io",
        rpc_urls={
            "default": ("https://api.avax.network/ext/bc/C/rpc",),
        },
    ),
    130: ChainInfo(
        chain_id=130,
        name="Unichain",
        native_asset="ETH",
        explorer_url="https://uniscan.xyz",
        rpc_urls={
            "default": ("https://mainnet.unichain.org",),
        },
    ),
    11155111: ChainInfo(
        chain_id=11155111,
        name="Sepolia",
        native_asset="ETH",
        explorer_url="https://sepolia.etherscan.io",
        is_testnet=True,
        rpc_urls={
            "default": ("https://rpc.sepolia.org",),
            "public": ("https://ethereum-sepolia-rpc.publicnode.com",),
        },
    ),
    1301: ChainInfo(
        chain_id=1301,
        name="Unichain Sepolia",
        native_asset="ETH",
        explorer_url="https://sepolia.uniscan.xyz",
        is_testnet=True,
        rpc_urls={
            "default": ("https://sepolia.unichain.org",),
        },
    ),
    # Listed so wallets connected to it resolve, but swaps cannot settle there
    501000101: ChainInfo(
        chain_id=501000101,
        name="Solana",
        native_asset="SOL",
        explorer_url="https://solscan.io",
        platform=Platform.SVM,
        rpc_urls={
            "default": ("https://api.mainnet-beta.solana.com",),
        },
    ),
}


def get_chain(chain_id: int) -> Optional[ChainInfo]:
    """Get metadata for a chain, or None if unsupported."""
    return SUPPORTED_CHAINS.get(chain_id)


def to_supported_chain_id(chain_id: Optional[int]) -> Optional[int]:
    """Map a wallet-reported chain id to a supported chain id.

    Returns None when the wallet is on a chain this app does not support.
    """
    if chain_id is None:
        return None
    return chain_id if chain_id in SUPPORTED_CHAINS else None


def is_evm_chain(chain_id: Optional[int]) -> bool:
    """Check if a chain is a supported EVM chain."""
    chain = SUPPORTED_CHAINS.get(chain_id) if chain_id is not None else None
    return chain is not None and chain.platform == Platform.EVM


def is_testnet_chain(chain_id: int) -> bool:
    """Check if a chain is a testnet."""
    chain = SUPPORTED_CHAINS.get(chain_id)
    return bool(chain and chain.is_testnet)


def evm_chain_ids() -> list[int]:
    """Supported EVM chain ids, mainnets first."""
    chains = [c for c in SUPPORTED_CHAINS.values() if c.platform == Platform.EVM]
    chains.sort(key=lambda c: c.is_testnet)
    return [c.chain_id for c in chains]


def ordered_transport_urls(chain: ChainInfo) -> list[str]:
    """Collect a chain's RPC URLs by tier priority, dropping empties and duplicates."""
    urls: list[str] = []
    for tier in RPC_TIERS:
        for url in chain.rpc_urls.get(tier, ()):
            if url and url not in urls:
                urls.append(url)
    return urls
