"""swapflow - executes quoted swaps as classic transactions or UniswapX orders."""

__version__ = "0.1.0"
