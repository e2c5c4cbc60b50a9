"""Pytest configuration and fixtures."""

import os
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"

from swapflow.ledger.models import Base
from swapflow.ledger.repository import SwapRepository
from swapflow.trade.models import (
    ClassicTrade,
    Currency,
    CurrencyAmount,
    OffchainOrderType,
    TradeType,
    UniswapXTrade,
)
from swapflow.utils.locks import clear_record_locks

WALLET = "0x1111111111111111111111111111111111111111"
FEE_RECIPIENT = "0x2222222222222222222222222222222222222222"

USDC = Currency(
    chain_id=1,
    symbol="USDC",
    decimals=6,
    address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
)
ETH = Currency(chain_id=1, symbol="ETH", decimals=18)


def usdc(amount: str) -> CurrencyAmount:
    return CurrencyAmount.from_decimal(USDC, Decimal(amount))


def eth(amount: str) -> CurrencyAmount:
    return CurrencyAmount.from_decimal(ETH, Decimal(amount))


@pytest.fixture
def exact_input_trade() -> ClassicTrade:
    """100 USDC in for an expected 0.05 ETH out."""
    return ClassicTrade(
        trade_type=TradeType.EXACT_INPUT,
        input_amount=usdc("100"),
        output_amount=eth("0.05"),
    )


@pytest.fixture
def exact_output_trade() -> ClassicTrade:
    """Exactly 0.05 ETH out for an expected 100 USDC in."""
    return ClassicTrade(
        trade_type=TradeType.EXACT_OUTPUT,
        input_amount=usdc("100"),
        output_amount=eth("0.05"),
    )


@pytest.fixture
def uniswapx_trade() -> UniswapXTrade:
    return UniswapXTrade(
        trade_type=TradeType.EXACT_INPUT,
        input_amount=usdc("100"),
        output_amount=eth("0.05"),
        offchain_order_type=OffchainOrderType.DUTCH_V2_AUCTION,
    )


@pytest.fixture(autouse=True)
def reset_record_locks():
    clear_record_locks()
    yield
    clear_record_locks()


@pytest_asyncio.fixture
async def db_engine():
    """Create in-memory database engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def swap_repo(db_session: AsyncSession) -> SwapRepository:
    """Create swap repository for testing."""
    return SwapRepository(db_session)
