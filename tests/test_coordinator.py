"""Tests for the swap coordinator."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import FEE_RECIPIENT, WALLET, eth, usdc
from swapflow.ledger.models import TransactionStatus
from swapflow.ledger.recorder import OutcomeRecorder
from swapflow.ledger.repository import SwapRepository
from swapflow.swap.coordinator import SwapCoordinator, build_swap_info
from swapflow.swap.dry_run import DryRunClassicExecutor, DryRunUniswapXExecutor, DryRunWallet
from swapflow.swap.errors import (
    MissingSwapChainError,
    MissingTradeError,
    PreconditionReason,
    SwapPreconditionError,
    UnsupportedChainError,
    WalletNotConnectedError,
    WrongNetworkError,
)
from swapflow.swap.reconciler import ChainReconciler
from swapflow.swap.types import (
    AccountState,
    ClassicSwapResponse,
    ClassicSwapResult,
    ExactInputSwapTransactionInfo,
    ExactOutputSwapTransactionInfo,
    FeeOptions,
    FiatValues,
    SwapRequest,
    UniswapXOrderDetails,
    UniswapXOrderResponse,
    UniswapXSwapResult,
)
from swapflow.trade.models import (
    ClassicTrade,
    OffchainOrderType,
    SwapFee,
    TradeFillType,
    TradeType,
)

SLIPPAGE = Decimal("0.5")
TX_HASH = "0x" + "ab" * 32
ORDER_HASH = "0x" + "cd" * 32
SOLANA = 501000101

CLASSIC_RESULT = ClassicSwapResult(
    response=ClassicSwapResponse(hash=TX_HASH, from_address=WALLET, chain_id=1),
    deadline=1_900_000_000,
)
ORDER_RESULT = UniswapXSwapResult(
    type=TradeFillType.UNISWAP_X,
    response=UniswapXOrderResponse(
        order_hash=ORDER_HASH,
        deadline=1_900_000_060,
        encoded_order="0xdeadbeef",
    ),
)


class Harness:
    """Coordinator wired to mock collaborators."""

    def __init__(
        self,
        account: AccountState = AccountState(is_connected=True, address=WALLET, chain_id=1),
        swap_chain_id=1,
        switch_result=None,
    ):
        self.account = account
        self.prompt = AsyncMock(return_value=switch_result)
        self.classic_executor = AsyncMock(return_value=CLASSIC_RESULT)
        self.uniswapx_executor = AsyncMock(return_value=ORDER_RESULT)
        self.add_transaction = AsyncMock()
        self.add_order = AsyncMock()
        self.get_transaction_status = AsyncMock(return_value=TransactionStatus.PENDING)
        self.on_recording_error = MagicMock()
        self.coordinator = SwapCoordinator(
            account_source=lambda: self.account,
            swap_chain_source=lambda: swap_chain_id,
            reconciler=ChainReconciler(self.prompt),
            classic_executor=self.classic_executor,
            uniswapx_executor=self.uniswapx_executor,
            add_transaction=self.add_transaction,
            add_order=self.add_order,
            get_transaction_status=self.get_transaction_status,
            on_recording_error=self.on_recording_error,
        )

    def assert_nothing_executed(self):
        self.classic_executor.assert_not_called()
        self.uniswapx_executor.assert_not_called()
        self.add_transaction.assert_not_called()
        self.add_order.assert_not_called()


class TestPreconditions:
    """Tests for fail-fast validation."""

    @pytest.mark.asyncio
    async def test_missing_trade(self):
        harness = Harness(account=AccountState(is_connected=False))

        with pytest.raises(MissingTradeError, match="missing trade"):
            await harness.coordinator.execute_swap(SwapRequest(trade=None, allowed_slippage=SLIPPAGE))
        harness.assert_nothing_executed()

    @pytest.mark.asyncio
    async def test_missing_trade_checked_before_account(self):
        harness = Harness()
        account_source = MagicMock(return_value=harness.account)
        harness.coordinator.account_source = account_source

        with pytest.raises(MissingTradeError):
            await harness.coordinator.execute_swap(SwapRequest(trade=None, allowed_slippage=SLIPPAGE))
        account_source.assert_not_called()

    @pytest.mark.asyncio
    async def test_wallet_not_connected(self, exact_input_trade):
        harness = Harness(account=AccountState(is_connected=False), swap_chain_id=None)

        with pytest.raises(WalletNotConnectedError, match="wallet must be connected to swap"):
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))
        harness.assert_nothing_executed()

    @pytest.mark.asyncio
    async def test_connected_without_address(self, exact_input_trade):
        harness = Harness(account=AccountState(is_connected=True, address=None, chain_id=1))

        with pytest.raises(WalletNotConnectedError):
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

    @pytest.mark.asyncio
    async def test_missing_swap_chain(self, exact_input_trade):
        harness = Harness(swap_chain_id=None)

        with pytest.raises(MissingSwapChainError, match="missing swap chainId"):
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))
        harness.assert_nothing_executed()

    @pytest.mark.asyncio
    async def test_non_evm_swap_chain(self, exact_input_trade):
        harness = Harness(swap_chain_id=SOLANA)

        with pytest.raises(UnsupportedChainError) as exc_info:
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        assert exc_info.value.reason == PreconditionReason.UNSUPPORTED_CHAIN_FAMILY
        harness.prompt.assert_not_called()
        harness.assert_nothing_executed()

    @pytest.mark.asyncio
    async def test_precondition_errors_share_base(self, exact_input_trade):
        harness = Harness(swap_chain_id=None)

        with pytest.raises(SwapPreconditionError):
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))


class TestNetworkReconciliation:
    """Tests for wallet network switching."""

    @pytest.mark.asyncio
    async def test_matching_chain_skips_prompt(self, exact_input_trade):
        harness = Harness()

        await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        harness.prompt.assert_not_called()
        harness.classic_executor.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_switch_accepted_then_executes(self, exact_input_trade):
        harness = Harness(swap_chain_id=137, switch_result=137)

        await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        harness.prompt.assert_awaited_once_with(137)
        harness.classic_executor.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_switch_declined(self, exact_input_trade):
        """Wallet on chain 1, swap on chain 137, user declines the switch."""
        harness = Harness(swap_chain_id=137, switch_result=None)

        with pytest.raises(WrongNetworkError) as exc_info:
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        assert str(exc_info.value) == "wallet must be connected to correct chain to swap"
        assert exc_info.value.required_chain_id == 137
        assert exc_info.value.connected_chain_id == 1
        harness.prompt.assert_awaited_once_with(137)
        harness.assert_nothing_executed()

    @pytest.mark.asyncio
    async def test_unsupported_wallet_chain_prompts(self, exact_input_trade):
        """Test a wallet on an unknown chain is asked to switch."""
        harness = Harness(
            account=AccountState(is_connected=True, address=WALLET, chain_id=999999),
            switch_result=1,
        )

        await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        harness.prompt.assert_awaited_once_with(1)


class TestClassicSwaps:
    """Tests for classic settlement and recording."""

    @pytest.mark.asyncio
    async def test_records_exact_input_transaction(self, exact_input_trade):
        """100 USDC for 0.05 ETH at 0.5% records a 0.04975 ETH minimum."""
        harness = Harness()

        result = await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        assert result is CLASSIC_RESULT
        harness.add_order.assert_not_called()
        response, info, deadline = harness.add_transaction.call_args.args
        assert response.hash == TX_HASH
        assert deadline == 1_900_000_000
        assert isinstance(info, ExactInputSwapTransactionInfo)
        assert info.input_currency_amount_raw == "100000000"
        assert info.expected_output_currency_amount_raw == "50000000000000000"
        assert info.minimum_output_currency_amount_raw == "49750000000000000"
        assert info.is_uniswapx_order is False

    @pytest.mark.asyncio
    async def test_records_exact_output_transaction(self, exact_output_trade):
        harness = Harness()

        await harness.coordinator.execute_swap(SwapRequest(exact_output_trade, Decimal("1")))

        info = harness.add_transaction.call_args.args[1]
        assert isinstance(info, ExactOutputSwapTransactionInfo)
        assert info.maximum_input_currency_amount_raw == "101000000"
        assert info.output_currency_amount_raw == "50000000000000000"
        assert info.expected_input_currency_amount_raw == "100000000"

    @pytest.mark.asyncio
    async def test_percent_fee_passed_to_router(self):
        trade = ClassicTrade(
            trade_type=TradeType.EXACT_INPUT,
            input_amount=usdc("100"),
            output_amount=eth("0.05"),
            swap_fee=SwapFee(recipient=FEE_RECIPIENT, percent=Decimal("0.25")),
        )
        harness = Harness()
        fiat = FiatValues(amount_in=100.0, amount_out=99.0, fee_usd=0.25)

        await harness.coordinator.execute_swap(SwapRequest(trade, SLIPPAGE, fiat_values=fiat))

        called_trade, called_fiat, options = harness.classic_executor.call_args.args
        assert called_trade is trade
        assert called_fiat == fiat
        assert options.slippage_tolerance == SLIPPAGE
        assert options.fee_options == FeeOptions(fee=Decimal("0.25"), recipient=FEE_RECIPIENT)
        assert options.flat_fee_options is None

    @pytest.mark.asyncio
    async def test_execution_error_passes_through(self, exact_input_trade):
        harness = Harness()
        error = RuntimeError("execution reverted")
        harness.classic_executor.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        assert exc_info.value is error
        harness.add_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_recording_failure_still_returns_result(self, exact_input_trade):
        harness = Harness()
        error = RuntimeError("database is locked")
        harness.add_transaction.side_effect = error

        result = await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        assert result is CLASSIC_RESULT
        harness.on_recording_error.assert_called_once_with(CLASSIC_RESULT, error)


class TestUniswapXSwaps:
    """Tests for off-chain order settlement and recording."""

    @pytest.mark.asyncio
    async def test_records_order(self, uniswapx_trade):
        harness = Harness(swap_chain_id=137, switch_result=137)

        result = await harness.coordinator.execute_swap(SwapRequest(uniswapx_trade, SLIPPAGE))

        assert result is ORDER_RESULT
        harness.add_transaction.assert_not_called()
        harness.classic_executor.assert_not_called()
        order = harness.add_order.call_args.args[0]
        assert isinstance(order, UniswapXOrderDetails)
        assert order.offerer == WALLET
        assert order.order_hash == ORDER_HASH
        assert order.chain_id == 137
        assert order.expiry == 1_900_000_060
        assert order.encoded_order == "0xdeadbeef"
        assert order.offchain_order_type == OffchainOrderType.DUTCH_V2_AUCTION
        assert order.swap_info.is_uniswapx_order is True

    @pytest.mark.asyncio
    async def test_v2_orders_go_to_order_sink(self, uniswapx_trade):
        harness = Harness()
        v2_result = UniswapXSwapResult(type=TradeFillType.UNISWAP_X_V2, response=ORDER_RESULT.response)
        harness.uniswapx_executor.return_value = v2_result

        result = await harness.coordinator.execute_swap(SwapRequest(uniswapx_trade, SLIPPAGE))

        assert result is v2_result
        harness.add_order.assert_awaited_once()
        harness.add_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_order_result_for_classic_trade_defaults_to_dutch(self, exact_input_trade):
        harness = Harness()
        harness.classic_executor.return_value = ORDER_RESULT

        await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        order = harness.add_order.call_args.args[0]
        assert order.offchain_order_type == OffchainOrderType.DUTCH_AUCTION

    @pytest.mark.asyncio
    async def test_unknown_result_type_rejected(self, exact_input_trade):
        harness = Harness()
        harness.classic_executor.return_value = {"hash": TX_HASH}

        with pytest.raises(TypeError, match="Unhandled swap result"):
            await harness.coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))
        harness.add_transaction.assert_not_called()
        harness.add_order.assert_not_called()


class TestSwapStatus:
    """Tests for status lookup."""

    @pytest.mark.asyncio
    async def test_classic_status(self):
        harness = Harness()

        status = await harness.coordinator.get_swap_status(CLASSIC_RESULT)

        assert status == TransactionStatus.PENDING
        harness.get_transaction_status.assert_awaited_once_with(TX_HASH)

    @pytest.mark.asyncio
    async def test_order_status_is_none(self):
        harness = Harness()

        assert await harness.coordinator.get_swap_status(ORDER_RESULT) is None
        harness.get_transaction_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_result(self):
        assert await Harness().coordinator.get_swap_status(None) is None


class TestSwapInfo:
    """Tests for the recorded swap info."""

    def test_zero_slippage_minimum_is_exact(self, exact_input_trade):
        info = build_swap_info(exact_input_trade, CLASSIC_RESULT, Decimal("0"))
        assert info.minimum_output_currency_amount_raw == info.expected_output_currency_amount_raw

    def test_to_dict(self, exact_output_trade):
        data = build_swap_info(exact_output_trade, ORDER_RESULT, SLIPPAGE).to_dict()

        assert data["type"] == "swap"
        assert data["trade_type"] == "EXACT_OUTPUT"
        assert data["is_uniswapx_order"] is True


class TestEndToEnd:
    """Dry-run wallet and executors recording into the database."""

    def build(self, session_factory, wallet: DryRunWallet, swap_chain_id: int):
        recorder = OutcomeRecorder(session_factory)
        return SwapCoordinator(
            account_source=wallet.account,
            swap_chain_source=lambda: swap_chain_id,
            reconciler=ChainReconciler(wallet.switch_chain),
            classic_executor=DryRunClassicExecutor(wallet),
            uniswapx_executor=DryRunUniswapXExecutor(wallet),
            add_transaction=recorder.add_transaction,
            add_order=recorder.add_order,
            get_transaction_status=recorder.get_transaction_status,
        )

    @pytest.mark.asyncio
    async def test_classic_swap_is_recorded(self, session_factory, exact_input_trade):
        wallet = DryRunWallet(address=WALLET, chain_id=1)
        coordinator = self.build(session_factory, wallet, swap_chain_id=8453)

        result = await coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        assert wallet.switch_requests == [8453]
        assert await coordinator.get_swap_status(result) == TransactionStatus.PENDING
        async with session_factory() as session:
            tx = await SwapRepository(session).get_transaction(result.response.hash)
        assert tx.chain_id == 8453
        assert tx.swap_info["minimum_output_currency_amount_raw"] == "49750000000000000"

    @pytest.mark.asyncio
    async def test_uniswapx_swap_is_recorded(self, session_factory, uniswapx_trade):
        wallet = DryRunWallet(address=WALLET, chain_id=1)
        coordinator = self.build(session_factory, wallet, swap_chain_id=1)

        result = await coordinator.execute_swap(SwapRequest(uniswapx_trade, SLIPPAGE))

        assert await coordinator.get_swap_status(result) is None
        async with session_factory() as session:
            repo = SwapRepository(session)
            order = await repo.get_order(result.response.order_hash)
            tx = await repo.get_transaction(result.response.order_hash)
        assert order.offerer == WALLET
        assert order.offchain_order_type == "Dutch_V2"
        assert tx is None

    @pytest.mark.asyncio
    async def test_declined_switch_records_nothing(self, session_factory, exact_input_trade):
        wallet = DryRunWallet(address=WALLET, chain_id=1, accept_switch=False)
        coordinator = self.build(session_factory, wallet, swap_chain_id=137)

        with pytest.raises(WrongNetworkError):
            await coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE))

        async with session_factory() as session:
            assert await SwapRepository(session).get_pending_transactions() == []

    @pytest.mark.asyncio
    async def test_concurrent_swaps_are_independent(self, exact_input_trade, uniswapx_trade):
        wallet = DryRunWallet(address=WALLET, chain_id=1)
        add_transaction = AsyncMock()
        add_order = AsyncMock()
        coordinator = SwapCoordinator(
            account_source=wallet.account,
            swap_chain_source=lambda: 1,
            reconciler=ChainReconciler(wallet.switch_chain),
            classic_executor=DryRunClassicExecutor(wallet),
            uniswapx_executor=DryRunUniswapXExecutor(wallet),
            add_transaction=add_transaction,
            add_order=add_order,
        )

        classic, order = await asyncio.gather(
            coordinator.execute_swap(SwapRequest(exact_input_trade, SLIPPAGE)),
            coordinator.execute_swap(SwapRequest(uniswapx_trade, SLIPPAGE)),
        )

        assert isinstance(classic, ClassicSwapResult)
        assert isinstance(order, UniswapXSwapResult)
        assert add_transaction.call_args.args[0].hash == classic.response.hash
        assert add_order.call_args.args[0].order_hash == order.response.order_hash
