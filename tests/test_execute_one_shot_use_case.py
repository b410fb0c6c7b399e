import pytest

from basket_orchestrator.config import NATIVE_SOL_MINT
from basket_orchestrator.core.domain.entities.execution_entity import QuoteRow
from basket_orchestrator.core.domain.enums.execution_enums import RunStatus
from basket_orchestrator.core.services.allocation_service import allocate
from basket_orchestrator.core.usecases.execute_one_shot_use_case import ExecuteOneShotUseCase
from tests.helpers.fakes import FakeLedgerClient, FakeSigner, FakeSwapClient


def _quotes(basket):
    return [
        QuoteRow(allocation=a, quote={"outputMint": a.mint, "inAmount": str(a.smallest_amount)})
        for a in allocate(100.0, basket.items, 6)
    ]


def _use_case(swaps, ledger, assets):
    return ExecuteOneShotUseCase(swap_client=swaps, ledger_client=ledger, asset_repository=assets)


@pytest.mark.asyncio
async def test_all_rows_confirmed_in_order(four_stock_basket, assets):
    swaps, ledger, signer = FakeSwapClient(), FakeLedgerClient(), FakeSigner()
    updates = []

    result = await _use_case(swaps, ledger, assets).execute(_quotes(four_stock_basket), signer, updates.append)

    assert result.status == RunStatus.SUCCEEDED
    assert result.confirmations == ["sig1", "sig2", "sig3", "sig4"]
    assert ledger.confirmed == ["sig1", "sig2", "sig3", "sig4"]
    assert result.progress.completed_count == 4 and result.progress.total_count == 4
    # one signing prompt for the whole batch
    assert len(signer.batches) == 1 and len(signer.batches[0]) == 4
    assert updates[-1] == result


@pytest.mark.asyncio
async def test_progress_is_reported_before_and_after_each_step(four_stock_basket, assets):
    updates = []
    await _use_case(FakeSwapClient(), FakeLedgerClient(), assets).execute(
        _quotes(four_stock_basket), FakeSigner(), updates.append
    )

    steps = [(u.progress.completed_count, u.progress.current_asset) for u in updates if u.status == RunStatus.RUNNING]
    assert steps == [
        (0, None),
        (0, "NVDAx"), (1, "NVDAx"),
        (1, "AAPLx"), (2, "AAPLx"),
        (2, "AMZNx"), (3, "AMZNx"),
        (3, "TSLAx"), (4, "TSLAx"),
    ]


@pytest.mark.asyncio
async def test_failure_on_third_row_keeps_earlier_confirmations(four_stock_basket, assets):
    ledger = FakeLedgerClient(fail_submit_at=2)

    result = await _use_case(FakeSwapClient(), ledger, assets).execute(_quotes(four_stock_basket), FakeSigner())

    assert len(ledger.submitted) == 3          # the 4th row is never submitted
    assert result.confirmations == ["sig1", "sig2"]
    assert result.status == RunStatus.PARTIAL
    assert result.failed_asset == "AMZNx"
    assert result.error == "Execution failed at AMZNx (2 of 4 confirmed): RPC down"


@pytest.mark.asyncio
async def test_failure_on_first_row_is_a_plain_failure(four_stock_basket, assets):
    ledger = FakeLedgerClient(fail_submit_at=0, fail_message="Blockhash not found: block height exceeded")

    result = await _use_case(FakeSwapClient(), ledger, assets).execute(_quotes(four_stock_basket), FakeSigner())

    assert result.status == RunStatus.FAILED
    assert result.confirmations == []
    assert result.error.endswith("Transaction expired. Please try again.")


@pytest.mark.asyncio
async def test_insufficient_funds_message(four_stock_basket, assets):
    ledger = FakeLedgerClient(fail_submit_at=1, fail_message="Attempt to debit: insufficient lamports")

    result = await _use_case(FakeSwapClient(), ledger, assets).execute(_quotes(four_stock_basket), FakeSigner())

    assert result.error == "Execution failed at AAPLx (1 of 4 confirmed): Insufficient balance for this swap."


@pytest.mark.asyncio
async def test_build_failure_submits_nothing(four_stock_basket, assets):
    quotes = _quotes(four_stock_basket)
    ledger, signer = FakeLedgerClient(), FakeSigner()

    result = await _use_case(FakeSwapClient(fail_for={quotes[1].mint}), ledger, assets).execute(quotes, signer)

    assert result.status == RunStatus.FAILED
    assert result.error.startswith("Swap build failed for AAPLx")
    assert signer.batches == []
    assert ledger.submitted == []


@pytest.mark.asyncio
async def test_signing_rejection_submits_nothing(four_stock_basket, assets):
    ledger = FakeLedgerClient()

    result = await _use_case(FakeSwapClient(), ledger, assets).execute(
        _quotes(four_stock_basket), FakeSigner(fail=True)
    )

    assert result.status == RunStatus.FAILED
    assert result.error == "Signing failed: User rejected the request."
    assert ledger.submitted == []


@pytest.mark.asyncio
async def test_requires_quotes_and_batch_signing(four_stock_basket, assets):
    uc = _use_case(FakeSwapClient(), FakeLedgerClient(), assets)

    empty = await uc.execute([], FakeSigner())
    assert empty.error == "Preview quotes first."

    no_batch = await uc.execute(_quotes(four_stock_basket), FakeSigner(can_sign_all=False))
    assert no_batch.error == "Wallet must support signAllTransactions."


@pytest.mark.asyncio
async def test_native_output_is_unwrapped(baskets, assets):
    swaps = FakeSwapClient()
    await _use_case(swaps, FakeLedgerClient(), assets).execute(_quotes(baskets.get("ai-chips")), FakeSigner())

    unwrap = {c["quote"]["outputMint"]: c["unwrap_native"] for c in swaps.calls}
    assert unwrap[NATIVE_SOL_MINT] is True
    assert [v for m, v in unwrap.items() if m != NATIVE_SOL_MINT] == [False, False]
