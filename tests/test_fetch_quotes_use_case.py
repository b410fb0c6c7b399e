import asyncio

import pytest

from basket_orchestrator.catalog.assets import STOCKS
from basket_orchestrator.config import USDC_MINT
from basket_orchestrator.core.domain.exceptions import QuoteBatchError
from basket_orchestrator.core.services.allocation_service import allocate
from basket_orchestrator.core.usecases.fetch_quotes_use_case import FetchQuotesUseCase
from tests.helpers.fakes import FakeQuoteClient

NVDA, AAPL, AMZN, TSLA = STOCKS[:4]


def _use_case(client, assets):
    return FetchQuotesUseCase(quote_client=client, asset_repository=assets, input_mint=USDC_MINT, slippage_bps=50)


@pytest.mark.asyncio
async def test_quotes_follow_allocation_order(four_stock_basket, assets):
    client = FakeQuoteClient()
    allocations = allocate(100.0, four_stock_basket.items, 6)

    res = await _use_case(client, assets).execute(allocations)

    assert res.error is None
    assert [q.mint for q in res.quotes] == [NVDA.mint, AAPL.mint, AMZN.mint, TSLA.mint]
    assert [q.allocation for q in res.quotes] == allocations
    assert all(c["input_mint"] == USDC_MINT and c["slippage_bps"] == 50 for c in client.calls)
    assert [c["amount"] for c in client.calls] == [25_000_000] * 4


@pytest.mark.asyncio
async def test_one_failure_discards_the_whole_batch(four_stock_basket, assets):
    client = FakeQuoteClient(fail_for={AAPL.mint})

    res = await _use_case(client, assets).execute(allocate(100.0, four_stock_basket.items, 6))

    assert res.quotes == []
    assert res.error == "Quote failed for AAPLx: No route found"
    # every request was issued, nothing was cancelled
    assert len(client.calls) == 4


@pytest.mark.asyncio
async def test_error_names_every_failed_asset(four_stock_basket, assets):
    client = FakeQuoteClient(fail_for={AAPL.mint, TSLA.mint})

    with pytest.raises(QuoteBatchError) as exc_info:
        await _use_case(client, assets).fetch_all(allocate(100.0, four_stock_basket.items, 6))

    assert [symbol for symbol, _ in exc_info.value.failures] == ["AAPLx", "TSLAx"]
    assert "AAPLx" in str(exc_info.value) and "TSLAx" in str(exc_info.value)


@pytest.mark.asyncio
async def test_no_allocations_no_requests(assets):
    client = FakeQuoteClient()
    res = await _use_case(client, assets).execute([])
    assert res.quotes == [] and res.error is None
    assert client.calls == []


@pytest.mark.asyncio
async def test_requests_are_issued_concurrently(four_stock_basket, assets):
    gate = asyncio.Event()
    client = FakeQuoteClient(gate=gate)

    task = asyncio.create_task(_use_case(client, assets).execute(allocate(100.0, four_stock_basket.items, 6)))
    for _ in range(5):
        await asyncio.sleep(0)

    # every request is in flight before any of them answered
    assert len(client.calls) == 4
    assert not task.done()

    gate.set()
    res = await task
    assert len(res.quotes) == 4
