import pytest

from basket_orchestrator.config import USDC_MINT
from basket_orchestrator.core.domain.enums.execution_enums import RunStatus
from basket_orchestrator.core.services.allocation_service import allocate
from basket_orchestrator.core.usecases.execute_recurring_use_case import ExecuteRecurringUseCase
from tests.helpers.fakes import FakeRecurringClient, FakeSigner


def _use_case(client, assets):
    return ExecuteRecurringUseCase(recurring_client=client, asset_repository=assets, input_mint=USDC_MINT,
                                   input_decimals=6)


@pytest.mark.asyncio
async def test_one_order_per_asset_with_whole_allocation(baskets, assets):
    client, signer = FakeRecurringClient(), FakeSigner()
    allocations = allocate(300.0, baskets.get("crypto-blue").items, 6)

    result = await _use_case(client, assets).execute(allocations, order_count=4, interval_seconds=86400, signer=signer)

    assert result.status == RunStatus.SUCCEEDED
    assert [p.in_amount for p in client.created] == [120_000_000, 105_000_000, 75_000_000]
    assert all(p.number_of_orders == 4 and p.interval_seconds == 86400 for p in client.created)
    assert all(p.user == signer.address and p.input_mint == USDC_MINT for p in client.created)
    assert result.confirmations == ["conf-req1", "conf-req2", "conf-req3"]
    assert result.messages == [
        "Recurring buy set for BTC (4 orders)",
        "Recurring buy set for ETH (4 orders)",
        "Recurring buy set for SOL (4 orders)",
    ]
    assert len(signer.singles) == 3


@pytest.mark.asyncio
async def test_failure_on_second_asset_stops_the_run(baskets, assets):
    client = FakeRecurringClient(fail_create_at=1)
    updates = []

    result = await _use_case(client, assets).execute(
        allocate(300.0, baskets.get("crypto-blue").items, 6),
        order_count=4, interval_seconds=604800, signer=FakeSigner(), on_update=updates.append,
    )

    assert len(client.created) == 2           # SOL is never attempted
    assert len(client.executed) == 1
    assert result.messages == ["Recurring buy set for BTC (4 orders)"]
    assert result.status == RunStatus.PARTIAL
    assert result.failed_asset == "ETH"
    assert result.error == "Failed to create DCA for ETH: createOrder failed"
    assert updates[-1].error == result.error


@pytest.mark.asyncio
async def test_signing_rejection_on_first_asset(baskets, assets):
    client = FakeRecurringClient()

    result = await _use_case(client, assets).execute(
        allocate(300.0, baskets.get("crypto-blue").items, 6),
        order_count=4, interval_seconds=604800, signer=FakeSigner(fail=True),
    )

    assert result.status == RunStatus.FAILED
    assert client.executed == []
    assert result.error == "Failed to create DCA for BTC: User rejected the request."


@pytest.mark.asyncio
async def test_requires_single_signing(baskets, assets):
    client = FakeRecurringClient()

    result = await _use_case(client, assets).execute(
        allocate(300.0, baskets.get("crypto-blue").items, 6),
        order_count=4, interval_seconds=604800, signer=FakeSigner(can_sign_one=False),
    )

    assert result.error == "Wallet must support signTransaction for DCA."
    assert client.created == []
