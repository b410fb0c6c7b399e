import asyncio
import dataclasses

import pytest

from basket_orchestrator.workers.execution_supervisor import ExecutionSupervisor
from tests.helpers.fakes import (
    FakeLedgerClient,
    FakePriceFeed,
    FakeQuoteClient,
    FakeRecurringClient,
    FakeSigner,
    FakeSwapClient,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_supervisor(settings, clock):
    async def _make(quote_client=None, **overrides):
        supervisor = ExecutionSupervisor(
            settings=dataclasses.replace(settings, **overrides),
            quote_client=quote_client or FakeQuoteClient(),
            swap_client=FakeSwapClient(),
            ledger_client=FakeLedgerClient(),
            recurring_client=FakeRecurringClient(),
            price_feed=FakePriceFeed(),
            signer=FakeSigner(),
            clock=clock,
        )
        await supervisor.start()
        return supervisor
    return _make


@pytest.mark.asyncio
async def test_idle_sessions_expire(make_supervisor, clock):
    sup = await make_supervisor(SESSION_IDLE_TTL_SEC=60)
    old = sup.open_session("mag7", amount=100)

    clock.now = 30
    kept = sup.open_session("mag7", amount=100)

    clock.now = 61
    sup.open_session("mag7", amount=100)

    assert sup.get_session(old.id) is None
    assert sup.get_session(kept.id) is kept


@pytest.mark.asyncio
async def test_reading_a_session_keeps_it_alive(make_supervisor, clock):
    sup = await make_supervisor(SESSION_IDLE_TTL_SEC=60)
    session = sup.open_session("mag7", amount=100)

    clock.now = 50
    assert sup.get_session(session.id) is session

    clock.now = 100
    assert sup.evict_idle_sessions() == []
    assert sup.get_session(session.id) is session


@pytest.mark.asyncio
async def test_registry_is_capped_least_recently_used_first(make_supervisor, clock):
    sup = await make_supervisor(MAX_SESSIONS=2)
    first = sup.open_session("mag7")
    clock.now = 1
    second = sup.open_session("mag7")
    clock.now = 2
    sup.get_session(first.id)

    clock.now = 3
    third = sup.open_session("mag7")

    assert sup.get_session(second.id) is None
    assert sup.get_session(first.id) is first
    assert sup.get_session(third.id) is third


@pytest.mark.asyncio
async def test_busy_sessions_are_never_evicted(make_supervisor, clock):
    gate = asyncio.Event()
    sup = await make_supervisor(quote_client=FakeQuoteClient(gate=gate), SESSION_IDLE_TTL_SEC=10)
    session = sup.open_session("ai-chips", amount=100)

    task = asyncio.create_task(session.fetch_quotes())
    for _ in range(5):
        await asyncio.sleep(0)
    assert session.busy

    clock.now = 1000
    assert sup.evict_idle_sessions() == []

    gate.set()
    await task
    assert sup.evict_idle_sessions() == [session.id]


@pytest.mark.asyncio
async def test_evicted_session_is_abandoned(make_supervisor, clock):
    sup = await make_supervisor(SESSION_IDLE_TTL_SEC=10)
    session = sup.open_session("ai-chips", amount=100)
    await session.fetch_quotes()
    assert session.quotes

    clock.now = 20
    sup.evict_idle_sessions()

    assert session.quotes == []


@pytest.mark.asyncio
async def test_stop_closes_sessions(make_supervisor):
    sup = await make_supervisor()
    session = sup.open_session("mag7", amount=100)

    await sup.stop()

    assert sup.get_session(session.id) is None
