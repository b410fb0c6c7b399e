import pytest

from basket_orchestrator.adapters.external.catalog.static_catalog import (
    StaticAssetRepository,
    StaticBasketRepository,
)
from basket_orchestrator.catalog.assets import STOCKS
from basket_orchestrator.config import USDC_MINT, Settings
from basket_orchestrator.core.domain.entities.catalog_entity import BasketDefinition, BasketItem
from basket_orchestrator.core.domain.enums.catalog_enums import BasketRisk
from tests.helpers.fakes import (
    FakeLedgerClient,
    FakeQuoteClient,
    FakeRecurringClient,
    FakeSigner,
    FakeSwapClient,
)


@pytest.fixture
def assets():
    return StaticAssetRepository()


@pytest.fixture
def baskets():
    return StaticBasketRepository()


@pytest.fixture
def four_stock_basket():
    """
    NVDAx, AAPLx, AMZNx, TSLAx with equal weights.
    """
    return BasketDefinition(
        id="four",
        name="Four",
        description="four stocks",
        risk=BasketRisk.MEDIUM,
        items=[BasketItem(mint=a.mint, weight=1) for a in STOCKS[:4]],
    )


@pytest.fixture
def settings():
    return Settings(
        JUPITER_API_BASE="https://jup.test",
        JUPITER_PRICE_API_BASE="https://jup.test",
        SOLANA_RPC_URL="https://rpc.test",
        SOLANA_PRIVATE_KEY="",
        INPUT_MINT=USDC_MINT,
        CONFIRM_POLL_INTERVAL_SEC=0.0,
    )


@pytest.fixture
def quote_client():
    return FakeQuoteClient()


@pytest.fixture
def swap_client():
    return FakeSwapClient()


@pytest.fixture
def ledger():
    return FakeLedgerClient()


@pytest.fixture
def recurring_client():
    return FakeRecurringClient()


@pytest.fixture
def signer():
    return FakeSigner()
