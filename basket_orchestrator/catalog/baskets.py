"""
Basket catalog. Weights are relative, they do not need to sum to 100.
"""

from ..core.domain.entities.catalog_entity import BasketDefinition, BasketItem
from ..core.domain.enums.catalog_enums import BasketRisk
from .assets import COMMODITIES, CRYPTO, INDICES, PRE_IPO, STOCKS


def _by_symbol(assets) -> dict:
    return {a.symbol: a.mint for a in assets}


S = _by_symbol(STOCKS)
C = _by_symbol(CRYPTO)
I = _by_symbol(INDICES)
M = _by_symbol(COMMODITIES)
P = _by_symbol(PRE_IPO)

BASKETS = (
    BasketDefinition(
        id="mag7",
        name="MAG 7",
        description="Equal-weight mega-cap tech leaders",
        risk=BasketRisk.MEDIUM,
        featured=True,
        tags=["Stocks", "Equal-weight"],
        items=[
            BasketItem(mint=S["NVDAx"], weight=1),
            BasketItem(mint=S["AAPLx"], weight=1),
            BasketItem(mint=S["MSFTx"], weight=1),
            BasketItem(mint=S["AMZNx"], weight=1),
            BasketItem(mint=S["GOOGLx"], weight=1),
            BasketItem(mint=S["METAx"], weight=1),
            BasketItem(mint=S["TSLAx"], weight=1),
        ],
    ),
    BasketDefinition(
        id="ai-chips",
        name="AI + Chips",
        description="AI leaders + infra exposure",
        risk=BasketRisk.HIGH,
        featured=True,
        tags=["Stocks", "AI"],
        items=[
            BasketItem(mint=S["NVDAx"], weight=45),
            BasketItem(mint=S["MSFTx"], weight=35),
            BasketItem(mint=C["SOL"], weight=20),
        ],
    ),
    BasketDefinition(
        id="crypto-blue",
        name="Crypto Blue Chips",
        description="BTC + ETH + SOL (core majors)",
        risk=BasketRisk.HIGH,
        featured=True,
        tags=["Crypto", "Core"],
        items=[
            BasketItem(mint=C["BTC"], weight=40),
            BasketItem(mint=C["ETH"], weight=35),
            BasketItem(mint=C["SOL"], weight=25),
        ],
    ),
    BasketDefinition(
        id="balanced-growth",
        name="Balanced Growth",
        description="Stocks index + crypto + gold hedge",
        risk=BasketRisk.MEDIUM,
        featured=True,
        tags=["Mixed", "Hedge"],
        disabled=True,
        disabled_reason="Indices/commodities mints are placeholders, enable once live.",
        items=[
            BasketItem(mint=I["xSPY"], weight=50),
            BasketItem(mint=C["BTC"], weight=30),
            BasketItem(mint=M["xGLD"], weight=20),
        ],
    ),
    BasketDefinition(
        id="coinbase-tech",
        name="Tech + Crypto Proxy",
        description="Tech leaders + COIN + SOL",
        risk=BasketRisk.HIGH,
        tags=["Stocks", "Mixed"],
        items=[
            BasketItem(mint=S["NVDAx"], weight=30),
            BasketItem(mint=S["MSFTx"], weight=20),
            BasketItem(mint=S["METAx"], weight=20),
            BasketItem(mint=S["COINx"], weight=15),
            BasketItem(mint=C["SOL"], weight=15),
        ],
    ),
    BasketDefinition(
        id="pre-ipo-future",
        name="Pre-IPO Future",
        description="SpaceX + OpenAI (coming soon)",
        risk=BasketRisk.HIGH,
        tags=["Pre-IPO"],
        disabled=True,
        disabled_reason="Pre-IPO mints are placeholders, enable once live.",
        items=[
            BasketItem(mint=P["xSPACEX"], weight=1),
            BasketItem(mint=P["xOPENAI"], weight=1),
        ],
    ),
)
