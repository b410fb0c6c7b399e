from typing import Dict, Iterable, List, Optional

from ....catalog.assets import ALL_ASSETS
from ....catalog.baskets import BASKETS
from ....core.domain.entities.catalog_entity import Asset, BasketDefinition
from ....core.domain.enums.catalog_enums import AssetCategory
from ....core.repositories.asset_repository import AssetRepository
from ....core.repositories.basket_repository import BasketRepository


class StaticAssetRepository(AssetRepository):
    """
    Read-only asset lookups over the in-process catalog.
    """

    def __init__(self, assets: Iterable[Asset] = ALL_ASSETS):
        self._assets: List[Asset] = list(assets)
        self._by_mint: Dict[str, Asset] = {a.mint: a for a in self._assets}
        self._by_symbol: Dict[str, Asset] = {a.symbol: a for a in self._assets}

    def by_mint(self, mint: str) -> Optional[Asset]:
        return self._by_mint.get(mint)

    def by_symbol(self, symbol: str) -> Optional[Asset]:
        return self._by_symbol.get(symbol)

    def list_all(self) -> List[Asset]:
        return list(self._assets)

    def list_by_category(self, category: AssetCategory) -> List[Asset]:
        return [a for a in self._assets if a.category == category]

    def search(self, query: str) -> List[Asset]:
        q = (query or "").strip().lower()
        if not q:
            return list(self._assets)
        return [
            a for a in self._assets
            if q in a.symbol.lower() or q in a.name.lower() or q in a.ticker.lower()
        ]


class StaticBasketRepository(BasketRepository):

    def __init__(self, baskets: Iterable[BasketDefinition] = BASKETS):
        self._baskets: List[BasketDefinition] = list(baskets)
        self._by_id: Dict[str, BasketDefinition] = {b.id: b for b in self._baskets}

    def get(self, basket_id: str) -> Optional[BasketDefinition]:
        return self._by_id.get(basket_id)

    def list(self, include_disabled: bool = True) -> List[BasketDefinition]:
        if include_disabled:
            return list(self._baskets)
        return [b for b in self._baskets if not b.disabled]
