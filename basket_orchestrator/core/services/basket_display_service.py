from typing import List

from ..domain.entities.catalog_entity import BasketDefinition, BasketDisplayItem
from ..repositories.asset_repository import AssetRepository


def basket_display_items(basket: BasketDefinition, assets: AssetRepository) -> List[BasketDisplayItem]:
    """
    Rows used to render a basket: symbol / name from the catalog and the
    weight expressed as a percentage of the basket.
    """
    total = basket.weights_sum or 1.0

    rows: List[BasketDisplayItem] = []
    for item in basket.items:
        asset = assets.by_mint(item.mint) if item.mint else None
        fallback_symbol = f"{item.mint[:4]}…" if item.mint else "Asset"
        rows.append(
            BasketDisplayItem(
                mint=item.mint,
                weight=item.weight,
                symbol=asset.symbol if asset else fallback_symbol,
                name=asset.name if asset else "Unknown asset",
                ticker=asset.ticker if asset else None,
                category=asset.category if asset else None,
                decimals=asset.decimals if asset else 6,
                weight_pct=(item.weight / total) * 100.0,
            )
        )
    return rows
