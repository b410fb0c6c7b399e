# basket_orchestrator/core/domain/entities/catalog_entity.py

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..enums.catalog_enums import AssetCategory, BasketRisk


class Asset(BaseModel):
    """
    A tradable token. `mint` is the on-ledger identifier, `decimals`
    converts human amounts into smallest units.
    """
    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    mint: str
    decimals: int
    ticker: str
    category: AssetCategory


class BasketItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    mint: str
    weight: float = Field(..., ge=0.0)


class BasketDefinition(BaseModel):
    """
    Static basket configuration. Items keep their declared order, which
    is only meaningful for display and for the execution order of a run.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    risk: BasketRisk
    tags: List[str] = Field(default_factory=list)
    featured: bool = False
    disabled: bool = False
    disabled_reason: Optional[str] = None
    items: List[BasketItem] = Field(default_factory=list)

    @property
    def weights_sum(self) -> float:
        return sum(item.weight for item in self.items)


class BasketDisplayItem(BaseModel):
    mint: str
    weight: float
    symbol: str
    name: str
    ticker: Optional[str] = None
    category: Optional[AssetCategory] = None
    decimals: int = 6
    weight_pct: float
