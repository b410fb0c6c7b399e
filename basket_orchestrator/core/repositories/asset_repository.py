from abc import ABC, abstractmethod
from typing import List, Optional

from ..domain.entities.catalog_entity import Asset
from ..domain.enums.catalog_enums import AssetCategory


class AssetRepository(ABC):

    @abstractmethod
    def by_mint(self, mint: str) -> Optional[Asset]:
        raise NotImplementedError

    @abstractmethod
    def by_symbol(self, symbol: str) -> Optional[Asset]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Asset]:
        raise NotImplementedError

    @abstractmethod
    def list_by_category(self, category: AssetCategory) -> List[Asset]:
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str) -> List[Asset]:
        """
        Case-insensitive substring match over symbol, name and ticker.
        """
        raise NotImplementedError

    def display_symbol(self, mint: str) -> str:
        """
        Symbol used in progress and messages; falls back to the mint prefix.
        """
        asset = self.by_mint(mint)
        return asset.symbol if asset else mint[:4]
