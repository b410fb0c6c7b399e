from abc import ABC, abstractmethod
from typing import Dict, Iterable


class PriceFeed(ABC):

    @abstractmethod
    async def get_prices(self, mints: Iterable[str]) -> Dict[str, float]:
        """
        Best-effort USD prices keyed by mint. Missing mints are simply absent.
        """
        raise NotImplementedError
