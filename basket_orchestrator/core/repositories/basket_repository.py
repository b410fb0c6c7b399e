from abc import ABC, abstractmethod
from typing import List, Optional

from ..domain.entities.catalog_entity import BasketDefinition


class BasketRepository(ABC):

    @abstractmethod
    def get(self, basket_id: str) -> Optional[BasketDefinition]:
        raise NotImplementedError

    @abstractmethod
    def list(self, include_disabled: bool = True) -> List[BasketDefinition]:
        raise NotImplementedError
