from abc import ABC, abstractmethod
from typing import List, Optional

from ..domain.entities.wallet_entity import WalletCapabilities


class WalletSigner(ABC):
    """
    Signing capability. Transactions travel as serialized bytes so the
    orchestrator never depends on a concrete transaction type.
    """

    @property
    @abstractmethod
    def address(self) -> Optional[str]:
        raise NotImplementedError

    @property
    @abstractmethod
    def can_sign_all(self) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def can_sign_one(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def sign_all_transactions(self, transactions: List[bytes]) -> List[bytes]:
        """
        One signing prompt for the whole batch. Output order == input order.
        """
        raise NotImplementedError

    @abstractmethod
    async def sign_transaction(self, transaction: bytes) -> bytes:
        raise NotImplementedError

    def capabilities(self) -> WalletCapabilities:
        return WalletCapabilities(
            connected=self.address is not None,
            address=self.address,
            can_sign_all=self.can_sign_all,
            can_sign_one=self.can_sign_one,
        )
