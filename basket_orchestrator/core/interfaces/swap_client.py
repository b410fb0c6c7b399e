from abc import ABC, abstractmethod
from typing import Any, Dict


class SwapClient(ABC):

    @abstractmethod
    async def build_swap_transaction(
        self,
        quote: Dict[str, Any],
        user_address: str,
        unwrap_native: bool,
    ) -> bytes:
        """
        Turn a quote into an unsigned, serialized transaction for `user_address`.
        """
        raise NotImplementedError
