from abc import ABC, abstractmethod
from typing import Any, Dict


class QuoteClient(ABC):
    """
    Quoting collaborator. Must be safe to call concurrently for
    independent asset pairs.
    """

    @abstractmethod
    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
    ) -> Dict[str, Any]:
        """
        Return an opaque quote for swapping `amount` smallest units of
        `input_mint` into `output_mint`. Raises on failure.
        """
        raise NotImplementedError
