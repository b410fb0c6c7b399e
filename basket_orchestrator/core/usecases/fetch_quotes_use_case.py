import asyncio
import logging
from typing import List, Optional, Sequence

from ..domain.entities.execution_entity import AllocationRow, QuoteBatchResult, QuoteRow
from ..domain.exceptions import QuoteBatchError
from ..interfaces.quote_client import QuoteClient
from ..repositories.asset_repository import AssetRepository

DEFAULT_SLIPPAGE_BPS = 50


class FetchQuotesUseCase:
    """
    Fans out one quote request per allocation and joins them all-or-nothing.

    Quoting is preparatory: if a single asset cannot be quoted the whole
    batch is dropped, so a purchase is never committed on a partial basket.
    """

    def __init__(
        self,
        quote_client: QuoteClient,
        asset_repository: AssetRepository,
        input_mint: str,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        logger: Optional[logging.Logger] = None,
    ):
        self._quotes = quote_client
        self._assets = asset_repository
        self._input_mint = input_mint
        self._slippage_bps = int(slippage_bps)
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def _quote_one(self, alloc: AllocationRow) -> QuoteRow:
        quote = await self._quotes.get_quote(
            input_mint=self._input_mint,
            output_mint=alloc.mint,
            amount=alloc.smallest_amount,
            slippage_bps=self._slippage_bps,
        )
        return QuoteRow(allocation=alloc, quote=quote)

    async def fetch_all(self, allocations: Sequence[AllocationRow]) -> List[QuoteRow]:
        """
        Raises QuoteBatchError naming every asset whose quote failed.
        Requests still in flight when one fails are allowed to settle.
        """
        results = await asyncio.gather(
            *(self._quote_one(a) for a in allocations),
            return_exceptions=True,
        )

        failures = []
        rows: List[QuoteRow] = []
        for alloc, res in zip(allocations, results):
            if isinstance(res, BaseException):
                failures.append((self._assets.display_symbol(alloc.mint), res))
            else:
                rows.append(res)

        if failures:
            raise QuoteBatchError(failures)
        return rows

    async def execute(self, allocations: Sequence[AllocationRow]) -> QuoteBatchResult:
        self._logger.info("Fetching %s quotes (slippage=%sbps)", len(allocations), self._slippage_bps)
        try:
            rows = await self.fetch_all(allocations)
        except QuoteBatchError as exc:
            self._logger.warning("Quote batch failed: %s", exc)
            return QuoteBatchResult(quotes=[], error=str(exc))

        self._logger.info("Quote batch ready: %s rows", len(rows))
        return QuoteBatchResult(quotes=rows)
