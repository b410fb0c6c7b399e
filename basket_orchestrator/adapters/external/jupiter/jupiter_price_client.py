import logging
from typing import Dict, Iterable, Optional

import httpx

from ....core.interfaces.price_feed import PriceFeed


class JupiterPriceClient(PriceFeed):
    """
    Best-effort USD prices from GET {base_url}/price/v3?ids=<mint,mint>.
    Never raises: on any failure we log and return what we have (usually {}).
    """

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._transport = transport
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_prices(self, mints: Iterable[str]) -> Dict[str, float]:
        ids = []
        for m in mints:
            m = (m or "").strip()
            if m and m not in ids:
                ids.append(m)
        if not ids:
            return {}

        url = f"{self._base_url}/price/v3"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.get(url, params={"ids": ",".join(ids)})
                if r.status_code != 200:
                    self._logger.warning("price non-200 %s: %s %s", url, r.status_code, r.text)
                    return {}
                data = r.json() or {}
        except Exception as exc:
            self._logger.warning("get_prices failed: %s", exc)
            return {}

        out: Dict[str, float] = {}
        for mint in ids:
            entry = data.get(mint)
            if not isinstance(entry, dict):
                continue
            price = entry.get("usdPrice")
            try:
                out[mint] = float(price)
            except (TypeError, ValueError):
                continue
        return out
