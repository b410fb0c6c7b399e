import base64
import logging
from typing import Any, Dict, Optional

import httpx

from ....core.domain.exceptions import ServiceError
from ....core.interfaces.quote_client import QuoteClient
from ....core.interfaces.swap_client import SwapClient


class JupiterSwapClient(QuoteClient, SwapClient):
    """
    Async HTTP wrapper around the Jupiter swap API (quote + swap build).

    URLs:
      GET  {base_url}/swap/v1/quote
      POST {base_url}/swap/v1/swap

    Quotes are opaque: we hand back the JSON exactly as received and send it
    back untouched as `quoteResponse` when building the transaction.
    """

    SERVICE = "jupiter-swap"

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        :param base_url: Jupiter API base (e.g. https://lite-api.jup.ag).
        :param timeout_sec: per-request timeout.
        :param transport: optional httpx transport (mock transport in tests).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._transport = transport
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}/swap/v1/quote"
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(int(amount)),
            "slippageBps": str(int(slippage_bps)),
        }
        async with self._client() as client:
            r = await client.get(url, params=params)
        if r.status_code != 200:
            self._logger.warning("quote non-200 %s: %s %s", url, r.status_code, r.text)
            raise ServiceError(
                self.SERVICE, r.text or f"Quote request failed ({r.status_code})",
                status_code=r.status_code, body=r.text,
            )
        return r.json()

    async def build_swap_transaction(
        self,
        quote: Dict[str, Any],
        user_address: str,
        unwrap_native: bool,
    ) -> bytes:
        url = f"{self._base_url}/swap/v1/swap"
        payload = {
            "quoteResponse": quote,
            "userPublicKey": user_address,
            "wrapAndUnwrapSol": bool(unwrap_native),
            "dynamicComputeUnitLimit": True,
        }
        async with self._client() as client:
            r = await client.post(url, json=payload)
        if r.status_code != 200:
            self._logger.warning("swap non-200 %s: %s %s", url, r.status_code, r.text)
            raise ServiceError(
                self.SERVICE, r.text or f"Swap request failed ({r.status_code})",
                status_code=r.status_code, body=r.text,
            )

        data = r.json() or {}
        swap_tx = data.get("swapTransaction")
        if not swap_tx:
            raise ServiceError(self.SERVICE, "Swap build failed (missing swapTransaction).", body=r.text)
        return base64.b64decode(swap_tx)
