import base64
import logging
from typing import Any, Dict, Optional

import httpx

from ....core.domain.entities.recurring_entity import (
    CreateRecurringOrderParams,
    CreatedRecurringOrder,
    RecurringOrderExecution,
)
from ....core.domain.exceptions import ServiceError
from ....core.interfaces.recurring_order_client import RecurringOrderClient


class JupiterRecurringClient(RecurringOrderClient):
    """
    Jupiter Recurring API (time based orders).

      POST {base_url}/recurring/v1/createOrder
      body: {user, inputMint, outputMint, params: {time: {...}}}
      -> {requestId, transaction(base64)}

      POST {base_url}/recurring/v1/execute
      body: {signedTransaction(base64), requestId}
      -> {status, signature, order, error}

    Jupiter submits the signed deposit itself, no RPC is involved here.
    """

    SERVICE = "jupiter-recurring"

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._transport = transport
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def _post(self, path: str, payload: Dict[str, Any], what: str) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            r = await client.post(url, json=payload)
        if r.status_code != 200:
            self._logger.warning("%s non-200 %s: %s %s", what, url, r.status_code, r.text)
            raise ServiceError(self.SERVICE, r.text or f"{what} failed", status_code=r.status_code, body=r.text)
        return r.json() or {}

    async def create_order(self, params: CreateRecurringOrderParams) -> CreatedRecurringOrder:
        payload = {
            "user": params.user,
            "inputMint": params.input_mint,
            "outputMint": params.output_mint,
            "params": {
                "time": {
                    "inAmount": params.in_amount,
                    "numberOfOrders": params.number_of_orders,
                    "interval": params.interval_seconds,
                    "minPrice": params.min_price,
                    "maxPrice": params.max_price,
                    "startAt": params.start_at,
                },
            },
        }
        data = await self._post("/recurring/v1/createOrder", payload, "createOrder")

        transaction = data.get("transaction")
        request_id = data.get("requestId")
        if not transaction or not request_id:
            raise ServiceError(self.SERVICE, "Invalid createOrder response: missing transaction/requestId")

        self._logger.info(
            "createOrder ok: output=%s inAmount=%s orders=%s requestId=%s",
            params.output_mint, params.in_amount, params.number_of_orders, request_id,
        )
        return CreatedRecurringOrder(transaction=base64.b64decode(transaction), request_id=request_id)

    async def execute_order(self, signed_transaction: bytes, request_id: str) -> RecurringOrderExecution:
        payload = {
            "signedTransaction": base64.b64encode(signed_transaction).decode("ascii"),
            "requestId": request_id,
        }
        data = await self._post("/recurring/v1/execute", payload, "execute")

        status = str(data.get("status") or "")
        if status != "Success":
            msg = data.get("error") or f"execute returned status {status or 'unknown'}"
            raise ServiceError(self.SERVICE, str(msg), body=str(data))

        return RecurringOrderExecution(
            status=status,
            confirmation=data.get("signature"),
            order=data.get("order"),
            raw=data,
        )
