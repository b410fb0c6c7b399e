import asyncio
import logging
import time
from typing import Any, Awaitable, Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from ....config import SubmitPolicy
from ....core.domain.entities.wallet_entity import BlockhashContext
from ....core.domain.exceptions import (
    ConfirmationTimeoutError,
    ServiceError,
    TransactionExpiredError,
    TransactionFailedError,
)
from ....core.interfaces.ledger_client import LedgerClient

# commitment levels, weakest first
_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}

_STATUS_NAME = {
    TransactionConfirmationStatus.Processed: "processed",
    TransactionConfirmationStatus.Confirmed: "confirmed",
    TransactionConfirmationStatus.Finalized: "finalized",
}


def _error_message(exc: BaseException) -> str:
    arg = exc.args[0] if exc.args else exc
    return getattr(arg, "message", None) or str(arg)


class SolanaRpcClient(LedgerClient):
    """
    Ledger collaborator on top of solana-py's AsyncClient.

    - submit: send_raw_transaction, retries delegated to the node via TxOpts.max_retries
    - confirm: polls get_signature_statuses until the policy commitment is reached,
      stops early when the blockhash expired (block height > lastValidBlockHeight)
    """

    SERVICE = "solana-rpc"

    def __init__(
        self,
        rpc_url: str,
        timeout_sec: float = 30.0,
        client: Optional[AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._rpc_url = rpc_url
        self._timeout = timeout_sec
        self._client = client
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def _get_client(self) -> AsyncClient:
        if self._client is None:
            self._client = AsyncClient(self._rpc_url, timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def _call(self, method: str, pending: Awaitable[Any]) -> Any:
        try:
            return await pending
        except (RPCException, SolanaRpcException) as exc:
            msg = _error_message(exc)
            self._logger.warning("%s failed: %s", method, msg)
            raise ServiceError(self.SERVICE, f"{method}: {msg}") from exc

    async def submit(self, signed_transaction: bytes, policy: SubmitPolicy) -> str:
        opts = TxOpts(
            skip_confirmation=True,
            skip_preflight=policy.skip_preflight,
            preflight_commitment=Commitment(policy.commitment),
            max_retries=policy.max_retries,
        )
        resp = await self._call(
            "sendTransaction",
            self._get_client().send_raw_transaction(signed_transaction, opts=opts),
        )
        if getattr(resp, "value", None) is None:
            raise ServiceError(self.SERVICE, f"Unexpected sendTransaction result: {resp}")
        sig = str(resp.value)
        self._logger.info("Submitted tx %s", sig)
        return sig

    async def latest_blockhash(self, policy: SubmitPolicy) -> BlockhashContext:
        resp = await self._call(
            "getLatestBlockhash",
            self._get_client().get_latest_blockhash(Commitment(policy.commitment)),
        )
        value = getattr(resp, "value", None)
        if value is None:
            raise ServiceError(self.SERVICE, f"Unexpected getLatestBlockhash result: {resp}")
        return BlockhashContext(
            blockhash=str(value.blockhash),
            last_valid_block_height=int(value.last_valid_block_height),
        )

    async def _block_height(self, policy: SubmitPolicy) -> int:
        resp = await self._call(
            "getBlockHeight",
            self._get_client().get_block_height(Commitment(policy.commitment)),
        )
        return int(resp.value or 0)

    @staticmethod
    def _reached(status: Any, commitment: str) -> bool:
        got = _STATUS_NAME.get(status.confirmation_status)
        if got is None:
            # older nodes: null confirmations means rooted
            return status.confirmations is None
        return _COMMITMENT_RANK[got] >= _COMMITMENT_RANK.get(commitment, 1)

    async def confirm(self, signature: str, context: BlockhashContext, policy: SubmitPolicy) -> None:
        client = self._get_client()
        target = Signature.from_string(signature)
        started = time.monotonic()
        while True:
            resp = await self._call("getSignatureStatuses", client.get_signature_statuses([target]))
            status = resp.value[0] if resp.value else None

            if status is not None:
                if status.err:
                    raise TransactionFailedError(signature, status.err)
                if self._reached(status, policy.commitment):
                    self._logger.info("Confirmed tx %s (%s)", signature, _STATUS_NAME.get(status.confirmation_status))
                    return
            else:
                height = await self._block_height(policy)
                if height > context.last_valid_block_height:
                    raise TransactionExpiredError(signature)

            elapsed = time.monotonic() - started
            if elapsed >= policy.confirm_timeout_sec:
                raise ConfirmationTimeoutError(signature, elapsed)
            await asyncio.sleep(policy.poll_interval_sec)
