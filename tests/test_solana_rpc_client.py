from types import SimpleNamespace

import pytest
from solana.rpc.core import RPCException
from solders.hash import Hash
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from basket_orchestrator.adapters.external.solana.solana_rpc_client import SolanaRpcClient
from basket_orchestrator.config import SubmitPolicy
from basket_orchestrator.core.domain.entities.wallet_entity import BlockhashContext
from basket_orchestrator.core.domain.exceptions import (
    ConfirmationTimeoutError,
    ServiceError,
    TransactionExpiredError,
    TransactionFailedError,
)

POLICY = SubmitPolicy(poll_interval_sec=0.0, confirm_timeout_sec=5.0)
CONTEXT = BlockhashContext(blockhash="hash", last_valid_block_height=100)
SIG = Signature.default()


def _status(confirmation_status, err=None, confirmations=0):
    return SimpleNamespace(confirmation_status=confirmation_status, err=err, confirmations=confirmations)


class FakeSolanaClient:
    """
    Scripted AsyncClient. `statuses` are returned one per
    get_signature_statuses call, the last one repeats.
    """

    def __init__(self, statuses=None, block_height=10, send_error=None):
        self.statuses = list(statuses or [None])
        self.block_height = block_height
        self.send_error = send_error
        self.calls = []
        self.closed = False

    async def send_raw_transaction(self, txn, opts=None):
        self.calls.append(("send_raw_transaction", txn, opts))
        if self.send_error:
            raise RPCException(self.send_error)
        return SimpleNamespace(value=SIG)

    async def get_latest_blockhash(self, commitment=None):
        self.calls.append(("get_latest_blockhash", commitment))
        return SimpleNamespace(value=SimpleNamespace(blockhash=Hash.default(), last_valid_block_height=150))

    async def get_block_height(self, commitment=None):
        self.calls.append(("get_block_height", commitment))
        return SimpleNamespace(value=self.block_height)

    async def get_signature_statuses(self, signatures, search_transaction_history=False):
        self.calls.append(("get_signature_statuses", signatures))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return SimpleNamespace(value=[status])

    async def close(self):
        self.closed = True

    def methods(self):
        return [c[0] for c in self.calls]


def _client(fake):
    return SolanaRpcClient("https://rpc.test", client=fake)


@pytest.mark.asyncio
async def test_submit_passes_policy_to_the_node():
    fake = FakeSolanaClient()
    sig = await _client(fake).submit(b"signed-bytes", SubmitPolicy(skip_preflight=True, max_retries=5))

    assert sig == str(SIG)
    _, txn, opts = fake.calls[0]
    assert txn == b"signed-bytes"
    assert opts.skip_preflight is True
    assert opts.max_retries == 5
    assert opts.preflight_commitment == "confirmed"
    assert opts.skip_confirmation is True


@pytest.mark.asyncio
async def test_rpc_error_raises_service_error():
    fake = FakeSolanaClient(send_error="Transaction simulation failed: insufficient funds")

    with pytest.raises(ServiceError) as exc_info:
        await _client(fake).submit(b"x", POLICY)

    assert "insufficient funds" in str(exc_info.value)
    assert exc_info.value.service == "solana-rpc"


@pytest.mark.asyncio
async def test_latest_blockhash():
    ctx = await _client(FakeSolanaClient()).latest_blockhash(POLICY)
    assert ctx == BlockhashContext(blockhash=str(Hash.default()), last_valid_block_height=150)


@pytest.mark.asyncio
async def test_confirm_polls_until_commitment():
    fake = FakeSolanaClient(statuses=[
        None,
        _status(TransactionConfirmationStatus.Processed),
        _status(TransactionConfirmationStatus.Confirmed, confirmations=1),
    ])

    await _client(fake).confirm(str(SIG), CONTEXT, POLICY)

    assert fake.methods().count("get_signature_statuses") == 3
    # block height is only checked while the signature is unknown
    assert fake.methods().count("get_block_height") == 1
    assert fake.calls[0][1] == [SIG]


@pytest.mark.asyncio
async def test_finalized_policy_waits_past_confirmed():
    fake = FakeSolanaClient(statuses=[
        _status(TransactionConfirmationStatus.Confirmed),
        _status(TransactionConfirmationStatus.Finalized),
    ])

    await _client(fake).confirm(str(SIG), CONTEXT, SubmitPolicy(commitment="finalized", poll_interval_sec=0.0))

    assert fake.methods().count("get_signature_statuses") == 2


@pytest.mark.asyncio
async def test_confirm_raises_on_ledger_error():
    fake = FakeSolanaClient(statuses=[
        _status(TransactionConfirmationStatus.Confirmed, err={"InstructionError": [2, "Custom"]}),
    ])

    with pytest.raises(TransactionFailedError) as exc_info:
        await _client(fake).confirm(str(SIG), CONTEXT, POLICY)

    assert str(exc_info.value).startswith("Transaction failed on chain:")
    assert exc_info.value.signature == str(SIG)


@pytest.mark.asyncio
async def test_confirm_raises_when_blockhash_expired():
    fake = FakeSolanaClient(statuses=[None], block_height=101)

    with pytest.raises(TransactionExpiredError) as exc_info:
        await _client(fake).confirm(str(SIG), CONTEXT, POLICY)

    assert "block height exceeded" in str(exc_info.value)


@pytest.mark.asyncio
async def test_confirm_times_out():
    fake = FakeSolanaClient(statuses=[_status(TransactionConfirmationStatus.Processed)])
    policy = SubmitPolicy(poll_interval_sec=0.0, confirm_timeout_sec=0.0)

    with pytest.raises(ConfirmationTimeoutError):
        await _client(fake).confirm(str(SIG), CONTEXT, policy)


@pytest.mark.asyncio
async def test_close_releases_the_client():
    fake = FakeSolanaClient()
    client = _client(fake)

    await client.close()

    assert fake.closed is True
