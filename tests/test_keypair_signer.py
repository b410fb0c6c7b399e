import json

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0, to_bytes_versioned
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from basket_orchestrator.adapters.external.solana.keypair_signer import (
    DisconnectedSigner,
    KeypairSigner,
    load_keypair,
)
from basket_orchestrator.core.domain.exceptions import SigningError


def _unsigned_tx(payer: Keypair) -> bytes:
    message = MessageV0.try_compile(payer.pubkey(), [], [], Hash.default())
    return bytes(VersionedTransaction.populate(message, [Signature.default()]))


@pytest.mark.asyncio
async def test_signs_with_the_keypair():
    kp = Keypair()
    signer = KeypairSigner(kp)
    raw = _unsigned_tx(kp)

    signed = VersionedTransaction.from_bytes(await signer.sign_transaction(raw))

    expected = kp.sign_message(to_bytes_versioned(signed.message))
    assert signed.signatures[0] == expected
    assert signer.address == str(kp.pubkey())


@pytest.mark.asyncio
async def test_sign_all_keeps_order():
    kp = Keypair()
    signer = KeypairSigner(kp)
    raws = [_unsigned_tx(kp) for _ in range(3)]

    signed = await signer.sign_all_transactions(raws)

    assert len(signed) == 3
    for raw, out in zip(raws, signed):
        assert VersionedTransaction.from_bytes(out).message == VersionedTransaction.from_bytes(raw).message


@pytest.mark.asyncio
async def test_garbage_bytes_raise_signing_error():
    with pytest.raises(SigningError):
        await KeypairSigner(Keypair()).sign_transaction(b"not a transaction")


def test_loads_base58_secret():
    kp = Keypair()
    signer = KeypairSigner.from_secret(str(kp))
    assert signer.address == str(kp.pubkey())
    caps = signer.capabilities()
    assert caps.connected and caps.can_sign_all and caps.can_sign_one


def test_loads_json_array_secret():
    kp = Keypair()
    signer = KeypairSigner.from_secret(json.dumps(list(bytes(kp))))
    assert signer.address == str(kp.pubkey())


@pytest.mark.parametrize("value", ["", "   ", "not-base58-!!!", "abc", "[1, 2, 3]", "[1, 999]"])
def test_bad_private_key(value):
    with pytest.raises(SigningError):
        load_keypair(value)


@pytest.mark.asyncio
async def test_disconnected_signer():
    signer = DisconnectedSigner()
    caps = signer.capabilities()
    assert caps.connected is False and caps.address is None
    with pytest.raises(SigningError):
        await signer.sign_all_transactions([b"x"])
