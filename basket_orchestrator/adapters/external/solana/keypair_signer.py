import json
import logging
from typing import List, Optional

import base58
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from ....core.domain.exceptions import SigningError
from ....core.interfaces.wallet_signer import WalletSigner


_B58_CHARS = set("123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz")


def load_keypair(private_key: str) -> Keypair:
    """
    Parse a 64-byte secret key, either base58 or a JSON integer array
    (solana-keygen file format). Raises SigningError on bad input and
    never echoes the key.
    """
    raw = (private_key or "").strip()
    if not raw:
        raise SigningError("SOLANA_PRIVATE_KEY is empty")

    if raw.startswith("["):
        try:
            key_bytes = bytes(json.loads(raw))
        except (ValueError, TypeError) as exc:
            raise SigningError("SOLANA_PRIVATE_KEY JSON must be an integer array") from exc
    else:
        if not all(c in _B58_CHARS for c in raw):
            raise SigningError("SOLANA_PRIVATE_KEY contains invalid characters (must be base58)")
        key_bytes = base58.b58decode(raw)

    if len(key_bytes) != 64:
        raise SigningError(f"SOLANA_PRIVATE_KEY decoded to {len(key_bytes)} bytes, expected 64")
    try:
        return Keypair.from_bytes(key_bytes)
    except ValueError as exc:
        raise SigningError("Failed to create keypair from SOLANA_PRIVATE_KEY") from exc


class KeypairSigner(WalletSigner):
    """
    Server-side wallet backed by a single solders Keypair.
    Transactions arrive serialized, are re-signed with the keypair as the
    only signer and go back serialized.
    """

    def __init__(self, keypair: Keypair, logger: Optional[logging.Logger] = None):
        self._keypair = keypair
        self._address = str(keypair.pubkey())
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_secret(cls, private_key: str) -> "KeypairSigner":
        return cls(load_keypair(private_key))

    @property
    def address(self) -> Optional[str]:
        return self._address

    @property
    def can_sign_all(self) -> bool:
        return True

    @property
    def can_sign_one(self) -> bool:
        return True

    def _sign(self, transaction: bytes) -> bytes:
        try:
            tx = VersionedTransaction.from_bytes(transaction)
            signed = VersionedTransaction(tx.message, [self._keypair])
        except Exception as exc:
            raise SigningError(f"Could not sign transaction: {exc}") from exc
        return bytes(signed)

    async def sign_transaction(self, transaction: bytes) -> bytes:
        return self._sign(transaction)

    async def sign_all_transactions(self, transactions: List[bytes]) -> List[bytes]:
        signed = [self._sign(tx) for tx in transactions]
        self._logger.info("Signed %s transactions with %s", len(signed), self._address)
        return signed


class DisconnectedSigner(WalletSigner):
    """
    Stand-in when no key is configured: reports no address and no capability,
    every signing attempt fails.
    """

    @property
    def address(self) -> Optional[str]:
        return None

    @property
    def can_sign_all(self) -> bool:
        return False

    @property
    def can_sign_one(self) -> bool:
        return False

    async def sign_transaction(self, transaction: bytes) -> bytes:
        raise SigningError("No wallet connected")

    async def sign_all_transactions(self, transactions: List[bytes]) -> List[bytes]:
        raise SigningError("No wallet connected")
