# basket_orchestrator/core/domain/entities/wallet_entity.py

from typing import Optional

from pydantic import BaseModel, ConfigDict


class WalletCapabilities(BaseModel):
    """
    What the connected wallet can do right now. Read by the validation
    gate, never mutated by the orchestrator.
    """
    model_config = ConfigDict(frozen=True)

    connected: bool = False
    address: Optional[str] = None
    can_sign_all: bool = False
    can_sign_one: bool = False


class BlockhashContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    blockhash: str
    last_valid_block_height: int
