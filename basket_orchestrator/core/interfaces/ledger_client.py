from abc import ABC, abstractmethod

from ...config import SubmitPolicy
from ..domain.entities.wallet_entity import BlockhashContext


class LedgerClient(ABC):
    """
    Submission / confirmation collaborator. Retry and timeout behaviour
    is driven by the SubmitPolicy passed in, not hardcoded here.
    """

    @abstractmethod
    async def submit(self, signed_transaction: bytes, policy: SubmitPolicy) -> str:
        """
        Broadcast a signed transaction and return its signature.
        """
        raise NotImplementedError

    @abstractmethod
    async def latest_blockhash(self, policy: SubmitPolicy) -> BlockhashContext:
        raise NotImplementedError

    @abstractmethod
    async def confirm(self, signature: str, context: BlockhashContext, policy: SubmitPolicy) -> None:
        """
        Wait until `signature` reaches the policy commitment.
        Raises TransactionFailedError / TransactionExpiredError / ConfirmationTimeoutError.
        """
        raise NotImplementedError
