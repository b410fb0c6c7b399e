from typing import List, Optional, Tuple


class OrchestratorError(Exception):
    """
    Base class for every failure raised inside the basket orchestrator.
    """


class ServiceError(OrchestratorError):
    """
    Raised when an external collaborator answers with a non-2xx status
    or a body we cannot use. Nothing was committed on our side.
    """
    def __init__(self, service: str, msg: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(msg)
        self.service = service
        self.status_code = status_code
        self.body = body
        self.msg = msg


class QuoteBatchError(OrchestratorError):
    """
    Raised when at least one quote of a batch failed.
    The whole batch is discarded, no partial quote set survives.
    """
    def __init__(self, failures: List[Tuple[str, BaseException]]):
        self.failures = failures
        parts = [f"{symbol}: {exc}" for symbol, exc in failures]
        super().__init__("Quote failed for " + "; ".join(parts))


class SigningError(OrchestratorError):
    """
    Raised when the wallet rejects or cannot produce a signature.
    Nothing was submitted yet.
    """


class TransactionFailedError(OrchestratorError):
    """
    Raised when the ledger confirmed the transaction with an error.
    The fee was already paid, the swap did not happen.
    """
    def __init__(self, signature: str, err: object):
        super().__init__(f"Transaction failed on chain: {err}")
        self.signature = signature
        self.err = err


class TransactionExpiredError(OrchestratorError):
    """
    Raised when the blockhash used by the transaction is no longer valid
    and the transaction never landed.
    """
    def __init__(self, signature: str):
        super().__init__(f"block height exceeded for {signature}")
        self.signature = signature


class ConfirmationTimeoutError(OrchestratorError):
    """
    Raised when confirmation did not arrive inside the submit policy timeout.
    The transaction MAY still land later.
    """
    def __init__(self, signature: str, elapsed_sec: float):
        super().__init__(f"Confirmation timeout for {signature} after {elapsed_sec:.1f}s")
        self.signature = signature
        self.elapsed_sec = elapsed_sec


class ExecutionFailedError(OrchestratorError):
    """
    Single error class for a one-shot run failure: swap build, signing,
    submission and confirmation all end up here with the underlying cause kept.
    """
    def __init__(self, msg: str, asset_symbol: Optional[str] = None, index: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(msg)
        self.asset_symbol = asset_symbol
        self.index = index
        self.cause = cause


class RecurringOrderError(OrchestratorError):
    """
    Raised when creating / executing the recurring order of one asset failed.
    Orders created for earlier assets stay active.
    """
    def __init__(self, asset_symbol: str, cause: Optional[BaseException] = None):
        detail = f": {describe_failure(cause)}" if cause is not None else ""
        super().__init__(f"Failed to create DCA for {asset_symbol}{detail}")
        self.asset_symbol = asset_symbol
        self.cause = cause


class RunInProgressError(OrchestratorError):
    def __init__(self):
        super().__init__("Another run is still in progress.")


class BasketUnavailableError(OrchestratorError):
    def __init__(self, basket_id: str, reason: Optional[str] = None):
        super().__init__(reason or f"Basket {basket_id} is not available.")
        self.basket_id = basket_id


def describe_failure(exc: BaseException) -> str:
    """
    Turn a collaborator failure into the text shown to the user.
    Known ledger messages are rewritten, everything else is kept verbatim.
    """
    msg = str(exc) or exc.__class__.__name__
    lowered = msg.lower()
    if "block height exceeded" in lowered:
        return "Transaction expired. Please try again."
    if "insufficient" in lowered:
        return "Insufficient balance for this swap."
    return msg
