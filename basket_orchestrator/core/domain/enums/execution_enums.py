# basket_orchestrator/core/domain/enums/execution_enums.py

from enum import Enum


class PurchaseMode(str, Enum):
    """
    How a basket purchase is carried out.
    """
    ONCE = "once"   # buy now: one swap per asset, one batch signature
    DCA = "dca"     # recurring: one recurring order per asset


class RunKind(str, Enum):
    """
    Which operation a session run is performing.
    """
    FETCH_QUOTES = "FETCH_QUOTES"
    EXECUTE_ONCE = "EXECUTE_ONCE"
    EXECUTE_RECURRING = "EXECUTE_RECURRING"


class RunStatus(str, Enum):
    """
    Terminal / transient states of a session run.
    """
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    PARTIAL = "PARTIAL"     # some confirmations landed before the failure
    FAILED = "FAILED"
