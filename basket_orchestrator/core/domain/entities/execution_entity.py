# basket_orchestrator/core/domain/entities/execution_entity.py

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..enums.execution_enums import RunStatus


class AllocationRow(BaseModel):
    """
    Per-asset share of a basket purchase.

    usd_amount      = total * weight / sum(weights)
    smallest_amount = floor(usd_amount * 10 ** input_decimals)
    """
    model_config = ConfigDict(frozen=True)

    mint: str
    usd_amount: float
    smallest_amount: int


class QuoteRow(BaseModel):
    """
    One quote per allocation row, same order as the allocations.
    `quote` is opaque: it is handed back to the swap builder untouched.
    """
    allocation: AllocationRow
    quote: Dict[str, Any]

    @property
    def mint(self) -> str:
        return self.allocation.mint


class ExecutionProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    completed_count: int = 0
    total_count: int = 0
    current_asset: Optional[str] = None


class ExecutionResult(BaseModel):
    """
    Outcome of a sequencer run.

    `confirmations` is appended strictly in completion order (transaction
    signatures for buy-now, execute confirmations for recurring orders).
    `messages` carries the human readable recurring confirmations.
    """
    status: RunStatus = RunStatus.IDLE
    confirmations: List[str] = Field(default_factory=list)
    messages: List[str] = Field(default_factory=list)
    progress: Optional[ExecutionProgress] = None
    error: Optional[str] = None
    failed_asset: Optional[str] = None

    @property
    def completed_count(self) -> int:
        return self.progress.completed_count if self.progress else 0


class QuoteBatchResult(BaseModel):
    quotes: List[QuoteRow] = Field(default_factory=list)
    error: Optional[str] = None
