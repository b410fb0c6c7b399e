# basket_orchestrator/core/domain/entities/session_entity.py

from typing import List, Optional

from pydantic import BaseModel, Field

from ..enums.execution_enums import PurchaseMode, RunKind
from .execution_entity import AllocationRow, ExecutionResult


class QuotePreview(BaseModel):
    mint: str
    symbol: str
    usd_amount: float
    smallest_amount: int
    out_amount: Optional[str] = None   # raw output units as reported by the quote


class SessionSnapshot(BaseModel):
    """
    Serializable view of a basket session, rebuilt from scratch on every read.
    """
    id: str
    basket_id: str
    amount: float
    mode: PurchaseMode
    order_count: int
    interval_seconds: int
    per_order_usd: float
    allocations: List[AllocationRow] = Field(default_factory=list)
    validation: Optional[str] = None
    quotes: List[QuotePreview] = Field(default_factory=list)
    once: ExecutionResult = Field(default_factory=ExecutionResult)
    recurring: ExecutionResult = Field(default_factory=ExecutionResult)
    error: Optional[str] = None
    busy: bool = False
    run_kind: Optional[RunKind] = None
