# basket_orchestrator/core/domain/entities/recurring_entity.py

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class CreateRecurringOrderParams(BaseModel):
    """
    Time-based recurring order. `in_amount` is the TOTAL deposit in smallest
    units; the recurring service splits it into `number_of_orders` itself.
    """
    user: str
    input_mint: str
    output_mint: str
    in_amount: int = Field(..., ge=0)
    number_of_orders: int = Field(..., ge=1)
    interval_seconds: int = Field(..., ge=1)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    start_at: Optional[int] = None


class CreatedRecurringOrder(BaseModel):
    transaction: bytes       # unsigned, serialized
    request_id: str          # correlation id for the execute call


class RecurringOrderExecution(BaseModel):
    status: str
    confirmation: Optional[str] = None   # signature of the deposit transaction
    order: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class RecurringBuyRequest(BaseModel):
    """
    Standalone single-asset recurring buy, sized per order.
    """
    output_mint: str
    amount_per_order: float
    number_of_orders: int
    interval_seconds: int


class RecurringBuyResult(BaseModel):
    ok: bool
    error: Optional[str] = None
    in_amount: int = 0
    request_id: Optional[str] = None
    execution: Optional[RecurringOrderExecution] = None
