from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ....catalog.assets import CATEGORY_LABELS
from ....core.domain.entities.catalog_entity import Asset, BasketDefinition, BasketDisplayItem
from ....core.domain.entities.recurring_entity import RecurringBuyRequest, RecurringBuyResult
from ....core.domain.entities.session_entity import SessionSnapshot
from ....core.domain.entities.wallet_entity import WalletCapabilities
from ....core.domain.enums.catalog_enums import AssetCategory
from ....core.domain.enums.execution_enums import PurchaseMode
from ....core.domain.exceptions import BasketUnavailableError, RunInProgressError
from ....core.services.basket_display_service import basket_display_items
from ....core.services.basket_session import BasketSession
from ....core.services.validation_service import MAX_TOTAL_AMOUNT_USD
from ....workers.execution_supervisor import ExecutionSupervisor
from .deps import get_supervisor

router = APIRouter(prefix="/api", tags=["baskets"])

# =========================
# DTOs
# =========================

class BasketOutDTO(BaseModel):
    basket: BasketDefinition
    items: List[BasketDisplayItem]


class PricesOutDTO(BaseModel):
    prices: Dict[str, float]


class SessionCreateDTO(BaseModel):
    basket_id: str
    amount: float = Field(0.0, le=MAX_TOTAL_AMOUNT_USD)
    mode: PurchaseMode = PurchaseMode.ONCE
    order_count: Optional[int] = Field(None, ge=0)
    interval_seconds: Optional[int] = Field(None, ge=1)


class SessionUpdateDTO(BaseModel):
    basket_id: Optional[str] = None
    amount: Optional[float] = Field(None, le=MAX_TOTAL_AMOUNT_USD)
    mode: Optional[PurchaseMode] = None
    order_count: Optional[int] = Field(None, ge=0)
    interval_seconds: Optional[int] = Field(None, ge=1)


class RecurringBuyDTO(BaseModel):
    output_mint: str
    amount_per_order: float = Field(..., le=MAX_TOTAL_AMOUNT_USD)
    number_of_orders: int
    interval_seconds: int = Field(604800, ge=1)


def _session_or_404(sup: ExecutionSupervisor, session_id: str) -> BasketSession:
    session = sup.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session

# =========================
# Catalog
# =========================

@router.get("/wallet", response_model=WalletCapabilities)
async def get_wallet(sup: ExecutionSupervisor = Depends(get_supervisor)):
    return sup.signer.capabilities()


@router.get("/categories")
async def list_categories():
    return [{"id": c.value, "label": label} for c, label in CATEGORY_LABELS.items()]


@router.get("/assets", response_model=List[Asset])
async def list_assets(
    category: Optional[AssetCategory] = Query(None),
    q: Optional[str] = Query(None),
    sup: ExecutionSupervisor = Depends(get_supervisor),
):
    """
    List catalog assets, optionally filtered by category and / or a search string.
    """
    assets = sup.assets.list_by_category(category) if category is not None else sup.assets.list_all()
    if q:
        matched = {a.mint for a in sup.assets.search(q)}
        assets = [a for a in assets if a.mint in matched]
    return assets


@router.get("/baskets", response_model=List[BasketDefinition])
async def list_baskets(
    include_disabled: bool = Query(True),
    sup: ExecutionSupervisor = Depends(get_supervisor),
):
    return sup.baskets.list(include_disabled=include_disabled)


@router.get("/baskets/{basket_id}", response_model=BasketOutDTO)
async def get_basket(basket_id: str, sup: ExecutionSupervisor = Depends(get_supervisor)):
    basket = sup.baskets.get(basket_id)
    if basket is None:
        raise HTTPException(status_code=404, detail="Basket not found")
    return BasketOutDTO(basket=basket, items=basket_display_items(basket, sup.assets))


@router.get("/prices", response_model=PricesOutDTO)
async def get_prices(
    mints: str = Query(..., description="comma separated mints"),
    sup: ExecutionSupervisor = Depends(get_supervisor),
):
    prices = await sup.price_feed.get_prices(mints.split(","))
    return PricesOutDTO(prices=prices)

# =========================
# Basket sessions
# =========================

@router.post("/sessions", response_model=SessionSnapshot)
async def create_session(dto: SessionCreateDTO, sup: ExecutionSupervisor = Depends(get_supervisor)):
    try:
        session = sup.open_session(
            basket_id=dto.basket_id,
            amount=dto.amount,
            mode=dto.mode,
            order_count=dto.order_count,
            interval_seconds=dto.interval_seconds,
        )
    except KeyError:
        raise HTTPException(status_code=404, detail="Basket not found")
    except BasketUnavailableError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return session.snapshot()


@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str, sup: ExecutionSupervisor = Depends(get_supervisor)):
    return _session_or_404(sup, session_id).snapshot()


@router.patch("/sessions/{session_id}", response_model=SessionSnapshot)
async def update_session(
    session_id: str,
    dto: SessionUpdateDTO,
    sup: ExecutionSupervisor = Depends(get_supervisor),
):
    """
    Change inputs. A new basket, amount or mode clears quotes and results.
    """
    session = _session_or_404(sup, session_id)
    try:
        session.update(**dto.model_dump(exclude_none=True))
    except KeyError:
        raise HTTPException(status_code=404, detail="Basket not found")
    except BasketUnavailableError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except RunInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return session.snapshot()


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, sup: ExecutionSupervisor = Depends(get_supervisor)):
    if not sup.close_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "closed", "id": session_id}


@router.post("/sessions/{session_id}/quotes", response_model=SessionSnapshot)
async def fetch_session_quotes(session_id: str, sup: ExecutionSupervisor = Depends(get_supervisor)):
    session = _session_or_404(sup, session_id)
    try:
        return await session.fetch_quotes()
    except RunInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.post("/sessions/{session_id}/execute", response_model=SessionSnapshot)
async def execute_session(session_id: str, sup: ExecutionSupervisor = Depends(get_supervisor)):
    """
    Buy now (one-shot) or set up recurring orders, depending on the session mode.
    Partial outcomes are reported in the snapshot, not as an HTTP error.
    """
    session = _session_or_404(sup, session_id)
    try:
        return await session.execute()
    except RunInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

# =========================
# Standalone recurring buy
# =========================

@router.post("/recurring-buys", response_model=RecurringBuyResult)
async def create_recurring_buy(dto: RecurringBuyDTO, sup: ExecutionSupervisor = Depends(get_supervisor)):
    req = RecurringBuyRequest(**dto.model_dump())
    reason = sup.recurring_buy.validate(req, sup.signer)
    if reason:
        raise HTTPException(status_code=400, detail=reason)
    return await sup.recurring_buy.execute(req, sup.signer)
