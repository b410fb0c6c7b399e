"""
Validation gates. Pure functions: they only say WHY an execution is
blocked, they never touch run state. First failing rule wins.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from ..domain.entities.wallet_entity import WalletCapabilities
from ..domain.enums.execution_enums import PurchaseMode
from .allocation_service import AllocationService

# basket flow guardrail, per asset per order
BASKET_DCA_MIN_PER_ORDER_USD = 2.0

# standalone recurring buy minimums
RECURRING_BUY_MIN_PER_ORDER_USD = 50.0
RECURRING_BUY_MIN_TOTAL_USD = 100.0

# upper bound on any spend, per basket or per recurring deposit
MAX_TOTAL_AMOUNT_USD = 1_000_000_000.0

AMOUNT_TOO_LARGE = "Amount is too large."


def safe_number(value: Any, fallback: float = 0.0) -> float:
    """
    Parse user input into a float; anything non-finite becomes `fallback`.
    """
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    return n if math.isfinite(n) else fallback


@dataclass(frozen=True)
class BasketValidationState:
    wallet: WalletCapabilities
    total_amount: float
    mode: PurchaseMode
    item_count: int
    order_count: int
    min_per_order_usd: float = BASKET_DCA_MIN_PER_ORDER_USD


def validate_basket(state: BasketValidationState) -> Optional[str]:
    if not state.wallet.connected or not state.wallet.address:
        return "Connect wallet first."

    total = state.total_amount
    if total is None or not math.isfinite(total) or total <= 0:
        return "Enter an amount."
    if total > MAX_TOTAL_AMOUNT_USD:
        return AMOUNT_TOO_LARGE

    if state.mode == PurchaseMode.ONCE and not state.wallet.can_sign_all:
        return "Wallet must support signAllTransactions for one-click baskets."

    if state.mode == PurchaseMode.DCA:
        if not state.wallet.can_sign_one:
            return "Wallet must support signTransaction for DCA."
        if state.order_count < 2:
            return "DCA needs at least 2 orders."
        per_order = AllocationService.per_order_amount(total, state.item_count, state.order_count)
        if per_order < state.min_per_order_usd:
            return "Per-order amount too small. Increase total or reduce number of orders."

    return None


@dataclass(frozen=True)
class RecurringBuyValidationState:
    wallet: WalletCapabilities
    amount_per_order: float
    number_of_orders: int
    output_mint: str
    input_mint: str
    input_symbol: str = "USDC"
    min_per_order_usd: float = RECURRING_BUY_MIN_PER_ORDER_USD
    min_total_usd: float = RECURRING_BUY_MIN_TOTAL_USD


def validate_recurring_buy(state: RecurringBuyValidationState) -> Optional[str]:
    if not state.wallet.connected or not state.wallet.address:
        return "Connect your wallet to start a recurring buy."
    if not state.wallet.can_sign_one:
        return "Your wallet doesn't support transaction signing."

    per_order = state.amount_per_order
    if per_order is None or not math.isfinite(per_order) or per_order <= 0:
        return "Enter an amount."
    if state.number_of_orders < 2:
        return "Minimum 2 orders."

    total = per_order * state.number_of_orders
    if total > MAX_TOTAL_AMOUNT_USD:
        return AMOUNT_TOO_LARGE
    if total < state.min_total_usd:
        return f"Minimum total deposit is ${state.min_total_usd:g}."
    if per_order < state.min_per_order_usd:
        return f"Minimum is ${state.min_per_order_usd:g} per order."
    if state.output_mint == state.input_mint:
        return f"Choose an asset other than {state.input_symbol}."
    return None
