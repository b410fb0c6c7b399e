import logging
from typing import Optional

from ..domain.entities.recurring_entity import (
    CreateRecurringOrderParams,
    RecurringBuyRequest,
    RecurringBuyResult,
)
from ..domain.exceptions import describe_failure
from ..interfaces.recurring_order_client import RecurringOrderClient
from ..interfaces.wallet_signer import WalletSigner
from ..services.allocation_service import AllocationService
from ..services.validation_service import (
    RECURRING_BUY_MIN_PER_ORDER_USD,
    RECURRING_BUY_MIN_TOTAL_USD,
    RecurringBuyValidationState,
    validate_recurring_buy,
)

# interval seconds -> sensible default number of orders
DEFAULT_ORDERS_BY_INTERVAL = {
    86400: 30,     # daily   -> 30 days
    604800: 12,    # weekly  -> 12 weeks
    2628000: 6,    # monthly -> 6 months
}


def default_order_count(interval_seconds: int, current: int) -> int:
    """
    New order count after the interval changed: a value that looks like
    one of the presets snaps to the new preset, a customised one is kept.
    """
    if current in DEFAULT_ORDERS_BY_INTERVAL.values():
        return DEFAULT_ORDERS_BY_INTERVAL.get(int(interval_seconds), current)
    return current


class CreateRecurringBuyUseCase:
    """
    Standalone single-asset recurring buy, sized per order:
    deposit = floor(amount_per_order * number_of_orders * 10 ** input_decimals).
    """

    def __init__(
        self,
        recurring_client: RecurringOrderClient,
        input_mint: str,
        input_decimals: int,
        input_symbol: str = "USDC",
        min_per_order_usd: float = RECURRING_BUY_MIN_PER_ORDER_USD,
        min_total_usd: float = RECURRING_BUY_MIN_TOTAL_USD,
        logger: Optional[logging.Logger] = None,
    ):
        self._recurring = recurring_client
        self._input_mint = input_mint
        self._input_decimals = int(input_decimals)
        self._input_symbol = input_symbol
        self._min_per_order = float(min_per_order_usd)
        self._min_total = float(min_total_usd)
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def validate(self, req: RecurringBuyRequest, signer: WalletSigner) -> Optional[str]:
        return validate_recurring_buy(
            RecurringBuyValidationState(
                wallet=signer.capabilities(),
                amount_per_order=req.amount_per_order,
                number_of_orders=req.number_of_orders,
                output_mint=req.output_mint,
                input_mint=self._input_mint,
                input_symbol=self._input_symbol,
                min_per_order_usd=self._min_per_order,
                min_total_usd=self._min_total,
            )
        )

    async def execute(self, req: RecurringBuyRequest, signer: WalletSigner) -> RecurringBuyResult:
        reason = self.validate(req, signer)
        if reason:
            return RecurringBuyResult(ok=False, error=reason)

        in_amount = AllocationService.to_smallest_units(
            req.amount_per_order * req.number_of_orders, self._input_decimals
        )
        params = CreateRecurringOrderParams(
            user=signer.address,
            input_mint=self._input_mint,
            output_mint=req.output_mint,
            in_amount=in_amount,
            number_of_orders=req.number_of_orders,
            interval_seconds=req.interval_seconds,
        )

        request_id = None
        try:
            created = await self._recurring.create_order(params)
            request_id = created.request_id
            signed = await signer.sign_transaction(created.transaction)
            execution = await self._recurring.execute_order(signed, created.request_id)
        except Exception as exc:
            self._logger.exception("Recurring buy failed for %s: %s", req.output_mint, exc)
            return RecurringBuyResult(
                ok=False,
                error=describe_failure(exc),
                in_amount=in_amount,
                request_id=request_id,
            )

        self._logger.info(
            "Recurring buy created: mint=%s orders=%s every=%ss deposit=%s",
            req.output_mint, req.number_of_orders, req.interval_seconds, in_amount,
        )
        return RecurringBuyResult(ok=True, in_amount=in_amount, request_id=request_id, execution=execution)
