import logging
import uuid
from typing import Callable, List, Optional

from ..domain.entities.catalog_entity import BasketDefinition
from ..domain.entities.execution_entity import AllocationRow, ExecutionResult, QuoteRow
from ..domain.entities.session_entity import QuotePreview, SessionSnapshot
from ..domain.enums.execution_enums import PurchaseMode, RunKind, RunStatus
from ..domain.exceptions import BasketUnavailableError, RunInProgressError
from ..interfaces.wallet_signer import WalletSigner
from ..repositories.asset_repository import AssetRepository
from ..repositories.basket_repository import BasketRepository
from ..usecases.execute_one_shot_use_case import ExecuteOneShotUseCase
from ..usecases.execute_recurring_use_case import ExecuteRecurringUseCase
from ..usecases.fetch_quotes_use_case import FetchQuotesUseCase
from .allocation_service import AllocationService
from .validation_service import (
    BASKET_DCA_MIN_PER_ORDER_USD,
    MAX_TOTAL_AMOUNT_USD,
    BasketValidationState,
    safe_number,
    validate_basket,
)


class BasketSession:
    """
    State of one basket purchase flow (basket, amount, mode, quotes and the
    progress / result / error of the latest run).

    Every run (fetch quotes, buy now, recurring) gets a fresh token and
    REPLACES the run state instead of merging into it. Updates coming from
    a run whose token is no longer current are dropped, so an abandoned
    run can settle without leaking into the next one.
    """

    def __init__(
        self,
        basket: BasketDefinition,
        basket_repository: BasketRepository,
        asset_repository: AssetRepository,
        fetch_quotes_use_case: FetchQuotesUseCase,
        one_shot_use_case: ExecuteOneShotUseCase,
        recurring_use_case: ExecuteRecurringUseCase,
        signer: WalletSigner,
        input_decimals: int,
        amount: float = 0.0,
        mode: PurchaseMode = PurchaseMode.ONCE,
        order_count: int = 4,
        interval_seconds: int = 604800,
        min_per_order_usd: float = BASKET_DCA_MIN_PER_ORDER_USD,
        session_id: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if basket.disabled:
            raise BasketUnavailableError(basket.id, basket.disabled_reason)

        self.id = session_id or uuid.uuid4().hex
        self._baskets = basket_repository
        self._assets = asset_repository
        self._fetch_uc = fetch_quotes_use_case
        self._once_uc = one_shot_use_case
        self._recurring_uc = recurring_use_case
        self._signer = signer
        self._input_decimals = int(input_decimals)
        self._min_per_order = float(min_per_order_usd)
        self._allocator = AllocationService()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

        self.basket = basket
        self.amount = safe_number(amount)
        self.mode = PurchaseMode(mode)
        self.order_count = int(order_count)
        self.interval_seconds = int(interval_seconds)

        self._run_token = 0
        self.busy = False
        self.run_kind: Optional[RunKind] = None
        self._reset_run_state(keep_quotes=False)

    # ---------- run bookkeeping ----------

    def _reset_run_state(self, keep_quotes: bool) -> None:
        if not keep_quotes:
            self.quotes: List[QuoteRow] = []
        self.once = ExecutionResult()
        self.recurring = ExecutionResult()
        self.error: Optional[str] = None

    def _begin_run(self, kind: RunKind, keep_quotes: bool) -> int:
        if self.busy:
            raise RunInProgressError()
        self._run_token += 1
        self._reset_run_state(keep_quotes=keep_quotes)
        self.busy = True
        self.run_kind = kind
        return self._run_token

    def _is_active(self, token: int) -> bool:
        return token == self._run_token

    def _end_run(self, token: int) -> None:
        if self._is_active(token):
            self.busy = False

    def _guarded(self, token: int, apply: Callable[[ExecutionResult], None]) -> Callable[[ExecutionResult], None]:
        def _on_update(result: ExecutionResult) -> None:
            if not self._is_active(token):
                self._logger.debug("Dropping update from stale run %s (current=%s)", token, self._run_token)
                return
            apply(result)
        return _on_update

    def _set_once(self, result: ExecutionResult) -> None:
        self.once = result
        self.error = result.error

    def _set_recurring(self, result: ExecutionResult) -> None:
        self.recurring = result
        self.error = result.error

    def abandon(self) -> None:
        """
        Forget the in-flight run. It keeps settling on its own, its updates are ignored.
        """
        self._run_token += 1
        self.busy = False
        self.run_kind = None
        self._reset_run_state(keep_quotes=False)

    # ---------- inputs ----------

    def update(
        self,
        basket_id: Optional[str] = None,
        amount: Optional[float] = None,
        mode: Optional[PurchaseMode] = None,
        order_count: Optional[int] = None,
        interval_seconds: Optional[int] = None,
    ) -> None:
        """
        Change the inputs. A new basket, amount or mode invalidates quotes
        and every displayed result. Amounts that do not parse as a finite
        number count as 0.
        """
        if self.busy:
            raise RunInProgressError()

        invalidate = False
        if basket_id is not None and basket_id != self.basket.id:
            basket = self._baskets.get(basket_id)
            if basket is None:
                raise KeyError(basket_id)
            if basket.disabled:
                raise BasketUnavailableError(basket.id, basket.disabled_reason)
            self.basket = basket
            invalidate = True
        if amount is not None and safe_number(amount) != self.amount:
            self.amount = safe_number(amount)
            invalidate = True
        if mode is not None and PurchaseMode(mode) != self.mode:
            self.mode = PurchaseMode(mode)
            invalidate = True
        if order_count is not None:
            self.order_count = int(order_count)
        if interval_seconds is not None:
            self.interval_seconds = int(interval_seconds)

        if invalidate:
            self._run_token += 1
            self.run_kind = None
            self._reset_run_state(keep_quotes=False)

    # ---------- derived ----------

    def allocations(self) -> List[AllocationRow]:
        if self.amount > MAX_TOTAL_AMOUNT_USD:
            # nothing to split, validation reports the amount
            return []
        return self._allocator.allocate(max(0.0, self.amount), self.basket.items, self._input_decimals)

    def per_order_usd(self) -> float:
        return AllocationService.per_order_amount(self.amount, len(self.basket.items), self.order_count)

    def validation(self) -> Optional[str]:
        return validate_basket(
            BasketValidationState(
                wallet=self._signer.capabilities(),
                total_amount=self.amount,
                mode=self.mode,
                item_count=len(self.basket.items),
                order_count=self.order_count,
                min_per_order_usd=self._min_per_order,
            )
        )

    # ---------- runs ----------

    async def fetch_quotes(self) -> SessionSnapshot:
        token = self._begin_run(RunKind.FETCH_QUOTES, keep_quotes=False)
        try:
            res = await self._fetch_uc.execute(self.allocations())
            if self._is_active(token):
                self.quotes = list(res.quotes)
                self.error = res.error
        finally:
            self._end_run(token)
        return self.snapshot()

    async def execute(self) -> SessionSnapshot:
        """
        Buy now or set up recurring orders, depending on the mode.
        Raises RunInProgressError while another run is in flight.
        """
        if self.busy:
            raise RunInProgressError()

        reason = self.validation()
        if reason:
            self.error = reason
            return self.snapshot()

        if self.mode == PurchaseMode.ONCE:
            await self._execute_once()
        else:
            await self._execute_recurring()
        return self.snapshot()

    async def _execute_once(self) -> None:
        if not self.quotes:
            self.error = "Preview quotes first."
            return

        quotes = list(self.quotes)
        token = self._begin_run(RunKind.EXECUTE_ONCE, keep_quotes=True)
        try:
            result = await self._once_uc.execute(quotes, self._signer, on_update=self._guarded(token, self._set_once))
            if self._is_active(token):
                self._set_once(result)
                if result.status == RunStatus.PARTIAL:
                    self._logger.warning(
                        "Basket %s bought partially: %s/%s confirmed",
                        self.basket.id, result.completed_count, len(quotes),
                    )
        finally:
            self._end_run(token)

    async def _execute_recurring(self) -> None:
        allocations = self.allocations()
        token = self._begin_run(RunKind.EXECUTE_RECURRING, keep_quotes=True)
        try:
            result = await self._recurring_uc.execute(
                allocations,
                order_count=self.order_count,
                interval_seconds=self.interval_seconds,
                signer=self._signer,
                on_update=self._guarded(token, self._set_recurring),
            )
            if self._is_active(token):
                self._set_recurring(result)
        finally:
            self._end_run(token)

    # ---------- view ----------

    def snapshot(self) -> SessionSnapshot:
        quotes = [
            QuotePreview(
                mint=row.mint,
                symbol=self._assets.display_symbol(row.mint),
                usd_amount=row.allocation.usd_amount,
                smallest_amount=row.allocation.smallest_amount,
                out_amount=str(row.quote["outAmount"]) if row.quote.get("outAmount") is not None else None,
            )
            for row in self.quotes
        ]
        return SessionSnapshot(
            id=self.id,
            basket_id=self.basket.id,
            amount=self.amount,
            mode=self.mode,
            order_count=self.order_count,
            interval_seconds=self.interval_seconds,
            per_order_usd=self.per_order_usd(),
            allocations=self.allocations(),
            validation=self.validation(),
            quotes=quotes,
            once=self.once.model_copy(deep=True),
            recurring=self.recurring.model_copy(deep=True),
            error=self.error,
            busy=self.busy,
            run_kind=self.run_kind,
        )
