import logging
from typing import Callable, Optional, Sequence

from ..domain.entities.execution_entity import AllocationRow, ExecutionProgress, ExecutionResult
from ..domain.entities.recurring_entity import CreateRecurringOrderParams
from ..domain.enums.execution_enums import RunStatus
from ..domain.exceptions import RecurringOrderError
from ..interfaces.recurring_order_client import RecurringOrderClient
from ..interfaces.wallet_signer import WalletSigner
from ..repositories.asset_repository import AssetRepository
from ..services.allocation_service import AllocationService

UpdateCallback = Callable[[ExecutionResult], None]


class ExecuteRecurringUseCase:
    """
    DCA sequencer: one recurring order per allocation, strictly one after
    the other. Each asset is a full create -> sign -> execute round trip.

    The deposit sent for an asset is its WHOLE allocation; the recurring
    service divides it by `number_of_orders` on its side.

    A failure stops the remaining assets. Orders already created stay
    active; no cancellation is attempted.
    """

    def __init__(
        self,
        recurring_client: RecurringOrderClient,
        asset_repository: AssetRepository,
        input_mint: str,
        input_decimals: int,
        logger: Optional[logging.Logger] = None,
    ):
        self._recurring = recurring_client
        self._assets = asset_repository
        self._input_mint = input_mint
        self._input_decimals = int(input_decimals)
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _emit(on_update: Optional[UpdateCallback], result: ExecutionResult) -> None:
        if on_update is not None:
            on_update(result.model_copy(deep=True))

    async def _create_one(
        self,
        alloc: AllocationRow,
        order_count: int,
        interval_seconds: int,
        signer: WalletSigner,
    ) -> str:
        params = CreateRecurringOrderParams(
            user=signer.address,
            input_mint=self._input_mint,
            output_mint=alloc.mint,
            in_amount=AllocationService.to_smallest_units(alloc.usd_amount, self._input_decimals),
            number_of_orders=order_count,
            interval_seconds=interval_seconds,
        )
        created = await self._recurring.create_order(params)
        signed = await signer.sign_transaction(created.transaction)
        execution = await self._recurring.execute_order(signed, created.request_id)
        return execution.confirmation or created.request_id

    async def execute(
        self,
        allocations: Sequence[AllocationRow],
        order_count: int,
        interval_seconds: int,
        signer: WalletSigner,
        on_update: Optional[UpdateCallback] = None,
    ) -> ExecutionResult:
        if not signer.address or not signer.can_sign_one:
            return ExecutionResult(status=RunStatus.FAILED, error="Wallet must support signTransaction for DCA.")

        total = len(allocations)
        result = ExecutionResult(
            status=RunStatus.RUNNING,
            progress=ExecutionProgress(completed_count=0, total_count=total),
        )
        self._emit(on_update, result)

        for i, alloc in enumerate(allocations):
            symbol = self._assets.display_symbol(alloc.mint)
            result.progress = ExecutionProgress(completed_count=i, total_count=total, current_asset=symbol)
            self._emit(on_update, result)

            try:
                confirmation = await self._create_one(alloc, order_count, interval_seconds, signer)
            except Exception as exc:
                err = RecurringOrderError(symbol, cause=exc)
                self._logger.exception("Recurring run stopped at %s (%s/%s)", symbol, i + 1, total)
                result.status = RunStatus.PARTIAL if result.messages else RunStatus.FAILED
                result.error = str(err)
                result.failed_asset = err.asset_symbol
                self._emit(on_update, result)
                return result

            result.confirmations.append(confirmation)
            result.messages.append(f"Recurring buy set for {symbol} ({order_count} orders)")
            result.progress = ExecutionProgress(completed_count=i + 1, total_count=total, current_asset=symbol)
            self._logger.info("Recurring order created for %s (%s/%s)", symbol, i + 1, total)
            self._emit(on_update, result)

        result.status = RunStatus.SUCCEEDED
        self._emit(on_update, result)
        return result
