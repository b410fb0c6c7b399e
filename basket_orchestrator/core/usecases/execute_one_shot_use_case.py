import logging
from typing import Callable, List, Optional, Sequence

from ...config import NATIVE_SOL_MINT, SubmitPolicy
from ..domain.entities.execution_entity import ExecutionProgress, ExecutionResult, QuoteRow
from ..domain.enums.execution_enums import RunStatus
from ..domain.exceptions import ExecutionFailedError, describe_failure
from ..interfaces.ledger_client import LedgerClient
from ..interfaces.swap_client import SwapClient
from ..interfaces.wallet_signer import WalletSigner
from ..repositories.asset_repository import AssetRepository

UpdateCallback = Callable[[ExecutionResult], None]


class ExecuteOneShotUseCase:
    """
    Buy-now sequencer.

    Steps:
      1) build one unsigned swap transaction per quote row (quote order kept)
      2) ONE batch signature for all of them
      3) submit + confirm each signed transaction, one at a time, in order

    A failure on row i stops the run: rows after i are never submitted and
    the signatures already confirmed are kept, they executed on-ledger and
    cannot be rolled back.
    """

    def __init__(
        self,
        swap_client: SwapClient,
        ledger_client: LedgerClient,
        asset_repository: AssetRepository,
        submit_policy: Optional[SubmitPolicy] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._swaps = swap_client
        self._ledger = ledger_client
        self._assets = asset_repository
        self._policy = submit_policy or SubmitPolicy()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _emit(on_update: Optional[UpdateCallback], result: ExecutionResult) -> None:
        if on_update is not None:
            on_update(result.model_copy(deep=True))

    async def _build_transactions(self, quotes: Sequence[QuoteRow], user_address: str) -> List[bytes]:
        txs: List[bytes] = []
        for i, row in enumerate(quotes):
            symbol = self._assets.display_symbol(row.mint)
            try:
                tx = await self._swaps.build_swap_transaction(
                    quote=row.quote,
                    user_address=user_address,
                    unwrap_native=row.mint == NATIVE_SOL_MINT,
                )
            except Exception as exc:
                raise ExecutionFailedError(
                    f"Swap build failed for {symbol}: {describe_failure(exc)}",
                    asset_symbol=symbol, index=i, cause=exc,
                ) from exc
            txs.append(tx)
        return txs

    async def _sign_batch(self, signer: WalletSigner, txs: List[bytes]) -> List[bytes]:
        try:
            signed = await signer.sign_all_transactions(txs)
        except Exception as exc:
            raise ExecutionFailedError(f"Signing failed: {describe_failure(exc)}", cause=exc) from exc
        if len(signed) != len(txs):
            raise ExecutionFailedError(
                f"Signing failed: wallet returned {len(signed)} of {len(txs)} transactions"
            )
        return list(signed)

    async def execute(
        self,
        quotes: Sequence[QuoteRow],
        signer: WalletSigner,
        on_update: Optional[UpdateCallback] = None,
    ) -> ExecutionResult:
        """
        :param quotes: Quote rows from FetchQuotesUseCase, in allocation order.
        :param signer: Wallet able to batch-sign.
        :param on_update: Receives a full copy of the running result after every step.
        :return: Terminal ExecutionResult (SUCCEEDED, PARTIAL or FAILED).
        """
        if not quotes:
            return ExecutionResult(status=RunStatus.FAILED, error="Preview quotes first.")
        if not signer.address or not signer.can_sign_all:
            return ExecutionResult(status=RunStatus.FAILED, error="Wallet must support signAllTransactions.")

        total = len(quotes)
        result = ExecutionResult(
            status=RunStatus.RUNNING,
            progress=ExecutionProgress(completed_count=0, total_count=total),
        )
        self._emit(on_update, result)

        try:
            txs = await self._build_transactions(quotes, signer.address)
            signed = await self._sign_batch(signer, txs)

            for i, raw in enumerate(signed):
                symbol = self._assets.display_symbol(quotes[i].mint)
                result.progress = ExecutionProgress(completed_count=i, total_count=total, current_asset=symbol)
                self._emit(on_update, result)

                try:
                    signature = await self._ledger.submit(raw, self._policy)
                    context = await self._ledger.latest_blockhash(self._policy)
                    await self._ledger.confirm(signature, context, self._policy)
                except Exception as exc:
                    raise ExecutionFailedError(
                        f"Execution failed at {symbol} ({i} of {total} confirmed): {describe_failure(exc)}",
                        asset_symbol=symbol, index=i, cause=exc,
                    ) from exc

                result.confirmations.append(signature)
                result.progress = ExecutionProgress(completed_count=i + 1, total_count=total, current_asset=symbol)
                self._logger.info("Confirmed %s (%s/%s): %s", symbol, i + 1, total, signature)
                self._emit(on_update, result)

        except ExecutionFailedError as exc:
            self._logger.exception("One-shot run stopped: %s", exc)
            result.status = RunStatus.PARTIAL if result.confirmations else RunStatus.FAILED
            result.error = str(exc)
            result.failed_asset = exc.asset_symbol
            self._emit(on_update, result)
            return result

        result.status = RunStatus.SUCCEEDED
        self._emit(on_update, result)
        return result
