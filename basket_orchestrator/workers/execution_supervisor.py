import logging
import time
from typing import Callable, Dict, List, Optional

from ..adapters.external.catalog.static_catalog import StaticAssetRepository, StaticBasketRepository
from ..adapters.external.jupiter.jupiter_price_client import JupiterPriceClient
from ..adapters.external.jupiter.jupiter_recurring_client import JupiterRecurringClient
from ..adapters.external.jupiter.jupiter_swap_client import JupiterSwapClient
from ..adapters.external.solana.keypair_signer import DisconnectedSigner, KeypairSigner
from ..adapters.external.solana.solana_rpc_client import SolanaRpcClient
from ..config import Settings, get_settings
from ..core.domain.enums.execution_enums import PurchaseMode
from ..core.interfaces.ledger_client import LedgerClient
from ..core.interfaces.price_feed import PriceFeed
from ..core.interfaces.quote_client import QuoteClient
from ..core.interfaces.recurring_order_client import RecurringOrderClient
from ..core.interfaces.swap_client import SwapClient
from ..core.interfaces.wallet_signer import WalletSigner
from ..core.repositories.asset_repository import AssetRepository
from ..core.repositories.basket_repository import BasketRepository
from ..core.services.basket_session import BasketSession
from ..core.usecases.create_recurring_buy_use_case import CreateRecurringBuyUseCase
from ..core.usecases.execute_one_shot_use_case import ExecuteOneShotUseCase
from ..core.usecases.execute_recurring_use_case import ExecuteRecurringUseCase
from ..core.usecases.fetch_quotes_use_case import FetchQuotesUseCase


class ExecutionSupervisor:
    """
    High-level supervisor for the orchestrator process.

    Responsibilities:
    - Build the external clients (Jupiter, Solana RPC, signer) from Settings,
      unless they were injected.
    - Wire repositories and use cases.
    - Own the in-memory session registry used by the HTTP layer.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        asset_repository: Optional[AssetRepository] = None,
        basket_repository: Optional[BasketRepository] = None,
        quote_client: Optional[QuoteClient] = None,
        swap_client: Optional[SwapClient] = None,
        ledger_client: Optional[LedgerClient] = None,
        recurring_client: Optional[RecurringOrderClient] = None,
        price_feed: Optional[PriceFeed] = None,
        signer: Optional[WalletSigner] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._logger = logging.getLogger(self.__class__.__name__)
        self._settings = settings or get_settings()

        self._assets = asset_repository
        self._baskets = basket_repository
        self._quote_client = quote_client
        self._swap_client = swap_client
        self._ledger = ledger_client
        self._recurring_client = recurring_client
        self._price_feed = price_feed
        self._signer = signer

        self._fetch_quotes_uc: FetchQuotesUseCase | None = None
        self._one_shot_uc: ExecuteOneShotUseCase | None = None
        self._recurring_uc: ExecuteRecurringUseCase | None = None
        self._recurring_buy_uc: CreateRecurringBuyUseCase | None = None

        self._owned_rpc: Optional[SolanaRpcClient] = None

        self._sessions: Dict[str, BasketSession] = {}
        self._last_seen: Dict[str, float] = {}
        self._clock = clock
        self._started = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def assets(self) -> AssetRepository:
        return self._assets

    @property
    def baskets(self) -> BasketRepository:
        return self._baskets

    @property
    def price_feed(self) -> PriceFeed:
        return self._price_feed

    @property
    def signer(self) -> WalletSigner:
        return self._signer

    @property
    def recurring_buy(self) -> CreateRecurringBuyUseCase:
        return self._recurring_buy_uc

    def _build_signer(self) -> WalletSigner:
        if not self._settings.SOLANA_PRIVATE_KEY:
            self._logger.warning("SOLANA_PRIVATE_KEY not set; wallet is disconnected.")
            return DisconnectedSigner()
        return KeypairSigner.from_secret(self._settings.SOLANA_PRIVATE_KEY)

    async def start(self):
        """
        Create clients and use cases. Idempotent.
        """
        if self._started:
            return
        s = self._settings

        self._assets = self._assets or StaticAssetRepository()
        self._baskets = self._baskets or StaticBasketRepository()

        if self._quote_client is None or self._swap_client is None:
            jupiter = JupiterSwapClient(s.JUPITER_API_BASE, timeout_sec=s.HTTP_TIMEOUT_SEC)
            self._quote_client = self._quote_client or jupiter
            self._swap_client = self._swap_client or jupiter
        if self._ledger is None:
            self._owned_rpc = SolanaRpcClient(s.SOLANA_RPC_URL, timeout_sec=s.HTTP_TIMEOUT_SEC)
            self._ledger = self._owned_rpc
        self._recurring_client = self._recurring_client or JupiterRecurringClient(
            s.JUPITER_API_BASE, timeout_sec=s.HTTP_TIMEOUT_SEC
        )
        self._price_feed = self._price_feed or JupiterPriceClient(s.JUPITER_PRICE_API_BASE)
        self._signer = self._signer or self._build_signer()

        self._fetch_quotes_uc = FetchQuotesUseCase(
            quote_client=self._quote_client,
            asset_repository=self._assets,
            input_mint=s.INPUT_MINT,
            slippage_bps=s.QUOTE_SLIPPAGE_BPS,
        )
        self._one_shot_uc = ExecuteOneShotUseCase(
            swap_client=self._swap_client,
            ledger_client=self._ledger,
            asset_repository=self._assets,
            submit_policy=s.submit_policy(),
        )
        self._recurring_uc = ExecuteRecurringUseCase(
            recurring_client=self._recurring_client,
            asset_repository=self._assets,
            input_mint=s.INPUT_MINT,
            input_decimals=s.INPUT_DECIMALS,
        )
        self._recurring_buy_uc = CreateRecurringBuyUseCase(
            recurring_client=self._recurring_client,
            input_mint=s.INPUT_MINT,
            input_decimals=s.INPUT_DECIMALS,
            input_symbol=s.INPUT_SYMBOL,
            min_per_order_usd=s.RECURRING_BUY_MIN_PER_ORDER_USD,
            min_total_usd=s.RECURRING_BUY_MIN_TOTAL_USD,
        )

        self._started = True
        self._logger.info("Supervisor started (env=%s, wallet=%s)", s.ENV, self._signer.address or "-")

    async def stop(self):
        """
        Abandon every open session. In-flight runs are not cancelled, their
        updates are simply ignored from now on.
        """
        for session in self._sessions.values():
            session.abandon()
        self._sessions.clear()
        self._last_seen.clear()
        if self._owned_rpc is not None:
            await self._owned_rpc.close()
            self._owned_rpc = None
            self._ledger = None
        self._started = False
        self._logger.info("Supervisor stopped")

    # ---------- sessions ----------

    def _drop(self, session_id: str) -> Optional[BasketSession]:
        self._last_seen.pop(session_id, None)
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.abandon()
        return session

    def evict_idle_sessions(self) -> List[str]:
        """
        Drop sessions nobody touched for SESSION_IDLE_TTL_SEC, then the least
        recently used idle ones while the registry is at MAX_SESSIONS.
        Sessions with a run in flight are never evicted.

        :return: ids of the evicted sessions.
        """
        now = self._clock()
        ttl = self._settings.SESSION_IDLE_TTL_SEC
        idle = sorted(
            (sid for sid, s in self._sessions.items() if not s.busy),
            key=lambda sid: self._last_seen.get(sid, now),
        )

        evicted = [sid for sid in idle if now - self._last_seen.get(sid, now) >= ttl]
        over = len(self._sessions) - len(evicted) - (self._settings.MAX_SESSIONS - 1)
        if over > 0:
            evicted += [sid for sid in idle if sid not in evicted][:over]

        for sid in evicted:
            self._drop(sid)
        if evicted:
            self._logger.info("Evicted %s idle session(s)", len(evicted))
        return evicted

    def open_session(
        self,
        basket_id: str,
        amount: float = 0.0,
        mode: PurchaseMode = PurchaseMode.ONCE,
        order_count: Optional[int] = None,
        interval_seconds: Optional[int] = None,
    ) -> BasketSession:
        """
        :raises KeyError: unknown basket id.
        :raises BasketUnavailableError: basket is disabled.
        """
        basket = self._baskets.get(basket_id)
        if basket is None:
            raise KeyError(basket_id)

        session = BasketSession(
            basket=basket,
            basket_repository=self._baskets,
            asset_repository=self._assets,
            fetch_quotes_use_case=self._fetch_quotes_uc,
            one_shot_use_case=self._one_shot_uc,
            recurring_use_case=self._recurring_uc,
            signer=self._signer,
            input_decimals=self._settings.INPUT_DECIMALS,
            amount=amount,
            mode=mode,
            order_count=order_count if order_count is not None else self._settings.DEFAULT_DCA_ORDERS,
            interval_seconds=(
                interval_seconds if interval_seconds is not None else self._settings.DEFAULT_DCA_INTERVAL_SEC
            ),
            min_per_order_usd=self._settings.BASKET_DCA_MIN_PER_ORDER_USD,
        )
        self.evict_idle_sessions()
        self._sessions[session.id] = session
        self._last_seen[session.id] = self._clock()
        self._logger.info("Session %s opened for basket %s", session.id, basket_id)
        return session

    def get_session(self, session_id: str) -> Optional[BasketSession]:
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self._clock()
        return session

    def close_session(self, session_id: str) -> bool:
        if self._drop(session_id) is None:
            return False
        self._logger.info("Session %s closed", session_id)
        return True
