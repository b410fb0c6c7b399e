import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

USDC_MINT = "EPjFWdd5AufqSSqeM2q2nG8maJBPV7ryjVgDQJ2Dh7eU"
NATIVE_SOL_MINT = "So11111111111111111111111111111111111111112"


@dataclass(frozen=True)
class SubmitPolicy:
    """
    Retry / confirmation policy handed to the ledger client for every submission.
    The ledger owns the actual retry loop, we only parameterize it.
    """
    skip_preflight: bool = False
    max_retries: int = 3
    commitment: str = "confirmed"
    confirm_timeout_sec: float = 60.0
    poll_interval_sec: float = 1.0


@dataclass
class Settings:
    # external services
    JUPITER_API_BASE: str
    JUPITER_PRICE_API_BASE: str
    SOLANA_RPC_URL: str

    # signing
    SOLANA_PRIVATE_KEY: str  # base58, 64 bytes

    # input asset every purchase is paid with
    INPUT_MINT: str = USDC_MINT
    INPUT_SYMBOL: str = "USDC"
    INPUT_DECIMALS: int = 6

    # quoting
    QUOTE_SLIPPAGE_BPS: int = 50

    # minimums, one per flow
    BASKET_DCA_MIN_PER_ORDER_USD: float = 2.0
    RECURRING_BUY_MIN_PER_ORDER_USD: float = 50.0
    RECURRING_BUY_MIN_TOTAL_USD: float = 100.0

    # recurring defaults
    DEFAULT_DCA_ORDERS: int = 4
    DEFAULT_DCA_INTERVAL_SEC: int = 604800

    # ledger submission
    SUBMIT_SKIP_PREFLIGHT: bool = False
    SUBMIT_MAX_RETRIES: int = 3
    CONFIRM_COMMITMENT: str = "confirmed"
    CONFIRM_TIMEOUT_SEC: float = 60.0
    CONFIRM_POLL_INTERVAL_SEC: float = 1.0

    HTTP_TIMEOUT_SEC: float = 30.0

    # session registry
    SESSION_IDLE_TTL_SEC: float = 3600.0
    MAX_SESSIONS: int = 1000

    # generic
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    def submit_policy(self) -> SubmitPolicy:
        return SubmitPolicy(
            skip_preflight=self.SUBMIT_SKIP_PREFLIGHT,
            max_retries=self.SUBMIT_MAX_RETRIES,
            commitment=self.CONFIRM_COMMITMENT,
            confirm_timeout_sec=self.CONFIRM_TIMEOUT_SEC,
            poll_interval_sec=self.CONFIRM_POLL_INTERVAL_SEC,
        )


def _bool(s: str | None) -> bool:
    return str(s or "").strip().lower() in ("1", "true", "yes", "y", "on")


@lru_cache()
def get_settings() -> Settings:
    return Settings(
        JUPITER_API_BASE=os.getenv("JUPITER_API_BASE", "https://lite-api.jup.ag"),
        JUPITER_PRICE_API_BASE=os.getenv("JUPITER_PRICE_API_BASE", "https://lite-api.jup.ag"),
        SOLANA_RPC_URL=os.getenv("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com"),
        SOLANA_PRIVATE_KEY=os.environ.get("SOLANA_PRIVATE_KEY", ""),  # keep empty when missing

        INPUT_MINT=os.getenv("INPUT_MINT", USDC_MINT),
        INPUT_SYMBOL=os.getenv("INPUT_SYMBOL", "USDC"),
        INPUT_DECIMALS=int(os.getenv("INPUT_DECIMALS", "6")),

        QUOTE_SLIPPAGE_BPS=int(os.getenv("QUOTE_SLIPPAGE_BPS", "50")),

        BASKET_DCA_MIN_PER_ORDER_USD=float(os.getenv("BASKET_DCA_MIN_PER_ORDER_USD", "2")),
        RECURRING_BUY_MIN_PER_ORDER_USD=float(os.getenv("RECURRING_BUY_MIN_PER_ORDER_USD", "50")),
        RECURRING_BUY_MIN_TOTAL_USD=float(os.getenv("RECURRING_BUY_MIN_TOTAL_USD", "100")),

        DEFAULT_DCA_ORDERS=int(os.getenv("DEFAULT_DCA_ORDERS", "4")),
        DEFAULT_DCA_INTERVAL_SEC=int(os.getenv("DEFAULT_DCA_INTERVAL_SEC", "604800")),

        SUBMIT_SKIP_PREFLIGHT=_bool(os.getenv("SUBMIT_SKIP_PREFLIGHT")),
        SUBMIT_MAX_RETRIES=int(os.getenv("SUBMIT_MAX_RETRIES", "3")),
        CONFIRM_COMMITMENT=os.getenv("CONFIRM_COMMITMENT", "confirmed"),
        CONFIRM_TIMEOUT_SEC=float(os.getenv("CONFIRM_TIMEOUT_SEC", "60")),
        CONFIRM_POLL_INTERVAL_SEC=float(os.getenv("CONFIRM_POLL_INTERVAL_SEC", "1.0")),

        HTTP_TIMEOUT_SEC=float(os.getenv("HTTP_TIMEOUT_SEC", "30")),

        SESSION_IDLE_TTL_SEC=float(os.getenv("SESSION_IDLE_TTL_SEC", "3600")),
        MAX_SESSIONS=int(os.getenv("MAX_SESSIONS", "1000")),

        ENV=os.getenv("ENV", "dev"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "8000")),
    )
