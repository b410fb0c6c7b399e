"""
Tokenized asset catalog. Plain data, loaded once and never mutated.
"""

from ..config import NATIVE_SOL_MINT, USDC_MINT
from ..core.domain.entities.catalog_entity import Asset
from ..core.domain.enums.catalog_enums import AssetCategory

USDC = Asset(
    symbol="USDC", name="USD Coin", mint=USDC_MINT, decimals=6,
    ticker="USDC", category=AssetCategory.CRYPTO,
)

STOCKS = (
    Asset(symbol="NVDAx", name="NVIDIA Corporation", mint="Xsc9qvGR1efVDFGLrVsmkzv3qi45LTBjeUKSPmx9qEh",
          decimals=9, ticker="NVDA", category=AssetCategory.STOCKS),
    Asset(symbol="AAPLx", name="Apple xStock", mint="XsbEhLAtcf6HdfpFZ5xEMdqW8nfAvcsP5bdudRLJzJp",
          decimals=9, ticker="AAPL", category=AssetCategory.STOCKS),
    Asset(symbol="AMZNx", name="Amazon.com xStock", mint="Xs3eBt7uRfJX8QUs4suhyU8p2M6DoUDrJyWBa8LLZsg",
          decimals=9, ticker="AMZN", category=AssetCategory.STOCKS),
    Asset(symbol="TSLAx", name="Tesla xStock", mint="XsDoVfqeBukxuZHWhdvWHBhgEHjGNst4MLodqsJHzoB",
          decimals=9, ticker="TSLA", category=AssetCategory.STOCKS),
    Asset(symbol="GOOGLx", name="Alphabet xStock", mint="XsCPL9dNWBMvFtTmwcCA5v3xWPSMEBCszbQdiLLq6aN",
          decimals=9, ticker="GOOGL", category=AssetCategory.STOCKS),
    Asset(symbol="METAx", name="Meta Platforms xStock", mint="Xsa62P5mvPszXL1krVUnU5ar38bBSVcWAB6fmPCo5Zu",
          decimals=9, ticker="META", category=AssetCategory.STOCKS),
    Asset(symbol="MSFTx", name="Microsoft xStock", mint="XspzcW1PRtgf6Wj92HCiZdjzKCyFekVD8P5Ueh3dRMX",
          decimals=9, ticker="MSFT", category=AssetCategory.STOCKS),
    Asset(symbol="COINx", name="Coinbase Global, Inc.", mint="CbNYA9n3927sKrDffRomi6jkJn2ULL5NWP9mpt3hprvL",
          decimals=9, ticker="COIN", category=AssetCategory.STOCKS),
)

CRYPTO = (
    Asset(symbol="SOL", name="Solana", mint=NATIVE_SOL_MINT,
          decimals=9, ticker="SOL", category=AssetCategory.CRYPTO),
    Asset(symbol="BTC", name="Bitcoin (Portal)", mint="3NZ9JMVBmGAqocybic2c7LQCJScmgsAZ6vQqTDzcqmJh",
          decimals=8, ticker="BTC", category=AssetCategory.CRYPTO),
    Asset(symbol="ETH", name="Ether (Portal)", mint="7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs",
          decimals=8, ticker="ETH", category=AssetCategory.CRYPTO),
)

PRE_IPO = (
    Asset(symbol="xSPACEX", name="SpaceX", mint="PreANxuXjsy2pvisWWMNB6YaJNzr7681wJJr2rHsfTh",
          decimals=9, ticker="SPACEX", category=AssetCategory.PRE_IPO),
    Asset(symbol="xOPENAI", name="OpenAI", mint="PreweJYECqtQwBtpxHL171nL2K6umo692gTm7Q3rpgF",
          decimals=9, ticker="OPENAI", category=AssetCategory.PRE_IPO),
)

# index / commodity mints are placeholders until the tokens are live
INDICES = (
    Asset(symbol="xSPY", name="S&P 500 Index", mint="SPY500MintAddress111111111111111111111111111",
          decimals=9, ticker="SPY", category=AssetCategory.INDEX),
    Asset(symbol="xQQQ", name="Nasdaq 100 Index", mint="QQQNasdaqMintAddress1111111111111111111111111",
          decimals=9, ticker="QQQ", category=AssetCategory.INDEX),
    Asset(symbol="xDIA", name="Dow Jones Index", mint="DIADowJonesMintAddress11111111111111111111111",
          decimals=9, ticker="DIA", category=AssetCategory.INDEX),
)

COMMODITIES = (
    Asset(symbol="xGLD", name="Gold", mint="hWfiw4mcxT8rnNFkk6fsCQSxoxgZ9yVhB6tyeVcondo",
          decimals=9, ticker="GLD", category=AssetCategory.COMMODITIES),
    Asset(symbol="xSLV", name="Silver", mint="iy11ytbSGcUnrjE6Lfv78TFqxKyUESfku1FugS9ondo",
          decimals=9, ticker="SLV", category=AssetCategory.COMMODITIES),
)

ALL_ASSETS = STOCKS + CRYPTO + PRE_IPO + INDICES + COMMODITIES

CATEGORY_LABELS = {
    AssetCategory.STOCKS: "Stocks",
    AssetCategory.CRYPTO: "Crypto",
    AssetCategory.PRE_IPO: "Pre-IPO",
    AssetCategory.INDEX: "Indices",
    AssetCategory.COMMODITIES: "Commodities",
}
