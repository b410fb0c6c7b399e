# basket_orchestrator/core/domain/enums/catalog_enums.py

from enum import Enum


class AssetCategory(str, Enum):
    STOCKS = "stocks"
    CRYPTO = "crypto"
    PRE_IPO = "pre-ipo"
    INDEX = "index"
    COMMODITIES = "commodities"


class BasketRisk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
