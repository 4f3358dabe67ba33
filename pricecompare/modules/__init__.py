"""
功能模块
Modules

物流比价与利润点计算
"""

from .profit.history import CalculationHistory
from .quote.engine import QuoteAggregator
from .quote.service import PriceCompareService

__all__ = [
    "CalculationHistory",
    "PriceCompareService",
    "QuoteAggregator",
]
