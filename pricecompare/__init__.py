"""
物流比价计算器
Express Price Compare

按目的地与重量查询各物流公司运价，按计价规则计算并给出排序后的报价列表；
附带利润点计算器。
"""

__version__ = "1.0.0"
__author__ = "Project Team"

from .core.config import Config
from .core.logger import Logger

__all__ = [
    "Config",
    "Logger",
    "__version__",
]
