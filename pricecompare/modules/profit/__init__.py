"""利润点计算模块。"""

from .calculator import (
    NPointOutputs,
    ProfitPointOutputs,
    calculate_n_point_price,
    calculate_profit_point,
    format_price,
)
from .history import (
    CalculationHistory,
    CalculationRecord,
    CommandClipboard,
    IClipboard,
    IHistoryStorage,
    JsonFileHistoryStorage,
    MemoryClipboard,
    MemoryHistoryStorage,
    copy_to_clipboard,
)

__all__ = [
    "CalculationHistory",
    "CalculationRecord",
    "CommandClipboard",
    "IClipboard",
    "IHistoryStorage",
    "JsonFileHistoryStorage",
    "MemoryClipboard",
    "MemoryHistoryStorage",
    "NPointOutputs",
    "ProfitPointOutputs",
    "calculate_n_point_price",
    "calculate_profit_point",
    "copy_to_clipboard",
    "format_price",
]
