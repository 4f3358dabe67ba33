"""
利润点计算
Profit Calculator

- N 点售价：已知成本与利润率（占售价百分比），求售价与利润
- 赚几个点：已知成本与售价，求利润率
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(value: float, digits: int = 2) -> float:
    """四舍五入（0.5 向上），与 round() 的银行家舍入不同。"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


@dataclass(slots=True)
class NPointOutputs:
    profit: float
    price: float
    tax_price: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"profit": self.profit, "price": self.price, "taxPrice": self.tax_price}


@dataclass(slots=True)
class ProfitPointOutputs:
    profit_rate: float

    def to_dict(self) -> dict[str, float]:
        return {"profitRate": self.profit_rate}


def calculate_n_point_price(cost: float, profit_rate: float) -> NPointOutputs | None:
    """售价 = 成本 / (1 - 利润率)；输入非法返回 None。"""
    if cost <= 0 or profit_rate < 0 or profit_rate >= 100:
        return None

    price = cost / (1 - profit_rate / 100)
    profit = price - cost
    return NPointOutputs(profit=round_half_up(profit), price=round_half_up(price))


def calculate_profit_point(cost: float, price: float) -> ProfitPointOutputs | None:
    """利润率 = (售价 - 成本) / 售价 × 100；输入非法返回 None。"""
    if cost <= 0 or price <= 0:
        return None

    profit_rate = (price - cost) / price * 100
    return ProfitPointOutputs(profit_rate=round_half_up(profit_rate))


def format_price(price: float) -> str:
    return f"{price:.2f}"
