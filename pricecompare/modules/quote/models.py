"""比价领域模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

ROUNDING_MODES: tuple[str, ...] = ("none", "up_to_0.2", "up_to_1")
EXCEPTION_PER_KG_ONLY = "per_kg_only"


@dataclass(frozen=True, slots=True)
class PriceTier:
    """价格分段；up_to_kg 为 None 表示无上限。"""

    up_to_kg: float | None = None
    price_per_kg: float | None = None
    flat_price: float | None = None
    base_fee: float | None = None

    def matches(self, weight: float) -> bool:
        return self.up_to_kg is None or weight <= self.up_to_kg

    def to_dict(self) -> dict[str, Any]:
        return {
            "upToKg": self.up_to_kg,
            "pricePerKg": self.price_per_kg,
            "flatPrice": self.flat_price,
            "baseFee": self.base_fee,
        }


@dataclass(slots=True, kw_only=True)
class _RuleMeta:
    rule_name: str
    company_name: str = ""
    destination: str = ""
    timeliness: str = ""
    client: str = ""
    rule_id: str = ""

    MODEL_TYPE: ClassVar[str] = ""

    @property
    def model_type(self) -> str:
        return self.MODEL_TYPE


@dataclass(slots=True, kw_only=True)
class FirstAdditionalRule(_RuleMeta):
    """首重 + 续重，续重按整公斤向上取整。"""

    MODEL_TYPE: ClassVar[str] = "first_additional"

    first_weight_price: float
    additional_weight_price_per_kg: float
    first_weight_kg: float = 1.0
    exception_threshold_kg: float | None = None
    exception_formula: str | None = None


@dataclass(slots=True, kw_only=True)
class TieredMinimumChargeRule(_RuleMeta):
    """分段计价 + 最低收费。"""

    MODEL_TYPE: ClassVar[str] = "tiered_minimum_charge"

    minimum_charge: float
    tiers: list[PriceTier] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ComplexTieredRule(_RuleMeta):
    """复杂分段：固定价或（基础费 + 单价 × 重量），支持进位。"""

    MODEL_TYPE: ClassVar[str] = "complex_tiered"

    tiers: list[PriceTier] = field(default_factory=list)
    rounding: str = "none"


@dataclass(slots=True, kw_only=True)
class FirstPlusTieredFlatRateRule(_RuleMeta):
    """首重 + 按总重量分段的固定价。"""

    MODEL_TYPE: ClassVar[str] = "first_plus_tiered_flat_rate"

    first_weight_price: float
    tiers: list[PriceTier] = field(default_factory=list)
    first_weight_kg: float = 1.0


PriceRule = Union[
    FirstAdditionalRule,
    TieredMinimumChargeRule,
    ComplexTieredRule,
    FirstPlusTieredFlatRateRule,
]

RULE_TYPES: dict[str, type] = {
    cls.MODEL_TYPE: cls
    for cls in (
        FirstAdditionalRule,
        TieredMinimumChargeRule,
        ComplexTieredRule,
        FirstPlusTieredFlatRateRule,
    )
}


@dataclass(slots=True)
class PriceResult:
    """单个物流公司的报价结果。"""

    company: str
    price: float
    currency: str = "CNY"
    lead_time: str | None = None
    is_cheapest: bool = False
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "company": self.company,
            "price": round(self.price, 2),
            "currency": self.currency,
            "lead_time": self.lead_time,
            "is_cheapest": self.is_cheapest,
            "note": self.note,
        }
