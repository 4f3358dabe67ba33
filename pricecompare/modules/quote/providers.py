"""物流公司报价适配层。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from pricecompare.core.logger import get_logger
from pricecompare.modules.quote.normalizer import (
    fuzzy_match_city,
    is_same_city,
    is_same_province,
    normalize_province,
)
from pricecompare.modules.quote.pricing import safe_ceil
from pricecompare.modules.quote.rate_tables import ANNENG_STANDARD, ANNENG_TIMED, RateTables

XINLIANG = "新亮物流"
SF = "顺丰快递"
SHENTONG = "申通快递"
ANNENG_STANDARD_NAME = "安能标准"
ANNENG_TIMED_NAME = "安能定时达"

NOTE_FAILED = "计算失败"
NOTE_INVALID_WEIGHT = "重量必须大于0"
NOTE_NO_REGION = "暂无该地区价格"


@dataclass(slots=True)
class ProviderQuote:
    """单个物流公司的报价；price 为 None 表示无报价。"""

    company: str
    price: float | None = None
    lead_time: str | None = None
    note: str | None = None

    @property
    def available(self) -> bool:
        return self.price is not None and self.price > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "company": self.company,
            "price": self.price,
            "lead_time": self.lead_time,
            "note": self.note,
        }


def _number(value: Any) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lookup_province(table: dict[str, Any], province: str) -> Any:
    """省份键可能带或不带后缀，先精确再按标准化名称匹配。"""
    if province in table:
        return table[province]
    target = normalize_province(province)
    if not target:
        return None
    for key, value in table.items():
        if normalize_province(key) == target:
            return value
    return None


class IPriceResolver(ABC):
    """物流公司报价接口；单个公司失败不影响其他公司。"""

    company: str = ""

    def __init__(self, tables: RateTables):
        self.tables = tables
        self.logger = get_logger()

    def resolve(self, province: str, city: str, weight: float) -> ProviderQuote:
        if weight is None or weight <= 0:
            return ProviderQuote(self.company, None, note=NOTE_INVALID_WEIGHT)

        try:
            quote = self._resolve(str(province or "").strip(), str(city or "").strip(), float(weight))
        except Exception as e:
            self.logger.exception(f"{self.company} price calculation failed: {e}")
            return ProviderQuote(self.company, None, note=NOTE_FAILED)

        if quote.price is not None:
            quote.price = round(quote.price, 2)
        return quote

    @abstractmethod
    def _resolve(self, province: str, city: str, weight: float) -> ProviderQuote:
        pass

    def _no_quote(self, note: str) -> ProviderQuote:
        return ProviderQuote(self.company, None, note=note)


class XinliangResolver(IPriceResolver):
    """新亮物流：省 -> 市 价格表，50kg 内一口价，超出按重量段单价。"""

    company = XINLIANG
    FIXED_BAND = "≤50kg"
    FIXED_LIMIT_KG = 50.0
    BANDS: tuple[tuple[float, str], ...] = (
        (200.0, "50-200kg"),
        (500.0, "200-500kg"),
        (1000.0, "500-1000kg"),
    )

    def _resolve(self, province: str, city: str, weight: float) -> ProviderQuote:
        cities = _lookup_province(self.tables.xinliang.get("data", {}), province)
        if not cities:
            return self._no_quote(NOTE_NO_REGION)

        city_name, entry, approximate = self._match_city(cities, city)
        rates = entry.get("rates") or {}

        band = self.band_for(weight)
        rate = _number(rates.get(band))
        if rate is None or rate <= 0:
            return self._no_quote(f"缺少{band}价格")
        price = rate if band == self.FIXED_BAND else weight * rate

        lead_days = entry.get("lead_time_days")
        lead_time = f"{lead_days}天" if lead_days not in (None, "") else None
        note = f"参考{city_name}价格（近似）" if approximate else None
        return ProviderQuote(self.company, price, lead_time=lead_time, note=note)

    @classmethod
    def band_for(cls, weight: float) -> str:
        if weight <= cls.FIXED_LIMIT_KG:
            return cls.FIXED_BAND
        for limit, band in cls.BANDS:
            if weight <= limit:
                return band
        return "1000-3000kg" if weight < 3000 else "≥3000kg"

    @staticmethod
    def _match_city(cities: dict[str, Any], city: str) -> tuple[str, dict[str, Any], bool]:
        if city:
            for name, entry in cities.items():
                if is_same_city(name, city):
                    return name, entry, False
            for name, entry in cities.items():
                if fuzzy_match_city(city, name):
                    return name, entry, False

        name, entry = next(iter(cities.items()))
        return name, entry, True


class SFResolver(IPriceResolver):
    """顺丰：按省首重 + 续重，仅承接 20kg 以内。"""

    company = SF
    MAX_WEIGHT_KG = 20.0

    def _resolve(self, province: str, city: str, weight: float) -> ProviderQuote:
        if weight > self.MAX_WEIGHT_KG:
            return self._no_quote("顺丰快递仅支持20kg以内的包裹")

        region = _lookup_province(self.tables.sf.get("regions", {}), province)
        if not region:
            return self._no_quote(NOTE_NO_REGION)

        first_kg = _number(region.get("first_kg"))
        additional = _number(region.get("additional_per_kg")) or 0.0
        if first_kg is None:
            return self._no_quote(NOTE_NO_REGION)

        price = first_kg if weight <= 1 else first_kg + (weight - 1) * additional
        return ProviderQuote(self.company, price, lead_time=region.get("lead_time"))


class ShentongResolver(IPriceResolver):
    """
    申通：

    - 阶梯省份：1/2/3kg 内分别 3.0/3.8/4.5，超出 3kg 每公斤按省份单价向上取整计
    - 偏远省份：基础费 6.0 + 重量 × 省份单价
    - 其他省份：按地区数据 base + 续重 × extra_per_kg
    """

    company = SHENTONG

    TIERED_RATES: dict[str, float] = {
        "江苏": 1.0,
        "浙江": 1.0,
        "上海": 1.2,
        "安徽": 1.2,
    }
    TIERED_STAGES: tuple[tuple[float, float], ...] = ((1.0, 3.0), (2.0, 3.8), (3.0, 4.5))

    FLAT_BASE = 6.0
    FLAT_RATES: dict[str, float] = {
        "新疆": 8.0,
        "西藏": 10.0,
        "青海": 6.0,
        "宁夏": 5.0,
        "甘肃": 5.0,
        "内蒙古": 5.0,
        "海南": 4.0,
    }

    def _resolve(self, province: str, city: str, weight: float) -> ProviderQuote:
        key = normalize_province(province)

        if key in self.TIERED_RATES:
            for limit, stage_price in self.TIERED_STAGES:
                if weight <= limit:
                    return ProviderQuote(self.company, stage_price)
            last_limit, last_price = self.TIERED_STAGES[-1]
            price = last_price + safe_ceil(weight - last_limit) * self.TIERED_RATES[key]
            return ProviderQuote(self.company, price)

        if key in self.FLAT_RATES:
            return ProviderQuote(self.company, self.FLAT_BASE + weight * self.FLAT_RATES[key])

        region = _lookup_province(self.tables.shentong.get("regions", {}), province)
        if not region:
            return self._no_quote(NOTE_NO_REGION)

        base = _number(region.get("base"))
        extra = _number(region.get("extra_per_kg")) or 0.0
        if base is None:
            return self._no_quote(NOTE_NO_REGION)
        price = base + max(0.0, weight - 1) * extra
        return ProviderQuote(self.company, price, lead_time=region.get("lead_time"))


class AnnengResolver(IPriceResolver):
    """安能（标准 / 定时达）：城市优先、省份兜底，最低计费 15kg，加收固定 5 元。"""

    MIN_BILLABLE_KG = 15.0
    MAX_WEIGHT_KG = 70.0
    SURCHARGE = 5.0

    _VARIANT_NAMES = {
        ANNENG_STANDARD: ANNENG_STANDARD_NAME,
        ANNENG_TIMED: ANNENG_TIMED_NAME,
    }

    def __init__(self, tables: RateTables, variant: str = ANNENG_STANDARD):
        if variant not in self._VARIANT_NAMES:
            raise ValueError(f"Unknown anneng variant: {variant}")
        super().__init__(tables)
        self.variant = variant
        self.company = self._VARIANT_NAMES[variant]

    def _resolve(self, province: str, city: str, weight: float) -> ProviderQuote:
        if weight > self.MAX_WEIGHT_KG:
            return self._no_quote(f"{self.company}仅支持70kg以内的货物")

        rows = self.tables.anneng.get("tables", {}).get(self.variant) or []
        row, precise = self._match_row(rows, province, city)
        if row is None:
            return self._no_quote(NOTE_NO_REGION)

        unit_price = _number(row.get("unit_price"))
        if not unit_price or unit_price <= 0:
            return self._no_quote(NOTE_NO_REGION)

        effective_weight = max(weight, self.MIN_BILLABLE_KG)
        price = unit_price * effective_weight + self.SURCHARGE

        notes = ["城市精确匹配" if precise else "省份参考价"]
        if weight < self.MIN_BILLABLE_KG:
            notes.append("按最低计费重量15kg计费")
        return ProviderQuote(self.company, price, lead_time=row.get("time"), note="，".join(notes))

    @staticmethod
    def _match_row(rows: list[dict[str, Any]], province: str, city: str) -> tuple[dict[str, Any] | None, bool]:
        if not normalize_province(province):
            return None, False
        same_province = [row for row in rows if is_same_province(row.get("province"), province)]
        if city:
            for row in same_province:
                if any(fuzzy_match_city(city, item) for item in row.get("cities") or []):
                    return row, True
        if same_province:
            return same_province[0], False
        return None, False


def default_resolvers(tables: RateTables) -> list[IPriceResolver]:
    return [
        XinliangResolver(tables),
        SFResolver(tables),
        ShentongResolver(tables),
        AnnengResolver(tables, ANNENG_STANDARD),
        AnnengResolver(tables, ANNENG_TIMED),
    ]
