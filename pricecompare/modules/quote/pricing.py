"""
计价模型求值
Pricing Model Evaluator

给定重量与一条计价规则，按规则的模型类型计算价格。
返回 None 表示该规则不适用（调用方视为无报价）。
"""

from __future__ import annotations

import json
import math
from typing import Any

from pricecompare.core.error_handler import PricingModelError, RuleValidationError
from pricecompare.core.logger import get_logger
from pricecompare.modules.quote.models import (
    EXCEPTION_PER_KG_ONLY,
    ROUNDING_MODES,
    RULE_TYPES,
    ComplexTieredRule,
    FirstAdditionalRule,
    FirstPlusTieredFlatRateRule,
    PriceRule,
    PriceTier,
    TieredMinimumChargeRule,
)

# 向上取整前先收敛浮点误差，避免 0.6*5=3.0000000000000004 进位到 3.2
_CEIL_PRECISION = 6


def safe_ceil(value: float) -> int:
    return math.ceil(round(value, _CEIL_PRECISION))


def apply_rounding(price: float, mode: str | None) -> float:
    if not mode or mode == "none":
        return price
    if mode == "up_to_0.2":
        return safe_ceil(price * 5) / 5
    if mode == "up_to_1":
        return float(safe_ceil(price))
    return price


def calculate_price(weight: float, rule: PriceRule) -> float | None:
    if weight <= 0:
        return 0.0

    if isinstance(rule, FirstAdditionalRule):
        return _first_additional(weight, rule)
    if isinstance(rule, TieredMinimumChargeRule):
        return _tiered_minimum_charge(weight, rule)
    if isinstance(rule, ComplexTieredRule):
        return _complex_tiered(weight, rule)
    if isinstance(rule, FirstPlusTieredFlatRateRule):
        return _first_plus_tiered_flat_rate(weight, rule)

    raise PricingModelError(
        "Missing or unknown pricing model type",
        {"rule": getattr(rule, "rule_name", repr(rule))},
    )


def _first_additional(weight: float, rule: FirstAdditionalRule) -> float:
    if (
        rule.exception_threshold_kg
        and weight >= rule.exception_threshold_kg
        and rule.exception_formula == EXCEPTION_PER_KG_ONLY
    ):
        return weight * rule.additional_weight_price_per_kg

    if weight <= rule.first_weight_kg:
        return rule.first_weight_price

    additional = safe_ceil(weight - rule.first_weight_kg)
    return rule.first_weight_price + additional * rule.additional_weight_price_per_kg


def _select_tier(weight: float, tiers: list[PriceTier]) -> PriceTier | None:
    return next((tier for tier in tiers if tier.matches(weight)), None)


def _tiered_minimum_charge(weight: float, rule: TieredMinimumChargeRule) -> float | None:
    tier = _select_tier(weight, rule.tiers)
    if tier is None:
        return None

    price = 0.0
    if tier.flat_price:
        price = tier.flat_price
    elif tier.price_per_kg:
        price = weight * tier.price_per_kg
    return max(price, rule.minimum_charge)


def _complex_tiered(weight: float, rule: ComplexTieredRule) -> float | None:
    # 命中但无价格的分段跳过，继续向后找
    for tier in rule.tiers:
        if not tier.matches(weight):
            continue
        if tier.flat_price:
            return apply_rounding(tier.flat_price, rule.rounding)
        if tier.price_per_kg:
            price = weight * tier.price_per_kg
            if tier.base_fee:
                price += tier.base_fee
            return apply_rounding(price, rule.rounding)
    return None


def _first_plus_tiered_flat_rate(weight: float, rule: FirstPlusTieredFlatRateRule) -> float | None:
    if weight <= rule.first_weight_kg:
        return rule.first_weight_price

    # 分段按总重量划分，而非超出首重的部分
    for tier in rule.tiers:
        if tier.matches(weight) and tier.flat_price:
            return tier.flat_price
    return None


def format_price(price: float, currency: str = "CNY") -> str:
    return f"¥{price:.2f}"


def get_price_difference(price1: float, price2: float) -> float:
    """price1 相对 price2 的差异百分比。"""
    if price2 == 0:
        return 0.0
    return (price1 - price2) / price2 * 100


# ---------------------------------------------------------------------------
# 规则加载
# ---------------------------------------------------------------------------

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "rule_name": ("RuleName", "规则名称"),
    "company_name": ("CompanyName", "物流公司"),
    "destination": ("Destination", "目的地"),
    "client": ("Client", "所属客户"),
}


def _pick(record: dict[str, Any], key: str) -> Any:
    for alias in _FIELD_ALIASES.get(key, (key,)):
        value = record.get(alias)
        if value not in (None, "", []):
            return value
    return None


def _text(value: Any) -> str:
    # 关联字段可能是列表
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value if item not in (None, ""))
    return str(value or "").strip()


def _number(value: Any) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_tiers(raw: Any, rule_name: str) -> list[PriceTier]:
    if raw in (None, ""):
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RuleValidationError(
                f"Invalid Tiers JSON for rule {rule_name}",
                {"rule": rule_name, "tiers": raw, "error": str(e)},
            ) from e
    if not isinstance(raw, list):
        raise RuleValidationError(f"Tiers must be a list for rule {rule_name}", {"rule": rule_name})

    tiers: list[PriceTier] = []
    for item in raw:
        if not isinstance(item, dict):
            raise RuleValidationError(f"Invalid tier entry for rule {rule_name}", {"tier": item})
        tiers.append(
            PriceTier(
                up_to_kg=_number(item.get("upToKg")),
                price_per_kg=_number(item.get("pricePerKg")),
                flat_price=_number(item.get("flatPrice")),
                base_fee=_number(item.get("baseFee")),
            )
        )
    return tiers


def _require(value: Any, field_name: str, rule_name: str, model_type: str) -> Any:
    if not value:
        raise RuleValidationError(
            f"Rule {rule_name} missing {field_name} for {model_type}",
            {"rule": rule_name, "model_type": model_type, "field": field_name},
        )
    return value


def parse_price_rule(record: dict[str, Any]) -> PriceRule:
    """
    将数据源中的一条记录转换为计价规则

    支持 {"id": ..., "fields": {...}} 形式和平铺字典，字段名中英文均可。

    Raises:
        RuleValidationError: 缺少规则名、模型类型或模型必需字段
    """
    rule_id = ""
    fields = record
    if isinstance(record.get("fields"), dict):
        rule_id = str(record.get("id") or "")
        fields = record["fields"]
    rule_id = rule_id or str(fields.get("id") or fields.get("RuleId") or "")

    rule_name = _text(_pick(fields, "rule_name"))
    if not rule_name:
        raise RuleValidationError("Rule without name", {"record": fields})

    model_type = _text(fields.get("ModelType"))
    if not model_type:
        raise RuleValidationError(f"Rule {rule_name} without ModelType", {"rule": rule_name})
    if model_type not in RULE_TYPES:
        raise RuleValidationError(
            f"Rule {rule_name} has unknown ModelType {model_type}",
            {"rule": rule_name, "model_type": model_type},
        )

    meta = {
        "rule_name": rule_name,
        "company_name": _text(_pick(fields, "company_name")),
        "destination": _text(_pick(fields, "destination")),
        "timeliness": _text(fields.get("Timeliness")),
        "client": _text(_pick(fields, "client")),
        "rule_id": rule_id,
    }
    tiers = _parse_tiers(fields.get("Tiers"), rule_name)
    first_weight_kg = _number(fields.get("FirstWeightKg")) or 1.0

    if model_type == FirstAdditionalRule.MODEL_TYPE:
        return FirstAdditionalRule(
            **meta,
            first_weight_price=_require(
                _number(fields.get("FirstWeightPrice")), "FirstWeightPrice", rule_name, model_type
            ),
            additional_weight_price_per_kg=_require(
                _number(fields.get("AdditionalWeightPricePerKg")),
                "AdditionalWeightPricePerKg",
                rule_name,
                model_type,
            ),
            first_weight_kg=first_weight_kg,
            exception_threshold_kg=_number(fields.get("ExceptionThresholdKg")),
            exception_formula=_text(fields.get("ExceptionFormula")) or None,
        )

    if model_type == TieredMinimumChargeRule.MODEL_TYPE:
        return TieredMinimumChargeRule(
            **meta,
            minimum_charge=_require(
                _number(fields.get("MinimumCharge")), "MinimumCharge", rule_name, model_type
            ),
            tiers=_require(tiers, "Tiers", rule_name, model_type),
        )

    if model_type == ComplexTieredRule.MODEL_TYPE:
        rounding = _text(fields.get("Rounding")) or "none"
        if rounding not in ROUNDING_MODES:
            raise RuleValidationError(
                f"Rule {rule_name} has unknown rounding {rounding}",
                {"rule": rule_name, "rounding": rounding},
            )
        return ComplexTieredRule(
            **meta,
            tiers=_require(tiers, "Tiers", rule_name, model_type),
            rounding=rounding,
        )

    return FirstPlusTieredFlatRateRule(
        **meta,
        first_weight_price=_require(
            _number(fields.get("FirstWeightPrice")), "FirstWeightPrice", rule_name, model_type
        ),
        tiers=_require(tiers, "Tiers", rule_name, model_type),
        first_weight_kg=first_weight_kg,
    )


def load_price_rules(records: list[dict[str, Any]]) -> list[PriceRule]:
    logger = get_logger()
    rules: list[PriceRule] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object rule record: {record!r}")
            continue
        try:
            rules.append(parse_price_rule(record))
        except RuleValidationError as e:
            logger.warning(f"Skipping rule: {e.message}")

    logger.info(f"Loaded {len(rules)} valid rules out of {len(records)} total rules")
    return rules
