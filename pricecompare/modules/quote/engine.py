"""比价引擎：汇总各物流公司报价，排序并标记最低价。"""

from __future__ import annotations

from copy import deepcopy

from pricecompare.core.error_handler import log_execution_time
from pricecompare.core.logger import get_logger
from pricecompare.modules.quote.cache import QuoteCache
from pricecompare.modules.quote.location_matcher import (
    AddressMatch,
    ILocationMatcher,
    Location,
    parse_address_with_locations,
)
from pricecompare.modules.quote.models import PriceResult, PriceRule
from pricecompare.modules.quote.pricing import calculate_price
from pricecompare.modules.quote.providers import IPriceResolver, ProviderQuote, default_resolvers
from pricecompare.modules.quote.rate_tables import RateTables

DEFAULT_CURRENCY = "CNY"


def tag_cheapest(results: list[PriceResult]) -> list[PriceResult]:
    """标记所有等于最低价的结果（并列全部标记），并按价格升序返回。"""
    if not results:
        return []
    minimum = min(item.price for item in results)
    for item in results:
        item.is_cheapest = item.price == minimum
    return sorted(results, key=lambda item: item.price)


def rules_for_location(location: Location, rules: list[PriceRule]) -> list[PriceRule]:
    """规则名 / 目的地包含地点名，或地点关联了该规则 id。"""
    matched: list[PriceRule] = []
    for rule in rules:
        if location.name in rule.rule_name or (rule.destination and location.name in rule.destination):
            matched.append(rule)
        elif rule.rule_id and rule.rule_id in location.pricing_rules:
            matched.append(rule)
    return matched


class QuoteAggregator:
    """比价聚合器，缓存由实例持有或外部注入。"""

    def __init__(
        self,
        rate_tables: RateTables | None = None,
        cache: QuoteCache | None = None,
        resolvers: list[IPriceResolver] | None = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.logger = get_logger()
        self.rate_tables = rate_tables or RateTables.empty()
        self.cache: QuoteCache = cache if cache is not None else QuoteCache()
        self.resolvers = resolvers if resolvers is not None else default_resolvers(self.rate_tables)
        self.currency = currency

    def quote_all(self, province: str, city: str, weight: float) -> list[ProviderQuote]:
        """全部物流公司的原始报价，包含无报价结果。"""
        return [resolver.resolve(province, city, weight) for resolver in self.resolvers]

    @log_execution_time()
    def calculate_prices(self, province: str, city: str, weight: float) -> list[PriceResult]:
        key = (str(province or "").strip(), str(city or "").strip(), float(weight or 0))
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug(f"Quote cache hit: {key}")
            return deepcopy(cached)

        results = [
            PriceResult(
                company=quote.company,
                price=quote.price,
                currency=self.currency,
                lead_time=quote.lead_time,
                note=quote.note,
            )
            for quote in self.quote_all(*key)
            if quote.available
        ]
        results = tag_cheapest(results)

        self.cache.set(key, results)
        return deepcopy(results)

    def update_rate_tables(self, tables: RateTables) -> None:
        self.rate_tables = tables
        for resolver in self.resolvers:
            resolver.tables = tables
        self.cache.invalidate()
        self.logger.info("Rate tables updated, quote cache invalidated")

    def calculate_prices_from_rules(
        self,
        candidates: list[Location],
        weight: float,
        rules: list[PriceRule],
    ) -> list[PriceResult]:
        """按候选地点优先级找到第一个有规则的地点，只用该地点的规则计价。"""
        for location in candidates:
            matched = rules_for_location(location, rules)
            if not matched:
                continue

            self.logger.debug(f"Using {len(matched)} rules for {location.name}")
            results: list[PriceResult] = []
            for rule in matched:
                price = calculate_price(weight, rule)
                if price is None or price <= 0:
                    continue
                results.append(
                    PriceResult(
                        company=rule.company_name or rule.rule_name,
                        price=round(price, 2),
                        currency=self.currency,
                        lead_time=rule.timeliness or None,
                        note=rule.rule_name,
                    )
                )
            return tag_cheapest(results)
        return []

    def quote_address(
        self,
        text: str,
        weight: float,
        locations: list[Location],
        rules: list[PriceRule],
        matcher: ILocationMatcher | None = None,
    ) -> tuple[AddressMatch, list[PriceResult]]:
        match = parse_address_with_locations(text, locations, matcher)
        if not match.candidate_locations:
            self.logger.warning(f"No location matched for address: {text}")
            return match, []
        return match, self.calculate_prices_from_rules(match.candidate_locations, weight, rules)
