"""
比价服务
Price Compare Service

按配置装配价格表仓库、规则库与比价聚合器。
"""

from __future__ import annotations

from typing import Any

from pricecompare.core.config import get_config
from pricecompare.core.logger import get_logger
from pricecompare.modules.quote.address_parser import ParsedAddress, parse_address
from pricecompare.modules.quote.cache import QuoteCache
from pricecompare.modules.quote.engine import QuoteAggregator
from pricecompare.modules.quote.location_matcher import (
    AddressMatch,
    Location,
    match_location,
    parse_address_with_locations,
)
from pricecompare.modules.quote.models import PriceResult
from pricecompare.modules.quote.providers import ProviderQuote
from pricecompare.modules.quote.rate_tables import RateTableRepository
from pricecompare.modules.quote.rule_store import RuleStoreRepository


class PriceCompareService:
    """比价入口；价格表文件变化时刷新聚合器并清空缓存。"""

    def __init__(
        self,
        quote_config: dict[str, Any] | None = None,
        rule_store_config: dict[str, Any] | None = None,
    ):
        app_config = get_config()
        self.config = quote_config or app_config.get_section("quote", {})
        rule_store_cfg = rule_store_config or app_config.get_section("rule_store", {})
        self.logger = get_logger()

        self.rate_repo = RateTableRepository(self.config.get("rate_table_dir", "data/rates"))
        self.rule_store = RuleStoreRepository(
            rules_path=rule_store_cfg.get("rules_path", "data/rules/price_rules.json"),
            locations_path=rule_store_cfg.get("locations_path", "data/rules/locations.json"),
        )
        self.aggregator = QuoteAggregator(
            rate_tables=self.rate_repo.get_tables(),
            cache=QuoteCache(max_entries=int(self.config.get("cache_max_entries", 50))),
            currency=str(self.config.get("currency", "CNY")),
        )
        self._rate_version = self.rate_repo.version

    def _refresh_rate_tables(self) -> None:
        version = self.rate_repo.version
        if version == self._rate_version:
            return
        self.aggregator.update_rate_tables(self.rate_repo.get_tables())
        self._rate_version = version

    def calculate_prices(self, province: str, city: str, weight: float) -> list[PriceResult]:
        self._refresh_rate_tables()
        return self.aggregator.calculate_prices(province, city, weight)

    def quote_all(self, province: str, city: str, weight: float) -> list[ProviderQuote]:
        self._refresh_rate_tables()
        return self.aggregator.quote_all(province, city, weight)

    def locations(self) -> list[Location]:
        return self.rule_store.get_locations()

    def match_address(self, text: str) -> AddressMatch:
        return parse_address_with_locations(text, self.rule_store.get_locations())

    def match_location(self, text: str) -> Location | None:
        return match_location(text, self.rule_store.get_locations())

    def quote_address(self, text: str, weight: float) -> tuple[AddressMatch, list[PriceResult]]:
        return self.aggregator.quote_address(
            text,
            weight,
            self.rule_store.get_locations(),
            self.rule_store.get_rules(),
        )

    @staticmethod
    def parse_address(text: str) -> ParsedAddress:
        return parse_address(text)

    def stats(self) -> dict[str, Any]:
        return {
            "rate_tables": self.rate_repo.get_tables().stats(),
            "rate_version": self.rate_repo.version,
            "rule_store": self.rule_store.get_stats(),
            "cached_quotes": len(self.aggregator.cache),
        }
