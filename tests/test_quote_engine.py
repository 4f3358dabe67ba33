"""比价引擎测试。"""

from pricecompare.modules.quote.cache import QuoteCache
from pricecompare.modules.quote.engine import QuoteAggregator, rules_for_location, tag_cheapest
from pricecompare.modules.quote.location_matcher import Location
from pricecompare.modules.quote.models import PriceResult
from pricecompare.modules.quote.pricing import load_price_rules
from pricecompare.modules.quote.providers import IPriceResolver, ProviderQuote
from pricecompare.modules.quote.rate_tables import RateTables


class FixedResolver(IPriceResolver):
    def __init__(self, company, price, tables=None):
        super().__init__(tables or RateTables.empty())
        self.company = company
        self.price = price
        self.calls = 0

    def _resolve(self, province, city, weight):
        self.calls += 1
        return ProviderQuote(self.company, self.price)


def _summary(results):
    return [(item.company, item.price, item.is_cheapest) for item in results]


def test_tag_cheapest_marks_all_ties() -> None:
    results = tag_cheapest(
        [
            PriceResult("顺丰快递", 20.0),
            PriceResult("申通快递", 8.0),
            PriceResult("安能标准", 8.0),
        ]
    )
    assert _summary(results) == [
        ("申通快递", 8.0, True),
        ("安能标准", 8.0, True),
        ("顺丰快递", 20.0, False),
    ]
    assert tag_cheapest([]) == []


class TestCalculatePrices:
    """价格表比价"""

    def test_sorted_with_cheapest(self, sample_rate_tables):
        results = QuoteAggregator(sample_rate_tables).calculate_prices("广东", "广州", 10)
        assert _summary(results) == [
            ("申通快递", 23.0, True),
            ("安能标准", 27.5, False),
            ("顺丰快递", 72.0, False),
        ]
        assert all(item.currency == "CNY" for item in results)

    def test_unavailable_companies_are_excluded(self, sample_rate_tables):
        aggregator = QuoteAggregator(sample_rate_tables)
        companies = [item.company for item in aggregator.calculate_prices("广东", "广州", 10)]
        assert "新亮物流" not in companies
        assert "安能定时达" not in companies

        quotes = aggregator.quote_all("广东", "广州", 10)
        assert len(quotes) == 5
        assert [item.company for item in quotes if not item.available] == ["新亮物流", "安能定时达"]

    def test_no_quotes(self, sample_rate_tables):
        assert QuoteAggregator(sample_rate_tables).calculate_prices("火星", "", 10) == []
        assert QuoteAggregator(sample_rate_tables).calculate_prices("浙江", "杭州", 0) == []

    def test_cache_hit_returns_copies(self):
        resolver = FixedResolver("申通快递", 10.0)
        aggregator = QuoteAggregator(resolvers=[resolver])

        first = aggregator.calculate_prices("浙江", "杭州", 1)
        first[0].price = 999
        second = aggregator.calculate_prices(" 浙江 ", "杭州", 1.0)

        assert resolver.calls == 1
        assert second[0].price == 10.0

    def test_injected_cache_evicts(self):
        cache = QuoteCache(max_entries=2)
        resolver = FixedResolver("申通快递", 10.0)
        aggregator = QuoteAggregator(cache=cache, resolvers=[resolver])

        for weight in (1, 2, 3):
            aggregator.calculate_prices("浙江", "杭州", weight)
        assert len(cache) == 2
        assert ("浙江", "杭州", 1.0) not in cache

        aggregator.calculate_prices("浙江", "杭州", 1)
        assert resolver.calls == 4

    def test_update_rate_tables_invalidates_cache(self, sample_rate_tables):
        aggregator = QuoteAggregator(RateTables.empty())
        assert aggregator.calculate_prices("广东", "广州", 10) == []
        assert len(aggregator.cache) == 1

        aggregator.update_rate_tables(sample_rate_tables)
        assert len(aggregator.cache) == 0
        assert len(aggregator.calculate_prices("广东", "广州", 10)) == 3


def test_rules_for_location(sample_locations, sample_rule_records) -> None:
    rules = load_price_rules(sample_rule_records)
    qingyuan = sample_locations[1]
    assert [rule.rule_id for rule in rules_for_location(qingyuan, rules)] == ["rule_qy_tiered", "rule_qy_min"]

    linked = Location(id="loc_gz", name="广州市", pricing_rules=("rule_gd_first",))
    assert [rule.rule_id for rule in rules_for_location(linked, rules)] == ["rule_gd_first"]


class TestQuoteAddress:
    """规则库计价"""

    def test_first_candidate_with_rules_wins(self, sample_locations, sample_rule_records):
        rules = load_price_rules(sample_rule_records)
        match, results = QuoteAggregator().quote_address("广东省清远市", 10, sample_locations, rules)

        assert match.city == "清远市"
        assert [(item.company, item.price, item.is_cheapest, item.note) for item in results] == [
            ("新亮物流", 18.0, True, "清远市-专线"),
            ("安能标准", 30.0, False, "清远市-安能标准"),
        ]

    def test_province_rules(self, sample_locations, sample_rule_records):
        rules = load_price_rules(sample_rule_records)
        _, results = QuoteAggregator().quote_address("广东省广州市", 10, sample_locations, rules)

        assert len(results) == 1
        assert results[0].company == "顺丰快递"
        assert results[0].price == 72.0
        assert results[0].lead_time == "1-2天"

    def test_falls_through_candidates_without_rules(self, sample_rule_records):
        rules = load_price_rules(sample_rule_records)
        locations = [Location(id="loc_hz", name="杭州市"), Location(id="loc_gd", name="广东省")]
        results = QuoteAggregator().calculate_prices_from_rules(locations, 2, rules)
        assert [item.price for item in results] == [24.0]

    def test_zero_weight_yields_no_results(self, sample_locations, sample_rule_records):
        rules = load_price_rules(sample_rule_records)
        _, results = QuoteAggregator().quote_address("清远市", 0, sample_locations, rules)
        assert results == []

    def test_no_location(self, sample_locations, sample_rule_records):
        match, results = QuoteAggregator().quote_address(
            "火星基地", 10, sample_locations, load_price_rules(sample_rule_records)
        )
        assert match.candidate_locations == []
        assert results == []
