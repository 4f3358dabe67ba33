"""物流比价模块。"""

from .address_parser import ParsedAddress, parse_address
from .cache import QuoteCache
from .engine import QuoteAggregator, tag_cheapest
from .location_matcher import (
    AddressMatch,
    HeuristicLocationMatcher,
    ILocationMatcher,
    Location,
    LocationCandidate,
    match_location,
    parse_address_with_locations,
)
from .models import (
    ComplexTieredRule,
    FirstAdditionalRule,
    FirstPlusTieredFlatRateRule,
    PriceResult,
    PriceRule,
    PriceTier,
    TieredMinimumChargeRule,
)
from .normalizer import fuzzy_match_city, normalize_city, normalize_province
from .pricing import calculate_price, load_price_rules, parse_price_rule
from .providers import IPriceResolver, ProviderQuote, default_resolvers
from .rate_tables import RateTableRepository, RateTables
from .rule_store import RuleStoreRepository
from .service import PriceCompareService

__all__ = [
    "AddressMatch",
    "ComplexTieredRule",
    "FirstAdditionalRule",
    "FirstPlusTieredFlatRateRule",
    "HeuristicLocationMatcher",
    "ILocationMatcher",
    "IPriceResolver",
    "Location",
    "LocationCandidate",
    "ParsedAddress",
    "PriceCompareService",
    "PriceResult",
    "PriceRule",
    "PriceTier",
    "ProviderQuote",
    "QuoteAggregator",
    "QuoteCache",
    "RateTableRepository",
    "RateTables",
    "RuleStoreRepository",
    "TieredMinimumChargeRule",
    "calculate_price",
    "default_resolvers",
    "fuzzy_match_city",
    "load_price_rules",
    "match_location",
    "normalize_city",
    "normalize_province",
    "parse_address",
    "parse_address_with_locations",
    "parse_price_rule",
    "tag_cheapest",
]
