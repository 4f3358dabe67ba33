"""
地点匹配
Location Matcher

把自由文本（如“广东省清远市”）解析为按优先级排序的候选地点列表。
排序启发式封装在 ILocationMatcher 之后，可替换为其他实现。
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pricecompare.modules.quote.regions import extract_province_from_city

CITY_LEVEL_MARKERS: tuple[str, ...] = ("市", "县", "区")
PROVINCE_LEVEL_MARKERS: tuple[str, ...] = ("省", "自治区", "特别行政区")

_TOKEN_SPLIT_RE = re.compile(r"[，,。.\s]+")

# 匹配度
CONFIDENCE_EXACT = 1.0
CONFIDENCE_CONTAINS_CITY = 0.8
CONFIDENCE_CONTAINS_PROVINCE = 0.7
CONFIDENCE_TOKEN_CITY = 0.6
CONFIDENCE_PARENT_PROVINCE = 0.5
CONFIDENCE_TOKEN_PROVINCE = 0.5


@dataclass(frozen=True, slots=True)
class Location:
    """标准地点，名称即匹配主键。"""

    id: str
    name: str
    pricing_rules: tuple[str, ...] = ()

    @property
    def is_city_level(self) -> bool:
        return is_city_level(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "pricing_rules": list(self.pricing_rules)}


@dataclass(frozen=True, slots=True)
class LocationCandidate:
    location: Location
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"location": self.location.to_dict(), "confidence": round(self.confidence, 2)}


@dataclass(slots=True)
class AddressMatch:
    """地址解析结果，candidate_locations 按优先级排序。"""

    province: str = ""
    city: str = ""
    matched_location: Location | None = None
    candidate_locations: list[Location] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "province": self.province,
            "city": self.city,
            "matched_location": self.matched_location.to_dict() if self.matched_location else None,
            "candidate_locations": [item.to_dict() for item in self.candidate_locations],
        }


def is_city_level(name: str) -> bool:
    return any(marker in name for marker in CITY_LEVEL_MARKERS)


def is_province_level(name: str) -> bool:
    return any(marker in name for marker in PROVINCE_LEVEL_MARKERS)


def _contains_either(a: str, b: str) -> bool:
    return a in b or b in a


class ILocationMatcher(ABC):
    """地点排序接口。"""

    @abstractmethod
    def rank(self, text: str, locations: list[Location]) -> list[LocationCandidate]:
        pass


class HeuristicLocationMatcher(ILocationMatcher):
    """
    默认启发式匹配：

    1. 整串精确匹配（忽略大小写）
    2. 双向包含匹配，城市级优先、名称更长优先；最佳为城市级时追加其所属省份
    3. 按标点/空白切词，逐词先找城市级，再找省份级
    """

    def rank(self, text: str, locations: list[Location]) -> list[LocationCandidate]:
        query = str(text or "").strip()
        if not query:
            return []

        usable = [item for item in locations if item.name]

        exact = self._exact(query, usable)
        if exact:
            return exact

        contained = self._contains(query, usable)
        if contained:
            return contained

        return self._tokens(query, usable)

    @staticmethod
    def _exact(query: str, locations: list[Location]) -> list[LocationCandidate]:
        lowered = query.lower()
        for location in locations:
            if location.name.lower() == lowered:
                return [LocationCandidate(location, CONFIDENCE_EXACT)]
        return []

    def _contains(self, query: str, locations: list[Location]) -> list[LocationCandidate]:
        lowered = query.lower()
        matches = [item for item in locations if _contains_either(item.name.lower(), lowered)]
        if not matches:
            return []

        # sorted 是稳定排序，同级同长保持原有顺序
        matches = sorted(matches, key=lambda item: (not item.is_city_level, -len(item.name)))
        candidates = [
            LocationCandidate(
                item,
                CONFIDENCE_CONTAINS_CITY if item.is_city_level else CONFIDENCE_CONTAINS_PROVINCE,
            )
            for item in matches
        ]

        best = matches[0]
        if best.is_city_level:
            parent = self._parent_province(best, locations)
            if parent is not None and all(item.id != parent.id for item in matches):
                candidates.append(LocationCandidate(parent, CONFIDENCE_PARENT_PROVINCE))
        return candidates

    def _tokens(self, query: str, locations: list[Location]) -> list[LocationCandidate]:
        tokens = [token.strip().lower() for token in _TOKEN_SPLIT_RE.split(query) if token.strip()]

        for token in tokens:
            city = self._token_match(token, locations, is_city_level)
            if city is not None:
                candidates = [LocationCandidate(city, CONFIDENCE_TOKEN_CITY)]
                parent = self._parent_province(city, locations)
                if parent is not None:
                    candidates.append(LocationCandidate(parent, CONFIDENCE_PARENT_PROVINCE))
                return candidates

        for token in tokens:
            province = self._token_match(token, locations, is_province_level)
            if province is not None:
                return [LocationCandidate(province, CONFIDENCE_TOKEN_PROVINCE)]

        return []

    @staticmethod
    def _token_match(token: str, locations: list[Location], level) -> Location | None:
        for location in locations:
            name = location.name.lower()
            if name == token:
                return location
            if _contains_either(name, token) and level(location.name):
                return location
        return None

    @staticmethod
    def _parent_province(location: Location, locations: list[Location]) -> Location | None:
        province_name = extract_province_from_city(location.name)
        if not province_name:
            return None
        return next((item for item in locations if item.name == province_name), None)


_DEFAULT_MATCHER = HeuristicLocationMatcher()


def parse_address_with_locations(
    text: str,
    locations: list[Location],
    matcher: ILocationMatcher | None = None,
) -> AddressMatch:
    candidates = (matcher or _DEFAULT_MATCHER).rank(text, locations)
    if not candidates:
        return AddressMatch()

    best = candidates[0].location
    ordered = [item.location for item in candidates]

    province = best.name
    if best.is_city_level:
        province = extract_province_from_city(best.name) or best.name

    return AddressMatch(
        province=province,
        city=best.name,
        matched_location=best,
        candidate_locations=ordered,
    )


def _strip_first(text: str, suffixes: tuple[str, ...]) -> str:
    for suffix in suffixes:
        text = text.replace(suffix, "", 1)
    return text


_PROVINCE_STRIP = ("省", "市", "自治区", "特别行政区")
_CITY_STRIP = ("市", "区", "县")


def match_location(user_input: str, locations: list[Location]) -> Location | None:
    """单一最佳匹配，用于下拉框搜索；与地址解析流程相互独立。"""
    query = str(user_input or "").strip().lower()
    if not query:
        return None

    usable = [item for item in locations if item.name]

    for location in usable:
        if location.name.lower() == query:
            return location

    for location in usable:
        if _contains_either(location.name.lower(), query):
            return location

    for suffixes in (_PROVINCE_STRIP, _CITY_STRIP):
        short = _strip_first(query, suffixes)
        if len(short) <= 1:
            continue
        for location in usable:
            location_short = _strip_first(location.name.lower(), suffixes)
            if location_short == short or short in location_short:
                return location

    if len(query) < 3:
        return None
    for location in usable:
        name = location.name.lower()
        overlap = sum(1 for char in query if char in name)
        if overlap / len(query) > 0.7:
            return location
    return None
