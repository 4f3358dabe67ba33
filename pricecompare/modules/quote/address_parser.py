"""
自由文本地址解析
Free-text Address Parser

从“张三 13800138000 广东省清远市清城区xx路”一类文本中提取省、市、姓名、电话。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pricecompare.modules.quote.normalizer import normalize_city
from pricecompare.modules.quote.regions import infer_province_from_city

PROVINCES: tuple[str, ...] = (
    "北京市", "天津市", "河北省", "山西省", "内蒙古", "辽宁省", "吉林省", "黑龙江省",
    "上海市", "江苏省", "浙江省", "安徽省", "福建省", "江西省", "山东省", "河南省",
    "湖北省", "湖南省", "广东省", "广西", "海南省", "重庆市", "四川省", "贵州省",
    "云南省", "西藏", "陕西省", "甘肃省", "青海省", "宁夏", "新疆",
)

CITY_KEYWORDS: tuple[str, ...] = ("市", "县", "区", "旗", "盟", "州", "省", "自治区", "特别行政区")

PHONE_RE = re.compile(r"(1[3-9]\d{9}|0\d{2,3}-?\d{7,8}|400-?\d{3}-?\d{4})")
NAME_RE = re.compile(r"[\u4e00-\u9fa5]{2,4}(?=\s|$|，|,)")
_WORD_SPLIT_RE = re.compile(r"[，,。\s]")

# 省份前后参与城市搜索的字符数
_SEARCH_BEFORE = 20
_SEARCH_AFTER = 50


@dataclass(slots=True)
class ParsedAddress:
    province: str
    city: str
    address: str
    name: str | None = None
    phone: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "province": self.province,
            "city": self.city,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
        }


def _city_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"([^，,。\s]{{2,10}}{re.escape(keyword)})")


def parse_address(text: str) -> ParsedAddress:
    clean_text = re.sub(r"\s+", " ", str(text or "")).strip()

    phone_match = PHONE_RE.search(clean_text)
    phone = phone_match.group(0) if phone_match else None

    province, city = _parse_province_city(clean_text)

    remaining = clean_text
    for part in (phone, province, city):
        if part:
            remaining = remaining.replace(part, "", 1).strip()

    name_match = NAME_RE.search(remaining)
    return ParsedAddress(
        province=province,
        city=city,
        address=clean_text,
        name=name_match.group(0) if name_match else None,
        phone=phone,
    )


def _parse_province_city(text: str) -> tuple[str, str]:
    province = next((item for item in PROVINCES if item in text), "")
    city = ""

    if province:
        index = text.index(province)
        start = max(0, index - _SEARCH_BEFORE)
        end = min(len(text), index + len(province) + _SEARCH_AFTER)
        window = text[start:end]
        window_index = window.index(province)
        after = window[window_index + len(province):]
        before = window[:window_index]

        for keyword in CITY_KEYWORDS:
            pattern = _city_pattern(keyword)
            match = pattern.search(after) or pattern.search(before)
            if match:
                city = match.group(1)
                break

        if not city:
            words = [word for word in _WORD_SPLIT_RE.split(after.strip()) if word]
            if words:
                first = words[0]
                if any(keyword in first for keyword in CITY_KEYWORDS):
                    city = first
                elif 2 <= len(first) <= 6:
                    city = f"{first}市"
        return province, city

    for keyword in CITY_KEYWORDS:
        match = _city_pattern(keyword).search(text)
        if not match:
            continue
        city = match.group(1)
        province = _infer_province(city)
        if province:
            break
    return province, city


def _infer_province(city: str) -> str:
    return infer_province_from_city(city) or infer_province_from_city(normalize_city(city))


def validate_address(parsed: ParsedAddress) -> bool:
    return bool(parsed.province and parsed.city)


def format_address(parsed: ParsedAddress) -> str:
    parts: list[str] = []
    if parsed.name:
        parts.append(f"姓名：{parsed.name}")
    if parsed.phone:
        parts.append(f"电话：{parsed.phone}")
    if parsed.province and parsed.city:
        parts.append(f"地址：{parsed.province} {parsed.city}")
    return "\n".join(parts)
