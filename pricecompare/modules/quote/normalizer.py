"""
省市名标准化
Province / City Name Normalizer

统一各数据源中带/不带行政区划后缀的省市名，保证可比较。
所有函数均为纯函数，不抛异常，且幂等。
"""

from __future__ import annotations

PROVINCE_ALIASES: dict[str, str] = {
    # 直辖市
    "北京": "北京",
    "北京市": "北京",
    "上海": "上海",
    "上海市": "上海",
    "天津": "天津",
    "天津市": "天津",
    "重庆": "重庆",
    "重庆市": "重庆",
    # 省
    "河北": "河北",
    "河北省": "河北",
    "山西": "山西",
    "山西省": "山西",
    "辽宁": "辽宁",
    "辽宁省": "辽宁",
    "吉林": "吉林",
    "吉林省": "吉林",
    "黑龙江": "黑龙江",
    "黑龙江省": "黑龙江",
    "江苏": "江苏",
    "江苏省": "江苏",
    "浙江": "浙江",
    "浙江省": "浙江",
    "安徽": "安徽",
    "安徽省": "安徽",
    "福建": "福建",
    "福建省": "福建",
    "江西": "江西",
    "江西省": "江西",
    "山东": "山东",
    "山东省": "山东",
    "河南": "河南",
    "河南省": "河南",
    "湖北": "湖北",
    "湖北省": "湖北",
    "湖南": "湖南",
    "湖南省": "湖南",
    "广东": "广东",
    "广东省": "广东",
    "海南": "海南",
    "海南省": "海南",
    "四川": "四川",
    "四川省": "四川",
    "贵州": "贵州",
    "贵州省": "贵州",
    "云南": "云南",
    "云南省": "云南",
    "陕西": "陕西",
    "陕西省": "陕西",
    "甘肃": "甘肃",
    "甘肃省": "甘肃",
    "青海": "青海",
    "青海省": "青海",
    "台湾": "台湾",
    "台湾省": "台湾",
    # 自治区
    "内蒙古": "内蒙古",
    "内蒙古自治区": "内蒙古",
    "广西": "广西",
    "广西壮族自治区": "广西",
    "西藏": "西藏",
    "西藏自治区": "西藏",
    "宁夏": "宁夏",
    "宁夏回族自治区": "宁夏",
    "新疆": "新疆",
    "新疆维吾尔自治区": "新疆",
    # 特别行政区
    "香港": "香港",
    "香港特别行政区": "香港",
    "澳门": "澳门",
    "澳门特别行政区": "澳门",
}

# 顺序即优先级：第一个命中的后缀生效
CITY_SUFFIXES: tuple[str, ...] = ("市", "县", "区", "旗", "盟", "州", "自治州", "地区", "特别行政区")

# 去掉后缀后至少保留的字数，避免 "杭州" -> "杭"
_MIN_CITY_STEM = 2


def normalize_province(province: str | None) -> str:
    text = str(province or "").strip()
    if not text:
        return ""

    if text in PROVINCE_ALIASES:
        return PROVINCE_ALIASES[text]

    for key, value in PROVINCE_ALIASES.items():
        if key in text or text in key:
            return value

    return text


def _strip_city_suffix(text: str) -> str | None:
    for suffix in CITY_SUFFIXES:
        if text.endswith(suffix):
            stem = text[: -len(suffix)]
            return stem if len(stem) >= _MIN_CITY_STEM else None
    return None


def normalize_city(city: str | None) -> str:
    """去掉一个行政区划后缀；剩余部分若仍可再去后缀则保持原样（保证幂等）。"""
    text = str(city or "").strip()
    if not text:
        return ""

    stem = _strip_city_suffix(text)
    if stem is not None and _strip_city_suffix(stem) is None:
        return stem
    return text


def normalize_province_city(province: str | None, city: str | None) -> dict[str, str]:
    return {
        "province": normalize_province(province),
        "city": normalize_city(city),
    }


def is_same_province(province1: str | None, province2: str | None) -> bool:
    return normalize_province(province1) == normalize_province(province2)


def is_same_city(city1: str | None, city2: str | None) -> bool:
    return normalize_city(city1) == normalize_city(city2)


def fuzzy_match_city(target_city: str | None, candidate_city: str | None) -> bool:
    target = normalize_city(target_city)
    candidate = normalize_city(candidate_city)
    if not target or not candidate:
        return False
    if target == candidate:
        return True
    return target in candidate or candidate in target


def get_all_supported_provinces() -> list[str]:
    return list(PROVINCE_ALIASES.keys())


def get_all_city_suffixes() -> list[str]:
    return list(CITY_SUFFIXES)
