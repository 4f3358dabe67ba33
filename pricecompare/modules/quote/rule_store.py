"""通用规则库：计价规则 + 地点列表（JSON / YAML）。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from pricecompare.core.error_handler import DataLoadError
from pricecompare.core.logger import get_logger
from pricecompare.modules.quote.location_matcher import Location
from pricecompare.modules.quote.models import PriceRule
from pricecompare.modules.quote.pricing import load_price_rules

UNNAMED_LOCATION = "未命名地点"


def read_records(path: Path) -> list[dict[str, Any]]:
    """读取记录数组文件；文件不存在返回空列表。"""
    if not path.exists():
        return []

    try:
        text = path.read_text(encoding="utf-8-sig")
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataLoadError(f"Failed to read {path}: {e}", {"path": str(path)}) from e

    if data is None:
        return []
    if isinstance(data, dict) and isinstance(data.get("records"), list):
        data = data["records"]
    if not isinstance(data, list):
        raise DataLoadError(f"Expected a list of records in {path}", {"path": str(path)})
    return [item for item in data if isinstance(item, dict)]


def parse_location(record: dict[str, Any]) -> Location | None:
    fields = record.get("fields") if isinstance(record.get("fields"), dict) else record
    name = str(fields.get("地点名") or fields.get("name") or "").strip()
    if not name or name == UNNAMED_LOCATION:
        return None

    raw_rules = fields.get("计价规则") or fields.get("pricingRules") or fields.get("pricing_rules") or []
    if isinstance(raw_rules, str):
        raw_rules = [raw_rules]
    return Location(
        id=str(record.get("id") or fields.get("id") or name),
        name=name,
        pricing_rules=tuple(str(item) for item in raw_rules if item),
    )


class RuleStoreRepository:
    """加载计价规则与地点，文件变更时自动重载。"""

    def __init__(self, rules_path: str | Path, locations_path: str | Path):
        self.rules_path = Path(rules_path)
        self.locations_path = Path(locations_path)
        self.logger = get_logger()

        self._rules: list[PriceRule] = []
        self._locations: list[Location] = []
        self._total_rule_records = 0
        self._total_location_records = 0
        self._signature: tuple[tuple[str, int, int], ...] = ()

    def get_rules(self) -> list[PriceRule]:
        self._reload_if_needed()
        return list(self._rules)

    def get_locations(self) -> list[Location]:
        self._reload_if_needed()
        return list(self._locations)

    def locations_with_rules(self) -> list[Location]:
        return [item for item in self.get_locations() if item.pricing_rules]

    def get_stats(self) -> dict[str, Any]:
        self._reload_if_needed()
        return {
            "rules_path": str(self.rules_path),
            "locations_path": str(self.locations_path),
            "total_rule_records": self._total_rule_records,
            "valid_rules": len(self._rules),
            "total_location_records": self._total_location_records,
            "valid_locations": len(self._locations),
        }

    def _reload_if_needed(self) -> None:
        signature = self._build_signature([self.rules_path, self.locations_path])
        if signature == self._signature:
            return

        rule_records = read_records(self.rules_path)
        location_records = read_records(self.locations_path)

        self._rules = load_price_rules(rule_records)
        self._locations = [
            location for location in (parse_location(item) for item in location_records) if location
        ]
        self._total_rule_records = len(rule_records)
        self._total_location_records = len(location_records)
        self._signature = signature

        self.logger.info(
            f"Loaded {len(self._locations)} valid locations out of {len(location_records)} total locations"
        )

    @staticmethod
    def _build_signature(files: list[Path]) -> tuple[tuple[str, int, int], ...]:
        signature: list[tuple[str, int, int]] = []
        for path in files:
            if not path.is_file():
                signature.append((str(path), -1, -1))
                continue
            stat = path.stat()
            signature.append((str(path.resolve()), int(stat.st_mtime_ns), int(stat.st_size)))
        return tuple(signature)
