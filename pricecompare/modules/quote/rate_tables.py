"""
物流公司价格表
Provider Rate Tables

四家物流公司的固定结构价格表，以及从平铺记录转换、从目录加载的能力。
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pricecompare.core.error_handler import DataLoadError
from pricecompare.core.logger import get_logger

XINLIANG_NAMES = {"新亮物流", "Xinliang"}
SF_NAMES = {"顺丰快递", "SF"}
SHENTONG_NAMES = {"申通快递", "Shentong"}
ANNENG_STANDARD_NAMES = {"安能标准", "Anneng Standard"}
ANNENG_TIMED_NAMES = {"安能定时达", "Anneng Timed"}

ANNENG_STANDARD = "anneng"
ANNENG_TIMED = "anneng_timed"

TABLE_FILES: dict[str, str] = {
    "xinliang": "xinliang.json",
    "sf": "sf.json",
    "shentong": "shentong.json",
    "anneng": "anneng.json",
}
RECORDS_FILE = "records.json"


def _empty_xinliang() -> dict[str, Any]:
    return {"data": {}}


def _empty_regions() -> dict[str, Any]:
    return {"regions": {}}


def _empty_anneng() -> dict[str, Any]:
    return {"tables": {ANNENG_STANDARD: [], ANNENG_TIMED: []}}


def _json_value(value: Any) -> Any:
    if isinstance(value, str):
        return json.loads(value)
    return value


@dataclass(slots=True)
class RateTables:
    """
    价格表集合

    - xinliang: {"data": {省: {市: {"rates": {...}, "lead_time_days": n}}}}
    - sf:       {"regions": {省: {"first_kg", "additional_per_kg"}}}
    - shentong: {"regions": {省: {"base", "extra_per_kg"}}}
    - anneng:   {"tables": {"anneng": [行], "anneng_timed": [行]}}
    """

    xinliang: dict[str, Any] = field(default_factory=_empty_xinliang)
    sf: dict[str, Any] = field(default_factory=_empty_regions)
    shentong: dict[str, Any] = field(default_factory=_empty_regions)
    anneng: dict[str, Any] = field(default_factory=_empty_anneng)

    @classmethod
    def empty(cls) -> "RateTables":
        return cls()

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> "RateTables":
        """把“物流公司 / 地区 / 价格数据 / 时效”平铺记录转换为各公司价格表。"""
        logger = get_logger()
        tables = cls()

        for record in records:
            fields = record.get("fields") if isinstance(record.get("fields"), dict) else record
            company = fields.get("物流公司") or fields.get("Company")
            region = fields.get("地区") or fields.get("Region")
            price_data = fields.get("价格数据") or fields.get("PriceData")
            lead_time = fields.get("时效") or fields.get("LeadTime")
            if not region or not price_data:
                continue

            try:
                info = _json_value(price_data)
            except json.JSONDecodeError:
                info = None
            if not isinstance(info, dict):
                logger.warning(f"Skipping rate record with invalid price data: {company} {region}")
                continue

            if company in XINLIANG_NAMES:
                province, _, city = str(region).partition("-")
                tables.xinliang["data"].setdefault(province, {})[city] = {
                    "rates": info,
                    "lead_time_days": lead_time,
                }
            elif company in SF_NAMES:
                tables.sf["regions"][region] = {
                    "first_kg": info.get("first_kg"),
                    "additional_per_kg": info.get("additional_per_kg"),
                }
            elif company in SHENTONG_NAMES:
                tables.shentong["regions"][region] = {
                    "base": info.get("base"),
                    "extra_per_kg": info.get("extra_per_kg"),
                }
            elif company in ANNENG_STANDARD_NAMES or company in ANNENG_TIMED_NAMES:
                key = ANNENG_STANDARD if company in ANNENG_STANDARD_NAMES else ANNENG_TIMED
                tables.anneng["tables"][key].append(
                    {
                        "province": info.get("province"),
                        "cities": list(info.get("cities") or []),
                        "unit_price": info.get("unit_price"),
                        "time": lead_time,
                    }
                )

        return tables

    def merge(self, other: "RateTables") -> "RateTables":
        """返回合并后的新表；other 中的同名地区覆盖当前值，安能行追加。"""
        merged = copy.deepcopy(self)
        for province, cities in other.xinliang.get("data", {}).items():
            merged.xinliang["data"].setdefault(province, {}).update(copy.deepcopy(cities))
        merged.sf["regions"].update(copy.deepcopy(other.sf.get("regions", {})))
        merged.shentong["regions"].update(copy.deepcopy(other.shentong.get("regions", {})))
        for key in (ANNENG_STANDARD, ANNENG_TIMED):
            merged.anneng["tables"][key].extend(copy.deepcopy(other.anneng.get("tables", {}).get(key, [])))
        return merged

    def stats(self) -> dict[str, int]:
        anneng = self.anneng.get("tables", {})
        return {
            "xinliang_cities": sum(len(cities) for cities in self.xinliang.get("data", {}).values()),
            "sf_regions": len(self.sf.get("regions", {})),
            "shentong_regions": len(self.shentong.get("regions", {})),
            "anneng_rows": len(anneng.get(ANNENG_STANDARD, [])),
            "anneng_timed_rows": len(anneng.get(ANNENG_TIMED, [])),
        }


class RateTableRepository:
    """从目录加载价格表，文件变更时自动重载。"""

    def __init__(self, table_dir: str | Path):
        self.table_dir = Path(table_dir)
        self.logger = get_logger()
        self._tables = RateTables.empty()
        self._signature: tuple[tuple[str, int, int], ...] | None = None

    @property
    def version(self) -> str:
        """当前已加载文件的签名摘要，价格表变化时随之变化。"""
        self._reload_if_needed()
        return "|".join(f"{name}:{mtime}:{size}" for name, mtime, size in self._signature or ())

    def get_tables(self) -> RateTables:
        self._reload_if_needed()
        return self._tables

    def _reload_if_needed(self) -> None:
        files = self._collect_files()
        signature = self._build_signature(files)
        if signature == self._signature:
            return

        tables = RateTables(
            xinliang=self._load_document(TABLE_FILES["xinliang"], "data", _empty_xinliang),
            sf=self._load_document(TABLE_FILES["sf"], "regions", _empty_regions),
            shentong=self._load_document(TABLE_FILES["shentong"], "regions", _empty_regions),
            anneng=self._load_anneng(),
        )

        records_path = self.table_dir / RECORDS_FILE
        if records_path.is_file():
            records = self._read_json(records_path)
            if isinstance(records, dict):
                records = records.get("records", [])
            if not isinstance(records, list):
                raise DataLoadError(f"Expected a list of records in {records_path}", {"path": str(records_path)})
            tables = tables.merge(RateTables.from_records([item for item in records if isinstance(item, dict)]))

        self._tables = tables
        self._signature = signature
        self.logger.info(f"Rate tables loaded from {self.table_dir}: {tables.stats()}")

    def _collect_files(self) -> list[Path]:
        names = [*TABLE_FILES.values(), RECORDS_FILE]
        return [self.table_dir / name for name in names if (self.table_dir / name).is_file()]

    @staticmethod
    def _build_signature(files: list[Path]) -> tuple[tuple[str, int, int], ...]:
        signature: list[tuple[str, int, int]] = []
        for path in files:
            stat = path.stat()
            signature.append((path.name, int(stat.st_mtime_ns), int(stat.st_size)))
        return tuple(signature)

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8-sig"))
        except (OSError, json.JSONDecodeError) as e:
            raise DataLoadError(f"Failed to read {path}: {e}", {"path": str(path)}) from e

    def _load_document(self, filename: str, root_key: str, default) -> dict[str, Any]:
        path = self.table_dir / filename
        if not path.is_file():
            return default()
        data = self._read_json(path)
        if not isinstance(data, dict) or not isinstance(data.get(root_key), dict):
            raise DataLoadError(f"{path} must contain an object under '{root_key}'", {"path": str(path)})
        return data

    def _load_anneng(self) -> dict[str, Any]:
        path = self.table_dir / TABLE_FILES["anneng"]
        if not path.is_file():
            return _empty_anneng()
        data = self._read_json(path)
        tables = data.get("tables") if isinstance(data, dict) else None
        if not isinstance(tables, dict):
            raise DataLoadError(f"{path} must contain an object under 'tables'", {"path": str(path)})
        tables.setdefault(ANNENG_STANDARD, [])
        tables.setdefault(ANNENG_TIMED, [])
        return data
