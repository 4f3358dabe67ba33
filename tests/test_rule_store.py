"""规则库加载测试。"""

import pytest

from pricecompare.core.error_handler import DataLoadError
from pricecompare.modules.quote.rule_store import RuleStoreRepository, parse_location, read_records

from conftest import write_json


def test_repository_loads_rules_and_locations(rule_store_files) -> None:
    repo = RuleStoreRepository(*rule_store_files)

    assert [rule.rule_id for rule in repo.get_rules()] == ["rule_gd_first", "rule_qy_tiered", "rule_qy_min"]
    locations = repo.get_locations()
    assert [item.name for item in locations] == ["广东省", "清远市"]
    assert locations[1].pricing_rules == ("rule_qy_tiered",)
    assert len(repo.locations_with_rules()) == 2


def test_repository_stats(rule_store_files) -> None:
    stats = RuleStoreRepository(*rule_store_files).get_stats()
    assert stats["total_rule_records"] == 4
    assert stats["valid_rules"] == 3
    assert stats["total_location_records"] == 4
    assert stats["valid_locations"] == 2


def test_repository_reloads_on_change(rule_store_files) -> None:
    rules_path, locations_path = rule_store_files
    repo = RuleStoreRepository(rules_path, locations_path)
    assert len(repo.get_locations()) == 2

    write_json(
        locations_path,
        [
            {"id": "loc_gd", "fields": {"地点名": "广东省"}},
            {"id": "loc_qy", "fields": {"地点名": "清远市"}},
            {"id": "loc_zj", "fields": {"地点名": "浙江省", "计价规则": ["rule_zj"]}},
        ],
    )
    assert [item.id for item in repo.get_locations()] == ["loc_gd", "loc_qy", "loc_zj"]
    assert [item.id for item in repo.locations_with_rules()] == ["loc_zj"]


def test_missing_files_yield_empty_store(temp_dir) -> None:
    repo = RuleStoreRepository(temp_dir / "none.json", temp_dir / "none2.json")
    assert repo.get_rules() == []
    assert repo.get_locations() == []


def test_yaml_records(temp_dir) -> None:
    path = temp_dir / "locations.yaml"
    path.write_text(
        "records:\n"
        "  - id: loc_bj\n"
        "    name: 北京市\n"
        "    pricingRules: rule_bj\n"
        "  - name: 未命名地点\n",
        encoding="utf-8",
    )
    records = read_records(path)
    assert len(records) == 2

    repo = RuleStoreRepository(temp_dir / "rules.json", path)
    locations = repo.get_locations()
    assert len(locations) == 1
    assert locations[0].id == "loc_bj"
    assert locations[0].pricing_rules == ("rule_bj",)


def test_invalid_file_raises(temp_dir) -> None:
    path = temp_dir / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DataLoadError):
        read_records(path)

    write_json(path, {"unexpected": True})
    with pytest.raises(DataLoadError):
        read_records(path)


def test_parse_location_defaults_id_to_name() -> None:
    location = parse_location({"name": " 杭州市 "})
    assert location.id == "杭州市"
    assert location.name == "杭州市"
    assert location.pricing_rules == ()
    assert parse_location({"fields": {"地点名": "  "}}) is None
