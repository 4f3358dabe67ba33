"""
测试工具和fixtures
Test Utilities and Fixtures
"""

import json
import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from pricecompare.core.config import Config, get_config
from pricecompare.core.logger import Logger
from pricecompare.modules.quote.location_matcher import Location
from pricecompare.modules.quote.rate_tables import RateTables


@pytest.fixture
def temp_dir():
    """创建临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir):
    """创建临时配置文件"""
    config_file = temp_dir / "config.yaml"
    config_content = f"""
app:
  name: "express-price-compare-test"
  version: "1.0.0"
  debug: true
  log_level: "DEBUG"

quote:
  rate_table_dir: "{(temp_dir / 'rates').as_posix()}"
  cache_max_entries: 3
  currency: "CNY"

rule_store:
  rules_path: "{(temp_dir / 'rules' / 'price_rules.json').as_posix()}"
  locations_path: "{(temp_dir / 'rules' / 'locations.json').as_posix()}"

profit:
  history_path: "{(temp_dir / 'profit_history.json').as_posix()}"
  max_records: 5
"""
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture
def config(temp_config_file):
    """测试配置实例"""
    config = Config(str(temp_config_file))
    yield config

    Config._instance = None
    get_config.cache_clear()


@pytest.fixture
def logger(temp_dir, config):
    """测试日志实例"""
    logger = Logger()
    yield logger


@pytest.fixture
def xinliang_table():
    return {
        "data": {
            "浙江": {
                "杭州": {
                    "rates": {
                        "≤50kg": 60,
                        "50-200kg": 1.1,
                        "200-500kg": 0.95,
                        "500-1000kg": 0.85,
                        "1000-3000kg": 0.75,
                        "≥3000kg": 0.65,
                    },
                    "lead_time_days": 1,
                },
                "宁波": {
                    "rates": {"≤50kg": 65, "50-200kg": 1.2},
                    "lead_time_days": 2,
                },
            },
        }
    }


@pytest.fixture
def sample_rate_tables(xinliang_table):
    """示例价格表"""
    return RateTables(
        xinliang=xinliang_table,
        sf={
            "regions": {
                "浙江": {"first_kg": 12, "additional_per_kg": 2},
                "广东省": {"first_kg": 18, "additional_per_kg": 6},
            }
        },
        shentong={
            "regions": {
                "广东": {"base": 5.0, "extra_per_kg": 2.0},
            }
        },
        anneng={
            "tables": {
                "anneng": [
                    {"province": "浙江省", "cities": ["杭州市", "宁波市"], "unit_price": 1.2, "time": "1-2天"},
                    {"province": "广东省", "cities": ["广州市"], "unit_price": 1.5, "time": "2-3天"},
                    {"province": "广东省", "cities": ["清远市"], "unit_price": 1.7, "time": "3-4天"},
                ],
                "anneng_timed": [
                    {"province": "浙江省", "cities": ["杭州市"], "unit_price": 1.6, "time": "次日达"},
                ],
            }
        },
    )


@pytest.fixture
def sample_locations():
    """示例地点"""
    return [
        Location(id="loc_gd", name="广东省", pricing_rules=("rule_gd_first",)),
        Location(id="loc_qy", name="清远市", pricing_rules=("rule_qy_tiered",)),
        Location(id="loc_zj", name="浙江省"),
        Location(id="loc_hz", name="杭州市"),
        Location(id="loc_xj", name="新疆维吾尔自治区"),
    ]


@pytest.fixture
def sample_rule_records():
    """示例计价规则记录（数据源原始格式）"""
    return [
        {
            "id": "rule_gd_first",
            "fields": {
                "规则名称": "广东省-首重续重",
                "物流公司": "顺丰快递",
                "目的地": "广东省",
                "ModelType": "first_additional",
                "FirstWeightPrice": 18,
                "FirstWeightKg": 1,
                "AdditionalWeightPricePerKg": 6,
                "Timeliness": "1-2天",
            },
        },
        {
            "id": "rule_qy_tiered",
            "fields": {
                "规则名称": "清远市-专线",
                "物流公司": "新亮物流",
                "目的地": "清远市",
                "ModelType": "complex_tiered",
                "Rounding": "up_to_1",
                "Tiers": json.dumps(
                    [
                        {"upToKg": 3, "flatPrice": 8},
                        {"upToKg": None, "pricePerKg": 1.35, "baseFee": 4},
                    ]
                ),
            },
        },
        {
            "id": "rule_qy_min",
            "fields": {
                "规则名称": "清远市-安能标准",
                "物流公司": "安能标准",
                "目的地": "清远市",
                "ModelType": "tiered_minimum_charge",
                "MinimumCharge": 30,
                "Tiers": [{"upToKg": 100, "pricePerKg": 1.7}],
            },
        },
        {
            "id": "rule_broken",
            "fields": {"规则名称": "缺少字段", "ModelType": "first_additional"},
        },
    ]


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def rate_table_dir(temp_dir, sample_rate_tables):
    """写入磁盘的价格表目录"""
    table_dir = temp_dir / "rates"
    write_json(table_dir / "xinliang.json", sample_rate_tables.xinliang)
    write_json(table_dir / "sf.json", sample_rate_tables.sf)
    write_json(table_dir / "shentong.json", sample_rate_tables.shentong)
    write_json(table_dir / "anneng.json", sample_rate_tables.anneng)
    return table_dir


@pytest.fixture
def rule_store_files(temp_dir, sample_rule_records):
    """写入磁盘的规则与地点文件"""
    rules_path = write_json(temp_dir / "rules" / "price_rules.json", sample_rule_records)
    locations_path = write_json(
        temp_dir / "rules" / "locations.json",
        [
            {"id": "loc_gd", "fields": {"地点名": "广东省", "计价规则": ["rule_gd_first"]}},
            {"id": "loc_qy", "fields": {"地点名": "清远市", "计价规则": ["rule_qy_tiered"]}},
            {"id": "loc_unnamed", "fields": {"地点名": "未命名地点"}},
            {"id": "loc_empty", "fields": {}},
        ],
    )
    return rules_path, locations_path
