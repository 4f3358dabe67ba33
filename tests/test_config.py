"""
配置模块单元测试
Config Module Unit Tests
"""

import pytest
from pydantic import ValidationError

from pricecompare.core.config import Config, get_config
from pricecompare.core.config_models import (
    AppConfig,
    ConfigModel,
    ProfitConfig,
    QuoteConfig,
    RuleStoreConfig,
)
from pricecompare.core.error_handler import ConfigError


@pytest.fixture(autouse=True)
def reset_config():
    yield
    Config._instance = None
    get_config.cache_clear()


class TestConfig:
    """配置管理类测试"""

    def test_config_singleton(self):
        """测试单例模式"""
        config1 = Config()
        config2 = Config()
        assert config1 is config2
        assert get_config() is config1

    def test_config_load_from_yaml(self, temp_config_file):
        """测试从YAML加载配置"""
        config = Config(str(temp_config_file))
        assert config.get("app.name") == "express-price-compare-test"
        assert config.get("quote.cache_max_entries") == 3

    def test_config_get_section(self, config):
        """测试获取配置段落"""
        assert config.get_section("app")["version"] == "1.0.0"
        assert config.quote["currency"] == "CNY"
        assert config.profit["max_records"] == 5
        assert config.rule_store["rules_path"].endswith("price_rules.json")
        assert config.get_section("missing") == {}

    def test_config_get_value(self, config):
        """测试获取配置值"""
        assert config.get("app.debug") is True
        assert config.get("nonexistent.key", "default") == "default"
        assert config.get("app.name.deeper", "default") == "default"

    def test_config_reload(self, temp_config_file):
        """测试重新加载配置"""
        config = Config(str(temp_config_file))
        assert config.get("quote.cache_max_entries") == 3

        temp_config_file.write_text(
            """
app:
  name: "updated_name"
quote:
  cache_max_entries: 10
""",
            encoding="utf-8",
        )

        config.reload()
        assert config.get("app.name") == "updated_name"
        assert config.get("quote.cache_max_entries") == 10
        # 缺省字段补默认值
        assert config.get("quote.rate_table_dir") == "data/rates"

    def test_config_missing_file(self, temp_dir):
        """测试配置文件不存在"""
        config = Config(str(temp_dir / "nonexistent.yaml"))
        assert config.get("app.name") == "express-price-compare"
        assert config.get("profit.max_records") == 5

    def test_config_invalid_values(self, temp_dir):
        """测试非法配置值"""
        config_file = temp_dir / "invalid.yaml"
        config_file.write_text("quote:\n  cache_max_entries: -1\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config(str(config_file))

    def test_config_invalid_yaml(self, temp_dir):
        """测试YAML语法错误"""
        config_file = temp_dir / "broken.yaml"
        config_file.write_text("quote: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config(str(config_file))


class TestConfigModels:
    """配置模型测试"""

    def test_quote_config_defaults(self):
        """测试比价配置默认值"""
        config = QuoteConfig()
        assert config.rate_table_dir == "data/rates"
        assert config.cache_max_entries == 50
        assert config.currency == "CNY"

    def test_quote_config_validation(self):
        """测试比价配置验证"""
        assert QuoteConfig(cache_max_entries=0).cache_max_entries == 0

        with pytest.raises(ValidationError):
            QuoteConfig(cache_max_entries=-1)

        with pytest.raises(ValidationError):
            QuoteConfig(currency="USD")

    def test_rule_store_config_defaults(self):
        """测试规则库配置默认值"""
        config = RuleStoreConfig()
        assert config.rules_path == "data/rules/price_rules.json"
        assert config.locations_path == "data/rules/locations.json"

    def test_profit_config_validation(self):
        """测试利润计算配置验证"""
        assert ProfitConfig().max_records == 5
        with pytest.raises(ValidationError):
            ProfitConfig(max_records=0)

    def test_config_model_log_level_validation(self):
        """测试日志级别验证"""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            config = ConfigModel.from_dict({"app": {"log_level": level}})
            assert config.app.log_level == level

        with pytest.raises(ValidationError):
            AppConfig(log_level="INVALID")

    def test_config_model_to_dict(self):
        """测试配置转换为字典"""
        config_dict = ConfigModel().to_dict()
        assert set(config_dict) == {"app", "quote", "rule_store", "profit"}


class TestEnvVariableResolution:
    """环境变量解析测试"""

    @pytest.fixture
    def config_file_with_env(self, temp_dir):
        """创建包含环境变量的配置文件"""
        config_file = temp_dir / "config_with_env.yaml"
        config_file.write_text(
            """
quote:
  rate_table_dir: "${TEST_RATE_DIR}"
profit:
  history_path: "${TEST_HISTORY_PATH}"
""",
            encoding="utf-8",
        )
        return config_file

    def test_env_variable_resolution(self, config_file_with_env, monkeypatch):
        """测试环境变量解析"""
        monkeypatch.setenv("TEST_RATE_DIR", "/srv/rates")
        monkeypatch.setenv("TEST_HISTORY_PATH", "/srv/history.json")

        config = Config(str(config_file_with_env))
        assert config.get("quote.rate_table_dir") == "/srv/rates"
        assert config.get("profit.history_path") == "/srv/history.json"

    def test_env_variable_missing(self, config_file_with_env, monkeypatch):
        """测试缺失环境变量"""
        monkeypatch.delenv("TEST_RATE_DIR", raising=False)
        monkeypatch.delenv("TEST_HISTORY_PATH", raising=False)

        config = Config(str(config_file_with_env))
        assert config.get("quote.rate_table_dir") == "${TEST_RATE_DIR}"
