"""
配置模型与验证
Configuration Models and Validation

使用Pydantic进行配置验证
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class AppConfig(BaseModel):
    """应用配置模型"""
    name: str = Field(default="express-price-compare", description="应用名称")
    version: str = Field(default="1.0.0", description="版本号")
    debug: bool = Field(default=False, description="调试模式")
    log_level: str = Field(default="INFO", description="日志级别")
    data_dir: str = Field(default="data", description="数据目录")
    logs_dir: str = Field(default="logs", description="日志目录")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """验证日志级别"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v


class QuoteConfig(BaseModel):
    """比价配置模型"""
    rate_table_dir: str = Field(default="data/rates", description="各物流公司价格表目录")
    cache_max_entries: int = Field(default=50, ge=0, le=10000, description="报价结果缓存条数上限")
    currency: str = Field(default="CNY", description="报价币种")

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        """只支持人民币报价"""
        if v != "CNY":
            raise ValueError(f"currency must be CNY, got {v}")
        return v


class RuleStoreConfig(BaseModel):
    """通用计价规则库配置模型"""
    rules_path: str = Field(default="data/rules/price_rules.json", description="计价规则文件")
    locations_path: str = Field(default="data/rules/locations.json", description="地点文件")


class ProfitConfig(BaseModel):
    """利润计算器配置模型"""
    history_path: str = Field(default="data/profit_history.json", description="计算历史文件")
    max_records: int = Field(default=5, ge=1, le=100, description="保留的历史记录条数")


class ConfigModel(BaseModel):
    """完整配置模型"""
    app: AppConfig = Field(default_factory=AppConfig)
    quote: QuoteConfig = Field(default_factory=QuoteConfig)
    rule_store: RuleStoreConfig = Field(default_factory=RuleStoreConfig)
    profit: ProfitConfig = Field(default_factory=ProfitConfig)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigModel":
        """从字典创建配置"""
        return cls(**data)
