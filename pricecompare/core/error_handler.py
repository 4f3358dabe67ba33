"""
统一异常处理模块
Unified Error Handling

异常类型定义与同步异常处理装饰器。
业务上的“无报价”以数据表达（price=None + note），不抛异常。
"""

import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from pricecompare.core.logger import get_logger


class PriceCompareError(Exception):
    """基础异常类"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(PriceCompareError):
    """配置错误"""
    pass


class DataLoadError(PriceCompareError):
    """价格表/地点数据加载错误"""
    pass


class RuleValidationError(PriceCompareError):
    """计价规则缺少必要字段，加载时丢弃"""
    pass


class PricingModelError(PriceCompareError):
    """计价模型缺失或未知（调用方违反前置条件）"""
    pass


def handle_errors(exceptions: Optional[tuple] = None,
                  default_return: Any = None,
                  logger=None,
                  raise_on_error: bool = False):
    """
    通用异常处理装饰器

    Args:
        exceptions: 需要捕获的异常类型
        default_return: 默认返回值
        logger: 日志记录器
        raise_on_error: 是否重新抛出异常
    """
    if exceptions is None:
        exceptions = (Exception,)

    if logger is None:
        logger = get_logger()

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except exceptions as e:
                logger.error(f"Error in {func.__name__}: {e}")
                if raise_on_error:
                    raise
                return default_return

        return wrapper
    return decorator


def log_execution_time(logger=None):
    """
    记录执行时间装饰器

    Args:
        logger: 日志记录器
    """
    if logger is None:
        logger = get_logger()

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.error(f"{func.__name__} failed after {elapsed_ms:.1f}ms: {e}")
                raise
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(f"{func.__name__} executed in {elapsed_ms:.1f}ms")
            return result

        return wrapper
    return decorator
