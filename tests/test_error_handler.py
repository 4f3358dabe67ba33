"""
异常处理单元测试
Error Handler Tests
"""

from unittest.mock import Mock

import pytest

from pricecompare.core.error_handler import (
    ConfigError,
    DataLoadError,
    PriceCompareError,
    PricingModelError,
    RuleValidationError,
    handle_errors,
    log_execution_time,
)


class TestHandleErrors:
    """通用错误处理装饰器测试"""

    def test_handle_errors_success(self):
        """测试成功执行"""
        @handle_errors(default_return="fallback")
        def test_func():
            return "success"

        assert test_func() == "success"

    def test_handle_errors_with_exception(self):
        """测试异常时返回默认值"""
        mock_logger = Mock()

        @handle_errors(default_return="fallback", logger=mock_logger)
        def test_func():
            raise ValueError("Test error")

        assert test_func() == "fallback"
        mock_logger.error.assert_called()
        assert "Error in test_func" in str(mock_logger.error.call_args)

    def test_handle_errors_specific_exception(self):
        """测试只捕获指定异常"""
        @handle_errors(exceptions=(ValueError,), default_return="value_error")
        def test_func(kind):
            if kind == "value":
                raise ValueError("Test error")
            raise KeyError("other")

        assert test_func("value") == "value_error"
        with pytest.raises(KeyError):
            test_func("key")

    def test_handle_errors_raise_on_error(self):
        """测试raise_on_error参数"""
        @handle_errors(raise_on_error=True)
        def test_func():
            raise DataLoadError("broken file")

        with pytest.raises(DataLoadError):
            test_func()

    def test_handle_errors_preserves_name(self):
        @handle_errors()
        def load_tables():
            return None

        assert load_tables.__name__ == "load_tables"


class TestLogExecutionTime:
    """执行时间记录装饰器测试"""

    def test_log_execution_time(self):
        """测试执行时间记录"""
        mock_logger = Mock()

        @log_execution_time(logger=mock_logger)
        def test_func():
            return "success"

        assert test_func() == "success"
        mock_logger.debug.assert_called()
        assert "executed in" in str(mock_logger.debug.call_args)

    def test_log_execution_time_with_error(self):
        """测试错误时的执行时间记录"""
        mock_logger = Mock()

        @log_execution_time(logger=mock_logger)
        def test_func():
            raise ValueError("Test error")

        with pytest.raises(ValueError):
            test_func()
        mock_logger.error.assert_called()
        assert "failed after" in str(mock_logger.error.call_args)


class TestErrorClasses:
    """异常类测试"""

    def test_base_error(self):
        """测试基础异常类"""
        error = PriceCompareError("Test error")
        assert error.message == "Test error"
        assert error.details == {}
        assert str(error) == "Test error"

    def test_error_to_dict(self):
        """测试to_dict方法"""
        details = {"rule": "广东省-首重续重"}
        error = RuleValidationError("Rule missing field", details=details)
        assert error.to_dict() == {
            "type": "RuleValidationError",
            "message": "Rule missing field",
            "details": details,
        }

    @pytest.mark.parametrize("error_cls", [ConfigError, DataLoadError, RuleValidationError, PricingModelError])
    def test_subclasses(self, error_cls):
        error = error_cls("failed")
        assert isinstance(error, PriceCompareError)
        assert error.message == "failed"
