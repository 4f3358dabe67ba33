"""
计算历史与剪贴板
Calculation History & Clipboard

历史记录只保留最近 N 条并按输入去重；存储与剪贴板均通过接口注入。
"""

from __future__ import annotations

import json
import shutil
import subprocess
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pricecompare.core.error_handler import handle_errors
from pricecompare.core.logger import get_logger

N_POINT = "n-point"
PROFIT_POINT = "profit-point"
RECORD_TYPES = (N_POINT, PROFIT_POINT)

# 各类型用于判重的输入字段
_DEDUPE_KEYS: dict[str, tuple[str, ...]] = {
    N_POINT: ("cost", "profitRate"),
    PROFIT_POINT: ("cost", "price"),
}


@dataclass(slots=True)
class CalculationRecord:
    id: str
    type: str
    inputs: dict[str, float] = field(default_factory=dict)
    outputs: dict[str, float] = field(default_factory=dict)
    timestamp: int = 0

    @classmethod
    def create(cls, record_type: str, inputs: dict[str, float], outputs: dict[str, float]) -> "CalculationRecord":
        if record_type not in RECORD_TYPES:
            raise ValueError(f"Unknown calculation type: {record_type}")
        return cls(
            id=uuid.uuid4().hex,
            type=record_type,
            inputs=dict(inputs),
            outputs=dict(outputs),
            timestamp=int(time.time() * 1000),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalculationRecord":
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            inputs=dict(data.get("inputs") or {}),
            outputs=dict(data.get("outputs") or {}),
            timestamp=int(data.get("timestamp") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "inputs": self.inputs,
            "outputs": self.outputs,
            "timestamp": self.timestamp,
        }

    def same_inputs(self, other: "CalculationRecord") -> bool:
        if self.type != other.type:
            return False
        keys = _DEDUPE_KEYS.get(self.type)
        if not keys:
            return False
        return all(self.inputs.get(key) == other.inputs.get(key) for key in keys)


class IHistoryStorage(ABC):
    """历史记录存储接口。"""

    @abstractmethod
    def load(self) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    def save(self, records: list[dict[str, Any]]) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class MemoryHistoryStorage(IHistoryStorage):
    def __init__(self) -> None:
        self._records: list[dict[str, Any]] = []

    def load(self) -> list[dict[str, Any]]:
        return [dict(item) for item in self._records]

    def save(self, records: list[dict[str, Any]]) -> None:
        self._records = [dict(item) for item in records]

    def clear(self) -> None:
        self._records = []


class JsonFileHistoryStorage(IHistoryStorage):
    """JSON 文件存储。"""

    def __init__(self, path: str | Path = "data/profit_history.json"):
        self.path = Path(path)

    def load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"History file {self.path} must contain a list")
        return [item for item in data if isinstance(item, dict)]

    def save(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class CalculationHistory:
    """最近计算记录，新记录在前；存储失败只记日志。"""

    def __init__(self, storage: IHistoryStorage | None = None, max_records: int = 5):
        self.storage = storage or MemoryHistoryStorage()
        self.max_records = max(1, int(max_records))
        self.logger = get_logger()

    def get(self) -> list[CalculationRecord]:
        """读取失败时返回空列表。"""
        return list(self._load())

    @handle_errors(exceptions=(OSError, ValueError, TypeError), default_return=())
    def _load(self) -> list[CalculationRecord]:
        return [CalculationRecord.from_dict(item) for item in self.storage.load()]

    def save(self, record: CalculationRecord) -> bool:
        """保存记录；与已有记录输入相同时跳过并返回 False。"""
        existing = self.get()
        if any(item.same_inputs(record) for item in existing):
            self.logger.debug(f"Skip duplicate {record.type} record: {record.inputs}")
            return False

        records = [record, *existing][: self.max_records]
        try:
            self.storage.save([item.to_dict() for item in records])
        except (OSError, ValueError, TypeError) as e:
            self.logger.error(f"Failed to save calculation history: {e}")
            return False
        return True

    def clear(self) -> None:
        try:
            self.storage.clear()
        except OSError as e:
            self.logger.error(f"Failed to clear calculation history: {e}")


class IClipboard(ABC):
    """剪贴板接口。"""

    @abstractmethod
    def write(self, text: str) -> None:
        pass


class MemoryClipboard(IClipboard):
    def __init__(self) -> None:
        self.text: str | None = None

    def write(self, text: str) -> None:
        self.text = text


class CommandClipboard(IClipboard):
    """通过系统命令写入剪贴板（pbcopy / wl-copy / xclip / clip）。"""

    CANDIDATES: tuple[tuple[str, ...], ...] = (
        ("pbcopy",),
        ("wl-copy",),
        ("xclip", "-selection", "clipboard"),
        ("xsel", "--clipboard", "--input"),
        ("clip",),
    )

    def __init__(self, command: list[str] | None = None, timeout: float = 5.0):
        self.command = list(command) if command else self._detect()
        self.timeout = timeout

    @classmethod
    def _detect(cls) -> list[str]:
        for candidate in cls.CANDIDATES:
            if shutil.which(candidate[0]):
                return list(candidate)
        return []

    def write(self, text: str) -> None:
        if not self.command:
            raise RuntimeError("No clipboard command available")
        subprocess.run(
            self.command,
            input=text.encode("utf-8"),
            check=True,
            timeout=self.timeout,
        )


def copy_to_clipboard(text: str, clipboard: IClipboard | None = None) -> bool:
    try:
        (clipboard or CommandClipboard()).write(text)
        return True
    except (OSError, RuntimeError, subprocess.SubprocessError) as e:
        get_logger().error(f"复制失败: {e}")
        return False
