"""
结构化日志的 Pydantic 模式定义

Greengrass 组件以 JSON 输出的自描述日志行，字段名不区分大小写。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from greengrass_logmanager.domain.enums import LogLevel
from greengrass_logmanager.utils.time import check_timestamp_ms

# 小写字段名 -> 模型字段
_FIELD_NAMES = {
    "thread": "thread",
    "level": "level",
    "eventtype": "event_type",
    "message": "message",
    "contexts": "contexts",
    "loggername": "logger_name",
    "timestamp": "timestamp",
    "cause": "cause",
}


class StructuredLogMessage(BaseModel):
    """结构化日志消息"""

    model_config = ConfigDict(extra="ignore")

    level: LogLevel
    timestamp: int = Field(..., description="时间戳（毫秒）")
    thread: str | None = None
    event_type: str | None = None
    message: str | None = None
    contexts: dict[str, Any] | None = None
    logger_name: str | None = None
    cause: Any = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        """字段名统一为小写后映射"""
        if not isinstance(data, dict):
            return data
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_NAMES.get(str(key).lower())
            if name is not None:
                normalized[name] = value
        return normalized

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        if not isinstance(value, str):
            raise ValueError("level 必须是字符串")
        return LogLevel.parse(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _check_timestamp(cls, value: Any) -> Any:
        # bool 是 int 的子类，需要排除
        if isinstance(value, bool):
            raise ValueError("timestamp 必须是整数毫秒")
        return value

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp_range(cls, value: int) -> int:
        return check_timestamp_ms(value)
