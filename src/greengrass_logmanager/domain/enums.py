"""
日志管理域枚举定义
"""

from enum import Enum


class LogLevel(str, Enum):
    """日志级别（按序号比较）"""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @property
    def ordinal(self) -> int:
        """级别序号，越大越严重"""
        return _LEVEL_ORDINALS[self]

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        """
        按名称解析日志级别（不区分大小写）

        Raises:
            ValueError: 未知的级别名称
        """
        key = (name or "").strip().upper()
        key = _LEVEL_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"未知的日志级别: {name!r}") from None

    def is_below(self, other: "LogLevel") -> bool:
        """是否低于指定级别"""
        return self.ordinal < other.ordinal


_LEVEL_ORDINALS = {
    LogLevel.TRACE: 0,
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}

_LEVEL_ALIASES = {
    "WARNING": "WARN",
}


class ComponentType(str, Enum):
    """组件类型"""

    GREENGRASS_SYSTEM_COMPONENT = "GreengrassSystemComponent"
    USER_COMPONENT = "UserComponent"


class AttemptState(str, Enum):
    """单次处理过程的状态"""

    RUNNING = "running"              # 处理中
    CAP_REACHED = "cap_reached"      # 达到批次大小上限
    QUEUE_EMPTY = "queue_empty"      # 文件队列已处理完
