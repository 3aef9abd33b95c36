"""
日志管理域错误定义
"""

from typing import Any


class LogManagerError(Exception):
    """日志管理基础错误"""

    def __init__(
        self,
        message: str,
        code: str = "LOGMANAGER_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class LogFileReadError(LogManagerError):
    """日志文件读取错误"""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        offset: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="LOG_FILE_READ_ERROR", details=details)
        self.path = path
        self.offset = offset


class StructuredLogParseError(LogManagerError):
    """结构化日志解析错误"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="STRUCTURED_LOG_PARSE_ERROR", details=details)


class ConfigError(LogManagerError):
    """配置错误"""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="CONFIG_ERROR", details=details)
        self.config_key = config_key
