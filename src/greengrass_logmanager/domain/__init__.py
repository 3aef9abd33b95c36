"""
日志管理域模型

定义单次上传尝试所需的最小模型集合。
"""

from greengrass_logmanager.domain.enums import (
    AttemptState,
    ComponentType,
    LogLevel,
)
from greengrass_logmanager.domain.errors import (
    ConfigError,
    LogFileReadError,
    LogManagerError,
    StructuredLogParseError,
)
from greengrass_logmanager.domain.models import (
    Attempt,
    ClassifiedRecord,
    ComponentLogFileInformation,
    FileCheckpoint,
    InputLogEvent,
    LogFileInformation,
    StreamBucket,
)
from greengrass_logmanager.domain.schemas import StructuredLogMessage

__all__ = [
    # Models
    "LogFileInformation",
    "ComponentLogFileInformation",
    "ClassifiedRecord",
    "InputLogEvent",
    "FileCheckpoint",
    "StreamBucket",
    "Attempt",
    "StructuredLogMessage",
    # Enums
    "LogLevel",
    "ComponentType",
    "AttemptState",
    # Errors
    "LogManagerError",
    "LogFileReadError",
    "StructuredLogParseError",
    "ConfigError",
]
