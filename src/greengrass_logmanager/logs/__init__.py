"""
日志处理模块

把组件已轮转的本地日志文件转换为可上传的批次：
- 多行日志重组
- 结构化 / 纯文本分类
- 批次大小预算
- 按日期分流与文件检查点
"""

from greengrass_logmanager.logs.attempt import AttemptBuilder
from greengrass_logmanager.logs.budget import (
    EVENT_STORAGE_OVERHEAD,
    MAX_BATCH_SIZE,
    TIMESTAMP_BYTES,
    BatchBudget,
    event_size,
)
from greengrass_logmanager.logs.classifier import (
    TEXT_TIMESTAMP_PATTERN,
    LineClassifier,
    extract_timestamp,
    parse_structured,
)
from greengrass_logmanager.logs.reassembler import MultilineReassembler
from greengrass_logmanager.logs.streams import (
    DEFAULT_LOG_GROUP_NAME,
    DEFAULT_LOG_STREAM_NAME,
    StreamGrouper,
    build_log_group_name,
    build_log_stream_template,
)

__all__ = [
    # Attempt
    "AttemptBuilder",
    # Budget
    "BatchBudget",
    "event_size",
    "MAX_BATCH_SIZE",
    "EVENT_STORAGE_OVERHEAD",
    "TIMESTAMP_BYTES",
    # Classifier
    "LineClassifier",
    "extract_timestamp",
    "parse_structured",
    "TEXT_TIMESTAMP_PATTERN",
    # Reassembler
    "MultilineReassembler",
    # Streams
    "StreamGrouper",
    "build_log_group_name",
    "build_log_stream_template",
    "DEFAULT_LOG_GROUP_NAME",
    "DEFAULT_LOG_STREAM_NAME",
]
