"""
日志管理域模型定义

描述一次上传尝试（Attempt）所需的输入与输出模型：
- 输入：组件的日志文件队列（LogFileInformation）
- 中间：已分类的日志记录（ClassifiedRecord）
- 输出：按日志流分组的事件与文件检查点（Attempt）
"""

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from greengrass_logmanager.domain.enums import AttemptState, ComponentType, LogLevel


@dataclass
class LogFileInformation:
    """
    待读取的日志文件（读取任务）

    由外部文件发现组件创建，文件读完或不可读时从队列移除。
    """

    path: str                            # 文件绝对路径
    start_position: int = 0              # 本次读取的起始偏移（字节）
    last_modified: int | None = None     # 任务创建时的修改时间（毫秒，None=打开时读取）

    def __post_init__(self):
        if self.start_position < 0:
            raise ValueError(f"起始偏移不能为负数: {self.start_position}")

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "path": self.path,
            "start_position": self.start_position,
            "last_modified": self.last_modified,
        }


@dataclass
class ComponentLogFileInformation:
    """
    组件日志文件信息

    一个组件一次处理过程的全部输入。`log_files` 为先进先出队列，
    处理过程中会从队首弹出已读完或不可读的文件。
    """

    name: str                            # 组件名称
    component_type: ComponentType = ComponentType.USER_COMPONENT
    desired_log_level: LogLevel = LogLevel.INFO
    multiline_start_pattern: re.Pattern = field(default_factory=lambda: re.compile(r"^[^\s]"))
    log_files: deque[LogFileInformation] = field(default_factory=deque)

    def __post_init__(self):
        # 允许传入 list，统一为 deque
        if not isinstance(self.log_files, deque):
            self.log_files = deque(self.log_files)


@dataclass
class ClassifiedRecord:
    """
    已分类的日志记录（可能由多行组成）

    `raw` 保留原始换行符，按顺序拼接即可还原文件内容。
    """

    raw: str                             # 原始文本（含换行符）
    end_offset: int                      # 记录最后一行之后的文件偏移
    timestamp: int = 0                   # 时间戳（毫秒）
    level: LogLevel | None = None        # 结构化日志级别（纯文本为 None）
    structured: bool = False

    @property
    def message(self) -> str:
        """上传的消息内容（去掉末尾换行符）"""
        if self.raw.endswith("\r\n"):
            return self.raw[:-2]
        if self.raw.endswith(("\n", "\r")):
            return self.raw[:-1]
        return self.raw


@dataclass
class InputLogEvent:
    """上传的日志事件"""

    message: str
    timestamp: int                       # 时间戳（毫秒）

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "timestamp": self.timestamp,
        }


@dataclass
class FileCheckpoint:
    """
    文件检查点

    记录某文件在一次尝试中已提交的进度：
    bytes_read == 当前偏移 - start_position
    """

    start_position: int
    last_modified: int
    bytes_read: int = 0

    @property
    def committed_offset(self) -> int:
        """已提交的文件偏移"""
        return self.start_position + self.bytes_read

    def commit(self, current_offset: int) -> None:
        """提交到指定偏移"""
        self.bytes_read = current_offset - self.start_position

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_position": self.start_position,
            "bytes_read": self.bytes_read,
            "last_modified": self.last_modified,
        }


@dataclass
class StreamBucket:
    """
    单个日志流的事件集合

    在首次路由到该日志流时创建。
    """

    component_name: str
    log_events: list[InputLogEvent] = field(default_factory=list)
    file_checkpoints: dict[str, FileCheckpoint] = field(default_factory=dict)

    def checkpoint_for(
        self,
        path: str,
        start_position: int,
        last_modified: int,
    ) -> FileCheckpoint:
        """获取文件检查点，不存在则创建"""
        checkpoint = self.file_checkpoints.get(path)
        if checkpoint is None:
            checkpoint = FileCheckpoint(
                start_position=start_position,
                last_modified=last_modified,
            )
            self.file_checkpoints[path] = checkpoint
        return checkpoint

    def to_dict(self) -> dict[str, Any]:
        return {
            "component_name": self.component_name,
            "log_events": [event.to_dict() for event in self.log_events],
            "file_checkpoints": {
                path: checkpoint.to_dict()
                for path, checkpoint in self.file_checkpoints.items()
            },
        }


@dataclass
class Attempt:
    """
    一次上传尝试

    单次处理过程的结果，交由外部上传组件发送。
    """

    log_group_name: str = ""
    log_streams: dict[str, StreamBucket] = field(default_factory=dict)
    state: AttemptState = AttemptState.RUNNING
    total_bytes: int = 0                 # 按线上协议计算的批次大小

    def bucket_for(self, stream_name: str, component_name: str) -> StreamBucket:
        """获取日志流，不存在则创建"""
        bucket = self.log_streams.get(stream_name)
        if bucket is None:
            bucket = StreamBucket(component_name=component_name)
            self.log_streams[stream_name] = bucket
        return bucket

    def total_events(self) -> int:
        """事件总数"""
        return sum(len(bucket.log_events) for bucket in self.log_streams.values())

    def committed_offsets(self) -> dict[str, int]:
        """
        每个文件已提交的最远偏移

        同一文件可能分布在多个日志流中，取各检查点的最大值。
        """
        offsets: dict[str, int] = {}
        for bucket in self.log_streams.values():
            for path, checkpoint in bucket.file_checkpoints.items():
                offsets[path] = max(offsets.get(path, 0), checkpoint.committed_offset)
        return offsets

    def to_dict(self) -> dict[str, Any]:
        return {
            "log_group_name": self.log_group_name,
            "state": self.state.value,
            "total_bytes": self.total_bytes,
            "log_streams": {
                name: bucket.to_dict() for name, bucket in self.log_streams.items()
            },
        }
