"""
上传尝试构建

按顺序消费组件的日志文件队列，生成一次上传尝试（Attempt）：
- 多行重组 -> 分类 -> 级别过滤 -> 批次预算 -> 按日期分流
- 只有被接受或被过滤的记录才推进文件检查点
- 达到批次上限后立即停止，未读完的文件保留在队首
"""

import contextlib
import os
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from greengrass_logmanager.domain.enums import AttemptState
from greengrass_logmanager.domain.errors import LogFileReadError
from greengrass_logmanager.domain.models import (
    Attempt,
    ClassifiedRecord,
    ComponentLogFileInformation,
    InputLogEvent,
    LogFileInformation,
)
from greengrass_logmanager.logs.budget import MAX_BATCH_SIZE, BatchBudget
from greengrass_logmanager.logs.classifier import LineClassifier
from greengrass_logmanager.logs.reassembler import MultilineReassembler
from greengrass_logmanager.logs.streams import (
    DEFAULT_LOG_GROUP_NAME,
    DEFAULT_LOG_STREAM_NAME,
    StreamGrouper,
    build_log_group_name,
)
from greengrass_logmanager.utils.time import now_ms


@dataclass
class _Pass:
    """单次处理过程的私有状态"""

    component: ComponentLogFileInformation
    attempt: Attempt
    budget: BatchBudget
    grouper: StreamGrouper
    reassembler: MultilineReassembler


class AttemptBuilder:
    """
    上传尝试构建器

    构建器本身无状态，可被多个组件并发复用；
    每次 process_log_files 调用的状态只属于该调用。
    """

    def __init__(
        self,
        thing_name: str,
        region: str,
        log_group_template: str = DEFAULT_LOG_GROUP_NAME,
        log_stream_template: str = DEFAULT_LOG_STREAM_NAME,
        max_batch_size: int = MAX_BATCH_SIZE,
        clock: Callable[[], int] = now_ms,
    ):
        """
        初始化构建器

        Args:
            thing_name: 设备 Thing 名称
            region: AWS 区域
            log_group_template: 日志组名称模板
            log_stream_template: 日志流名称模板
            max_batch_size: 单次尝试的批次大小上限（字节）
            clock: 毫秒时钟，纯文本日志无时间戳时使用
        """
        self.thing_name = thing_name
        self.region = region
        self._log_group_template = log_group_template
        self._log_stream_template = log_stream_template
        self._max_batch_size = max_batch_size
        self._classifier = LineClassifier(clock=clock)

    @classmethod
    def from_config(cls, config) -> "AttemptBuilder":
        """从 LogManagerConfig 创建"""
        return cls(
            thing_name=config.thing_name,
            region=config.region,
            log_group_template=config.log_group_template,
            log_stream_template=config.log_stream_template,
        )

    def process_log_files(self, component: ComponentLogFileInformation) -> Attempt:
        """
        处理组件的日志文件队列

        Args:
            component: 组件日志文件信息，队首已读完或不可读的文件会被弹出

        Returns:
            本次上传尝试
        """
        attempt = Attempt(
            log_group_name=build_log_group_name(
                component.component_type,
                self.region,
                component.name,
                self._log_group_template,
            )
        )
        state = _Pass(
            component=component,
            attempt=attempt,
            budget=BatchBudget(cap=self._max_batch_size),
            grouper=StreamGrouper(self.thing_name, self._log_stream_template),
            reassembler=MultilineReassembler(component.multiline_start_pattern),
        )

        queue = component.log_files
        while queue and not state.budget.exhausted:
            job = queue[0]
            try:
                finished = self._process_file(job, state)
            except (OSError, LogFileReadError) as e:
                # 文件可能已被删除，本轮不再重试，等待文件发现重新入队
                logger.error("[{}] 无法读取文件 {}: {}", component.name, job.path, e)
                queue.popleft()
                continue

            if finished:
                queue.popleft()

        attempt.state = AttemptState.CAP_REACHED if state.budget.exhausted else AttemptState.QUEUE_EMPTY
        attempt.total_bytes = state.budget.total_bytes

        logger.debug(
            "[{}] 处理完成: state={}, events={}, bytes={}, streams={}, pending_files={}",
            component.name,
            attempt.state.value,
            attempt.total_events(),
            attempt.total_bytes,
            len(attempt.log_streams),
            len(queue),
        )
        return attempt

    def _process_file(self, job: LogFileInformation, state: _Pass) -> bool:
        """
        处理单个文件

        Returns:
            文件是否已读完（达到批次上限时为 False）
        """
        handle = open(job.path, "rb")
        try:
            last_modified = job.last_modified
            if last_modified is None:
                last_modified = int(os.fstat(handle.fileno()).st_mtime * 1000)
            handle.seek(job.start_position)
        except (OSError, ValueError) as e:
            handle.close()
            raise LogFileReadError(
                f"无法定位文件: {job.path} ({e})",
                path=job.path,
                offset=job.start_position,
            ) from e

        records = state.reassembler.records(handle, job.path)
        with contextlib.closing(records):
            for raw, end_offset in records:
                record = self._classifier.classify(raw, end_offset)
                if not self._process_record(record, job, last_modified, state):
                    return False
        return True

    def _process_record(
        self,
        record: ClassifiedRecord,
        job: LogFileInformation,
        last_modified: int,
        state: _Pass,
    ) -> bool:
        """
        处理一条记录并推进检查点

        Returns:
            是否继续处理（批次已满时为 False）
        """
        component = state.component
        stream_name = state.grouper.stream_name(record.timestamp)

        filtered = (
            record.structured
            and record.level is not None
            and record.level.is_below(component.desired_log_level)
        )
        event = None
        if not filtered:
            event = InputLogEvent(message=record.message, timestamp=record.timestamp)
            if not state.budget.admit(event.message):
                logger.debug(
                    "[{}] 达到批次大小上限 ({} bytes)，停止读取 {}",
                    component.name,
                    state.budget.total_bytes,
                    job.path,
                )
                return False

        # 被过滤的记录不产生事件，但仍推进检查点
        bucket = state.attempt.bucket_for(stream_name, component.name)
        if event is not None:
            bucket.log_events.append(event)

        checkpoint = bucket.checkpoint_for(job.path, job.start_position, last_modified)
        checkpoint.commit(record.end_offset)
        return True
