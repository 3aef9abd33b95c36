"""
日志行分类

判断一条记录是结构化日志（JSON，自带时间戳与级别）还是纯文本日志。
纯文本日志从首个类时间戳片段中提取时间，失败则使用当前时间。
"""

import re
from collections.abc import Callable

from loguru import logger
from pydantic import ValidationError

from greengrass_logmanager.domain.errors import StructuredLogParseError
from greengrass_logmanager.domain.models import ClassifiedRecord
from greengrass_logmanager.domain.schemas import StructuredLogMessage
from greengrass_logmanager.utils.json import loads
from greengrass_logmanager.utils.time import TIMESTAMP_PARSERS, now_ms

# 由字母数字、下划线及 - : . + 组成的连续片段
TEXT_TIMESTAMP_PATTERN = re.compile(r"([\w\-:.+]+)")


def parse_structured(text: str) -> StructuredLogMessage:
    """
    解析结构化日志

    Raises:
        StructuredLogParseError: 不是结构化日志
    """
    try:
        return StructuredLogMessage.model_validate(loads(text))
    except (ValueError, RecursionError, ValidationError) as e:
        # 嵌套过深的纯文本行也按纯文本处理
        raise StructuredLogParseError("不是结构化日志", details={"error": str(e)}) from e


def extract_timestamp(
    text: str,
    parsers: list[Callable[[str], int]] | None = None,
    clock: Callable[[], int] = now_ms,
) -> int:
    """
    从纯文本中提取时间戳（毫秒）

    取首个候选片段，按顺序尝试各时间格式，全部失败则返回当前时间。
    """
    match = TEXT_TIMESTAMP_PATTERN.search(text)
    if not match:
        return clock()

    token = match.group(1)
    for parse in parsers or TIMESTAMP_PARSERS:
        try:
            return parse(token)
        except ValueError as e:
            logger.trace("无法解析时间戳: {} ({})", token, e)
    return clock()


class LineClassifier:
    """日志行分类器"""

    def __init__(self, clock: Callable[[], int] = now_ms):
        self._clock = clock

    def classify(self, raw: str, end_offset: int) -> ClassifiedRecord:
        """分类一条记录"""
        try:
            message = parse_structured(raw)
        except StructuredLogParseError:
            return ClassifiedRecord(
                raw=raw,
                end_offset=end_offset,
                timestamp=extract_timestamp(raw, clock=self._clock),
            )

        return ClassifiedRecord(
            raw=raw,
            end_offset=end_offset,
            timestamp=message.timestamp,
            level=message.level,
            structured=True,
        )
