"""
时间工具

提供毫秒时间戳、ISO 时间解析与日志流日期格式化。
"""

import re
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

# ISO-8601 瞬时时间，只接受 UTC 'Z' 结尾
_ISO_INSTANT = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,9})?)?Z$",
    re.IGNORECASE,
)

# ISO-8601 带时区偏移的时间
_ISO_OFFSET_DATE_TIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,9})?)?(Z|[+-]\d{2}:\d{2}(:\d{2})?)$",
    re.IGNORECASE,
)


_SUB_MICROS = re.compile(r"(\.\d{6})\d+")

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def now_ms() -> int:
    """当前时间戳（毫秒）"""
    return int(time.time() * 1000)


def to_epoch_ms(value: datetime) -> int:
    """带时区的 datetime 转毫秒时间戳"""
    return (value - _EPOCH) // timedelta(milliseconds=1)


# 可格式化为 UTC 日期的范围（公元 1 年至 9999 年）
MIN_TIMESTAMP_MS = to_epoch_ms(datetime.min.replace(tzinfo=UTC))
MAX_TIMESTAMP_MS = to_epoch_ms(datetime.max.replace(tzinfo=UTC))


def check_timestamp_ms(timestamp_ms: int) -> int:
    """
    校验毫秒时间戳可被格式化为日期

    Raises:
        ValueError: 超出公元 1 年至 9999 年
    """
    if not MIN_TIMESTAMP_MS <= timestamp_ms <= MAX_TIMESTAMP_MS:
        raise ValueError(f"时间戳超出范围: {timestamp_ms}")
    return timestamp_ms


def _from_iso(s: str) -> int:
    # datetime 精度为微秒，纳秒部分直接截断
    normalized = _SUB_MICROS.sub(r"\1", s.upper())
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    # 带偏移的边界时间换算到 UTC 后可能越界
    return check_timestamp_ms(to_epoch_ms(datetime.fromisoformat(normalized)))


def parse_iso_instant(s: str) -> int:
    """
    解析严格的 ISO 瞬时时间（如 2020-12-15T10:00:00.123Z）

    Raises:
        ValueError: 格式不符
    """
    if not _ISO_INSTANT.match(s):
        raise ValueError(f"不是 ISO 瞬时时间: {s}")
    return _from_iso(s)


def parse_iso_offset_date_time(s: str) -> int:
    """
    解析带时区偏移的 ISO 时间（如 2020-12-15T10:00:00+08:00）

    Raises:
        ValueError: 格式不符
    """
    if not _ISO_OFFSET_DATE_TIME.match(s):
        raise ValueError(f"不是带时区偏移的 ISO 时间: {s}")
    return _from_iso(s)


# 按顺序尝试的时间格式，首个成功的生效
TIMESTAMP_PARSERS: list[Callable[[str], int]] = [
    parse_iso_instant,
    parse_iso_offset_date_time,
]


def format_stream_date(timestamp_ms: int) -> str:
    """毫秒时间戳格式化为日志流日期（UTC，yyyy/MM/dd）"""
    return (_EPOCH + timedelta(milliseconds=timestamp_ms)).strftime("%Y/%m/%d")
