"""
工具模块
"""

from greengrass_logmanager.utils.time import (
    TIMESTAMP_PARSERS,
    format_stream_date,
    now_ms,
    parse_iso_instant,
    parse_iso_offset_date_time,
)

__all__ = [
    "TIMESTAMP_PARSERS",
    "format_stream_date",
    "now_ms",
    "parse_iso_instant",
    "parse_iso_offset_date_time",
]
