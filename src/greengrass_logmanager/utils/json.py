"""
JSON 工具
"""

from datetime import datetime
from enum import Enum
from typing import Any

import ujson as json


def dumps(obj: Any, **kwargs) -> str:
    """安全的 JSON 序列化"""
    # 日志组与日志流名称中的 '/' 原样输出
    kwargs.setdefault("escape_forward_slashes", False)
    return json.dumps(obj, default=_default_encoder, ensure_ascii=False, **kwargs)


def loads(s: str) -> Any:
    """JSON 反序列化"""
    return json.loads(s)


def _default_encoder(obj: Any) -> Any:
    """默认编码器"""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
