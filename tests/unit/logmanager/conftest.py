"""日志管理单元测试公共夹具"""

from pathlib import Path

import pytest
from loguru import logger

from greengrass_logmanager.logs.attempt import AttemptBuilder

# 2023-11-14T22:13:20Z
_FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture
def fixed_now_ms() -> int:
    return _FIXED_NOW_MS


@pytest.fixture
def write_log(tmp_path: Path):
    """写入日志文件并返回绝对路径"""

    def _write(name: str, content: str | bytes) -> str:
        path = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return str(path)

    return _write


@pytest.fixture
def make_builder():
    """创建使用固定时钟的构建器"""

    def _make(**kwargs) -> AttemptBuilder:
        kwargs.setdefault("thing_name", "test-thing")
        kwargs.setdefault("region", "us-west-2")
        kwargs.setdefault("clock", lambda: _FIXED_NOW_MS)
        return AttemptBuilder(**kwargs)

    return _make


@pytest.fixture
def captured_logs():
    """捕获 loguru 输出"""
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="TRACE", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
