"""
多行重组单元测试
"""

import io
import re

import pytest

from greengrass_logmanager.domain.errors import LogFileReadError
from greengrass_logmanager.logs.reassembler import MultilineReassembler

DEFAULT_PATTERN = re.compile(r"^[^\s]")


class FlakyHandle(io.BytesIO):
    """读取若干行后抛出 OSError 的文件句柄"""

    def __init__(self, data: bytes, fail_after: int):
        super().__init__(data)
        self._remaining = fail_after

    def readline(self, *args):
        if self._remaining == 0:
            raise OSError("device gone")
        self._remaining -= 1
        return super().readline(*args)


def _records(data: bytes, pattern=DEFAULT_PATTERN, start: int = 0):
    handle = io.BytesIO(data)
    handle.seek(start)
    return list(MultilineReassembler(pattern).records(handle, "test.log")), handle


class TestMultilineReassembler:
    """多行重组器测试"""

    def test_independent_lines(self):
        """测试每行都是新记录"""
        records, handle = _records(b"one\ntwo\nthree\n")

        assert records == [("one\n", 4), ("two\n", 8), ("three\n", 14)]
        assert handle.closed

    def test_continuation_lines(self):
        """测试续行合并为一条记录"""
        data = b"Exception: boom\n  at a.b(C.java:1)\n  at c.d(E.java:2)\n"

        records, _ = _records(data)

        assert records == [(data.decode(), len(data))]

    def test_first_line_always_starts_record(self):
        """测试起始偏移处的第一行总是开始新记录"""
        records, _ = _records(b"  indented\nnext\n")

        assert records == [("  indented\n", 11), ("next\n", 16)]

    def test_offset_is_before_triggering_line(self):
        """测试记录偏移为触发行之前的位置"""
        records, _ = _records(b"a\n b\nc\n")

        assert records[0] == ("a\n b\n", 5)
        assert records[1] == ("c\n", 7)

    def test_resume_from_offset(self):
        """测试从指定偏移继续读取"""
        records, _ = _records(b"one\ntwo\nthree\n", start=4)

        assert records == [("two\n", 8), ("three\n", 14)]

    def test_empty_at_eof(self):
        """测试从文件末尾开始时没有记录"""
        records, handle = _records(b"one\n", start=4)

        assert records == []
        assert handle.closed

    def test_missing_final_newline(self):
        """测试最后一行没有换行符"""
        records, _ = _records(b"one\ntwo")

        assert records == [("one\n", 4), ("two", 7)]

    def test_crlf_offsets(self):
        """测试 CRLF 按原始字节计算偏移"""
        records, _ = _records(b"one\r\ntwo\r\n")

        assert records == [("one\r\n", 5), ("two\r\n", 10)]

    def test_multibyte_offsets(self):
        """测试多字节字符按字节计算偏移"""
        data = "日志一\n日志二\n".encode()

        records, _ = _records(data)

        assert records == [("日志一\n", 10), ("日志二\n", 20)]

    def test_invalid_utf8_replaced(self):
        """测试无效 UTF-8 被替换但偏移不变"""
        records, _ = _records(b"caf\xe9\nok\n")

        assert records == [("caf\ufffd\n", 5), ("ok\n", 8)]

    def test_custom_pattern_search(self):
        """测试起始模式按 search 匹配"""
        pattern = re.compile(r"\[\d+\]")
        data = b"x [1] first\ncontinued\ny [2] second\n"

        records, _ = _records(data, pattern=pattern)

        assert [r for r, _ in records] == ["x [1] first\ncontinued\n", "y [2] second\n"]

    def test_pattern_ignores_line_terminator(self):
        """测试匹配时去掉行尾换行符"""
        pattern = re.compile(r"^\s*$")
        records, _ = _records(b"a\n\nb\n", pattern=pattern)

        assert [r for r, _ in records] == ["a\n", "\nb\n"]

    def test_read_error(self):
        """测试读取失败时抛出 LogFileReadError 并关闭文件"""
        handle = FlakyHandle(b"one\ntwo\nthree\n", fail_after=2)
        records = MultilineReassembler(DEFAULT_PATTERN).records(handle, "flaky.log")

        assert next(records) == ("one\n", 4)
        with pytest.raises(LogFileReadError) as exc_info:
            next(records)

        assert exc_info.value.path == "flaky.log"
        assert exc_info.value.offset == 8
        assert isinstance(exc_info.value.__cause__, OSError)
        assert handle.closed

    def test_close_early_closes_file(self):
        """测试提前关闭生成器时关闭文件"""
        handle = io.BytesIO(b"one\ntwo\nthree\n")
        records = MultilineReassembler(DEFAULT_PATTERN).records(handle)

        next(records)
        records.close()

        assert handle.closed
