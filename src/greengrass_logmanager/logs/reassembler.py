"""
多行日志重组

按行顺序读取文件，遇到匹配"新记录起始"模式的行时输出已累积的记录，
用于把堆栈等多行输出合并为一条日志。
"""

import re
from collections.abc import Iterator
from typing import BinaryIO

from greengrass_logmanager.domain.errors import LogFileReadError


class MultilineReassembler:
    """
    多行日志重组器

    只适用于已轮转、不再写入的文件。
    """

    def __init__(self, start_pattern: re.Pattern):
        self._start_pattern = start_pattern

    def _starts_record(self, line: str) -> bool:
        return self._start_pattern.search(line.rstrip("\r\n")) is not None

    def records(self, handle: BinaryIO, path: str = "") -> Iterator[tuple[str, int]]:
        """
        迭代逻辑记录

        handle 需已定位到起始偏移。每条记录产出 (原始文本, 记录末尾偏移)，
        末尾偏移即下一条记录的起始位置。读到文件末尾或生成器被关闭时关闭文件。

        Raises:
            LogFileReadError: 读取失败，剩余记录不再产出
        """
        try:
            buffer: list[str] = []
            offset = handle.tell()
            while True:
                try:
                    line_bytes = handle.readline()
                except OSError as e:
                    raise LogFileReadError(
                        f"读取文件失败: {path}",
                        path=path,
                        offset=offset,
                    ) from e

                # 文件末尾，输出最后一条记录
                if not line_bytes:
                    if buffer:
                        yield "".join(buffer), offset
                    return

                line = line_bytes.decode("utf-8", errors="replace")

                # 新记录开始，已累积的内容是一条完整记录
                if buffer and self._starts_record(line):
                    yield "".join(buffer), offset
                    buffer = []

                buffer.append(line)
                offset += len(line_bytes)
        finally:
            handle.close()
