"""
操作员输入读取

从 stdin fd 读取原始字节并切分成行，单行长度有上限：
超出部分一直丢弃到下一个换行符，不会越界。
"""

import os
import logging
from typing import List

from .constants import DEFAULT_MAX_LINE_LENGTH

log = logging.getLogger(__name__)


def complete_utf8(raw: bytearray) -> bytes:
    """去掉末尾不完整的 UTF-8 多字节序列"""
    end = len(raw)
    for back in range(1, min(4, end) + 1):
        byte = raw[end - back]
        if byte & 0xC0 == 0x80:
            # 续字节，继续向前找起始字节
            continue
        if byte >= 0xC0:
            need = 2 if byte < 0xE0 else 3 if byte < 0xF0 else 4
            if back < need:
                return bytes(raw[:end - back])
        break
    return bytes(raw)


class OperatorInput:
    """按行读取操作员输入（有长度上限）"""

    def __init__(self, fd: int, max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
                 read_size: int = 1024):
        if max_line_length < 2:
            raise ValueError(f"max_line_length must be >= 2, got {max_line_length}")
        self.fd = fd
        # 上限包含换行符
        self.limit = max_line_length - 1
        self.read_size = read_size
        self.eof: bool = False
        self._buffer = bytearray()
        self._discarding: bool = False

    def fileno(self) -> int:
        return self.fd

    def read_lines(self) -> List[str]:
        """
        读取当前可用输入，返回完整的行（不含换行符）

        读到 EOF 或读取失败时设置 eof=True，未以换行结尾的残余内容作为最后一行返回。
        """
        try:
            data = os.read(self.fd, self.read_size)
        except BlockingIOError:
            return []
        except OSError as e:
            log.warning(f"Operator input read failed: {e}")
            self.eof = True
            return []

        if not data:
            self.eof = True
            self._discarding = False
            if self._buffer:
                line = self._decode(self._buffer)
                self._buffer.clear()
                return [line]
            return []

        self.eof = False
        return self.feed(data)

    def feed(self, data: bytes) -> List[str]:
        """处理一段原始输入，返回其中所有完整的行"""
        lines: List[str] = []
        for byte in data:
            if byte == 0x0A:
                if self._discarding:
                    self._discarding = False
                else:
                    lines.append(self._decode(self._buffer))
                    self._buffer.clear()
                continue

            if self._discarding:
                continue

            if len(self._buffer) >= self.limit:
                # 超过上限：截断本行，丢弃余下内容直到换行
                lines.append(self._decode(complete_utf8(self._buffer)))
                self._buffer.clear()
                self._discarding = True
                log.warning(f"Input line truncated to {self.limit} characters")
                continue

            self._buffer.append(byte)
        return lines

    @staticmethod
    def _decode(raw: bytearray) -> str:
        return bytes(raw).decode("utf-8", errors="replace")
