"""
串口传输句柄

打开并配置设备串口，提供非阻塞读、完整写、drain 和关闭操作。
"""

import os
import termios
import logging

from .util import configure_serial, set_blocking

log = logging.getLogger(__name__)


class TransportError(Exception):
    """串口打开、配置或读写失败"""


class SerialTransport:
    """串口句柄：持有唯一的已打开 fd"""

    def __init__(self, fd: int, path: str, baud: int):
        self.fd = fd
        self.path = path
        self.baud = baud

    @classmethod
    def open(cls, path: str, baud: int) -> "SerialTransport":
        """打开串口并应用 raw 配置，失败时抛出 TransportError"""
        try:
            # O_NONBLOCK 避免 open 等待 modem 线
            fd = os.open(path, os.O_RDWR | os.O_NOCTTY | os.O_NONBLOCK)
        except OSError as e:
            raise TransportError(f"Error opening serial port {path}: {e}") from e

        try:
            configure_serial(fd, baud)
            # VMIN=0/VTIME=0 保证 read 不阻塞，写操作恢复为阻塞
            set_blocking(fd)
        except (OSError, termios.error, ValueError) as e:
            os.close(fd)
            raise TransportError(f"Error configuring serial port {path}: {e}") from e

        log.info(f"Serial port opened: {path} @ {baud}")
        return cls(fd, path, baud)

    @property
    def closed(self) -> bool:
        return self.fd < 0

    def fileno(self) -> int:
        return self.fd

    def read(self, size: int) -> bytes:
        """读取 0..size 字节，没有数据时返回 b"" """
        try:
            return os.read(self.fd, size)
        except BlockingIOError:
            return b""
        except OSError as e:
            raise TransportError(f"Serial read error: {e}") from e

    def write(self, data: bytes) -> int:
        """写入全部数据，返回写入字节数"""
        view = memoryview(data)
        total = 0
        try:
            while total < len(data):
                total += os.write(self.fd, view[total:])
        except OSError as e:
            raise TransportError(f"Serial write error: {e}") from e
        return total

    def drain(self) -> None:
        """阻塞直到已写入的数据全部发送"""
        try:
            termios.tcdrain(self.fd)
        except (OSError, termios.error) as e:
            raise TransportError(f"tcdrain: {e}") from e

    def close(self) -> None:
        """关闭串口（可重复调用）"""
        if self.fd < 0:
            return
        try:
            os.close(self.fd)
        except OSError as e:
            log.error(f"Failed to close {self.path}: {e}")
        self.fd = -1
        log.info(f"Serial port closed: {self.path}")
