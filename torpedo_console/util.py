"""
工具函数

包含串口 raw 模式配置、阻塞模式切换等工具函数。
"""

import os
import fcntl
import termios
import logging

from .constants import BAUD_MAP

log = logging.getLogger(__name__)


def set_blocking(fd: int) -> None:
    """清除 O_NONBLOCK，写操作阻塞直到全部进入内核缓冲区"""
    flags = fcntl.fcntl(fd, fcntl.F_GETFL)
    fcntl.fcntl(fd, fcntl.F_SETFL, flags & ~os.O_NONBLOCK)


def baud_to_speed(baud: int) -> int:
    """波特率转换为 termios 常量，不支持时抛出 ValueError"""
    if baud not in BAUD_MAP:
        raise ValueError(f"Unsupported baud {baud}. Use one of: {sorted(BAUD_MAP.keys())}")
    return BAUD_MAP[baud]


def configure_serial(fd: int, baud: int) -> None:
    """
    配置串口为 raw 8N1

    - 8 数据位、无校验、1 停止位，启用接收，忽略 modem 控制线
    - 关闭规范模式、回显、信号字符
    - 关闭软件流控和输入字符转换，关闭输出后处理
    - VMIN=0/VTIME=0：read 立即返回，可能为 0 字节
    """
    speed = baud_to_speed(baud)
    attrs = termios.tcgetattr(fd)

    # iflag
    attrs[0] &= ~(termios.IGNBRK | termios.BRKINT | termios.PARMRK |
                  termios.ISTRIP | termios.INLCR | termios.IGNCR |
                  termios.ICRNL | termios.IXON | termios.IXOFF |
                  termios.IXANY)
    # oflag
    attrs[1] &= ~(termios.OPOST | termios.ONLCR)
    # cflag: 8N1 + enable receiver + local
    attrs[2] &= ~(termios.CSIZE | termios.PARENB | termios.CSTOPB)
    attrs[2] |= (termios.CS8 | termios.CREAD | termios.CLOCAL)
    # lflag
    attrs[3] &= ~(termios.ECHO | termios.ECHOE | termios.ECHONL |
                  termios.ICANON | termios.ISIG)

    attrs[6][termios.VMIN] = 0
    attrs[6][termios.VTIME] = 0

    attrs[4] = speed  # ispeed
    attrs[5] = speed  # ospeed

    termios.tcsetattr(fd, termios.TCSANOW, attrs)
    log.debug(f"Serial fd={fd} configured: {baud} 8N1 raw")
