"""
Torpedo Console Package

串口游戏控制台：在终端和运行鱼雷游戏的单片机之间转发数据。
- 设备输出原样显示
- 操作员输入按行转发，? / help / exit / quit / restart 由本地处理
"""

from .bridge import ConsoleBridge
from .commands import CommandKind, OperatorCommand, parse_line, trim_line
from .config import BridgeConfig
from .console import Console
from .constants import (
    BAUD_MAP,
    DEFAULT_BAUD_RATE,
    DEFAULT_DEVICE_PATH,
    DEFAULT_MAX_LINE_LENGTH,
    POLL_TIMEOUT,
    RESTART_DIRECTIVE,
)
from .operator_input import OperatorInput
from .shutdown import ShutdownCoordinator
from .transport import SerialTransport, TransportError

__all__ = [
    # 核心组件
    "ConsoleBridge",
    "Console",
    "OperatorInput",
    "SerialTransport",
    "ShutdownCoordinator",
    "TransportError",

    # 命令解析
    "CommandKind",
    "OperatorCommand",
    "parse_line",
    "trim_line",

    # 配置与常量
    "BridgeConfig",
    "BAUD_MAP",
    "DEFAULT_BAUD_RATE",
    "DEFAULT_DEVICE_PATH",
    "DEFAULT_MAX_LINE_LENGTH",
    "POLL_TIMEOUT",
    "RESTART_DIRECTIVE",
]
