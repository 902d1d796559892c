"""
本地命令解析

对操作员输入的一行进行裁剪和分类：
- ? / help       显示手册，不转发
- exit / quit    请求退出，退出前向设备发送 restart
- restart        转发到设备，并在退出时再次发送 restart
- 其他           原样转发到设备

命令匹配不区分大小写，"?" 需完全匹配。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import LINE_TERMINATOR, RESTART_COMMAND


class CommandKind(Enum):
    """命令类型"""
    HELP = "help"
    EXIT = "exit"
    RESTART = "restart"
    FORWARD = "forward"


LOCAL_COMMANDS = {
    "?": CommandKind.HELP,
    "help": CommandKind.HELP,
    "exit": CommandKind.EXIT,
    "quit": CommandKind.EXIT,
    RESTART_COMMAND: CommandKind.RESTART,
}


@dataclass(frozen=True)
class OperatorCommand:
    kind: CommandKind
    text: str

    @property
    def forwards(self) -> bool:
        """是否需要发送到设备"""
        return self.kind in (CommandKind.RESTART, CommandKind.FORWARD)

    @property
    def arms_restart(self) -> bool:
        """退出时是否需要发送 restart"""
        return self.kind in (CommandKind.RESTART, CommandKind.EXIT)

    def payload(self) -> bytes:
        """发送到设备的字节：文本 + 一个换行符"""
        return (self.text + LINE_TERMINATOR).encode("utf-8")


def trim_line(raw: str) -> str:
    """去掉首尾空白（含换行符）"""
    return raw.strip()


def parse_line(raw: str) -> Optional[OperatorCommand]:
    """解析一行输入，空行返回 None"""
    text = trim_line(raw)
    if not text:
        return None
    kind = LOCAL_COMMANDS.get(text.lower(), CommandKind.FORWARD)
    return OperatorCommand(kind=kind, text=text)
