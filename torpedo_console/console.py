"""
终端输出

会话记录写到 stdout，每次写入后立即 flush，
保证设备输出和本地回显按事件处理顺序交错。
"""

import sys
from typing import Optional, TextIO

MANUAL = """
--- Torpedo Game Manual ---
Local commands (typed in the terminal):
  ? or help      - show this manual
  exit or quit   - exit the program

To send commands to the device, type them and press Enter
Examples:
  10 10 2 1 1     - send numbers/commands to the Arduino
  restart         - restart the game
  hit rate        - to print current game hit rate
---------------------------

"""

SEPARATOR = "---------------------------"


class Console:
    """会话输出"""

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout

    def write(self, text: str) -> None:
        try:
            self.out.write(text)
        except UnicodeEncodeError:
            # 终端编码无法表示的字符用转义形式显示
            encoding = getattr(self.out, "encoding", None) or "ascii"
            self.out.write(text.encode(encoding, errors="backslashreplace").decode(encoding))
        self.out.flush()

    def banner(self, device_path: str, baud: int) -> None:
        self.write(
            "--- TORPEDO GAME CLIENT ---\n"
            f"Port {device_path} opened at {baud} Baud. "
            "Enter commands (e.g., '10 10 2 1 1' or 'restart').\n"
            "Press CTRL+C to quit.\n"
            f"{SEPARATOR}\n"
        )

    def manual(self) -> None:
        self.write(MANUAL)

    def device_output(self, data: bytes) -> None:
        """
        原样显示设备输出

        字节直接写入 stdout 的二进制层，先 flush 文本层保证与回显的顺序。
        没有二进制层的流（如 StringIO）退化为转义显示。
        """
        if not data:
            return
        raw = getattr(self.out, "buffer", None)
        if raw is None:
            self.write(data.decode("utf-8", errors="backslashreplace"))
            return
        self.out.flush()
        raw.write(data)
        raw.flush()

    def sent(self, text: str) -> None:
        self.write(f">> Sent: {text}\n")

    def exit_notice(self) -> None:
        self.write("Exiting by user request (will request device restart)...\n")

    def restart_drained(self) -> None:
        self.write(">> Sent 'restart' to device and drained output\n")

    def closed(self) -> None:
        self.write("\nSerial port closed. Exiting.\n")
