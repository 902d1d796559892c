"""
退出协调

信号处理函数只设置退出标志；主循环退出后由 finalize() 完成
restart 握手（写入 + drain）并关闭串口。
"""

import signal
import logging
from typing import Dict, Optional

from .console import Console
from .constants import RESTART_DIRECTIVE
from .transport import SerialTransport, TransportError

log = logging.getLogger(__name__)


class ShutdownCoordinator:
    """管理退出标志和退出流程"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console()
        self.requested: bool = False
        self.signum: Optional[int] = None
        self._previous: Dict[int, object] = {}

    def _on_signal(self, signum, frame) -> None:
        # 只记录信号并设置标志，不做 I/O
        self.signum = signum
        self.requested = True

    def request(self) -> None:
        """主循环内请求退出（exit/quit 命令、输入结束）"""
        self.requested = True

    def install(self) -> bool:
        """
        安装 SIGINT/SIGTERM 处理函数

        Returns:
            SIGINT 安装失败时返回 False；SIGTERM 失败只告警
        """
        try:
            self._previous[signal.SIGINT] = signal.signal(signal.SIGINT, self._on_signal)
        except (OSError, ValueError) as e:
            log.error(f"signal(SIGINT): {e}")
            return False

        try:
            self._previous[signal.SIGTERM] = signal.signal(signal.SIGTERM, self._on_signal)
        except (OSError, ValueError) as e:
            log.warning(f"signal(SIGTERM): {e}")

        return True

    def restore(self) -> None:
        """恢复安装前的信号处理函数"""
        for sig, handler in self._previous.items():
            try:
                signal.signal(sig, handler)
            except (OSError, ValueError) as e:
                log.warning(f"Failed to restore handler for {sig}: {e}")
        self._previous.clear()

    def finalize(self, transport: SerialTransport, pending_restart: bool) -> None:
        """退出流程：按需发送 restart 并 drain，然后关闭串口"""
        if self.signum is not None:
            log.info(f"Received shutdown signal ({signal.Signals(self.signum).name})")

        try:
            if pending_restart and not transport.closed:
                self._send_restart(transport)
        finally:
            if not transport.closed:
                transport.close()
                self.console.closed()

    def _send_restart(self, transport: SerialTransport) -> None:
        try:
            transport.write(RESTART_DIRECTIVE)
        except TransportError as e:
            log.error(f"Failed to send restart: {e}")
            return

        try:
            transport.drain()
        except TransportError as e:
            log.error(f"Failed to drain restart: {e}")
            return

        self.console.restart_drained()
