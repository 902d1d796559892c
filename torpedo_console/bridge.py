"""
串口 <-> 终端桥接

单线程事件循环：用 selectors 同时等待串口和操作员输入，
等待上限为 poll_timeout，保证信号设置的退出标志能在一个周期内被发现。

- 串口可读：读取数据并原样显示
- 输入可读：逐行解析，本地命令就地处理，其余转发到串口
- 退出：由 ShutdownCoordinator.finalize() 发送 restart、drain 并关闭串口
"""

import selectors
import logging
from typing import Optional

from .commands import CommandKind, OperatorCommand, parse_line
from .config import BridgeConfig
from .console import Console
from .operator_input import OperatorInput
from .shutdown import ShutdownCoordinator
from .transport import SerialTransport, TransportError

log = logging.getLogger(__name__)

DEVICE = "device"
OPERATOR = "operator"


class ConsoleBridge:
    """串口和操作员输入之间的事件循环"""

    def __init__(self, transport: SerialTransport, operator: OperatorInput,
                 console: Console, shutdown: ShutdownCoordinator,
                 config: Optional[BridgeConfig] = None):
        self.transport = transport
        self.operator = operator
        self.console = console
        self.shutdown = shutdown
        self.config = config if config is not None else BridgeConfig()

        self.pending_restart: bool = False
        self.exit_code: int = 0
        self._eof_reads: int = 0

        self.sel = selectors.DefaultSelector()
        self.sel.register(transport.fileno(), selectors.EVENT_READ, data=DEVICE)
        self.sel.register(operator.fileno(), selectors.EVENT_READ, data=OPERATOR)

    def run(self) -> int:
        """运行直到收到退出请求或发生致命错误，返回进程退出码"""
        try:
            while not self.shutdown.requested:
                if not self.poll_once():
                    self.exit_code = 1
                    break
        finally:
            self.sel.close()
            self.shutdown.finalize(self.transport, self.pending_restart)
        return self.exit_code

    def poll_once(self) -> bool:
        """
        执行一次等待 + 分发

        Returns:
            发生致命错误时返回 False
        """
        try:
            # 被无关信号打断时 select 自动重试或返回空列表
            events = self.sel.select(timeout=self.config.poll_timeout)
        except OSError as e:
            log.error(f"select() error: {e}")
            return False

        ready = {key.data for key, _mask in events}

        try:
            if DEVICE in ready:
                self._on_device_readable()
            if OPERATOR in ready and not self.shutdown.requested:
                self._on_operator_readable()
        except TransportError as e:
            log.error(f"{e}")
            return False
        return True

    def _on_device_readable(self) -> None:
        """串口数据：原样显示"""
        data = self.transport.read(self.config.read_chunk_size)
        if data:
            log.debug(f"Device -> console: {data!r}")
            self.console.device_output(data)

    def _on_operator_readable(self) -> None:
        """操作员输入：逐行处理"""
        lines = self.operator.read_lines()

        for line in lines:
            if self.shutdown.requested:
                break
            self.handle_line(line)

        if self.operator.eof:
            self._eof_reads += 1
            if self._eof_reads >= self.config.eof_limit and not self.shutdown.requested:
                log.info("Operator input closed, shutting down")
                self.shutdown.request()
        else:
            self._eof_reads = 0

    def handle_line(self, line: str) -> None:
        """处理一行操作员输入"""
        command = parse_line(line)
        if command is None:
            return

        if command.kind is CommandKind.HELP:
            self.console.manual()
            return

        if command.arms_restart:
            self.pending_restart = True

        if command.forwards:
            self._forward(command)

        if command.kind is CommandKind.EXIT:
            self.console.exit_notice()
            self.shutdown.request()

    def _forward(self, command: OperatorCommand) -> None:
        """发送到设备并回显"""
        self.transport.write(command.payload())
        log.debug(f"Console -> device: {command.text!r}")
        self.console.sent(command.text)
