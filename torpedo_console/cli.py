#!/usr/bin/env python3
"""
Torpedo Console 入口

1. 解析命令行参数，打开并配置串口
2. 安装 SIGINT/SIGTERM 处理函数
3. 显示欢迎信息和手册，运行事件循环直到退出
"""

import sys
import argparse
import logging
from typing import List, Optional

from .bridge import ConsoleBridge
from .config import BridgeConfig
from .console import Console
from .constants import BAUD_MAP, STDIN_FILENO
from .operator_input import OperatorInput
from .shutdown import ShutdownCoordinator
from .transport import SerialTransport, TransportError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
log = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> BridgeConfig:
    """解析命令行参数为 BridgeConfig"""
    defaults = BridgeConfig()
    parser = argparse.ArgumentParser(description='Torpedo game serial console')
    parser.add_argument('-d', '--device', default=defaults.device_path,
                        help=f'Serial device path (default {defaults.device_path})')
    parser.add_argument('-b', '--baud', type=int, default=defaults.baud_rate,
                        choices=sorted(BAUD_MAP.keys()), metavar='BAUD',
                        help=f'Baud rate (default {defaults.baud_rate})')
    parser.add_argument('--max-line-length', type=int, default=defaults.max_line_length,
                        help=f'Maximum input line length including newline (default {defaults.max_line_length})')
    parser.add_argument('--poll-timeout', type=float, default=defaults.poll_timeout,
                        help=f'Readiness wait ceiling in seconds (default {defaults.poll_timeout})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose output (device traffic logging)')
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = BridgeConfig(
        device_path=args.device,
        baud_rate=args.baud,
        max_line_length=args.max_line_length,
        poll_timeout=args.poll_timeout,
    )
    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """主函数，返回进程退出码"""
    config = parse_args(argv)
    console = Console()

    try:
        transport = SerialTransport.open(config.device_path, config.baud_rate)
    except TransportError as e:
        log.error(f"{e}")
        log.error(f"Failed to initialize serial connection on {config.device_path}")
        return 1

    shutdown = ShutdownCoordinator(console)
    if not shutdown.install():
        transport.close()
        return 1

    try:
        console.banner(config.device_path, config.baud_rate)
        console.manual()

        operator = OperatorInput(STDIN_FILENO, config.max_line_length)
        bridge = ConsoleBridge(transport, operator, console, shutdown, config)
        return bridge.run()
    finally:
        # 事件循环之前失败时也要关闭串口
        transport.close()
        shutdown.restore()


def run():
    """Entry point for the torpedo-console command"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log.info("Interrupted")
        sys.exit(0)
    except Exception as e:
        log.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    run()
