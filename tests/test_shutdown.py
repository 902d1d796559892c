#!/usr/bin/env python3
"""
ShutdownCoordinator 单元测试 (pytest)
"""

import sys
import os
import io
import signal
import pytest
from unittest.mock import MagicMock, call, patch

# 添加项目根目录到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from torpedo_console.console import Console
from torpedo_console.constants import RESTART_DIRECTIVE
from torpedo_console.shutdown import ShutdownCoordinator
from torpedo_console.transport import TransportError


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def coordinator(out):
    c = ShutdownCoordinator(Console(out))
    yield c
    c.restore()


@pytest.fixture
def transport():
    """模拟串口，记录调用顺序"""
    t = MagicMock()
    t.closed = False

    def close():
        t.closed = True

    t.close.side_effect = close
    return t


# ============================================================
# 信号处理测试
# ============================================================

class TestSignalHandlers:
    """信号处理安装测试"""

    def test_install_sets_handlers(self, coordinator):
        """测试安装 SIGINT 和 SIGTERM"""
        assert coordinator.install() is True

        assert signal.getsignal(signal.SIGINT) == coordinator._on_signal
        assert signal.getsignal(signal.SIGTERM) == coordinator._on_signal

    def test_restore_previous_handlers(self, coordinator):
        """测试恢复原来的信号处理"""
        previous = signal.getsignal(signal.SIGTERM)
        coordinator.install()
        coordinator.restore()

        assert signal.getsignal(signal.SIGTERM) == previous

    def test_signal_sets_flag(self, coordinator):
        """测试收到信号后设置退出标志"""
        coordinator.install()
        assert coordinator.requested is False

        os.kill(os.getpid(), signal.SIGTERM)

        assert coordinator.requested is True
        assert coordinator.signum == signal.SIGTERM

    def test_sigint_failure_is_fatal(self, coordinator):
        """测试 SIGINT 安装失败返回 False"""
        with patch('torpedo_console.shutdown.signal.signal', side_effect=ValueError("not main thread")):
            assert coordinator.install() is False

    def test_sigterm_failure_is_warning(self, coordinator):
        """测试 SIGTERM 安装失败只告警"""
        real_signal = signal.signal

        def fake_signal(sig, handler):
            if sig == signal.SIGTERM:
                raise OSError(22, "Invalid argument")
            return real_signal(sig, handler)

        with patch('torpedo_console.shutdown.signal.signal', side_effect=fake_signal):
            assert coordinator.install() is True

    def test_request(self, coordinator):
        """测试主循环请求退出"""
        coordinator.request()
        assert coordinator.requested is True
        assert coordinator.signum is None


# ============================================================
# 退出流程测试
# ============================================================

class TestFinalize:
    """退出流程测试"""

    def test_no_restart_only_closes(self, coordinator, transport, out):
        """测试未设置 restart 时只关闭串口"""
        coordinator.finalize(transport, pending_restart=False)

        transport.write.assert_not_called()
        transport.drain.assert_not_called()
        transport.close.assert_called_once()
        assert "Serial port closed" in out.getvalue()

    def test_restart_write_drain_close_order(self, coordinator, transport, out):
        """测试 restart 握手顺序：写入 -> drain -> 关闭"""
        coordinator.finalize(transport, pending_restart=True)

        assert transport.method_calls == [
            call.write(RESTART_DIRECTIVE),
            call.drain(),
            call.close(),
        ]
        assert "drained" in out.getvalue()

    def test_write_failure_still_closes(self, coordinator, transport, out):
        """测试写入失败不影响关闭，也不再 drain"""
        transport.write.side_effect = TransportError("Serial write error")

        coordinator.finalize(transport, pending_restart=True)

        transport.drain.assert_not_called()
        transport.close.assert_called_once()
        assert "drained" not in out.getvalue()

    def test_drain_failure_still_closes(self, coordinator, transport, out):
        """测试 drain 失败不影响关闭"""
        transport.drain.side_effect = TransportError("tcdrain")

        coordinator.finalize(transport, pending_restart=True)

        transport.close.assert_called_once()
        assert "drained" not in out.getvalue()

    def test_already_closed_transport(self, coordinator, transport):
        """测试串口已关闭时不再写入或关闭"""
        transport.closed = True

        coordinator.finalize(transport, pending_restart=True)

        transport.write.assert_not_called()
        transport.close.assert_not_called()

    def test_unexpected_error_still_closes(self, coordinator, transport):
        """测试握手中出现意外异常时仍然关闭串口"""
        transport.write.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            coordinator.finalize(transport, pending_restart=True)

        transport.close.assert_called_once()
