"""
启动配置
"""

from dataclasses import dataclass

from .constants import (
    BAUD_MAP,
    DEFAULT_BAUD_RATE,
    DEFAULT_DEVICE_PATH,
    DEFAULT_MAX_LINE_LENGTH,
    OPERATOR_EOF_LIMIT,
    POLL_TIMEOUT,
    READ_CHUNK_SIZE,
)


@dataclass
class BridgeConfig:
    device_path: str = DEFAULT_DEVICE_PATH
    baud_rate: int = DEFAULT_BAUD_RATE
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    poll_timeout: float = POLL_TIMEOUT
    read_chunk_size: int = READ_CHUNK_SIZE
    eof_limit: int = OPERATOR_EOF_LIMIT

    def validate(self) -> None:
        """检查配置，无效时抛出 ValueError"""
        if self.baud_rate not in BAUD_MAP:
            raise ValueError(f"Unsupported baud {self.baud_rate}. Use one of: {sorted(BAUD_MAP.keys())}")
        if self.max_line_length < 2:
            raise ValueError(f"max_line_length must be >= 2, got {self.max_line_length}")
        if self.poll_timeout <= 0:
            raise ValueError(f"poll_timeout must be positive, got {self.poll_timeout}")
        if self.read_chunk_size <= 0:
            raise ValueError(f"read_chunk_size must be positive, got {self.read_chunk_size}")
        if self.eof_limit <= 0:
            raise ValueError(f"eof_limit must be positive, got {self.eof_limit}")
