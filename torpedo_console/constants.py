"""
常量定义

包含 torpedo-console 使用的默认配置和波特率映射。
"""

import termios

# 串口默认配置
DEFAULT_DEVICE_PATH = "/dev/ttyACM0"
DEFAULT_BAUD_RATE = 115200

# 操作员输入单行最大长度（含换行符）
DEFAULT_MAX_LINE_LENGTH = 128

# 事件循环配置
POLL_TIMEOUT = 0.1          # select 等待上限（秒）
READ_CHUNK_SIZE = 256       # 每次从串口读取的最大字节数
OPERATOR_EOF_LIMIT = 3      # 连续 EOF 次数达到该值后退出

# 退出前发送给设备的重启指令
RESTART_COMMAND = "restart"
RESTART_DIRECTIVE = b"restart\n"

LINE_TERMINATOR = "\n"

# 操作员输入 fd
STDIN_FILENO = 0

# 波特率映射
BAUD_MAP = {
    1200: termios.B1200,
    2400: termios.B2400,
    4800: termios.B4800,
    9600: termios.B9600,
    19200: termios.B19200,
    38400: termios.B38400,
    57600: termios.B57600,
    115200: termios.B115200,
}
