"""
系统常量定义
============

定义RS-485控制记录的布局、ioctl请求号和标志位。
"""

from enum import Enum, IntFlag
import struct
from typing import Final


class RS485Flag(IntFlag):
    """控制记录中的标志位（对应Linux的SER_RS485_*）"""

    ENABLED = 1 << 0  # RS-485模式总开关
    RTS_ON_SEND = 1 << 1  # 发送时RTS为有效电平
    RTS_AFTER_SEND = 1 << 2  # 发送后RTS为有效电平
    RX_DURING_TX = 1 << 4  # 发送期间保持接收


class Action(Enum):
    """命令行动作枚举"""

    ON = "on"  # 启用RS-485并应用选项
    OFF = "off"  # 关闭RS-485并清空全部设置
    SHOW = "show"  # 仅显示当前设置


# 本工具理解的全部标志位，其余位原样保留
KNOWN_FLAGS: Final[int] = int(
    RS485Flag.ENABLED
    | RS485Flag.RTS_ON_SEND
    | RS485Flag.RTS_AFTER_SEND
    | RS485Flag.RX_DURING_TX
)

# ioctl请求号 (asm-generic/ioctls.h)
TIOCGRS485: Final[int] = 0x542E  # 读取RS-485配置
TIOCSRS485: Final[int] = 0x542F  # 写入RS-485配置

# 控制记录格式: flags(4字节) + 发送前延时(4字节) + 发送后延时(4字节) + 保留(20字节)
RECORD_RESERVED_SIZE: Final[int] = 20
RECORD_FORMAT: Final[str] = f"=III{RECORD_RESERVED_SIZE}s"
RECORD_SIZE: Final[int] = struct.calcsize(RECORD_FORMAT)

# 延时参数取值范围
MIN_DELAY: Final[int] = 0
MAX_DELAY: Final[int] = 100

# 程序信息
PROGRAM_NAME: Final[str] = "rs485ctl"
PROGRAM_VERSION: Final[str] = "1.0"
