"""
配置模块
=======

包含系统常量定义和配置管理功能。
"""

from .constants import *
from .settings import *

__all__ = [
    # 常量
    "Action",
    "RS485Flag",
    "KNOWN_FLAGS",
    "TIOCGRS485",
    "TIOCSRS485",
    "RECORD_FORMAT",
    "RECORD_SIZE",
    "MIN_DELAY",
    "MAX_DELAY",
    # 配置
    "DeviceConfig",
    "RunConfig",
]
