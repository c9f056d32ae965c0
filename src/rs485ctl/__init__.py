"""
RS-485串口控制工具
==================

读取、修改并校验Linux串口驱动的RS-485收发控制设置。

主要功能：
- 启用/关闭RS-485模式
- 设置RTS时序和发送前后延时
- 校验内核实际应用的配置
- 显示当前配置

作者: lanford
版本: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "lanford"
__email__ = ""
__description__ = "Linux串口RS-485控制工具"

# 导出主要类
from .core.record import ConfigRecord
from .core.negotiator import ConfigNegotiator
from .core.backend import IoctlBackend

__all__ = [
    "ConfigRecord",
    "ConfigNegotiator",
    "IoctlBackend"
]
