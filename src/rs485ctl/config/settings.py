"""
配置管理
========

提供设备和单次运行相关的配置类。
"""

import os
from dataclasses import dataclass
from typing import Optional

from .constants import Action


@dataclass
class DeviceConfig:
    """设备配置类"""

    device: str  # 设备节点路径，如 /dev/ttyS0
    nonblocking: bool = True  # 打开时不等待载波

    def __post_init__(self):
        """参数验证"""
        if not self.device:
            raise ValueError("device不能为空")

    def to_open_flags(self) -> int:
        """转换为os.open的标志位"""
        flags = os.O_RDWR | os.O_NOCTTY | getattr(os, "O_CLOEXEC", 0)
        if self.nonblocking:
            flags |= os.O_NONBLOCK
        return flags


@dataclass
class RunConfig:
    """单次运行配置类"""

    action: Action = Action.SHOW  # 要执行的动作
    quiet: bool = False  # 是否省略有效配置的输出
    debug: bool = False  # 是否输出调试日志
    log_file: Optional[str] = None  # 日志文件路径

    def __post_init__(self):
        """参数验证"""
        if not isinstance(self.action, Action):
            raise ValueError("action必须是Action枚举值")

    @property
    def show_report(self) -> bool:
        """是否需要打印有效配置（show动作总是打印）"""
        return self.action is Action.SHOW or not self.quiet
