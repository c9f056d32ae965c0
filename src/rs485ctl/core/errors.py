"""
错误类型定义
============

命令行用法错误、设备后端错误，以及内核未完全应用配置时的告警。
"""

from typing import Optional, Sequence

import serial


class UsageError(ValueError):
    """命令行用法错误（动作名、位置参数或选项取值非法）"""


class BackendError(serial.SerialException):
    """设备打开或RS-485控制请求被内核/驱动拒绝"""

    def __init__(self, message: str, device: str, cause: Optional[OSError] = None):
        self.device = device
        self.cause = cause
        if cause is not None and cause.strerror:
            message = f"{message}: {cause.strerror}"
        super().__init__(message)


class ApplyMismatchWarning(UserWarning):
    """内核返回的有效配置与请求的配置不一致"""

    def __init__(self, fields: Sequence[str]):
        self.fields = tuple(fields)
        super().__init__("not all settings applied by the kernel")
