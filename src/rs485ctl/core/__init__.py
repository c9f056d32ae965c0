"""
核心模块
========

包含控制记录、选项解析、配置协商、设备后端和报告输出等核心功能。
"""

from .record import ConfigRecord
from .options import Intent, resolve_options
from .negotiator import ConfigNegotiator, compute_desired, verify_applied
from .backend import DeviceBackend, IoctlBackend
from .reporter import format_report, print_report

__all__ = [
    "ConfigRecord",
    "Intent",
    "resolve_options",
    "ConfigNegotiator",
    "compute_desired",
    "verify_applied",
    "DeviceBackend",
    "IoctlBackend",
    "format_report",
    "print_report"
]
