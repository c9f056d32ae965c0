"""
命令行接口模块
==============

提供RS-485控制工具的命令行接口。
"""

from .control import RS485ControlCLI, create_parser, parse_command_line

__all__ = [
    "RS485ControlCLI",
    "create_parser",
    "parse_command_line"
]
