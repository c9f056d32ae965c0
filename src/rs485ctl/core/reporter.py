"""
配置报告模块
============

把控制记录输出为 "键: 值" 形式的文本行。
"""

import sys
from typing import List, Optional, TextIO

from .record import ConfigRecord


def format_report(device: str, record: ConfigRecord) -> List[str]:
    """
    生成报告文本行

    RS-485未启用时只输出第一行。

    Args:
        device: 设备路径
        record: 控制记录

    Returns:
        文本行列表
    """
    lines = [f"{device}: rs485 {'on' if record.enabled else 'off'}"]
    if not record.enabled:
        return lines

    lines.extend([
        f"delay-before-send: {record.delay_before_send}",
        f"delay-after-send: {record.delay_after_send}",
        f"rts-on-send: {int(record.rts_on_send)}",
        f"rts-after-send: {int(record.rts_after_send)}",
        f"rx-during-tx: {int(record.rx_during_tx)}",
    ])
    return lines


def print_report(device: str, record: ConfigRecord, stream: Optional[TextIO] = None) -> None:
    """打印报告到 *stream*（默认stdout）"""
    stream = stream or sys.stdout
    for line in format_report(device, record):
        print(line, file=stream)
