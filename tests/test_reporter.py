#!/usr/bin/env python3
"""
配置报告测试
============

测试 rs485ctl.core.reporter 模块的输出格式。
"""

import io
import sys
from pathlib import Path

# 添加项目根目录到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rs485ctl.core.record import ConfigRecord
from rs485ctl.core.reporter import format_report, print_report


class TestFormatReport:
    """测试报告文本"""

    def test_disabled_prints_single_line(self):
        """未启用时只输出状态行"""
        record = ConfigRecord(delay_before_send=5, rts_on_send=True)

        assert format_report("/dev/ttyS1", record) == ["/dev/ttyS1: rs485 off"]

    def test_enabled_prints_all_fields(self):
        """启用时输出全部五个字段"""
        record = ConfigRecord(enabled=True, rts_after_send=True, delay_after_send=5)

        assert format_report("/dev/ttyS1", record) == [
            "/dev/ttyS1: rs485 on",
            "delay-before-send: 0",
            "delay-after-send: 5",
            "rts-on-send: 0",
            "rts-after-send: 1",
            "rx-during-tx: 0",
        ]

    def test_print_report_to_stream(self):
        """写入指定的输出流"""
        stream = io.StringIO()

        print_report("/dev/ttyUSB0", ConfigRecord(enabled=True, rx_during_tx=True), stream)

        lines = stream.getvalue().splitlines()
        assert lines[0] == "/dev/ttyUSB0: rs485 on"
        assert lines[-1] == "rx-during-tx: 1"

    def test_print_report_default_stdout(self, capsys):
        """默认输出到stdout"""
        print_report("/dev/ttyS0", ConfigRecord.default())

        captured = capsys.readouterr()
        assert captured.out == "/dev/ttyS0: rs485 off\n"
        assert captured.err == ""
