#!/usr/bin/env python3
"""
选项解析测试
============

这个文件测试 rs485ctl.core.options 模块中的选项折叠逻辑。

测试内容包括：
- RTS时序选项的互斥与取反关系
- 最后出现的选项生效
- 延时参数的取值范围
- force_set 与 force_clear 永不重叠
"""

import itertools
import sys
from pathlib import Path

import pytest

# 添加项目根目录到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rs485ctl.config.constants import RS485Flag
from rs485ctl.core.errors import UsageError
from rs485ctl.core.options import (
    DelayEvent,
    DelayOption,
    FlagEvent,
    FlagOption,
    Intent,
    apply_event,
    parse_delay,
    parse_flag_argument,
    resolve_options,
)

ON = int(RS485Flag.RTS_ON_SEND)
AFTER = int(RS485Flag.RTS_AFTER_SEND)
RX = int(RS485Flag.RX_DURING_TX)


class TestFlagResolution:
    """测试布尔选项的解析"""

    def test_no_options(self):
        """没有选项时得到空意图"""
        intent = resolve_options([])

        assert intent == Intent()
        assert intent.is_empty

    def test_rts_on_send_deselects_after_send(self):
        """选择rts-on-send即取消rts-after-send"""
        intent = resolve_options([FlagEvent(FlagOption.RTS_ON_SEND, True)])

        assert intent.force_set == ON
        assert intent.force_clear == AFTER

    def test_rts_after_send_deselects_on_send(self):
        """选择rts-after-send即取消rts-on-send"""
        intent = resolve_options([FlagEvent(FlagOption.RTS_AFTER_SEND, True)])

        assert intent.force_set == AFTER
        assert intent.force_clear == ON

    def test_last_rts_option_wins(self):
        """
        两个RTS选项同时出现时以后出现的为准
        """
        intent = resolve_options([
            FlagEvent(FlagOption.RTS_ON_SEND, True),
            FlagEvent(FlagOption.RTS_AFTER_SEND, True),
        ])
        assert intent.force_set == AFTER
        assert intent.force_clear == ON

        intent = resolve_options([
            FlagEvent(FlagOption.RTS_AFTER_SEND, True),
            FlagEvent(FlagOption.RTS_ON_SEND, True),
        ])
        assert intent.force_set == ON
        assert intent.force_clear == AFTER

    @pytest.mark.parametrize("option, other", [
        (FlagOption.RTS_ON_SEND, FlagOption.RTS_AFTER_SEND),
        (FlagOption.RTS_AFTER_SEND, FlagOption.RTS_ON_SEND),
    ])
    def test_negation_coupling(self, option, other):
        """--rts-on-send=0 与 --rts-after-send=1 等价，反之亦然"""
        negated = resolve_options([FlagEvent(option, False)])
        selected = resolve_options([FlagEvent(other, True)])

        assert negated == selected

    def test_rx_during_tx_is_independent(self):
        """rx-during-tx不影响RTS标志"""
        intent = resolve_options([FlagEvent(FlagOption.RX_DURING_TX, True)])
        assert intent.force_set == RX
        assert intent.force_clear == 0

        intent = resolve_options([
            FlagEvent(FlagOption.RX_DURING_TX, True),
            FlagEvent(FlagOption.RX_DURING_TX, False),
        ])
        assert intent.force_set == 0
        assert intent.force_clear == RX

    def test_rx_and_rts_combined(self):
        """不同逻辑标志互不干扰"""
        intent = resolve_options([
            FlagEvent(FlagOption.RX_DURING_TX, False),
            FlagEvent(FlagOption.RTS_ON_SEND, False),
        ])

        assert intent.force_set == AFTER
        assert intent.force_clear == ON | RX

    def test_sets_never_overlap(self):
        """
        任意选项序列的结果中 force_set 与 force_clear 都不重叠
        """
        events = [FlagEvent(option, value) for option in FlagOption for value in (True, False)]
        for length in range(1, 4):
            for sequence in itertools.product(events, repeat=length):
                intent = resolve_options(sequence)
                assert intent.force_set & intent.force_clear == 0

    def test_apply_event_is_pure(self):
        """apply_event不修改传入的意图"""
        base = Intent()
        result = apply_event(base, FlagEvent(FlagOption.RTS_ON_SEND, True))

        assert base == Intent()
        assert result is not base

    def test_unknown_event_rejected(self):
        """未知事件类型抛出TypeError"""
        with pytest.raises(TypeError):
            apply_event(Intent(), "rts-on-send")


class TestFlagArgument:
    """测试布尔选项参数"""

    @pytest.mark.parametrize("raw, expected", [(None, True), ("1", True), ("0", False)])
    def test_valid_arguments(self, raw, expected):
        """省略参数等同于1"""
        assert parse_flag_argument(FlagOption.RTS_ON_SEND, raw) is expected

    @pytest.mark.parametrize("raw", ["2", "yes", "", "01"])
    def test_invalid_arguments(self, raw):
        """只接受0或1"""
        with pytest.raises(UsageError, match="--rx-during-tx"):
            parse_flag_argument(FlagOption.RX_DURING_TX, raw)


class TestDelayResolution:
    """测试延时选项"""

    @pytest.mark.parametrize("option", list(DelayOption))
    @pytest.mark.parametrize("raw, expected", [
        ("0", 0), ("100", 100), ("42", 42), ("0x10", 16), ("010", 8), (" 5", 5), ("+7", 7), ("-0", 0),
    ])
    def test_valid_delays(self, option, raw, expected):
        """边界值0和100可以接受，0x为十六进制、0开头为八进制"""
        assert parse_delay(option, raw) == expected

    @pytest.mark.parametrize("option", list(DelayOption))
    @pytest.mark.parametrize("raw", [
        "-1", "101", "abc", "", "5ms", "1_0", "5 ", "08", "0o10", "0x",
    ])
    def test_invalid_delays(self, option, raw):
        """超出范围、非数字或带多余字符的延时是用法错误"""
        with pytest.raises(UsageError, match=f"--{option.value}"):
            parse_delay(option, raw)

    def test_delays_in_intent(self):
        """延时写入意图，未指定的保持None"""
        intent = resolve_options([DelayEvent(DelayOption.DELAY_AFTER_SEND, "5")])

        assert intent.delay_after_send == 5
        assert intent.delay_before_send is None
        assert intent.force_set == 0
        assert intent.force_clear == 0

    def test_last_delay_wins(self):
        """同一延时多次出现时以最后一次为准"""
        intent = resolve_options([
            DelayEvent(DelayOption.DELAY_BEFORE_SEND, "10"),
            DelayEvent(DelayOption.DELAY_BEFORE_SEND, "20"),
        ])

        assert intent.delay_before_send == 20

    def test_invalid_delay_aborts_resolution(self):
        """任一延时非法时整个解析失败，即使之后有合法值"""
        with pytest.raises(UsageError):
            resolve_options([
                DelayEvent(DelayOption.DELAY_BEFORE_SEND, "101"),
                DelayEvent(DelayOption.DELAY_BEFORE_SEND, "10"),
            ])
