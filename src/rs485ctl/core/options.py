"""
选项解析模块
============

把按命令行顺序排列的选项事件折叠成一个配置意图（Intent）。

规则：
- 同一逻辑标志以最后一次出现为准
- rts-on-send 与 rts-after-send 互为取反：选择其一即取消另一个
- 未出现的选项既不在 force_set 也不在 force_clear 中，对应字段保持不变
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Dict, Iterable, Optional, Tuple, Union

from ..config.constants import MAX_DELAY, MIN_DELAY, RS485Flag
from ..utils.logger import get_logger
from .errors import UsageError

logger = get_logger(__name__)

# 与strtol(base=0)一致的整数字面量：0x十六进制、0开头八进制、十进制
_INTEGER_LITERAL = re.compile(
    r"[ \t\n\v\f\r]*(?P<sign>[+-]?)"
    r"(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))"
)


class FlagOption(Enum):
    """布尔型选项"""

    RTS_ON_SEND = "rts-on-send"
    RTS_AFTER_SEND = "rts-after-send"
    RX_DURING_TX = "rx-during-tx"


class DelayOption(Enum):
    """延时型选项"""

    DELAY_BEFORE_SEND = "delay-before-send"
    DELAY_AFTER_SEND = "delay-after-send"


@dataclass(frozen=True)
class FlagEvent:
    """布尔选项事件"""

    option: FlagOption
    value: bool = True


@dataclass(frozen=True)
class DelayEvent:
    """延时选项事件，raw为命令行上的原始字符串"""

    option: DelayOption
    raw: str


OptionEvent = Union[FlagEvent, DelayEvent]

# (选项, 取值) -> (需要置位的标志, 需要清除的标志)
_FLAG_RULES: Dict[Tuple[FlagOption, bool], Tuple[int, int]] = {
    (FlagOption.RTS_ON_SEND, True): (RS485Flag.RTS_ON_SEND, RS485Flag.RTS_AFTER_SEND),
    (FlagOption.RTS_ON_SEND, False): (RS485Flag.RTS_AFTER_SEND, RS485Flag.RTS_ON_SEND),
    (FlagOption.RTS_AFTER_SEND, True): (RS485Flag.RTS_AFTER_SEND, RS485Flag.RTS_ON_SEND),
    (FlagOption.RTS_AFTER_SEND, False): (RS485Flag.RTS_ON_SEND, RS485Flag.RTS_AFTER_SEND),
    (FlagOption.RX_DURING_TX, True): (RS485Flag.RX_DURING_TX, 0),
    (FlagOption.RX_DURING_TX, False): (0, RS485Flag.RX_DURING_TX),
}


@dataclass(frozen=True)
class Intent:
    """配置意图"""

    force_set: int = 0  # 需要置位的标志
    force_clear: int = 0  # 需要清除的标志
    delay_before_send: Optional[int] = None  # None表示未指定
    delay_after_send: Optional[int] = None

    def set_flags(self, set_bits: int, clear_bits: int) -> "Intent":
        """
        置位 *set_bits* 并清除 *clear_bits*

        每一位只会出现在 force_set 与 force_clear 之一中。
        """
        set_bits, clear_bits = int(set_bits), int(clear_bits)
        force_set = (self.force_set & ~clear_bits) | set_bits
        force_clear = (self.force_clear & ~set_bits) | clear_bits
        return replace(self, force_set=force_set, force_clear=force_clear)

    @property
    def is_empty(self) -> bool:
        """是否没有任何选项"""
        return (
            not self.force_set
            and not self.force_clear
            and self.delay_before_send is None
            and self.delay_after_send is None
        )


def parse_flag_argument(option: FlagOption, raw: Optional[str]) -> bool:
    """
    解析布尔选项的可选参数

    Args:
        option: 选项
        raw: 参数字符串，None表示省略（等同于1）

    Returns:
        解析结果

    Raises:
        UsageError: 参数不是0或1
    """
    if raw is None or raw == "1":
        return True
    if raw == "0":
        return False
    raise UsageError(f"invalid argument to --{option.value} (must be 0 or 1)")


def parse_delay(option: DelayOption, raw: str) -> int:
    """
    解析延时参数

    接受十进制、0x十六进制和0开头的八进制，允许前导空白和正负号，
    其后不能有任何多余字符。取值必须在[0, 100]内。

    Raises:
        UsageError: 参数不是整数或超出范围
    """
    match = _INTEGER_LITERAL.fullmatch(raw) if isinstance(raw, str) else None
    delay = None
    if match:
        if match.group("hex"):
            delay = int(match.group("hex"), 16)
        elif match.group("oct"):
            delay = int(match.group("oct"), 8)
        else:
            delay = int(match.group("dec"), 10)
        if match.group("sign") == "-":
            delay = -delay
    if delay is None or not MIN_DELAY <= delay <= MAX_DELAY:
        raise UsageError(
            f"invalid argument to --{option.value} "
            f"(must be integer in [{MIN_DELAY}, {MAX_DELAY}])"
        )
    return delay


def apply_event(intent: Intent, event: OptionEvent) -> Intent:
    """把单个选项事件应用到意图上，返回新的意图"""
    if isinstance(event, FlagEvent):
        set_bits, clear_bits = _FLAG_RULES[(event.option, bool(event.value))]
        return intent.set_flags(set_bits, clear_bits)

    if isinstance(event, DelayEvent):
        delay = parse_delay(event.option, event.raw)
        if event.option is DelayOption.DELAY_BEFORE_SEND:
            return replace(intent, delay_before_send=delay)
        return replace(intent, delay_after_send=delay)

    raise TypeError(f"未知的选项事件: {event!r}")


def resolve_options(events: Iterable[OptionEvent]) -> Intent:
    """
    按顺序折叠全部选项事件

    Args:
        events: 命令行顺序的选项事件

    Returns:
        配置意图

    Raises:
        UsageError: 任一延时参数非法
    """
    intent = reduce(apply_event, events, Intent())
    assert not (intent.force_set & intent.force_clear), "force_set与force_clear重叠"
    logger.debug(
        f"选项解析结果: set={RS485Flag(intent.force_set)!r} "
        f"clear={RS485Flag(intent.force_clear)!r} "
        f"delay_before={intent.delay_before_send} delay_after={intent.delay_after_send}"
    )
    return intent
