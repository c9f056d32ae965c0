"""
控制记录数据结构
================

定义与驱动交换的RS-485控制记录（struct serial_rs485）。

记录中本工具不理解的标志位和保留字节在读-改-写过程中原样保留。
"""

import struct
from dataclasses import dataclass, field, fields, replace
from typing import List

from ..config.constants import (
    KNOWN_FLAGS,
    RECORD_FORMAT,
    RECORD_RESERVED_SIZE,
    RECORD_SIZE,
    RS485Flag,
)

_U32_MASK = 0xFFFFFFFF

# 布尔字段与标志位的对应关系
_FLAG_FIELDS = (
    ("enabled", RS485Flag.ENABLED),
    ("rts_on_send", RS485Flag.RTS_ON_SEND),
    ("rts_after_send", RS485Flag.RTS_AFTER_SEND),
    ("rx_during_tx", RS485Flag.RX_DURING_TX),
)


@dataclass(frozen=True)
class ConfigRecord:
    """RS-485控制记录"""

    enabled: bool = False  # RS-485模式总开关
    delay_before_send: int = 0  # 发送前RTS提前量
    delay_after_send: int = 0  # 发送后RTS滞后量
    rts_on_send: bool = False  # 发送时RTS有效
    rts_after_send: bool = False  # 发送后RTS有效
    rx_during_tx: bool = False  # 发送期间保持接收
    extra_flags: int = 0  # 未知标志位
    reserved: bytes = field(default=bytes(RECORD_RESERVED_SIZE), repr=False)  # 保留字节

    def __post_init__(self):
        """参数验证"""
        if self.extra_flags & KNOWN_FLAGS:
            raise ValueError("extra_flags不能包含已知标志位")
        if len(self.reserved) != RECORD_RESERVED_SIZE:
            raise ValueError(f"reserved必须是{RECORD_RESERVED_SIZE}字节")

    @property
    def flags(self) -> int:
        """组合后的标志位"""
        value = self.extra_flags
        for name, flag in _FLAG_FIELDS:
            if getattr(self, name):
                value |= int(flag)
        return value

    @property
    def has_rts_timing(self) -> bool:
        """是否至少设置了一个RTS时序标志"""
        return self.rts_on_send or self.rts_after_send

    def with_flags(self, flags: int) -> "ConfigRecord":
        """返回标志位替换为 *flags* 的新记录，其余字段不变"""
        flags = int(flags) & _U32_MASK
        values = {name: bool(flags & flag) for name, flag in _FLAG_FIELDS}
        return replace(self, extra_flags=flags & ~KNOWN_FLAGS, **values)

    def pack(self) -> bytes:
        """打包成字节数据"""
        return struct.pack(
            RECORD_FORMAT,
            self.flags,
            self.delay_before_send,
            self.delay_after_send,
            self.reserved,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "ConfigRecord":
        """从字节数据解包"""
        if len(data) != RECORD_SIZE:
            raise ValueError(f"控制记录长度必须是{RECORD_SIZE}字节，实际为{len(data)}")
        flags, before, after, reserved = struct.unpack(RECORD_FORMAT, data)
        record = cls(delay_before_send=before, delay_after_send=after, reserved=reserved)
        return record.with_flags(flags)

    @classmethod
    def default(cls) -> "ConfigRecord":
        """全零记录"""
        return cls()

    def diff(self, other: "ConfigRecord") -> List[str]:
        """列出与 *other* 取值不同的字段名"""
        return [
            f.name for f in fields(self) if getattr(self, f.name) != getattr(other, f.name)
        ]
