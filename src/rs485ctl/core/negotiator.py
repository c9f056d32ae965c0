"""
配置协商模块
============

根据动作、当前记录和配置意图计算目标记录，写入设备后校验内核是否完全应用。

RTS兼容处理：
    如果驱动支持至少一个RTS时序标志，而写入的记录两个都没有设置，内核
    (uart_sanitize_serial_rs485) 会打印告警并隐式置位RTS_ON_SEND。为避免这一
    路径，启用时若两个标志都未设置就主动置位RTS_ON_SEND，并在校验时忽略这一位。
    典型场景是先off（记录全零）后再on且未指定任何RTS选项。
"""

from dataclasses import dataclass, replace
from typing import Optional

from ..config.constants import Action
from ..utils.logger import get_logger
from .backend import DeviceBackend
from .errors import ApplyMismatchWarning, UsageError
from .options import Intent
from .record import ConfigRecord

logger = get_logger(__name__)


def parse_action(name: str) -> Action:
    """
    解析动作名

    Raises:
        UsageError: 动作名不是on/off/show
    """
    try:
        return Action(name)
    except ValueError:
        raise UsageError(f"invalid action {name}") from None


@dataclass(frozen=True)
class Plan:
    """目标记录及是否使用了RTS兼容处理"""

    desired: ConfigRecord
    workaround_applied: bool = False


@dataclass(frozen=True)
class NegotiationResult:
    """一次协商的完整结果"""

    action: Action
    current: ConfigRecord  # 读取到的当前记录
    desired: ConfigRecord  # 请求写入的记录
    effective: Optional[ConfigRecord] = None  # 内核返回的有效记录，show时为None
    workaround_applied: bool = False
    warning: Optional[ApplyMismatchWarning] = None

    @property
    def reported(self) -> ConfigRecord:
        """交给报告输出的记录"""
        return self.current if self.effective is None else self.effective


def compute_desired(action: Action, current: ConfigRecord, intent: Intent) -> Plan:
    """
    计算目标记录

    Args:
        action: 动作
        current: 当前记录
        intent: 配置意图

    Returns:
        目标记录计划
    """
    if action is not Action.ON and not intent.is_empty:
        logger.debug(f"{action.value}动作忽略命令行选项")

    if action is Action.SHOW:
        return Plan(current)

    if action is Action.OFF:
        # 关闭即完全复位，包括未知标志位和保留字节
        return Plan(ConfigRecord.default())

    desired = current
    if intent.delay_before_send is not None:
        desired = replace(desired, delay_before_send=intent.delay_before_send)
    if intent.delay_after_send is not None:
        desired = replace(desired, delay_after_send=intent.delay_after_send)

    flags = (desired.flags & ~intent.force_clear) | intent.force_set
    desired = replace(desired.with_flags(flags), enabled=True)

    if not desired.has_rts_timing:
        logger.debug("未设置任何RTS时序标志，主动置位rts-on-send")
        return Plan(replace(desired, rts_on_send=True), workaround_applied=True)

    return Plan(desired)


def verify_applied(
    desired: ConfigRecord,
    effective: ConfigRecord,
    workaround_applied: bool = False,
) -> Optional[ApplyMismatchWarning]:
    """
    校验内核是否应用了全部请求的设置

    只要存在差异且使用过RTS兼容处理，就从期望值中去掉rts-on-send再比较；
    不单独判断差异是否恰好来自这一位。

    Returns:
        存在差异时返回告警对象，否则返回None
    """
    expected = desired
    if expected != effective and workaround_applied:
        expected = replace(expected, rts_on_send=False)

    if expected == effective:
        return None

    fields = expected.diff(effective)
    logger.debug(f"期望与有效配置不一致的字段: {', '.join(fields)}")
    return ApplyMismatchWarning(fields)


class ConfigNegotiator:
    """配置协商器，每次协商最多读一次、写一次设备"""

    def __init__(self, backend: DeviceBackend):
        """
        初始化配置协商器

        Args:
            backend: 设备后端
        """
        self.backend = backend

    def negotiate(self, action: Action, intent: Intent) -> NegotiationResult:
        """
        执行一次完整的读取-计算-写入-校验流程

        Args:
            action: 动作
            intent: 配置意图

        Returns:
            协商结果

        Raises:
            BackendError: 读取或写入被拒绝
        """
        current = self.backend.get()
        logger.debug(f"当前配置: {current}")

        plan = compute_desired(action, current, intent)
        if action is Action.SHOW:
            return NegotiationResult(action, current, plan.desired)

        logger.debug(f"目标配置: {plan.desired}")
        effective = self.backend.set(plan.desired)
        logger.debug(f"有效配置: {effective}")

        warning = verify_applied(plan.desired, effective, plan.workaround_applied)
        return NegotiationResult(
            action=action,
            current=current,
            desired=plan.desired,
            effective=effective,
            workaround_applied=plan.workaround_applied,
            warning=warning,
        )
