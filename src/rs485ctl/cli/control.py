"""
RS-485控制命令行接口
====================

解析命令行参数并驱动一次完整的读取-协商-写入-报告流程。
"""

import argparse
import re
from typing import Callable, List, Optional, Sequence, Tuple

from ..config.constants import PROGRAM_NAME, PROGRAM_VERSION, Action
from ..config.settings import DeviceConfig, RunConfig
from ..core.backend import DeviceBackend, IoctlBackend, available_ports
from ..core.errors import BackendError, UsageError
from ..core.negotiator import ConfigNegotiator, NegotiationResult, parse_action
from ..core.options import (
    DelayEvent,
    DelayOption,
    FlagEvent,
    FlagOption,
    Intent,
    OptionEvent,
    parse_flag_argument,
)
from ..core.reporter import print_report
from ..utils.logger import get_logger

logger = get_logger(__name__)

EPILOG = """\
Actions:
  on                    Set SER_RS485_ENABLED and other options
  off                   Clear SER_RS485_ENABLED
  show                  Print current settings (default)

For the flag options, omitting the optional argument is equivalent to
passing 1.  They also have --no- variants, e.g. --no-rts-on-send,
which is equivalent to --rts-on-send=0.

Note that --rts-on-send and --rts-after-send are mutually exclusive.
So --rts-on-send implies --no-rts-after-send and vice versa. Whichever
option is passed last takes precedence.

Settings which are not explicitly given are preserved as-is, as returned
by the TIOCGRS485 ioctl.
"""

_FLAG_ASSIGNMENT = re.compile(
    r"--(?P<name>%s)=(?P<value>.*)" % "|".join(re.escape(o.value) for o in FlagOption)
)


class _ArgumentParser(argparse.ArgumentParser):
    """参数错误时抛出UsageError而不是直接退出"""

    def error(self, message):
        raise UsageError(message)


class _FlagEventAction(argparse.Action):
    """把布尔选项按出现顺序记录为FlagEvent"""

    def __init__(self, option_strings, dest, flag_option=None, value=True, **kwargs):
        super().__init__(option_strings, dest, nargs=0, **kwargs)
        self.flag_option = flag_option
        self.value = value

    def __call__(self, parser, namespace, values, option_string=None):
        events = list(getattr(namespace, self.dest, None) or [])
        events.append(FlagEvent(self.flag_option, self.value))
        setattr(namespace, self.dest, events)


class _DelayEventAction(argparse.Action):
    """把延时选项按出现顺序记录为DelayEvent"""

    def __init__(self, option_strings, dest, delay_option=None, **kwargs):
        super().__init__(option_strings, dest, **kwargs)
        self.delay_option = delay_option

    def __call__(self, parser, namespace, values, option_string=None):
        events = list(getattr(namespace, self.dest, None) or [])
        events.append(DelayEvent(self.delay_option, values))
        setattr(namespace, self.dest, events)


def normalize_flag_arguments(argv: Sequence[str]) -> List[str]:
    """
    把 --flag=0/1 形式改写为 --no-flag / --flag

    布尔选项的参数只能用 "=" 连写，否则后面的位置参数会被当成选项参数。

    Raises:
        UsageError: 参数不是0或1
    """
    normalized = []
    argv = list(argv)
    for index, token in enumerate(argv):
        if token == "--":
            normalized.extend(argv[index:])
            break
        match = _FLAG_ASSIGNMENT.fullmatch(token)
        if match:
            option = FlagOption(match.group("name"))
            if parse_flag_argument(option, match.group("value")):
                token = f"--{option.value}"
            else:
                token = f"--no-{option.value}"
        normalized.append(token)
    return normalized


def create_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = _ArgumentParser(
        prog=PROGRAM_NAME,
        usage="%(prog)s [options] <on|off|show> <device>",
        description="Configure RS-485 mode of a Linux serial port.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
        allow_abbrev=False,
    )
    parser.set_defaults(events=[])

    for option in DelayOption:
        parser.add_argument(
            f"--{option.value}",
            dest="events",
            action=_DelayEventAction,
            delay_option=option,
            metavar="<delay>",
            help=f"Set {option.value} (integer in [0, 100])",
        )

    for option in FlagOption:
        parser.add_argument(
            f"--{option.value}",
            dest="events",
            action=_FlagEventAction,
            flag_option=option,
            value=True,
            help=f"Set {option.value} (optional =<0|1>, default 1)",
        )
        parser.add_argument(
            f"--no-{option.value}",
            dest="events",
            action=_FlagEventAction,
            flag_option=option,
            value=False,
            help=argparse.SUPPRESS,
        )

    parser.add_argument(
        "-v", "--version", action="version",
        version=f"{PROGRAM_NAME} v{PROGRAM_VERSION}",
        help="Print version and exit",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Do not print effective configuration",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true",
        help="Print debug log messages",
    )
    parser.add_argument("--log-file", metavar="<path>", help="Also write log messages to a file")
    parser.add_argument("positionals", nargs="*", metavar="<on|off|show> <device>")

    return parser


def split_positionals(positionals: Sequence[str]) -> Tuple[Action, str]:
    """
    把位置参数拆分为动作和设备路径

    Raises:
        UsageError: 位置参数数量不对或动作名非法
    """
    if not positionals or not positionals[-1]:
        raise UsageError("missing device")
    if len(positionals) > 2:
        raise UsageError("too many positional arguments")

    action = Action.SHOW
    if len(positionals) == 2:
        action = parse_action(positionals[0])
    return action, positionals[-1]


def parse_command_line(
    argv: Sequence[str],
) -> Tuple[RunConfig, DeviceConfig, List[OptionEvent]]:
    """
    解析命令行

    Args:
        argv: 不含程序名的参数列表

    Returns:
        (运行配置, 设备配置, 选项事件列表)

    Raises:
        UsageError: 命令行不合法
    """
    parser = create_parser()
    args = parser.parse_intermixed_args(normalize_flag_arguments(argv))
    action, device = split_positionals(args.positionals or [])

    run_config = RunConfig(
        action=action,
        quiet=args.quiet,
        debug=args.debug,
        log_file=args.log_file,
    )
    return run_config, DeviceConfig(device=device), list(args.events or [])


class RS485ControlCLI:
    """RS-485控制命令行接口"""

    def __init__(
        self,
        run_config: RunConfig,
        device_config: DeviceConfig,
        backend_factory: Optional[Callable[[DeviceConfig], DeviceBackend]] = None,
    ):
        """
        初始化命令行接口

        Args:
            run_config: 运行配置
            device_config: 设备配置
            backend_factory: 根据设备配置创建设备后端，默认使用IoctlBackend
        """
        self.run_config = run_config
        self.device_config = device_config
        self.backend_factory = backend_factory or IoctlBackend

    @staticmethod
    def _log_available_ports() -> None:
        """设备无法打开时提示可用的串口"""
        ports = available_ports()
        if ports:
            logger.info(f"available serial ports: {', '.join(ports)}")

    def run(self, intent: Intent) -> Optional[NegotiationResult]:
        """
        打开设备并执行协商

        Returns:
            协商结果，设备操作失败时返回None
        """
        backend = self.backend_factory(self.device_config)
        try:
            backend.open()
        except BackendError as e:
            logger.error(str(e))
            self._log_available_ports()
            return None

        try:
            return ConfigNegotiator(backend).negotiate(self.run_config.action, intent)
        except BackendError as e:
            logger.error(str(e))
            return None
        finally:
            backend.close()

    def execute(self, intent: Intent) -> int:
        """
        执行命令并输出结果

        Returns:
            进程退出码
        """
        result = self.run(intent)
        if result is None:
            return 1

        if result.warning is not None:
            logger.warning(str(result.warning))

        if self.run_config.show_report:
            print_report(self.device_config.device, result.reported)
        return 0
