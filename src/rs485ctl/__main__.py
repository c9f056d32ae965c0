#!/usr/bin/env python3
"""
RS-485串口控制工具 - 模块CLI入口
================================

支持通过 python -m rs485ctl 调用

使用示例：
  # 显示当前配置
  python -m rs485ctl /dev/ttyS1

  # 启用RS-485，发送后RTS有效，发送后延时5
  python -m rs485ctl on --rts-after-send --delay-after-send=5 /dev/ttyS1

  # 关闭RS-485
  python -m rs485ctl off /dev/ttyS1
"""

import sys
from typing import Optional, Sequence

from .cli.control import RS485ControlCLI, parse_command_line
from .core.errors import UsageError
from .core.options import resolve_options
from .utils.logger import configure_logging, get_logger

logger = get_logger()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数，返回进程退出码"""
    if argv is None:
        argv = sys.argv[1:]

    configure_logging()

    try:
        run_config, device_config, events = parse_command_line(argv)
        intent = resolve_options(events)
    except UsageError as e:
        logger.error(str(e))
        return 1

    if run_config.debug or run_config.log_file:
        try:
            configure_logging(debug=run_config.debug, log_file=run_config.log_file)
        except OSError as e:
            configure_logging(debug=run_config.debug)
            logger.error(f"cannot open log file {run_config.log_file}: {e.strerror or e}")
            return 1

    try:
        cli = RS485ControlCLI(run_config, device_config)
        return cli.execute(intent)
    except KeyboardInterrupt:
        logger.error("interrupted")
        return 1
    except Exception as e:
        logger.error(f"unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
