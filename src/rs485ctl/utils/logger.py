"""
日志记录模块
============

提供统一的日志记录功能，支持彩色输出和函数调用追踪。

控制台输出写到stderr并带程序名前缀，stdout只留给配置报告。
"""

import datetime
import inspect
import logging
import sys
from typing import Optional
from pathlib import Path

from ..config.constants import PROGRAM_NAME


class ColoredFormatter(logging.Formatter):
    """彩色日志格式化器"""

    # ANSI颜色代码
    COLORS = {
        'DEBUG': '\033[36m',    # 青色
        'INFO': '\033[0m',      # 默认色
        'WARNING': '\033[33m',  # 黄色
        'ERROR': '\033[31m',    # 红色
        'CRITICAL': '\033[35m', # 紫色
        'RESET': '\033[0m'      # 重置
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    @staticmethod
    def _caller_location() -> str:
        """查找调用日志函数的位置"""
        frame = inspect.currentframe()
        try:
            while frame:
                filename = frame.f_code.co_filename
                if filename != __file__ and "logging" not in Path(filename).parts:
                    return (
                        f"{Path(filename).name}.{frame.f_code.co_name}()"
                        f":{frame.f_lineno}"
                    )
                frame = frame.f_back
            return "unknown"
        finally:
            del frame

    def format(self, record):
        """格式化日志记录"""
        message = f"{PROGRAM_NAME}: {record.getMessage()}"

        # 调试级别附加毫秒时间戳和调用位置
        if record.levelno <= logging.DEBUG:
            now = datetime.datetime.now()
            milliseconds = now.microsecond // 1000
            timestamp = now.strftime(f"%Y-%m-%d %H:%M:%S.{milliseconds:03d}")
            message = f"[{timestamp}] {message} [{self._caller_location()}]"

        if not self.use_color:
            return message

        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        return f"{color}{message}{self.COLORS['RESET']}"


# 全局日志器字典
_loggers = {}


def setup_logger(
    name: str = PROGRAM_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    console_output: bool = True
) -> logging.Logger:
    """
    设置日志器

    Args:
        name: 日志器名称
        level: 日志级别
        log_file: 日志文件路径，None表示不写入文件
        console_output: 是否输出到控制台

    Returns:
        配置好的日志器
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 清除已有的处理器
    logger.handlers.clear()

    # 控制台处理器
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            ColoredFormatter(use_color=sys.stderr.isatty())
        )
        logger.addHandler(console_handler)

    # 文件处理器
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # 防止重复输出
    logger.propagate = False

    _loggers[name] = logger
    return logger


def get_logger(name: str = PROGRAM_NAME) -> logging.Logger:
    """
    获取日志器实例

    包内模块的日志器是根日志器的子日志器，消息交由根日志器统一输出。

    Args:
        name: 日志器名称

    Returns:
        日志器实例
    """
    if name not in _loggers:
        if name.startswith(f"{PROGRAM_NAME}."):
            _loggers[name] = logging.getLogger(name)
        else:
            _loggers[name] = setup_logger(name)
    return _loggers[name]


def configure_logging(debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    根据命令行选项重新配置根日志器

    Args:
        debug: 是否输出调试日志
        log_file: 日志文件路径

    Returns:
        根日志器
    """
    level = logging.DEBUG if debug else logging.INFO
    return setup_logger(PROGRAM_NAME, level=level, log_file=log_file)


# 默认设置根日志器
_default_logger = setup_logger()
