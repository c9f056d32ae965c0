"""
设备后端模块
============

通过TIOCGRS485/TIOCSRS485请求读写串口驱动的RS-485控制记录。
"""

import abc
import fcntl
import os
from typing import List, Optional

from serial.tools import list_ports

from ..config.constants import RECORD_SIZE, TIOCGRS485, TIOCSRS485
from ..config.settings import DeviceConfig
from ..utils.logger import get_logger
from .errors import BackendError
from .record import ConfigRecord

logger = get_logger(__name__)


class DeviceBackend(abc.ABC):
    """设备后端接口"""

    def open(self) -> None:
        """打开设备，默认无操作"""

    def close(self) -> None:
        """关闭设备，默认无操作"""

    @abc.abstractmethod
    def get(self) -> ConfigRecord:
        """读取当前控制记录"""

    @abc.abstractmethod
    def set(self, record: ConfigRecord) -> ConfigRecord:
        """写入控制记录，返回驱动实际生效的记录"""

    def __enter__(self):
        """支持with语句"""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        self.close()


class IoctlBackend(DeviceBackend):
    """基于ioctl的设备后端"""

    def __init__(self, config: DeviceConfig):
        """
        初始化设备后端

        Args:
            config: 设备配置对象
        """
        self.config = config
        self._fd: Optional[int] = None

    @property
    def is_open(self) -> bool:
        """检查设备是否已打开"""
        return self._fd is not None

    def open(self) -> None:
        """
        打开设备节点

        Raises:
            BackendError: 打开失败
        """
        if self.is_open:
            logger.warning(f"设备 {self.config.device} 已经打开")
            return

        try:
            self._fd = os.open(self.config.device, self.config.to_open_flags())
        except OSError as e:
            raise BackendError(f"cannot open {self.config.device}", self.config.device, e) from e

        logger.debug(f"成功打开设备 {self.config.device}")

    def close(self) -> None:
        """关闭设备节点"""
        if self._fd is None:
            return
        try:
            os.close(self._fd)
            logger.debug(f"已关闭设备 {self.config.device}")
        except OSError as e:
            logger.error(f"关闭设备失败: {e}")
        finally:
            self._fd = None

    def _ioctl(self, request: int, record: ConfigRecord, what: str) -> ConfigRecord:
        """在设备上执行一次控制请求，返回请求后的记录"""
        if not self.is_open:
            raise BackendError(f"{self.config.device} is not open", self.config.device)

        buf = bytearray(record.pack())
        try:
            fcntl.ioctl(self._fd, request, buf, True)
        except OSError as e:
            raise BackendError(
                f"cannot {what} rs485 configuration for {self.config.device}",
                self.config.device,
                e,
            ) from e
        return ConfigRecord.unpack(bytes(buf[:RECORD_SIZE]))

    def get(self) -> ConfigRecord:
        """读取当前控制记录"""
        return self._ioctl(TIOCGRS485, ConfigRecord.default(), "get")

    def set(self, record: ConfigRecord) -> ConfigRecord:
        """写入控制记录，返回驱动实际生效的记录"""
        return self._ioctl(TIOCSRS485, record, "set")


def available_ports() -> List[str]:
    """
    获取系统可用的串口设备列表

    Returns:
        设备路径列表，获取失败时返回空列表
    """
    try:
        return sorted(port_info.device for port_info in list_ports.comports())
    except OSError as e:
        logger.debug(f"获取串口列表失败: {e}")
        return []
