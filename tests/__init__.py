"""
测试模块
========

rs485ctl的单元测试：控制记录、选项解析、配置协商、设备后端（mock ioctl）、
报告输出、命令行入口和日志配置。
"""

# 为了支持直接运行单个测试文件，确保项目源码包可被导入
from pathlib import Path
import sys

ROOT_DIR = Path(__file__).parent.parent.resolve()
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))
