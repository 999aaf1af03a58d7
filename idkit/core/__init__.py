"""
核心模块

提供工具库的核心功能，包括配置、异常和日志。
"""

from idkit.core.exceptions import ConfigError, IDKitError, InvalidNodeIDError
from idkit.core.config import LogConfig, LogLevel, Settings, load_settings
from idkit.core.logging import get_logger, setup_logging

__all__ = [
    "ConfigError",
    "IDKitError",
    "InvalidNodeIDError",
    "LogConfig",
    "LogLevel",
    "Settings",
    "load_settings",
    "get_logger",
    "setup_logging",
]
