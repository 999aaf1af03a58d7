"""
日志管理模块

使用loguru库实现统一的日志管理，支持配置日志级别、格式、输出位置等。
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from idkit.core.config import LogConfig


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    设置日志系统，替换掉loguru中已存在的所有处理器

    Args:
        config: 日志配置，默认使用LogConfig()
    """
    if config is None:
        config = LogConfig()

    handlers: List[Dict[str, Any]] = [
        {"sink": sys.stderr, "level": config.level.value, "format": config.format}
    ]

    if config.file_path:
        log_file_path = Path(config.file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            {
                "sink": log_file_path,
                "level": config.level.value,
                "format": config.format,
                "rotation": config.rotation,
                "retention": config.retention,
                "compression": config.compression,
                "serialize": config.serialize,
            }
        )

    logger.configure(handlers=handlers)
    logger.debug(f"日志系统已初始化，级别: {config.level.value}")


def get_logger(name: str = "idkit"):
    """
    获取指定名称的日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        logger: 绑定了名称的loguru日志记录器
    """
    return logger.bind(name=name)
