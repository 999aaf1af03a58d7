"""
配置管理模块

提供从多种来源加载配置的功能，支持配置文件（YAML/JSON/TOML）、环境变量和.env文件，
并按照优先级加载配置。
"""

import json
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import toml
import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from idkit.core.exceptions import ConfigError
from idkit.utils.id_generator import SnowflakeConfig, SnowflakeGenerator

# 定义类型变量用于泛型函数
T = TypeVar("T", bound="BaseSettings")

CONFIG_FILE_NAMES = ("config.yaml", "config.json", "config.toml")


def locate_config_file(
    file_name: str, explicit_path: Optional[str] = None
) -> Optional[Path]:
    """
    按照优先级定位配置文件路径

    Args:
        file_name: 配置文件名
        explicit_path: 显式指定的配置文件路径

    Returns:
        Optional[Path]: 配置文件路径，如果未找到则返回None
    """
    paths_to_check = []

    # 1. 显式指定的路径
    if explicit_path:
        paths_to_check.append(Path(explicit_path))

    # 2. 当前工作目录
    paths_to_check.append(Path.cwd() / file_name)

    # 3. 应用程序运行目录
    app_dir = Path(sys.argv[0]).parent.absolute()
    paths_to_check.append(app_dir / file_name)

    # 4. 用户主目录下的.idkit目录
    paths_to_check.append(Path.home() / ".idkit" / file_name)

    for path in paths_to_check:
        if path.exists() and path.is_file():
            return path

    return None


def load_yaml_config(file_path: Path) -> Dict[str, Any]:
    """
    加载YAML配置文件

    Args:
        file_path: 配置文件路径

    Returns:
        Dict[str, Any]: 配置字典
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"解析YAML配置文件失败: {e}")
            return {}


def load_json_config(file_path: Path) -> Dict[str, Any]:
    """
    加载JSON配置文件

    Args:
        file_path: 配置文件路径

    Returns:
        Dict[str, Any]: 配置字典
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"解析JSON配置文件失败: {e}")
            return {}


def load_toml_config(file_path: Path) -> Dict[str, Any]:
    """
    加载TOML配置文件

    Args:
        file_path: 配置文件路径

    Returns:
        Dict[str, Any]: 配置字典
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return toml.load(f)
        except toml.TomlDecodeError as e:
            logger.error(f"解析TOML配置文件失败: {e}")
            return {}


_LOADERS = {
    ".yaml": load_yaml_config,
    ".yml": load_yaml_config,
    ".json": load_json_config,
    ".toml": load_toml_config,
}


def load_config_file(file_path: Path) -> Dict[str, Any]:
    """
    按文件后缀选择解析器加载配置文件

    Args:
        file_path: 配置文件路径

    Returns:
        Dict[str, Any]: 配置字典

    Raises:
        ConfigError: 不支持的配置文件格式
    """
    loader = _LOADERS.get(file_path.suffix.lower())
    if loader is None:
        raise ConfigError(
            f"不支持的配置文件格式: {file_path.suffix}",
            details={"path": str(file_path)},
        )
    config_dict = loader(file_path)
    if not isinstance(config_dict, dict):
        logger.error(
            f"配置文件顶层必须是键值映射，已忽略: {file_path} "
            f"({type(config_dict).__name__})"
        )
        return {}
    return config_dict


def load_config_from_file(
    config_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    从配置文件加载配置

    Args:
        config_path: 配置文件路径，如果未指定则按优先级自动查找

    Returns:
        Dict[str, Any]: 配置字典
    """
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(
                f"配置文件不存在: {config_path}", details={"path": config_path}
            )
        config_dict = load_config_file(path)
        logger.info(f"已从 {path} 加载配置")
        return config_dict

    for file_name in CONFIG_FILE_NAMES:
        path = locate_config_file(file_name)
        if path:
            config_dict = load_config_file(path)
            logger.info(f"已从 {path} 加载配置")
            return config_dict

    logger.debug("未找到配置文件，将使用环境变量和默认值")
    return {}


def load_settings(
    settings_class: Optional[Type[T]] = None,
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> T:
    """
    加载应用设置，按照优先级从配置文件、.env文件和环境变量加载

    Args:
        settings_class: 设置类型，必须继承自BaseSettings，默认为Settings
        config_path: 配置文件路径，如果未指定则按优先级自动查找
        env_file: .env文件路径，如果未指定则按优先级自动查找

    Returns:
        T: 设置实例
    """
    if settings_class is None:
        settings_class = Settings  # type: ignore[assignment]

    # 加载.env文件，显式指定的文件不存在时按优先级查找
    env_path = locate_config_file(".env", env_file)
    if env_path:
        load_dotenv(env_path)
        logger.info(f"已加载环境变量文件: {env_path}")

    config_dict = load_config_from_file(config_path)

    # 初始化参数优先级最高，因此配置文件覆盖环境变量和默认值
    return settings_class(**config_dict)


class LogLevel(str, Enum):
    """日志级别枚举"""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogConfig(BaseModel):
    """日志配置"""

    level: LogLevel = LogLevel.INFO
    format: str = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    file_path: Optional[str] = None
    rotation: str = "20 MB"
    retention: str = "1 week"
    compression: str = "zip"
    serialize: bool = False


class Settings(BaseSettings):
    """应用设置"""

    node_id: int = 0
    snowflake: SnowflakeConfig = Field(default_factory=SnowflakeConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    model_config = SettingsConfigDict(
        env_prefix="IDKIT_", env_nested_delimiter="__", case_sensitive=False
    )

    def create_generator(self) -> SnowflakeGenerator:
        """按当前设置创建ID生成器"""
        return SnowflakeGenerator(self.node_id, config=self.snowflake)
