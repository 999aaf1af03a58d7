"""
工具模块

提供各种实用工具函数和类，包括Snowflake ID生成、摘要编码和时间格式化等。
"""

from idkit.utils.crypto import base64_encode, md5_hex
from idkit.utils.id_generator import (
    DEFAULT_CONFIG,
    SnowflakeConfig,
    SnowflakeGenerator,
    SnowflakeID,
    generate,
    get_default_generator,
)
from idkit.utils.time import (
    JSONTimeEncoder,
    datetime_to_millis,
    format_datetime,
    millis_to_datetime,
    parse_datetime,
)

__all__ = [
    "DEFAULT_CONFIG",
    "SnowflakeConfig",
    "SnowflakeGenerator",
    "SnowflakeID",
    "generate",
    "get_default_generator",
    "base64_encode",
    "md5_hex",
    "JSONTimeEncoder",
    "datetime_to_millis",
    "format_datetime",
    "millis_to_datetime",
    "parse_datetime",
]
