"""
Snowflake ID 工具库

提供基于Snowflake算法的分布式唯一ID生成功能及配套工具。

主要功能：
----------
* ID生成：线程安全、单调递增的64位ID，位布局可配置
* ID解析：提取时间戳、节点ID和序列号，渲染为多种编码
* 配置管理：多源配置加载与管理
* 统一日志：基于loguru的日志管理
* 命令行工具：生成和解析ID

使用方法：
----------
1. 使用默认生成器
   ::

       from idkit import generate

       uid = generate()
       print(uid, uid.time(), uid.node(), uid.step())

2. 从配置创建生成器
   ::

       from idkit.core import load_settings

       settings = load_settings()
       generator = settings.create_generator()
       uid = generator.generate()
"""

import importlib.util

# 使用importlib.util.find_spec检查_version模块是否存在
if importlib.util.find_spec("idkit._version") is not None:
    # 当模块确实存在时才导入
    from ._version import __version__  # type: ignore
else:
    # 如果_version.py不存在（例如在开发环境中初次克隆后），使用默认版本
    __version__ = "0.0.0.dev0"

# 导出主要模块
from idkit import core, utils
from idkit.utils.id_generator import (
    SnowflakeConfig,
    SnowflakeGenerator,
    SnowflakeID,
    generate,
    get_default_generator,
)

__all__ = [
    "core",
    "utils",
    "SnowflakeConfig",
    "SnowflakeGenerator",
    "SnowflakeID",
    "generate",
    "get_default_generator",
]
