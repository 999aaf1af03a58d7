"""
异常处理模块

定义工具库中使用的自定义异常类。
"""

from typing import Any, Dict, Optional


class IDKitError(Exception):
    """工具库基础异常类"""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        初始化异常

        Args:
            code: 错误代码
            message: 错误消息
            details: 错误详情
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidNodeIDError(IDKitError):
    """节点ID超出当前位布局允许的范围"""

    def __init__(self, node_id: Any, node_max: int):
        """
        初始化异常

        Args:
            node_id: 传入的节点ID
            node_max: 当前位布局下允许的最大节点ID
        """
        super().__init__(
            code="INVALID_NODE_ID",
            message=f"节点ID必须是0到{node_max}之间的整数，当前为: {node_id!r}",
            details={"node_id": node_id, "node_max": node_max},
        )
        self.node_id = node_id
        self.node_max = node_max


class ConfigError(IDKitError):
    """配置加载错误异常"""

    def __init__(
        self,
        message: str = "配置加载错误",
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        初始化异常

        Args:
            message: 错误消息
            details: 错误详情
        """
        super().__init__(
            code="CONFIG_ERROR",
            message=message,
            details=details,
        )
