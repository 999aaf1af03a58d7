"""
摘要与编码工具模块

提供对字节数据计算摘要和编码的函数，常用于ID的原始字节形式。
"""

import base64
import hashlib


def md5_hex(data: bytes) -> str:
    """
    计算MD5摘要

    Args:
        data: 原始字节

    Returns:
        str: 十六进制小写摘要
    """
    return hashlib.md5(data).hexdigest()


def base64_encode(data: bytes) -> str:
    """
    标准Base64编码（带填充）

    Args:
        data: 原始字节

    Returns:
        str: Base64字符串
    """
    return base64.b64encode(data).decode("ascii")

