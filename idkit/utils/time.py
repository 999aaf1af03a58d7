"""
时间处理模块

提供毫秒时间戳与日期时间的相互转换、时间格式化和解析功能，以及JSON时间编码器。
"""

import datetime
import json
import time
from typing import Any, Optional, Union

_UNIX_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

_FALLBACK_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
]


class JSONTimeEncoder(json.JSONEncoder):
    """
    JSON时间编码器

    扩展JSON编码器，支持datetime和date类型的序列化。
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return format_datetime(obj)
        return super().default(obj)


def current_millis() -> int:
    """
    获取当前墙钟时间（毫秒级Unix时间戳）

    Returns:
        int: 自1970-01-01 UTC以来的毫秒数
    """
    return time.time_ns() // 1_000_000


def millis_to_datetime(
    millis: int, tz: Optional[datetime.tzinfo] = datetime.timezone.utc
) -> datetime.datetime:
    """
    将毫秒级Unix时间戳转换为日期时间

    Args:
        millis: 毫秒级Unix时间戳
        tz: 目标时区，默认为UTC

    Returns:
        datetime.datetime: 带时区的日期时间
    """
    dt = _UNIX_EPOCH + datetime.timedelta(milliseconds=millis)
    return dt.astimezone(tz) if tz is not None else dt


def datetime_to_millis(dt: datetime.datetime) -> int:
    """
    将日期时间转换为毫秒级Unix时间戳，不带时区的日期时间按UTC处理

    Args:
        dt: 日期时间对象

    Returns:
        int: 毫秒级Unix时间戳
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return (dt - _UNIX_EPOCH) // datetime.timedelta(milliseconds=1)


def format_datetime(
    dt: Union[datetime.datetime, datetime.date],
    format_str: Optional[str] = None,
) -> str:
    """
    格式化日期时间

    Args:
        dt: 日期时间对象
        format_str: 格式化字符串，默认为ISO 8601格式

    Returns:
        str: 格式化后的字符串
    """
    if format_str:
        return dt.strftime(format_str)

    if isinstance(dt, datetime.datetime):
        return dt.isoformat(timespec="milliseconds")
    elif isinstance(dt, datetime.date):
        return dt.isoformat()
    else:
        raise TypeError(f"不支持的类型: {type(dt)}")


def parse_datetime(
    dt_str: str,
    format_str: Optional[str] = None,
) -> datetime.datetime:
    """
    解析日期时间字符串

    Args:
        dt_str: 日期时间字符串
        format_str: 格式化字符串，如果为None则尝试自动解析

    Returns:
        datetime.datetime: 解析后的日期时间对象

    Raises:
        ValueError: 无法解析的字符串
    """
    if format_str:
        return datetime.datetime.strptime(dt_str, format_str)

    dt_str = dt_str.strip()
    # 兼容以Z结尾的UTC时间
    if dt_str.endswith("Z"):
        dt_str = dt_str[:-1] + "+00:00"

    try:
        return datetime.datetime.fromisoformat(dt_str)
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.datetime.strptime(dt_str, fmt)
        except ValueError:
            continue

    raise ValueError(f"无法解析日期时间字符串: {dt_str}")


def json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    使用时间编码器将对象序列化为JSON字符串

    Args:
        obj: 要序列化的对象
        **kwargs: 传递给json.dumps的其他参数

    Returns:
        str: JSON字符串
    """
    return json.dumps(obj, cls=JSONTimeEncoder, **kwargs)
