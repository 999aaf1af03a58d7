"""
ID生成器模块

提供分布式唯一ID生成功能，基于Snowflake算法。

生成的ID是64位有符号整数，符号位始终为0，其余部分依次为：

- 时间戳差值（63 - node_bits - step_bits 位，毫秒级，相对于epoch）
- 节点ID（node_bits 位，默认10位，最多1024个节点）
- 序列号（step_bits 位，默认12位，每个节点每毫秒最多4096个ID）

使用方法：
----------
::

    from idkit.utils import SnowflakeConfig, SnowflakeGenerator, generate

    # 使用进程级默认生成器（节点ID为0）
    uid = generate()

    # 显式指定节点ID和位布局
    generator = SnowflakeGenerator(5, config=SnowflakeConfig(node_bits=8))
    uid = generator.generate()
    print(uid.time(), uid.node(), uid.step(), uid.base36())
"""

import datetime
import threading
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from idkit.core.exceptions import IDKitError, InvalidNodeIDError
from idkit.utils.crypto import base64_encode, md5_hex
from idkit.utils.time import (
    current_millis,
    datetime_to_millis,
    millis_to_datetime,
    parse_datetime,
)

# 2010-11-04 01:42:54.657 UTC
DEFAULT_EPOCH = 1288834974657

# 符号位固定为0，其余63位由时间戳、节点ID和序列号瓜分
ID_BITS = 63

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class SnowflakeConfig(BaseModel):
    """
    Snowflake ID位布局配置

    配置在生成器构造时读取，派生的掩码和位移量也在构造时计算，之后不可修改。
    epoch 除毫秒时间戳外也接受日期时间对象或ISO 8601字符串，不带时区的按UTC处理。
    """

    model_config = ConfigDict(frozen=True)

    epoch: int = Field(default=DEFAULT_EPOCH, ge=0)
    node_bits: int = Field(default=10, ge=0, le=ID_BITS - 1)
    step_bits: int = Field(default=12, ge=1, le=ID_BITS - 1)

    @field_validator("epoch", mode="before")
    @classmethod
    def _coerce_epoch(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip().lstrip("-").isdigit():
            value = parse_datetime(value)
        if isinstance(value, datetime.datetime):
            return datetime_to_millis(value)
        return value

    @model_validator(mode="after")
    def _check_layout(self) -> "SnowflakeConfig":
        if self.node_bits + self.step_bits >= ID_BITS:
            raise ValueError(
                f"node_bits + step_bits 必须小于{ID_BITS}，"
                f"当前为 {self.node_bits} + {self.step_bits}"
            )
        # 当前时刻必须能放进时间戳字段，否则ID会超出64位
        elapsed = current_millis() - self.epoch
        if elapsed < 0 or elapsed >> self.time_bits:
            raise ValueError(
                f"时间戳字段只有{self.time_bits}位，"
                f"无法容纳当前时间与epoch的差值: {elapsed}"
            )
        return self

    @property
    def node_max(self) -> int:
        """节点ID最大值"""
        return -1 ^ (-1 << self.node_bits)

    @property
    def node_mask(self) -> int:
        """节点ID在ID中的掩码"""
        return self.node_max << self.step_bits

    @property
    def step_mask(self) -> int:
        """序列号掩码"""
        return -1 ^ (-1 << self.step_bits)

    @property
    def time_bits(self) -> int:
        """时间戳字段位数"""
        return ID_BITS - self.node_bits - self.step_bits

    @property
    def time_max(self) -> int:
        """时间戳字段能表示的最大毫秒级Unix时间戳，超过后ID将溢出64位"""
        return self.epoch + (-1 ^ (-1 << self.time_bits))

    @property
    def time_shift(self) -> int:
        """时间戳位移量"""
        return self.node_bits + self.step_bits

    @property
    def node_shift(self) -> int:
        """节点ID位移量"""
        return self.step_bits


DEFAULT_CONFIG = SnowflakeConfig()


def _format_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS[rem])
    return sign + "".join(reversed(digits))


class SnowflakeID(int):
    """
    Snowflake ID

    可以当作普通整数使用（比较、哈希、序列化），同时记录生成它的位布局，
    用于提取时间戳、节点ID和序列号，以及渲染为多种字符串形式。
    """

    config: SnowflakeConfig

    def __new__(cls, value: int, config: Optional[SnowflakeConfig] = None):
        obj = super().__new__(cls, value)
        obj.config = config if config is not None else DEFAULT_CONFIG
        return obj

    @classmethod
    def parse(
        cls, text: str, base: int = 10, config: Optional[SnowflakeConfig] = None
    ) -> "SnowflakeID":
        """
        从字符串解析ID

        Args:
            text: 十进制、二进制或三十六进制字符串
            base: 进制，支持10、2、36
            config: 位布局配置，默认为DEFAULT_CONFIG

        Returns:
            SnowflakeID: 解析出的ID

        Raises:
            ValueError: 字符串格式错误或进制不受支持
        """
        if base not in (2, 10, 36):
            raise ValueError(f"不支持的进制: {base}")
        return cls(int(text.strip(), base), config)

    @classmethod
    def compose(
        cls,
        timestamp: int,
        node: int,
        sequence: int,
        config: Optional[SnowflakeConfig] = None,
    ) -> "SnowflakeID":
        """
        由时间戳、节点ID和序列号组装ID，是三个提取方法的逆运算

        Args:
            timestamp: 毫秒级Unix时间戳
            node: 节点ID
            sequence: 序列号
            config: 位布局配置，默认为DEFAULT_CONFIG

        Returns:
            SnowflakeID: 组装出的ID
        """
        config = config if config is not None else DEFAULT_CONFIG
        if isinstance(node, bool) or not 0 <= node <= config.node_max:
            raise ValueError(f"节点ID超出范围: {node}")
        if isinstance(sequence, bool) or not 0 <= sequence <= config.step_mask:
            raise ValueError(f"序列号超出范围: {sequence}")
        return cls(
            ((timestamp - config.epoch) << config.time_shift)
            | (node << config.node_shift)
            | sequence,
            config,
        )

    def time(self) -> int:
        """ID中的毫秒级Unix时间戳"""
        return (int(self) >> self.config.time_shift) + self.config.epoch

    def node(self) -> int:
        """ID中的节点ID"""
        return (int(self) & self.config.node_mask) >> self.config.node_shift

    def step(self) -> int:
        """ID中的序列号"""
        return int(self) & self.config.step_mask

    sequence = step

    def to_datetime(self) -> datetime.datetime:
        """ID中的时间戳对应的UTC日期时间"""
        return millis_to_datetime(self.time())

    def int64(self) -> int:
        return int(self)

    def string(self) -> str:
        return int.__repr__(self)

    def base2(self) -> str:
        return format(int(self), "b")

    def base36(self) -> str:
        return _format_base36(int(self))

    def as_bytes(self) -> bytes:
        """十进制字符串的UTF-8字节，作为摘要和编码工具的输入"""
        return self.string().encode("utf-8")

    def base64(self) -> str:
        return base64_encode(self.as_bytes())

    def md5(self) -> str:
        return md5_hex(self.as_bytes())

    def __str__(self) -> str:
        return self.string()

    def __repr__(self) -> str:
        return f"SnowflakeID({self.string()})"


class SnowflakeGenerator:
    """
    Snowflake ID生成器

    线程安全。同一实例上的所有调用由一把互斥锁串行化；在时钟不回拨的前提下，
    同一实例生成的ID严格递增。不同实例之间不共享状态，只要节点ID互不相同，
    生成的ID就不会冲突。

    同一毫秒内序列号用尽时，持有锁忙等直到时钟进入下一毫秒，期间该实例上的
    其他调用都会阻塞。

    时钟回拨时不做修正：序列号归零，并以回拨后的时间戳继续生成，
    因此回拨期间生成的ID可能小于回拨前生成的ID。
    """

    def __init__(self, node_id: int = 0, config: Optional[SnowflakeConfig] = None):
        """
        初始化Snowflake生成器

        Args:
            node_id: 节点ID，范围为0到config.node_max
            config: 位布局配置，默认为DEFAULT_CONFIG

        Raises:
            InvalidNodeIDError: 节点ID不是整数或超出范围
        """
        config = config if config is not None else DEFAULT_CONFIG

        # 派生常量在构造时从配置计算一次
        self.node_max = config.node_max
        self.step_mask = config.step_mask
        self.time_shift = config.time_shift
        self.node_shift = config.node_shift
        self.epoch = config.epoch
        self.time_max = config.time_max

        if (
            isinstance(node_id, bool)
            or not isinstance(node_id, int)
            or node_id < 0
            or node_id > self.node_max
        ):
            raise InvalidNodeIDError(node_id, self.node_max)

        self._config = config
        self._node_id = node_id
        self._last_timestamp = 0
        self._sequence = 0
        self._lock = threading.Lock()

        logger.debug(
            f"ID生成器已创建，节点ID: {node_id}，"
            f"位布局: node_bits={config.node_bits}, step_bits={config.step_bits}"
        )

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def config(self) -> SnowflakeConfig:
        return self._config

    @property
    def last_timestamp(self) -> int:
        """最近一次生成ID时的毫秒时间戳"""
        return self._last_timestamp

    @property
    def sequence(self) -> int:
        return self._sequence

    def _get_timestamp(self) -> int:
        """
        获取当前时间戳（毫秒）

        Returns:
            int: 当前时间戳
        """
        return current_millis()

    def _next_millis(self, last_timestamp: int) -> int:
        """
        忙等直到时钟越过给定的毫秒

        Args:
            last_timestamp: 上一次的时间戳

        Returns:
            int: 下一毫秒的时间戳
        """
        timestamp = self._get_timestamp()
        while timestamp <= last_timestamp:
            timestamp = self._get_timestamp()
        return timestamp

    def generate(self) -> SnowflakeID:
        """
        生成下一个ID

        Returns:
            SnowflakeID: 生成的唯一ID
        """
        with self._lock:
            timestamp = self._get_timestamp()

            if timestamp == self._last_timestamp:
                self._sequence = (self._sequence + 1) & self.step_mask
                # 同一毫秒内序列号用尽，等待下一毫秒
                if self._sequence == 0:
                    logger.debug(f"序列号已用尽，等待下一毫秒: {timestamp}")
                    timestamp = self._next_millis(self._last_timestamp)
            else:
                if timestamp < self._last_timestamp:
                    logger.warning(
                        f"检测到时钟回拨，上次时间戳: {self._last_timestamp}，"
                        f"当前时间戳: {timestamp}"
                    )
                self._sequence = 0

            if timestamp > self.time_max:
                logger.error(
                    f"时间戳已超出位布局上限 {self.time_max}，生成的ID将超出64位"
                )

            self._last_timestamp = timestamp

            return SnowflakeID(
                ((timestamp - self.epoch) << self.time_shift)
                | (self._node_id << self.node_shift)
                | self._sequence,
                self._config,
            )

    next_id = generate


_default_generator: Optional[SnowflakeGenerator] = None
_default_lock = threading.Lock()


def get_default_generator() -> SnowflakeGenerator:
    """
    获取进程级默认ID生成器

    首次调用时以节点ID 0 和默认位布局创建，之后始终返回同一实例。

    Returns:
        SnowflakeGenerator: 默认生成器

    Raises:
        RuntimeError: 默认生成器无法创建，属于编程错误
    """
    global _default_generator

    if _default_generator is None:
        with _default_lock:
            if _default_generator is None:
                try:
                    _default_generator = SnowflakeGenerator(0)
                except (IDKitError, ValueError) as e:
                    logger.critical(f"默认ID生成器初始化失败: {e}")
                    raise RuntimeError("默认ID生成器初始化失败") from e
    return _default_generator


def generate() -> SnowflakeID:
    """使用默认生成器生成一个ID"""
    return get_default_generator().generate()
