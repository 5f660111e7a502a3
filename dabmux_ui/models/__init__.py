"""
数据模型与异常定义模块

模块内容:
    数据模型:
        - Param: 单个 RC 参数 (module, param, value)
        - InputStat: 单路输入统计
        - Stats: 统计快照
        - SetReplyFormat: set 应答编码方式
        - SetOutcome: set 请求解码结果

    异常类:
        - DabMuxUIError: 基础异常类
        - ConfigError: 配置错误
        - RCError 及其子类: RC 通信错误

    枚举:
        - ErrorKind: RC 错误类型枚举

使用示例:
    from dabmux_ui.models import Param, RCError, ErrorKind
"""

from .errors import (
    ConfigError,
    DabMuxUIError,
    ErrorKind,
    MalformedResponseError,
    MissingFieldError,
    RCError,
    RCTimeoutError,
    SetRejectedError,
    TransportError,
    UnexpectedFramingError,
    UnsupportedValueShapeError,
    WrongServiceError,
)
from .rc import (
    UNKNOWN_VERSION,
    InputStat,
    Param,
    SetOutcome,
    SetReplyFormat,
    Stats,
)

__all__ = [
    "ErrorKind",
    "DabMuxUIError",
    "ConfigError",
    "RCError",
    "TransportError",
    "RCTimeoutError",
    "MalformedResponseError",
    "UnexpectedFramingError",
    "UnsupportedValueShapeError",
    "WrongServiceError",
    "MissingFieldError",
    "SetRejectedError",
    "UNKNOWN_VERSION",
    "Param",
    "InputStat",
    "Stats",
    "SetReplyFormat",
    "SetOutcome",
]
