"""
错误类型与异常定义

本模块定义 ODR-DabMux RC 客户端的错误分类系统和自定义异常类。
组件内部不做任何恢复或重试，所有失败都以可区分、可检查的异常交给调用方。

错误分类设计:
    ┌─────────────────────────┬──────────────────────────────────────────┐
    │ 错误类型                 │ 说明                                     │
    ├─────────────────────────┼──────────────────────────────────────────┤
    │ TIMEOUT                 │ 2000ms 内未收到应答，会话被丢弃           │
    │ MALFORMED_RESPONSE      │ 应答不是 UTF-8 / JSON，或结构不符合预期    │
    │ UNEXPECTED_FRAMING      │ 单值交换收到的帧数不为 1                  │
    │ UNSUPPORTED_VALUE_SHAPE │ 参数值是数组或对象，无法展平              │
    │ WRONG_SERVICE           │ 统计端点的 service 标识不是 ODR-DabMux    │
    │ MISSING_FIELD           │ 应答缺少必需字段                          │
    │ SET_REJECTED            │ 对端明确拒绝 set 请求                     │
    │ TRANSPORT               │ ZeroMQ 层连接/发送失败                    │
    └─────────────────────────┴──────────────────────────────────────────┘

异常层次结构:
    Exception
    └── DabMuxUIError (基础异常)
        ├── ConfigError (配置错误)
        └── RCError (RC 通信错误, 带 kind)
            ├── TransportError
            ├── RCTimeoutError
            ├── MalformedResponseError
            ├── UnexpectedFramingError
            ├── UnsupportedValueShapeError
            ├── WrongServiceError
            ├── MissingFieldError
            └── SetRejectedError

使用示例:
    from dabmux_ui.models.errors import ErrorKind, RCError

    try:
        params = client.list_parameters()
    except RCError as e:
        if e.kind == ErrorKind.TIMEOUT:
            ...
        print(f"错误: {e.message}, 详情: {e.details}")
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """
    RC 错误类型枚举

    继承自 str 使得枚举值可以直接用于字符串操作 (如渲染到页面或日志)。
    """

    TIMEOUT = "timeout"
    MALFORMED_RESPONSE = "malformed_response"
    UNEXPECTED_FRAMING = "unexpected_framing"
    UNSUPPORTED_VALUE_SHAPE = "unsupported_value_shape"
    WRONG_SERVICE = "wrong_service"
    MISSING_FIELD = "missing_field"
    SET_REJECTED = "set_rejected"
    TRANSPORT = "transport"

    def __str__(self) -> str:
        return self.value


class DabMuxUIError(Exception):
    """
    基础异常类

    所有自定义异常的基类，提供统一的错误信息格式和附加详情支持。

    Attributes:
        message: 错误消息文本
        details: 附加的错误详情字典 (可选)
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | 详情: {self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class ConfigError(DabMuxUIError):
    """
    配置错误

    常见场景:
        - 配置文件不存在
        - YAML 语法错误
        - set_reply_format 取值不合法
    """

    pass


class RCError(DabMuxUIError):
    """
    RC 通信错误基类

    子类通过类属性 kind 声明自己的 ErrorKind，调用方可以只捕获 RCError
    再按 kind 分支处理。
    """

    kind: ErrorKind = ErrorKind.TRANSPORT


class TransportError(RCError):
    """ZeroMQ 连接或收发失败"""

    kind = ErrorKind.TRANSPORT


class RCTimeoutError(RCError):
    """
    应答超时

    超时后 REQ 套接字的状态机无法继续使用，会话会被直接丢弃。
    """

    kind = ErrorKind.TIMEOUT

    def __init__(self, endpoint: str, timeout_ms: int):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms
        super().__init__(
            f"ZMQ timeout after {timeout_ms}ms",
            details={"endpoint": endpoint},
        )


class MalformedResponseError(RCError):
    """
    应答格式错误

    Attributes:
        detail: 出问题的位置 (如模块名、字段名)
    """

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, detail: str, details: dict[str, Any] | None = None):
        self.detail = detail
        super().__init__(f"Malformed response: {detail}", details)


class UnexpectedFramingError(RCError):
    """单值交换收到了多帧 (或零帧) 应答"""

    kind = ErrorKind.UNEXPECTED_FRAMING

    def __init__(self, frame_count: int):
        self.frame_count = frame_count
        super().__init__(
            "unexpected multipart answer",
            details={"frames": frame_count},
        )


class UnsupportedValueShapeError(RCError):
    """参数值为数组或对象，RC 协议无法用单个字符串表示"""

    kind = ErrorKind.UNSUPPORTED_VALUE_SHAPE

    def __init__(self, module: str, param: str, shape: str = "array"):
        self.module = module
        self.param = param
        self.shape = shape
        super().__init__(f"Unexpected {shape} in {module}.{param}")


class WrongServiceError(RCError):
    """统计端点返回的 service 标识不属于 ODR-DabMux"""

    kind = ErrorKind.WRONG_SERVICE

    def __init__(self, actual: str):
        self.actual = actual
        super().__init__("Wrong service in stats", details={"service": actual})


class MissingFieldError(RCError):
    """应答缺少必需字段"""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        self.name = name
        super().__init__(f"Missing {name} in response", details)


class SetRejectedError(RCError):
    """
    对端拒绝了 set 请求

    Attributes:
        reason: 对端给出的原因；对端没有给出时为 "unknown error"
    """

    kind = ErrorKind.SET_REJECTED

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to set RC: {reason}")
