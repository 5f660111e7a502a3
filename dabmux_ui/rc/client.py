"""
ODR-DabMux Remote-Control 客户端

通过 ZeroMQ REQ/REP 驱动独立运行的 ODR-DabMux 进程。

通信协议:
    ┌──────────────┬──────────────────────────────┬─────────────────────────────┐
    │ 操作          │ 请求帧                        │ 应答                         │
    ├──────────────┼──────────────────────────────┼─────────────────────────────┤
    │ 列出参数      │ ["showjson"]                 │ 1 帧 JSON module→{param→v}   │
    │ 设置参数      │ ["set", module, param, value]│ "ok" / "fail" + 原因 (多帧)   │
    │ 统计: 身份    │ ["info"]                     │ 1 帧 JSON {service, version} │
    │ 统计: 数值    │ ["values"]                   │ 1 帧 JSON {values: {...}}    │
    └──────────────┴──────────────────────────────┴─────────────────────────────┘

    RC 请求发往 rc_endpoint (默认 tcp://127.0.0.1:12722)，
    统计请求发往 stats_endpoint (默认 tcp://127.0.0.1:12720)。

调用约定:
    - 每次调用都是同步阻塞的，并新建自己的 RCSession，结束时关闭
    - 客户端本身只持有不可变配置和共享的 zmq.Context，不持有套接字
    - 失败一律抛出 RCError 子类，组件内部不重试

使用示例:
    client = DabMuxClient.from_config(load_settings("config.yaml"))
    for p in client.list_parameters():
        print(p.module, p.param, p.value)
    client.set_parameter("srv-fu", "label", "Radio FOO,FOO")
    stats = client.get_stats()
"""

import logging
from typing import Any

import zmq
from pydantic import ValidationError

from ..config import get_nested
from ..models.errors import (
    ConfigError,
    MalformedResponseError,
    MissingFieldError,
    SetRejectedError,
    WrongServiceError,
)
from ..models.rc import (
    UNKNOWN_VERSION,
    InputStat,
    Param,
    SetOutcome,
    SetReplyFormat,
    Stats,
)
from .params import flatten_parameters
from .replies import decode_json, decode_set_reply
from .transport import RC_TIMEOUT_MS, RCSession

logger = logging.getLogger(__name__)

DEFAULT_RC_ENDPOINT = "tcp://127.0.0.1:12722"
DEFAULT_STATS_ENDPOINT = "tcp://127.0.0.1:12720"

# 统计端点 info 应答中 service 字段的前缀
EXPECTED_SERVICE_PREFIX = "ODR-DabMux"


def check_service(info: Any) -> str:
    """
    校验 info 应答的服务身份

    Returns:
        对端版本字符串，缺失时为 "UNKNOWN"

    Raises:
        MalformedResponseError: 应答不是 JSON 对象
        MissingFieldError: 缺少 service 字段
        WrongServiceError: service 不以 "ODR-DabMux" 开头
    """
    if not isinstance(info, dict):
        logger.warning(f"stats info is not a JSON object: {info!r}")
        raise MalformedResponseError("info")

    service = info.get("service")
    if not isinstance(service, str):
        logger.warning(f"stats info without service: {info!r}")
        raise MissingFieldError("service")

    if not service.startswith(EXPECTED_SERVICE_PREFIX):
        logger.warning(f"stats info service is {service}")
        raise WrongServiceError(service)

    version = info.get("version")
    return version if isinstance(version, str) else UNKNOWN_VERSION


def parse_input_stats(reply: Any) -> list[tuple[str, InputStat]]:
    """
    解析 values 应答

    任一输入缺少 inputstat 或字段不完整都会使整个调用失败，不返回部分结果。

    Returns:
        按输入名升序排列的 (输入名, InputStat) 列表
    """
    values = reply.get("values") if isinstance(reply, dict) else None
    if not isinstance(values, dict):
        logger.warning(f"stats values isn't an object: {reply!r}")
        raise MalformedResponseError("values")

    input_stats: list[tuple[str, InputStat]] = []
    for name, entry in values.items():
        if not isinstance(entry, dict):
            logger.warning(f"stats input {name} is not a JSON object: {entry!r}")
            raise MalformedResponseError(f"values.{name}")
        if "inputstat" not in entry:
            logger.warning(f"stats input {name} without inputstat: {entry!r}")
            raise MissingFieldError("inputstat", details={"input": name})
        try:
            stat = InputStat.model_validate(entry["inputstat"])
        except ValidationError as e:
            logger.warning(f"stats input {name} has invalid inputstat: {entry['inputstat']!r}")
            raise MalformedResponseError(
                f"values.{name}.inputstat",
                details={"errors": e.error_count()},
            ) from e
        input_stats.append((name, stat))

    input_stats.sort(key=lambda item: item[0])
    return input_stats


class DabMuxClient:
    """
    ODR-DabMux RC / 统计客户端

    Attributes:
        rc_endpoint: RC 控制端点
        stats_endpoint: 统计端点
        set_reply_format: set 应答的解码方式
    """

    def __init__(
        self,
        rc_endpoint: str = DEFAULT_RC_ENDPOINT,
        stats_endpoint: str = DEFAULT_STATS_ENDPOINT,
        set_reply_format: SetReplyFormat = SetReplyFormat.STATUS,
        context: zmq.Context | None = None,
    ):
        self.rc_endpoint = rc_endpoint
        self.stats_endpoint = stats_endpoint
        self.set_reply_format = SetReplyFormat(set_reply_format)
        self._context = context or zmq.Context.instance()

    @classmethod
    def from_config(
        cls, config: dict[str, Any], context: zmq.Context | None = None
    ) -> "DabMuxClient":
        """从合并后的配置字典创建客户端 (读取 dabmux 节)"""
        reply_format = get_nested(config, "dabmux", "set_reply_format", default="status")
        try:
            reply_format = SetReplyFormat(str(reply_format).lower())
        except ValueError as e:
            raise ConfigError(
                f"不支持的 set_reply_format: {reply_format}",
                details={"allowed": [f.value for f in SetReplyFormat]},
            ) from e

        return cls(
            rc_endpoint=get_nested(config, "dabmux", "rc_endpoint", default=DEFAULT_RC_ENDPOINT),
            stats_endpoint=get_nested(
                config, "dabmux", "stats_endpoint", default=DEFAULT_STATS_ENDPOINT
            ),
            set_reply_format=reply_format,
            context=context,
        )

    def _session(self, endpoint: str) -> RCSession:
        return RCSession(endpoint, self._context, RC_TIMEOUT_MS)

    def list_parameters(self) -> list[Param]:
        """获取全部 RC 参数并展平"""
        with self._session(self.rc_endpoint) as session:
            msg = session.send_and_await_single(["showjson"])

        params = flatten_parameters(decode_json(msg, "showjson"))
        logger.debug(f"RC 参数 {len(params)} 项")
        return params

    def set_parameter(self, module: str, param: str, value: str) -> SetOutcome:
        """
        设置单个 RC 参数

        Returns:
            SetOutcome(ok=True)

        Raises:
            SetRejectedError: 对端拒绝或返回无法识别的应答
        """
        with self._session(self.rc_endpoint) as session:
            reply = session.send_and_await(["set", module, param, value])

        outcome = decode_set_reply(self.set_reply_format, reply)
        if not outcome.ok:
            logger.warning(f"set {module}.{param}={value!r} rejected: {reply!r}")
            raise SetRejectedError(outcome.reason or "unknown error")

        logger.info(f"RC 参数已设置: {module}.{param} = {value}")
        return outcome

    def get_stats(self) -> Stats:
        """
        获取统计信息

        先以 info 校验服务身份，再以 values 获取各输入的统计。两步共用一个会话。
        """
        with self._session(self.stats_endpoint) as session:
            info = decode_json(session.send_and_await_single(["info"]), "info")
            version = check_service(info)

            values = decode_json(session.send_and_await_single(["values"]), "values")

        stats = Stats(version=version, input_stats=parse_input_stats(values))
        logger.info(f"STATS: version={stats.version}, inputs={stats.input_names}")
        return stats
