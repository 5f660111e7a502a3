"""
ZeroMQ 请求/应答会话

每次公开操作 (列出参数、设置参数、获取统计) 都新建一个 RCSession，
用完即关闭，不复用、不做连接池。

会话生命周期:
    with RCSession(endpoint, context) as session:
        ┌─────────────┐   send_multipart    ┌──────────────┐
        │ REQ socket  │ ──────────────────▶ │  ODR-DabMux  │
        │             │ ◀────────────────── │  (REP)       │
        └─────────────┘  poll ≤ 2000ms      └──────────────┘
    # 退出时 socket.close(linger=0)

行为约定:
    - 一个会话同时最多一个未完成请求 (REQ 套接字语义保证)
    - 超时抛出 RCTimeoutError，之后该会话不可再用
    - 应答帧必须是合法 UTF-8，否则抛出 MalformedResponseError
    - 本层不做任何重试
"""

import logging
from typing import Sequence

import zmq

from ..models.errors import (
    MalformedResponseError,
    RCTimeoutError,
    TransportError,
    UnexpectedFramingError,
)

logger = logging.getLogger(__name__)

# 每次交换等待应答的上限 (毫秒)
RC_TIMEOUT_MS = 2000


class RCSession:
    """
    单次 RC 会话

    Attributes:
        endpoint: 对端地址，如 "tcp://127.0.0.1:12722"
        timeout_ms: 每次交换的等待上限
    """

    def __init__(
        self,
        endpoint: str,
        context: zmq.Context | None = None,
        timeout_ms: int = RC_TIMEOUT_MS,
    ):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms
        self._context = context or zmq.Context.instance()
        self._socket: zmq.Socket | None = None
        self._broken = False

    def __enter__(self) -> "RCSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """创建 REQ 套接字并连接到端点"""
        if self._socket is not None:
            raise RuntimeError("RCSession 已经打开")
        try:
            sock = self._context.socket(zmq.REQ)
        except zmq.ZMQError as e:
            raise TransportError(f"创建 ZMQ 套接字失败: {e}") from e
        try:
            sock.setsockopt(zmq.LINGER, 0)
            sock.connect(self.endpoint)
        except zmq.ZMQError as e:
            sock.close(linger=0)
            raise TransportError(
                f"连接 RC 端点失败: {e}", details={"endpoint": self.endpoint}
            ) from e
        self._socket = sock
        logger.debug(f"RC 会话已连接: {self.endpoint}")

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close(linger=0)
            self._socket = None

    def send_and_await(self, frames: Sequence[str | bytes]) -> list[str]:
        """
        发送一个多帧请求并等待应答

        Args:
            frames: 请求帧，str 会按 UTF-8 编码

        Returns:
            解码后的应答帧列表

        Raises:
            RCTimeoutError: timeout_ms 内未收到应答
            MalformedResponseError: 应答帧不是合法 UTF-8
            TransportError: ZeroMQ 收发失败
        """
        if self._socket is None:
            raise RuntimeError("RCSession 未打开")
        if self._broken:
            # REQ 在未收到应答前不能再次发送
            raise RCTimeoutError(self.endpoint, self.timeout_ms)

        payload = [f.encode("utf-8") if isinstance(f, str) else bytes(f) for f in frames]
        try:
            self._socket.send_multipart(payload)
            ready = self._socket.poll(self.timeout_ms, zmq.POLLIN)
            if not ready:
                self._broken = True
                logger.warning(
                    f"RC 请求超时: endpoint={self.endpoint}, "
                    f"request={payload[0]!r}, timeout={self.timeout_ms}ms"
                )
                raise RCTimeoutError(self.endpoint, self.timeout_ms)
            parts = self._socket.recv_multipart()
        except zmq.ZMQError as e:
            self._broken = True
            raise TransportError(
                f"ZMQ 收发失败: {e}", details={"endpoint": self.endpoint}
            ) from e

        reply: list[str] = []
        for index, part in enumerate(parts):
            try:
                reply.append(part.decode("utf-8"))
            except UnicodeDecodeError as e:
                logger.warning(f"RC 应答第 {index} 帧不是 UTF-8: {part!r}")
                raise MalformedResponseError(
                    f"frame {index} is not valid UTF-8"
                ) from e

        logger.debug(f"RC 应答 {len(reply)} 帧 <- {self.endpoint}")
        return reply

    def send_and_await_single(self, frames: Sequence[str | bytes]) -> str:
        """发送请求并要求应答恰好一帧"""
        parts = self.send_and_await(frames)
        if len(parts) != 1:
            logger.warning(f"multipart returned: {','.join(parts)}")
            raise UnexpectedFramingError(len(parts))
        return parts[0]
