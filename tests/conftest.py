"""
pytest fixtures - 测试共享资源

提供:
1. 进程内 ZeroMQ REP 对端 (inproc://)，模拟 ODR-DabMux 的 RC / 统计端点
2. 典型的 showjson / info / values 应答数据
3. 临时配置文件
"""

import sys
import threading
from pathlib import Path
from typing import Callable

import pytest
import zmq

# 确保可以导入 dabmux_ui 与 cli 模块
sys.path.insert(0, str(Path(__file__).parent.parent))


# ==================== 模拟对端 ====================


Handler = Callable[[list[str]], "list[str | bytes] | None"]


class FakePeer:
    """
    在后台线程中运行的 REP 套接字

    handler 接收解码后的请求帧，返回应答帧；返回 None 表示不应答
    (用于模拟超时)。收到的所有请求记录在 requests 中。
    """

    def __init__(self, context: zmq.Context, endpoint: str, handler: Handler):
        self.endpoint = endpoint
        self.requests: list[list[str]] = []
        self._context = context
        self._handler = handler
        self._ready = threading.Event()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> "FakePeer":
        self._thread.start()
        assert self._ready.wait(timeout=5), "fake peer did not bind"
        return self

    def stop(self) -> None:
        self._stop.set()
        self._thread.join(timeout=5)

    def _run(self) -> None:
        sock = self._context.socket(zmq.REP)
        sock.setsockopt(zmq.LINGER, 0)
        sock.bind(self.endpoint)
        self._ready.set()
        try:
            while not self._stop.is_set():
                if not sock.poll(50, zmq.POLLIN):
                    continue
                frames = [f.decode("utf-8") for f in sock.recv_multipart()]
                self.requests.append(frames)
                reply = self._handler(frames)
                if reply is None:
                    # 不应答，REP 状态机停在这里直到测试结束
                    self._stop.wait()
                    break
                sock.send_multipart(
                    [r if isinstance(r, bytes) else r.encode("utf-8") for r in reply]
                )
        finally:
            sock.close(linger=0)


def scripted(**replies) -> Handler:
    """按请求首帧查表应答，例如 scripted(info=['{...}'], values=['{...}'])

    表中没有的请求不应答。
    """

    def handler(frames: list[str]):
        return replies.get(frames[0])

    return handler


@pytest.fixture
def zmq_context():
    """每个测试独立的 ZMQ Context，inproc 端点只在同一 Context 内可见"""
    ctx = zmq.Context()
    yield ctx
    ctx.term()


@pytest.fixture
def fake_peer(zmq_context):
    """启动模拟对端的工厂函数，测试结束时统一停止"""
    peers: list[FakePeer] = []

    def start(handler: Handler, name: str = "dabmux") -> FakePeer:
        endpoint = f"inproc://{name}-{len(peers)}"
        peer = FakePeer(zmq_context, endpoint, handler).start()
        peers.append(peer)
        return peer

    yield start

    for peer in peers:
        peer.stop()


# ==================== 应答数据 Fixtures ====================


@pytest.fixture
def sample_showjson() -> str:
    """showjson 应答 (保持 ODR-DabMux 的模块顺序)"""
    return (
        '{"srv-fu": {"label": "Radio FOO", "shortlabel": "FOO", "pty": 10, "pty_sd": "static"},'
        ' "sub-fu": {"bitrate": 96, "enable": true, "description": null},'
        ' "tist": {"offset": 0.5, "timestamp": 1720000000}}'
    )


@pytest.fixture
def sample_info() -> str:
    return '{"service": "ODR-DabMux v4.5.0 MUX", "version": "v4.5.0"}'


@pytest.fixture
def inputstat() -> dict:
    """完整的 inputstat 对象"""
    return {
        "max_fill": 12,
        "min_fill": 3,
        "num_underruns": 0,
        "num_overruns": 1,
        "peak_left": -12,
        "peak_right": -14,
        "peak_left_slow": -20,
        "peak_right_slow": -21,
        "state": "Streaming",
        "version": "ODR-AudioEnc v3.4.0",
        "uptime": 3600,
        "last_tist_offset": 0,
    }


# ==================== 配置 Fixtures ====================


@pytest.fixture
def sample_config() -> dict:
    return {
        "global": {
            "name": "Test Mux",
            "log": {"level": "debug", "format": "text", "output": "console"},
        },
        "dabmux": {
            "rc_endpoint": "tcp://127.0.0.1:22722",
            "set_reply_format": "json",
        },
    }


@pytest.fixture
def sample_config_file(sample_config, tmp_path) -> Path:
    """创建临时配置文件"""
    import yaml

    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, allow_unicode=True)
    return config_path
