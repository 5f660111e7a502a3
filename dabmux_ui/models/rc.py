"""
RC 与统计数据结构定义

Param / Stats / SetOutcome 采用 dataclass 实现，InputStat 使用 Pydantic
做字段校验 (对端返回的 inputstat 是未经约束的 JSON 对象)。

所有对象都是值对象：每次调用时新建，交给调用方后不再修改。
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, NonNegativeInt

# 统计端点未返回 version 时使用的占位值
UNKNOWN_VERSION = "UNKNOWN"


@dataclass(frozen=True)
class Param:
    """
    单个 RC 参数

    Attributes:
        module: 对端子系统名称 (如 ensemble、某个 service)
        param: 子系统内的参数名
        value: 字符串形式的值 (数字、布尔、合并后的 label 都转成字符串)

    Note:
        同一次列表中 (module, param) 不保证唯一。
    """

    module: str
    param: str
    value: str


class InputStat(BaseModel):
    """
    单路输入的运行时统计

    必需字段缺失时 Pydantic 抛出 ValidationError，由调用方转换为
    MalformedResponseError。state / version / uptime 为可选字段。

    严格模式：计数字段只接受 JSON 整数，"17" 或 true 不做类型转换。
    fill、溢出计数与 uptime 为无符号值。
    """

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    max_fill: NonNegativeInt
    min_fill: NonNegativeInt
    num_underruns: NonNegativeInt
    num_overruns: NonNegativeInt
    peak_left: int
    peak_right: int
    peak_left_slow: int
    peak_right_slow: int
    state: str | None = None
    version: str | None = None
    uptime: NonNegativeInt | None = None
    last_tist_offset: int


@dataclass(frozen=True)
class Stats:
    """
    对端运行状态快照

    Attributes:
        version: 对端版本字符串，缺失时为 "UNKNOWN"
        input_stats: (输入名, InputStat) 列表，按输入名升序排列
    """

    version: str = UNKNOWN_VERSION
    input_stats: list[tuple[str, InputStat]] = field(default_factory=list)

    @property
    def input_names(self) -> list[str]:
        return [name for name, _ in self.input_stats]


class SetReplyFormat(str, Enum):
    """
    set 应答的编码方式

    不同协议版本的对端返回格式不同：
        - STATUS: 第一帧为 "ok"，或 "fail" + 原因帧
        - JSON:   第一帧为 JSON 数组，首元素为 "ok" / "fail"，次元素为原因
    """

    STATUS = "status"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SetOutcome:
    """set 请求的解码结果，两种应答格式统一解码到这一类型"""

    ok: bool
    reason: str | None = None
