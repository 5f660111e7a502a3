"""
应答解码

JSON 文本解码，以及 set 应答的两种解码策略。两种策略都产出 SetOutcome，
由配置中的 set_reply_format 决定使用哪一种，不做自动探测。

    status: ["ok"]                  → SetOutcome(ok=True)
            ["fail", "busy"]        → SetOutcome(ok=False, reason="busy")
            ["fail"] / 其他          → SetOutcome(ok=False, reason="unknown error")

    json:   ['["ok", ...]']         → SetOutcome(ok=True)
            ['["fail", "busy"]']    → SetOutcome(ok=False, reason="busy")
"""

import json
import logging
from typing import Any, Sequence

from ..models.errors import MalformedResponseError
from ..models.rc import SetOutcome, SetReplyFormat

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "unknown error"

# 日志中保留的应答原文长度
LOG_PAYLOAD_LIMIT = 200


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode_json(text: str, what: str) -> Any:
    """
    解析 JSON 文本，失败时记录原文并抛出 MalformedResponseError

    NaN / Infinity 不是合法 JSON，一并拒绝；嵌套过深导致的 RecursionError
    同样视为格式错误。
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning(f"{what} 应答不是合法 JSON: {text[:LOG_PAYLOAD_LIMIT]!r}")
        raise MalformedResponseError(f"{what} reply is not valid JSON: {e}") from e


def decode_status_reply(frames: Sequence[str]) -> SetOutcome:
    if frames and frames[0] == "ok":
        return SetOutcome(ok=True)
    if len(frames) > 1 and frames[0] == "fail":
        return SetOutcome(ok=False, reason=frames[1])
    return SetOutcome(ok=False, reason=UNKNOWN_ERROR)


def decode_json_reply(frames: Sequence[str]) -> SetOutcome:
    if not frames:
        return SetOutcome(ok=False, reason=UNKNOWN_ERROR)

    echo = decode_json(frames[0], "set")
    if not isinstance(echo, list):
        logger.warning(f"set 应答不是 JSON 数组: {frames[0]!r}")
        raise MalformedResponseError("set reply is not a JSON array")

    if echo and echo[0] == "ok":
        return SetOutcome(ok=True)
    if len(echo) > 1 and echo[0] == "fail":
        reason = echo[1] if isinstance(echo[1], str) else json.dumps(echo[1])
        return SetOutcome(ok=False, reason=reason)
    return SetOutcome(ok=False, reason=UNKNOWN_ERROR)


def decode_set_reply(reply_format: SetReplyFormat, frames: Sequence[str]) -> SetOutcome:
    """按配置的应答格式选择解码策略"""
    if reply_format == SetReplyFormat.STATUS:
        return decode_status_reply(frames)
    elif reply_format == SetReplyFormat.JSON:
        return decode_json_reply(frames)
    raise ValueError(f"不支持的 set 应答格式: {reply_format}")
