"""
ODR-DabMux Remote-Control 客户端

    ┌───────────────────────────────────┐
    │  DabMuxClient                     │
    │   list_parameters / set_parameter │──▶ rc_endpoint    (showjson, set)
    │   get_stats                       │──▶ stats_endpoint (info, values)
    └───────────────┬───────────────────┘
                    │ 每次调用一个 RCSession
            ┌───────▼───────┐
            │ params/replies│  展平 / 应答解码
            └───────────────┘
"""

from .client import DabMuxClient, check_service, parse_input_stats
from .params import flatten_parameters, format_value, unflatten_parameters
from .replies import decode_json_reply, decode_set_reply, decode_status_reply
from .transport import RC_TIMEOUT_MS, RCSession

__all__ = [
    "DabMuxClient",
    "RCSession",
    "RC_TIMEOUT_MS",
    "check_service",
    "parse_input_stats",
    "flatten_parameters",
    "format_value",
    "unflatten_parameters",
    "decode_status_reply",
    "decode_json_reply",
    "decode_set_reply",
]
