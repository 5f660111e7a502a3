"""
RC 参数展平

ODR-DabMux 的 showjson 应答是两层嵌套结构:

    {
        "module1": {"param1": "value", "param2": 42},
        "module2": {"label": "Foo", "shortlabel": "F", "pty": 0}
    }

本模块把它转换为按发现顺序排列的 Param 列表:

    module1.param1 = value
    module1.param2 = 42
    module2.label  = Foo,F      ← label 与 shortlabel 合并
    module2.pty    = 0

label 合并规则:
    ODR-DabMux 的 set 命令不接受单独设置 label，只接受
    "<label>,<shortlabel>" 的组合形式，所以列表中也以组合形式呈现，
    单独的 label / shortlabel 条目不再输出。

值转换规则:
    null   → "null"
    bool   → "1" / "0"
    number → 十进制文本
    string → 原样
    array / object → UnsupportedValueShapeError

函数清单:
    format_value(module, param, value) -> str
    flatten_parameters(tree) -> list[Param]
    unflatten_parameters(params) -> dict[str, dict[str, str]]
"""

import json
import logging
from typing import Any, Iterable

from ..models.errors import MalformedResponseError, UnsupportedValueShapeError
from ..models.rc import Param

logger = logging.getLogger(__name__)

LABEL = "label"
SHORTLABEL = "shortlabel"


def format_value(module: str, param: str, value: Any) -> str:
    """把单个 JSON 值转换为 RC 使用的字符串形式"""
    if value is None:
        return "null"
    # bool 是 int 的子类，必须先判断
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return json.dumps(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        raise UnsupportedValueShapeError(module, param, "array")
    if isinstance(value, dict):
        raise UnsupportedValueShapeError(module, param, "object")
    raise UnsupportedValueShapeError(module, param, type(value).__name__)


def flatten_parameters(tree: Any) -> list[Param]:
    """
    展平 showjson 应答

    Args:
        tree: 已解析的 JSON 值 (期望为 module → {param → value})

    Returns:
        Param 列表，模块与参数的顺序与应答中的顺序一致

    Raises:
        MalformedResponseError: 根节点或某个模块不是 JSON 对象
        UnsupportedValueShapeError: 参数值为数组或对象
    """
    if not isinstance(tree, dict):
        logger.warning(f"RC data is not a JSON object: {tree!r}")
        raise MalformedResponseError("RC data is not a JSON object")

    all_params: list[Param] = []

    for module_name, params in tree.items():
        if not isinstance(params, dict):
            logger.warning(f"RC module {module_name} is not a JSON object: {params!r}")
            raise MalformedResponseError(
                f"RC module {module_name} is not a JSON object",
                details={"module": module_name},
            )

        label = params.get(LABEL)
        shortlabel = params.get(SHORTLABEL)
        if isinstance(label, str) and isinstance(shortlabel, str):
            all_params.append(Param(module_name, LABEL, f"{label},{shortlabel}"))

        for param_name, value in params.items():
            if param_name in (LABEL, SHORTLABEL):
                continue
            all_params.append(
                Param(module_name, param_name, format_value(module_name, param_name, value))
            )

    return all_params


def unflatten_parameters(params: Iterable[Param]) -> dict[str, dict[str, str]]:
    """
    展平的逆操作

    组合形式的 label 在最后一个逗号处拆回 label / shortlabel，
    插入位置与原 label 条目一致。不含逗号的 label 保持原样。
    """
    tree: dict[str, dict[str, str]] = {}
    for p in params:
        module = tree.setdefault(p.module, {})
        if p.param == LABEL and "," in p.value:
            label, shortlabel = p.value.rsplit(",", 1)
            module[LABEL] = label
            module[SHORTLABEL] = shortlabel
        else:
            module[p.param] = p.value
    return tree
