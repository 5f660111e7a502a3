"""
配置管理模块

本模块提供 ODR-DabMux 控制界面的配置功能，包括：
- YAML 配置文件加载与解析
- 默认配置定义与深度合并
- 日志系统初始化
- 配置工具函数

配置文件结构:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        config.yaml                               │
    ├─────────────────────────────────────────────────────────────────┤
    │ global:                                                          │
    │   name: "CHANGEME"               # 实例名称 (界面显示)           │
    │   log:                                                           │
    │     level: info                  # 日志级别                      │
    │     format: text                 # 日志格式 (text/json)          │
    │     output: console              # 输出目标 (console/file)       │
    │                                                                  │
    │ dabmux:                                                          │
    │   rc_endpoint: "tcp://127.0.0.1:12722"     # RC 控制端点         │
    │   stats_endpoint: "tcp://127.0.0.1:12720"  # 统计端点            │
    │   set_reply_format: status       # set 应答格式 (status/json)    │
    └─────────────────────────────────────────────────────────────────┘

配置合并策略:
    使用深度合并 (merge_config)，用户配置覆盖默认配置。
    对于嵌套字典，只覆盖指定的键，未指定的键保留默认值。

使用示例:
    config = load_settings("config.yaml")
    init_logging(get_nested(config, "global", "log"))
    rc_endpoint = get_nested(config, "dabmux", "rc_endpoint")
"""

import copy
import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml

from ..models.errors import ConfigError


# 默认配置值
# 用户配置会深度合并到此默认配置上
DEFAULT_CONFIG: dict[str, Any] = {
    "global": {
        "name": "CHANGEME",
        "log": {
            "level": "info",
            "format": "text",
            "output": "console",
            "file_path": "./logs/odr_dabmux_gui.log",
            "date_format": "%Y-%m-%d %H:%M:%S",
        },
    },
    "dabmux": {
        "rc_endpoint": "tcp://127.0.0.1:12722",
        "stats_endpoint": "tcp://127.0.0.1:12720",
        "set_reply_format": "status",
    },
}


def load_config(config_path: str | Path) -> dict[str, Any]:
    """
    加载 YAML 配置文件

    Args:
        config_path: 配置文件路径 (相对或绝对路径)

    Returns:
        配置字典 (未与默认配置合并)

    Raises:
        ConfigError: 配置文件不存在或格式错误
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML 解析错误: {e}") from e
    except OSError as e:
        raise ConfigError(f"加载配置文件失败: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError("配置文件格式错误: 根节点必须是字典")

    logging.info(f"配置文件 '{config_path}' 加载成功")
    return config


def load_settings(
    config_path: str | Path | None = None, required: bool = False
) -> dict[str, Any]:
    """
    加载配置并与 DEFAULT_CONFIG 深度合并

    Args:
        config_path: 配置文件路径，None 表示只使用默认配置
        required: 为 False 时文件不存在则回退到默认配置

    Returns:
        合并后的配置字典
    """
    defaults = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return defaults

    if not required and not Path(config_path).exists():
        logging.debug(f"配置文件 '{config_path}' 不存在，使用默认配置")
        return defaults

    return merge_config(defaults, load_config(config_path))


def init_logging(log_config: dict[str, Any] | None = None) -> None:
    """
    初始化日志系统

    配置 Python 标准日志库，支持控制台和文件输出，支持 text 和 json 两种格式。

    Args:
        log_config: 日志配置字典，包含以下可选键:
            - level: 日志级别 (debug/info/warning/error)
            - format: 日志格式 (text/json)
            - output: 输出目标 (console/file)
            - file_path: 日志文件路径 (当 output=file 时)
            - date_format: 日期格式
    """
    if log_config is None:
        log_config = {}

    level_str = str(log_config.get("level", "info")).upper()
    level = getattr(logging, level_str, logging.INFO)

    log_format_type = log_config.get("format", "text")
    if log_format_type == "json":
        log_format = (
            '{"time": "%(asctime)s", "level": "%(levelname)s", '
            '"name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        log_format = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

    date_format = log_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    output_type = log_config.get("output", "console")

    handlers: list[logging.Handler] = []

    if output_type == "file":
        file_path = log_config.get("file_path", "./logs/odr_dabmux_gui.log")
        try:
            log_dir = os.path.dirname(file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(file_path, encoding="utf-8"))
        except OSError as e:
            print(f"创建日志文件失败: {e}，回退到控制台", file=sys.stderr)
            output_type = "console"

    if output_type == "console" or not handlers:
        # stdout 留给 CLI 输出
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )

    logging.debug(f"日志系统初始化完成 | 级别: {level_str}, 输出: {output_type}")


def get_nested(config: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    安全获取嵌套配置值

    Example:
        >>> config = {"a": {"b": {"c": 1}}}
        >>> get_nested(config, "a", "b", "c")
        1
        >>> get_nested(config, "a", "x", default=0)
        0
    """
    result = config
    for key in keys:
        if isinstance(result, dict):
            result = result.get(key)
        else:
            return default
        if result is None:
            return default
    return result


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    深度合并配置字典

    override 中的值覆盖 base 中的同名键，嵌套字典递归合并。
    返回新字典，不修改原始配置。
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value

    return result
