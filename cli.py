#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ODR-DabMux GUI Unified CLI Entry Point

Usage:
    python cli.py params                          # List RC parameters
    python cli.py set MODULE PARAM VALUE          # Set one RC parameter
    python cli.py stats                           # Show input statistics
    python cli.py status                          # Dashboard: parameters + statistics
    python cli.py version                         # Show version info
"""

import argparse
import logging
import sys

# Fix Windows console encoding
if sys.platform == 'win32':
    try:
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')
    except Exception:
        pass


STATS_COLUMNS = (
    ("input", 16),
    ("state", 10),
    ("max_fill", 9),
    ("min_fill", 9),
    ("underruns", 10),
    ("overruns", 9),
    ("peak L/R", 14),
    ("slow L/R", 14),
    ("tist_ofs", 9),
)


def _make_client(args):
    from dabmux_ui.config import get_nested, init_logging, load_settings
    from dabmux_ui.models import ConfigError
    from dabmux_ui.rc import DabMuxClient

    config = load_settings(args.config, required=args.config_required)
    log_config = get_nested(config, "global", "log", default={})
    if not isinstance(log_config, dict):
        raise ConfigError(f"global.log 必须是字典: {log_config!r}")
    log_config = dict(log_config)
    if args.verbose:
        log_config["level"] = "debug"
    init_logging(log_config)

    dabmux = config.get("dabmux") or {}
    if args.rc_endpoint:
        dabmux["rc_endpoint"] = args.rc_endpoint
    if args.stats_endpoint:
        dabmux["stats_endpoint"] = args.stats_endpoint
    config["dabmux"] = dabmux
    return config, DabMuxClient.from_config(config)


def _print_params(params):
    if not params:
        print("(no parameters)")
        return
    for p in params:
        print(f"{p.module}.{p.param} = {p.value}")


def _print_stats(stats):
    print(f"ODR-DabMux version: {stats.version}")
    print("".join(title.ljust(width) for title, width in STATS_COLUMNS))
    for name, st in stats.input_stats:
        row = (
            name,
            st.state or "-",
            st.max_fill,
            st.min_fill,
            st.num_underruns,
            st.num_overruns,
            f"{st.peak_left}/{st.peak_right}",
            f"{st.peak_left_slow}/{st.peak_right_slow}",
            st.last_tist_offset,
        )
        print("".join(str(v).ljust(width) for v, (_, width) in zip(row, STATS_COLUMNS)))


def cmd_params(args):
    """List RC parameters"""
    _, client = _make_client(args)
    _print_params(client.list_parameters())
    return 0


def cmd_set(args):
    """Set one RC parameter"""
    from dabmux_ui.models import SetRejectedError

    _, client = _make_client(args)
    try:
        client.set_parameter(args.module, args.param, args.value)
    except SetRejectedError as e:
        print(f"[FAIL] {e.message}")
        return 1
    print(f"[OK] {args.module}.{args.param} = {args.value}")
    return 0


def cmd_stats(args):
    """Show input statistics"""
    _, client = _make_client(args)
    _print_stats(client.get_stats())
    return 0


def cmd_status(args):
    """Dashboard view; each section renders its own error inline"""
    from dabmux_ui.config import get_nested
    from dabmux_ui.models import RCError

    config, client = _make_client(args)
    print(f"== {get_nested(config, 'global', 'name', default='')} ==")

    print("\n[Parameters]")
    try:
        _print_params(client.list_parameters())
    except RCError as e:
        print(f"Error ({e.kind}): {e}")

    print("\n[Statistics]")
    try:
        _print_stats(client.get_stats())
    except RCError as e:
        print(f"Error ({e.kind}): {e}")
    return 0


def cmd_version(args):
    """Show version info"""
    from dabmux_ui import __version__
    print(f"ODR-DabMux GUI v{__version__}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="odr-dabmux-gui",
        description="ODR-DabMux GUI: remote control and statistics for ODR-DabMux",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--config", default="config.yaml", help="Config file path")
    common.add_argument(
        "--config-required",
        action="store_true",
        help="Fail if the config file does not exist",
    )
    common.add_argument("--rc-endpoint", help="Override dabmux.rc_endpoint")
    common.add_argument("--stats-endpoint", help="Override dabmux.stats_endpoint")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    p_params = subparsers.add_parser("params", parents=[common], help="List RC parameters")
    p_params.set_defaults(func=cmd_params)

    p_set = subparsers.add_parser("set", parents=[common], help="Set one RC parameter")
    p_set.add_argument("module", help="RC module, e.g. srv-fu")
    p_set.add_argument("param", help="Parameter name, e.g. label")
    p_set.add_argument("value", help="New value (label takes 'label,shortlabel')")
    p_set.set_defaults(func=cmd_set)

    p_stats = subparsers.add_parser("stats", parents=[common], help="Show input statistics")
    p_stats.set_defaults(func=cmd_stats)

    p_status = subparsers.add_parser(
        "status", parents=[common], help="Show parameters and statistics"
    )
    p_status.set_defaults(func=cmd_status)

    p_version = subparsers.add_parser("version", help="Show version info")
    p_version.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    from dabmux_ui.models import DabMuxUIError

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except DabMuxUIError as e:
        logging.getLogger("cli").debug("command failed", exc_info=True)
        print(f"\n[ERROR] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
