"""CLI entry point for mongotui."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from mongotui import __version__
from mongotui.shared.app.runtime import RuntimeConfig
from mongotui.shared.core import logging_setup

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mongotui", description="Terminal browser for MongoDB")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--tick-rate",
        type=float,
        default=None,
        help="Tick events per second (default: 4, or MONGOTUI_TICK_RATE)",
    )
    parser.add_argument(
        "--frame-rate",
        type=float,
        default=None,
        help="Frames drawn per second (default: 30, or MONGOTUI_FRAME_RATE)",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding connections.json (default: ~/.mongotui)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level for the log file (default: INFO, or MONGOTUI_LOG_LEVEL)",
    )
    return parser


def runtime_from_args(args: argparse.Namespace, base: RuntimeConfig | None = None) -> RuntimeConfig:
    """Apply command line overrides on top of the environment configuration."""
    runtime = base or RuntimeConfig.from_env()
    overrides: dict = {}
    if args.tick_rate is not None:
        if args.tick_rate <= 0:
            raise ValueError("--tick-rate must be positive")
        overrides["tick_rate"] = args.tick_rate
    if args.frame_rate is not None:
        if args.frame_rate <= 0:
            raise ValueError("--frame-rate must be positive")
        overrides["frame_rate"] = args.frame_rate
    if args.config_dir is not None:
        overrides["config_dir"] = args.config_dir.expanduser()
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return replace(runtime, **overrides)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        runtime = runtime_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    log_runtime = logging_setup.configure(runtime.log_level, runtime.log_dir)
    logger.info("Starting mongotui %s (log level %s)", __version__, log_runtime.level_name)

    from mongotui.domains.shell.app.main import MongoTUI

    app = MongoTUI(runtime=runtime)
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
