"""CLI entrypoints for the pitemp monitor, one-shot sampling, and diagnostics."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from pitemp_core import (
    AppConfig,
    PerformanceController,
    PerformanceTargets,
    PollingLoop,
    build_doctor_payload,
    build_provider,
    load_config,
    normalize_interval,
)
from pitemp_core.logging_setup import configure_logging, get_logger, install_crash_hooks

from .display import TerminalRenderer

INTERVAL_PROMPT = "Enter the temperature update interval in whole seconds (2 by default): "


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _load(args: argparse.Namespace) -> AppConfig:
    return load_config(Path(args.config).expanduser() if args.config else None)


def take_interval(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Ask for the polling interval; blank or invalid answers give the default."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stdout.write(INTERVAL_PROMPT)
    stdout.flush()
    return normalize_interval(stdin.readline())


def resolve_interval(args: argparse.Namespace, cfg: AppConfig, stdin: TextIO | None = None) -> int:
    if args.interval is not None:
        return normalize_interval(args.interval)
    stdin = stdin or sys.stdin
    if cfg.poll.prompt and not args.no_prompt and stdin.isatty():
        return take_interval(stdin)
    return cfg.poll.interval_s


def cmd_run(args: argparse.Namespace) -> int:
    cfg = _load(args)
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    install_crash_hooks()

    print("=" * 72)
    print("This CLI app monitors the GPU and CPU temperatures of a Raspberry Pi.")

    loop: PollingLoop | None = None
    try:
        interval = resolve_interval(args, cfg)
        loop = PollingLoop(
            build_provider(cfg),
            TerminalRenderer(
                clear_screen=(cfg.display.clear_screen and not args.no_clear),
                show_cores=cfg.display.show_cores,
            ),
            interval_s=interval,
            performance=PerformanceController(
                PerformanceTargets(
                    cpu_percent_max=cfg.performance.cpu_percent_max,
                    rss_mb_max=cfg.performance.rss_mb_max,
                )
            ),
        )
        loop.run()
    except KeyboardInterrupt:
        get_logger().info(
            "stopped after %d cycle(s)",
            (loop.status.cycles if loop is not None else 0),
            extra={"event": "loop_stopped"},
        )
        print()
    return 0


def cmd_once(args: argparse.Namespace) -> int:
    cfg = _load(args)
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    loop = PollingLoop(build_provider(cfg), render=lambda _result: None, interval_s=cfg.poll.interval_s)
    result = loop.run_cycle()
    _print_json(asdict(result))
    return 0 if not result.degraded else 1


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = _load(args)
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    _print_json(build_doctor_payload(cfg))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pitemp", description="Raspberry Pi temperature and load monitor")
    parser.add_argument("--config", default=None, help="Path to config.json (default: ~/.config/pitemp/config.json)")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Monitor continuously until Ctrl + C")
    run_cmd.add_argument("--interval", type=int, default=None, help="Polling interval in whole seconds")
    run_cmd.add_argument("--no-prompt", action="store_true", help="Use the configured interval without asking")
    run_cmd.add_argument("--no-clear", action="store_true", help="Append panels instead of clearing the terminal")
    run_cmd.set_defaults(func=cmd_run)

    once_cmd = sub.add_parser("once", help="Sample every metric once and print JSON")
    once_cmd.set_defaults(func=cmd_once)

    doctor_cmd = sub.add_parser("doctor", help="Check that every telemetry source can be read and parsed")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
