"""Refreshing console panel for cycle results."""

from __future__ import annotations

import sys
from typing import TextIO

from pitemp_telemetry import CycleResult

CLEAR_SCREEN = "\x1bc"
UNAVAILABLE = "N/A"
BASELINE = "measuring..."
ABORT_HINT = "Press Ctrl + C to abort"


def _temp(value: float | None) -> str:
    return UNAVAILABLE if value is None else f"{value:.1f}° C"


def _ram(used: int | None, total: int | None) -> str:
    if used is None or total is None:
        return UNAVAILABLE
    return f"{used} / {total} MB"


def _load(result: CycleResult) -> str:
    if result.cpu_baseline:
        return BASELINE
    if result.cpu_total_delta is None:
        return UNAVAILABLE
    return f"{result.cpu_total_delta} ticks"


def format_lines(result: CycleResult, show_cores: bool = True) -> list[str]:
    lines = [
        f"GPU temperature: {_temp(result.gpu_temp)}",
        f"CPU temperature: {_temp(result.cpu_temp)}",
        f"RAM used: {_ram(result.ram_used_mb, result.ram_total_mb)}",
        f"CPU load: {_load(result)}",
    ]
    if show_cores:
        for core, value in result.cpu_core_values.items():
            if result.cpu_baseline:
                lines.append(f"  {core}: ({value})")
            else:
                lines.append(f"  {core}: +{result.cpu_core_deltas.get(core, 0)} ({value})")
    return lines


def render_panel(result: CycleResult, show_cores: bool = True) -> str:
    body = format_lines(result, show_cores=show_cores) + [ABORT_HINT]
    width = max(len(line) for line in body)
    border = "=" * (width + 4)
    rows = [border]
    rows.extend(f"| {line.ljust(width)} |" for line in body)
    rows.append(border)
    return "\n".join(rows) + "\n"


class TerminalRenderer:
    def __init__(self, stream: TextIO | None = None, clear_screen: bool = True, show_cores: bool = True) -> None:
        self.stream = stream or sys.stdout
        self.clear_screen = clear_screen
        self.show_cores = show_cores

    def __call__(self, result: CycleResult) -> None:
        out = render_panel(result, show_cores=self.show_cores)
        if self.clear_screen:
            out = CLEAR_SCREEN + out
        self.stream.write(out)
        self.stream.flush()
