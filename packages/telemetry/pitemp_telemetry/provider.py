"""Raspberry Pi telemetry provider with per-metric failure isolation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Sequence

from .delta import LoadDeltaTracker
from .errors import TelemetryError
from .models import CpuLoadSnapshot, CycleResult, MemoryUsage, MetricResult
from .parsers import parse_cpu_stat, parse_cpu_temp, parse_gpu_temp, parse_meminfo
from .sources import (
    CPU_TEMP_FILE,
    GPU_TEMP_COMMAND,
    MEMINFO_FILE,
    STAT_FILE,
    CommandSource,
    FileSource,
    TextSource,
)

logger = logging.getLogger("pitemp.telemetry")

DEFAULT_GPU_COMMAND = ("vcgencmd", "measure_temp")
DEFAULT_CPU_TEMP_PATH = "/sys/class/thermal/thermal_zone0/temp"
DEFAULT_MEMINFO_PATH = "/proc/meminfo"
DEFAULT_STAT_PATH = "/proc/stat"

METRICS = ("gpu_temp", "cpu_temp", "ram", "cpu_load")


@dataclass(frozen=True)
class TelemetrySources:
    gpu_temp: TextSource
    cpu_temp: TextSource
    meminfo: TextSource
    stat: TextSource


def default_sources(
    gpu_command: Sequence[str] = DEFAULT_GPU_COMMAND,
    cpu_temp_path: str | Path = DEFAULT_CPU_TEMP_PATH,
    meminfo_path: str | Path = DEFAULT_MEMINFO_PATH,
    stat_path: str | Path = DEFAULT_STAT_PATH,
    command_timeout_s: float | None = None,
) -> TelemetrySources:
    return TelemetrySources(
        gpu_temp=CommandSource(GPU_TEMP_COMMAND, tuple(gpu_command), timeout_s=command_timeout_s),
        cpu_temp=FileSource(CPU_TEMP_FILE, Path(cpu_temp_path)),
        meminfo=FileSource(MEMINFO_FILE, Path(meminfo_path)),
        stat=FileSource(STAT_FILE, Path(stat_path)),
    )


class TelemetryProvider:
    """Reads and parses every metric once per cycle.

    A failing metric never aborts the cycle: its error is logged, recorded in
    ``CycleResult.failures`` and its value is left as ``None``.
    """

    def __init__(self, sources: TelemetrySources | None = None, core_count: int | None = 4) -> None:
        self.sources = sources or default_sources()
        self.core_count = core_count

    def read_gpu_temp(self) -> MetricResult[float]:
        return self._attempt("gpu_temp", lambda: parse_gpu_temp(self.sources.gpu_temp.read().text))

    def read_cpu_temp(self) -> MetricResult[float]:
        return self._attempt("cpu_temp", lambda: parse_cpu_temp(self.sources.cpu_temp.read().text))

    def read_memory(self) -> MetricResult[MemoryUsage]:
        return self._attempt("ram", lambda: parse_meminfo(self.sources.meminfo.read().text))

    def read_cpu_load(self) -> MetricResult[CpuLoadSnapshot]:
        return self._attempt("cpu_load", lambda: parse_cpu_stat(self.sources.stat.read().text, self.core_count))

    def read(self, metric: str) -> MetricResult[Any]:
        readers: dict[str, Callable[[], MetricResult[Any]]] = {
            "gpu_temp": self.read_gpu_temp,
            "cpu_temp": self.read_cpu_temp,
            "ram": self.read_memory,
            "cpu_load": self.read_cpu_load,
        }
        try:
            reader = readers[metric]
        except KeyError:
            raise ValueError(f"unknown metric {metric!r}") from None
        return reader()

    def poll(self, tracker: LoadDeltaTracker, cycle: int = 0) -> CycleResult:
        gpu = self.read_gpu_temp()
        cpu = self.read_cpu_temp()
        mem = self.read_memory()
        load = self.read_cpu_load()

        failures = {
            name: str(result.error)
            for name, result in (("gpu_temp", gpu), ("cpu_temp", cpu), ("ram", mem), ("cpu_load", load))
            if result.error is not None
        }

        cpu_total_delta: int | None = None
        cpu_baseline = False
        core_values: dict[str, int] = {}
        core_deltas: dict[str, int] = {}
        if load.value is not None:
            # The tracker only advances on a good read so the next delta spans both intervals.
            delta = tracker.update(load.value)
            core_values = load.value.cores()
            if delta.baseline:
                # Nothing to diff against yet; a 0 here would read as an idle CPU.
                cpu_baseline = True
            else:
                cpu_total_delta = delta.total
                core_deltas = delta.cores

        return CycleResult(
            cycle=cycle,
            timestamp=datetime.now(timezone.utc),
            gpu_temp=gpu.value,
            cpu_temp=cpu.value,
            ram_used_mb=(mem.value.used_mb if mem.value else None),
            ram_total_mb=(mem.value.total_mb if mem.value else None),
            cpu_total_delta=cpu_total_delta,
            cpu_baseline=cpu_baseline,
            cpu_core_values=core_values,
            cpu_core_deltas=core_deltas,
            failures=failures,
        )

    @staticmethod
    def _attempt(metric: str, fn: Callable[[], Any]) -> MetricResult[Any]:
        try:
            return MetricResult(value=fn())
        except TelemetryError as exc:
            logger.warning(
                "%s unavailable: %s",
                metric,
                exc,
                extra={"event": "metric_failed", "metric": metric, "error_type": type(exc).__name__},
            )
            return MetricResult(error=exc)
