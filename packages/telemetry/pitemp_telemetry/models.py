"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Mapping, TypeVar

from .errors import TelemetryError

T = TypeVar("T")


@dataclass(frozen=True)
class RawSample:
    source_id: str
    text: str


@dataclass(frozen=True)
class MemoryUsage:
    used_mb: int
    total_mb: int


@dataclass(frozen=True)
class CpuLoadSnapshot:
    """Cumulative tick counters keyed by core id (``total``, ``cpu0``, ...)."""

    counters: Mapping[str, int]

    @property
    def total(self) -> int:
        return self.counters["total"]

    def cores(self) -> dict[str, int]:
        return {k: v for k, v in self.counters.items() if k != "total"}


@dataclass(frozen=True)
class LoadDelta:
    total: int
    cores: dict[str, int]
    baseline: bool = False


@dataclass(frozen=True)
class MetricResult(Generic[T]):
    value: T | None = None
    error: TelemetryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CycleResult:
    cycle: int
    timestamp: datetime
    gpu_temp: float | None
    cpu_temp: float | None
    ram_used_mb: int | None
    ram_total_mb: int | None
    cpu_total_delta: int | None
    cpu_baseline: bool = False
    cpu_core_values: dict[str, int] = field(default_factory=dict)
    cpu_core_deltas: dict[str, int] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        return bool(self.failures)
