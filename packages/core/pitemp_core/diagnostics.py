"""Source health checks for the ``doctor`` command."""

from __future__ import annotations

import platform
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import Any

from pitemp_telemetry import METRICS, TelemetryProvider, default_sources

from .config import AppConfig

try:
    import psutil
except Exception:  # pragma: no cover
    psutil = None


def build_provider(cfg: AppConfig) -> TelemetryProvider:
    src = cfg.sources
    sources = default_sources(
        gpu_command=src.gpu_command,
        cpu_temp_path=src.cpu_temp_path,
        meminfo_path=src.meminfo_path,
        stat_path=src.stat_path,
        command_timeout_s=src.command_timeout_s,
    )
    return TelemetryProvider(sources, core_count=src.core_count)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    return value


def _host_facts() -> dict[str, Any]:
    if psutil is None:
        return {}
    return {
        "cpu_count": psutil.cpu_count(),
        "boot_time_utc": datetime.fromtimestamp(psutil.boot_time(), timezone.utc).isoformat(),
    }


def check_sources(provider: TelemetryProvider) -> dict[str, dict[str, Any]]:
    out: dict[str, dict[str, Any]] = {}
    for metric in METRICS:
        result = provider.read(metric)
        out[metric] = {
            "ok": result.ok,
            "value": _jsonable(result.value),
            "error": (None if result.error is None else f"{type(result.error).__name__}: {result.error}"),
        }
    return out


def build_doctor_payload(cfg: AppConfig, provider: TelemetryProvider | None = None) -> dict[str, Any]:
    provider = provider or build_provider(cfg)
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": asdict(cfg),
        "host": _host_facts(),
        "sources": check_sources(provider),
    }
