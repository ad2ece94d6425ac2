"""Persistent settings schema and load/save helpers."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1
DEFAULT_INTERVAL_S = 2


@dataclass
class PollConfig:
    interval_s: int = DEFAULT_INTERVAL_S
    prompt: bool = True


@dataclass
class SourcesConfig:
    gpu_command: list[str] = field(default_factory=lambda: ["vcgencmd", "measure_temp"])
    cpu_temp_path: str = "/sys/class/thermal/thermal_zone0/temp"
    meminfo_path: str = "/proc/meminfo"
    stat_path: str = "/proc/stat"
    core_count: int | None = 4
    command_timeout_s: float | None = None


@dataclass
class DisplayConfig:
    clear_screen: bool = True
    show_cores: bool = True


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 5.0
    rss_mb_max: float = 64.0


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    poll: PollConfig = field(default_factory=PollConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


def config_path() -> Path:
    return Path.home() / ".config" / "pitemp" / "config.json"


def normalize_interval(raw: Any) -> int:
    """Whole seconds > 0; anything else falls back to the 2 second default."""
    if isinstance(raw, bool):
        return DEFAULT_INTERVAL_S
    if isinstance(raw, str):
        raw = raw.strip()
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_INTERVAL_S
    return value if value > 0 else DEFAULT_INTERVAL_S


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _normalize_poll(cfg: AppConfig) -> None:
    cfg.poll.interval_s = normalize_interval(cfg.poll.interval_s)
    cfg.poll.prompt = bool(cfg.poll.prompt)


def _normalize_sources(cfg: AppConfig) -> None:
    src = cfg.sources
    defaults = SourcesConfig()
    if isinstance(src.gpu_command, str):
        src.gpu_command = src.gpu_command.split()
    if not isinstance(src.gpu_command, list) or not src.gpu_command:
        src.gpu_command = defaults.gpu_command
    src.gpu_command = [str(part) for part in src.gpu_command]

    for name in ("cpu_temp_path", "meminfo_path", "stat_path"):
        if not isinstance(getattr(src, name), str) or not getattr(src, name):
            setattr(src, name, getattr(defaults, name))

    if src.core_count is not None:
        src.core_count = max(0, _as_int(src.core_count, defaults.core_count))

    if src.command_timeout_s is not None:
        timeout = _as_float(src.command_timeout_s, 0.0)
        src.command_timeout_s = timeout if timeout > 0 else None


def _normalize_display(cfg: AppConfig) -> None:
    cfg.display.clear_screen = bool(cfg.display.clear_screen)
    cfg.display.show_cores = bool(cfg.display.show_cores)


def _normalize_performance(cfg: AppConfig) -> None:
    defaults = PerformanceConfig()
    cfg.performance.cpu_percent_max = max(1.0, _as_float(cfg.performance.cpu_percent_max, defaults.cpu_percent_max))
    cfg.performance.rss_mb_max = max(16.0, _as_float(cfg.performance.rss_mb_max, defaults.rss_mb_max))
    keep = _as_int(cfg.diagnostics.keep_log_files, DiagnosticsConfig().keep_log_files)
    cfg.diagnostics.keep_log_files = max(2, keep)


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=_as_int(data.get("config_version", CONFIG_VERSION), CONFIG_VERSION),
        poll=_merge(PollConfig, data.get("poll", {})),
        sources=_merge(SourcesConfig, data.get("sources", {})),
        display=_merge(DisplayConfig, data.get("display", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
        performance=_merge(PerformanceConfig, data.get("performance", {})),
    )

    _normalize_poll(cfg)
    _normalize_sources(cfg)
    _normalize_display(cfg)
    _normalize_performance(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
