"""Core app services for settings, logging, the polling loop, and diagnostics."""

from .config import AppConfig, load_config, normalize_interval, save_config
from .diagnostics import build_doctor_payload, build_provider
from .loop import LoopState, LoopStatus, PollingLoop
from .performance import BudgetStatus, PerformanceController, PerformanceTargets

__all__ = [
    "AppConfig",
    "BudgetStatus",
    "LoopState",
    "LoopStatus",
    "PerformanceController",
    "PerformanceTargets",
    "PollingLoop",
    "build_doctor_payload",
    "build_provider",
    "load_config",
    "normalize_interval",
    "save_config",
]
