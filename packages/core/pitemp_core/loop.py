"""Polling loop: sample, derive, render, sleep, repeat."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from pitemp_telemetry import CycleResult, LoadDeltaTracker, TelemetryProvider

from .config import normalize_interval
from .logging_setup import get_logger
from .performance import BudgetStatus, PerformanceController

logger = get_logger("loop")


class LoopState(str, Enum):
    SAMPLING = "Sampling"
    IDLE = "Idle"


@dataclass
class LoopStatus:
    state: LoopState = LoopState.SAMPLING
    cycles: int = 0
    degraded_cycles: int = 0
    last_failures: dict[str, str] = field(default_factory=dict)
    last_budget: BudgetStatus | None = None


Renderer = Callable[[CycleResult], None]


class PollingLoop:
    """
    Drives one cycle per interval on the calling thread.

    The loop owns the CPU load tracker, so the previous cycle's counters are
    only ever touched here. A cycle always ends in ``Idle`` even when some
    metrics failed; there is no terminal state besides an interrupt.
    """

    def __init__(
        self,
        provider: TelemetryProvider,
        render: Renderer,
        interval_s: int = 2,
        performance: PerformanceController | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.provider = provider
        self.render = render
        self.interval_s = normalize_interval(interval_s)
        self.performance = performance
        self._sleep = sleep or time.sleep
        self._tracker = LoadDeltaTracker()
        self._status = LoopStatus()

    @property
    def status(self) -> LoopStatus:
        return self._status

    @property
    def tracker(self) -> LoadDeltaTracker:
        return self._tracker

    def run_cycle(self) -> CycleResult:
        self._status.state = LoopState.SAMPLING
        cycle = self._status.cycles + 1
        result = self.provider.poll(self._tracker, cycle=cycle)

        self._status.cycles = cycle
        self._status.last_failures = dict(result.failures)
        if result.degraded:
            self._status.degraded_cycles += 1
            logger.info(
                "cycle %d completed with %d unavailable metric(s)",
                cycle,
                len(result.failures),
                extra={"event": "cycle_degraded", "cycle": cycle},
            )

        if self.performance is not None:
            budget = self.performance.sample()
            self._status.last_budget = budget
            if budget.overloaded:
                logger.warning(
                    "poller over budget: cpu=%.1f%% rss=%.1fMB (%s)",
                    budget.cpu_percent,
                    budget.rss_mb,
                    budget.warning,
                    extra={"event": "budget_overload", "cycle": cycle},
                )

        self.render(result)
        self._status.state = LoopState.IDLE
        return result

    def run(self, max_cycles: int | None = None) -> int:
        """Loop until interrupted, or until ``max_cycles`` cycles have rendered."""
        logger.info(
            "polling every %ds",
            self.interval_s,
            extra={"event": "loop_start"},
        )
        done = 0
        while True:
            self.run_cycle()
            done += 1
            if max_cycles is not None and done >= max_cycles:
                return done
            self._sleep(self.interval_s)
