"""Tick-counter deltas between consecutive polling cycles."""

from __future__ import annotations

from .models import CpuLoadSnapshot, LoadDelta


def compute_delta(current: int, previous: int) -> int:
    """``current - previous``, or 0 when the counter went backwards."""
    return max(current - previous, 0)


class LoadDeltaTracker:
    """
    Holds the previous cycle's CPU counters and derives deltas against them.

    Each value is compared with the same key from the previous snapshot, so the
    aggregate is diffed with the aggregate and ``cpuN`` with ``cpuN``. The first
    update only records a baseline.
    """

    def __init__(self) -> None:
        self._previous: CpuLoadSnapshot | None = None

    @property
    def previous(self) -> CpuLoadSnapshot | None:
        return self._previous

    def update(self, snapshot: CpuLoadSnapshot) -> LoadDelta:
        previous = self._previous
        self._previous = snapshot

        if previous is None:
            return LoadDelta(total=0, cores={k: 0 for k in snapshot.cores()}, baseline=True)

        cores = {}
        for core, value in snapshot.cores().items():
            before = previous.counters.get(core)
            # A core that just appeared has no baseline yet.
            cores[core] = 0 if before is None else compute_delta(value, before)

        return LoadDelta(total=compute_delta(snapshot.total, previous.total), cores=cores)
