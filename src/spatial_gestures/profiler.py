"""Per-detector timing for engine ticks.

The engine wraps each detector's ``update`` in ``stage(detector.name)`` and
the whole evaluation in ``stage("tick")``. A headset renders at 72-120 Hz,
so ``budget_ms`` can be set to count ticks that ran too long.

Usage:
    profiler = TickProfiler(budget_ms=2.0)

    with profiler.stage("zoom"):
        events = zoom.update(frame, config)

    print(profiler.summary())
"""

from __future__ import annotations

import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

TICK_STAGE = "tick"


@dataclass
class StageStats:
    """Timing statistics for one detector (or the whole tick)."""
    name: str
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float
    call_count: int
    sample_count: int


class _StageWindow:
    __slots__ = ("samples", "calls")

    def __init__(self, size: int):
        self.samples: deque[float] = deque(maxlen=size)
        self.calls = 0

    def add(self, elapsed_ms: float):
        self.samples.append(elapsed_ms)
        self.calls += 1

    def stats(self, name: str) -> StageStats:
        ordered = sorted(self.samples)
        n = len(ordered)
        return StageStats(
            name=name,
            avg_ms=sum(ordered) / n,
            min_ms=ordered[0],
            max_ms=ordered[-1],
            p95_ms=ordered[min(n - 1, int(n * 0.95))],
            call_count=self.calls,
            sample_count=n,
        )


class TickProfiler:
    """Rolling-window timings keyed by stage name.

    Stages are created on first use. Only the most recent ``window_size``
    samples feed the statistics; ``call_count`` covers every call since the
    last reset.
    """

    def __init__(self, window_size: int = 120, budget_ms: Optional[float] = None):
        self._window_size = window_size
        self._stages: dict[str, _StageWindow] = {}
        self.budget_ms = budget_ms
        self.over_budget = 0
        self.enabled = True

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return

        window = self._stages.get(name)
        if window is None:
            window = self._stages[name] = _StageWindow(self._window_size)

        t0 = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            window.add(elapsed_ms)
            if name == TICK_STAGE and self.budget_ms is not None and elapsed_ms > self.budget_ms:
                self.over_budget += 1

    def get_stage_stats(self, name: str) -> Optional[StageStats]:
        window = self._stages.get(name)
        if window is None or not window.samples:
            return None
        return window.stats(name)

    def summary(self) -> dict[str, dict]:
        """Per-stage timings in milliseconds, rounded for display."""
        result = {}
        for name, window in self._stages.items():
            if not window.samples:
                continue
            stats = window.stats(name)
            result[name] = {
                "avg_ms": round(stats.avg_ms, 3),
                "min_ms": round(stats.min_ms, 3),
                "max_ms": round(stats.max_ms, 3),
                "p95_ms": round(stats.p95_ms, 3),
                "calls": stats.call_count,
            }
        return result

    def reset(self):
        self._stages.clear()
        self.over_budget = 0
