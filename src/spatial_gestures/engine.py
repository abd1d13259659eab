"""Gesture engine: drives the gesture state machines once per tick.

Usage:
    engine = GestureEngine(GestureConfig(active_channel=2))
    engine.subscribe(lambda evt: print(evt.kind, evt.value))

    with engine:
        while running:
            engine.tick(capture_frame(tracker))

Every tick, each detector sees the same frame in a fixed order:
wrist flip, pinch tap, pinch hold, zoom, finger count. Detectors never see
each other's events, so replaying a recorded frame sequence always yields
the same events. Events are delivered to subscribers synchronously, in
detector order, once all detectors have run.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from spatial_gestures.config import GestureConfig
from spatial_gestures.detector import GestureDetector
from spatial_gestures.errors import EngineStateError
from spatial_gestures.events import EventSink, GestureEvent
from spatial_gestures.finger_count import FingerCountClassifier
from spatial_gestures.frame import PoseFrame, PoseSource, capture_frame
from spatial_gestures.pinch import PinchHoldDetector, PinchTapDetector
from spatial_gestures.profiler import TICK_STAGE, TickProfiler
from spatial_gestures.wrist_flip import WristFlipDetector
from spatial_gestures.zoom import ZoomTracker

logger = logging.getLogger("spatial_gestures.engine")


@dataclass
class EngineStats:
    """Runtime counters since the engine was last started."""
    ticks: int
    events: dict[str, int]
    subscriber_errors: int
    running: bool
    ticks_over_budget: int = 0
    profiler_summary: dict = field(default_factory=dict)


class Subscription:
    """Handle returned by ``GestureEngine.subscribe``."""

    def __init__(self, engine: GestureEngine, callback: EventSink):
        self._engine = engine
        self.callback = callback

    def cancel(self):
        self._engine.unsubscribe(self.callback)


def default_detectors() -> list[GestureDetector]:
    """Fresh detectors in evaluation order."""
    return [
        WristFlipDetector(),
        PinchTapDetector(),
        PinchHoldDetector(),
        ZoomTracker(),
        FingerCountClassifier(),
    ]


class GestureEngine:
    """Owns the config and the five gesture state machines.

    Lifecycle is under the host's control: ``start()`` creates fresh
    detector state, ``stop()`` discards it. ``tick`` is only valid between
    the two.
    """

    def __init__(
        self,
        config: Optional[GestureConfig] = None,
        subscribers: Iterable[EventSink] = (),
        enable_profiling: bool = True,
        tick_budget_ms: Optional[float] = None,
    ):
        self._config = config or GestureConfig()
        self._pending_config: Optional[GestureConfig] = None
        self._subscribers: list[EventSink] = list(subscribers)
        self._detectors: list[GestureDetector] = default_detectors()
        self._running = False

        self._ticks = 0
        self._event_counts: Counter = Counter()
        self._subscriber_errors = 0

        self.profiler = TickProfiler(budget_ms=tick_budget_ms)
        self.profiler.enabled = enable_profiling

    # -- lifecycle -------------------------------------------------------

    def start(self):
        if self._running:
            return
        self._detectors = default_detectors()
        self._ticks = 0
        self._event_counts.clear()
        self._subscriber_errors = 0
        self.profiler.reset()
        self._running = True
        logger.info("Gesture engine started (channel %d)", self._config.active_channel)

    def stop(self):
        if not self._running:
            return
        self._running = False
        for detector in self._detectors:
            detector.reset()
        logger.info(
            "Gesture engine stopped after %d ticks, events: %s",
            self._ticks, dict(self._event_counts),
        )

    @property
    def running(self) -> bool:
        return self._running

    def reset(self):
        """Clear all detector state without stopping the engine."""
        for detector in self._detectors:
            detector.reset()
        logger.info("Gesture engine state reset")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()

    # -- configuration ---------------------------------------------------

    @property
    def config(self) -> GestureConfig:
        return self._config

    def reload_config(self, config: GestureConfig):
        """Stage a new config. It takes effect at the start of the next tick."""
        if not isinstance(config, GestureConfig):
            raise TypeError(f"expected GestureConfig, got {type(config).__name__}")
        if self._running:
            self._pending_config = config
            logger.info("Gesture config reload staged for next tick")
        else:
            self._config = config
            self._pending_config = None

    def set_active_channel(self, channel: int):
        """Change the channel carried by future FFT requests."""
        base = self._pending_config or self._config
        self.reload_config(base.replace(active_channel=channel))

    # -- subscribers -----------------------------------------------------

    def subscribe(self, callback: EventSink) -> Subscription:
        """Register a callback. Callbacks run in registration order."""
        self._subscribers.append(callback)
        return Subscription(self, callback)

    def unsubscribe(self, callback: EventSink):
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    # -- ticking ---------------------------------------------------------

    @property
    def detectors(self) -> tuple[GestureDetector, ...]:
        return tuple(self._detectors)

    def tick(self, frame: PoseFrame) -> list[GestureEvent]:
        """Evaluate every detector on one frame and deliver the resulting events."""
        if not self._running:
            raise EngineStateError("GestureEngine.tick() called before start()")

        if self._pending_config is not None:
            self._config = self._pending_config
            self._pending_config = None
            logger.debug("Applied staged config at t=%.3f", frame.timestamp)

        config = self._config
        self._ticks += 1
        events: list[GestureEvent] = []

        with self.profiler.stage(TICK_STAGE):
            for detector in self._detectors:
                with self.profiler.stage(detector.name):
                    events.extend(detector.update(frame, config))

        for event in events:
            self._event_counts[event.kind.value] += 1
            self._deliver(event)

        return events

    def tick_from(self, source: PoseSource, timestamp: Optional[float] = None) -> list[GestureEvent]:
        """Capture a frame from a pose source and tick on it."""
        return self.tick(capture_frame(source, timestamp))

    def _deliver(self, event: GestureEvent):
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                self._subscriber_errors += 1
                logger.error("Subscriber %r failed on %s: %s", callback, event.kind.value, e)

    @property
    def stats(self) -> EngineStats:
        return EngineStats(
            ticks=self._ticks,
            events=dict(self._event_counts),
            subscriber_errors=self._subscriber_errors,
            running=self._running,
            ticks_over_budget=self.profiler.over_budget,
            profiler_summary=self.profiler.summary(),
        )
