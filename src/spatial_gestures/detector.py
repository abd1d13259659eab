"""Common interface of the per-gesture state machines."""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

from spatial_gestures.config import GestureConfig
from spatial_gestures.events import GestureEvent
from spatial_gestures.frame import PoseFrame

NEVER = -math.inf  # "last triggered" before any trigger, so the first one is never in cooldown


@runtime_checkable
class GestureDetector(Protocol):
    """A temporally-filtered state machine over pose frames.

    Each detector owns its state exclusively. ``update`` reads the current
    frame and the shared read-only config, and returns the events it decided
    to emit this tick (at most one per event kind).
    """

    name: str

    def update(self, frame: PoseFrame, config: GestureConfig) -> list[GestureEvent]:
        ...

    def reset(self):
        ...
