"""Two-hand pinch-to-zoom tracking.

While both hands pinch ``zoom_finger``, changes in the distance between the
two fingertips are turned into relative zoom increments:

    delta = clamp((distance - last_distance) * sensitivity, -clamp, +clamp)

Usage:
    tracker = ZoomTracker()
    for evt in tracker.update(frame, config):
        scale += evt.delta
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from spatial_gestures.config import GestureConfig
from spatial_gestures.events import GestureEvent
from spatial_gestures.features import inter_hand_fingertip_distance, is_pinching
from spatial_gestures.frame import Handedness, PoseFrame

logger = logging.getLogger("spatial_gestures.zoom")


class ZoomTracker:
    """Emits ZOOM_DELTA while both hands pinch.

    Entering the both-pinching state records the starting distance but emits
    nothing; deltas start once ``zoom_activation_delay`` has elapsed. Deltas
    no larger than ``zoom_epsilon`` are dropped as tracking jitter. Releasing
    either hand ends tracking without a final event.
    """

    name = "zoom"

    def __init__(self):
        self.active = False
        self.active_start: Optional[float] = None
        self.last_distance: Optional[float] = None

    def update(self, frame: PoseFrame, config: GestureConfig) -> list[GestureEvent]:
        threshold = config.pinch_strength_threshold
        left = is_pinching(frame, Handedness.LEFT, config.zoom_finger, threshold)
        right = is_pinching(frame, Handedness.RIGHT, config.zoom_finger, threshold)
        if left is None or right is None:
            return []

        now = frame.timestamp
        if not (left and right):
            if self.active:
                logger.debug("Zoom released")
            self.active = False
            self.active_start = None
            self.last_distance = None
            return []

        distance = inter_hand_fingertip_distance(frame, config.zoom_finger)
        if distance is None:
            return []

        if not self.active:
            self.active = True
            self.active_start = now
            self.last_distance = distance
            return []

        if now - self.active_start < config.zoom_activation_delay:
            return []

        raw = (distance - self.last_distance) * config.zoom_sensitivity
        delta = float(np.clip(raw, -config.zoom_clamp, config.zoom_clamp))
        self.last_distance = distance
        if abs(delta) > config.zoom_epsilon:
            logger.debug("Zoom delta %.3f", delta)
            return [GestureEvent.zoom_delta(now, delta)]
        return []

    def reset(self):
        self.active = False
        self.active_start = None
        self.last_distance = None
