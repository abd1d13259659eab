"""Wrist flip detection. Rapid pronation/supination toggles the menu.

The detector keeps a smoothed baseline of the wrist "up" vector. A flip is
an angle of at least ``wrist_flip_angle`` between the baseline and the
current vector. The baseline drifts toward the current vector every tick,
so slow continuous rotation never accumulates into a flip.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from spatial_gestures.config import GestureConfig
from spatial_gestures.detector import NEVER
from spatial_gestures.events import GestureEvent
from spatial_gestures.features import angle_between, slerp, wrist_up
from spatial_gestures.frame import PoseFrame

logger = logging.getLogger("spatial_gestures.wrist_flip")


class WristFlipDetector:
    name = "wrist_flip"

    def __init__(self):
        self.baseline_up: Optional[np.ndarray] = None
        self.last_trigger: float = NEVER

    def update(self, frame: PoseFrame, config: GestureConfig) -> list[GestureEvent]:
        current = wrist_up(frame, config.wrist_flip_hand)
        if current is None:
            return []

        now = frame.timestamp
        if self.baseline_up is None:
            self.baseline_up = current
            return []

        events = []
        angle = angle_between(self.baseline_up, current)
        if angle >= config.wrist_flip_angle and now - self.last_trigger >= config.wrist_flip_cooldown:
            self.last_trigger = now
            # Snap so the reverse flip is measured from here
            self.baseline_up = current
            logger.debug("Wrist flip (%.1f deg) -> menu toggle", angle)
            events.append(GestureEvent.menu_toggle(now, hand=config.wrist_flip_hand))

        self.baseline_up = slerp(self.baseline_up, current, config.flip_baseline_blend)
        return events

    def reset(self):
        self.baseline_up = None
        self.last_trigger = NEVER
