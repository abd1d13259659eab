"""Extended-finger counting.

Two outputs share one computation, the number of index..pinky fingertips
farther than ``extended_distance`` from the wrist:

- FINGER_COUNT_CHANGED: the debounced count (0-4) on ``finger_count_hand``.
  A new value is accepted only after it has been observed continuously for
  ``debounce_seconds`` and at least ``debounce_seconds`` after the previous
  accepted change. Single-frame flicker, and values that alternate faster
  than the debounce window, never get through.
- FFT_REQUEST: four extended fingers on ``fft_hand`` request a spectrum for
  ``active_channel``. Only ``fft_cooldown`` limits re-triggering.
"""

from __future__ import annotations

import logging
from typing import Optional

from spatial_gestures.config import GestureConfig
from spatial_gestures.detector import NEVER
from spatial_gestures.events import GestureEvent
from spatial_gestures.features import extended_finger_count
from spatial_gestures.frame import PoseFrame

logger = logging.getLogger("spatial_gestures.finger_count")

FFT_FINGER_COUNT = 4


class FingerCountClassifier:
    name = "finger_count"

    def __init__(self):
        self.current: Optional[int] = None
        self.last_change: float = NEVER
        self.candidate: Optional[int] = None
        self.candidate_since: Optional[float] = None
        self.last_fft: float = NEVER

    def update(self, frame: PoseFrame, config: GestureConfig) -> list[GestureEvent]:
        now = frame.timestamp
        events = []

        count = extended_finger_count(frame, config.finger_count_hand, config.extended_distance)
        if count is not None:
            changed = self._debounce(count, now, config.debounce_seconds)
            if changed:
                logger.debug("Finger count -> %d", count)
                events.append(
                    GestureEvent.finger_count_changed(now, count, hand=config.finger_count_hand)
                )

        if config.fft_enabled and now - self.last_fft >= config.fft_cooldown:
            if config.fft_hand is config.finger_count_hand:
                fft_count = count
            else:
                fft_count = extended_finger_count(frame, config.fft_hand, config.extended_distance)
            if fft_count is not None and fft_count >= FFT_FINGER_COUNT:
                self.last_fft = now
                logger.debug("FFT request (channel %d)", config.active_channel)
                events.append(
                    GestureEvent.fft_request(now, config.active_channel, hand=config.fft_hand)
                )

        return events

    def _debounce(self, count: int, now: float, window: float) -> bool:
        """Feed one observation; return True when ``count`` becomes the accepted value."""
        if count == self.current:
            self.candidate = None
            self.candidate_since = None
            return False

        if count != self.candidate:
            self.candidate = count
            self.candidate_since = now

        if now - self.candidate_since >= window and now - self.last_change >= window:
            self.current = count
            self.last_change = now
            self.candidate = None
            self.candidate_since = None
            return True
        return False

    def reset(self):
        self.current = None
        self.last_change = NEVER
        self.candidate = None
        self.candidate_since = None
        self.last_fft = NEVER
