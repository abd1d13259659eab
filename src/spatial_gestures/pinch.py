"""Single-finger pinch gestures.

- PinchTapDetector: a short pinch-and-release toggles cursor mode.
- PinchHoldDetector: a sustained pinch on either hand toggles freeze once.

A hand that is not tracked this tick is never read as "released": the
detector keeps its state until the hand is seen again.
"""

from __future__ import annotations

import logging
from typing import Optional

from spatial_gestures.config import GestureConfig
from spatial_gestures.events import GestureEvent
from spatial_gestures.features import is_pinching
from spatial_gestures.frame import Handedness, PoseFrame

logger = logging.getLogger("spatial_gestures.pinch")


class PinchTapDetector:
    """Emits CURSOR_MODE_TOGGLE when a pinch is released within ``tap_max_duration``.

    A pinch held longer than that and then released is not a tap and emits
    nothing.
    """

    name = "pinch_tap"

    def __init__(self):
        self.pinching = False
        self.pinch_start: Optional[float] = None

    def update(self, frame: PoseFrame, config: GestureConfig) -> list[GestureEvent]:
        pinching = is_pinching(
            frame, config.tap_hand, config.tap_finger, config.pinch_strength_threshold
        )
        if pinching is None:
            return []

        now = frame.timestamp
        if pinching and not self.pinching:
            self.pinching = True
            self.pinch_start = now
        elif not pinching and self.pinching:
            duration = now - self.pinch_start
            self.pinching = False
            self.pinch_start = None
            if duration <= config.tap_max_duration:
                logger.debug("Pinch tap (%.2fs) -> cursor mode toggle", duration)
                return [GestureEvent.cursor_mode_toggle(now, hand=config.tap_hand)]
            logger.debug("Pinch released after %.2fs, too long for a tap", duration)
        return []

    def reset(self):
        self.pinching = False
        self.pinch_start = None


class PinchHoldDetector:
    """Emits FREEZE_TOGGLE once a pinch has been held for ``hold_duration``.

    The pinch counts if any tracked hand of ``hold_hands`` pinches
    ``hold_finger``. The event fires once per hold episode; a new episode
    needs release and re-press. Releasing early resets without firing. A
    release is only read from the hand that started the episode.
    """

    name = "pinch_hold"

    def __init__(self):
        self.holding = False
        self.hold_start: Optional[float] = None
        self.hold_hand: Optional[Handedness] = None
        # Set after firing until the pinch is released
        self._fired = False

    def _read(self, frame: PoseFrame, config: GestureConfig) -> tuple[Optional[bool], Optional[Handedness]]:
        """Combine the tracked hands with OR. Returns (None, None) when the answer is unknown.

        Unknown means no configured hand is tracked, or the hand that started
        the current episode is untracked while the others are not pinching.
        """
        tracked = []
        for hand in config.hold_hands:
            pinching = is_pinching(
                frame, hand, config.hold_finger, config.pinch_strength_threshold
            )
            if pinching:
                return True, hand
            if pinching is not None:
                tracked.append(hand)
        if not tracked:
            return None, None
        if self.hold_hand is not None and self.hold_hand not in tracked:
            # The episode's hand may still be pinching out of view
            return None, None
        return False, None

    def update(self, frame: PoseFrame, config: GestureConfig) -> list[GestureEvent]:
        active, hand = self._read(frame, config)
        if active is None:
            return []

        now = frame.timestamp
        if not active:
            if self.holding:
                logger.debug("Pinch hold released after %.2fs, before threshold", now - self.hold_start)
            self.holding = False
            self.hold_start = None
            self.hold_hand = None
            self._fired = False
            return []

        if not self.holding and not self._fired:
            self.holding = True
            self.hold_start = now
            self.hold_hand = hand

        if self.holding and now - self.hold_start >= config.hold_duration:
            self.holding = False
            self.hold_start = None
            self._fired = True
            logger.debug("Pinch hold -> freeze toggle")
            return [GestureEvent.freeze_toggle(now, hand=self.hold_hand)]
        return []

    def reset(self):
        self.holding = False
        self.hold_start = None
        self.hold_hand = None
        self._fired = False
