"""Gesture events published by the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from spatial_gestures.frame import Handedness


class GestureKind(str, Enum):
    MENU_TOGGLE = "menu_toggle"
    CURSOR_MODE_TOGGLE = "cursor_mode_toggle"
    ZOOM_DELTA = "zoom_delta"
    FREEZE_TOGGLE = "freeze_toggle"
    FFT_REQUEST = "fft_request"
    FINGER_COUNT_CHANGED = "finger_count_changed"


@dataclass(frozen=True)
class GestureEvent:
    """A transient gesture event, produced and delivered within one tick.

    ``value`` depends on ``kind``:
    - ZOOM_DELTA: relative zoom increment (float); consumers accumulate it
    - FFT_REQUEST: channel id (int)
    - FINGER_COUNT_CHANGED: extended finger count in [0, 4] (int)
    - toggles: None
    """
    kind: GestureKind
    timestamp: float
    value: Optional[Union[float, int]] = None
    hand: Optional[Handedness] = None

    @classmethod
    def menu_toggle(cls, timestamp: float, hand: Optional[Handedness] = None) -> GestureEvent:
        return cls(GestureKind.MENU_TOGGLE, timestamp, hand=hand)

    @classmethod
    def cursor_mode_toggle(cls, timestamp: float, hand: Optional[Handedness] = None) -> GestureEvent:
        return cls(GestureKind.CURSOR_MODE_TOGGLE, timestamp, hand=hand)

    @classmethod
    def zoom_delta(cls, timestamp: float, delta: float) -> GestureEvent:
        return cls(GestureKind.ZOOM_DELTA, timestamp, value=float(delta))

    @classmethod
    def freeze_toggle(cls, timestamp: float, hand: Optional[Handedness] = None) -> GestureEvent:
        return cls(GestureKind.FREEZE_TOGGLE, timestamp, hand=hand)

    @classmethod
    def fft_request(cls, timestamp: float, channel: int, hand: Optional[Handedness] = None) -> GestureEvent:
        return cls(GestureKind.FFT_REQUEST, timestamp, value=int(channel), hand=hand)

    @classmethod
    def finger_count_changed(cls, timestamp: float, count: int, hand: Optional[Handedness] = None) -> GestureEvent:
        if not 0 <= count <= 4:
            raise ValueError(f"finger count must be in [0, 4], got {count}")
        return cls(GestureKind.FINGER_COUNT_CHANGED, timestamp, value=int(count), hand=hand)

    def _require(self, kind: GestureKind):
        if self.kind is not kind:
            raise TypeError(f"{self.kind.value} event has no {kind.value} payload")

    @property
    def delta(self) -> float:
        self._require(GestureKind.ZOOM_DELTA)
        return self.value

    @property
    def channel(self) -> int:
        self._require(GestureKind.FFT_REQUEST)
        return self.value

    @property
    def count(self) -> int:
        self._require(GestureKind.FINGER_COUNT_CHANGED)
        return self.value

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "timestamp": self.timestamp,
            "value": self.value,
            "hand": self.hand.value if self.hand is not None else None,
        }


EventSink = Callable[[GestureEvent], None]
