"""Pose frames: one timestamped snapshot of tracked hand state.

A frame holds up to two hands. Each hand carries named joint positions in a
shared 3D space, a wrist "up" orientation vector and per-finger pinch
strengths. Absence is explicit: a hand missing from ``hands`` or a joint
missing from ``joints`` means "not tracked this tick", never zero.

Hosts adapt their tracking subsystem to the narrow ``PoseSource`` protocol
and build frames with ``capture_frame``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Protocol

import numpy as np


class Handedness(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Joint(str, Enum):
    """Joint roles the feature extractor knows how to resolve."""
    WRIST = "wrist"
    THUMB_TIP = "thumb_tip"
    INDEX_TIP = "index_tip"
    MIDDLE_TIP = "middle_tip"
    RING_TIP = "ring_tip"
    PINKY_TIP = "pinky_tip"


class Finger(str, Enum):
    """Fingers that can pinch against the thumb and be counted as extended."""
    INDEX = "index"
    MIDDLE = "middle"
    RING = "ring"
    PINKY = "pinky"

    @property
    def tip(self) -> Joint:
        return _FINGER_TIPS[self]


_FINGER_TIPS = {
    Finger.INDEX: Joint.INDEX_TIP,
    Finger.MIDDLE: Joint.MIDDLE_TIP,
    Finger.RING: Joint.RING_TIP,
    Finger.PINKY: Joint.PINKY_TIP,
}


def _as_vector(value) -> np.ndarray:
    vec = np.asarray(value, dtype=np.float64).reshape(3)
    vec = vec.copy()
    vec.setflags(write=False)
    return vec


@dataclass(frozen=True, eq=False)
class HandPose:
    """Tracked state of one hand for one tick."""
    joints: Mapping[Joint, np.ndarray] = field(default_factory=dict)
    wrist_up: Optional[np.ndarray] = None
    pinch_strength: Mapping[Finger, float] = field(default_factory=dict)

    def __post_init__(self):
        joints = {Joint(k): _as_vector(v) for k, v in self.joints.items()}
        pinch = {
            Finger(k): float(np.clip(v, 0.0, 1.0))
            for k, v in self.pinch_strength.items()
            if v is not None
        }
        up = _as_vector(self.wrist_up) if self.wrist_up is not None else None
        object.__setattr__(self, "joints", joints)
        object.__setattr__(self, "pinch_strength", pinch)
        object.__setattr__(self, "wrist_up", up)

    def to_dict(self) -> dict:
        return {
            "joints": {j.value: p.tolist() for j, p in self.joints.items()},
            "wrist_up": self.wrist_up.tolist() if self.wrist_up is not None else None,
            "pinch_strength": {f.value: s for f, s in self.pinch_strength.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> HandPose:
        return cls(
            joints=data.get("joints", {}),
            wrist_up=data.get("wrist_up"),
            pinch_strength=data.get("pinch_strength", {}),
        )


@dataclass(frozen=True, eq=False)
class PoseFrame:
    """All tracked hands at one instant.

    ``timestamp`` is in seconds on a clock that reflects real elapsed time
    (``time.monotonic()`` or a recording's relative clock). Every duration in
    the engine is computed from these timestamps, never from tick counts.
    """
    timestamp: float
    hands: Mapping[Handedness, HandPose] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "hands", {Handedness(k): v for k, v in self.hands.items()}
        )

    def hand(self, handedness: Handedness) -> Optional[HandPose]:
        return self.hands.get(handedness)

    @property
    def hand_count(self) -> int:
        return len(self.hands)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "hands": {h.value: pose.to_dict() for h, pose in self.hands.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> PoseFrame:
        return cls(
            timestamp=float(data["timestamp"]),
            hands={
                Handedness(h): HandPose.from_dict(pose)
                for h, pose in data.get("hands", {}).items()
            },
        )


class PoseSource(Protocol):
    """Per-tick query interface onto the hand tracking subsystem."""

    def hand(self, handedness: Handedness) -> Optional[HandPose]:
        """Return the current pose of a hand, or None if it is not tracked."""
        ...


def capture_frame(source: PoseSource, timestamp: Optional[float] = None) -> PoseFrame:
    """Snapshot both hands from a pose source into an immutable frame."""
    now = timestamp if timestamp is not None else time.monotonic()
    hands = {}
    for handedness in Handedness:
        pose = source.hand(handedness)
        if pose is not None:
            hands[handedness] = pose
    return PoseFrame(timestamp=now, hands=hands)
