"""Geometric features derived from a single pose frame.

Every function here is a pure function of the current frame. When a hand or
joint is not tracked, the result is ``None`` ("no data"). Callers must treat
``None`` as "no transition this tick", never as a zero reading.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from spatial_gestures.frame import Finger, Handedness, Joint, PoseFrame

COUNTED_FINGERS = (Finger.INDEX, Finger.MIDDLE, Finger.RING, Finger.PINKY)

_EPS = 1e-9


def joint_position(frame: PoseFrame, hand: Handedness, joint: Joint) -> Optional[np.ndarray]:
    """Resolve a joint for one hand, or None if the hand or joint is absent."""
    pose = frame.hand(hand)
    if pose is None:
        return None
    pos = pose.joints.get(joint)
    if pos is None or not np.all(np.isfinite(pos)):
        return None
    return pos


def wrist_up(frame: PoseFrame, hand: Handedness) -> Optional[np.ndarray]:
    """Unit wrist "up" vector, or None if untracked or degenerate."""
    pose = frame.hand(hand)
    if pose is None or pose.wrist_up is None:
        return None
    return _normalize(pose.wrist_up)


def pinch_strength(frame: PoseFrame, hand: Handedness, finger: Finger) -> Optional[float]:
    pose = frame.hand(hand)
    if pose is None:
        return None
    strength = pose.pinch_strength.get(finger)
    if strength is None or not math.isfinite(strength):
        return None
    return strength


def is_pinching(
    frame: PoseFrame, hand: Handedness, finger: Finger, threshold: float
) -> Optional[bool]:
    strength = pinch_strength(frame, hand, finger)
    if strength is None:
        return None
    return strength >= threshold


def extended_distance(frame: PoseFrame, hand: Handedness, finger: Finger) -> Optional[float]:
    """Euclidean distance from the wrist to a fingertip."""
    wrist = joint_position(frame, hand, Joint.WRIST)
    tip = joint_position(frame, hand, finger.tip)
    if wrist is None or tip is None:
        return None
    return float(np.linalg.norm(tip - wrist))


def extended_finger_count(
    frame: PoseFrame, hand: Handedness, threshold: float
) -> Optional[int]:
    """Count index..pinky fingertips farther than ``threshold`` from the wrist.

    Returns None when the hand or its wrist is absent. A single missing
    fingertip counts as not extended.
    """
    if joint_position(frame, hand, Joint.WRIST) is None:
        return None
    count = 0
    for finger in COUNTED_FINGERS:
        d = extended_distance(frame, hand, finger)
        if d is not None and d > threshold:
            count += 1
    return count


def inter_hand_fingertip_distance(
    frame: PoseFrame,
    finger_a: Finger,
    hand_a: Handedness = Handedness.LEFT,
    finger_b: Optional[Finger] = None,
    hand_b: Handedness = Handedness.RIGHT,
) -> Optional[float]:
    """Distance between a fingertip on one hand and a fingertip on the other."""
    if hand_a is hand_b:
        raise ValueError("inter-hand distance needs two different hands")
    tip_a = joint_position(frame, hand_a, finger_a.tip)
    tip_b = joint_position(frame, hand_b, (finger_b or finger_a).tip)
    if tip_a is None or tip_b is None:
        return None
    return float(np.linalg.norm(tip_a - tip_b))


def angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """Unsigned angle between two vectors in degrees."""
    norms = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norms < _EPS:
        return 0.0
    cos_angle = float(np.dot(a, b)) / norms
    return math.degrees(math.acos(float(np.clip(cos_angle, -1.0, 1.0))))


def slerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """Spherical interpolation between two directions, returning a unit vector."""
    a = _normalize(a)
    b = _normalize(b)
    if a is None or b is None:
        raise ValueError("slerp needs two non-zero vectors")

    dot = float(np.clip(np.dot(a, b), -1.0, 1.0))
    if dot > 1.0 - 1e-6:
        return _normalize(a + (b - a) * t)

    if dot < -1.0 + 1e-6:
        # Anti-parallel: rotate about any axis perpendicular to a
        axis = np.cross(a, [1.0, 0.0, 0.0])
        if np.linalg.norm(axis) < 1e-6:
            axis = np.cross(a, [0.0, 1.0, 0.0])
        axis = axis / np.linalg.norm(axis)
        theta = math.pi * t
        # Rodrigues' rotation; the axis is perpendicular so the k(k.a) term vanishes
        return _normalize(a * math.cos(theta) + np.cross(axis, a) * math.sin(theta))

    omega = math.acos(dot)
    sin_omega = math.sin(omega)
    out = (math.sin((1.0 - t) * omega) * a + math.sin(t * omega) * b) / sin_omega
    return _normalize(out)


def _normalize(v: np.ndarray) -> Optional[np.ndarray]:
    v = np.asarray(v, dtype=np.float64)
    if not np.all(np.isfinite(v)):
        return None
    norm = float(np.linalg.norm(v))
    if norm < _EPS:
        return None
    return v / norm
