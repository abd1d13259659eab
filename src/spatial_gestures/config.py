"""Gesture engine configuration.

All thresholds, durations and hand/finger assignments live in one frozen
``GestureConfig``. Values are validated on construction, so an engine never
runs with a negative duration or an out-of-range pinch threshold.

Load from YAML:
    config = GestureConfig.from_yaml("gestures.yml")

Tweak a copy:
    config = config.replace(active_channel=2, fft_cooldown=2.0)
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from spatial_gestures.errors import ConfigurationError
from spatial_gestures.frame import Finger, Handedness

_DURATIONS = (
    "wrist_flip_cooldown",
    "tap_max_duration",
    "hold_duration",
    "zoom_activation_delay",
    "debounce_seconds",
    "fft_cooldown",
)


@dataclass(frozen=True)
class GestureConfig:
    # Wrist flip -> menu toggle
    wrist_flip_hand: Handedness = Handedness.LEFT
    wrist_flip_angle: float = 95.0  # degrees
    wrist_flip_cooldown: float = 1.2
    flip_baseline_blend: float = 0.08  # per-tick slerp toward current up vector

    # Pinch shared by tap, hold and zoom
    pinch_strength_threshold: float = 0.65

    # Pinch tap -> cursor mode toggle
    tap_hand: Handedness = Handedness.RIGHT
    tap_finger: Finger = Finger.INDEX
    tap_max_duration: float = 0.45

    # Pinch hold -> freeze toggle
    hold_finger: Finger = Finger.MIDDLE
    hold_hands: tuple[Handedness, ...] = (Handedness.LEFT, Handedness.RIGHT)
    hold_duration: float = 0.9

    # Two-hand pinch distance -> zoom delta
    zoom_finger: Finger = Finger.INDEX
    zoom_activation_delay: float = 0.15
    zoom_sensitivity: float = 4.0
    zoom_clamp: float = 0.25
    zoom_epsilon: float = 0.0005

    # Extended finger count and the 4-finger FFT trigger
    extended_distance: float = 0.07  # metres, wrist to fingertip
    finger_count_hand: Handedness = Handedness.RIGHT
    debounce_seconds: float = 0.18
    fft_enabled: bool = True
    fft_hand: Handedness = Handedness.RIGHT
    fft_cooldown: float = 1.5
    active_channel: int = 0

    def __post_init__(self):
        # Coerce plain strings (from YAML/dicts) into enums before validating
        coerce = {
            "wrist_flip_hand": Handedness,
            "tap_hand": Handedness,
            "finger_count_hand": Handedness,
            "fft_hand": Handedness,
            "tap_finger": Finger,
            "hold_finger": Finger,
            "zoom_finger": Finger,
        }
        problems = []
        for name, enum_type in coerce.items():
            try:
                object.__setattr__(self, name, enum_type(getattr(self, name)))
            except ValueError:
                problems.append(f"{name}={getattr(self, name)!r} is not a valid {enum_type.__name__}")
        try:
            hands = tuple(Handedness(h) for h in self.hold_hands)
            object.__setattr__(self, "hold_hands", hands)
        except (TypeError, ValueError):
            problems.append(f"hold_hands={self.hold_hands!r} must be a list of hands")

        problems.extend(self._validate())
        if problems:
            raise ConfigurationError(problems)

    def _validate(self) -> list[str]:
        problems = []

        for name in _DURATIONS:
            value = getattr(self, name)
            if not _finite(value) or value < 0:
                problems.append(f"{name} must be a non-negative number of seconds, got {value!r}")

        if not _finite(self.wrist_flip_angle) or not 0 < self.wrist_flip_angle <= 180:
            problems.append(f"wrist_flip_angle must be in (0, 180] degrees, got {self.wrist_flip_angle!r}")
        if not _finite(self.flip_baseline_blend) or not 0 <= self.flip_baseline_blend <= 1:
            problems.append(f"flip_baseline_blend must be in [0, 1], got {self.flip_baseline_blend!r}")
        if not _finite(self.pinch_strength_threshold) or not 0 < self.pinch_strength_threshold <= 1:
            problems.append(
                f"pinch_strength_threshold must be in (0, 1], got {self.pinch_strength_threshold!r}"
            )
        if isinstance(self.hold_hands, tuple) and not self.hold_hands:
            problems.append("hold_hands must name at least one hand")
        if not _finite(self.zoom_sensitivity):
            problems.append(f"zoom_sensitivity must be finite, got {self.zoom_sensitivity!r}")
        if not _finite(self.zoom_clamp) or self.zoom_clamp <= 0:
            problems.append(f"zoom_clamp must be positive, got {self.zoom_clamp!r}")
        if not _finite(self.zoom_epsilon) or self.zoom_epsilon < 0:
            problems.append(f"zoom_epsilon must be non-negative, got {self.zoom_epsilon!r}")
        if not _finite(self.extended_distance) or self.extended_distance <= 0:
            problems.append(f"extended_distance must be positive, got {self.extended_distance!r}")
        if isinstance(self.active_channel, bool) or not isinstance(self.active_channel, int) or self.active_channel < 0:
            problems.append(f"active_channel must be a non-negative integer, got {self.active_channel!r}")
        if not isinstance(self.fft_enabled, bool):
            problems.append(f"fft_enabled must be a boolean, got {self.fft_enabled!r}")

        return problems

    def replace(self, **changes: Any) -> GestureConfig:
        """Return a validated copy with some fields changed."""
        unknown = set(changes) - _field_names()
        if unknown:
            raise ConfigurationError([f"unknown setting '{k}'" for k in sorted(unknown)])
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (Handedness, Finger)):
                value = value.value
            elif f.name == "hold_hands":
                value = [h.value for h in value]
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> GestureConfig:
        unknown = set(data) - _field_names()
        if unknown:
            raise ConfigurationError([f"unknown setting '{k}'" for k in sorted(unknown)])
        values = dict(data)
        if "hold_hands" in values and isinstance(values["hold_hands"], list):
            values["hold_hands"] = tuple(values["hold_hands"])
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GestureConfig:
        """Load a config from YAML. Missing keys keep their defaults.

        The file may hold the settings at top level or under a ``gestures`` key.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError([f"{path}: expected a mapping of settings"])
        if isinstance(data.get("gestures"), dict):
            data = data["gestures"]
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path):
        with open(path, "w") as f:
            yaml.dump({"gestures": self.to_dict()}, f, default_flow_style=False, sort_keys=False)


def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _field_names() -> set[str]:
    return {f.name for f in fields(GestureConfig)}
