"""Exception types.

Missing tracking data is not an error and never raises; see ``features``.
"""

from __future__ import annotations


class GestureError(Exception):
    """Base class for spatial_gestures errors."""


class ConfigurationError(GestureError, ValueError):
    """A GestureConfig value is outside its valid range."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid gesture configuration: " + "; ".join(self.problems))


class EngineStateError(GestureError, RuntimeError):
    """The engine was driven outside its start/stop lifecycle."""


class RecordingError(GestureError):
    """A pose recording could not be read."""
