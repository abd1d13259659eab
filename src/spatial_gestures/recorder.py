"""Pose-frame recording and replay.

Record real tracking sessions once, then replay them through the engine
for reproducible tests and tuning without a headset. Timestamps are stored
relative to the first recorded frame, so a replay reproduces the original
timing and therefore the same gesture events.

Usage:
    recorder = PoseRecorder()
    recorder.start()
    recorder.add_frame(frame)        # once per tick
    recorder.save("session.json")

    player = PosePlayer.load("session.json")
    with GestureEngine(config) as engine:
        events = replay(engine, player)
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Iterator, Optional

from spatial_gestures.errors import RecordingError
from spatial_gestures.events import GestureEvent
from spatial_gestures.frame import PoseFrame

logger = logging.getLogger("spatial_gestures.recorder")

FORMAT_VERSION = 1


class _Session:
    """An ordered run of frames on a clock starting at zero."""

    def __init__(self, frames: Optional[list[PoseFrame]] = None):
        self._frames: list[PoseFrame] = frames if frames is not None else []

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        return self._frames[-1].timestamp if self._frames else 0.0


class PoseRecorder(_Session):
    """Accumulates pose frames in memory and writes them as JSON."""

    def __init__(self):
        super().__init__()
        self._origin: Optional[float] = None
        self.is_recording = False

    def start(self):
        """Begin a new session, discarding any previously captured frames."""
        self._frames = []
        self._origin = None
        self.is_recording = True

    def stop(self) -> int:
        """Stop capturing and return how many frames were kept."""
        self.is_recording = False
        return self.frame_count

    def add_frame(self, frame: PoseFrame):
        if not self.is_recording:
            return
        if self._origin is None:
            self._origin = frame.timestamp
        self._frames.append(
            PoseFrame(timestamp=frame.timestamp - self._origin, hands=frame.hands)
        )

    def save(self, path: str | Path):
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": FORMAT_VERSION,
            "frame_count": self.frame_count,
            "duration": self.duration,
            "frames": [frame.to_dict() for frame in self._frames],
        }
        target.write_text(json.dumps(payload))
        logger.info("Saved %d frames (%.1fs) to %s", self.frame_count, self.duration, target)


class PosePlayer(_Session):
    """Replays a recorded pose session frame by frame."""

    @classmethod
    def load(cls, path: str | Path) -> PosePlayer:
        source = Path(path)
        try:
            payload = json.loads(source.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise RecordingError(f"{source}: not valid JSON ({e})") from e

        version = payload.get("version") if isinstance(payload, dict) else None
        if version != FORMAT_VERSION:
            raise RecordingError(f"{source}: unsupported recording version {version!r}")

        try:
            frames = [PoseFrame.from_dict(entry) for entry in payload["frames"]]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RecordingError(f"{source}: malformed frame data ({e})") from e
        logger.debug("Loaded %d frames from %s", len(frames), source)
        return cls(frames)

    def play(self) -> Iterator[PoseFrame]:
        """Yield every frame immediately, ignoring the recorded pacing."""
        yield from self._frames

    def play_realtime(self, speed: float = 1.0) -> Iterator[PoseFrame]:
        """Yield frames paced by their timestamps, ``speed`` times faster."""
        started = time.monotonic()
        for frame in self._frames:
            wait = frame.timestamp / speed - (time.monotonic() - started)
            if wait > 0:
                time.sleep(wait)
            yield frame

    def get_frame(self, index: int) -> Optional[PoseFrame]:
        return self._frames[index] if 0 <= index < len(self._frames) else None


def replay(engine, player: PosePlayer) -> list[GestureEvent]:
    """Feed every recorded frame through a started engine; return all events."""
    events: list[GestureEvent] = []
    for frame in player.play():
        events.extend(engine.tick(frame))
    return events
