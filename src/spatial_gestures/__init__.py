"""spatial-gestures - Hand-pose gesture recognition for spatial UIs."""

__version__ = "0.1.0"

from spatial_gestures.frame import Finger, Handedness, HandPose, Joint, PoseFrame, PoseSource, capture_frame
from spatial_gestures.events import GestureEvent, GestureKind
from spatial_gestures.config import GestureConfig
from spatial_gestures.errors import ConfigurationError, EngineStateError, GestureError, RecordingError
from spatial_gestures.engine import EngineStats, GestureEngine, Subscription
from spatial_gestures.wrist_flip import WristFlipDetector
from spatial_gestures.pinch import PinchHoldDetector, PinchTapDetector
from spatial_gestures.zoom import ZoomTracker
from spatial_gestures.finger_count import FingerCountClassifier
from spatial_gestures.recorder import PosePlayer, PoseRecorder, replay
from spatial_gestures.profiler import TickProfiler
