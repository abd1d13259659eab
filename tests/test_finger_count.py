"""Tests for extended finger counting and the four-finger FFT trigger."""

from spatial_gestures.config import GestureConfig
from spatial_gestures.events import GestureKind
from spatial_gestures.features import COUNTED_FINGERS
from spatial_gestures.finger_count import FingerCountClassifier
from spatial_gestures.frame import Handedness, HandPose, Joint, PoseFrame

LEFT, RIGHT = Handedness.LEFT, Handedness.RIGHT


def hand(extended: int) -> HandPose:
    joints = {Joint.WRIST: [0.0, 0.0, 0.0]}
    for i, finger in enumerate(COUNTED_FINGERS):
        joints[finger.tip] = [0.01 * i, 0.10 if i < extended else 0.03, 0.0]
    return HandPose(joints=joints)


def count_frame(t: float, right: int | None = None, left: int | None = None) -> PoseFrame:
    hands = {}
    if right is not None:
        hands[RIGHT] = hand(right)
    if left is not None:
        hands[LEFT] = hand(left)
    return PoseFrame(timestamp=t, hands=hands)


def count_events(events):
    return [e for e in events if e.kind is GestureKind.FINGER_COUNT_CHANGED]


def fft_events(events):
    return [e for e in events if e.kind is GestureKind.FFT_REQUEST]


NO_FFT = GestureConfig(fft_enabled=False, debounce_seconds=0.18)


class TestFingerCountDebounce:
    def test_initial_count_published_after_debounce(self):
        clf = FingerCountClassifier()
        assert clf.update(count_frame(0.0, right=2), NO_FFT) == []
        assert clf.update(count_frame(0.1, right=2), NO_FFT) == []
        events = clf.update(count_frame(0.2, right=2), NO_FFT)
        assert len(events) == 1
        assert events[0].count == 2
        assert events[0].hand is RIGHT

    def test_stable_change_is_published(self):
        clf = FingerCountClassifier()
        events = []
        for i in range(11):
            events += clf.update(count_frame(i * 0.05, right=1), NO_FFT)
        for i in range(11, 20):
            events += clf.update(count_frame(i * 0.05, right=3), NO_FFT)
        counts = [e.count for e in count_events(events)]
        assert counts == [1, 3]

    def test_single_frame_flicker_ignored(self):
        clf = FingerCountClassifier()
        events = []
        for i in range(10):
            events += clf.update(count_frame(i * 0.05, right=2), NO_FFT)
        events += clf.update(count_frame(0.5, right=4), NO_FFT)
        for i in range(11, 30):
            events += clf.update(count_frame(i * 0.05, right=2), NO_FFT)
        assert [e.count for e in count_events(events)] == [2]

    def test_transient_shorter_than_debounce_ignored(self):
        clf = FingerCountClassifier()
        events = []
        for i in range(10):
            events += clf.update(count_frame(i * 0.05, right=2), NO_FFT)
        # 3 fingers for 0.15s (< 0.18s), then back to 2
        for t in (0.5, 0.55, 0.6, 0.65):
            events += clf.update(count_frame(t, right=3), NO_FFT)
        for i in range(14, 30):
            events += clf.update(count_frame(i * 0.05, right=2), NO_FFT)
        assert [e.count for e in count_events(events)] == [2]

    def test_alternating_values_never_stabilize(self):
        clf = FingerCountClassifier()
        events = []
        for i in range(10):
            events += clf.update(count_frame(i * 0.05, right=2), NO_FFT)
        for i in range(10, 60):
            events += clf.update(count_frame(i * 0.05, right=3 if i % 2 else 1), NO_FFT)
        assert [e.count for e in count_events(events)] == [2]

    def test_zero_debounce_accepts_immediately(self):
        clf = FingerCountClassifier()
        config = GestureConfig(fft_enabled=False, debounce_seconds=0.0)
        events = []
        for t, n in [(0.0, 1), (0.01, 2), (0.02, 3)]:
            events += clf.update(count_frame(t, right=n), config)
        assert [e.count for e in count_events(events)] == [1, 2, 3]

    def test_missing_hand_freezes(self):
        clf = FingerCountClassifier()
        clf.update(count_frame(0.0, right=2), NO_FFT)
        clf.update(count_frame(0.1), NO_FFT)
        assert clf.candidate == 2
        assert clf.candidate_since == 0.0
        assert clf.current is None

    def test_only_configured_hand_counts(self):
        clf = FingerCountClassifier()
        events = []
        for i in range(10):
            events += clf.update(count_frame(i * 0.05, left=3), NO_FFT)
        assert events == []

    def test_reset(self):
        clf = FingerCountClassifier()
        for i in range(6):
            clf.update(count_frame(i * 0.05, right=2), NO_FFT)
        assert clf.current == 2
        clf.reset()
        assert clf.current is None
        assert clf.candidate is None


class TestFFTTrigger:
    def test_cooldown_scenario(self):
        clf = FingerCountClassifier()
        config = GestureConfig(active_channel=2, fft_cooldown=1.5)

        first = fft_events(clf.update(count_frame(0.0, right=4), config))
        assert len(first) == 1
        assert first[0].channel == 2

        assert fft_events(clf.update(count_frame(0.8, right=4), config)) == []

        second = fft_events(clf.update(count_frame(1.6, right=4), config))
        assert len(second) == 1
        assert second[0].channel == 2

    def test_fewer_than_four_fingers(self):
        clf = FingerCountClassifier()
        events = clf.update(count_frame(0.0, right=3), GestureConfig())
        assert fft_events(events) == []

    def test_disabled(self):
        clf = FingerCountClassifier()
        events = clf.update(count_frame(0.0, right=4), GestureConfig(fft_enabled=False))
        assert fft_events(events) == []

    def test_fft_hand_independent_of_count_hand(self):
        clf = FingerCountClassifier()
        config = GestureConfig(fft_hand=LEFT, finger_count_hand=RIGHT)
        assert fft_events(clf.update(count_frame(0.0, right=4, left=1), config)) == []
        events = clf.update(count_frame(2.0, right=1, left=4), config)
        assert len(fft_events(events)) == 1
        assert fft_events(events)[0].hand is LEFT

    def test_missing_hand_does_not_consume_cooldown(self):
        clf = FingerCountClassifier()
        config = GestureConfig(fft_cooldown=1.5)
        clf.update(count_frame(0.0), config)
        assert len(fft_events(clf.update(count_frame(0.1, right=4), config))) == 1

    def test_count_and_fft_in_same_tick(self):
        clf = FingerCountClassifier()
        config = GestureConfig(debounce_seconds=0.0, active_channel=5)
        events = clf.update(count_frame(0.0, right=4), config)
        assert [e.kind for e in events] == [GestureKind.FINGER_COUNT_CHANGED, GestureKind.FFT_REQUEST]
