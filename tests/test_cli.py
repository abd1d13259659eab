"""Tests for the spatial-gestures command line."""

import yaml
from typer.testing import CliRunner

from spatial_gestures.cli import app
from spatial_gestures.features import COUNTED_FINGERS
from spatial_gestures.frame import Handedness, HandPose, Joint, PoseFrame
from spatial_gestures.recorder import PoseRecorder

runner = CliRunner()


def four_fingers(t: float) -> PoseFrame:
    joints = {Joint.WRIST: [0.0, 0.0, 0.0]}
    for i, finger in enumerate(COUNTED_FINGERS):
        joints[finger.tip] = [0.01 * i, 0.10, 0.0]
    pose = HandPose(joints=joints, wrist_up=[0, 1, 0], pinch_strength={})
    return PoseFrame(timestamp=t, hands={Handedness.RIGHT: pose})


def write_recording(path):
    rec = PoseRecorder()
    rec.start()
    for i in range(10):
        rec.add_frame(four_fingers(i * 0.05))
    rec.save(path)
    return path


class TestReplayCommand:
    def test_replay_prints_events(self, tmp_path):
        path = write_recording(tmp_path / "session.json")
        result = runner.invoke(app, ["replay", str(path), "--channel", "5"])
        assert result.exit_code == 0
        assert "FFT request (channel 5)" in result.output
        assert "finger count 4" in result.output
        assert "10 ticks" in result.output

    def test_quiet_prints_summary_only(self, tmp_path):
        path = write_recording(tmp_path / "session.json")
        result = runner.invoke(app, ["replay", str(path), "--quiet"])
        assert result.exit_code == 0
        assert "FFT request" not in result.output
        assert "fft_request" in result.output

    def test_replay_with_config(self, tmp_path):
        path = write_recording(tmp_path / "session.json")
        cfg = tmp_path / "gestures.yml"
        cfg.write_text(yaml.dump({"gestures": {"fft_enabled": False}}))
        result = runner.invoke(app, ["replay", str(path), "-c", str(cfg)])
        assert result.exit_code == 0
        assert "fft_request" not in result.output

    def test_missing_recording(self, tmp_path):
        result = runner.invoke(app, ["replay", str(tmp_path / "nope.json")])
        assert result.exit_code == 1

    def test_corrupt_recording(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        result = runner.invoke(app, ["replay", str(path)])
        assert result.exit_code == 1

    def test_invalid_channel(self, tmp_path):
        path = write_recording(tmp_path / "session.json")
        result = runner.invoke(app, ["replay", str(path), "--channel", "-3"])
        assert result.exit_code == 1

    def test_recording_with_wrong_shapes(self, tmp_path):
        path = tmp_path / "lists.json"
        path.write_text('{"version": 1, "frames": [{"timestamp": 0.0, "hands": []}]}')
        result = runner.invoke(app, ["replay", str(path)])
        assert result.exit_code == 1


class TestConfigCommands:
    def test_show_defaults(self):
        result = runner.invoke(app, ["config-show"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["gestures"]["hold_duration"] == 0.9
        assert data["gestures"]["tap_hand"] == "right"

    def test_show_from_file(self, tmp_path):
        cfg = tmp_path / "gestures.yml"
        cfg.write_text(yaml.dump({"gestures": {"active_channel": 2}}))
        result = runner.invoke(app, ["config-show", "--config", str(cfg)])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["gestures"]["active_channel"] == 2

    def test_check_valid(self, tmp_path):
        cfg = tmp_path / "gestures.yml"
        cfg.write_text(yaml.dump({"zoom_sensitivity": 2.5}))
        result = runner.invoke(app, ["config-check", str(cfg)])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_check_invalid_values(self, tmp_path):
        cfg = tmp_path / "gestures.yml"
        cfg.write_text(yaml.dump({"gestures": {"hold_duration": -1}}))
        result = runner.invoke(app, ["config-check", str(cfg)])
        assert result.exit_code == 1

    def test_check_malformed_yaml(self, tmp_path):
        cfg = tmp_path / "gestures.yml"
        cfg.write_text("gestures: [unclosed")
        result = runner.invoke(app, ["config-check", str(cfg)])
        assert result.exit_code == 1

    def test_check_missing_file(self, tmp_path):
        result = runner.invoke(app, ["config-check", str(tmp_path / "none.yml")])
        assert result.exit_code == 1
