"""Tests for configuration, logging, the clip container and the command line."""

import io
import json
import logging

import numpy as np
import pytest
import yaml

from mocap_stitch.core import Config, DataError, get_logger, setup_logging, reset_logging
from mocap_stitch.core.logging import ColoredFormatter, LOGGER_NAMESPACE
from mocap_stitch.cli import main, parse_args

from conftest import ARM_BVH, make_root_clip


class TestConfig:

    def test_defaults(self):
        config = Config.from_dict({})
        assert config.get("stitching.transition_duration") == 0.5
        assert config.get("stitching.blend_frames") is None
        assert config.parser["strict"] is True
        assert config.path is None

    def test_from_dict_merges_nested_values(self):
        config = Config.from_dict({"stitching": {"blend_frames": 4}})
        assert config.stitching["blend_frames"] == 4
        assert config.stitching["transition_duration"] == 0.5

    def test_get_missing_key_returns_default(self):
        config = Config.from_dict({})
        assert config.get("stitching.missing", 7) == 7
        assert config.get("nothing.here") is None

    def test_set_creates_nested_keys(self):
        config = Config.from_dict({})
        config.set("custom.depth.value", 3)
        assert config.get("custom.depth.value") == 3

    def test_instances_do_not_share_state(self):
        first = Config.from_dict({})
        second = Config.from_dict({})
        first.set("stitching.transition_duration", 2.0)
        assert second.get("stitching.transition_duration") == 0.5

    def test_load_save_reload(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"export": {"precision": 3}}))

        config = Config(str(path))
        assert config.get("export.precision") == 3
        assert config.get("export.write_json") is True

        config.set("export.precision", 9)
        config.save()
        config.set("export.precision", 1)
        config.reload()
        assert config.get("export.precision") == 9

    def test_save_without_path_raises(self):
        with pytest.raises(ValueError):
            Config.from_dict({}).save()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(str(tmp_path / "absent.yaml"))

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config(str(path)).get("stitching.transition_duration") == 0.5


class TestLogging:

    def teardown_method(self):
        reset_logging()

    def test_loggers_share_namespace(self):
        assert get_logger("bvh.reader").name == f"{LOGGER_NAMESPACE}.bvh.reader"

    def test_colored_formatter_leaves_record_untouched(self):
        record = logging.LogRecord(
            "mocap_stitch.test", logging.INFO, __file__, 1, "hello", None, None
        )
        text = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "hello" in text
        assert "\033[" in text
        assert record.levelname == "INFO"

    def test_console_handler_writes_to_given_stream(self):
        stream = io.StringIO()
        setup_logging(level="DEBUG", stream=stream)

        get_logger("test").debug("parsed 3 frames")

        assert "parsed 3 frames" in stream.getvalue()

    def test_handlers_installed_once(self):
        setup_logging(stream=io.StringIO())
        logger = setup_logging(level="WARNING", stream=io.StringIO())

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_log_file_gets_plain_text(self, tmp_path):
        setup_logging(log_file="run", log_dir=str(tmp_path / "logs"), stream=io.StringIO())
        get_logger("test").warning("frame count mismatch")
        reset_logging()

        files = list((tmp_path / "logs").glob("run_*.log"))
        assert len(files) == 1
        text = files[0].read_text()
        assert "frame count mismatch" in text
        assert "\033[" not in text

    def test_reset_removes_handlers(self):
        setup_logging(stream=io.StringIO())
        reset_logging()
        assert logging.getLogger(LOGGER_NAMESPACE).handlers == []


class TestMotionClip:

    def test_timing(self):
        clip = make_root_clip(np.zeros((4, 6)), frame_time=0.25)
        assert clip.duration == pytest.approx(1.0)
        assert clip.fps == pytest.approx(4.0)

    def test_frame_at_loops(self):
        clip = make_root_clip(np.zeros((4, 6)), frame_time=0.25)
        assert clip.frame_at(0.0) == 0
        assert clip.frame_at(0.6) == 2
        assert clip.frame_at(1.1) == 0
        assert clip.frame_at(1.1, loop=False) == 3

    def test_frame_at_empty_clip(self):
        with pytest.raises(IndexError):
            make_root_clip(np.zeros((0, 6))).frame_at(0.0)

    def test_validate_rejects_non_finite(self):
        clip = make_root_clip([[0, 0, np.nan, 0, 0, 0]])
        with pytest.raises(DataError, match="non-finite"):
            clip.validate()

    def test_validate_rejects_wrong_width(self):
        clip = make_root_clip([[0, 0, 0, 0, 0]])
        with pytest.raises(DataError, match="declares 6 channels"):
            clip.validate()

    def test_copy_is_independent(self):
        clip = make_root_clip([[0, 0, 0, 0, 0, 0]], name="walk")
        copied = clip.copy()
        copied.frames[0, 0] = 5.0
        assert clip.frames[0, 0] == 0.0
        assert copied.name == "walk"


class TestCommandLine:

    def setup_method(self):
        reset_logging()

    def teardown_method(self):
        # main() binds its console handler to the captured stdout of this test
        reset_logging()

    @pytest.fixture
    def bvh_file(self, tmp_path):
        path = tmp_path / "arm.bvh"
        path.write_text(ARM_BVH)
        return path

    def test_parse_stitch_arguments(self):
        args = parse_args(["stitch", "a.bvh", "b.bvh", "-t", "0.25", "-n", "3", "-o", "out"])
        assert args.command == "stitch"
        assert args.transition == 0.25
        assert args.blend_frames == 3
        assert args.output == "out"

    def test_info(self, bvh_file, capsys):
        assert main(["info", str(bvh_file)]) == 0
        assert "Channels:    15" in capsys.readouterr().out

    def test_pose(self, bvh_file, capsys):
        assert main(["pose", str(bvh_file), "--frame", "1"]) == 0
        out = capsys.readouterr().out
        payload = json.loads(out[out.index("{"):out.rindex("}") + 1])
        assert payload["frame"] == 1

    def test_pose_out_of_range(self, bvh_file):
        assert main(["pose", str(bvh_file), "--frame", "10"]) == 1

    def test_stitch_writes_output(self, bvh_file, tmp_path):
        out_dir = tmp_path / "out"

        code = main([
            "stitch", str(bvh_file), str(bvh_file),
            "--output-dir", str(out_dir), "-n", "2", "-o", "joined",
        ])

        assert code == 0
        assert (out_dir / "joined.bvh").exists()
        summary = json.loads((out_dir / "joined.json").read_text())
        assert summary["frame_count"] == 8
        assert summary["stitching"]["blend_frames"] == 2

    def test_log_file_option(self, bvh_file, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert main(["--log-file", "info_run", "info", str(bvh_file)]) == 0
        reset_logging()

        files = list((tmp_path / "logs").glob("info_run_*.log"))
        assert len(files) == 1
        assert "Loaded clip arm" in files[0].read_text()

    def test_missing_input_file(self, tmp_path):
        assert main(["info", str(tmp_path / "missing.bvh")]) == 1

    def test_malformed_input_file(self, tmp_path):
        path = tmp_path / "broken.bvh"
        path.write_text("HIERARCHY\nROOT Hip\n{\n}\n")
        assert main(["info", str(path)]) == 1

    def test_missing_config_file(self, bvh_file, tmp_path):
        assert main(["--config", str(tmp_path / "nope.yaml"), "info", str(bvh_file)]) == 1
