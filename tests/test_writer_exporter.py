"""Tests for BVH serialization and the exporter."""

import json

import numpy as np
import pytest

from mocap_stitch.core import Config
from mocap_stitch.bvh import format_number, parse_bvh, write_bvh, write_hierarchy, load_bvh
from mocap_stitch.export import BVHExporter
from mocap_stitch.motion import ClipStitcher

from conftest import ARM_BVH, make_root_clip


class TestFormatNumber:

    def test_trailing_zeros_stripped(self):
        assert format_number(1.5, 6) == "1.5"
        assert format_number(2.0, 6) == "2"

    def test_negative_zero(self):
        assert format_number(-0.0, 3) == "0"
        assert format_number(-0.0000001, 3) == "0"

    def test_full_precision(self):
        assert float(format_number(1.0 / 3.0)) == 1.0 / 3.0


class TestWriter:

    def test_hierarchy_layout(self):
        clip = parse_bvh(ARM_BVH)
        text = write_hierarchy(clip.skeleton.root)
        lines = text.splitlines()

        assert lines[0] == "HIERARCHY"
        assert lines[1] == "ROOT Hips"
        assert "\t\tEnd Site" in lines
        assert text.count("{") == text.count("}") == clip.skeleton.joint_count

    def test_round_trip_keeps_structure(self):
        clip = parse_bvh(ARM_BVH)

        reparsed = parse_bvh(write_bvh(clip))

        assert reparsed.skeleton.joint_names == clip.skeleton.joint_names
        assert reparsed.skeleton.has_same_layout(clip.skeleton)
        assert reparsed.frame_time == pytest.approx(clip.frame_time)
        np.testing.assert_allclose(reparsed.frames, clip.frames)
        for original, copied in zip(clip.skeleton.joints, reparsed.skeleton.joints):
            np.testing.assert_allclose(copied.offset, original.offset)

    def test_precision_applies_to_frames(self):
        clip = make_root_clip([[0.123456789, 0, 0, 0, 0, 0]])
        text = write_bvh(clip, precision=3)
        assert "0.123 0 0 0 0 0" in text


class TestBVHExporter:

    def setup_method(self):
        self.clip = parse_bvh(ARM_BVH, name="arm")

    def make_exporter(self, tmp_path, **export):
        config = Config.from_dict({"export": dict(output_dir=str(tmp_path), **export)})
        return BVHExporter(config)

    def test_writes_bvh_and_summary(self, tmp_path):
        exporter = self.make_exporter(tmp_path)

        path = exporter.export(self.clip, "arm_out", metadata={"blend_frames": 2})

        assert path == tmp_path / "arm_out.bvh"
        assert path.exists()
        summary = json.loads((tmp_path / "arm_out.json").read_text())
        assert summary["name"] == "arm"
        assert summary["frame_count"] == 3
        assert summary["channel_count"] == 15
        assert summary["stitching"] == {"blend_frames": 2}

    def test_exported_file_loads_back(self, tmp_path):
        exporter = self.make_exporter(tmp_path)
        path = exporter.export(self.clip, "arm_out")

        loaded = load_bvh(path)

        assert loaded.name == "arm_out"
        np.testing.assert_allclose(loaded.frames, self.clip.frames, atol=1e-6)

    def test_json_can_be_disabled(self, tmp_path):
        exporter = self.make_exporter(tmp_path, write_json=False)
        exporter.export(self.clip, "arm_out")
        assert not (tmp_path / "arm_out.json").exists()

    def test_output_dir_argument_wins(self, tmp_path):
        target = tmp_path / "nested" / "dir"
        exporter = BVHExporter(Config.from_dict({}), output_dir=str(target))

        path = exporter.export(self.clip, "arm_out")

        assert exporter.output_dir == target
        assert path.parent == target

    def test_empty_clip_rejected(self, tmp_path):
        exporter = self.make_exporter(tmp_path)
        with pytest.raises(ValueError, match="No frames"):
            exporter.export(make_root_clip(np.zeros((0, 6))), "empty")

    def test_stitched_clip_export(self, tmp_path):
        result = ClipStitcher(config=Config.from_dict({}), blend_frames=2).stitch(self.clip, self.clip)
        exporter = self.make_exporter(tmp_path)

        path = exporter.export(result.clip, "stitched", metadata=result.to_dict())
        loaded = load_bvh(path)

        assert loaded.frame_count == 3 + 2 + 3
        assert loaded.skeleton.has_same_layout(self.clip.skeleton)
