"""BVH exporter for stitched clips"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from mocap_stitch.core import get_logger, Config, MotionClip
from mocap_stitch.bvh import write_bvh


class BVHExporter:
    """
    Export clips to BVH files.

    Writes the clip as BVH text and, optionally, a JSON summary next to it
    with clip statistics and any stitching metadata.
    """

    def __init__(self, config: Optional[Config] = None, output_dir: Optional[str] = None):
        self.logger = get_logger("export.bvh")
        self.config = config or Config()

        export_config = self.config.export

        self._output_dir = Path(output_dir or export_config.get("output_dir", "./output"))
        self._precision = export_config.get("precision", 6)
        self._write_json = export_config.get("write_json", True)

        self.logger.info(f"Initialized BVH exporter (output_dir={self._output_dir})")

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def export(
        self,
        clip: MotionClip,
        filename: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Path:
        """
        Export a clip to a BVH file.

        Args:
            clip: Clip to write
            filename: Output filename (without extension)
            metadata: Optional extra data for the JSON summary

        Returns:
            Path to exported file
        """
        if not clip.is_valid:
            raise ValueError("No frames to export")

        self._output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self._output_dir / f"{filename}.bvh"

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(write_bvh(clip, self._precision))

        self.logger.info(f"Exported clip to {output_path}")
        self.logger.info(f"  Frames: {clip.frame_count}, Duration: {clip.duration:.2f}s")

        if self._write_json:
            json_path = self._output_dir / f"{filename}.json"
            self._export_json(clip, json_path, metadata)

        return output_path

    def _export_json(
        self,
        clip: MotionClip,
        path: Path,
        metadata: Optional[Dict[str, Any]]
    ) -> None:
        """Export clip summary as JSON for debugging/validation."""
        data = {
            "name": clip.name,
            "exported_at": datetime.now().isoformat(timespec="seconds"),
            "fps": clip.fps,
            "frame_time": clip.frame_time,
            "frame_count": clip.frame_count,
            "duration": clip.duration,
            "channel_count": clip.skeleton.channel_count,
            "skeleton": clip.skeleton.joint_names,
        }
        if metadata:
            data["stitching"] = metadata

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        self.logger.debug(f"Exported JSON to {path}")
