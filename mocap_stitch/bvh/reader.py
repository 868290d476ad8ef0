"""BVH reader - splits text into sections and builds a MotionClip"""

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from mocap_stitch.core import (
    get_logger,
    Config,
    Skeleton,
    MotionClip,
    FormatError,
    DataError,
)
from .hierarchy_parser import parse_hierarchy
from .motion_parser import parse_motion


logger = get_logger("bvh.reader")

_LINE_SPLIT = re.compile(r"\r?\n")


def split_lines(text: str) -> Tuple[List[str], List[int]]:
    """Trim every line and drop empty ones, remembering 1-based source line numbers."""
    lines = []
    numbers = []
    for number, raw in enumerate(_LINE_SPLIT.split(text), start=1):
        line = raw.strip()
        if line:
            lines.append(line)
            numbers.append(number)
    return lines, numbers


def parse_bvh(
    text: str,
    name: Optional[str] = None,
    strict: Optional[bool] = None,
    config: Optional[Config] = None
) -> MotionClip:
    """
    Parse BVH text into a MotionClip.

    Args:
        text: Full file contents
        name: Optional clip name
        strict: Reject a header frame count that disagrees with the rows read.
            Defaults to ``parser.strict`` from the config.
        config: Optional configuration

    Returns:
        MotionClip with skeleton, frame time and frame matrix
    """
    if strict is None:
        config = config or Config()
        strict = bool(config.get("parser.strict", True))

    lines, numbers = split_lines(text)

    if not lines or lines[0] != "HIERARCHY":
        raise FormatError("Invalid BVH: Missing 'HIERARCHY' section")

    try:
        motion_index = lines.index("MOTION")
    except ValueError:
        raise FormatError("Invalid BVH: Missing 'MOTION' section") from None

    root = parse_hierarchy(lines[:motion_index], numbers[:motion_index])
    skeleton = Skeleton(root)

    frame_count, frame_time, frames = parse_motion(lines[motion_index:], numbers[motion_index:])
    if frames.shape[0] == 0:
        frames = frames.reshape(0, skeleton.channel_count)

    if frames.shape[1] != skeleton.channel_count:
        raise DataError(
            f"Frame rows have {frames.shape[1]} values "
            f"but the hierarchy declares {skeleton.channel_count} channels"
        )

    clip = MotionClip(
        skeleton=skeleton,
        frame_time=frame_time,
        frames=frames,
        name=name,
        declared_frame_count=frame_count,
    )

    if strict:
        clip.validate()
    elif frame_count != clip.frame_count:
        logger.warning(
            f"Header declares {frame_count} frames but {clip.frame_count} rows were read"
        )

    logger.info(
        f"Loaded clip {name or '<text>'}: {skeleton.joint_count} joints, "
        f"{skeleton.channel_count} channels, {clip.frame_count} frames @ {frame_time:.4f}s"
    )
    return clip


def load_bvh(
    path: Union[str, Path],
    strict: Optional[bool] = None,
    config: Optional[Config] = None
) -> MotionClip:
    """Read and parse a BVH file; the clip is named after the file stem."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return parse_bvh(text, name=path.stem, strict=strict, config=config)
