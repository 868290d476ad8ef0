"""BVH motion-capture parsing, pose evaluation and two-clip stitching"""

from .core import (
    Config,
    setup_logging,
    reset_logging,
    get_logger,
    Joint,
    Skeleton,
    MotionClip,
    MotionError,
    ParseError,
    FormatError,
    DataError,
    AlignmentError,
    FrameRateMismatchError,
)
from .bvh import parse_bvh, load_bvh, write_bvh
from .motion import PoseEvaluator, Pose, ClipAligner, BlendGenerator, ClipStitcher, stitch_clips

__version__ = "0.1.0"

__all__ = [
    "Config", "setup_logging", "reset_logging", "get_logger",
    "Joint", "Skeleton", "MotionClip",
    "MotionError", "ParseError", "FormatError", "DataError",
    "AlignmentError", "FrameRateMismatchError",
    "parse_bvh", "load_bvh", "write_bvh",
    "PoseEvaluator", "Pose", "ClipAligner", "BlendGenerator", "ClipStitcher", "stitch_clips",
]
