"""Motion processing module"""

from .pose_evaluator import PoseEvaluator, Pose, JointPose, forward_kinematics
from .clip_aligner import ClipAligner, AlignmentResult, RootChannels
from .blend_generator import (
    BlendGenerator,
    LerpChannel,
    SlerpRotation,
    build_blend_map,
    blend_frame_count,
)
from .stitcher import ClipStitcher, StitchResult, stitch_clips

__all__ = [
    "PoseEvaluator", "Pose", "JointPose", "forward_kinematics",
    "ClipAligner", "AlignmentResult", "RootChannels",
    "BlendGenerator", "LerpChannel", "SlerpRotation",
    "build_blend_map", "blend_frame_count",
    "ClipStitcher", "StitchResult", "stitch_clips",
]
