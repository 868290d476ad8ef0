"""Pose Evaluator - turns one frame of channel samples into joint transforms"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import numpy as np

from mocap_stitch.core import (
    get_logger,
    Joint,
    Skeleton,
    MotionClip,
    DataError,
    AXIS_INDEX,
    is_position_channel,
    is_rotation_channel,
)
from .quaternions import euler_to_quaternion, quaternion_multiply, rotate_vector


@dataclass
class JointPose:
    """Local transform of one joint for a single frame."""
    joint: Joint
    position: np.ndarray  # (3,) local translation
    rotation: np.ndarray  # Quaternion (w, x, y, z)

    @property
    def name(self) -> str:
        return self.joint.name


@dataclass
class Pose:
    """Evaluated local transforms for every joint, in skeleton pre-order."""
    frame_index: int
    joints: List[JointPose] = field(default_factory=list)

    @property
    def root(self) -> JointPose:
        return self.joints[0]

    def get(self, name: str) -> Optional[JointPose]:
        """First joint pose with the given joint name."""
        for joint_pose in self.joints:
            if joint_pose.name == name:
                return joint_pose
        return None

    def __getitem__(self, name: str) -> JointPose:
        joint_pose = self.get(name)
        if joint_pose is None:
            raise KeyError(name)
        return joint_pose

    def __len__(self) -> int:
        return len(self.joints)

    def to_dict(self) -> Dict[str, any]:
        """Convert to dictionary for export."""
        return {
            "frame": self.frame_index,
            "joints": [
                {
                    "name": joint_pose.name,
                    "position": joint_pose.position.tolist(),
                    "rotation": joint_pose.rotation.tolist(),
                }
                for joint_pose in self.joints
            ]
        }


class _ColumnCursor:
    """Reads a frame row left to right; running past the end is a DataError."""

    def __init__(self, row: np.ndarray, frame_index: int):
        self._row = row
        self._frame_index = frame_index
        self.position = 0

    def take(self) -> float:
        if self.position >= len(self._row):
            raise DataError(
                f"Frame {self._frame_index} has only {len(self._row)} values; "
                f"the skeleton needs more channels"
            )
        value = float(self._row[self.position])
        self.position += 1
        return value


class PoseEvaluator:
    """
    Evaluate per-frame joint transforms from a frame matrix.

    Evaluation is a pure read: joints and frames are never modified, and
    the caller decides which frame to show.
    """

    def __init__(self, skeleton: Skeleton, frames: np.ndarray):
        self.logger = get_logger("motion.pose")
        self.skeleton = skeleton
        self.frames = np.asarray(frames, dtype=np.float64)

    @classmethod
    def from_clip(cls, clip: MotionClip) -> "PoseEvaluator":
        return cls(clip.skeleton, clip.frames)

    @property
    def frame_count(self) -> int:
        return int(self.frames.shape[0])

    def evaluate(self, frame_index: int) -> Pose:
        """
        Compute local joint transforms for one frame.

        Args:
            frame_index: Row of the frame matrix to evaluate

        Returns:
            Pose with one JointPose per joint in pre-order
        """
        if not 0 <= frame_index < self.frame_count:
            raise IndexError(
                f"Frame index {frame_index} out of range [0, {self.frame_count})"
            )

        row = self.frames[frame_index]
        cursor = _ColumnCursor(row, frame_index)
        pose = Pose(frame_index=frame_index)

        self._evaluate_joint(self.skeleton.root, cursor, pose)

        if cursor.position != len(row):
            raise DataError(
                f"Frame {frame_index} has {len(row)} values but the skeleton "
                f"consumed {cursor.position}"
            )
        return pose

    def _evaluate_joint(self, joint: Joint, cursor: _ColumnCursor, pose: Pose) -> None:
        position = joint.offset.copy()
        angles = np.zeros(3)

        # Channels are read in declared order so columns line up with the parser
        for channel in joint.channels:
            value = cursor.take()
            if is_position_channel(channel):
                position[AXIS_INDEX[channel[0]]] = value
            elif is_rotation_channel(channel):
                angles[AXIS_INDEX[channel[0]]] = value

        rotation = euler_to_quaternion(angles, joint.channel_order)
        pose.joints.append(JointPose(joint=joint, position=position, rotation=rotation))

        for child in joint.children:
            self._evaluate_joint(child, cursor, pose)

    def evaluate_all(self) -> List[Pose]:
        """Evaluate every frame in order."""
        return [self.evaluate(i) for i in range(self.frame_count)]


def forward_kinematics(pose: Pose) -> Dict[int, np.ndarray]:
    """
    Compose local transforms into world-space joint positions.

    Returns:
        Mapping of pre-order joint index to (3,) world position
    """
    world_rotations: Dict[int, np.ndarray] = {}
    world_positions: Dict[int, np.ndarray] = {}
    index_of = {id(joint_pose.joint): i for i, joint_pose in enumerate(pose.joints)}

    for i, joint_pose in enumerate(pose.joints):
        parent = joint_pose.joint.parent
        if parent is None:
            world_positions[i] = joint_pose.position.copy()
            world_rotations[i] = joint_pose.rotation.copy()
            continue

        p = index_of[id(parent)]
        world_positions[i] = world_positions[p] + rotate_vector(world_rotations[p], joint_pose.position)
        world_rotations[i] = quaternion_multiply(world_rotations[p], joint_pose.rotation)

    return world_positions
