"""Clip Aligner - re-bases a clip's root trajectory onto another clip's end.

Only the horizontal rigid transform is solved: a yaw rotation about the
vertical axis plus a translation in the XZ ground plane. Vertical root
height is copied from the clip being aligned, frame by frame. Non-root
channels are left as they are because they are expressed relative to the
root.
"""

from dataclasses import dataclass, field
from typing import Dict
import numpy as np

from mocap_stitch.core import (
    get_logger,
    Joint,
    MotionClip,
    AlignmentError,
    AXIS_INDEX,
    is_position_channel,
    is_rotation_channel,
)
from .quaternions import (
    euler_to_quaternion,
    quaternion_to_euler,
    quaternion_multiply,
    quaternion_inverse,
    quaternion_angle,
    rotate_vector,
    yaw_quaternion,
    identity_quaternion,
)


@dataclass
class RootChannels:
    """Frame columns of the root joint's position and rotation channels."""
    position: Dict[str, int] = field(default_factory=dict)  # axis -> column
    rotation: Dict[str, int] = field(default_factory=dict)  # axis -> column
    order: str = ""

    @classmethod
    def from_joint(cls, root: Joint) -> "RootChannels":
        # The root's channels are the first columns of every frame
        channels = cls(order=root.channel_order)
        for column, channel in enumerate(root.channels):
            if is_position_channel(channel):
                channels.position[channel[0]] = column
            elif is_rotation_channel(channel):
                channels.rotation[channel[0]] = column
        return channels

    def read_position(self, row: np.ndarray) -> np.ndarray:
        position = np.zeros(3)
        for axis, column in self.position.items():
            position[AXIS_INDEX[axis]] = row[column]
        return position

    def read_rotation(self, row: np.ndarray) -> np.ndarray:
        angles = np.zeros(3)
        for axis, column in self.rotation.items():
            angles[AXIS_INDEX[axis]] = row[column]
        return euler_to_quaternion(angles, self.order)

    def write_rotation(self, row: np.ndarray, q: np.ndarray) -> None:
        if not self.order:
            return
        angles = quaternion_to_euler(q, self.order)
        for axis, column in self.rotation.items():
            row[column] = angles[AXIS_INDEX[axis]]


@dataclass
class AlignmentResult:
    """Aligned frames plus the rigid transform that produced them."""
    frames: np.ndarray
    delta_rotation: np.ndarray  # Quaternion (w, x, y, z), yaw only
    delta_translation: np.ndarray  # (3,) shift of the first frame, Y always 0

    @property
    def yaw_degrees(self) -> float:
        """Signed heading change about +Y."""
        w, _, y, _ = self.delta_rotation
        return float(np.degrees(2.0 * np.arctan2(y, w)))

    @property
    def is_identity(self) -> bool:
        return (
            quaternion_angle(self.delta_rotation) < 1e-6
            and float(np.linalg.norm(self.delta_translation)) < 1e-6
        )


class ClipAligner:
    """
    Align clip B so that it continues from the end of clip A.

    Features:
    - Yaw-only heading match, independent of the root's channel order
    - XZ translation so B starts where A ends
    - Vertical height preserved from B
    """

    def __init__(self):
        self.logger = get_logger("motion.align")

    def root_channels(self, clip_a: MotionClip, clip_b: MotionClip) -> RootChannels:
        """Root column indices shared by both clips."""
        root_a = clip_a.skeleton.root
        root_b = clip_b.skeleton.root
        if list(root_a.channels) != list(root_b.channels):
            raise AlignmentError(
                f"Root channels differ: {root_a.channels} vs {root_b.channels}"
            )
        return RootChannels.from_joint(root_a)

    def align(self, clip_a: MotionClip, clip_b: MotionClip) -> AlignmentResult:
        """
        Re-base clip B's root trajectory onto clip A's last frame.

        Args:
            clip_a: Clip that plays first
            clip_b: Clip to continue with; its frames are not modified

        Returns:
            AlignmentResult with a new frame matrix for clip B
        """
        if clip_a.frame_count == 0 or clip_b.frame_count == 0:
            raise AlignmentError("Cannot align an empty clip")

        channels = self.root_channels(clip_a, clip_b)
        return self.align_frames(clip_a.frames[-1], clip_b.frames, channels)

    def align_frames(
        self,
        anchor_row: np.ndarray,
        frames: np.ndarray,
        channels: RootChannels
    ) -> AlignmentResult:
        """Align a frame matrix so its first row continues from anchor_row."""
        anchor_a_position = channels.read_position(anchor_row)
        anchor_a_rotation = channels.read_rotation(anchor_row)
        anchor_b_position = channels.read_position(frames[0])
        anchor_b_rotation = channels.read_rotation(frames[0])

        if channels.order:
            delta = quaternion_multiply(
                yaw_quaternion(anchor_a_rotation),
                quaternion_inverse(yaw_quaternion(anchor_b_rotation))
            )
        else:
            delta = identity_quaternion()

        aligned = np.array(frames, dtype=np.float64, copy=True)

        for row in aligned:
            position = channels.read_position(row)
            offset = rotate_vector(delta, position - anchor_b_position)
            new_position = anchor_a_position + offset

            # Height stays as captured in clip B
            for axis in ("X", "Z"):
                if axis in channels.position:
                    row[channels.position[axis]] = new_position[AXIS_INDEX[axis]]

            if channels.order:
                rotation = quaternion_multiply(delta, channels.read_rotation(row))
                channels.write_rotation(row, rotation)

        delta_translation = channels.read_position(aligned[0]) - anchor_b_position
        delta_translation[1] = 0.0

        result = AlignmentResult(
            frames=aligned,
            delta_rotation=delta,
            delta_translation=delta_translation,
        )
        self.logger.debug(
            f"Aligned {len(aligned)} frames: yaw {result.yaw_degrees:.2f}°, "
            f"shift ({delta_translation[0]:.3f}, {delta_translation[2]:.3f})"
        )
        return result
