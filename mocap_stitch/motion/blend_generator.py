"""Blend Generator - transition frames between two clips"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
import numpy as np

from mocap_stitch.core import (
    get_logger,
    Skeleton,
    AlignmentError,
    is_position_channel,
    is_rotation_channel,
    AXIS_INDEX,
)
from .quaternions import euler_to_quaternion, quaternion_to_euler, slerp


@dataclass(frozen=True)
class LerpChannel:
    """Linearly interpolate one position column."""
    column: int


@dataclass(frozen=True)
class SlerpRotation:
    """Spherically interpolate a joint's three rotation columns as one quaternion."""
    columns: Tuple[int, int, int]  # columns in channel order
    order: str
    joint_name: str = ""


BlendInstruction = Union[LerpChannel, SlerpRotation]


def build_blend_map(skeleton: Skeleton) -> List[BlendInstruction]:
    """
    Build per-column interpolation instructions for a skeleton.

    Position channels are interpolated column by column. The rotation
    channels of a joint are grouped so the interpolation runs on the
    reconstructed quaternion rather than on independent Euler angles.
    """
    instructions: List[BlendInstruction] = []
    for joint in skeleton.joints:
        columns = skeleton.column_range(joint)
        rotation_columns = []
        for column, channel in zip(columns, joint.channels):
            if is_position_channel(channel):
                instructions.append(LerpChannel(column))
            elif is_rotation_channel(channel):
                rotation_columns.append(column)

        if rotation_columns:
            instructions.append(
                SlerpRotation(tuple(rotation_columns), joint.channel_order, joint.name)
            )
    return instructions


def blend_frame_count(transition_duration: float, frame_time: float) -> int:
    """Number of blend frames for a transition of the given length in seconds."""
    if frame_time <= 0:
        raise ValueError(f"Frame time must be positive, got {frame_time}")
    if transition_duration <= 0:
        return 0
    # Guard against 0.1 / 0.0333... landing just above an integer
    return int(math.ceil(transition_duration / frame_time - 1e-9))


class BlendGenerator:
    """
    Synthesize transition frames and concatenate [A][blend][B].

    The blend frame count comes from a fixed transition duration, so a
    transition takes the same wall-clock time at any capture rate.
    ``blend_frames`` replaces that policy with a fixed frame count.
    """

    def __init__(
        self,
        skeleton: Skeleton,
        transition_duration: float = 0.5,
        blend_frames: Optional[int] = None
    ):
        self.logger = get_logger("motion.blend")
        self.skeleton = skeleton
        self.transition_duration = transition_duration
        self.blend_frames = blend_frames
        self.blend_map = build_blend_map(skeleton)

        if blend_frames is not None and blend_frames < 0:
            raise ValueError(f"blend_frames must be >= 0, got {blend_frames}")

    def frame_count_for(self, frame_time: float) -> int:
        if self.blend_frames is not None:
            return int(self.blend_frames)
        return blend_frame_count(self.transition_duration, frame_time)

    def interpolate(self, start: np.ndarray, end: np.ndarray, t: float) -> np.ndarray:
        """
        Interpolate a single frame row.

        Args:
            start: Row at t = 0
            end: Row at t = 1
            t: Blend parameter in [0, 1]

        Returns:
            New row
        """
        width = self.skeleton.channel_count
        if len(start) != width or len(end) != width:
            raise AlignmentError(
                f"Blend rows must have {width} values, got {len(start)} and {len(end)}"
            )

        row = np.array(start, dtype=np.float64, copy=True)
        for instruction in self.blend_map:
            if isinstance(instruction, LerpChannel):
                c = instruction.column
                row[c] = (1.0 - t) * start[c] + t * end[c]
            else:
                q0 = self._row_quaternion(start, instruction)
                q1 = self._row_quaternion(end, instruction)
                angles = quaternion_to_euler(slerp(q0, q1, t), instruction.order)
                for axis, column in zip(instruction.order, instruction.columns):
                    row[column] = angles[AXIS_INDEX[axis]]
        return row

    @staticmethod
    def _row_quaternion(row: np.ndarray, instruction: SlerpRotation) -> np.ndarray:
        angles = np.zeros(3)
        for axis, column in zip(instruction.order, instruction.columns):
            angles[AXIS_INDEX[axis]] = row[column]
        return euler_to_quaternion(angles, instruction.order)

    def generate(self, last_frame: np.ndarray, first_frame: np.ndarray, count: int) -> np.ndarray:
        """
        Generate ``count`` strictly interior blend frames.

        Frame i (1-based) uses t = i / (count + 1), so neither endpoint is
        reproduced exactly.
        """
        width = self.skeleton.channel_count
        if count <= 0:
            return np.zeros((0, width))

        rows = [
            self.interpolate(last_frame, first_frame, i / (count + 1))
            for i in range(1, count + 1)
        ]
        return np.vstack(rows)

    def concatenate(
        self,
        frames_a: np.ndarray,
        frames_b: np.ndarray,
        frame_time: float
    ) -> Tuple[np.ndarray, int]:
        """
        Join two frame matrices with a generated transition.

        Args:
            frames_a: Frames of the first clip
            frames_b: Already aligned frames of the second clip
            frame_time: Shared frame time, used for the duration policy

        Returns:
            (stitched frames, number of blend frames inserted)
        """
        if len(frames_a) == 0 or len(frames_b) == 0:
            raise AlignmentError("Cannot blend an empty clip")

        count = self.frame_count_for(frame_time)
        blend = self.generate(frames_a[-1], frames_b[0], count)

        self.logger.debug(f"Generated {count} blend frames ({len(self.blend_map)} instructions)")
        return np.vstack([frames_a, blend, frames_b]), count
