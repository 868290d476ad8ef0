"""Clip stitching pipeline - align, blend and concatenate two clips"""

from dataclasses import dataclass
from typing import Dict, Optional

from mocap_stitch.core import (
    get_logger,
    Config,
    MotionClip,
    AlignmentError,
    FrameRateMismatchError,
)
from .clip_aligner import ClipAligner, AlignmentResult
from .blend_generator import BlendGenerator


@dataclass
class StitchResult:
    """Stitched clip plus where its pieces came from."""
    clip: MotionClip
    blend_frames: int
    frames_a: int
    frames_b: int
    alignment: AlignmentResult

    @property
    def blend_start(self) -> int:
        """Index of the first blend frame."""
        return self.frames_a

    @property
    def blend_end(self) -> int:
        """Index one past the last blend frame, i.e. the first frame of clip B."""
        return self.frames_a + self.blend_frames

    def to_dict(self) -> Dict[str, any]:
        return {
            "frames_a": self.frames_a,
            "frames_b": self.frames_b,
            "blend_frames": self.blend_frames,
            "blend_start": self.blend_start,
            "blend_end": self.blend_end,
            "yaw_degrees": self.alignment.yaw_degrees,
            "translation": self.alignment.delta_translation.tolist(),
        }


class ClipStitcher:
    """
    Stitch two clips of the same skeleton into one continuous clip.

    Pipeline:
    1. Check both clips share channel layout and frame time
    2. Align clip B's root onto clip A's last frame
    3. Generate transition frames
    4. Concatenate [A][blend][B]
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transition_duration: Optional[float] = None,
        blend_frames: Optional[int] = None,
        frame_time_tolerance: Optional[float] = None
    ):
        self.logger = get_logger("motion.stitch")
        self.config = config or Config()

        stitch_config = self.config.stitching

        if transition_duration is None:
            transition_duration = stitch_config.get("transition_duration", 0.5)
        if blend_frames is None:
            blend_frames = stitch_config.get("blend_frames")
        if frame_time_tolerance is None:
            frame_time_tolerance = stitch_config.get("frame_time_tolerance", 1e-6)

        self._transition_duration = float(transition_duration)
        self._blend_frames = None if blend_frames is None else int(blend_frames)
        self._frame_time_tolerance = float(frame_time_tolerance)
        self._aligner = ClipAligner()

        if self._transition_duration < 0:
            raise ValueError(f"Transition duration must be >= 0, got {self._transition_duration}")

        policy = (
            f"{self._blend_frames} frames" if self._blend_frames is not None
            else f"{self._transition_duration}s"
        )
        self.logger.info(f"Initialized clip stitcher (transition={policy})")

    @property
    def transition_duration(self) -> float:
        return self._transition_duration

    @property
    def blend_frames(self) -> Optional[int]:
        return self._blend_frames

    def check_compatible(self, clip_a: MotionClip, clip_b: MotionClip) -> float:
        """
        Verify two clips can be stitched and return their shared frame time.

        Raises:
            AlignmentError: Skeleton channel layouts differ or a clip is empty
            FrameRateMismatchError: Frame times differ beyond the tolerance
        """
        if clip_a.frame_count == 0 or clip_b.frame_count == 0:
            raise AlignmentError("Cannot stitch an empty clip")

        skeleton_a = clip_a.skeleton
        skeleton_b = clip_b.skeleton
        if not skeleton_a.has_same_layout(skeleton_b):
            raise AlignmentError(
                f"Skeleton layouts differ: {skeleton_a.joint_count} joints/"
                f"{skeleton_a.channel_count} channels vs {skeleton_b.joint_count} joints/"
                f"{skeleton_b.channel_count} channels"
            )

        if skeleton_a.joint_names != skeleton_b.joint_names:
            self.logger.warning("Joint names differ between clips; using clip A's skeleton")

        if abs(clip_a.frame_time - clip_b.frame_time) > self._frame_time_tolerance:
            raise FrameRateMismatchError(clip_a.frame_time, clip_b.frame_time)

        return clip_a.frame_time

    def stitch(
        self,
        clip_a: MotionClip,
        clip_b: MotionClip,
        name: Optional[str] = None
    ) -> StitchResult:
        """
        Stitch clip B onto the end of clip A.

        Args:
            clip_a: Clip that plays first
            clip_b: Clip that plays second; it is not modified
            name: Optional name for the stitched clip

        Returns:
            StitchResult with the stitched clip and blend metadata
        """
        frame_time = self.check_compatible(clip_a, clip_b)

        alignment = self._aligner.align(clip_a, clip_b)

        blender = BlendGenerator(
            clip_a.skeleton,
            transition_duration=self._transition_duration,
            blend_frames=self._blend_frames,
        )
        frames, count = blender.concatenate(clip_a.frames, alignment.frames, frame_time)

        stitched = MotionClip(
            skeleton=clip_a.skeleton,
            frame_time=frame_time,
            frames=frames,
            name=name or self._default_name(clip_a, clip_b),
        )

        result = StitchResult(
            clip=stitched,
            blend_frames=count,
            frames_a=clip_a.frame_count,
            frames_b=clip_b.frame_count,
            alignment=alignment,
        )
        self.logger.info(
            f"Stitched {clip_a.frame_count} + {count} blend + {clip_b.frame_count} frames "
            f"(yaw {alignment.yaw_degrees:.1f}°, duration {stitched.duration:.2f}s)"
        )
        return result

    @staticmethod
    def _default_name(clip_a: MotionClip, clip_b: MotionClip) -> Optional[str]:
        if clip_a.name and clip_b.name:
            return f"{clip_a.name}+{clip_b.name}"
        return clip_a.name or clip_b.name


def stitch_clips(
    clip_a: MotionClip,
    clip_b: MotionClip,
    transition_duration: float = 0.5,
    blend_frames: Optional[int] = None
) -> MotionClip:
    """Stitch two clips with explicit settings and return the stitched clip."""
    stitcher = ClipStitcher(
        config=Config.from_dict({}),
        transition_duration=transition_duration,
        blend_frames=blend_frames,
    )
    return stitcher.stitch(clip_a, clip_b).clip
