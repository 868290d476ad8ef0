"""Motion clip container"""

from dataclasses import dataclass, field
from typing import Optional
import math
import numpy as np

from .errors import DataError
from .skeleton import Skeleton


@dataclass
class MotionClip:
    """A skeleton together with its sampled channel data.

    ``frames`` has shape (frame_count, skeleton.channel_count); rotation
    channels are stored in degrees as in the source file.
    """
    skeleton: Skeleton
    frame_time: float
    frames: np.ndarray
    name: Optional[str] = None
    declared_frame_count: Optional[int] = field(default=None, repr=False)

    def __post_init__(self):
        self.frames = np.asarray(self.frames, dtype=np.float64)
        if self.frames.ndim == 1 and self.frames.size == 0:
            self.frames = self.frames.reshape(0, self.skeleton.channel_count)
        if self.declared_frame_count is None:
            self.declared_frame_count = len(self.frames)

    @property
    def frame_count(self) -> int:
        return int(self.frames.shape[0])

    @property
    def duration(self) -> float:
        """Clip length in seconds."""
        return self.frame_count * self.frame_time

    @property
    def fps(self) -> float:
        return 1.0 / self.frame_time if self.frame_time > 0 else 0.0

    @property
    def is_valid(self) -> bool:
        return self.frame_count > 0

    def frame_at(self, seconds: float, loop: bool = True) -> int:
        """
        Frame index to show at a playback time.

        Args:
            seconds: Playback time supplied by the caller
            loop: Wrap around at the end instead of holding the last frame

        Returns:
            Frame index in [0, frame_count)
        """
        if self.frame_count == 0:
            raise IndexError("Clip has no frames")

        index = int(math.floor(max(seconds, 0.0) / self.frame_time))
        if loop:
            return index % self.frame_count
        return min(index, self.frame_count - 1)

    def validate(self) -> None:
        """Check frame count and row width against the header and skeleton."""
        if self.frames.ndim != 2:
            raise DataError(f"Frame matrix must be 2-D, got shape {self.frames.shape}")

        if self.declared_frame_count != self.frame_count:
            raise DataError(
                f"Header declares {self.declared_frame_count} frames "
                f"but {self.frame_count} rows were read"
            )

        expected = self.skeleton.channel_count
        if self.frame_count and self.frames.shape[1] != expected:
            raise DataError(
                f"Frame rows have {self.frames.shape[1]} values "
                f"but the hierarchy declares {expected} channels"
            )

        if not np.all(np.isfinite(self.frames)):
            raise DataError("Frame matrix contains non-finite values")

    def copy(self, name: Optional[str] = None) -> "MotionClip":
        return MotionClip(
            skeleton=self.skeleton,
            frame_time=self.frame_time,
            frames=self.frames.copy(),
            name=name or self.name,
        )

    def __repr__(self) -> str:
        return (
            f"MotionClip(name={self.name!r}, frames={self.frame_count}, "
            f"frame_time={self.frame_time}, channels={self.skeleton.channel_count})"
        )
