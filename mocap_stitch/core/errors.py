"""Error types raised by parsing, evaluation and stitching."""

from typing import Optional


class MotionError(Exception):
    """Base class for all mocap_stitch errors."""


class ParseError(MotionError):
    """BVH text could not be turned into a skeleton or frame matrix."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class FormatError(ParseError):
    """Structural problem: missing section keyword, bad nesting, bad declaration."""


class DataError(ParseError):
    """Numeric problem: non-numeric field or channel/column count mismatch."""


class AlignmentError(MotionError):
    """Two clips cannot be aligned or blended together."""


class FrameRateMismatchError(AlignmentError):
    """Two clips were captured at different frame times."""

    def __init__(self, frame_time_a: float, frame_time_b: float):
        self.frame_time_a = frame_time_a
        self.frame_time_b = frame_time_b
        super().__init__(
            f"Frame times differ: {frame_time_a:.6f}s vs {frame_time_b:.6f}s"
        )
