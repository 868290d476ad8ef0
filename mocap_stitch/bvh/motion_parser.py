"""Motion section parser - frame count, frame time and channel samples"""

from typing import List, Optional, Sequence, Tuple
import numpy as np

from mocap_stitch.core import get_logger, FormatError, DataError


logger = get_logger("bvh.motion")


def _header_value(lines: Sequence[str], index: int, token: int, label: str) -> str:
    if index >= len(lines):
        raise FormatError(f"Motion section is missing the '{label}' line")

    parts = lines[index].split()
    if len(parts) <= token:
        raise FormatError(f"Malformed '{label}' line: {lines[index]!r}")
    return parts[token]


def parse_motion(
    lines: Sequence[str],
    line_numbers: Optional[Sequence[int]] = None
) -> Tuple[int, float, np.ndarray]:
    """
    Parse a MOTION section.

    Index 0 is the MOTION keyword, index 1 the "Frames: N" line and index 2
    the "Frame Time: T" line. Every following line is one frame row.
    Non-numeric and non-finite tokens ("nan", "inf") fail immediately
    rather than reaching the frame matrix.

    Args:
        lines: Trimmed, non-empty lines, starting with the MOTION keyword
        line_numbers: Optional source line numbers for error messages

    Returns:
        (frame_count, frame_time, frames) where frames has shape (rows, width)
    """
    def source_line(index: int) -> Optional[int]:
        if line_numbers is None or index >= len(line_numbers):
            return None
        return line_numbers[index]

    count_token = _header_value(lines, 1, 1, "Frames:")
    time_token = _header_value(lines, 2, 2, "Frame Time:")

    try:
        frame_count = int(count_token)
    except ValueError:
        raise FormatError(f"Frame count is not an integer: {count_token!r}", source_line(1)) from None
    try:
        frame_time = float(time_token)
    except ValueError:
        raise FormatError(f"Frame time is not a number: {time_token!r}", source_line(2)) from None

    if frame_count < 0:
        raise DataError(f"Negative frame count: {frame_count}", source_line(1))
    if not np.isfinite(frame_time) or frame_time <= 0:
        raise DataError(f"Frame time must be positive, got {frame_time}", source_line(2))

    rows: List[List[float]] = []
    width = None
    for index in range(3, len(lines)):
        try:
            row = [float(token) for token in lines[index].split()]
        except ValueError:
            raise DataError(
                f"Non-numeric value in frame {len(rows)}", source_line(index)
            ) from None
        if not np.all(np.isfinite(row)):
            raise DataError(
                f"Non-finite value in frame {len(rows)}", source_line(index)
            )

        if width is None:
            width = len(row)
        elif len(row) != width:
            raise DataError(
                f"Frame {len(rows)} has {len(row)} values, expected {width}",
                source_line(index)
            )
        rows.append(row)

    frames = np.array(rows, dtype=np.float64).reshape(len(rows), width or 0)

    logger.debug(f"Parsed motion: {frame_count} frames declared, {len(rows)} read, frame time {frame_time}")
    return frame_count, frame_time, frames
