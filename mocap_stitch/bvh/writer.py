"""BVH writer - serializes a joint tree and frame matrix back to text"""

from typing import List, Optional

from mocap_stitch.core import Joint, MotionClip


def format_number(value: float, precision: Optional[int] = None) -> str:
    """Format a float compactly; None keeps full precision."""
    if precision is None:
        text = repr(float(value))
    else:
        text = f"{float(value):.{precision}f}"
    if "." in text and "e" not in text and "inf" not in text and "nan" not in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def _write_joint(joint: Joint, depth: int, lines: List[str], precision: Optional[int]) -> None:
    indent = "\t" * depth

    if depth == 0:
        lines.append(f"ROOT {joint.name}")
    elif joint.is_end_site:
        lines.append(f"{indent}End Site")
    else:
        lines.append(f"{indent}JOINT {joint.name}")

    lines.append(f"{indent}{{")
    offset = " ".join(format_number(v, precision) for v in joint.offset)
    lines.append(f"{indent}\tOFFSET {offset}")
    if joint.channels:
        lines.append(f"{indent}\tCHANNELS {len(joint.channels)} {' '.join(joint.channels)}")

    for child in joint.children:
        _write_joint(child, depth + 1, lines, precision)

    lines.append(f"{indent}}}")


def write_hierarchy(root: Joint, precision: Optional[int] = None) -> str:
    """Serialize a joint tree as a HIERARCHY section."""
    lines = ["HIERARCHY"]
    _write_joint(root, 0, lines, precision)
    return "\n".join(lines) + "\n"


def write_motion(clip: MotionClip, precision: Optional[int] = None) -> str:
    """Serialize frame time and frames as a MOTION section."""
    lines = [
        "MOTION",
        f"Frames: {clip.frame_count}",
        f"Frame Time: {format_number(clip.frame_time, None)}",
    ]
    for row in clip.frames:
        lines.append(" ".join(format_number(v, precision) for v in row))
    return "\n".join(lines) + "\n"


def write_bvh(clip: MotionClip, precision: Optional[int] = None) -> str:
    """
    Serialize a clip as BVH text.

    Args:
        clip: Clip to write
        precision: Decimal places for offsets and channel values (None = exact)

    Returns:
        BVH file contents
    """
    return write_hierarchy(clip.skeleton.root, precision) + write_motion(clip, precision)
