"""Joint tree and skeleton channel layout.

A BVH skeleton is a tree of joints. Each joint stores its offset from the
parent and the names of the channels it animates. The order in which joints
are visited (pre-order, children in document order) fixes the column layout
of every frame in the motion section, so the traversal lives here and is
shared by the parsers, the pose evaluator and the blend generator.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import numpy as np


POSITION_CHANNELS = ("Xposition", "Yposition", "Zposition")
ROTATION_CHANNELS = ("Xrotation", "Yrotation", "Zrotation")
KNOWN_CHANNELS = POSITION_CHANNELS + ROTATION_CHANNELS

AXIS_INDEX = {"X": 0, "Y": 1, "Z": 2}

END_SITE_NAME = "EndSite"


def is_position_channel(channel: str) -> bool:
    return channel in POSITION_CHANNELS


def is_rotation_channel(channel: str) -> bool:
    return channel in ROTATION_CHANNELS


@dataclass(eq=False)
class Joint:
    """A single joint in the hierarchy.

    Topology is fixed once parsing finishes. The parent reference is a plain
    back-pointer; children are owned by their parent.
    """
    name: str
    offset: np.ndarray = field(default_factory=lambda: np.zeros(3))
    channels: List[str] = field(default_factory=list)
    parent: Optional["Joint"] = field(default=None, repr=False)
    children: List["Joint"] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.offset = np.asarray(self.offset, dtype=np.float64).reshape(3)

    @property
    def length(self) -> float:
        """Bone length, the distance from the parent joint."""
        return float(np.linalg.norm(self.offset))

    @property
    def channel_order(self) -> str:
        """Rotation axes in declared order, e.g. "ZXY"."""
        return "".join(ch[0] for ch in self.channels if is_rotation_channel(ch))

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_end_site(self) -> bool:
        return self.name == END_SITE_NAME and not self.children and not self.channels

    def add_child(self, joint: "Joint") -> None:
        joint.parent = self
        self.children.append(joint)

    def iter_preorder(self) -> Iterator["Joint"]:
        """Yield this joint and its descendants, parents before children."""
        yield self
        for child in self.children:
            yield from child.iter_preorder()

    def __repr__(self) -> str:
        return (
            f"Joint({self.name!r}, offset={self.offset.tolist()}, "
            f"channels={self.channels}, children={len(self.children)})"
        )


@dataclass(frozen=True)
class ChannelSlot:
    """Where a channel lives in a frame row."""
    column: int
    joint: Joint
    channel: str


class Skeleton:
    """Read-only view over a joint tree with its frame column layout."""

    def __init__(self, root: Joint):
        if root.parent is not None:
            raise ValueError(f"Joint {root.name!r} is not a root joint")

        self.root = root
        self._joints: List[Joint] = list(root.iter_preorder())
        self._column_starts: List[int] = []

        column = 0
        for joint in self._joints:
            self._column_starts.append(column)
            column += len(joint.channels)
        self._channel_count = column

    @property
    def joints(self) -> List[Joint]:
        """All joints in pre-order."""
        return list(self._joints)

    @property
    def joint_count(self) -> int:
        return len(self._joints)

    @property
    def channel_count(self) -> int:
        """Number of columns every frame row must have."""
        return self._channel_count

    @property
    def joint_names(self) -> List[str]:
        return [joint.name for joint in self._joints]

    def find(self, name: str) -> Optional[Joint]:
        """First joint with the given name in pre-order, if any."""
        for joint in self._joints:
            if joint.name == name:
                return joint
        return None

    def index_of(self, joint: Joint) -> int:
        for i, candidate in enumerate(self._joints):
            if candidate is joint:
                return i
        raise ValueError(f"Joint {joint.name!r} is not part of this skeleton")

    def column_range(self, joint: Joint) -> range:
        """Columns occupied by a joint's channels."""
        start = self._column_starts[self.index_of(joint)]
        return range(start, start + len(joint.channels))

    def channel_layout(self) -> List[ChannelSlot]:
        """Column-by-column description of a frame row."""
        slots = []
        for joint, start in zip(self._joints, self._column_starts):
            for i, channel in enumerate(joint.channels):
                slots.append(ChannelSlot(start + i, joint, channel))
        return slots

    def channel_signature(self) -> List[Tuple[int, Tuple[str, ...]]]:
        """Tree shape plus channels, used to check two skeletons share a layout."""
        signature = []
        depths: Dict[int, int] = {id(self.root): 0}
        for joint in self._joints:
            depth = depths[id(joint)]
            for child in joint.children:
                depths[id(child)] = depth + 1
            signature.append((depth, tuple(joint.channels)))
        return signature

    def has_same_layout(self, other: "Skeleton") -> bool:
        return self.channel_signature() == other.channel_signature()

    def __repr__(self) -> str:
        return (
            f"Skeleton(root={self.root.name!r}, joints={self.joint_count}, "
            f"channels={self.channel_count})"
        )
