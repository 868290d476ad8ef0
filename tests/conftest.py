"""Shared BVH fixtures."""

import numpy as np
import pytest

from mocap_stitch.core import Joint, Skeleton, MotionClip


HIP_SPINE_BVH = """HIERARCHY
ROOT Hip
{
    OFFSET 0 0 0
    CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
    JOINT Spine
    {
        OFFSET 0 2 0
        CHANNELS 3 Zrotation Xrotation Yrotation
    }
}
MOTION
Frames: 2
Frame Time: 0.033
0 0 0 0 0 0 0 0 0
1 0 0 90 0 0 0 0 0
"""

ARM_BVH = """HIERARCHY
ROOT Hips
{
\tOFFSET 0.0 0.0 0.0
\tCHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
\tJOINT LeftUpLeg
\t{
\t\tOFFSET 1.5 -0.5 0.0
\t\tCHANNELS 3 Zrotation Xrotation Yrotation
\t\tEnd Site
\t\t{
\t\t\tOFFSET 0.0 -4.0 0.0
\t\t}
\t}
\tJOINT Chest
\t{
\t\tOFFSET 0.0 3.0 0.25
\t\tCHANNELS 3 Zrotation Xrotation Yrotation
\t\tJOINT Head
\t\t{
\t\t\tOFFSET 0.0 2.0 0.0
\t\t\tCHANNELS 3 Zrotation Xrotation Yrotation
\t\t\tEnd Site
\t\t\t{
\t\t\t\tOFFSET 0.0 1.0 0.0
\t\t\t}
\t\t}
\t}
}
MOTION
Frames: 3
Frame Time: 0.0333333
0.0 10.0 0.0 0.0 0.0 0.0 5.0 0.0 0.0 0.0 0.0 0.0 0.0 0.0 0.0
0.5 10.1 0.2 1.0 2.0 3.0 6.0 0.0 0.0 0.0 10.0 0.0 0.0 0.0 5.0
1.0 10.0 0.4 2.0 4.0 6.0 7.0 0.0 0.0 0.0 20.0 0.0 0.0 0.0 10.0
"""

ROOT_CHANNELS = ["Xposition", "Yposition", "Zposition", "Zrotation", "Xrotation", "Yrotation"]


def make_root_clip(rows, frame_time=0.033, channels=None, name=None):
    """Clip with a single animated root joint and one child end site."""
    root = Joint("Root", channels=list(channels or ROOT_CHANNELS))
    root.add_child(Joint("EndSite", offset=[0.0, 1.0, 0.0]))
    return MotionClip(
        skeleton=Skeleton(root),
        frame_time=frame_time,
        frames=np.array(rows, dtype=np.float64),
        name=name,
    )


@pytest.fixture
def hip_spine_text():
    return HIP_SPINE_BVH


@pytest.fixture
def arm_text():
    return ARM_BVH
