"""Core systems - config, logging, errors, skeleton, clip"""

from .config import Config, DEFAULT_CONFIG
from .logging import setup_logging, reset_logging, get_logger
from .errors import (
    MotionError,
    ParseError,
    FormatError,
    DataError,
    AlignmentError,
    FrameRateMismatchError,
)
from .skeleton import (
    Joint,
    Skeleton,
    ChannelSlot,
    POSITION_CHANNELS,
    ROTATION_CHANNELS,
    KNOWN_CHANNELS,
    AXIS_INDEX,
    END_SITE_NAME,
    is_position_channel,
    is_rotation_channel,
)
from .clip import MotionClip

__all__ = [
    "Config", "DEFAULT_CONFIG", "setup_logging", "reset_logging", "get_logger",
    "MotionError", "ParseError", "FormatError", "DataError",
    "AlignmentError", "FrameRateMismatchError",
    "Joint", "Skeleton", "ChannelSlot",
    "POSITION_CHANNELS", "ROTATION_CHANNELS", "KNOWN_CHANNELS",
    "AXIS_INDEX", "END_SITE_NAME",
    "is_position_channel", "is_rotation_channel",
    "MotionClip",
]
