"""BVH text format - parsing and serialization"""

from .hierarchy_parser import HierarchyParser, parse_hierarchy
from .motion_parser import parse_motion
from .reader import parse_bvh, load_bvh, split_lines
from .writer import write_bvh, write_hierarchy, write_motion, format_number

__all__ = [
    "HierarchyParser", "parse_hierarchy",
    "parse_motion",
    "parse_bvh", "load_bvh", "split_lines",
    "write_bvh", "write_hierarchy", "write_motion", "format_number",
]
