"""Clip export module"""

from .bvh_exporter import BVHExporter

__all__ = ["BVHExporter"]
