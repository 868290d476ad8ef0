#!/usr/bin/env python3
"""
mocap-stitch - command line entry point

Inspect BVH files, evaluate single poses, and stitch two clips into one
continuous animation.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from mocap_stitch.core import Config, setup_logging, get_logger, MotionError
from mocap_stitch.bvh import load_bvh
from mocap_stitch.motion import PoseEvaluator, ClipStitcher
from mocap_stitch.export import BVHExporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="mocap-stitch",
        description="Parse, evaluate and stitch BVH motion clips"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to <log_dir>/<name>_<timestamp>.log"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show skeleton and motion statistics")
    info.add_argument("file", type=str, help="BVH file")

    pose = subparsers.add_parser("pose", help="Print the local pose of one frame as JSON")
    pose.add_argument("file", type=str, help="BVH file")
    pose.add_argument("--frame", "-f", type=int, default=0, help="Frame index")

    stitch = subparsers.add_parser("stitch", help="Stitch clip B onto the end of clip A")
    stitch.add_argument("clip_a", type=str, help="First BVH clip")
    stitch.add_argument("clip_b", type=str, help="Second BVH clip")
    stitch.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output filename without extension (default: <a>_<b>)"
    )
    stitch.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (overrides config)"
    )
    stitch.add_argument(
        "--transition", "-t",
        type=float,
        default=None,
        help="Transition duration in seconds (overrides config)"
    )
    stitch.add_argument(
        "--blend-frames", "-n",
        type=int,
        default=None,
        help="Fixed number of blend frames (overrides the duration policy)"
    )

    return parser.parse_args(argv)


def run_info(args: argparse.Namespace, config: Config) -> int:
    clip = load_bvh(args.file, config=config)
    skeleton = clip.skeleton

    print(f"File:        {args.file}")
    print(f"Root:        {skeleton.root.name}")
    print(f"Joints:      {skeleton.joint_count}")
    print(f"Channels:    {skeleton.channel_count}")
    print(f"Frames:      {clip.frame_count}")
    print(f"Frame time:  {clip.frame_time:.6f}s ({clip.fps:.2f} fps)")
    print(f"Duration:    {clip.duration:.3f}s")
    return 0


def run_pose(args: argparse.Namespace, config: Config) -> int:
    clip = load_bvh(args.file, config=config)
    pose = PoseEvaluator.from_clip(clip).evaluate(args.frame)
    print(json.dumps(pose.to_dict(), indent=2))
    return 0


def run_stitch(args: argparse.Namespace, config: Config) -> int:
    logger = get_logger("main")

    clip_a = load_bvh(args.clip_a, config=config)
    clip_b = load_bvh(args.clip_b, config=config)

    stitcher = ClipStitcher(
        config=config,
        transition_duration=args.transition,
        blend_frames=args.blend_frames,
    )
    result = stitcher.stitch(clip_a, clip_b)

    filename = args.output or f"{Path(args.clip_a).stem}_{Path(args.clip_b).stem}"
    exporter = BVHExporter(config, output_dir=args.output_dir)
    output_path = exporter.export(result.clip, filename, metadata=result.to_dict())

    logger.info(f"Wrote {output_path}")
    return 0


COMMANDS = {
    "info": run_info,
    "pose": run_pose,
    "stitch": run_stitch,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)

    try:
        config = Config(args.config)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}")
        return 1

    log_level = "DEBUG" if args.debug else config.get("app.log_level", "INFO")
    setup_logging(
        level=log_level,
        log_file=args.log_file or config.get("app.log_file"),
        log_dir=config.get("app.log_dir", "logs"),
    )
    logger = get_logger("main")

    logger.debug(f"{config.get('app.name', 'mocap-stitch')} v{config.get('app.version', '0.1.0')}")

    try:
        return COMMANDS[args.command](args, config)
    except (MotionError, OSError, IndexError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
