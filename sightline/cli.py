#!/usr/bin/env python3
"""CLI entry point for sightline.

Usage examples
--------------

    # Replay a COLMAP sparse model directory, logging every frame
    sightline play --data data/sparse/0

    # Same, from an HTTP server, without real-time waits
    sightline play --data http://localhost:8000/ --fast --frames 50

    # Show what the three text resources contain
    sightline inspect --data data/sparse/0

    # Write a synthetic circular trajectory to play with
    sightline synth --output demo/ --frames 120 --radius 4
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import textwrap
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from sightline.config.playback_config import load_playback_config
from sightline.errors import ConfigError, InvalidAngleError, ResourceFetchError, SightlineError
from sightline.playback.player import TrajectoryPlayer
from sightline.playback.sink import LoggingSink
from sightline.playback.state import PlaybackPhase
from sightline.poses.source import (
    CAMERA_INTRINSICS,
    CAMERA_TRAJECTORY,
    POINTS,
    open_source,
)
from sightline.poses.writer import circular_trajectory, export_images_txt
from sightline.utils.logging_config import setup_logging

logger = logging.getLogger("sightline.cli")

DATA_ENV_VAR = "SIGHTLINE_DATA"

EXIT_OK = 0
EXIT_HALTED = 1
EXIT_CONFIG = 2


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sightline",
        description="Replay a reconstructed camera trajectory and trace its field of view against walls.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            --data accepts a directory holding cameras.txt / images.txt /
            points3D.txt, or an http(s) base URL serving them. It defaults
            to $SIGHTLINE_DATA (a .env file in the working directory is
            read first).
        """),
    )
    p.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    p.add_argument("--log-file", dest="log_file", help="Also log to this rotating file.")

    sub = p.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Replay the trajectory.")
    play.add_argument("--data", help="Directory or base URL of the text model.")
    play.add_argument("--config", help="JSON config file (default: $SIGHTLINE_CONFIG).")
    play.add_argument("--pose-ref", default=CAMERA_TRAJECTORY, help="Trajectory resource name.")
    play.add_argument("--frames", type=int, dest="frame_count", help="Number of frames to play.")
    play.add_argument("--fov", type=float, dest="field_of_view_degrees", help="Total field of view in degrees.")
    play.add_argument("--slide-ms", type=float, dest="slide_duration_ms", help="Agent slide duration per frame.")
    play.add_argument("--fast", action="store_true", help="No slide or step delays.")
    play.add_argument("--report", help="Write the playback report as JSON to this path.")

    inspect = sub.add_parser("inspect", help="Decode and summarize the text model.")
    inspect.add_argument("--data", help="Directory or base URL of the text model.")

    synth = sub.add_parser("synth", help="Write a synthetic circular images.txt.")
    synth.add_argument("--output", required=True, help="Output directory.")
    synth.add_argument("--frames", type=int, default=120)
    synth.add_argument("--radius", type=float, default=4.0)
    synth.add_argument("--inward", action="store_true", help="Face the circle centre.")

    return p


def _data_location(args: argparse.Namespace) -> str:
    location = args.data or os.getenv(DATA_ENV_VAR)
    if not location:
        raise ConfigError(f"no data location: pass --data or set {DATA_ENV_VAR}")
    return location


async def _play(args: argparse.Namespace) -> int:
    overrides = {
        "frame_count": args.frame_count,
        "field_of_view_degrees": args.field_of_view_degrees,
        "slide_duration_ms": args.slide_duration_ms,
    }
    if args.fast:
        overrides.update(slide_duration_ms=0.0, step_delay_ms=0.0)
    config = load_playback_config(args.config, overrides)

    async with open_source(_data_location(args), resources=config.resources) as source:
        player = TrajectoryPlayer(source, LoggingSink(), config=config)
        report = await player.play(args.pose_ref, config.frame_count)

    if args.report:
        Path(args.report).write_text(json.dumps(report.to_dict(), indent=2))
        logger.info("Wrote report to %s", args.report)

    return EXIT_HALTED if report.final_phase is PlaybackPhase.HALTED else EXIT_OK


async def _inspect(args: argparse.Namespace) -> int:
    async with open_source(_data_location(args)) as source:
        for name, loader in (
            (CAMERA_INTRINSICS, source.load_intrinsics),
            (CAMERA_TRAJECTORY, source.load_trajectory),
            (POINTS, source.load_points),
        ):
            try:
                records = await loader()
            except ResourceFetchError as e:
                print(f"{name:18s} unavailable ({e.reason})")
                continue
            print(f"{name:18s} {len(records)} records")
    return EXIT_OK


def _synth(args: argparse.Namespace) -> int:
    poses = circular_trajectory(args.frames, radius=args.radius, inward=args.inward)
    path = export_images_txt(Path(args.output) / "images.txt", poses)
    print(f"Wrote {len(poses)} poses to {path}")
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    args = _build_parser().parse_args(argv)
    setup_logging(debug=args.debug, log_file=args.log_file)

    try:
        if args.command == "play":
            return asyncio.run(_play(args))
        if args.command == "inspect":
            return asyncio.run(_inspect(args))
        return _synth(args)
    except (ConfigError, InvalidAngleError) as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG
    except SightlineError as e:
        logger.error("%s", e)
        return EXIT_HALTED


if __name__ == "__main__":
    sys.exit(main())
