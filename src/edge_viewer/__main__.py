#!/usr/bin/env python3
"""
Edge Viewer Runner
==================

Headless demo run of the edge viewer.

This script:
    1. Loads configuration and sets up logging
    2. Displays the given image (or the sample fallback chain)
    3. Runs the frame statistics simulation for a fixed duration
    4. Logs formatted stats every second
    5. Optionally exports the side-by-side frame

Usage:
    python -m edge_viewer --duration 5
    python -m edge_viewer --image photo.jpg --export ./exports
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from edge_viewer.config import load_config, setup_logging
from edge_viewer.imaging.export import ExportError
from edge_viewer.imaging.loader import ImageLoadError
from edge_viewer.viewer import EdgeViewer, format_stats


logger = logging.getLogger("edge_viewer")


async def run_demo(
    viewer: EdgeViewer,
    duration: float,
    report_interval: float = 1.0,
) -> dict:
    """
    Run the simulation for a fixed duration.

    Args:
        viewer: Viewer to drive
        duration: Seconds to simulate
        report_interval: Seconds between stats reports

    Returns:
        Final formatted stats
    """
    viewer.start_simulation()
    loop = asyncio.get_running_loop()
    end_time = loop.time() + duration

    try:
        while True:
            remaining = end_time - loop.time()
            if remaining <= 0:
                break
            await asyncio.sleep(min(report_interval, remaining))

            labels = viewer.formatted_stats()
            logger.info(
                f"fps={labels['fps']} | frames={labels['frame_count']} | "
                f"processing={labels['processing_time']} | "
                f"resolution={labels['resolution']}"
            )
    finally:
        viewer.stop_simulation()

    return format_stats(viewer.stats)


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run the edge viewer frame simulation",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml",
    )
    parser.add_argument(
        "--image",
        default=None,
        help="Image file to display (default: sample fallback chain)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=3.0,
        help="Simulation duration in seconds (default: 3)",
    )
    parser.add_argument(
        "--export",
        default=None,
        metavar="DIR",
        help="Export the final frame pair into DIR",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level",
    )

    args = parser.parse_args(argv)

    settings = load_config(args.config)
    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging(settings)

    viewer = EdgeViewer(settings)

    if args.image:
        try:
            viewer.load_image_file(args.image)
        except ImageLoadError as e:
            logger.error(f"Failed to load image: {e}")
            return 1
    else:
        viewer.load_sample_image()

    logger.info(f"Source: {viewer.source}, running for {args.duration:.1f}s")

    try:
        final = asyncio.run(run_demo(viewer, args.duration))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    logger.info("=" * 60)
    logger.info("RUN SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Frames:          {final['frame_count']}")
    logger.info(f"Last FPS:        {final['fps']}")
    logger.info(f"Last processing: {final['processing_time']}")
    logger.info(f"Resolution:      {final['resolution']}")

    if args.export:
        try:
            path = viewer.export_frame(args.export)
        except ExportError as e:
            logger.error(f"Export failed: {e}")
            return 1
        logger.info(f"Exported:        {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
