#!/usr/bin/env python3
"""
Line walking replay tool.

This script replays recorded position samples from a GPX track (or a
synthetic demo walk) through a walking session: the first sample anchors a
walking line, and every sample is then smoothed and projected onto it. Per
sample progress, lateral distance and status are printed.

Requirements:
    pip install gpxpy shapely

"""

from typing import List, Optional, Sequence
import argparse
import logging
import random
import sys

from gpxpy import gpx

from . import __version__
from .config import LineWalkerConfig
from .errors import LineWalkerError
from .geometry import GeoPoint, PositionSample
from .geometry_utils import destination_point
from .line import WalkingLine
from .metrics import log_metrics
from .orientation import format_heading
from .session import SessionUpdate, WalkingSession
from .track import line_to_gpx, samples_from_file

# Configure logging
logger = logging.getLogger("linewalker")

DEMO_START = GeoPoint(latitude=37.7749, longitude=-122.4194)
DEMO_HEADING = 45.0
DEMO_ACCURACY = 5.0
DEMO_SEED = 42


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Replay position samples along a walking line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "filename",
        type=str,
        nargs="?",
        help="GPX track whose points are replayed as position samples",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Replay a synthetic walk instead of a GPX track",
    )
    heading_group = parser.add_mutually_exclusive_group()
    heading_group.add_argument(
        "--heading",
        type=float,
        default=None,
        help="Compass bearing of the line in degrees (default: sample heading, else 0)",
    )
    heading_group.add_argument(
        "--orientation",
        type=float,
        default=None,
        help="Raw device orientation angle; converted to a compass bearing",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=5,
        help="Number of waypoints on the line (default: 5)",
    )
    parser.add_argument(
        "--spacing",
        type=float,
        default=10.0,
        help="Distance between waypoints in meters (default: 10.0)",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=3,
        help="Number of samples in the smoothing window (default: 3)",
    )
    parser.add_argument(
        "--line-output",
        type=str,
        default=None,
        help="Write the walking line as a GPX file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after processing",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"linewalker {__version__}",
    )
    return parser


def setup_logging(config: LineWalkerConfig) -> None:
    """Setup logging configuration."""
    level = getattr(logging, config.log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def generate_demo_samples(
    start: GeoPoint = DEMO_START,
    heading: float = DEMO_HEADING,
    distance: float = 44.0,
    step: float = 2.0,
    jitter: float = 1.5,
    seed: int = DEMO_SEED,
) -> List[PositionSample]:
    """
    Synthesize a jittered walk from start along heading.

    Samples are taken every ``step`` meters up to ``distance``, one second
    apart, each displaced by up to ``jitter`` meters in a random direction.
    The first sample is exactly at ``start`` and reports ``heading``.
    """
    rng = random.Random(seed)
    samples = [
        PositionSample(
            point=start, accuracy=DEMO_ACCURACY, heading=heading, timestamp=0.0
        )
    ]
    count = int(distance // step)
    for i in range(1, count + 1):
        on_line = destination_point(start, heading, i * step)
        noisy = destination_point(
            on_line, rng.uniform(0.0, 360.0), rng.uniform(0.0, jitter)
        )
        samples.append(
            PositionSample(point=noisy, accuracy=DEMO_ACCURACY, timestamp=float(i))
        )
    return samples


def print_line_summary(line: WalkingLine) -> None:
    """Print the waypoints of a freshly built walking line."""
    print(
        f"Walking line: {len(line)} points, {line.length:.1f} m, "
        f"heading {format_heading(line.heading)}"
    )
    for i, point in enumerate(line):
        print(f"  Point {i + 1}: {point} ({i * line.spacing:g} m)")


def print_update(update: SessionUpdate, t0: float) -> None:
    """Print one replayed sample as an aligned progress row."""
    elapsed = update.raw.timestamp - t0
    if update.projection is None:
        print(f"{elapsed:8.1f}s  {update.smoothed.point}  (no line)")
        return
    print(
        f"{elapsed:8.1f}s  {update.projection.percent:5.1f}%  "
        f"{update.projection.lateral_distance:6.1f} m  {update.status.message}"
    )


def replay(
    samples: Sequence[PositionSample],
    config: LineWalkerConfig,
    heading: Optional[float] = None,
    orientation: Optional[float] = None,
    line_output: Optional[str] = None,
) -> WalkingSession:
    """
    Run samples through a walking session, printing each update.

    Args:
        samples: Samples in delivery order; the first one anchors the line
        config: Session configuration
        heading: Explicit compass bearing for the line
        orientation: Raw device orientation angle for the line
        line_output: Optional path to write the walking line as GPX

    Returns:
        The session after all samples were delivered

    Raises:
        ValueError: If there are no samples
        InvalidParameters: If the configured line is unusable
    """
    if not samples:
        raise ValueError("No position samples to replay")

    session = WalkingSession(config)
    line = session.start(samples[0], heading=heading, orientation=orientation)
    print_line_summary(line)

    if line_output is not None:
        with open(line_output, "w", encoding="utf-8") as f:
            f.write(line_to_gpx(line))
        logger.info(f"Wrote walking line to {line_output}")

    t0 = samples[0].timestamp
    for sample in samples:
        print_update(session.update(sample), t0)

    return session


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parses command-line arguments, loads samples and replays them.

    Returns:
        Process exit code
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.filename and not args.demo:
        parser.print_help()
        return 1

    config = LineWalkerConfig.from_args(args)
    setup_logging(config)

    if args.demo:
        samples = generate_demo_samples()
        logger.info(f"Demo mode: {len(samples)} synthetic samples")
    else:
        try:
            samples = samples_from_file(args.filename)
        except FileNotFoundError:
            logger.error(f"GPX file not found: {args.filename}")
            return 1
        except PermissionError:
            logger.error(f"Cannot read GPX file (permission denied): {args.filename}")
            return 1
        except gpx.GPXException as e:
            logger.error(f"Invalid GPX file: {e}")
            return 1
        except LineWalkerError as e:
            logger.error(f"Invalid track point: {e}")
            return 1
        logger.info(f"Loaded {len(samples)} position samples")

    try:
        session = replay(
            samples,
            config,
            heading=args.heading,
            orientation=args.orientation,
            line_output=args.line_output,
        )
    except ValueError as e:
        logger.error(f"Replay failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot write walking line: {e}")
        return 1

    metrics = session.metrics()
    print(
        f"Final progress {metrics.final_progress * 100:.1f}% "
        f"(max {metrics.max_progress * 100:.1f}%), "
        f"mean lateral distance {metrics.mean_lateral_distance:.1f} m"
    )
    log_metrics(metrics, config.metrics)
    return 0


if __name__ == "__main__":
    sys.exit(main())
