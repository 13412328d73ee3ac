import argparse
from dataclasses import dataclass


@dataclass
class LineWalkerConfig:
    """Configuration for a walking session and the replay CLI."""

    point_count: int = 5
    spacing: float = 10.0
    smoothing_window: int = 3
    default_heading: float = 0.0
    required_accuracy: float = 50.0
    acceptable_accuracy: float = 100.0
    log_level: str = "WARNING"
    metrics: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "LineWalkerConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            point_count=args.points,
            spacing=args.spacing,
            smoothing_window=args.window,
            log_level=args.log_level,
            metrics=args.metrics,
        )
