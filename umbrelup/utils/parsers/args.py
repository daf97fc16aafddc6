"""Argument Parser for the UmbrelUp Package."""

import argparse
from pathlib import Path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="umbrelup",
        description="Install Docker and run the Umbrel container on this host.",
    )

    parser.add_argument(
        "--attach",
        action="store_true",
        help="Run the container in the foreground and remove it when it exits.",
    )
    parser.add_argument(
        "--socket",
        type=Path,
        help="Path to the container runtime socket.",
    )
    parser.add_argument(
        "--verbosity",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Set logging level.",
    )

    return parser.parse_args(argv)
