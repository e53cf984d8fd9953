"""Command-line entry point for poolnav.

Parses CLI options, sets up logging, and launches the Textual app.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from poolnav.app import PoolNavApp
from poolnav.models.state.config_manager import ConfigManager


def _existing_file(value: str) -> Path:
    """argparse type for paths that must exist."""
    path = Path(value).expanduser()
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"file not found: {value}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poolnav",
        description="Browse pools, hosts, VMs and storage in a navigation tree.",
    )
    parser.add_argument(
        "inventory",
        nargs="?",
        type=_existing_file,
        default=None,
        help="YAML inventory of connections. Defaults to the last one used.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: ~/.config/poolnav/settings.json).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write debug logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the navigation console."""
    args = build_parser().parse_args(argv)

    if args.log_file is not None:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    app = PoolNavApp(
        inventory_path=args.inventory,
        config_manager=ConfigManager(args.config),
    )
    app.run()


if __name__ == "__main__":
    main()
