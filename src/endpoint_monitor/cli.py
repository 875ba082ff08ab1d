"""
Endpoint Monitor CLI
====================
Command-line entry point.

Usage:
    endpoint-monitor endpoints.yaml
    endpoint-monitor endpoints.yaml --log-level DEBUG
"""

import argparse
import logging
import sys
from typing import Sequence

from endpoint_monitor.config import ConfigError, MonitorConfig, load_endpoints
from endpoint_monitor.scheduler import CycleScheduler

log = logging.getLogger("endpoint-monitor")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="endpoint-monitor",
        description="Endpoint Monitor — periodic HTTP availability checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("config", help="YAML file listing the endpoints to probe")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="diagnostic log level (logs go to stderr)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        endpoints = load_endpoints(args.config)
        config = MonitorConfig()
        scheduler = CycleScheduler(endpoints, config=config)
    except (ConfigError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        scheduler.run()
    finally:
        scheduler.executor.close()
    return 0


def run():
    """Entrypoint for the endpoint-monitor console script."""
    sys.exit(main())


if __name__ == "__main__":
    run()
