#!/usr/bin/env python3
# macdevice/cli.py
"""
macdevice CLI entry point: print what kind of Mac this is.

Behavior:
- Loads configuration (defaults.toml merged with the user config).
- Initializes logging on stderr, plus an optional log file.
- Describes the host, or the identifier given with --model.
- Prints a short text report, or JSON with --json.
"""
import argparse
import logging
import sys
from typing import List, Optional

from macdevice import __version__
from macdevice.config.config import load_config, get as config_get
from macdevice.core.classifier import DeviceClassifier
from macdevice.data.device_types import DeviceReport
from macdevice.log_config import setup_logging

# Project logger
logger = logging.getLogger("macdevice.cli")


# ----------------------------------------------------------
# CLI SETUP
# ----------------------------------------------------------
def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="macdevice",
        description="Identify the Mac model this machine (or a given identifier) is",
    )
    parser.add_argument("--version", action="store_true", help="print version and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model identifier to describe instead of the host (e.g. Mac16,12)",
    )
    parser.add_argument(
        "--mappings",
        type=str,
        default=None,
        help="Path to an alternate model mapping table (JSON)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser.parse_args(argv)


def format_report(report: DeviceReport) -> str:
    """Render a report as aligned "Label: value" lines."""
    if report.has_battery:
        battery = "yes"
        if report.battery_percent is not None:
            battery += f" ({report.battery_percent:.0f}%)"
    else:
        battery = "no"

    rows = [
        ("Model identifier", report.identifier or "(unknown)"),
        ("Category", report.category or "(unknown)"),
        ("Name", report.full_name or "(unknown)"),
        ("Icon", report.icon),
        ("Battery", battery),
    ]
    width = max(len(label) for label, _ in rows) + 1
    return "\n".join(f"{label + ':':<{width}} {value}" for label, value in rows)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for `macdevice` and `python -m macdevice`."""
    args = parse_arguments(argv)

    if args.version:
        print(f"macdevice {__version__}")
        return 0

    config = load_config(args.config)
    if args.mappings:
        config.setdefault("mappings", {})["path"] = args.mappings

    setup_logging(
        level=config_get(config, "log.level", "INFO"),
        debug_mode=args.debug,
        log_file=config_get(config, "log.file", "") or None,
    )
    logger.debug(f"macdevice {__version__} starting")

    classifier = DeviceClassifier.from_config(config)
    report = classifier.describe(args.model)

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
