#!/usr/bin/env python

import argparse
import sys
from config import LOG_FILE, LOG_LEVEL, SCAN_CONFIG_FILE, load_settings
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from core.scanner import run_scan
from core.stats import format_report
from loguru import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagscan",
        description="Walk music directories, count files by type and read audio tags.",
    )
    parser.add_argument("--config", default=SCAN_CONFIG_FILE, help="Settings file (default: %(default)s)")
    parser.add_argument("--verbose", action="store_true", default=None, help="Report every directory and track")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Console log level (default: %(default)s)")
    parser.add_argument("--log-file", default=LOG_FILE, help="Also write a detailed log to this file")
    parser.add_argument("--skip-estimate", action="store_true", help="Only run the real scan")
    return parser


def print_report(stats) -> None:
    for line in format_report(stats):
        print(line, flush=True)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        settings = load_settings(args.config, verbose_override=args.verbose)
    except ConfigurationError as e:
        print(e)
        logger.bind(config=str(args.config)).debug("Configuration rejected")
        return 1

    try:
        for stats in run_scan(settings, skip_estimate=args.skip_estimate):
            print_report(stats)
    except KeyboardInterrupt:
        print("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
