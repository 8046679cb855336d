"""
Command line entry point: convert WiX v3 sources in place.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from wixconvert_core.config.settings import ConverterConfig, load_config
from wixconvert_core.fixing.wix3_converter import Wix3Converter
from wixconvert_core.logger import setup_logger
from wixconvert_core.reporting.messaging import CompositeMessaging, LoggingMessaging, MessageCollector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wixconvert",
        description="Convert WiX v3 source files to v4 and fix indentation"
    )
    parser.add_argument("files", nargs="+", help="WiX source files to check")
    parser.add_argument("-c", "--config", help="JSON or YAML configuration file")
    parser.add_argument("--indent", type=int, help="Spaces per nesting level")
    parser.add_argument("--warn", action="append", default=[], metavar="TEST",
                        help="Report this test type as a warning (repeatable)")
    parser.add_argument("--ignore", action="append", default=[], metavar="TEST",
                        help="Ignore this test type (repeatable)")
    parser.add_argument("-f", "--fix", action="store_true",
                        help="Write converted files back to disk")
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument("--log-level", help="Logging level (default from config: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(Path(args.config)) if args.config else ConverterConfig.from_env()
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        setup_logger("wixconvert_core", level=args.log_level or logging.INFO).error(f"Invalid configuration: {e}")
        return 2

    if args.indent is not None:
        config.indentation_amount = args.indent
    config.errors_as_warnings.extend(args.warn)
    config.ignore_errors.extend(args.ignore)
    if args.fix:
        config.save_converted = True

    log = setup_logger("wixconvert_core",
                       log_file=Path(args.log_file) if args.log_file else None,
                       level=args.log_level or config.log_level)

    collector = MessageCollector()
    try:
        converter = Wix3Converter.from_config(config, CompositeMessaging(LoggingMessaging(log), collector))
    except ValueError as e:
        log.error(str(e))
        return 2

    total = 0
    for file_name in args.files:
        total += converter.convert_file(Path(file_name), config.save_converted)

    log.info(collector.summary())
    return 0 if total == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
