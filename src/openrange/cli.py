#!/usr/bin/env python3
"""Command-line interface for the opening-range feature builder."""

from __future__ import annotations

import argparse
import logging
import sys

from openrange.exceptions import ConfigError, DataSourceError, OpenRangeError, StorageError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_build(args: argparse.Namespace) -> int:
    """Build the daily feature table from minute bars."""
    from openrange.commands.build_features import (config_from_paths,
                                                   load_build_features_config,
                                                   run_build_features)
    from openrange.output import format_summary

    try:
        if args.config:
            config = load_build_features_config(args.config)
        elif args.input:
            if not args.output:
                print("Error: --out is required when --in is given")
                return 1
            config = config_from_paths(args.input, args.output, args.log_level or "WARNING")
        else:
            print("Error: provide --config or --in/--out")
            return 1
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    _configure_logging(args.log_level or config.log_level)

    try:
        result, summary = run_build_features(config)
    except DataSourceError as e:
        print(f"Data source error: {e}")
        return 1
    except StorageError as e:
        print(f"Failed to write output: {e}")
        return 1
    except OpenRangeError as e:
        print(f"Error: {e}")
        return 1

    if config.output_path is not None:
        print(f"Wrote {len(result.daily_rows)} rows to {config.output_path}")
    print(format_summary(summary))
    return 0


def cmd_demo(args: argparse.Namespace) -> int:
    """Run the pipeline on the built-in sample day."""
    from openrange.commands.demo import run_demo

    _configure_logging(args.log_level or "WARNING")
    print(run_demo())
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Transform 1-minute intraday bars into daily feature targets.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Build command
    build_parser = subparsers.add_parser(
        "build", help="Build daily features from a bar file"
    )
    build_parser.add_argument("--in", dest="input", help="Input CSV file path")
    build_parser.add_argument("--out", dest="output", help="Output CSV file path")
    build_parser.add_argument("-c", "--config", help="Path to YAML configuration file")
    build_parser.add_argument(
        "--log-level", default=None, help="Logging level (default: WARNING)"
    )

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo", help="Run on a built-in synthetic day"
    )
    demo_parser.add_argument(
        "--log-level", default=None, help="Logging level (default: WARNING)"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "build":
        return cmd_build(args)
    if args.command == "demo":
        return cmd_demo(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
