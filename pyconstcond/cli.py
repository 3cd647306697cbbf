#!/usr/bin/env python3
"""
CLI entrypoint for pyconstcond.

Usage:
    pyconstcond <target...> [options]
    pyconstcond myfile.py
    pyconstcond path/to/project/ --output-sarif results.sarif

Returns:
    0: no constant conditions found
    1: constant conditions reported
    3: Error (target not found, bad config)
"""

import argparse
import logging
import sys
from pathlib import Path

from .analyzer import analyze_paths
from .ci.config import ConstCondConfig
from .ci.sarif import results_to_sarif, write_sarif
from .errors import ConfigError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyconstcond",
        description="pyconstcond: report if/elif conditions that are always True or always False",
    )
    parser.add_argument("targets", nargs="*", type=Path, help="Python files or directories to analyze")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .pyconstcond.yml config file (default: auto-detect in current dir)",
    )
    parser.add_argument(
        "--max-assignments",
        type=int,
        default=None,
        help="Give up on a condition whose case split needs more joint assignments than this",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on internal engine invariant violations instead of skipping the condition",
    )
    parser.add_argument(
        "--z3-confirm",
        action="store_true",
        help="Confirm every reported verdict with Z3 over integer variables",
    )
    parser.add_argument(
        "--output-sarif",
        type=Path,
        default=None,
        help="Write results as SARIF 2.1.0 JSON (for GitHub Code Scanning)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print the effective configuration as YAML and exit",
    )
    return parser


def _load_config(args: argparse.Namespace) -> ConstCondConfig:
    if args.config is not None:
        if not args.config.exists():
            raise ConfigError(f"Config file not found: {args.config}")
        config = ConstCondConfig.load_file(args.config)
    else:
        config = ConstCondConfig.load(Path.cwd())

    # Command-line flags override the file
    if args.max_assignments is not None:
        if args.max_assignments < 1:
            raise ConfigError("--max-assignments must be at least 1")
        config.engine.max_assignments = args.max_assignments
    if args.strict:
        config.engine.strict = True
    if args.z3_confirm:
        config.analysis.z3_confirm = True
    return config


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = _load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 3

    if args.print_config:
        print(config.to_yaml(), end="")
        return 0

    if not args.targets:
        parser.print_usage(sys.stderr)
        print("Error: no targets given", file=sys.stderr)
        return 3

    for target in args.targets:
        if not target.exists():
            print(f"Error: File not found: {target}", file=sys.stderr)
            return 3

    print(f"Analyzing {', '.join(str(t) for t in args.targets)}...")
    result = analyze_paths(args.targets, config)
    print(result.summary())

    if args.output_sarif:
        write_sarif(results_to_sarif(result, Path.cwd()), args.output_sarif)
        print(f"SARIF written to {args.output_sarif}")

    return 1 if result.findings else 0


if __name__ == "__main__":
    sys.exit(main())
