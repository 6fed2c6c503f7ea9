"""CLI entry point for the tabular profiling engine."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys

from dataprofile.config import DEFAULT_CONFIG, AnalysisConfig
from dataprofile.exceptions import DataProfileError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:] when None).

    Returns:
        Parsed namespace with input_file, output_dir, format, max_size_mb,
        bins, iqr_multiplier, sample_size, strict and verbose.
    """
    parser = argparse.ArgumentParser(
        description="Profile a CSV, TSV or Excel file: column types, missing "
        "values, duplicates, outliers, distributions and a quality score.",
    )
    parser.add_argument(
        "input_file",
        help="Path to the .csv, .tsv, .xlsx or .xls file to analyze.",
    )
    parser.add_argument(
        "--output-dir",
        default="output",
        help="Output directory for the report files (default: output).",
    )
    parser.add_argument(
        "--format",
        default="markdown",
        choices=["markdown", "json", "both"],
        help="Report format (default: markdown).",
    )
    parser.add_argument(
        "--max-size-mb",
        type=float,
        default=None,
        help="Reject inputs larger than this many megabytes (default: 50).",
    )
    parser.add_argument(
        "--bins",
        type=int,
        default=None,
        help="Number of histogram bins for numeric columns (default: 20).",
    )
    parser.add_argument(
        "--iqr-multiplier",
        type=float,
        default=None,
        help="IQR multiplier for outlier bounds (default: 1.5).",
    )
    parser.add_argument(
        "--sample-size",
        type=int,
        default=None,
        help="Non-empty values sampled per column for type inference (default: 100).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject rows whose field count differs from the header.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress to stderr.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalysisConfig:
    """Return the default AnalysisConfig with any CLI overrides applied."""
    overrides = {}
    if args.max_size_mb is not None:
        overrides["max_input_bytes"] = int(args.max_size_mb * 1024 * 1024)
    if args.bins is not None:
        overrides["histogram_bins"] = args.bins
    if args.iqr_multiplier is not None:
        overrides["iqr_multiplier"] = args.iqr_multiplier
    if args.sample_size is not None:
        overrides["sample_size"] = args.sample_size
    return dataclasses.replace(DEFAULT_CONFIG, **overrides)


def main(argv: list[str] | None = None) -> None:
    """Load, analyze and export a report for one input file.

    Args:
        argv: Optional argument list for testing; uses sys.argv when None.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    # Validate that the input file exists early, before heavy imports.
    if not os.path.isfile(args.input_file):
        print(f"Error: file not found: {args.input_file}", file=sys.stderr)
        sys.exit(1)

    try:
        from dataprofile.graph import analyze
        from dataprofile.loader import load_file
        from dataprofile.report_generator import generate_report, write_json_report

        config = build_config(args)
        dataset = load_file(args.input_file, config=config, strict=args.strict)
        report = analyze(dataset, config)

        paths: list[str] = []
        if args.format in ("markdown", "both"):
            source_name = os.path.basename(args.input_file)
            paths.append(generate_report(report, args.output_dir, source_name=source_name))
        if args.format in ("json", "both"):
            paths.append(write_json_report(report, args.output_dir))

        for path in paths:
            print(f"Report saved to: {path}")

    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)
    except (DataProfileError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
