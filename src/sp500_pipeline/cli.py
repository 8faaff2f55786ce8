"""Command-line interface for running the analysis.

Provides the `analyze` subcommand, implemented as `cmd_analyze`, which reads
the CSV source, runs the pipeline and writes the result tables to MongoDB
and/or a directory of CSV files.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from sp500_pipeline.clean.validate import SchemaViolation
from sp500_pipeline.config import Settings, get_settings, validate_settings
from sp500_pipeline.ingest.read_source import read_observations_csv
from sp500_pipeline.load.load_tables import load_tables, write_tables_csv
from sp500_pipeline.logging_config import configure_logging
from sp500_pipeline.pipeline import run_analysis

log = logging.getLogger(__name__)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of the environment settings.

    Raises:
        RuntimeError: if the environment or the overrides fail validation.
    """
    s = get_settings()
    overrides = {
        "analysis_start_year": args.from_year,
        "analysis_end_year": args.to_year,
        "rolling_window_width": args.window,
        "forecast_horizon_years": args.horizon,
        "data_path": args.source,
    }
    return validate_settings(
        replace(s, **{k: v for k, v in overrides.items() if v is not None})
    )


def cmd_analyze(args: argparse.Namespace) -> int:
    """Run the full analysis and write the result tables.

    Args:
        args: argparse namespace with `source`, `from_year`, `to_year`,
            `window`, `horizon`, `out_dir` and `no_mongo`.

    Returns:
        Process exit status (0 on success, 2 on invalid configuration or a
        schema violation).
    """
    try:
        s = _settings_from_args(args)
    except RuntimeError as e:
        log.error("Invalid configuration: %s", e)
        return 2

    raw = read_observations_csv(s.data_path)
    try:
        tables = run_analysis(raw, s)
    except SchemaViolation as e:
        log.error("Input rejected: %s", e)
        return 2

    if args.out_dir is not None:
        write_tables_csv(tables, args.out_dir)
    if not args.no_mongo:
        load_tables(tables, s)

    log.info("Analysis written (%d tables).", len(tables))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="sp500_pipeline")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_analyze = sub.add_parser("analyze")
    p_analyze.add_argument("--source", type=Path, default=None)
    p_analyze.add_argument("--from-year", type=int, default=None)
    p_analyze.add_argument("--to-year", type=int, default=None)
    p_analyze.add_argument("--window", type=int, default=None)
    p_analyze.add_argument("--horizon", type=int, default=None)
    p_analyze.add_argument("--out-dir", type=Path, default=None)
    p_analyze.add_argument("--no-mongo", action="store_true")

    return p


def main() -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(Path("logs/pipeline.log"))

    args = build_parser().parse_args()

    if args.cmd == "analyze":
        raise SystemExit(cmd_analyze(args))
    raise SystemExit(2)


if __name__ == "__main__":
    main()
