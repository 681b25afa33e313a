#!/usr/bin/env python3
"""
Run a digit query against the draw dataset from the command line.

Usage:
    python scripts/run_analysis.py 310
    python scripts/run_analysis.py 31 --mode prefix --window 30 --json
    python scripts/run_analysis.py 310 --source https://example.org/draws.json
"""
import argparse
import os
import sys

from loguru import logger
from pydantic import ValidationError

# Load environment variables from .env if available
try:
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except ImportError:
    pass


def ensure_project_root_on_path() -> None:
    """Ensure repository root is on sys.path when running from subdirs."""
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find digit occurrences and predict follow-on numbers")
    parser.add_argument("query", help="1-3 digit query, e.g. 310")
    parser.add_argument("--mode", choices=["contains", "prefix"], default="contains")
    parser.add_argument("--window", type=int, default=None, help="Recency window in days")
    parser.add_argument("--top", type=int, default=None, help="Predicted numbers per pattern")
    parser.add_argument("--source", default=None, help="JSON file or URL (overrides config)")
    parser.add_argument("--config", default=None, help="Path to config.ini")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    ensure_project_root_on_path()

    from lottolens.config import get_settings
    from lottolens.engine import AnalysisOptions, LottoLensError, analyze
    from lottolens.loader import load_record_store
    from lottolens.report import format_report

    settings = get_settings(args.config)
    try:
        store = load_record_store(args.source or settings.data_source, timeout=settings.fetch_timeout)
        options = AnalysisOptions(
            mode=args.mode,
            recency_window_days=args.window if args.window is not None else settings.recency_window_days,
            query_width=settings.query_width,
            number_width=settings.number_width,
            threshold=settings.threshold,
            top_n=args.top if args.top is not None else settings.top_n,
        )
        result = analyze(store, args.query, options)
    except LottoLensError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid analysis options: {e}")
        return 1

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(format_report(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
