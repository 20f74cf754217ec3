#!/usr/bin/env python3
"""
Business Lead Finder
CLI Entry Point

Uses lead_enrich.pipeline for the enrichment run; the API server shares
the same modules.
"""

import logging
import sys
import argparse
from pathlib import Path
from dotenv import load_dotenv

from lead_enrich.batch import DEFAULT_CONCURRENCY
from lead_enrich.io_utils import IngestError
from lead_enrich.logging_utils import setup_logger, set_level
from lead_enrich.pipeline import run_pipeline

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Find owner name, contact email and niche for businesses listed in a CSV/XLSX file'
    )
    parser.add_argument(
        'input_file',
        help='Path to input CSV or XLSX file (needs a website/Website column)'
    )
    parser.add_argument(
        '-o', '--output',
        default='enriched_business_leads.csv',
        help='Path to output enriched CSV file (default: enriched_business_leads.csv)'
    )
    parser.add_argument(
        '--concurrency',
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f'Number of websites fetched in parallel (default: {DEFAULT_CONCURRENCY})'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    return parser


def main(argv=None) -> int:
    """Main CLI entry point"""
    load_dotenv()

    args = build_parser().parse_args(argv)

    if args.verbose:
        set_level(logging.DEBUG)

    if not Path(args.input_file).exists():
        logger.error(f"Input file not found: {args.input_file}")
        return 1

    try:
        stats = run_pipeline(args.input_file, args.output, {"concurrency": args.concurrency})
    except IngestError as e:
        logger.error(f"Could not read input: {e}")
        return 1
    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        return 1

    logger.info(f"Done: {stats}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
