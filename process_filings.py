#!/usr/bin/env python3
"""
EDINET Statement Extractor CLI

Lists securities reports submitted on EDINET in a date range, extracts their
balance sheet, income statement and cash-flow statement, and publishes the
validated results into the artifact store.

Usage Examples:
    # Process every securities report submitted on one day
    python process_filings.py --start-date 2024-06-21

    # Process a week into a custom store with 8 workers
    python process_filings.py --start-date 2024-06-17 --end-date 2024-06-21 --store-dir ./store --workers 8

    # Process a downloaded archive without calling the API
    python process_filings.py --input S100TEST.zip --filer-code E00001 --filer-name "Example Co." \
        --period-start 2023-04-01 --period-end 2024-03-31
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from src.edinet_downloader import EdinetClient, EdinetError, EdinetFilingSource
from src.processor import (
    ConfigurationError,
    Filing,
    FilingProcessor,
    LocalObjectStore,
    PipelineConfig,
    build_line_items_dataframe,
    create_payload,
    export_line_items,
    get_run_summary,
)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity setting."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )

    # Suppress verbose output from external libraries
    if not verbose:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)


def parse_date(date_string: str) -> str:
    """Validate a YYYY-MM-DD date string."""
    try:
        datetime.strptime(date_string, '%Y-%m-%d')
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date format: {date_string}. Use YYYY-MM-DD")
    return date_string


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description="Extract BS/PL/CF statements from EDINET securities reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  EDINET_API_KEY          Subscription key (required unless --input is used)
  EDINET_STORE_DIR        Artifact store directory
  EDINET_TEMP_DIR         Directory for downloaded archives
  EDINET_MAX_WORKERS      Concurrent filings
  EDINET_REQUEST_TIMEOUT  Per-request timeout in seconds
        """
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        '--start-date',
        type=parse_date,
        help='First submission date to list (YYYY-MM-DD)'
    )
    source_group.add_argument(
        '--input',
        type=Path,
        help='Local EDINET ZIP archive or .xbrl instance to process'
    )

    parser.add_argument(
        '--end-date',
        type=parse_date,
        help='Last submission date to list (default: --start-date)'
    )

    # Metadata for --input
    parser.add_argument('--filer-code', help='EDINET code of the filer (with --input)')
    parser.add_argument('--filer-name', default='', help='Filer name (with --input)')
    parser.add_argument('--doc-id', help='Document id (with --input; default: file stem)')
    parser.add_argument('--period-start', type=parse_date, help='Fiscal period start (with --input)')
    parser.add_argument('--period-end', type=parse_date, help='Fiscal period end (with --input)')

    # Output options
    parser.add_argument(
        '--store-dir',
        type=Path,
        help='Artifact store directory (default: $EDINET_STORE_DIR or ./data/edinet)'
    )
    parser.add_argument(
        '--line-items-out',
        type=Path,
        help='Write all extracted rows to this .csv or .parquet file'
    )

    # Processing options
    parser.add_argument(
        '--workers',
        type=int,
        help='Maximum concurrent filings (default: $EDINET_MAX_WORKERS or 4)'
    )
    parser.add_argument(
        '--timeout',
        type=int,
        help='Request timeout in seconds (default: $EDINET_REQUEST_TIMEOUT or 300)'
    )
    parser.add_argument(
        '--retries',
        type=int,
        help='Retry attempts for failed artifact writes (default: 3)'
    )

    # Logging and output
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress progress bars and non-essential output'
    )

    return parser


def load_config(args) -> PipelineConfig:
    return PipelineConfig.from_env(
        store_dir=args.store_dir,
        max_workers=args.workers,
        request_timeout_seconds=args.timeout,
        publish_retry_attempts=args.retries,
    )


def build_local_filing(args, config: PipelineConfig) -> Filing:
    """Wrap a local archive or instance document as a Filing."""
    if not args.filer_code:
        raise ValueError("--filer-code is required with --input")

    return Filing(
        filer_code=args.filer_code,
        filer_name=args.filer_name,
        doc_id=args.doc_id or args.input.stem,
        period_start=args.period_start or "",
        period_end=args.period_end or "",
        payload=create_payload(str(args.input), config.temp_dir),
    )


def main():
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args)
        store = LocalObjectStore(config.store_dir)

        if args.input:
            filings = [build_local_filing(args, config)]
        else:
            client = EdinetClient(
                config.require_api_key(),
                timeout_seconds=config.request_timeout_seconds,
            )
            source = EdinetFilingSource(client, config.temp_dir)
            filings = source.list_filings(args.start_date, args.end_date or args.start_date)

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"❌ Configuration error: {e}")
        return 2
    except (EdinetError, ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to collect filings: {e}")
        print(f"❌ Error: {e}")
        return 1

    if not filings:
        print("❌ No filings found matching criteria")
        return 1

    try:
        print(f"📥 Processing {len(filings)} filing(s)...")
        processor = FilingProcessor(store, config)
        results = processor.process_filings(filings, show_progress=not args.quiet)
        summary = get_run_summary(results)

        print("\n📊 Processing Summary:")
        print(f"   Total filings: {summary['total_filings']}")
        print(f"   Successful: {summary['successful']}")
        print(f"   Failed: {summary['failed']}")
        print(f"   Success rate: {summary['success_rate']:.1f}%")
        for statement_code, counts in summary['statements'].items():
            print(f"   {statement_code}: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
        print(
            f"   Artifacts published: {summary['artifacts']['published']}, "
            f"skipped existing: {summary['artifacts']['skipped_existing']}"
        )

        if summary['failed'] > 0:
            print(f"\n❌ Failed filings:")
            for error in summary['errors']:
                print(f"   • {error}")

        if args.line_items_out:
            df = build_line_items_dataframe(results)
            path = export_line_items(df, args.line_items_out)
            print(f"\n📄 Line items written to: {path}")

        print(f"\n📁 Artifacts stored in: {config.store_dir.absolute()}")

        return 0 if summary['failed'] == 0 else 1

    except KeyboardInterrupt:
        print("\n⏹️  Processing cancelled by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        print(f"❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
