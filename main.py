#!/usr/bin/env python3
"""Bank Statement Summary Mailer.

This script reads bank statement CSV files, computes the total balance,
average debit and credit amounts and the number of transactions per month,
and emails the summary.

Usage:
    python main.py --csv-file <path_to_csv> [--recipient <address>] [--dry-run]

    python main.py --batch-dir <directory_with_csvs> [--recipient <address>] [--dry-run]

    python main.py --worker  # Run the Celery worker for storage events
"""

import argparse
import sys
from typing import List, Optional

from statement_summary.config.settings import Settings, load_environment
from statement_summary.service import ProcessingResult, StatementService
from statement_summary.utils.exceptions import ConfigurationError
from statement_summary.utils.logger import configure_logging, get_logger
from statement_summary.utils.validators import ValidationError


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Summarize bank statement CSV files and email the results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Summarize one statement and email it to the configured recipient
    python main.py --csv-file txns.csv

    # Print the summary instead of sending it
    python main.py --csv-file txns.csv --dry-run

    # Summarize every CSV in a directory
    python main.py --batch-dir ./statements --recipient someone@example.com

    # Run the worker that handles storage notifications
    python main.py --worker
        """
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        '--csv-file',
        type=str,
        help='Path to single CSV statement to process'
    )
    group.add_argument(
        '--batch-dir',
        type=str,
        help='Directory containing multiple CSV statements to process'
    )
    group.add_argument(
        '--worker',
        action='store_true',
        help='Run the Celery worker that processes storage events'
    )

    parser.add_argument(
        '--recipient',
        type=str,
        default=None,
        help='Destination email address (default: RECIPIENT_EMAIL or EMAIL)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the summary message instead of emailing it'
    )
    parser.add_argument(
        '--env-file',
        type=str,
        default=None,
        help='Path to a .env file to load before reading settings'
    )

    return parser.parse_args(argv)


def report(results: List[ProcessingResult], dry_run: bool) -> int:
    """Print per-statement outcomes and return the exit code."""
    for result in results:
        if result.success:
            if dry_run:
                print(f"--- {result.source}")
                print(result.message)
            else:
                print(f"Sent summary for {result.source} to {result.recipient}")
        else:
            print(f"Error: {result.source} failed at {result.error_stage or 'unknown'} stage: {result.error_message}")

    if not results:
        print("Error: No statements were processed. Check logs for details.")
        return 1
    return 0 if all(result.success for result in results) else 1


def start_worker() -> None:
    """Start the Celery worker for statement processing queues."""
    # Import here so the CLI does not need a broker configuration
    from statement_summary.tasks.celery_app import celery_app

    celery_app.worker_main([
        'worker',
        '--loglevel=info',
        '--queues=statement_processing,storage_events',
    ])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        args = parse_arguments(argv)

        load_environment(args.env_file)
        settings = Settings.from_env()
        configure_logging(settings)
        logger = get_logger("statement_summary.cli")

        if not settings.validate():
            print("Error: Invalid configuration. Check SMTP_PORT, MAX_RETRIES and MAX_FILE_SIZE_MB.")
            return 1

        if args.worker:
            logger.info("Starting statement summary worker")
            start_worker()
            return 0

        service = StatementService(settings, dry_run=args.dry_run)

        if args.csv_file:
            results = [service.process_file(args.csv_file, args.recipient)]
        else:
            results = service.process_directory(args.batch_dir, args.recipient)

        return report(results, args.dry_run)

    except (ConfigurationError, ValidationError) as e:
        print(f"Error: {str(e)}")
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130
    except Exception as e:
        print(f"Unexpected error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
