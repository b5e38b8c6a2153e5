"""
Command Line Interface for the album pipeline.
"""

import argparse
import logging
from typing import List, Optional

from .config import PipelineConfig
from .inventory import scan_generated
from .processing_progress import ProcessingProgress
from .processor import AlbumProcessor
from .reporter import Reporter
from .sync_generator import AlbumSyncGenerator


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('albumgen')


def get_config(args: argparse.Namespace) -> PipelineConfig:
    """Get configuration from environment and CLI overrides."""
    config = PipelineConfig.from_env()

    if getattr(args, 'root', None):
        config.root = args.root
    if getattr(args, 'originals', None):
        config.originals_dir = args.originals
    if getattr(args, 'generated', None):
        config.generated_dir = args.generated
    if getattr(args, 'logs', None):
        config.logs_dir = args.logs
    if getattr(args, 'db_name', None):
        config.db_name = args.db_name
    if getattr(args, 'timezone', None):
        config.timezone = args.timezone

    return config


def load_config(args: argparse.Namespace, logger: logging.Logger) -> Optional[PipelineConfig]:
    """Build and validate configuration, logging any errors."""
    config = get_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None
    return config


def add_path_arguments(parser: argparse.ArgumentParser) -> None:
    """Add filesystem layout arguments to a parser."""
    paths_group = parser.add_argument_group('Paths')
    paths_group.add_argument('--root', metavar='PATH',
                             help='Base directory for relative paths (default: ALBUMGEN_ROOT or cwd)')
    paths_group.add_argument('--originals', metavar='PATH',
                             help='Originals directory (default: images/originals)')
    paths_group.add_argument('--generated', metavar='PATH',
                             help='Generated output directory (default: images/generated)')
    paths_group.add_argument('--logs', metavar='PATH',
                             help='Run log directory (default: logs)')
    paths_group.add_argument('--timezone', metavar='ZONE',
                             help='IANA timezone for timestamps (default: local time)')


def cmd_process(args: argparse.Namespace) -> int:
    """Execute process command."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger)
    if config is None:
        return 1

    logger.info(f"Originals: {config.originals_path}")
    logger.info(f"Generated: {config.generated_path}")

    if args.show_files:
        logger.info("Show-files mode: will print each file")

    try:
        processor = AlbumProcessor(config, dry_run=args.dry_run, logger=logger)

        progress = None
        if not args.quiet:
            progress = ProcessingProgress(show_files=args.show_files, logger=logger)

        log = processor.run(albums=args.album, progress=progress)

        if not args.quiet:
            print()
            print(f"Status: {log.status.value}")
            print(f"Processed: {log.processed}")
            print(f"Skipped: {log.skipped}")
            print(f"Failed: {log.failed}")
            print(f"Errors: {len(log.errors)}")

        return 0 if log.succeeded else 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Processing failed: {e}")
        return 1


def cmd_sync(args: argparse.Namespace) -> int:
    """Execute sync command."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger)
    if config is None:
        return 1

    logger.info(f"Generated: {config.generated_path}")
    logger.info(f"Database: {config.db_name}")

    try:
        generator = AlbumSyncGenerator(config, dry_run=args.dry_run, logger=logger)
        log = generator.run()
        return 0 if log.succeeded else 1

    except Exception as e:
        logger.exception(f"Sync generation failed: {e}")
        return 1


def cmd_report(args: argparse.Namespace) -> int:
    """Execute report command."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger)
    if config is None:
        return 1

    if not config.generated_path.is_dir():
        logger.error(f"Generated directory not found: {config.generated_path}")
        return 1

    albums = scan_generated(config.generated_path, albums=args.album, logger=logger)

    reporter = Reporter()
    if args.type == 'summary':
        reporter.report_summary(albums)
    elif args.type == 'missing':
        reporter.report_missing(albums)
    elif args.type == 'json':
        reporter.report_json(albums)

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='albumgen',
        description='Album image processing and database sync',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. Process: albumgen process          (originals -> variants, sidecars, manifests)
  2. Sync:    albumgen sync             (generated albums -> sync-db.sh + SQL)
  3. Report:  albumgen report           (inspect the generated tree)

Environment:
  ALBUMGEN_ROOT, ORIGINALS_DIR, GENERATED_DIR, LOGS_DIR, DB_SYNC_DIR,
  SYNC_SCRIPT, DB_NAME, ALBUMGEN_TIMEZONE
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Process command
    process_parser = subparsers.add_parser('process', help='Process new original images')
    process_parser.add_argument('--album', action='append', help='Album(s) to process')
    process_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    process_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    process_parser.add_argument('--show-files', action='store_true',
                                help='Print each file as processed with result')
    process_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_path_arguments(process_parser)

    # Sync command
    sync_parser = subparsers.add_parser('sync', help='Generate database sync commands')
    sync_parser.add_argument('--db-name', help='Override DB_NAME')
    sync_parser.add_argument('-n', '--dry-run', action='store_true', help='Print SQL without writing files')
    sync_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_path_arguments(sync_parser)

    # Report command
    report_parser = subparsers.add_parser('report', help='Report on the generated tree')
    report_parser.add_argument('-t', '--type', choices=['summary', 'missing', 'json'],
                               default='summary', help='Report type')
    report_parser.add_argument('--album', action='append', help='Album(s) to include')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_path_arguments(report_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'process':
        return cmd_process(parsed_args)
    elif parsed_args.command == 'sync':
        return cmd_sync(parsed_args)
    elif parsed_args.command == 'report':
        return cmd_report(parsed_args)

    return 1
