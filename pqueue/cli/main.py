"""Main CLI entry point for pqueue."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pqueue.config import DEFAULT_LOG_LEVEL, LOG_LEVELS, QueueConfig, load_config
from pqueue.exceptions import ConfigValidationError

from .commands import dequeue_entry, enqueue_entry, show_status


EXIT_USAGE = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the pqueue CLI."""
    parser = argparse.ArgumentParser(
        prog='pqueue',
        description='Persistent directory-backed FIFO queue'
    )
    parser.add_argument(
        '-d', '--directory',
        type=str,
        help='Queue directory (must already exist)'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to YAML config file'
    )
    parser.add_argument(
        '--log-level',
        choices=list(LOG_LEVELS),
        default=None,
        help='Set log level'
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    verbosity.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    enqueue_parser = subparsers.add_parser('enqueue', help='Add an entry')
    enqueue_parser.add_argument(
        'data',
        nargs='?',
        type=str,
        help='Text payload (reads stdin if neither DATA nor --file is given)'
    )
    enqueue_parser.add_argument(
        '--file',
        type=str,
        help='Enqueue the contents of this file'
    )

    dequeue_parser = subparsers.add_parser('dequeue', help='Remove and print the oldest entry')
    dequeue_parser.add_argument(
        '--output', '-o',
        type=str,
        help='Write the payload to this file instead of stdout'
    )

    status_parser = subparsers.add_parser('status', help='Show pending entries')
    status_parser.add_argument(
        '--json',
        action='store_true',
        help='Print status as JSON'
    )

    return parser


def configure_logging(args: argparse.Namespace, config: QueueConfig) -> None:
    """Set up root logging from the command line and config file."""
    level_name = args.log_level or config.log_level or DEFAULT_LOG_LEVEL
    log_level = getattr(logging, level_name.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    config = QueueConfig()
    if parsed_args.config:
        try:
            config = load_config(Path(parsed_args.config))
        except ConfigValidationError as e:
            for error in e.errors:
                print(f"Config error: {error}", file=sys.stderr)
            return e.exit_code

    configure_logging(parsed_args, config)

    directory = parsed_args.directory or config.directory
    if not directory:
        print("Error: no queue directory given (use -d or a config file)", file=sys.stderr)
        return EXIT_USAGE
    parsed_args.directory = Path(directory)

    if parsed_args.command == 'enqueue':
        return enqueue_entry(parsed_args)
    elif parsed_args.command == 'dequeue':
        return dequeue_entry(parsed_args)
    elif parsed_args.command == 'status':
        return show_status(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
