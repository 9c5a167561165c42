"""Enqueue command implementation."""

import logging
import sys
from argparse import Namespace
from pathlib import Path

from pqueue.exceptions import QueueError
from pqueue.queue import Queue


logger = logging.getLogger(__name__)


def read_payload(args: Namespace) -> bytes:
    """Pick the payload from DATA, --file or stdin, in that order.

    Raises:
        ValueError: If both DATA and --file are given
        OSError: If --file cannot be read
    """
    if args.data is not None and args.file:
        raise ValueError("Give either DATA or --file, not both")

    if args.data is not None:
        return args.data.encode('utf-8')

    if args.file:
        return Path(args.file).read_bytes()

    return sys.stdin.buffer.read()


def enqueue_entry(args: Namespace) -> int:
    """Enqueue one payload and print its entry id.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        payload = read_payload(args)
    except ValueError as e:
        logger.error(f"Invalid arguments: {e}")
        return 2
    except OSError as e:
        logger.error(f"Cannot read payload: {e}")
        return 1

    try:
        queue = Queue(args.directory)
        entry_id = queue.enqueue(payload)
    except QueueError as e:
        logger.error(str(e))
        return e.exit_code

    logger.info(f"Enqueued entry {entry_id} in {args.directory}")
    print(entry_id)
    return 0
