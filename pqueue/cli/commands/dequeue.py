"""Dequeue command implementation."""

import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import BinaryIO, Optional

from pqueue.exceptions import EmptyError, QueueError
from pqueue.queue import Queue


logger = logging.getLogger(__name__)


def open_output(output: Optional[str] = None) -> BinaryIO:
    """Open the payload destination: a file, or raw stdout.

    The file is opened for appending so nothing is truncated before an entry
    has actually been dequeued.
    """
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        return open(output_path, 'ab')

    sys.stdout.flush()
    return sys.stdout.buffer


def dequeue_entry(args: Namespace) -> int:
    """Dequeue the oldest entry and write its payload out.

    The destination is opened first, so an unusable --output fails before
    anything is removed from the queue.

    Returns:
        Exit code (0 for success, 3 if the queue is empty, other non-zero
        codes for failures)
    """
    try:
        queue = Queue(args.directory)
    except QueueError as e:
        logger.error(str(e))
        return e.exit_code

    try:
        out = open_output(args.output)
    except OSError as e:
        logger.error(f"Cannot open output {args.output}: {e}")
        return 1

    try:
        try:
            payload = queue.dequeue()
        except EmptyError as e:
            logger.info(f"Queue {args.directory} is empty")
            return e.exit_code
        except QueueError as e:
            logger.error(str(e))
            return e.exit_code

        if args.output:
            out.truncate(0)
        out.write(payload)
        out.flush()
    except OSError as e:
        logger.error(f"Cannot write payload to {args.output or 'stdout'}: {e}")
        return 1
    finally:
        if args.output:
            out.close()

    return 0
