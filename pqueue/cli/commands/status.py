"""Status command implementation."""

import json
import logging
from argparse import Namespace

from pqueue.exceptions import QueueError
from pqueue.queue import Queue


logger = logging.getLogger(__name__)


def show_status(args: Namespace) -> int:
    """Print the number of pending entries and their ids."""
    try:
        queue = Queue(args.directory)
    except QueueError as e:
        logger.error(str(e))
        return e.exit_code

    pending = queue.pending_ids
    if args.json:
        print(json.dumps({
            "directory": str(queue.directory),
            "pending": len(pending),
            "ids": pending
        }))
    else:
        print(f"{queue.directory}: {len(pending)} pending")
        if pending:
            print(' '.join(str(entry_id) for entry_id in pending))

    return 0
