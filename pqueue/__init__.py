"""Persistent FIFO queue backed by a directory of entry files."""

from .exceptions import (
    QueueError,
    DirectoryAccessError,
    EmptyError,
    WriteError,
    ReadError,
    DeleteError,
)
from .queue import Queue, open_queue

__version__ = "0.1.0"

__all__ = [
    'Queue',
    'open_queue',
    'QueueError',
    'DirectoryAccessError',
    'EmptyError',
    'WriteError',
    'ReadError',
    'DeleteError',
]
