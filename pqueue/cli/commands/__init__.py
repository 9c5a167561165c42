"""CLI command handlers."""

from .enqueue import enqueue_entry
from .dequeue import dequeue_entry
from .status import show_status

__all__ = ['enqueue_entry', 'dequeue_entry', 'show_status']
