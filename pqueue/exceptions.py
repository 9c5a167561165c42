"""Queue exceptions."""

from pathlib import Path
from typing import List, Optional, Union


class QueueError(Exception):
    """Base class for all queue errors.

    The CLI maps each subclass to a process exit code via ``exit_code``.
    """

    exit_code = 1

    def __init__(self,
                 message: str,
                 path: Optional[Union[str, Path]] = None,
                 entry_id: Optional[int] = None):
        self.path = str(path) if path is not None else None
        self.entry_id = entry_id
        super().__init__(message)


class DirectoryAccessError(QueueError):
    """Raised when the backing directory cannot be listed."""

    exit_code = 2


class EmptyError(QueueError):
    """Raised by dequeue when there are no pending entries.

    This is an expected outcome, not a failure.
    """

    exit_code = 3

    def __init__(self, path: Optional[Union[str, Path]] = None):
        super().__init__("queue is empty", path=path)


class WriteError(QueueError):
    """Raised when an entry file cannot be written.

    The entry id has been consumed and will not be reused.
    """


class ReadError(QueueError):
    """Raised when the head entry file cannot be read."""


class DeleteError(QueueError):
    """Raised when the head entry file was read but cannot be removed."""


class ConfigValidationError(Exception):
    """Raised when a CLI config file fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            messages.append(f"Config error: {error}")

        super().__init__("\n".join(messages))
