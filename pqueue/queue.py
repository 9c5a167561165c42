"""Persistent FIFO queue backed by a directory.

Each entry is one file in the backing directory. The file name is the
decimal entry id and the contents are the raw payload bytes. The directory
listing is the only source of truth: a new Queue rebuilds its state by
scanning it, so nothing else (no index, no log) is ever written.

Example:
    q1 = Queue("/tmp/myqueue")
    q1.enqueue_text("my entry")
    q2 = Queue("/tmp/myqueue")
    q2.dequeue_text()  # -> "my entry"

No two Queue instances may use the same directory at the same time. This is
not enforced.
"""

import logging
import os
import re
import threading
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .exceptions import (
    DeleteError,
    DirectoryAccessError,
    EmptyError,
    ReadError,
    WriteError,
)


logger = logging.getLogger(__name__)

ENCODING = 'utf-8'
ENTRY_MODE = 0o600

# ASCII digits only; int() alone would also accept signs, whitespace,
# underscores and non-ASCII digits.
_ENTRY_NAME = re.compile(r'[0-9]+')


def parse_entry_name(name: str) -> Optional[int]:
    """Return the entry id encoded in a file name, or None if it is not one."""
    if _ENTRY_NAME.fullmatch(name) is None:
        return None
    return int(name)


def read_entries(directory: Path) -> Tuple[List[Tuple[int, str]], int]:
    """Scan a backing directory for entry files.

    Numeric names that are not regular entries (subdirectories) still count
    towards the highest id, so new entries never collide with them.

    Args:
        directory: Directory to scan

    Returns:
        (entry id, file name) pairs sorted by id, and the highest numeric
        name seen (0 if none)

    Raises:
        DirectoryAccessError: If the directory cannot be listed
    """
    entries = []
    highest = 0
    try:
        with os.scandir(directory) as it:
            for dirent in it:
                entry_id = parse_entry_name(dirent.name)
                if entry_id is None:
                    continue
                highest = max(highest, entry_id)
                if dirent.is_dir(follow_symlinks=False):
                    continue
                entries.append((entry_id, dirent.name))
    except OSError as e:
        raise DirectoryAccessError(
            f"Cannot list queue directory {directory}: {e}",
            path=directory
        ) from e

    entries.sort()
    return entries, highest


class Queue:
    """Persistent FIFO queue backed by a directory.

    All operations are serialized through one lock, so a single instance may
    be shared between threads.
    """

    def __init__(self, directory: Union[str, Path]):
        """Open a queue and recover its pending entries from the directory.

        Args:
            directory: Existing directory to store entries in

        Raises:
            DirectoryAccessError: If the directory cannot be listed
        """
        self.directory = Path(directory)
        self._entries, self._current = read_entries(self.directory)
        self._lock = threading.Lock()

        logger.debug(
            f"Opened queue {self.directory}: {len(self._entries)} pending, "
            f"last id {self._current}"
        )

    def __repr__(self) -> str:
        return f"Queue({str(self.directory)!r})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def pending_ids(self) -> List[int]:
        """Ids of the pending entries, oldest first."""
        with self._lock:
            return [entry_id for entry_id, _ in self._entries]

    def is_empty(self) -> bool:
        return len(self) == 0

    def enqueue(self, payload: bytes) -> int:
        """Append a payload to the queue and persist it as a new entry file.

        The id counter advances before the write. If the write fails the id
        is not reused, leaving a gap in the sequence.

        Args:
            payload: Bytes to store, possibly empty

        Returns:
            The id assigned to the new entry

        Raises:
            TypeError: If the payload is not bytes-like
            WriteError: If the entry file cannot be written
        """
        try:
            payload = memoryview(payload).tobytes()
        except TypeError:
            raise TypeError(
                f"payload must be bytes-like, not {type(payload).__name__}"
            ) from None

        with self._lock:
            self._current += 1
            entry_id = self._current
            name = str(entry_id)
            path = self.directory / name

            try:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, ENTRY_MODE)
                with os.fdopen(fd, 'wb') as f:
                    f.write(payload)
            except OSError as e:
                raise WriteError(
                    f"Cannot write entry {entry_id} to {path}: {e}",
                    path=path,
                    entry_id=entry_id
                ) from e

            self._entries.append((entry_id, name))
            logger.debug(f"Enqueued entry {entry_id} ({len(payload)} bytes)")
            return entry_id

    def enqueue_text(self, text: str) -> int:
        """Encode a string as UTF-8 and enqueue it."""
        return self.enqueue(text.encode(ENCODING))

    def dequeue(self) -> bytes:
        """Remove the oldest entry and return its payload.

        The entry file is read, then deleted, and only then dropped from the
        pending list. If either step fails the entry stays at the head of the
        queue, so the next call tries the same file again.

        Returns:
            The payload exactly as it was enqueued

        Raises:
            EmptyError: If there are no pending entries
            ReadError: If the entry file cannot be read
            DeleteError: If the entry file cannot be removed
        """
        with self._lock:
            return self._pop()

    def dequeue_text(self) -> str:
        """Remove the oldest entry and return its payload decoded as UTF-8.

        The payload is decoded before the file is removed. On a decoding error
        the entry stays queued and can still be taken with dequeue().

        Raises:
            EmptyError: If there are no pending entries
            ReadError: If the entry file cannot be read
            DeleteError: If the entry file cannot be removed
            UnicodeDecodeError: If the payload is not valid UTF-8
        """
        with self._lock:
            return self._pop(decode=True)

    def _pop(self, decode: bool = False):
        # Caller holds self._lock.
        if not self._entries:
            raise EmptyError(path=self.directory)

        entry_id, name = self._entries[0]
        path = self.directory / name

        try:
            payload = path.read_bytes()
        except OSError as e:
            raise ReadError(
                f"Cannot read entry {entry_id} from {path}: {e}",
                path=path,
                entry_id=entry_id
            ) from e

        result = payload.decode(ENCODING) if decode else payload

        try:
            path.unlink()
        except OSError as e:
            raise DeleteError(
                f"Cannot remove entry {entry_id} at {path}: {e}",
                path=path,
                entry_id=entry_id
            ) from e

        self._entries.pop(0)
        logger.debug(f"Dequeued entry {entry_id} ({len(payload)} bytes)")
        return result


def open_queue(directory: Union[str, Path]) -> Queue:
    """Open the queue stored in an existing directory.

    Args:
        directory: Backing directory

    Returns:
        Queue with the recovered pending entries

    Raises:
        DirectoryAccessError: If the directory cannot be listed
    """
    return Queue(directory)
