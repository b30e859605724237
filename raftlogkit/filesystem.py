"""File system abstraction used by the log engine.

A :class:`FileSystem` creates and opens file handles (:class:`LogFd`) and
wraps them in positioned readers and writers. :class:`DefaultFileSystem`
passes bytes through unchanged; :class:`ObfuscatedFileSystem` shifts every
byte by one on its way to disk and back, and moves a single byte per call.
"""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import Any

__all__ = [
    "FileSystem",
    "LogFd",
    "LogFile",
    "DefaultFileSystem",
    "ObfuscatedReader",
    "ObfuscatedWriter",
    "ObfuscatedFileSystem",
]

_log = logging.getLogger(__name__)

# rw-r--r--
_FILE_MODE = 0o644


class FileSystem(ABC):
    """Creates file handles and the readers and writers over them."""

    @abstractmethod
    def create(self, path: str | os.PathLike[str]) -> LogFd:
        """Open ``path`` for reading and writing, creating it if missing."""

    @abstractmethod
    def open(self, path: str | os.PathLike[str]) -> LogFd:
        """Open the existing file ``path`` for reading and writing."""

    @abstractmethod
    def new_reader(self, handle: LogFd) -> Any:
        """Return a reader positioned at the start of ``handle``."""

    @abstractmethod
    def new_writer(self, handle: LogFd) -> Any:
        """Return a writer positioned at the start of ``handle``."""


class LogFd:
    """A low-level file opened for reading and writing.

    Reads and writes take an explicit offset. The descriptor is closed by
    :meth:`close`, on leaving a ``with`` block, or when the object is
    collected; errors during automatic closing are logged and ignored.
    """

    def __init__(self, fd: int) -> None:
        self._fd: int | None = fd

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> LogFd:
        """Open an existing file."""
        return cls(os.open(path, os.O_RDWR, _FILE_MODE))

    @classmethod
    def create(cls, path: str | os.PathLike[str]) -> LogFd:
        """Open a file, creating it first if it does not exist."""
        return cls(os.open(path, os.O_RDWR | os.O_CREAT, _FILE_MODE))

    @property
    def closed(self) -> bool:
        return self._fd is None

    def _fileno(self) -> int:
        if self._fd is None:
            raise ValueError("I/O operation on closed file")
        return self._fd

    def close(self) -> None:
        """Close the file."""
        fd = self._fileno()
        self._fd = None
        os.close(fd)

    def sync(self) -> None:
        """Flush file data (not necessarily metadata) to the storage device."""
        fd = self._fileno()
        if hasattr(os, "fdatasync") and sys.platform.startswith("linux"):
            os.fdatasync(fd)
        else:
            os.fsync(fd)

    def read(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``; fewer only at end of file."""
        fd = self._fileno()
        chunks: list[bytes] = []
        done = 0
        while done < size:
            try:
                chunk = os.pread(fd, size - done, offset + done)
            except BlockingIOError:
                continue
            if not chunk:
                break
            chunks.append(chunk)
            done += len(chunk)
        return b"".join(chunks)

    def write(self, offset: int, content: bytes) -> int:
        """Write ``content`` at ``offset``; return the number of bytes written."""
        fd = self._fileno()
        view = memoryview(content)
        written = 0
        while written < len(view):
            try:
                count = os.pwrite(fd, view[written:], offset + written)
            except BlockingIOError:
                continue
            if count == 0:
                break
            written += count
        return written

    def truncate(self, offset: int) -> None:
        """Discard all data after ``offset``."""
        os.ftruncate(self._fileno(), offset)

    def allocate(self, offset: int, size: int) -> None:
        """Reserve space for ``size`` bytes at ``offset`` where supported."""
        fd = self._fileno()
        if sys.platform.startswith("linux") and hasattr(os, "posix_fallocate"):
            os.posix_fallocate(fd, offset, size)

    def file_size(self) -> int:
        """Return the current size of the file."""
        return os.lseek(self._fileno(), 0, os.SEEK_END)

    def __enter__(self) -> LogFd:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.closed:
            self.close()

    def __del__(self) -> None:
        if getattr(self, "_fd", None) is not None:
            try:
                self.close()
            except OSError as err:
                _log.error("error while closing file: %s", err)


class LogFile:
    """A positioned reader and writer over a shared :class:`LogFd`."""

    def __init__(self, fd: LogFd) -> None:
        self._inner = fd
        self._offset = 0

    @property
    def handle(self) -> LogFd:
        return self._inner

    def tell(self) -> int:
        return self._offset

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (to end of file if negative)."""
        if size < 0:
            size = max(self._inner.file_size() - self._offset, 0)
        data = self._inner.read(self._offset, size)
        self._offset += len(data)
        return data

    def write(self, data: bytes) -> int:
        """Write ``data`` at the current position; return bytes written."""
        count = self._inner.write(self._offset, data)
        self._offset += count
        return count

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the position and return it."""
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._offset + offset
        elif whence == os.SEEK_END:
            target = self._inner.file_size() + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if target < 0:
            raise ValueError(f"negative seek position {target}")
        self._offset = target
        return self._offset

    def flush(self) -> None:
        """Check the file is still open; writes are unbuffered."""
        if self._inner.closed:
            raise ValueError("flush of closed file")

    def truncate(self, offset: int) -> None:
        """Discard data after ``offset`` and move the position there."""
        self._inner.truncate(offset)
        self._offset = offset

    def sync(self) -> None:
        self._inner.sync()

    def allocate(self, offset: int, size: int) -> None:
        self._inner.allocate(offset, size)


class DefaultFileSystem(FileSystem):
    """Plain files on the local file system."""

    def create(self, path: str | os.PathLike[str]) -> LogFd:
        return LogFd.create(path)

    def open(self, path: str | os.PathLike[str]) -> LogFd:
        return LogFd.open(path)

    def new_reader(self, handle: LogFd) -> LogFile:
        return LogFile(handle)

    def new_writer(self, handle: LogFd) -> LogFile:
        return LogFile(handle)


class ObfuscatedReader:
    """Reads one byte per call and subtracts one from it (modulo 256)."""

    def __init__(self, inner: LogFile) -> None:
        self._inner = inner

    def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        data = self._inner.read(1)
        if len(data) == 1:
            return bytes(((data[0] - 1) & 0xFF,))
        return data

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._inner.seek(offset, whence)


class ObfuscatedWriter:
    """Writes one byte per call, adding one to it (modulo 256)."""

    def __init__(self, inner: LogFile) -> None:
        self._inner = inner

    def write(self, data: bytes) -> int:
        if not data:
            return 0
        return self._inner.write(bytes(((data[0] + 1) & 0xFF,)))

    def flush(self) -> None:
        self._inner.flush()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._inner.seek(offset, whence)

    def truncate(self, offset: int) -> None:
        self._inner.truncate(offset)

    def sync(self) -> None:
        self._inner.sync()

    def allocate(self, offset: int, size: int) -> None:
        self._inner.allocate(offset, size)


class ObfuscatedFileSystem(FileSystem):
    """Local files whose bytes are stored shifted by one."""

    def __init__(self) -> None:
        self._inner = DefaultFileSystem()

    def create(self, path: str | os.PathLike[str]) -> LogFd:
        return self._inner.create(path)

    def open(self, path: str | os.PathLike[str]) -> LogFd:
        return self._inner.open(path)

    def new_reader(self, handle: LogFd) -> ObfuscatedReader:
        return ObfuscatedReader(self._inner.new_reader(handle))

    def new_writer(self, handle: LogFd) -> ObfuscatedWriter:
        return ObfuscatedWriter(self._inner.new_writer(handle))