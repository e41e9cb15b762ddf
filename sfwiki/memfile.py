"""A fixed-size in-memory buffer with a file-like interface."""

from __future__ import annotations

from .errorhandler import add_system_error, add_user_error
from .errors import ModError, UserErrorCode
from .fileio import BinaryFile


class MemFile:
    """Fixed-size byte buffer that can be read, written and sought like a file.

    Reads and writes that run past the end of the buffer transfer what fits,
    advance the position, count an error and raise :class:`ModError`.
    """

    def __init__(self, size: int | None = None) -> None:
        self._buffer: bytearray | None = None
        self._position = 0
        self._error_count = 0
        if size is not None:
            self.open(size)

    @property
    def buffer(self) -> bytes:
        """A copy of the whole buffer, or empty bytes when closed."""
        return bytes(self._buffer) if self._buffer is not None else b""

    def open(self, size: int) -> None:
        """Allocate a zero-filled buffer of ``size`` bytes, discarding any old one."""
        self.close()
        if size < 0:
            raise ModError(add_user_error(UserErrorCode.BADINPUT, "Memory file size must not be negative!"))
        self._buffer = bytearray(size)
        self._position = 0

    def close(self) -> None:
        self._buffer = None
        self._position = 0
        self._error_count = 0

    def is_open(self) -> bool:
        return self._buffer is not None

    def is_eof(self) -> bool:
        return self._position >= self.file_size()

    def has_error(self) -> bool:
        return self._error_count > 0

    def clear_errors(self) -> None:
        self._error_count = 0

    def file_size(self) -> int:
        return len(self._buffer) if self._buffer is not None else 0

    def _require_open(self, count_error: bool) -> bytearray:
        if self._buffer is None:
            if count_error:
                self._error_count += 1
            raise ModError(add_user_error(UserErrorCode.NOTOPEN))
        return self._buffer

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes from the current position."""
        buffer = self._require_open(count_error=True)
        if size < 0:
            raise ModError(
                add_user_error(UserErrorCode.BADINPUT, "File input buffer size must be positive!")
            )
        available = min(size, len(buffer) - self._position)
        data = bytes(buffer[self._position:self._position + max(available, 0)])
        self._position += max(available, 0)
        if available != size:
            self._error_count += 1
            raise ModError(
                add_system_error(
                    0,
                    "Failed to read data from memory buffer! Only %d of %d bytes input.",
                    available,
                    size,
                )
            )
        return data

    def write(self, data: bytes) -> None:
        """Write all of ``data`` at the current position."""
        buffer = self._require_open(count_error=True)
        size = len(data)
        fits = min(size, len(buffer) - self._position)
        if fits > 0:
            buffer[self._position:self._position + fits] = data[:fits]
            self._position += fits
        if fits != size:
            self._error_count += 1
            raise ModError(
                add_system_error(
                    0,
                    "Failed to write data to memory buffer! Only %d of %d bytes output.",
                    fits,
                    size,
                )
            )

    def seek(self, offset: int) -> None:
        """Move to the absolute position ``offset``."""
        buffer = self._require_open(count_error=False)
        if offset > len(buffer) or offset < 0:
            raise ModError(
                add_system_error(0, "Failed to set the memory file absolute position to %d!", offset)
            )
        self._position = offset

    def seek_cur(self, offset: int) -> None:
        """Move ``offset`` bytes relative to the current position."""
        buffer = self._require_open(count_error=False)
        new_position = self._position + offset
        if new_position > len(buffer) or new_position < 0:
            raise ModError(
                add_system_error(0, "Failed to set the memory file relative position to %d!", offset)
            )
        self._position = new_position

    def tell(self) -> int:
        return self._position

    def save(self, filename: str) -> None:
        """Write the whole buffer to ``filename``."""
        buffer = self._require_open(count_error=True)
        with BinaryFile() as output:
            output.open(filename, "wb")
            output.write(bytes(buffer))

    def __enter__(self) -> MemFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()