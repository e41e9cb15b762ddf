"""Binary file access with error reporting, plus small file and path helpers."""

from __future__ import annotations

import os
import struct
from typing import Any, BinaryIO

from .errorhandler import add_general_error, add_system_error, add_user_error
from .errors import ModError, UserErrorCode
from .textutil import stricmp, terminate_path_string

# Offset between the Unix epoch and 1601-01-01 in 100 ns units.
_FILETIME_UNIX_EPOCH = 116444736000000000

_BYTE = struct.Struct("<B")
_WORD = struct.Struct("<H")
_DWORD = struct.Struct("<I")
_DWORD64 = struct.Struct("<Q")
_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")


def _binary_mode(mode: str) -> str:
    """Turn a C-style mode string into a binary Python mode."""
    mode = mode.replace("t", "")
    if "b" not in mode:
        mode += "b"
    return mode


def _errno_of(exc: BaseException) -> int:
    return getattr(exc, "errno", None) or 0


class BinaryFile:
    """A file opened for low-level I/O; failures are recorded and raised as :class:`ModError`."""

    def __init__(self) -> None:
        self._file: BinaryIO | None = None
        self._filename = ""
        self._line_count = 0
        self._eof = False
        self._error = False

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def line_count(self) -> int:
        """Number of complete lines read by :meth:`read_line`."""
        return self._line_count

    def _require_open(self) -> BinaryIO:
        if self._file is None:
            raise ModError(add_user_error(UserErrorCode.NOTOPEN))
        return self._file

    def open(self, filename: str, mode: str) -> None:
        """Open ``filename`` with a C-style ``mode`` such as ``"rb"`` or ``"wt"``."""
        if self.is_open():
            self.close()
        if filename is None:
            raise ModError(add_user_error(UserErrorCode.NULL, "Input filename cannot be NULL!"))
        if mode is None:
            raise ModError(add_user_error(UserErrorCode.NULL, "Input file mode cannot be NULL!"))
        try:
            self._file = open(filename, _binary_mode(mode))
        except (OSError, ValueError) as exc:
            record = add_system_error(
                _errno_of(exc),
                "Failed to open the file '%s' in mode '%s'!",
                filename,
                mode,
            )
            raise ModError(record) from exc
        self._filename = filename
        self._eof = False
        self._error = False

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._filename = ""
        self._line_count = 0
        self._eof = False
        self._error = False

    def is_open(self) -> bool:
        return self._file is not None

    def is_eof(self) -> bool:
        return self._eof

    def has_error(self) -> bool:
        return self._error

    def clear_errors(self) -> None:
        """Reset the end-of-file and error indicators."""
        self._eof = False
        self._error = False

    def file_size(self) -> int:
        """Size of the open file in bytes; the position is left unchanged."""
        handle = self._require_open()
        try:
            old = handle.tell()
        except OSError as exc:
            raise ModError(add_system_error(_errno_of(exc), "Failed to read file position!")) from exc
        try:
            size = handle.seek(0, os.SEEK_END)
        except OSError as exc:
            raise ModError(add_system_error(_errno_of(exc), "Failed to get file position!")) from exc
        try:
            handle.seek(old, os.SEEK_SET)
        except OSError as exc:
            raise ModError(add_system_error(_errno_of(exc), "Failed to reset file position!")) from exc
        return size

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        handle = self._require_open()
        if size == 0:
            return b""
        if size < 0:
            raise ModError(
                add_user_error(UserErrorCode.BADINPUT, "File input buffer size must be positive!")
            )
        try:
            data = handle.read(size)
        except OSError as exc:
            self._error = True
            record = add_system_error(
                _errno_of(exc),
                "Failed to read data from file! Only %u of %d bytes input.",
                0,
                size,
            )
            raise ModError(record) from exc
        if len(data) != size:
            self._eof = True
            raise ModError(add_user_error(UserErrorCode.EOF))
        return data

    def read_line(self) -> str:
        """Read one line of text without its trailing newline."""
        handle = self._require_open()
        if self._eof:
            return ""
        try:
            raw = handle.readline()
        except OSError as exc:
            self._error = True
            raise ModError(add_system_error(_errno_of(exc), "Failed to read byte from file!")) from exc
        if raw.endswith(b"\n"):
            self._line_count += 1
            raw = raw[:-1]
        else:
            self._eof = True
        return raw.decode("latin-1")

    def _read_struct(self, layout: struct.Struct) -> Any:
        return layout.unpack(self.read(layout.size))[0]

    def read_byte(self) -> int:
        return self._read_struct(_BYTE)

    def read_word(self) -> int:
        return self._read_struct(_WORD)

    def read_dword(self) -> int:
        return self._read_struct(_DWORD)

    def read_dword64(self) -> int:
        return self._read_struct(_DWORD64)

    def read_float(self) -> float:
        return self._read_struct(_FLOAT)

    def read_double(self) -> float:
        return self._read_struct(_DOUBLE)

    def write(self, data: bytes) -> None:
        """Write all of ``data`` and flush."""
        handle = self._require_open()
        if data is None:
            raise ModError(add_user_error(UserErrorCode.NULL, "File output buffer cannot be NULL!"))
        if not data:
            return
        try:
            written = handle.write(data)
            handle.flush()
        except OSError as exc:
            self._error = True
            record = add_system_error(
                _errno_of(exc),
                "Failed to write data to file! Only %u of %d bytes output.",
                0,
                len(data),
            )
            raise ModError(record) from exc
        if written is not None and written != len(data):
            record = add_system_error(
                0,
                "Failed to write data to file! Only %u of %d bytes output.",
                written,
                len(data),
            )
            raise ModError(record)

    def write_byte(self, value: int) -> None:
        self.write(_BYTE.pack(value))

    def write_word(self, value: int) -> None:
        self.write(_WORD.pack(value))

    def write_dword(self, value: int) -> None:
        self.write(_DWORD.pack(value))

    def write_dword64(self, value: int) -> None:
        self.write(_DWORD64.pack(value))

    def write_float(self, value: float) -> None:
        self.write(_FLOAT.pack(value))

    def write_double(self, value: float) -> None:
        self.write(_DOUBLE.pack(value))

    def printf(self, fmt: str, *args: Any) -> None:
        """Write printf-style formatted text."""
        handle = self._require_open()
        text = fmt % args if args else fmt
        try:
            handle.write(text.encode("utf-8"))
        except OSError as exc:
            self._error = True
            record = add_system_error(_errno_of(exc), "Failed to output formatted string to file!")
            raise ModError(record) from exc

    def seek(self, offset: int) -> None:
        """Move to the absolute position ``offset``."""
        handle = self._require_open()
        try:
            handle.seek(offset, os.SEEK_SET)
        except (OSError, ValueError) as exc:
            record = add_system_error(
                _errno_of(exc), "Failed to set the absolute file position to %d!", offset
            )
            raise ModError(record) from exc
        self._eof = False

    def seek_cur(self, offset: int) -> None:
        """Move ``offset`` bytes relative to the current position."""
        handle = self._require_open()
        try:
            handle.seek(offset, os.SEEK_CUR)
        except (OSError, ValueError) as exc:
            record = add_system_error(
                _errno_of(exc), "Failed to set the relative file position to %d!", offset
            )
            raise ModError(record) from exc
        self._eof = False

    def tell(self) -> int:
        handle = self._require_open()
        try:
            return handle.tell()
        except OSError as exc:
            raise ModError(
                add_system_error(_errno_of(exc), "Failed to get current file position!")
            ) from exc

    def __enter__(self) -> BinaryFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def file_exists(filename: str | None) -> bool:
    """True if ``filename`` can be opened for reading."""
    if not filename:
        return False
    try:
        with open(filename, "rb"):
            return True
    except OSError:
        return False


def check_extension(filename: str | None, ext: str | None) -> bool:
    """True if the extension of ``filename`` equals ``ext``, ignoring case."""
    if filename is None or ext is None:
        return False
    for index in range(len(filename) - 1, -1, -1):
        char = filename[index]
        if char == ".":
            return stricmp(filename[index + 1:], ext) == 0
        if char in "\\:":
            return False
    return False


def make_path(path: str) -> None:
    """Create every directory of a backslash-separated path that does not exist."""
    parts = [part for part in path.split("\\") if part]
    if not parts:
        return
    current = ""
    for part in parts:
        if len(part) > 1 and part[1] == ":":
            current = part + os.sep
            continue
        current = os.path.join(current, part) if current else part
        if os.path.isdir(current):
            continue
        try:
            os.mkdir(current)
        except OSError as exc:
            raise ModError(add_general_error("Failed to create the directory '%s'!", part)) from exc


def terminate_path(path: str) -> str:
    """Ensure a non-empty path ends with a backslash."""
    return terminate_path_string(path)


def get_file_size(filename: str | None) -> int:
    """Size of ``filename`` in bytes, or -1 for an empty or missing name."""
    if not filename:
        return -1
    try:
        with open(filename, "rb") as handle:
            return handle.seek(0, os.SEEK_END)
    except OSError as exc:
        raise ModError(
            add_system_error(_errno_of(exc), "Could not open the file '%s'!", filename)
        ) from exc


def get_file_info(filename: str | None) -> tuple[int, int] | None:
    """Size and last-write time (100 ns ticks since 1601) of a file, or ``None``."""
    if filename is None:
        return None
    try:
        info = os.stat(filename)
    except OSError:
        return None
    if not os.path.isfile(filename):
        return None
    return info.st_size, info.st_mtime_ns // 100 + _FILETIME_UNIX_EPOCH