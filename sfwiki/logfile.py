"""A simple timestamped text log with an optional per-line callback."""

from __future__ import annotations

import time
from typing import Any, Callable, TextIO

LogCallback = Callable[[str, Any], None]


class LogFile:
    """Text log where each entry is prefixed with the local time and a clock value."""

    def __init__(self, path: str | None = None) -> None:
        self._file: TextIO | None = None
        self._output_error = False
        self._callback: LogCallback | None = None
        self._user_data: Any = 0
        if path is not None:
            self.open(path)

    def open(self, path: str) -> None:
        """Open ``path`` for writing, replacing any log already open.

        Raises ``OSError`` if the file cannot be created.
        """
        self.close()
        self._file = open(path, "w", encoding="utf-8")
        self._file.write(
            "=========================== OPENED LOG %s ===========================\n" % path
        )
        self.write_time()
        self._file.write(" - Current Date: ")
        self.write_date()
        self._file.write("\n")

    def close(self) -> None:
        """Write a closing entry and close the log, if open."""
        if self._file is not None:
            self.printf("Log file closed.")
            self._file.close()
            self._file = None

    def is_open(self) -> bool:
        return self._file is not None

    def printf(self, fmt: str | None, *args: Any) -> None:
        """Write one printf-style formatted entry."""
        if fmt is None or self._file is None:
            return
        message = fmt % args if args else fmt
        self._write_header()
        self._file.write(message)
        self._file.write("\n")
        self._file.flush()
        if self._callback is not None and not self._output_error:
            self._callback(message, self._user_data)

    def err_printf(self, fmt: str | None, *args: Any) -> None:
        """Write an error entry; the callback is not invoked for it."""
        if fmt is None:
            return
        self._output_error = True
        try:
            self.printf(fmt, *args)
        finally:
            self._output_error = False

    def set_callback(self, function: LogCallback | None, user_data: Any = 0) -> None:
        """Call ``function(message, user_data)`` for each normal entry."""
        self._callback = function
        self._user_data = user_data

    def write_date(self) -> None:
        if self._file is None:
            return
        self._file.write(time.strftime("%A, %d of %B, %Y", time.localtime()))

    def write_time(self) -> None:
        if self._file is None:
            return
        clock = int(time.process_time() * 1000)
        self._file.write("%s (%d)" % (time.strftime("%H:%M:%S", time.localtime()), clock))

    def _write_header(self) -> None:
        self.write_time()
        if self._file is not None:
            self._file.write(" - ")

    def __enter__(self) -> LogFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


SYSTEM_LOG = LogFile()