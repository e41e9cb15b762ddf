"""Error records, their descriptions and the table of user error messages."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum


class ErrorType(IntEnum):
    NONE = 0
    USER = 1
    SYSTEM = 2
    GENERAL = 3
    ZLIB = 4
    WINDOWS = 5


class ErrorLevel(IntEnum):
    """Severity; higher values are more important."""

    NONE = 0
    NOTE = 2
    WARNING = 5
    ERROR = 8
    CRITICAL = 10


class UserErrorCode(IntEnum):
    NULL = 1
    BADINPUT = 2
    NOTOPEN = 3
    OVERFLOW = 4
    EOF = 5
    MAXINDEX = 6
    SUBRECNOTFOUND = 1001
    BADEFFECT = 1002


class ZlibCode(IntEnum):
    OK = 0
    STREAM_END = 1
    NEED_DICT = 2
    ERRNO = -1
    STREAM_ERROR = -2
    DATA_ERROR = -3
    MEM_ERROR = -4
    BUF_ERROR = -5
    VERSION_ERROR = -6


MAX_USER_ERRORS = 100

_DEFAULT_USER_ERRORS = (
    (UserErrorCode.NULL, "Invalid NULL input received!"),
    (UserErrorCode.BADINPUT, "Invalid input received!"),
    (UserErrorCode.NOTOPEN, "File not open!"),
    (UserErrorCode.OVERFLOW, "General numeric overflow!"),
    (UserErrorCode.EOF, "End of File reached!"),
    (UserErrorCode.MAXINDEX, "Maximum fixed array size reached!"),
    (UserErrorCode.SUBRECNOTFOUND, "A required subrecord was not found in the record!"),
    (UserErrorCode.BADEFFECT, "The given effect was not found in the enchantment!"),
)


class _UserErrorTable:
    """Bounded list of user error definitions; the first match for a code wins."""

    def __init__(self) -> None:
        self._entries: list[tuple[int, str]] = []
        self._defaults_loaded = False

    def add(self, code: int, message: str) -> bool:
        if len(self._entries) >= MAX_USER_ERRORS:
            return False
        self._entries.append((int(code), message))
        return True

    def lookup(self, code: int) -> str | None:
        if not self._defaults_loaded:
            self._defaults_loaded = True
            for default_code, message in _DEFAULT_USER_ERRORS:
                self.add(default_code, message)
        return next((message for entry, message in self._entries if entry == code), None)


_user_errors = _UserErrorTable()


def register_user_error(code: int, message: str) -> bool:
    """Add a user error description; returns ``False`` once the table is full."""
    return _user_errors.add(code, message)


def user_error_string(code: int) -> str:
    """Description of a user error code."""
    message = _user_errors.lookup(code)
    if message is None:
        return "No user error matching code %d was found!" % code
    return message


def system_error_string(code: int) -> str:
    """Description of an ``errno`` value."""
    try:
        return os.strerror(code)
    except (ValueError, OverflowError):
        return "Unknown system error code %d!" % code


_ZLIB_MESSAGES = {
    ZlibCode.OK: "No zLib error!",
    ZlibCode.STREAM_END: "zLib end of stream!",
    ZlibCode.NEED_DICT: "zLib dictionary error!",
    ZlibCode.STREAM_ERROR: "zLib stream error!",
    ZlibCode.DATA_ERROR: "zLib data error!",
    ZlibCode.MEM_ERROR: "zLib memory error!",
    ZlibCode.BUF_ERROR: "zLib buffer error!",
    ZlibCode.VERSION_ERROR: "zLib version error!",
}


def zlib_error_string(code: int, subcode: int) -> str:
    """Description of a zlib result code; ``subcode`` is the errno for ``ZlibCode.ERRNO``."""
    if code == ZlibCode.ERRNO:
        return system_error_string(subcode)
    message = _ZLIB_MESSAGES.get(code)
    if message is None:
        return "Unknown zLib error code %d!" % code
    return message


def _windows_error_string(code: int) -> str:
    return "Error message string for Windows error %d!" % code


_LEVEL_NAMES = {
    ErrorLevel.NONE: "No Level",
    ErrorLevel.NOTE: "Note",
    ErrorLevel.WARNING: "Warning",
    ErrorLevel.ERROR: "Error",
    ErrorLevel.CRITICAL: "Critical",
}

_TYPE_NAMES = {
    ErrorType.NONE: "No Error Type Defined",
    ErrorType.USER: "User Defined Error",
    ErrorType.SYSTEM: "System Error",
    ErrorType.GENERAL: "General Error",
    ErrorType.ZLIB: "zLib Error",
    ErrorType.WINDOWS: "Windows Error",
}


@dataclass
class ErrorRecord:
    """One reported error: its kind, codes, severity and user message."""

    error_type: int = ErrorType.NONE
    code: int = 0
    subcode: int = 0
    level: int = ErrorLevel.NONE
    message: str = ""
    tag: int = 0

    def error_string(self) -> str:
        """Description derived from the error type and code."""
        if self.error_type == ErrorType.GENERAL:
            return ""
        if self.error_type == ErrorType.USER:
            return user_error_string(self.code)
        if self.error_type == ErrorType.SYSTEM:
            return system_error_string(self.code)
        if self.error_type == ErrorType.ZLIB:
            return zlib_error_string(self.code, self.subcode)
        if self.error_type == ErrorType.WINDOWS:
            return _windows_error_string(self.code)
        return "Unknown error type %d. Error code %d (%d)." % (
            self.error_type,
            self.code,
            self.subcode,
        )

    def type_string(self) -> str:
        name = _TYPE_NAMES.get(self.error_type, "Undefined Error")
        return "%s (%d)" % (name, self.error_type)

    def level_string(self) -> str:
        name = _LEVEL_NAMES.get(self.level, "Unknown")
        return "%s (%d)" % (name, self.level)

    def make_message(self) -> str:
        """Full message: the user message followed by the code description."""
        if self.error_type == ErrorType.GENERAL:
            return self.message
        if not self.message:
            return self.error_string()
        return "%s\n     %s" % (self.message, self.error_string())


class ModError(Exception):
    """Exception carrying an :class:`ErrorRecord`."""

    def __init__(self, record: ErrorRecord) -> None:
        super().__init__(record.make_message())
        self.record = record