"""Bounded collection of reported errors with logging and callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .errors import ErrorLevel, ErrorRecord, ErrorType
from .logfile import SYSTEM_LOG, LogFile

MAX_ERRORS = 32
MAX_ERROR_CALLBACKS = 10

ErrorCallback = Callable[[ErrorRecord, Any], None]


@dataclass
class _Callback:
    function: ErrorCallback
    user_data: Any


class ErrorHandler:
    """Keeps the most recent errors, logs each one and notifies callbacks."""

    def __init__(self, log: LogFile | None = None) -> None:
        self._log = log if log is not None else SYSTEM_LOG
        self._errors: list[ErrorRecord] = []
        self._callbacks: list[_Callback] = []
        self._prefix = ""

    def add_callback(self, function: ErrorCallback, user_data: Any = 0) -> bool:
        """Register ``function(record, user_data)``; ``False`` if too many are registered."""
        if len(self._callbacks) > MAX_ERROR_CALLBACKS:
            return False
        self._callbacks.append(_Callback(function, user_data))
        return True

    def remove_callback(self, function: ErrorCallback) -> bool:
        """Remove the first registration of ``function``; ``False`` if absent."""
        for index, callback in enumerate(self._callbacks):
            if callback.function == function:
                del self._callbacks[index]
                return True
        return False

    def add_error(
        self,
        error_type: int,
        code: int,
        subcode: int,
        level: int,
        message: str,
        *args: Any,
    ) -> ErrorRecord:
        """Record, log and dispatch a new error; returns the stored record."""
        if len(self._errors) >= MAX_ERRORS:
            self._delete_half()

        text = self._prefix + message
        if text and args:
            text = text % args
        record = ErrorRecord(error_type=error_type, code=code, subcode=subcode, level=level, message=text)
        self._errors.append(record)

        self._log.err_printf("*** %s ***", record.type_string())
        self._log.err_printf("               Code = %d (%d)", code, subcode)
        self._log.err_printf("              Level = %s", record.level_string())
        self._log.err_printf("       User Message = %s", record.message)
        self._log.err_printf("        Description = %s", record.error_string())

        for callback in list(self._callbacks):
            callback.function(record, callback.user_data)
        return record

    def _delete_half(self) -> None:
        half = MAX_ERRORS // 2
        if len(self._errors) <= half:
            return
        del self._errors[half]

    def clear(self) -> None:
        self._errors.clear()

    def last_error(self) -> ErrorRecord | None:
        return self._errors[-1] if self._errors else None

    def remove_last_error(self) -> None:
        if self._errors:
            self._errors.pop()

    def set_message_prefix(self, prefix: str) -> None:
        self._prefix = prefix

    def __len__(self) -> int:
        return len(self._errors)

    def __getitem__(self, index: int) -> ErrorRecord:
        return self._errors[index]


ERROR_HANDLER = ErrorHandler()


def add_user_error(code: int, message: str = "", *args: Any) -> ErrorRecord:
    return ERROR_HANDLER.add_error(ErrorType.USER, code, 0, ErrorLevel.ERROR, message, *args)


def add_system_error(code: int, message: str = "", *args: Any) -> ErrorRecord:
    """Record an error for the ``errno`` value ``code``."""
    return ERROR_HANDLER.add_error(ErrorType.SYSTEM, code, 0, ErrorLevel.ERROR, message, *args)


def add_general_error(message: str = "", *args: Any) -> ErrorRecord:
    return ERROR_HANDLER.add_error(ErrorType.GENERAL, -1, 0, ErrorLevel.ERROR, message, *args)


def add_zlib_error(code: int, subcode: int = 0, message: str = "", *args: Any) -> ErrorRecord:
    """Record a zlib error; ``subcode`` is the ``errno`` for ``ZlibCode.ERRNO``."""
    return ERROR_HANDLER.add_error(ErrorType.ZLIB, code, subcode, ErrorLevel.ERROR, message, *args)