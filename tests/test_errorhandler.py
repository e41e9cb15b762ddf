import errno

import pytest

from sfwiki.errorhandler import (
    ERROR_HANDLER,
    MAX_ERROR_CALLBACKS,
    MAX_ERRORS,
    ErrorHandler,
    add_general_error,
    add_system_error,
    add_user_error,
    add_zlib_error,
)
from sfwiki.errors import ErrorLevel, ErrorType, UserErrorCode, ZlibCode
from sfwiki.logfile import LogFile


@pytest.fixture
def handler():
    return ErrorHandler(LogFile())


def test_add_error_stores_formatted_record(handler):
    record = handler.add_error(ErrorType.USER, UserErrorCode.EOF, 0, ErrorLevel.WARNING, "read %d bytes", 7)
    assert len(handler) == 1
    assert handler[0] is record
    assert handler.last_error() is record
    assert record.message == "read 7 bytes"
    assert record.code == UserErrorCode.EOF
    assert record.level == ErrorLevel.WARNING
    assert record.error_string() == "End of File reached!"


def test_message_prefix(handler):
    handler.set_message_prefix("mod: ")
    record = handler.add_error(ErrorType.GENERAL, -1, 0, ErrorLevel.ERROR, "broken %s", "x")
    assert record.message == "mod: broken x"


def test_error_is_logged(tmp_path):
    path = tmp_path / "err.log"
    log = LogFile(str(path))
    handler = ErrorHandler(log)
    record = handler.add_error(ErrorType.USER, UserErrorCode.NOTOPEN, 0, ErrorLevel.ERROR, "")
    log.close()
    text = path.read_text(encoding="utf-8")
    assert "*** %s ***" % record.type_string() in text
    assert "Description = File not open!" in text


def test_callbacks_called_and_removed(handler):
    seen = []

    def callback(record, data):
        seen.append((record.code, data))

    assert handler.add_callback(callback, "ud")
    handler.add_error(ErrorType.USER, UserErrorCode.NULL, 0, ErrorLevel.ERROR, "")
    assert seen == [(UserErrorCode.NULL, "ud")]
    assert handler.remove_callback(callback)
    assert not handler.remove_callback(callback)
    handler.add_error(ErrorType.USER, UserErrorCode.NULL, 0, ErrorLevel.ERROR, "")
    assert len(seen) == 1


def test_callback_limit(handler):
    results = [handler.add_callback(lambda r, d: None, i) for i in range(MAX_ERROR_CALLBACKS + 2)]
    assert results[: MAX_ERROR_CALLBACKS + 1] == [True] * (MAX_ERROR_CALLBACKS + 1)
    assert results[-1] is False


def test_error_list_is_bounded(handler):
    for code in range(MAX_ERRORS + 8):
        handler.add_error(ErrorType.USER, code, 0, ErrorLevel.ERROR, "")
    assert len(handler) == MAX_ERRORS
    assert handler[0].code == 0
    assert handler.last_error().code == MAX_ERRORS + 7


def test_clear_and_remove_last(handler):
    assert handler.last_error() is None
    first = handler.add_error(ErrorType.USER, 1, 0, ErrorLevel.ERROR, "")
    handler.add_error(ErrorType.USER, 2, 0, ErrorLevel.ERROR, "")
    handler.remove_last_error()
    assert handler.last_error() is first
    handler.clear()
    assert len(handler) == 0
    handler.remove_last_error()
    assert len(handler) == 0


def test_getitem_out_of_range(handler):
    with pytest.raises(IndexError):
        handler[0]
    record = handler.add_error(ErrorType.USER, UserErrorCode.NULL, 0, ErrorLevel.ERROR, "")
    assert handler[0] is record
    with pytest.raises(IndexError):
        handler[1]


def test_module_helpers_use_global_handler():
    before = len(ERROR_HANDLER)
    user = add_user_error(UserErrorCode.BADINPUT, "bad %s", "input")
    assert user.error_type == ErrorType.USER
    assert user.level == ErrorLevel.ERROR
    assert user.message == "bad input"
    system = add_system_error(errno.ENOENT, "open")
    assert system.error_type == ErrorType.SYSTEM
    assert system.code == errno.ENOENT
    general = add_general_error("plain")
    assert general.code == -1
    assert general.make_message() == "plain"
    zlib_record = add_zlib_error(ZlibCode.DATA_ERROR)
    assert zlib_record.error_string() == "zLib data error!"
    assert ERROR_HANDLER.last_error() is zlib_record
    assert len(ERROR_HANDLER) == min(before + 4, MAX_ERRORS)