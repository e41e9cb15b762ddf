import errno
import os

import pytest

from sfwiki.errors import ErrorType, ModError, UserErrorCode
from sfwiki.fileio import (
    BinaryFile,
    check_extension,
    file_exists,
    get_file_info,
    get_file_size,
    make_path,
    terminate_path,
)


@pytest.fixture
def sample(tmp_path):
    return str(tmp_path / "sample.bin")


def test_typed_round_trip(sample):
    with BinaryFile() as out:
        out.open(sample, "wb")
        out.write_byte(200)
        out.write_word(0xBEEF)
        out.write_dword(0xDEADBEEF)
        out.write_dword64(2**40 + 7)
        out.write_float(1.5)
        out.write_double(-2.25)
    with BinaryFile() as inp:
        inp.open(sample, "rb")
        assert inp.read_byte() == 200
        assert inp.read_word() == 0xBEEF
        assert inp.read_dword() == 0xDEADBEEF
        assert inp.read_dword64() == 2**40 + 7
        assert inp.read_float() == 1.5
        assert inp.read_double() == -2.25


def test_dword_is_little_endian(sample):
    with BinaryFile() as out:
        out.open(sample, "wb")
        out.write_dword(1)
    with open(sample, "rb") as handle:
        assert handle.read() == b"\x01\x00\x00\x00"


def test_read_when_closed_raises_notopen():
    with pytest.raises(ModError) as info:
        BinaryFile().read(4)
    assert info.value.record.code == UserErrorCode.NOTOPEN
    assert info.value.record.error_type == ErrorType.USER


def test_read_past_end_raises_eof(sample):
    with open(sample, "wb") as handle:
        handle.write(b"ab")
    with BinaryFile() as inp:
        inp.open(sample, "rb")
        with pytest.raises(ModError) as info:
            inp.read(4)
        assert info.value.record.code == UserErrorCode.EOF
        assert inp.is_eof()
        inp.clear_errors()
        assert not inp.is_eof()


def test_negative_read_size(sample):
    with open(sample, "wb") as handle:
        handle.write(b"ab")
    with BinaryFile() as inp:
        inp.open(sample, "rb")
        with pytest.raises(ModError) as info:
            inp.read(-1)
        assert info.value.record.code == UserErrorCode.BADINPUT
        assert inp.read(0) == b""


def test_open_missing_file(tmp_path):
    missing = str(tmp_path / "missing.esp")
    with pytest.raises(ModError) as info:
        BinaryFile().open(missing, "rb")
    assert info.value.record.error_type == ErrorType.SYSTEM
    assert info.value.record.code == errno.ENOENT


def test_open_sets_filename_and_close_clears(sample):
    f = BinaryFile()
    f.open(sample, "wb")
    assert f.is_open()
    assert f.filename == sample
    f.close()
    assert not f.is_open()
    assert f.filename == ""


def test_read_line_counts_lines(sample):
    with open(sample, "wb") as handle:
        handle.write(b"first\nsecond\nlast")
    with BinaryFile() as inp:
        inp.open(sample, "rb")
        lines = [inp.read_line(), inp.read_line(), inp.read_line()]
        assert lines == ["first", "second", "last"]
        assert inp.line_count == 2
        assert inp.is_eof()
        assert inp.read_line() == ""


def test_printf_and_size(sample):
    with BinaryFile() as out:
        out.open(sample, "wt")
        out.printf("%s=%d\n", "count", 42)
        assert out.file_size() == len("count=42\n")
    with open(sample, "rb") as handle:
        assert handle.read() == b"count=42\n"


def test_seek_and_tell(sample):
    with open(sample, "wb") as handle:
        handle.write(bytes(range(10)))
    with BinaryFile() as inp:
        inp.open(sample, "rb")
        inp.seek(5)
        assert inp.tell() == 5
        inp.seek_cur(2)
        assert inp.read_byte() == 7
        assert inp.file_size() == 10
        assert inp.tell() == 8


def test_negative_seek_raises(sample):
    with open(sample, "wb") as handle:
        handle.write(b"x")
    with BinaryFile() as inp:
        inp.open(sample, "rb")
        with pytest.raises(ModError) as info:
            inp.seek(-5)
        assert info.value.record.error_type == ErrorType.SYSTEM


@pytest.mark.parametrize(
    "name, ext, expected",
    [
        ("plugin.ESP", "esp", True),
        ("plugin.esm", "esp", False),
        ("dir.x\\file", "x", False),
        ("c:file", "file", False),
        ("noext", "noext", False),
        (None, "esp", False),
    ],
)
def test_check_extension(name, ext, expected):
    assert check_extension(name, ext) is expected


def test_terminate_path():
    assert terminate_path("data") == "data\\"
    assert terminate_path("data\\") == "data\\"
    assert terminate_path("") == ""


def test_file_exists(sample):
    assert not file_exists(sample)
    assert not file_exists("")
    with open(sample, "wb") as handle:
        handle.write(b"1")
    assert file_exists(sample)


def test_make_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    make_path("one\\two\\three")
    assert (tmp_path / "one" / "two" / "three").is_dir()
    make_path("one\\two")
    assert (tmp_path / "one" / "two").is_dir()

    inside = str(tmp_path / "one" / "two" / "three" / "made.bin")
    assert not file_exists(inside)
    with BinaryFile() as out:
        out.open(inside, "wb")
        out.write_byte(1)
    assert file_exists(inside)
    assert get_file_size(inside) == 1


def test_get_file_size(sample):
    with open(sample, "wb") as handle:
        handle.write(b"abcdef")
    assert get_file_size(sample) == 6
    assert get_file_size("") == -1


def test_get_file_size_missing(tmp_path):
    with pytest.raises(ModError) as info:
        get_file_size(str(tmp_path / "nope"))
    assert info.value.record.code == errno.ENOENT


def test_get_file_info(sample, tmp_path):
    with open(sample, "wb") as handle:
        handle.write(b"abc")
    os.utime(sample, ns=(0, 0))
    assert get_file_info(sample) == (3, 116444736000000000)
    assert get_file_info(str(tmp_path / "nope")) is None
    assert get_file_info(None) is None