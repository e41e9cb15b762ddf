"""Game install lookup and helpers for backslash-separated file names."""

from __future__ import annotations

from .errorhandler import add_general_error
from .errors import ModError
from .textutil import terminate_path_string

try:
    import winreg
except ImportError:
    winreg = None

REG_SUBKEY = "SOFTWARE\\Bethesda Softworks\\Starfield"
REG_SUBKEY64 = "SOFTWARE\\Wow6432Node\\Bethesda Softworks\\Starfield"
REG_INSTALLPATH = "Installed Path"

# When non-empty this path is used instead of the registry lookup.
manual_install_path = ""
language = "English"

_SEPARATORS = "\\/:"
_NOT_FOUND = "Failed to find Starfield's install path in the Windows registry!"


def get_install_path() -> str:
    """The game install path, from ``manual_install_path`` or the registry."""
    if manual_install_path:
        return manual_install_path
    if winreg is None:
        raise ModError(add_general_error(_NOT_FOUND))

    key = None
    for subkey in (REG_SUBKEY, REG_SUBKEY64):
        try:
            key = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, subkey, 0, winreg.KEY_READ)
            break
        except OSError:
            continue
    if key is None:
        raise ModError(add_general_error(_NOT_FOUND))

    with key:
        try:
            value, value_type = winreg.QueryValueEx(key, REG_INSTALLPATH)
        except OSError as exc:
            raise ModError(add_general_error(_NOT_FOUND)) from exc
    if value_type != winreg.REG_SZ:
        raise ModError(add_general_error(_NOT_FOUND))
    return value


def _strings_directory(filename: str) -> str:
    index = filename.rfind("\\")
    path = filename[:index] + "\\" if index >= 0 else ""
    return path + "Strings\\"


def create_string_filename(filename: str, extension: str, lang_code: str = "en") -> str:
    """Name of the strings file belonging to a plugin, e.g. ``Strings\\Mod_en.STRINGS``."""
    index = filename.rfind("\\")
    base = filename[index + 1:] if index >= 0 else filename
    dot = base.rfind(".")
    if dot >= 0:
        base = base[:dot]
    return "%s%s_%s.%s" % (_strings_directory(filename), base, lang_code, extension)


def create_string_pathname(filename: str) -> str:
    """Directory holding the strings files of a plugin."""
    return _strings_directory(filename)


def split_filename(filename: str) -> tuple[str, str, str]:
    """Split into (path with trailing separator, base name, extension without dot)."""
    extension_index = len(filename)
    extension = ""
    for index in range(len(filename) - 1, -1, -1):
        char = filename[index]
        if char == ".":
            extension = filename[index + 1:]
            extension_index = index
            break
        if char in _SEPARATORS:
            break
    head = filename[:extension_index]
    separator = max(head.rfind(char) for char in _SEPARATORS)
    return head[:separator + 1], head[separator + 1:], extension


def remove_extension(filename: str) -> str:
    """``filename`` without its extension, if the last component has one."""
    for index in range(len(filename) - 1, -1, -1):
        char = filename[index]
        if char == ".":
            return filename[:index]
        if char in _SEPARATORS:
            break
    return filename


def find_sub_data_path(filename: str) -> tuple[str, str, str] | None:
    """(path below the ``data`` directory, base name, extension), or ``None``."""
    path, base, extension = split_filename(filename)
    index = path.rfind("\\data\\")
    if index >= 0:
        index += 1
    elif path.startswith("data\\"):
        index = 0
    else:
        return None
    return path[index + 5:], base, extension


def combine_paths(path1: str, path2: str | None = None) -> str:
    """Join two paths, each result ending in a backslash."""
    result = terminate_path_string(path1)
    if path2 is not None:
        if path2.startswith(("\\", "/")):
            path2 = path2[1:]
        result = terminate_path_string(result + path2)
    return result