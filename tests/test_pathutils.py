import pytest

from sfwiki import pathutils
from sfwiki.errors import ModError
from sfwiki.pathutils import (
    combine_paths,
    create_string_filename,
    create_string_pathname,
    find_sub_data_path,
    get_install_path,
    remove_extension,
    split_filename,
)


def test_manual_install_path_wins(monkeypatch):
    monkeypatch.setattr(pathutils, "manual_install_path", "X:\\Games\\Starfield")
    assert get_install_path() == "X:\\Games\\Starfield"


def test_install_path_without_registry(monkeypatch):
    monkeypatch.setattr(pathutils, "manual_install_path", "")
    monkeypatch.setattr(pathutils, "winreg", None)
    with pytest.raises(ModError):
        get_install_path()


def test_create_string_filename_example():
    result = create_string_filename("C:\\Game\\Data\\Mod.esm", "STRINGS", "en")
    assert result == "C:\\Game\\Data\\Strings\\Mod_en.STRINGS"


def test_create_string_filename_without_directory():
    result = create_string_filename("Mod.esm", "DLSTRINGS", "fr")
    assert result.startswith("Strings\\")
    assert result.endswith("_fr.DLSTRINGS")


def test_create_string_pathname_example():
    assert create_string_pathname("C:\\Game\\Data\\Mod.esm") == "C:\\Game\\Data\\Strings\\"


def test_create_string_pathname_is_prefix_of_filename():
    name = "D:\\x\\y\\Plugin.esp"
    assert create_string_filename(name, "STRINGS").startswith(create_string_pathname(name))


def test_split_filename_parts():
    assert split_filename("dir\\file.txt") == ("dir\\", "file", "txt")
    assert split_filename("file") == ("", "file", "")
    assert split_filename("") == ("", "", "")
    assert split_filename("a.b\\noext") == ("a.b\\", "noext", "")


@pytest.mark.parametrize(
    "name",
    ["C:\\data\\x.dds", "rel/path/name.ext", "c:file.a.b", "plain", "trail\\", "a.b\\noext"],
)
def test_split_filename_reassembles(name):
    path, base, ext = split_filename(name)
    rebuilt = path + base + ("." + ext if ext or name.endswith(".") else "")
    assert rebuilt == name
    assert remove_extension(name) == path + base


def test_remove_extension_stops_at_separator():
    assert remove_extension("dir.d\\file") == "dir.d\\file"
    assert remove_extension("") == ""


def test_find_sub_data_path():
    found = find_sub_data_path("C:\\game\\data\\textures\\armor.dds")
    assert found == ("textures\\", "armor", "dds")


def test_find_sub_data_path_leading_data():
    assert find_sub_data_path("data\\meshes\\x.nif") == ("meshes\\", "x", "nif")


def test_find_sub_data_path_missing():
    assert find_sub_data_path("C:\\game\\other\\x.nif") is None


def test_combine_paths_example():
    assert combine_paths("a", "\\b") == "a\\b\\"


def test_combine_paths_invariants():
    assert combine_paths("root\\") == "root\\"
    assert combine_paths("root", None) == "root\\"
    joined = combine_paths("root", "/sub")
    assert joined.startswith("root\\sub")
    assert joined.endswith("\\")
    assert combine_paths("root", "") == "root\\"