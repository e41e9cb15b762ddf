import pytest

from sfwiki.moddefs import (
    MAX_FORMID,
    PLAYER_FORMID,
    PLAYERREF_FORMID,
    get_mod_index,
    make_form_id,
    record_type_name,
)


@pytest.mark.parametrize("form_id", [0, PLAYER_FORMID, PLAYERREF_FORMID, 0x00ABCDEF, 0xFF123456])
@pytest.mark.parametrize("mod_index", [0, 1, 0x7F, 0xFF])
def test_make_form_id_round_trip(form_id, mod_index):
    result = make_form_id(form_id, mod_index)
    assert get_mod_index(result) == mod_index
    assert result & MAX_FORMID == form_id & MAX_FORMID
    assert 0 <= result <= 0xFFFFFFFF


def test_get_mod_index_top_byte():
    assert get_mod_index(0x01000014) == 1
    assert get_mod_index(MAX_FORMID) == 0


def test_record_type_name_from_bytes_and_str():
    assert record_type_name(b"GRUP") == "GRUP"
    assert record_type_name("TES4") == "TES4"


def test_record_type_name_from_int_matches_bytes():
    value = int.from_bytes(b"WEAP", "little")
    assert record_type_name(value) == record_type_name(b"WEAP")


def test_record_type_name_truncates_and_pads():
    assert record_type_name(b"ABCDEFG") == record_type_name(b"ABCD")
    name = record_type_name(b"AB\0\0")
    assert len(name) == 4
    assert name.strip() == "AB"