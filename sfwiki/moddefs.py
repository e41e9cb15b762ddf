"""Form IDs, mod indices and record type names used throughout mod files."""

from __future__ import annotations

FORMID_NULL = 0
MAX_FORMID = 0x00FFFFFF
PLAYERREF_FORMID = 0x14
PLAYER_FORMID = 0x7

MODINDEX_MAX = 255
MODINDEX_MIN = 0

NULL_STRINGID = 0

RECTYPE_SIZE = 4


def get_mod_index(form_id: int) -> int:
    """The mod index stored in the top byte of a form ID."""
    return (form_id >> 24) & 0xFF


def make_form_id(form_id: int, mod_index: int) -> int:
    """Replace the mod index of ``form_id`` with ``mod_index``."""
    return ((form_id & MAX_FORMID) | (mod_index << 24)) & 0xFFFFFFFF


def record_type_name(record_type: bytes | str | int) -> str:
    """Four-character display name of a record type.

    Accepts the raw type bytes, a string, or the type as a little-endian
    32-bit integer. Stops at a NUL, truncates to four characters and pads
    on the left to four.
    """
    if isinstance(record_type, int):
        raw = (record_type & 0xFFFFFFFF).to_bytes(RECTYPE_SIZE, "little")
    elif isinstance(record_type, str):
        raw = record_type.encode("latin-1")
    else:
        raw = bytes(record_type)
    end = raw.find(b"\0")
    if end >= 0:
        raw = raw[:end]
    return raw[:RECTYPE_SIZE].decode("latin-1").rjust(RECTYPE_SIZE)