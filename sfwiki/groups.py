"""Groups of records in a mod file: the GRUP header and group containers.

Children are any objects offering ``record_type`` and ``form_id``
attributes, ``is_group()``, ``load_local_strings()``, ``write(file)`` and
``read_data(file, factory)``, and accepting ``parent`` and
``parent_group`` attributes. A *factory* is a callable that builds such a
child from a :class:`GroupHeader` read with :func:`read_base_header`.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Iterator

from .moddefs import RECTYPE_SIZE

NAME_GRUP = b"GRUP"

_HEADER = struct.Struct("<4sI4siIHH")
BASEHEADER_SIZE = _HEADER.size
_DWORD = struct.Struct("<I")

RecordFactory = Callable[["GroupHeader"], Any]


class GroupType(IntEnum):
    NONE = -1
    TYPE = 0
    WORLDCHILD = 1
    INTCELL = 2
    INTSUBCELL = 3
    EXTCELL = 4
    EXTSUBCELL = 5
    CELLCHILD = 6
    TOPICCHILD = 7
    CELLPERSIST = 8
    CELLTEMP = 9
    CELLDISTANT = 10


def _record_type_bytes(record_type: bytes | str) -> bytes:
    raw = record_type.encode("latin-1") if isinstance(record_type, str) else bytes(record_type)
    return raw[:RECTYPE_SIZE].ljust(RECTYPE_SIZE, b"\0")


@dataclass
class GroupHeader:
    """The 24-byte header that starts every group and record."""

    record_type: bytes = NAME_GRUP
    size: int = 0
    data: bytes = bytes(RECTYPE_SIZE)
    group_type: int = GroupType.TYPE
    stamp: int = 0
    version: int = 0
    unknown: int = 0

    @property
    def contains_type(self) -> bytes:
        return self.data

    @property
    def block(self) -> int:
        return struct.unpack("<i", self.data)[0]

    @property
    def grid(self) -> tuple[int, int]:
        return struct.unpack("<hh", self.data)

    @property
    def parent_form_id(self) -> int:
        return _DWORD.unpack(self.data)[0]

    def pack(self) -> bytes:
        return _HEADER.pack(
            _record_type_bytes(self.record_type),
            self.size,
            _record_type_bytes(self.data),
            self.group_type,
            self.stamp,
            self.version,
            self.unknown,
        )

    @classmethod
    def unpack(cls, data: bytes) -> GroupHeader:
        if len(data) != BASEHEADER_SIZE:
            raise ValueError(f"header must be {BASEHEADER_SIZE} bytes, got {len(data)}")
        return cls(*_HEADER.unpack(data))


def read_base_header(file: Any) -> GroupHeader:
    """Read the next 24-byte header from ``file``."""
    return GroupHeader.unpack(file.read(BASEHEADER_SIZE))


class Group:
    """A group of child records and groups."""

    def __init__(self, header: GroupHeader | None = None) -> None:
        self.header = header if header is not None else GroupHeader()
        self._records: list[Any] = []
        self.parent: Any = None
        self.parent_group: Group | None = None

    @property
    def record_type(self) -> bytes:
        return self.header.record_type

    @property
    def group_type(self) -> int:
        return self.header.group_type

    @property
    def stamp(self) -> int:
        return self.header.stamp

    @property
    def form_id(self) -> int:
        return 0

    def is_group(self) -> bool:
        return True

    @property
    def records(self) -> list[Any]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._records)

    def __getitem__(self, index: int) -> Any:
        return self._records[index]

    def initialize(self, group_type: int) -> None:
        """Reset the header to an empty group of ``group_type``."""
        self.header.record_type = NAME_GRUP
        self.header.group_type = group_type
        self.header.size = 0
        self.header.stamp = 0
        self.header.data = bytes(RECTYPE_SIZE)

    def add_child_record(self, record: Any) -> bool:
        """Accept ``record`` if it belongs in this group; a plain group accepts nothing."""
        return False

    def add_record(self, record: Any) -> None:
        self._records.append(record)

    def delete_child_record(self, record: Any) -> bool:
        for index, child in enumerate(self._records):
            if child is record:
                del self._records[index]
                return True
        return False

    def delete_record(self, record: Any) -> bool:
        return self.delete_child_record(record)

    def find_form_id(self, form_id: int) -> Any:
        """Depth-first search for a record with ``form_id``; ``None`` if absent."""
        for child in self._records:
            if child.is_group():
                found = child.find_form_id(form_id)
                if found is not None:
                    return found
            elif child.form_id == form_id:
                return child
        return None

    def load_local_strings(self) -> None:
        for child in self._records:
            child.load_local_strings()

    def read_data(self, file: Any, factory: RecordFactory) -> None:
        """Read children until the end of this group's data, using ``factory``."""
        current = file.tell()
        end = current + self.header.size - BASEHEADER_SIZE
        while current < end:
            header = read_base_header(file)
            child = factory(header)
            self._records.append(child)
            child.parent = self.parent
            child.parent_group = self
            child.read_data(file, factory)
            current = file.tell()

    def write(self, file: Any) -> None:
        """Write the header and all children, then patch the size in the header."""
        start = file.tell()
        file.write(self.header.pack())
        for child in self._records:
            child.write(file)
        self._write_group_size(file, start)

    def _write_group_size(self, file: Any, offset: int) -> None:
        current = file.tell()
        file.seek(offset + 4)
        file.write(_DWORD.pack(current - offset))
        file.seek(current)


class TypeGroup(Group):
    """A top-level group holding records of one type."""

    @property
    def contains_type(self) -> bytes:
        return self.header.data

    def set_contains_type(self, record_type: bytes | str) -> None:
        self.header.data = _record_type_bytes(record_type)

    def add_child_record(self, record: Any) -> bool:
        if _record_type_bytes(record.record_type) == self.contains_type:
            self._records.append(record)
            record.parent_group = self
            return True
        return False

    def delete_child_record(self, record: Any) -> bool:
        return super().delete_child_record(record)