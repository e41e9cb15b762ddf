"""A mod/plugin file: top-level records and groups, lookups, I/O and statistics.

Records are created by a *factory*, a callable that takes the
:class:`~sfwiki.groups.GroupHeader` read for a record and returns the
record object. Besides what :mod:`sfwiki.groups` asks of children, a record
offers ``header`` (with ``record_type``, ``size`` and ``version``) and
``subrecords`` (objects with ``record_type`` and ``size``). The header
record (``TES4``) also offers ``is_local_strings()``. A record may carry
a boolean ``compressed`` attribute, which :meth:`EspFile.save_raw` clears
while writing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from .errorhandler import add_general_error
from .fileio import BinaryFile, file_exists
from .groups import NAME_GRUP, Group, GroupHeader, GroupType, TypeGroup
from .logfile import SYSTEM_LOG
from .moddefs import RECTYPE_SIZE, record_type_name
from .pathutils import create_string_filename
from .timer import Timer

NAME_TES4 = b"TES4"

FIRST_FORMID = 0x1000
FIRST_EDITORID = 1
LAST_EDITORID = 900000000

_STRING_FILE_ORDER = ("ILSTRINGS", "DLSTRINGS", "STRINGS")

RecordFactory = Callable[[GroupHeader], Any]
StringLoader = Callable[[str], Iterable[tuple[int, str]]]


def _rectype(value: bytes | str) -> bytes:
    raw = value.encode("latin-1") if isinstance(value, str) else bytes(value)
    return raw[:RECTYPE_SIZE].ljust(RECTYPE_SIZE, b"\0")


@dataclass
class SubrecordStats:
    """Size and count statistics for one subrecord type within a record type."""

    record_type: bytes
    total_size: int = 0
    total_count: int = 0
    local_count: int = 0
    min_size: int = 0
    max_size: int = 0
    min_count: int = 0
    max_count: int = 0


@dataclass
class RecordStats:
    """Size and version statistics for one record type."""

    record_type: bytes
    total_size: int = 0
    total_count: int = 0
    min_size: int = 0
    max_size: int = 0
    min_version: int = 0
    max_version: int = 0
    subrecord_stats: dict[bytes, SubrecordStats] = field(default_factory=dict)


def subrecord_stat_flags(record_stats: RecordStats, stats: SubrecordStats) -> str:
    """Describe how a subrecord type occurs within its record type."""
    flags = ""
    if stats.max_count == 1 and stats.min_count == 1 and stats.total_count == record_stats.total_count:
        flags += "One/Record "
    if stats.max_count > 1:
        flags += "ManyAllowed "
    if stats.min_count == 1:
        flags += "Required "
    if stats.min_count == 0:
        flags += "Optional "
    flags += "FixedSize " if stats.min_size == stats.max_size else "VariableSized "
    return flags


class EspFile:
    """The records and groups of one mod file."""

    def __init__(self, factory: RecordFactory) -> None:
        self._factory = factory
        self.string_loader: StringLoader | None = None
        self.mod_index = 0
        self.active = False
        self._filename = ""
        self._short_filename = ""
        self._records: list[Any] = []
        self._header: Any = None
        self._string_tables: dict[str, list[tuple[int, str]]] = {}
        self._string_map: dict[int, str] = {}
        self._formid_map: dict[int, Any] = {}
        self._record_stats: dict[bytes, RecordStats] = {}

    def destroy(self) -> None:
        """Drop all records and reset the file name."""
        self._header = None
        self.active = False
        self._filename = ""
        self._short_filename = ""
        self._records.clear()

    @property
    def records(self) -> list[Any]:
        """Top-level records and groups."""
        return self._records

    @property
    def header(self) -> Any:
        """The TES4 header record, if any."""
        return self._header

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def short_filename(self) -> str:
        return self._short_filename

    def set_filename(self, filename: str) -> None:
        self._filename = filename
        self._short_filename = filename

    def _create(self, header: GroupHeader) -> Any:
        if _rectype(header.record_type) == NAME_GRUP:
            if header.group_type == GroupType.TYPE:
                return TypeGroup(header)
            return Group(header)
        return self._factory(header)

    def add_record(self, record: Any) -> bool:
        """Place ``record`` in the group for its type, creating the group if needed."""
        if _rectype(record.record_type) == NAME_TES4:
            self._records.append(record)
            record.parent_group = None
            return True

        for top in self._records:
            if top.is_group() and top.add_child_record(record):
                return True

        group = self.create_top_level_group(record.record_type)
        if not group.add_child_record(record):
            add_general_error(
                "Failed to find the correct insert location for record 0x%X!", record.form_id
            )
            self._records.append(record)
            record.parent_group = None
            return False
        return True

    def create_new_record(self, record_type: bytes | str) -> Any:
        """Create a record of ``record_type`` with the factory and add it."""
        record = self._factory(GroupHeader(record_type=_rectype(record_type)))
        record.parent = self
        if not self.add_record(record):
            return None
        if _rectype(record.record_type) == NAME_TES4:
            self._header = record
        return record

    def create_top_level_group(self, record_type: bytes | str) -> TypeGroup:
        """Append a new empty top-level group for ``record_type``."""
        group = TypeGroup()
        group.initialize(GroupType.TYPE)
        group.set_contains_type(_rectype(record_type))
        group.parent = self
        self._records.append(group)
        return group

    def delete_record(self, record: Any) -> bool:
        """Remove a top-level record; ``False`` if it is not one."""
        for index, top in enumerate(self._records):
            if top is record:
                del self._records[index]
                return True
        return False

    def _walk(self, children: Iterable[Any]) -> Iterable[Any]:
        for child in children:
            if child.is_group():
                yield from self._walk(child.records)
            else:
                yield child

    def create_formid_map(self) -> None:
        """Index every record by form ID."""
        self._formid_map = {record.form_id: record for record in self._walk(self._records)}

    def find_form_id(self, form_id: int) -> Any:
        """The record indexed under ``form_id``, or ``None``."""
        if form_id == 0:
            return None
        return self._formid_map.get(form_id)

    def find_all_records(self, record_type: bytes | str) -> list[Any]:
        """Every record of ``record_type``, in file order."""
        wanted = _rectype(record_type)
        return [record for record in self._walk(self._records) if _rectype(record.record_type) == wanted]

    def type_group(self, record_type: bytes | str) -> TypeGroup | None:
        """The top-level group holding ``record_type`` records, or ``None``."""
        wanted = _rectype(record_type)
        for top in self._records:
            if not top.is_group() or top.group_type != GroupType.TYPE:
                continue
            if isinstance(top, TypeGroup) and top.contains_type == wanted:
                return top
        return None

    def make_string_map(self, *args: Mapping[int, str] | Iterable[tuple[int, str]]) -> None:
        """Rebuild the string lookup from string tables; later tables win.

        Without arguments the tables loaded with the file are used, in the
        order ILSTRINGS, DLSTRINGS, STRINGS.
        """
        tables = args if args else tuple(self._string_tables.get(ext, ()) for ext in _STRING_FILE_ORDER)
        self._string_map = {}
        for table in tables:
            entries = table.items() if isinstance(table, Mapping) else table
            for string_id, text in entries:
                if string_id in self._string_map:
                    SYSTEM_LOG.printf("\tWARNING: String Map Collision for ID 0x%08X!", string_id)
                self._string_map[string_id] = text

    def find_local_string(self, string_id: int) -> str | None:
        return self._string_map.get(string_id)

    def is_local_strings(self) -> bool:
        return self._header is not None and bool(self._header.is_local_strings())

    def initialize_new(self) -> None:
        """Reset to an empty file holding only a header record."""
        self.destroy()
        self.create_new_record(NAME_TES4)
        self.set_filename("noname.esp")

    def _load_string_files(self) -> None:
        self._string_tables = {}
        if self.string_loader is None:
            return
        for extension in _STRING_FILE_ORDER:
            path = create_string_filename(self._filename, extension)
            if not file_exists(path):
                continue
            SYSTEM_LOG.printf("Loading strings file '%s'...", path)
            self._string_tables[extension] = list(self.string_loader(path))

    def load(self, filename: str) -> None:
        """Read ``filename``, replacing the current contents."""
        timer = Timer()
        timer.start()

        self.destroy()
        self.set_filename(filename)
        self._load_string_files()
        self.make_string_map()

        with BinaryFile() as source:
            source.open(filename, "rb")
            self._read(source)
            size = source.file_size()
            position = source.tell()
            SYSTEM_LOG.printf(
                "End read position for file '%s' is 0x%08X (0x%08X bytes left over).",
                filename,
                position,
                size - position,
            )

        if self.is_local_strings():
            for top in self._records:
                top.load_local_strings()

        self.create_formid_map()
        timer.stop("EspFile.load")

    def _read(self, source: BinaryFile) -> None:
        size = source.file_size()
        current = source.tell()
        while current < size:
            header = GroupHeader.unpack(source.read(GroupHeader().pack().__len__()))
            record = self._create(header)
            self._records.append(record)
            record.parent = self
            if _rectype(record.record_type) == NAME_TES4:
                self._header = record
            record.read_data(source, self._create)
            current = source.tell()

    def save(self, filename: str) -> None:
        """Write all records and groups to ``filename``."""
        self.set_filename(filename)
        with BinaryFile() as output:
            output.open(filename, "wb")
            for top in self._records:
                top.write(output)

    def save_raw(self, filename: str, record_type: bytes | str) -> bool:
        """Write the records of one type uncompressed; ``False`` if there is no such group."""
        with BinaryFile() as output:
            output.open(filename, "wb")
            group = self.type_group(record_type)
            if group is None:
                return False
            for child in group:
                if child.is_group():
                    continue
                compressed = bool(getattr(child, "compressed", False))
                if compressed:
                    child.compressed = False
                try:
                    child.write(output)
                finally:
                    if compressed:
                        child.compressed = True
        return True

    def collect_stats(self) -> dict[bytes, RecordStats]:
        """Gather size, version and subrecord statistics for every record type."""
        self._record_stats = {}
        for record in self._walk(self._records):
            self._collect_record_stats(record)
        return self._record_stats

    def _collect_record_stats(self, record: Any) -> None:
        header = record.header
        record_type = _rectype(header.record_type)
        stats = self._record_stats.get(record_type)
        first = stats is None
        if stats is None:
            stats = RecordStats(
                record_type,
                min_size=header.size,
                max_size=header.size,
                min_version=header.version,
                max_version=header.version,
            )
            self._record_stats[record_type] = stats
        else:
            stats.min_size = min(stats.min_size, header.size)
            stats.max_size = max(stats.max_size, header.size)
            stats.min_version = min(stats.min_version, header.version)
            stats.max_version = max(stats.max_version, header.version)

        stats.total_size += header.size
        stats.total_count += 1

        for substats in stats.subrecord_stats.values():
            substats.local_count = 0
        for subrecord in record.subrecords:
            self._collect_subrecord_stats(stats, subrecord)
        for substats in stats.subrecord_stats.values():
            if first:
                substats.min_count = substats.local_count
                substats.max_count = substats.local_count
            else:
                substats.min_count = min(substats.min_count, substats.local_count)
                substats.max_count = max(substats.max_count, substats.local_count)

    @staticmethod
    def _collect_subrecord_stats(stats: RecordStats, subrecord: Any) -> None:
        record_type = _rectype(subrecord.record_type)
        substats = stats.subrecord_stats.get(record_type)
        if substats is None:
            substats = SubrecordStats(record_type, min_size=subrecord.size, max_size=subrecord.size)
            stats.subrecord_stats[record_type] = substats
        else:
            substats.min_size = min(substats.min_size, subrecord.size)
            substats.max_size = max(substats.max_size, subrecord.size)
        substats.total_size += subrecord.size
        substats.total_count += 1
        substats.local_count += 1

    def output_stats(self, filename: str) -> None:
        """Write a text report of record statistics and the top-level layout."""
        all_stats = self.collect_stats()
        with BinaryFile() as out:
            out.open(filename, "wt")
            for record_type in sorted(all_stats):
                stats = all_stats[record_type]
                out.printf("== %s Record Info ==\n", record_type_name(stats.record_type))
                out.printf("     TotalSize   = %d\n", stats.total_size)
                out.printf("     TotalCount  = %d\n", stats.total_count)
                out.printf("     AverageSize = %0.2f bytes\n", stats.total_size / stats.total_count)
                out.printf("     MinSize     = %d bytes\n", stats.min_size)
                out.printf("     MaxSize     = %d bytes\n", stats.max_size)
                out.printf("     MinVersion  = %d\n", stats.min_version)
                out.printf("     MaxVersion  = %d\n", stats.max_version)

                for number, subtype in enumerate(sorted(stats.subrecord_stats), start=1):
                    substats = stats.subrecord_stats[subtype]
                    out.printf(
                        "     %d) %s Subrecord Info: %s\n",
                        number,
                        record_type_name(substats.record_type),
                        subrecord_stat_flags(stats, substats),
                    )
                    out.printf("          Total Count = %d\n", substats.total_count)
                    out.printf(
                        "          AverageSize = %0.2f bytes\n",
                        substats.total_size / substats.total_count,
                    )
                    out.printf("          MinSize     = %d bytes\n", substats.min_size)
                    out.printf("          MaxSize     = %d bytes\n", substats.max_size)
                    out.printf("          MinCount    = %d\n", substats.min_count)
                    out.printf("          MaxCount    = %d\n", substats.max_count)
                out.printf("\n\n")

            out.printf("== Top Level Records/Groups ==\n\n")
            for top in self._records:
                if not top.is_group():
                    out.printf("     %s (Record)\n", record_type_name(top.record_type))
                elif top.group_type != GroupType.TYPE:
                    out.printf("     %s (Unknown)\n", record_type_name(top.record_type))
                elif isinstance(top, TypeGroup):
                    out.printf("     %s (Group)\n", record_type_name(top.contains_type))
                else:
                    out.printf("     %s (Unknown Group)\n", record_type_name(top.record_type))
            out.printf("\n\n")