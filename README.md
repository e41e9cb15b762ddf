# sfwiki

A library for game plugin files. A plugin file is a sequence of top-level
records and groups, and groups hold further records and groups. Each one
starts with a 24-byte header.

## What is in the package

- `sfwiki.espfile`: `EspFile` holds the top-level records and groups of
  one file. It can create new records and place them in the top-level
  group for their type. It can load from disk and save to disk, and can
  write the records of one type uncompressed with `save_raw`. It indexes
  records by form ID (`create_formid_map`, `find_form_id`) and finds every
  record of a type (`find_all_records`) or the group for a type
  (`type_group`). It resolves localized strings (`make_string_map`,
  `find_local_string`). It gathers size, version and subrecord statistics
  (`collect_stats`, `output_stats`, `subrecord_stat_flags`).
- `sfwiki.groups`: `GroupHeader` packs and unpacks the 24-byte header.
  `Group` and `TypeGroup` are the group containers, `GroupType` lists the
  group kinds, and `read_base_header` reads the next header from a file.
- `sfwiki.fileio`: `BinaryFile` does little-endian binary and text I/O on
  disk. The module also has the helpers `file_exists`, `check_extension`,
  `make_path`, `terminate_path`, `get_file_size` and `get_file_info`.
- `sfwiki.memfile`: `MemFile` is a fixed-size buffer that can be read,
  written and sought like a file. `save` writes the buffer to disk.
- `sfwiki.pathutils`: these helpers work on backslash-separated names.
  They give the names of string-table files (`create_string_filename`,
  `create_string_pathname`), split names (`split_filename`,
  `remove_extension`, `find_sub_data_path`) and join paths
  (`combine_paths`). `get_install_path` returns the module variable
  `manual_install_path` when it is set. Otherwise it reads the install
  path from the Windows registry.
- `sfwiki.errors`: `ErrorRecord`, the `ErrorType`, `ErrorLevel`,
  `UserErrorCode` and `ZlibCode` enums, and the `ModError` exception.
- `sfwiki.errorhandler`: `ErrorHandler` keeps a bounded history of
  errors, logs each one and calls registered callbacks. The module-level
  functions `add_user_error`, `add_system_error`, `add_general_error` and
  `add_zlib_error` report to the shared `ERROR_HANDLER`.
- `sfwiki.logfile`: `LogFile` is a timestamped text log. `SYSTEM_LOG` is
  the shared instance. It writes nothing until it is opened with
  `SYSTEM_LOG.open(path)`.
- `sfwiki.timer`: `Timer` measures elapsed time and can be used as a
  context manager.
- `sfwiki.textutil`, `sfwiki.flags`, `sfwiki.moddefs`: helpers for
  strings, bit flags, `Rgba` colours, form IDs and record type names.

Failures are raised as `sfwiki.errors.ModError`. Its `record` attribute is
the `ErrorRecord` that was reported to the error handler.

## Installing

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Examples

Form IDs:

```python
from sfwiki.moddefs import get_mod_index, make_form_id

form_id = make_form_id(0x000123, 2)   # 0x02000123
assert get_mod_index(form_id) == 2
```

String-table file names:

```python
from sfwiki.pathutils import create_string_filename

create_string_filename("Data\\Starfield.esm", "STRINGS", "en")
# 'Data\\Strings\\Starfield_en.STRINGS'
```

Binary I/O in memory:

```python
from sfwiki.memfile import MemFile

mem = MemFile(8)
mem.write(b"GRUP")
mem.seek(0)
assert mem.read(4) == b"GRUP"
```

Building a file with your own record class:

```python
from sfwiki.espfile import EspFile


class Record:
    def __init__(self, header):
        self.header = header
        self.record_type = header.record_type
        self.form_id = 0
        self.subrecords = []
        self.parent = None
        self.parent_group = None

    def is_group(self):
        return False

    def is_local_strings(self):
        return False

    def load_local_strings(self):
        pass

    def write(self, file):
        file.write(self.header.pack())

    def read_data(self, file, factory):
        pass


esp = EspFile(Record)
esp.initialize_new()                      # adds a TES4 header record
weapon = esp.create_new_record(b"WEAP")   # goes into a new WEAP group
weapon.form_id = 0x1000
esp.create_formid_map()
assert esp.find_form_id(0x1000) is weapon
assert esp.type_group(b"WEAP").contains_type == b"WEAP"
assert esp.find_all_records(b"WEAP") == [weapon]
```

Timing a block of code:

```python
from sfwiki.timer import Timer

with Timer() as timer:
    ...
print(timer.delta())
```

## What the package does not do

- It has no concrete record or subrecord types. `EspFile` builds
  non-group entries through the factory you pass to it. The headers of
  groups are handled by the package, but record contents, decompression
  and subrecord parsing are up to the records your factory returns.
- It does not parse string-table files. `EspFile.load` reads them only if
  `string_loader` is set to a callable that returns `(id, text)` pairs for
  a path. You can also pass tables to `make_string_map` yourself.
- There is no command-line tool.

## Running the tests

```
pytest
```