"""Plugin files of records and groups: containers, binary I/O, errors, logging and helpers."""

__version__ = "0.1.0"