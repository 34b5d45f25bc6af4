"""
Decoding of the table directory, the entry directories and the file contents that follow the main archive header.

Files in a DRS archive are grouped into tables, one per file type. The layout after the header is strictly sequential:
first all the table headers, then the entry directories of all the tables (in table order), then the contents of all the
files (in table-then-entry order). The offsets declared in the table headers and entries are not used for seeking.
"""

import logging

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Union

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader, BinaryReaderMissingDataError, \
    BinaryReaderReadPastEndError
from atmfjstc.lib.ez_repr import EZRepr

from atmfjstc.lib.drs_archive.errors import DRSUnknownFileTypeError, DRSLayoutError, read_errors_as_drs_io_errors
from atmfjstc.lib.drs_archive.errors import tag_to_text
from atmfjstc.lib.drs_archive.options import DRSLoadOptions


LOG = logging.getLogger(__name__)


class DRSFileType(IntEnum):
    """
    The types of files that can be stored in a DRS archive.

    The values are 4-character codes stored as little-endian ints, so they appear reversed in the file (e.g. ``anib``).
    Binary files use the code "bina", all others use their file extension padded with a space.
    """

    BINARY = 0x62696E61
    """Various non-graphics, non-sound files, e.g. palettes, even when they are actually text"""
    SLP = 0x736C7020
    """SLP graphics (a proprietary sprite format)"""
    SHP = 0x73687020
    """SHP graphics (hardly used)"""
    WAV = 0x77617620
    """Regular WAV audio"""

    @staticmethod
    def from_tag(raw_tag: int) -> 'DRSFileType':
        try:
            return DRSFileType(raw_tag)
        except ValueError:
            raise DRSUnknownFileTypeError(raw_tag) from None

    @property
    def file_extension(self) -> str:
        return _FILE_EXTENSIONS[self]


_FILE_EXTENSIONS = {
    DRSFileType.BINARY: 'bin',
    DRSFileType.SLP: 'slp',
    DRSFileType.SHP: 'shp',
    DRSFileType.WAV: 'wav',
}


@dataclass(frozen=True, repr=False)
class DRSTableHeader(EZRepr):
    file_type: DRSFileType
    table_offset: int
    file_count: int

    def file_extension(self) -> str:
        """
        The canonical extension for files in this table, for use when saving them as individual files.
        """
        return self.file_type.file_extension


@dataclass(frozen=True, repr=False)
class DRSSkippedTableHeader(EZRepr):
    """
    Stands in for a table header with an unrecognized file type tag, when the load options allow such tables to be
    skipped. The table's entries and contents are still read past so that the following tables decode correctly.
    """

    raw_tag: int
    table_offset: int
    file_count: int

    @property
    def tag_text(self) -> str:
        return tag_to_text(self.raw_tag)


AnyTableHeader = Union[DRSTableHeader, DRSSkippedTableHeader]


@dataclass(frozen=True, repr=False)
class DRSTableEntry(EZRepr):
    """
    A directory entry describing one file in a table.

    Attributes:
        file_id: The ID of the file. IDs are normally unique within a table, but not necessarily across the archive.
        file_offset: The declared offset of the file content (informational only).
        file_size: The exact length of the file content, in bytes.
    """

    file_id: int
    file_offset: int
    file_size: int


def decode_table_headers(
    reader: BinaryReader, count: int, options: Optional[DRSLoadOptions] = None, source_name: Optional[str] = None
) -> List[AnyTableHeader]:
    """
    Reads the headers for `count` tables.

    Raises:
        DRSUnknownFileTypeError: If a table has an unrecognized file type and `options.skip_unknown_tables` is not set.
            No partial list is returned.
        DRSIOError: If the data ends prematurely.
    """

    options = options or DRSLoadOptions()

    headers = []

    with read_errors_as_drs_io_errors(source_name):
        for _ in range(count):
            raw_tag, table_offset, file_count = reader.read_struct('III', 'table header')

            try:
                file_type = DRSFileType.from_tag(raw_tag)
            except DRSUnknownFileTypeError:
                if not options.skip_unknown_tables:
                    raise

                LOG.warning(
                    "Skipping table of unknown type 0x%08X (%r) with %d files",
                    raw_tag, tag_to_text(raw_tag), file_count
                )
                headers.append(DRSSkippedTableHeader(raw_tag=raw_tag, table_offset=table_offset, file_count=file_count))
                continue

            headers.append(DRSTableHeader(file_type=file_type, table_offset=table_offset, file_count=file_count))

    return headers


def decode_entries(
    reader: BinaryReader, table_headers: Sequence[AnyTableHeader], options: Optional[DRSLoadOptions] = None,
    source_name: Optional[str] = None
) -> List[List[DRSTableEntry]]:
    """
    Reads the entry directories for all the tables, in order.

    Returns:
        A list parallel to `table_headers`, each item being the list of entries in the corresponding table.
    """

    options = options or DRSLoadOptions()

    all_entries = []

    with read_errors_as_drs_io_errors(source_name):
        for table_header in table_headers:
            if options.verify_offsets:
                check_offset(reader, table_header.table_offset, 'table entry directory', source_name)

            entries = []
            for _ in range(table_header.file_count):
                file_id, file_offset, file_size = reader.read_struct('III', 'table entry')
                entries.append(DRSTableEntry(file_id=file_id, file_offset=file_offset, file_size=file_size))

            all_entries.append(entries)

    return all_entries


def decode_contents(
    reader: BinaryReader, entry_lists: Sequence[Sequence[DRSTableEntry]], options: Optional[DRSLoadOptions] = None,
    source_name: Optional[str] = None
) -> List[List[bytes]]:
    """
    Reads the contents of all the files, in table-then-entry order.

    The data is returned verbatim, exactly `file_size` bytes for each entry.

    Raises:
        DRSIOError: If the data ends before the complete content of some file could be read. A truncated content is
            never returned.
    """

    options = options or DRSLoadOptions()

    all_contents = []

    with read_errors_as_drs_io_errors(source_name):
        for entries in entry_lists:
            contents = []

            for entry in entries:
                if options.verify_offsets:
                    check_offset(reader, entry.file_offset, f"content of file {entry.file_id}", source_name)

                meaning = f"content of file {entry.file_id}"

                if reader.seekable():
                    check_available(reader, entry.file_size, meaning)

                contents.append(reader.read_amount(entry.file_size, meaning))

            all_contents.append(contents)

    return all_contents


def check_offset(reader: BinaryReader, declared_offset: int, meaning: str, source_name: Optional[str]):
    if reader.tell() != declared_offset:
        raise DRSLayoutError(source_name, meaning, declared_offset, reader.tell())


def check_available(reader: BinaryReader, n_bytes: int, meaning: str):
    """
    Fails before reading if fewer than `n_bytes` remain, so that a corrupt size never causes a huge allocation.
    """
    available = reader.bytes_remaining()

    if available == 0 and n_bytes > 0:
        raise BinaryReaderMissingDataError(reader.tell(), n_bytes, meaning)
    if available < n_bytes:
        raise BinaryReaderReadPastEndError(reader.tell(), n_bytes, available, meaning)
