import logging

from dataclasses import dataclass, field
from io import IOBase
from os import PathLike, fspath
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union, BinaryIO, Any, NamedTuple

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader
from atmfjstc.lib.ez_repr import EZRepr

from atmfjstc.lib.drs_archive.errors import DRSIOError
from atmfjstc.lib.drs_archive.header import DRSHeader, DRSVariant, decode_header
from atmfjstc.lib.drs_archive.options import DRSLoadOptions
from atmfjstc.lib.drs_archive.tables import DRSFileType, DRSTableHeader, DRSTableEntry, DRSSkippedTableHeader, \
    decode_table_headers, decode_entries, decode_contents, check_offset


LOG = logging.getLogger(__name__)


def build_index(entries: Sequence[DRSTableEntry]) -> Dict[int, int]:
    """
    Maps the file IDs in a table to positions in its entry (and content) sequence.

    If several entries share the same ID, the last one wins.
    """
    return {entry.file_id: position for position, entry in enumerate(entries)}


@dataclass(frozen=True, repr=False)
class DRSLogicalTable(EZRepr):
    """
    A table of files of the same type, together with their contents.

    Tables are not stored contiguously in the archive (the header, entry directory and contents of a table are spread
    across different regions of the file). This object gathers them together after the archive has been loaded.

    Attributes:
        header: The header of the table
        entries: The entries for the files in the table, in the order they appear in the archive
        contents: The contents of the files, parallel to `entries`
    """

    header: DRSTableHeader
    entries: Tuple[DRSTableEntry, ...]
    contents: Tuple[bytes, ...]

    _index: Dict[int, int] = field(init=False, compare=False)

    def __post_init__(self):
        if len(self.entries) != len(self.contents):
            raise ValueError(f"Got {len(self.entries)} entries but {len(self.contents)} contents")
        if len(self.entries) != self.header.file_count:
            raise ValueError(f"Table declares {self.header.file_count} files but got {len(self.entries)} entries")

        object.__setattr__(self, '_index', build_index(self.entries))

    @property
    def file_type(self) -> DRSFileType:
        return self.header.file_type

    @property
    def file_ids(self) -> Tuple[int, ...]:
        return tuple(entry.file_id for entry in self.entries)

    def find_content(self, file_id: int) -> Optional[bytes]:
        """
        Finds the content of a file in this table, by ID. Returns None if there is no such file.
        """
        position = self._index.get(file_id)

        return self.contents[position] if position is not None else None

    def find_entry(self, file_id: int) -> Optional[DRSTableEntry]:
        """
        Finds the entry for a file in this table, by ID. This is the entry whose content `find_content` returns.
        """
        position = self._index.get(file_id)

        return self.entries[position] if position is not None else None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[DRSTableEntry, bytes]]:
        return iter(zip(self.entries, self.contents))

    def _ez_repr_fields(self):
        return dict(header=self.header, file_count=len(self.entries))


class DRSArchiveFile(NamedTuple):
    file_type: DRSFileType
    file_id: int
    extension: str
    content: bytes


@dataclass(frozen=True, repr=False)
class DRSArchive(EZRepr):
    """
    A fully loaded DRS archive.

    Attributes:
        header: The main header of the archive
        tables: The tables in the archive, in the order they are declared
        source_name: The name of the file the archive was loaded from, if known
        skipped_file_types: The raw type tags of any tables that were skipped because their type was not recognized
            (only possible if `DRSLoadOptions.skip_unknown_tables` was set)
    """

    header: DRSHeader
    tables: Tuple[DRSLogicalTable, ...]
    source_name: Optional[str] = None
    skipped_file_types: Tuple[int, ...] = ()

    @property
    def variant(self) -> DRSVariant:
        return self.header.variant

    def find_table(self, file_type: DRSFileType) -> Optional[DRSLogicalTable]:
        """
        Finds the table holding files of the given type. Returns None if the archive has no such table.
        """
        for table in self.tables:
            if table.file_type == file_type:
                return table

        return None

    def find_content(self, file_type: DRSFileType, file_id: int) -> Optional[bytes]:
        table = self.find_table(file_type)

        return table.find_content(file_id) if table is not None else None

    def iter_files(self) -> Iterator[DRSArchiveFile]:
        """
        Iterates through all the files in the archive, in table-then-entry order.
        """
        for table in self.tables:
            for entry, content in table:
                yield DRSArchiveFile(
                    file_type=table.file_type,
                    file_id=entry.file_id,
                    extension=table.header.file_extension(),
                    content=content,
                )

    def __len__(self) -> int:
        return len(self.tables)

    def __iter__(self) -> Iterator[DRSLogicalTable]:
        return iter(self.tables)


def load(
    path_or_fileobj: Union[PathLike, str, bytes, bytearray, memoryview, BinaryIO],
    options: Optional[DRSLoadOptions] = None
) -> DRSArchive:
    """
    Loads a DRS archive in its entirety.

    Args:
        path_or_fileobj: Either a filename, an open binary file object, or a `bytes`-like object holding the archive
            data. Note that `bytes` are always taken to be archive data, never a file path; pass byte paths through
            `os.fsdecode` first. A file object must be seekable; it is read starting from offset 0 and is not closed
            afterwards.
        options: Settings controlling the strictness of the decoding. The defaults match the game's own behavior.

    Returns:
        The loaded archive, with all file contents held in memory.

    Raises:
        DRSIOError: If the archive could not be opened or read, if it ends prematurely, or if a file object was
            given that is not seekable.
        DRSFormatInvalidError: If the archive header is not valid for either DRS variant.
        DRSUnknownFileTypeError: If a table has an unrecognized type (and skipping such tables is not enabled).
    """

    options = options or DRSLoadOptions()

    if isinstance(path_or_fileobj, (bytes, bytearray, memoryview)):
        return _load_from_reader(BinaryReader(bytes(path_or_fileobj), big_endian=False), None, options)

    if isinstance(path_or_fileobj, IOBase):
        if not path_or_fileobj.seekable():
            raise DRSIOError(_name_to_str(getattr(path_or_fileobj, 'name', None)), "archive stream is not seekable")

        reader = BinaryReader(path_or_fileobj, big_endian=False)

        return _load_from_reader(reader, _name_to_str(reader.name()), options)

    source_name = _name_to_str(fspath(path_or_fileobj))

    try:
        fileobj = open(path_or_fileobj, 'rb')
    except OSError as e:
        raise DRSIOError(source_name, str(e)) from e

    with fileobj:
        return _load_from_reader(BinaryReader(fileobj, big_endian=False), source_name, options)


def _load_from_reader(reader: BinaryReader, source_name: Optional[str], options: DRSLoadOptions) -> DRSArchive:
    header = decode_header(reader, source_name)
    table_headers = decode_table_headers(reader, header.table_count, options, source_name)
    entry_lists = decode_entries(reader, table_headers, options, source_name)

    if options.verify_offsets and any(len(entries) > 0 for entries in entry_lists):
        check_offset(reader, header.content_base_offset, 'first file content', source_name)

    content_lists = decode_contents(reader, entry_lists, options, source_name)

    tables = []
    skipped = []

    for table_header, entries, contents in zip(table_headers, entry_lists, content_lists):
        if isinstance(table_header, DRSSkippedTableHeader):
            skipped.append(table_header.raw_tag)
            continue

        LOG.debug(
            "Loaded %s table with %d files (%d bytes)",
            table_header.file_type.name, len(entries), sum(len(content) for content in contents)
        )
        tables.append(DRSLogicalTable(header=table_header, entries=tuple(entries), contents=tuple(contents)))

    return DRSArchive(
        header=header,
        tables=tuple(tables),
        source_name=source_name,
        skipped_file_types=tuple(skipped),
    )


def _name_to_str(name: Any) -> Optional[str]:
    if name is None:
        return None
    if isinstance(name, bytes):
        return name.decode('utf-8', errors='replace')

    return str(name)
