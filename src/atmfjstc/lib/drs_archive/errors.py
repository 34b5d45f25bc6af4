from typing import Optional, ContextManager
from contextlib import contextmanager

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReaderFormatError


def _quoted(source_name: Optional[str]) -> str:
    return f" '{source_name}'" if source_name is not None else ''


class DRSError(Exception):
    """
    Base class for all exceptions raised while loading a DRS archive.
    """


class DRSIOError(DRSError):
    """
    Raised when the archive cannot be opened, read or seeked, including when the data ends before a complete structure
    or file content could be read.

    The underlying `OSError` or `BinaryReaderFormatError` is available as ``__cause__``.
    """

    source_name: Optional[str]

    def __init__(self, source_name: Optional[str], message: Optional[str] = None):
        super().__init__(f"Could not read DRS archive{_quoted(source_name)}{f': {message}' if message else ''}")

        self.source_name = source_name


class DRSFormatInvalidError(DRSError):
    """
    Raised when the archive header does not carry the literal copyright, version or type text expected for its variant.
    """

    source_name: Optional[str]
    meaning: Optional[str]

    def __init__(self, source_name: Optional[str], meaning: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or
            f"File{_quoted(source_name)} is not a valid DRS archive"
            f"{f' (unexpected {meaning})' if meaning is not None else ''}"
        )

        self.source_name = source_name
        self.meaning = meaning


class DRSLayoutError(DRSFormatInvalidError):
    """
    Raised when a declared offset disagrees with the actual position in the stream. Only raised when offset
    verification is enabled in the `DRSLoadOptions`.
    """

    expected_offset: int
    actual_offset: int

    def __init__(self, source_name: Optional[str], meaning: str, expected_offset: int, actual_offset: int):
        super().__init__(
            source_name, meaning,
            f"DRS archive{_quoted(source_name)} has a corrupt layout: {meaning} is declared at offset "
            f"{expected_offset}, but occurs at offset {actual_offset}"
        )

        self.expected_offset = expected_offset
        self.actual_offset = actual_offset


class DRSUnknownFileTypeError(DRSError):
    """
    Raised when a table header names a file type tag that is not one of the known ones.
    """

    raw_tag: int

    def __init__(self, raw_tag: int):
        super().__init__(f"Unknown file type encountered in DRS archive: 0x{raw_tag:08X} ({tag_to_text(raw_tag)!r})")

        self.raw_tag = raw_tag


def tag_to_text(raw_tag: int) -> str:
    """
    Renders a file type tag as the 4-character code it spells (e.g. ``0x77617620`` -> ``'wav '``).
    """
    return raw_tag.to_bytes(4, byteorder='big').decode('latin-1')


@contextmanager
def read_errors_as_drs_io_errors(source_name: Optional[str]) -> ContextManager[None]:
    """
    Use ``with read_errors_as_drs_io_errors(name): <code>`` to report stream failures (I/O errors, or data ending
    before a complete structure was read) as `DRSIOError` exceptions.
    """
    try:
        yield
    except BinaryReaderFormatError as e:
        raise DRSIOError(source_name, str(e)) from e
    except OSError as e:
        raise DRSIOError(source_name, str(e)) from e
