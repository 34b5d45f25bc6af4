from dataclasses import dataclass

from atmfjstc.lib.ez_repr import EZRepr


@dataclass(frozen=True, repr=False)
class DRSLoadOptions(EZRepr):
    """
    Settings that control how strictly a DRS archive is decoded.

    The defaults reproduce the behavior of the game's own loader.

    Attributes:
        skip_unknown_tables: If True, tables whose file type tag is not recognized are read past and dropped from the
            loaded archive (their raw tags are reported in `DRSArchive.skipped_file_types`). Otherwise, such a table
            aborts the load with a `DRSUnknownFileTypeError`.
        verify_offsets: The offsets declared in the header, table headers and entries are normally ignored, as the
            decoder relies on the strictly sequential layout of the archive. If True, they are checked against the
            actual position in the stream before every read, and a `DRSLayoutError` is raised on mismatch.
    """

    skip_unknown_tables: bool = False
    verify_offsets: bool = False
