"""
Decoder for DRS resource archives, as used by *Age of Empires* (1997) and *Star Wars: Galactic Battlegrounds* (2001).

A DRS archive bundles the game's graphics (SLP, SHP), sounds (WAV) and miscellaneous binary data into a single file.
Files are grouped into one table per file type, and are identified by a numeric ID within their table.

An archive is loaded in its entirety with the `load` function::

    archive = load('path/to/graphics.drs')

after which the content of any file can be retrieved by type and ID::

    table = archive.find_table(DRSFileType.SLP)
    data = table.find_content(1234) if table is not None else None

The loaded archive is immutable. This package does not interpret the contents of the files, nor does it offer
functionality for writing archives.
"""

from atmfjstc.lib.drs_archive.errors import DRSError, DRSIOError, DRSFormatInvalidError, DRSLayoutError, \
    DRSUnknownFileTypeError
from atmfjstc.lib.drs_archive.options import DRSLoadOptions
from atmfjstc.lib.drs_archive.header import DRSVariant, DRSHeader
from atmfjstc.lib.drs_archive.tables import DRSFileType, DRSTableHeader, DRSTableEntry
from atmfjstc.lib.drs_archive.archive import DRSArchive, DRSArchiveFile, DRSLogicalTable, load


__version__ = '0.1.0'
