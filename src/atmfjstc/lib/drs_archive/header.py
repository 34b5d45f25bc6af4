"""
Detection of the archive variant and decoding of the main archive header.

DRS archives come in two variants that share the same layout but differ in the length of the copyright block at the
start of the file and in the literal texts the header must contain:

- The base *Age of Empires* (1997) variant, with a 40-byte copyright block
- The *Star Wars: Galactic Battlegrounds* (2001) variant, with a 60-byte copyright block

The variant cannot be told apart by the first bytes of the file (both start with "Copyright (c)"), so it is detected by
peeking at absolute offset 64, which is where the type text of the expansion variant sits.
"""

import logging

from dataclasses import dataclass
from enum import IntEnum
from os import SEEK_SET
from typing import Optional, NamedTuple

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader
from atmfjstc.lib.ez_repr import EZRepr

from atmfjstc.lib.drs_archive.errors import read_errors_as_drs_io_errors
from atmfjstc.lib.drs_archive.validation import validate_literal


LOG = logging.getLogger(__name__)

DISCRIMINATOR_OFFSET = 64
DISCRIMINATOR_LENGTH = 4

VERSION_LENGTH = 4
TYPE_TEXT_LENGTH = 12


class DRSVariant(IntEnum):
    AOE = 0
    """Age of Empires"""
    SWBG = 1
    """Star Wars: Galactic Battlegrounds"""


class DRSVariantLiterals(NamedTuple):
    copyright_length: int
    copyright: bytes
    version: bytes
    type_text: bytes


VARIANT_LITERALS = {
    DRSVariant.AOE: DRSVariantLiterals(
        copyright_length=40,
        copyright=b'Copyright (c) 1997 Ensemble Studios.\x1a',
        version=b'1.00',
        type_text=b'tribe',
    ),
    DRSVariant.SWBG: DRSVariantLiterals(
        copyright_length=60,
        copyright=b'Copyright (c) 2001 LucasArts Entertainment Company LLC\x1a',
        version=b'1.00',
        type_text=b'swbg',
    ),
}

SWBG_DISCRIMINATOR = 'swbg'


@dataclass(frozen=True, repr=False)
class DRSHeader(EZRepr):
    """
    The main header of a DRS archive.

    Attributes:
        variant: Which of the two archive variants this is. The length of `copyright` depends on it.
        copyright: The raw copyright block (40 bytes for AOE, 60 for SWBG), including any padding.
        version: The raw 4-byte version text.
        type_text: The raw 12-byte type text, including any padding.
        table_count: The number of tables in the archive.
        content_base_offset: The declared offset of the first file content. This is informational only; the decoder
            never seeks by it.
    """

    variant: DRSVariant
    copyright: bytes
    version: bytes
    type_text: bytes
    table_count: int
    content_base_offset: int

    @property
    def game_type(self) -> DRSVariant:
        return self.variant

    @property
    def version_str(self) -> str:
        return _decode_padded_text(self.version)

    @property
    def type_str(self) -> str:
        return _decode_padded_text(self.type_text)


def detect_variant(reader: BinaryReader) -> DRSVariant:
    """
    Peeks at the variant discriminator and rewinds the reader to the start of the stream.

    Any discriminator other than that of the expansion variant selects the base variant, including when the stream is
    too short to contain one. Files that are not actually AOE archives will then fail the header literal checks.
    """
    reader.seek(DISCRIMINATOR_OFFSET, SEEK_SET)
    # Not read_amount: a zero-table AOE archive is exactly 64 bytes long and has no discriminator
    raw_discriminator = reader.read_at_most(DISCRIMINATOR_LENGTH)
    reader.seek(0, SEEK_SET)

    return DRSVariant.SWBG if _decode_padded_text(raw_discriminator) == SWBG_DISCRIMINATOR else DRSVariant.AOE


def decode_header(reader: BinaryReader, source_name: Optional[str] = None) -> DRSHeader:
    """
    Decodes and validates the main header of a DRS archive.

    Args:
        reader: A little-endian reader over the archive. It must be seekable, as the variant discriminator is read
            ahead of the header proper. On return, it will be positioned right after the header.
        source_name: The name of the archive file, used in error messages.

    Returns:
        The decoded header.

    Raises:
        DRSFormatInvalidError: If the copyright, version or type text does not match the detected variant.
        DRSIOError: If the data ends before the complete header could be read.
    """

    with read_errors_as_drs_io_errors(source_name):
        variant = detect_variant(reader)
        literals = VARIANT_LITERALS[variant]

        copyright_ = reader.read_amount(literals.copyright_length, 'copyright')
        version = reader.read_amount(VERSION_LENGTH, 'version')
        type_text = reader.read_amount(TYPE_TEXT_LENGTH, 'archive type')
        table_count, content_base_offset = reader.read_struct('II', 'table count and content offset')

    validate_literal(copyright_, literals.copyright, source_name, 'copyright')
    validate_literal(version, literals.version, source_name, 'version')
    validate_literal(type_text, literals.type_text, source_name, 'archive type')

    LOG.debug("Detected %s archive with %d tables", variant.name, table_count)

    return DRSHeader(
        variant=variant,
        copyright=copyright_,
        version=version,
        type_text=type_text,
        table_count=table_count,
        content_base_offset=content_base_offset,
    )


def _decode_padded_text(raw: bytes) -> str:
    return raw.decode('latin-1').strip(' \t\r\n\x00')
