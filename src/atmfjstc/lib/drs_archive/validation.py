"""
Literal comparisons used to check that the header of an archive has the expected copyright, version and type text.
"""

from typing import Optional

from atmfjstc.lib.drs_archive.errors import DRSFormatInvalidError


def matches_literal(candidate: bytes, expected: bytes) -> bool:
    """
    Checks whether a byte slice starts with an expected literal.

    The candidate may be longer than the literal (e.g. a fixed-size, NUL-padded field) but not shorter.
    """
    return len(candidate) >= len(expected) and candidate[:len(expected)] == expected


def validate_literal(candidate: bytes, expected: bytes, source_name: Optional[str], meaning: str):
    """
    Like `matches_literal`, but raises a `DRSFormatInvalidError` identifying the source if the literal does not match.
    """
    if not matches_literal(candidate, expected):
        raise DRSFormatInvalidError(source_name, meaning)
