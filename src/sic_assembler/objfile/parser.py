"""
SIC Object File Parser
======================

Reads object programs produced by the assembler back into record objects.
Useful for inspecting output, for tests, and for a loader that wants the
decoded object code.

Usage Examples
--------------
    >>> from sic_assembler.objfile import read_object_file
    >>> obj = read_object_file("copy.asm.obj")
    >>> print(f"{obj.name} loads at {obj.load_address:06X}")
    >>> for mod in obj.modifications:
    ...     print(f"  relocate {mod.starting_address:06X} by {mod.symbol}")

Validation
----------
The parser checks that:
- Every line starts with a known record prefix (H, T, M, E)
- Fixed-width fields have the right width and contain only hex digits
- Records appear in Head, Text*, Modification*, End order
- There is exactly one Head record and exactly one End record
"""

from pathlib import Path
import logging

from sic_assembler.errors import ObjectFileError
from sic_assembler.objfile.records import (
    END_PREFIX,
    HEADER_PREFIX,
    MODIFICATION_PREFIX,
    TEXT_PREFIX,
    EndRecord,
    HeaderRecord,
    ModificationEntry,
    ObjectFile,
    TextRecord,
)

logger = logging.getLogger(__name__)


# Position of each record type in the file; order must never decrease
_RECORD_ORDER = {
    HEADER_PREFIX: 0,
    TEXT_PREFIX: 1,
    MODIFICATION_PREFIX: 2,
    END_PREFIX: 3,
}


def parse_object_program(text: str) -> ObjectFile:
    """
    Parse the contents of an object file.

    Args:
        text: Object file text

    Returns:
        Decoded ObjectFile

    Raises:
        ObjectFileError: If the text is not a well-formed object program
    """
    header = None
    end = None
    text_records: list[TextRecord] = []
    modifications: list[ModificationEntry] = []
    last_order = -1

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line:
            continue

        prefix = line[0]
        order = _RECORD_ORDER.get(prefix)
        if order is None:
            raise ObjectFileError(f"unknown record type '{prefix}'", line=line_no)
        if end is not None:
            raise ObjectFileError("record after End record", line=line_no)
        if order < last_order or (order == 0 and header is not None):
            raise ObjectFileError(f"'{prefix}' record out of order", line=line_no)
        last_order = order

        try:
            if prefix == HEADER_PREFIX:
                header = HeaderRecord.from_text(line)
            elif prefix == TEXT_PREFIX:
                text_records.append(TextRecord.from_text(line))
            elif prefix == MODIFICATION_PREFIX:
                modifications.append(ModificationEntry.from_text(line))
            else:
                end = EndRecord.from_text(line)
        except ValueError as e:
            raise ObjectFileError(str(e), line=line_no) from e

    if header is None:
        raise ObjectFileError("missing Header record")
    if end is None:
        raise ObjectFileError("missing End record")

    logger.debug(
        f"Parsed object program '{header.name}': {len(text_records)} text, "
        f"{len(modifications)} modification records"
    )
    return ObjectFile(header, text_records, modifications, end)


def read_object_file(filepath: str | Path) -> ObjectFile:
    """
    Read and parse an object file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ObjectFileError: If the file is not a well-formed object program
    """
    return parse_object_program(Path(filepath).read_text())
