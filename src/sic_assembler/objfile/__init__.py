"""
SIC Object File Handling
========================

Record types for the SIC object program format, the accumulator used by
the code generator, and a reader for existing object files.

    >>> from sic_assembler.objfile import ObjectProgram
    >>> program = ObjectProgram()
    >>> program.set_header("COPY", 0x1000, 3)
    >>> program.add_text("4C0000")
    >>> program.set_end(0x1000)
    >>> print(program.render(), end="")
    HCOPY  001000000003
    T4C0000
    E001000
"""

from sic_assembler.objfile.records import (
    HeaderRecord,
    TextRecord,
    ModificationEntry,
    EndRecord,
    ObjectProgram,
    ObjectFile,
    ADDRESS_FIELD_HALF_BYTES,
)
from sic_assembler.objfile.parser import (
    parse_object_program,
    read_object_file,
)

__all__ = [
    # Records
    "HeaderRecord",
    "TextRecord",
    "ModificationEntry",
    "EndRecord",
    "ADDRESS_FIELD_HALF_BYTES",
    # Containers
    "ObjectProgram",
    "ObjectFile",
    # Reading
    "parse_object_program",
    "read_object_file",
]
