"""
SIC Assembler - Two-Pass Assembler for the Simplified Instructional Computer
============================================================================

This package assembles SIC assembly source into a linker-style object
program (Header, Text, Modification and End records).

Main Components
---------------
- **assembler**: The two-pass assembler (sicasm)
- **objfile**: Object program records, writer and reader
- **cpu**: SIC opcode table and machine constants

Quick Start
-----------
Assemble a program:
    >>> from sic_assembler import Assembler
    >>> asm = Assembler()
    >>> asm.assemble_file("copy.asm")
    >>> asm.write_object("copy.obj")

Read an object program back:
    >>> from sic_assembler import read_object_file
    >>> obj = read_object_file("copy.obj")
    >>> print(obj.name, f"{obj.load_address:06X}")

Or use the command-line tool:
    $ sicasm copy.asm
"""

__version__ = "1.0.0"
__author__ = "SIC Assembler Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from sic_assembler.assembler import (
    Assembler,
    AssemblerOptions,
    assemble,
    assemble_file,
)
from sic_assembler.errors import (
    SicError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    MissingOperandError,
    UnknownInstructionError,
    NumberFormatError,
    OperandTooLongError,
    DirectiveError,
    MemoryBoundsError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    PhaseError,
    ObjectFileError,
)
from sic_assembler.objfile import (
    ObjectProgram,
    ObjectFile,
    ModificationEntry,
    parse_object_program,
    read_object_file,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Assembler
    "Assembler",
    "AssemblerOptions",
    "assemble",
    "assemble_file",
    # Object files
    "ObjectProgram",
    "ObjectFile",
    "ModificationEntry",
    "parse_object_program",
    "read_object_file",
    # Exception hierarchy
    "SicError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "MissingOperandError",
    "UnknownInstructionError",
    "NumberFormatError",
    "OperandTooLongError",
    "DirectiveError",
    "MemoryBoundsError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "PhaseError",
    "ObjectFileError",
]
