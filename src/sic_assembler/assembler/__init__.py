"""
SIC Two-Pass Assembler
======================

This package assembles source for the Simplified Instructional Computer
(SIC) into a linker-style object program of Header, Text, Modification
and End records.

Main Components
---------------
- **Assembler**: Facade that owns the source stream and writes output
- **CodeGenerator**: Pass 1 (symbols, addresses) and pass 2 (records)
- **classify_line / parse_line**: Line classification and field splitting
- **SymbolTable**: Append-only label -> address mapping
- **address_increment / is_directive**: Directive handling shared by both passes

Assembly Process
----------------
1. **Pass 1**: Stream the source, classify every line, advance the
   address counter and record each label's address.
2. **Rewind** the source stream.
3. **Pass 2**: Stream it again, recompute the same addresses, encode
   every statement and collect the records.
4. **Write** the object program (Head, Text*, Modification*, End).

Example Usage
-------------
>>> from sic_assembler.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_file("copy.asm")
>>> asm.write_object()          # copy.asm.obj
"""

from sic_assembler.assembler.assembler import (
    Assembler,
    AssemblerOptions,
    assemble,
    assemble_file,
    default_object_path,
)
from sic_assembler.assembler.codegen import (
    CodeGenerator,
    Pass1Result,
    ListingLine,
    advance_counter,
    encode_instruction,
    encode_word,
    encode_byte,
)
from sic_assembler.assembler.directives import (
    DIRECTIVES,
    is_directive,
    address_increment,
)
from sic_assembler.assembler.parser import (
    AssemblyLine,
    LineKind,
    classify_line,
    parse_line,
    tokenize,
)
from sic_assembler.assembler.symbols import Symbol, SymbolTable

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblerOptions",
    "assemble",
    "assemble_file",
    "default_object_path",
    # Code generator
    "CodeGenerator",
    "Pass1Result",
    "ListingLine",
    "advance_counter",
    "encode_instruction",
    "encode_word",
    "encode_byte",
    # Directives
    "DIRECTIVES",
    "is_directive",
    "address_increment",
    # Parser
    "AssemblyLine",
    "LineKind",
    "classify_line",
    "parse_line",
    "tokenize",
    # Symbols
    "Symbol",
    "SymbolTable",
]
