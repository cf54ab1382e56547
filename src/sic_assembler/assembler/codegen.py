"""
SIC Code Generator
==================

This module turns SIC assembly source into an object program using the
classic two-pass scheme.

Pass 1 (Symbol Resolution)
--------------------------
- Stream the source line by line
- Classify each line and advance the address counter
- Record every column-1 label at the current address
- Pick up the load address from START

Pass 2 (Code Generation)
------------------------
- Rewind the source and stream it again
- Recompute the address counter with the same functions as pass 1
- Encode each statement and append a text record
- Emit the header at START and the modification and end records at END

Neither pass shares mutable state with the other. Pass 1 returns a
Pass1Result; pass 2 takes it as an argument and returns the finished
ObjectProgram.

Object Code Encoding
--------------------
```
Machine instruction   OOAAAA    opcode, operand address
WORD n                VVVVVV    n as 24-bit two's complement
BYTE X'F1'            F1        digits copied through
BYTE C'EOF'           454F46    ASCII code of each character
```
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO
import logging

from sic_assembler.assembler.directives import (
    STORAGE_DIRECTIVES,
    address_increment,
    is_directive,
    parse_decimal,
    parse_hex,
    split_byte_literal,
)
from sic_assembler.assembler.parser import (
    AssemblyLine,
    LineKind,
    classify_line,
    parse_line,
)
from sic_assembler.assembler.symbols import SymbolTable
from sic_assembler.cpu import (
    INSTRUCTION_SIZE,
    MAX_ADDRESS,
    get_instruction_info,
    takes_operand,
)
from sic_assembler.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    DuplicateSymbolError,
    MemoryBoundsError,
    MissingOperandError,
    OperandTooLongError,
    PhaseError,
    SourceLocation,
    UndefinedSymbolError,
    UnknownInstructionError,
)
from sic_assembler.objfile.records import (
    ADDRESS_FIELD_HALF_BYTES,
    ModificationEntry,
    ObjectProgram,
)

logger = logging.getLogger(__name__)


# Longest directive operand that fits one text record
MAX_LITERAL_LENGTH = 60

WORD_MIN = -(1 << 23)
WORD_MAX = (1 << 24) - 1


# =============================================================================
# Encoding Helpers
# =============================================================================

def encode_instruction(opcode: int, address: int) -> str:
    """Encode a machine instruction as six hex digits (OOAAAA)."""
    return f"{opcode:02X}{address:04X}"


def encode_word(
    operand: str,
    location: Optional[SourceLocation] = None,
) -> str:
    """Encode a WORD operand (decimal) as six hex digits."""
    value = parse_decimal(operand, location)
    if not WORD_MIN <= value <= WORD_MAX:
        raise AssemblerError(
            f"WORD value {value} does not fit in 24 bits",
            location=location,
        )
    return f"{value & 0xFFFFFF:06X}"


def encode_byte(
    operand: str,
    location: Optional[SourceLocation] = None,
) -> str:
    """Encode a BYTE operand: X'..' verbatim, C'..' as ASCII codes."""
    kind, body = split_byte_literal(operand, location)
    if kind == "X":
        return body
    try:
        return body.encode("ascii").hex().upper()
    except UnicodeEncodeError:
        raise AssemblySyntaxError(
            f"character literal {operand} is not ASCII",
            location=location,
        ) from None


def advance_counter(kind: LineKind, line: AssemblyLine, counter: int) -> int:
    """
    Advance the address counter past a parsed line.

    classify_line() already added the default instruction width for an
    indented line, so only the difference is applied on top of it.
    """
    increment = address_increment(line.directive, line.operand, line.location)
    if kind is LineKind.INSTRUCTION:
        increment -= INSTRUCTION_SIZE
    return counter + increment


# =============================================================================
# Pass Results
# =============================================================================

@dataclass
class Pass1Result:
    """
    Everything pass 2 needs from pass 1.

    Attributes:
        symbols: Completed symbol table
        load_address: Address from START (0 if there was none)
        final_address: Address counter at end of input
        program_name: Label of the START line
    """
    symbols: SymbolTable
    load_address: int = 0
    final_address: int = 0
    program_name: str = ""

    @property
    def program_length(self) -> int:
        return self.final_address - self.load_address


@dataclass
class ListingLine:
    """
    One line of the assembly listing.

    Attributes:
        line: Source line number
        address: Address of the statement (None for comments)
        object_code: Generated hex digits ("" if none)
        text: Source text
    """
    line: int
    address: Optional[int]
    object_code: str = ""
    text: str = ""

    def format(self) -> str:
        addr = f"{self.address:04X}" if self.address is not None else "    "
        return f"{addr}  {self.object_code:<12s}  {self.line:4d}  {self.text}"


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates a SIC object program from assembly source.

    Usage:
        codegen = CodeGenerator()
        with open("copy.asm") as f:
            program = codegen.generate(f, "copy.asm")
        program.write("copy.asm.obj")
    """

    def __init__(
        self,
        reject_undefined_symbols: bool = False,
        reject_duplicate_symbols: bool = False,
        max_address: int = MAX_ADDRESS,
    ):
        """
        Initialize the code generator.

        Args:
            reject_undefined_symbols: Raise UndefinedSymbolError instead of
                                      encoding address 0 for unknown operands
            reject_duplicate_symbols: Raise DuplicateSymbolError instead of
                                      keeping the first definition
            max_address: Address counter value that aborts assembly
        """
        self._reject_undefined = reject_undefined_symbols
        self._reject_duplicates = reject_duplicate_symbols
        self._max_address = max_address

        self._pass1_result: Optional[Pass1Result] = None
        self._program: Optional[ObjectProgram] = None
        self._listing_lines: list[ListingLine] = []

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(self, stream: TextIO, filename: str = "<input>") -> ObjectProgram:
        """
        Assemble the source read from a seekable text stream.

        Args:
            stream: Open source stream, positioned at its start
            filename: Name used in error messages

        Returns:
            The completed ObjectProgram

        Raises:
            AssemblerError: If assembly fails
        """
        self._pass1_result = None
        self._program = None
        self._listing_lines = []

        pass1 = self._pass1(stream, filename)
        logger.debug(
            f"Pass 1 complete: {len(pass1.symbols)} symbols, "
            f"load ${pass1.load_address:04X}, end ${pass1.final_address:04X}"
        )

        stream.seek(0)
        program = self._pass2(stream, pass1, filename)
        logger.debug(
            f"Pass 2 complete: {len(program.text_records)} text, "
            f"{len(program.mod_records)} modification records"
        )

        self._pass1_result = pass1
        self._program = program
        return program

    def get_program(self) -> Optional[ObjectProgram]:
        """Return the last generated object program."""
        return self._program

    def get_symbol_table(self) -> SymbolTable:
        """Return the symbol table of the last assembly."""
        if self._pass1_result is None:
            return SymbolTable()
        return self._pass1_result.symbols

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return self.get_symbol_table().as_dict()

    def get_load_address(self) -> int:
        return self._pass1_result.load_address if self._pass1_result else 0

    def get_program_length(self) -> int:
        return self._pass1_result.program_length if self._pass1_result else 0

    def get_program_name(self) -> str:
        return self._pass1_result.program_name if self._pass1_result else ""

    def get_listing_lines(self) -> list[ListingLine]:
        """Return the per-line listing entries recorded by pass 2."""
        return list(self._listing_lines)

    # =========================================================================
    # Pass 1: Symbol Resolution
    # =========================================================================

    def _pass1(self, stream: TextIO, filename: str) -> Pass1Result:
        """
        Build the symbol table and find the load address.

        Raises:
            MemoryBoundsError: If the counter reaches max_address before
                               the end of input
        """
        result = Pass1Result(symbols=SymbolTable())
        counter = 0

        for line_no, raw in enumerate(stream, start=1):
            location = SourceLocation(filename, line_no)

            if counter >= self._max_address:
                raise MemoryBoundsError(
                    counter,
                    self._max_address,
                    location=location,
                    source_line=raw.rstrip("\r\n"),
                )

            kind, counter = classify_line(raw, counter)
            line = parse_line(raw, kind, location)
            if line is None:
                continue

            if line.directive == "START":
                counter = self._start_address(line)
                result.load_address = counter
                result.program_name = line.symbol or ""
                continue

            if line.symbol is not None:
                self._define_symbol(result.symbols, line, counter)

            counter = advance_counter(kind, line, counter)

        result.final_address = counter
        return result

    def _define_symbol(self, symbols: SymbolTable, line: AssemblyLine, address: int) -> None:
        existing = symbols.define(line.symbol, address, line.location)
        if existing is None:
            return
        if self._reject_duplicates:
            raise DuplicateSymbolError(
                line.symbol,
                location=line.location,
                original_location=existing.location,
                source_line=line.text,
            )
        logger.warning(
            f"{line.location}: duplicate symbol '{line.symbol}' ignored, "
            f"first defined at {existing.location}"
        )

    # =========================================================================
    # Pass 2: Code Generation
    # =========================================================================

    def _pass2(self, stream: TextIO, pass1: Pass1Result, filename: str) -> ObjectProgram:
        """
        Generate the object program.

        Raises:
            DirectiveError: Duplicate START, END without START, or no END
        """
        program = ObjectProgram()
        modifications: list[ModificationEntry] = []
        load_address: Optional[int] = None
        counter = 0

        for line_no, raw in enumerate(stream, start=1):
            location = SourceLocation(filename, line_no)
            kind, counter = classify_line(raw, counter)
            line = parse_line(raw, kind, location)
            if line is None:
                self._listing_lines.append(ListingLine(line_no, None, "", raw.rstrip("\r\n")))
                continue

            # Address of this statement, before the classifier's default width
            address = counter - INSTRUCTION_SIZE if kind is LineKind.INSTRUCTION else counter

            if line.directive == "START":
                if load_address is not None:
                    raise DirectiveError(
                        "Starting address was already defined",
                        location=location,
                        source_line=line.text,
                    )
                load_address = counter = self._start_address(line)
                program.set_header(
                    line.symbol or "",
                    load_address,
                    pass1.final_address - load_address,
                )
                self._listing_lines.append(ListingLine(line_no, load_address, "", line.text))
                continue

            if line.directive == "END":
                if load_address is None:
                    raise DirectiveError(
                        "END directive without a preceding START",
                        location=location,
                        source_line=line.text,
                    )
                program.set_end(load_address)
                program.add_modifications(modifications)
                self._listing_lines.append(ListingLine(line_no, address, "", line.text))
                logger.debug(f"{location}: END reached, remaining lines ignored")
                break

            if line.symbol is not None:
                self._check_phase(pass1.symbols, line, counter)

            object_code = self._encode(line, pass1.symbols)
            if object_code:
                program.add_text(object_code)
            if self._needs_relocation(line):
                modifications.append(ModificationEntry(
                    load_address if load_address is not None else 0,
                    ADDRESS_FIELD_HALF_BYTES,
                    line.operand,
                ))

            self._listing_lines.append(ListingLine(line_no, address, object_code, line.text))
            counter = advance_counter(kind, line, counter)

        if not program.end_record:
            raise DirectiveError(
                f"missing END directive in {filename}",
                hint="finish the program with 'END <first instruction>'",
            )

        return program

    def _check_phase(self, symbols: SymbolTable, line: AssemblyLine, counter: int) -> None:
        """Verify pass 2 reached a label at the address pass 1 gave it."""
        symbol = symbols.lookup(line.symbol)
        if symbol is None or symbol.location != line.location:
            return
        if symbol.address != counter:
            raise PhaseError(line.symbol, symbol.address, counter, location=line.location)

    @staticmethod
    def _needs_relocation(line: AssemblyLine) -> bool:
        return (
            not is_directive(line.directive)
            and takes_operand(line.directive)
            and line.operand is not None
        )

    # =========================================================================
    # Statement Encoding
    # =========================================================================

    def _encode(self, line: AssemblyLine, symbols: SymbolTable) -> str:
        """Return the object code of a statement as hex digits ("" if none)."""
        directive = line.directive

        if is_directive(directive):
            if directive in STORAGE_DIRECTIVES:
                return ""
            operand = line.operand
            if operand is None:
                raise MissingOperandError(
                    f"{directive} operand",
                    location=line.location,
                    source_line=line.text,
                )
            if len(operand) > MAX_LITERAL_LENGTH:
                raise OperandTooLongError(
                    operand,
                    MAX_LITERAL_LENGTH,
                    location=line.location,
                    source_line=line.text,
                )
            if directive == "WORD":
                return encode_word(operand, line.location)
            return encode_byte(operand, line.location)

        info = get_instruction_info(directive)
        if info is None:
            raise UnknownInstructionError(
                directive,
                location=line.location,
                source_line=line.text,
            )
        return encode_instruction(info.opcode, self._resolve_operand(line, symbols))

    def _resolve_operand(self, line: AssemblyLine, symbols: SymbolTable) -> int:
        """Return the address an instruction operand refers to."""
        if not takes_operand(line.directive):
            return 0
        if line.operand is None:
            raise MissingOperandError(
                f"operand for {line.directive}",
                location=line.location,
                source_line=line.text,
            )

        symbol = symbols.lookup(line.operand)
        if symbol is not None:
            return symbol.address

        if self._reject_undefined:
            raise UndefinedSymbolError(
                line.operand,
                location=line.location,
                source_line=line.text,
                similar_symbols=symbols.similar(line.operand),
            )
        logger.warning(f"{line.location}: undefined symbol '{line.operand}', using address 0000")
        return 0

    def _start_address(self, line: AssemblyLine) -> int:
        if line.operand is None:
            raise MissingOperandError(
                "START load address",
                location=line.location,
                source_line=line.text,
            )
        return parse_hex(line.operand, line.location)

    # =========================================================================
    # Output File Writing
    # =========================================================================

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, generated code and source
            lines, followed by the symbol table.
        """
        lines = []
        lines.append("SIC Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr  Code          Line  Source")
        lines.append("-" * 60)
        lines.extend(entry.format() for entry in self._listing_lines)
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for symbol in self.get_symbol_table():
            lines.append(f"{symbol.name:20s} = {symbol.address:04X}")
        return "\n".join(lines) + "\n"

    def write_listing(self, filepath: str | Path) -> None:
        with open(filepath, "w") as f:
            f.write(self.get_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, definition order)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by sicasm\n")
            for symbol in self.get_symbol_table():
                f.write(f"{symbol.name} {symbol.address:04X}\n")
