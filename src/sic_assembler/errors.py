"""
SIC Assembler Error Hierarchy
=============================

This module defines the exception hierarchy for the whole assembler.
All exceptions inherit from SicError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
SicError (base)
├── AssemblerError (assembly-related)
│   ├── AssemblySyntaxError - malformed source line
│   │   ├── MissingOperandError - directive/operand token missing
│   │   └── UnknownInstructionError - mnemonic not in the instruction table
│   ├── NumberFormatError - operand does not parse in the expected radix
│   ├── OperandTooLongError - literal longer than one text record allows
│   ├── DirectiveError - START/END misuse
│   ├── MemoryBoundsError - address counter left the SIC address space
│   ├── UndefinedSymbolError - operand names no known symbol (strict mode)
│   ├── DuplicateSymbolError - label defined twice (strict mode)
│   └── PhaseError - pass 1 and pass 2 disagree on an address
└── ObjectFileError (reading back object files)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SicError(Exception):
    """
    Base exception for all SIC assembler errors.

        try:
            assembler.assemble_file("program.asm")
        except SicError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(SicError):
    """
    Base exception for all assembly errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            copy.asm:4:1: error: Starting address was already defined
                AGAIN   START   2000
                ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Malformed source line.

    Examples:
        - BYTE operand that is neither C'...' nor X'...'
        - Unterminated quoted literal
    """
    pass


class MissingOperandError(AssemblySyntaxError):
    """
    A mandatory token is missing from a line.

    Raised for START without a load address, RESB/RESW/WORD/BYTE without
    an operand, and symbol-defining lines that carry only a label.
    """

    def __init__(
        self,
        what: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.what = what
        super().__init__(
            f"missing {what}",
            location=location,
            source_line=source_line,
        )


class UnknownInstructionError(AssemblySyntaxError):
    """Mnemonic is neither a directive nor a SIC instruction."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        super().__init__(
            f"unknown instruction '{mnemonic}'",
            location=location,
            source_line=source_line,
        )


class NumberFormatError(AssemblerError):
    """
    Numeric operand does not parse under the expected radix.

    RESB, RESW and WORD take decimal operands; START and X'..' literals
    take hexadecimal ones.
    """

    def __init__(
        self,
        text: str,
        radix: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        self.radix = radix
        kind = "hexadecimal" if radix == 16 else "decimal"
        super().__init__(
            f"'{text}' is not a valid {kind} number",
            location=location,
            source_line=source_line,
        )


class OperandTooLongError(AssemblerError):
    """
    Literal operand longer than a single text record can hold.

    Splitting a long BYTE literal across several text records is not
    supported; the operand is rejected rather than truncated.
    """

    def __init__(
        self,
        operand: str,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.operand = operand
        self.limit = limit
        super().__init__(
            f"operand is {len(operand)} characters long, limit is {limit}",
            location=location,
            hint="split the literal over several BYTE directives",
            source_line=source_line,
        )


class DirectiveError(AssemblerError):
    """
    Error in assembler directive usage.

    Examples:
        - START appearing twice
        - Negative RESB/RESW count
        - END without a preceding START
        - Source without any END
    """
    pass


class MemoryBoundsError(AssemblerError):
    """The address counter reached the top of the SIC address space."""

    def __init__(
        self,
        address: int,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address
        self.limit = limit
        super().__init__(
            f"Memory out of bounds: address {address:04X} exceeds {limit:04X}",
            location=location,
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined symbol.

    Only raised when the assembler runs with undefined symbols rejected;
    otherwise the reference resolves to address 0.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = None
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Symbol defined multiple times.

    Only raised when duplicate definitions are rejected; otherwise the
    first definition wins.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class PhaseError(AssemblerError):
    """
    Pass 1 and pass 2 computed different addresses for the same label.

    Both passes advance the address counter with the same functions, so
    this indicates a bug in the assembler rather than in the source.
    """

    def __init__(
        self,
        symbol: str,
        pass1_address: int,
        pass2_address: int,
        location: Optional[SourceLocation] = None,
    ):
        self.symbol = symbol
        self.pass1_address = pass1_address
        self.pass2_address = pass2_address
        super().__init__(
            f"phase error at '{symbol}': pass 1 address {pass1_address:04X}, "
            f"pass 2 address {pass2_address:04X}",
            location=location,
        )


# =============================================================================
# Object File Exceptions
# =============================================================================

class ObjectFileError(SicError):
    """
    Invalid object file contents.

    Raised when reading an object program that has:
    - An unknown record prefix
    - Fields of the wrong width or non-hex digits
    - Records out of Header/Text/Modification/End order
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
