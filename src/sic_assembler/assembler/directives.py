"""
SIC Assembler Directives
========================

Classification of pseudo-ops and the address arithmetic they imply.

Supported Directives
--------------------
- START addr   : Program name and hexadecimal load address
- END [label]  : End of source
- RESB n       : Reserve n bytes
- RESW n       : Reserve n words (3 bytes each)
- RESR         : Reserve a register-sized slot
- BYTE C'..'   : Character constant, one byte per character
- BYTE X'..'   : Hex constant, one byte per two digits
- WORD n       : One-word (3-byte) decimal constant
- EXPORTS      : Export marker for the linker

The address calculator in this module is shared by both passes. It must
stay free of side effects: pass 2 recomputes every address that pass 1
computed and the two must agree line for line.
"""

from typing import Optional

from sic_assembler.cpu import INSTRUCTION_SIZE, WORD_SIZE
from sic_assembler.errors import (
    AssemblySyntaxError,
    DirectiveError,
    MissingOperandError,
    NumberFormatError,
    SourceLocation,
)


DIRECTIVES: frozenset[str] = frozenset({
    "START", "END", "RESB", "RESW", "RESR", "BYTE", "WORD", "EXPORTS",
})

# Directives that produce no object code
STORAGE_DIRECTIVES: frozenset[str] = frozenset({
    "START", "END", "RESB", "RESW", "RESR", "EXPORTS",
})


def is_directive(token: Optional[str]) -> bool:
    """Return True if token is exactly one of the SIC pseudo-ops."""
    return token in DIRECTIVES


# =============================================================================
# Operand Parsing
# =============================================================================

def parse_decimal(
    text: str,
    location: Optional[SourceLocation] = None,
) -> int:
    """Parse a base-10 operand (optional minus), raising NumberFormatError on failure."""
    # int() also accepts "+", underscores, whitespace and non-ASCII digits
    digits = text[1:] if text.startswith("-") else text
    if not digits or not all(c in "0123456789" for c in digits):
        raise NumberFormatError(text, 10, location=location)
    return int(text, 10)


def parse_hex(
    text: str,
    location: Optional[SourceLocation] = None,
) -> int:
    """Parse a base-16 operand (no prefix), raising NumberFormatError on failure."""
    # int() accepts "0x" prefixes and underscores; SIC operands have neither
    if not text or not all(c in "0123456789abcdefABCDEF" for c in text):
        raise NumberFormatError(text, 16, location=location)
    return int(text, 16)


def split_byte_literal(
    operand: str,
    location: Optional[SourceLocation] = None,
) -> tuple[str, str]:
    """
    Split a BYTE operand into its kind and body.

    Args:
        operand: Operand text such as C'EOF' or X'F1'

    Returns:
        Tuple of (kind, body) where kind is "C" or "X"

    Raises:
        AssemblySyntaxError: If the operand is not a quoted C/X literal
        NumberFormatError: If an X literal contains non-hex digits or an
                           odd number of digits
    """
    kind = operand[:1]
    if kind not in ("C", "X"):
        raise AssemblySyntaxError(
            f"BYTE operand must be C'...' or X'...', got '{operand}'",
            location=location,
        )
    if len(operand) < 3 or operand[1] != "'" or operand[-1] != "'":
        raise AssemblySyntaxError(
            f"unterminated literal '{operand}'",
            location=location,
        )

    body = operand[2:-1]
    if kind == "X":
        if len(body) % 2:
            raise NumberFormatError(
                body, 16, location=location,
            )
        if body:
            parse_hex(body, location)
    return kind, body


# =============================================================================
# Address Calculator
# =============================================================================

def address_increment(
    directive: Optional[str],
    operand: Optional[str],
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Return the number of bytes a line occupies.

    | directive | increment              |
    |-----------|------------------------|
    | RESB n    | n                      |
    | RESW n    | 3 * n                  |
    | BYTE C's' | len(s)                 |
    | BYTE X'h' | len(h) / 2             |
    | END       | 0                      |
    | other     | 3 (one instruction)    |

    Args:
        directive: Directive or mnemonic of the line
        operand: Operand text, or None
        location: Source location used in error messages

    Raises:
        MissingOperandError: RESB/RESW without a count
        NumberFormatError: Count that is not a decimal integer
        DirectiveError: Negative RESB/RESW count
    """
    if directive == "END":
        return 0

    if directive in ("RESB", "RESW"):
        if operand is None:
            raise MissingOperandError(f"{directive} count", location=location)
        count = parse_decimal(operand, location)
        if count < 0:
            raise DirectiveError(
                f"{directive} count must not be negative, got {count}",
                location=location,
            )
        return count if directive == "RESB" else count * WORD_SIZE

    if directive == "BYTE" and operand and operand[0] in ("C", "X"):
        kind, body = split_byte_literal(operand, location)
        return len(body) if kind == "C" else len(body) // 2

    return INSTRUCTION_SIZE
