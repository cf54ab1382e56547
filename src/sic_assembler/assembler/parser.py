"""
SIC Source Line Parser
======================

Classifies raw source lines and splits them into label, directive and
operand fields.

Source Format
-------------
```
# comment                       <- '#' in column 1
COPY    START   1000            <- label in column 1
FIRST   STL     RETADR
        LDA     ZERO            <- leading tab: no label
EOF     BYTE    C'EOF'
        RSUB
        END     FIRST
```

Fields are separated by whitespace. Quoted C'...' and X'...' literals are
kept as one field even if they contain spaces. Fields past the operand
are ignored and can be used for trailing remarks.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from sic_assembler.assembler.directives import is_directive
from sic_assembler.cpu import INSTRUCTION_SIZE, is_valid_instruction
from sic_assembler.errors import MissingOperandError, SourceLocation


# A quoted literal is a single token; everything else splits on whitespace
_TOKEN_RE = re.compile(r"[CX]'[^']*'|\S+")


class LineKind(Enum):
    """Classification of a raw source line."""
    SYMBOL = auto()         # Label (or bare directive) in column 1
    INSTRUCTION = auto()    # Indented line, no label
    COMMENT = auto()        # '#' in column 1, or blank


@dataclass
class AssemblyLine:
    """
    One parsed source statement.

    Attributes:
        symbol: Label defined by this line, or None
        directive: Directive or instruction mnemonic
        operand: Operand text, or None
        location: Where the line came from
        text: The source line without its line terminator
    """
    symbol: Optional[str]
    directive: Optional[str]
    operand: Optional[str] = None
    location: Optional[SourceLocation] = None
    text: str = ""

    @property
    def is_directive(self) -> bool:
        return is_directive(self.directive)


def classify_line(raw_line: str, address_counter: int) -> tuple[LineKind, int]:
    """
    Classify a source line and apply the default instruction width.

    An indented line is an unlabelled statement; the counter is advanced by
    the default instruction width (3) right away. Callers correct that for
    directives with a different size via address_increment() - 3. Comment
    and label lines leave the counter untouched.

    Args:
        raw_line: Source line, possibly still carrying its newline
        address_counter: Current location counter

    Returns:
        Tuple of (kind, updated address counter)
    """
    if raw_line.startswith("#") or not raw_line.strip():
        return LineKind.COMMENT, address_counter
    if raw_line[0] in " \t":
        return LineKind.INSTRUCTION, address_counter + INSTRUCTION_SIZE
    return LineKind.SYMBOL, address_counter


def tokenize(raw_line: str) -> list[str]:
    """Split a source line into fields."""
    return _TOKEN_RE.findall(raw_line)


def parse_line(
    raw_line: str,
    kind: LineKind,
    location: Optional[SourceLocation] = None,
) -> Optional[AssemblyLine]:
    """
    Build an AssemblyLine from a classified source line.

    A column-1 line whose first field is a directive or mnemonic and whose
    second field is not (e.g. "END FIRST" or a bare "RSUB") carries no
    label. "J LDA J" defines the label J.

    Args:
        raw_line: Source line
        kind: Result of classify_line()
        location: Source location for error reporting

    Returns:
        AssemblyLine, or None for comment lines

    Raises:
        MissingOperandError: Label line without a directive field
    """
    if kind is LineKind.COMMENT:
        return None

    text = raw_line.rstrip("\r\n")
    fields = tokenize(text)

    if kind is LineKind.SYMBOL and _has_label(fields):
        if len(fields) < 2:
            raise MissingOperandError(
                f"directive after label '{fields[0]}'",
                location=location,
                source_line=text,
            )
        symbol, directive, operand = fields[0], fields[1], _field(fields, 2)
    else:
        symbol, directive, operand = None, fields[0], _field(fields, 1)

    return AssemblyLine(symbol, directive, operand, location, text)


def _is_keyword(token: str) -> bool:
    return is_directive(token) or is_valid_instruction(token)


def _has_label(fields: list[str]) -> bool:
    # A keyword followed by a non-keyword (or nothing) is unlabelled
    if not _is_keyword(fields[0]):
        return True
    return len(fields) > 1 and _is_keyword(fields[1])


def _field(fields: list[str], index: int) -> Optional[str]:
    return fields[index] if index < len(fields) else None
