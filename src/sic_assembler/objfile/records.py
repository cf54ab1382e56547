"""
SIC Object Program Records
==========================

This module defines the record types of the SIC object program and the
accumulator the code generator fills while it runs.

Object File Layout
------------------
```
H<name:6><load address:06X><program length:06X>
T<object code hex>                      (one per generating statement)
M<start address:06X><length:02X>+<symbol>  (one per relocatable reference)
E<entry address:06X>
```

Every record is one newline-terminated line. Records are written in
Head, Text*, Modification*, End order regardless of how the source
interleaves them; text and modification records keep source order so a
loader can rebuild the program contiguously.

Field Widths
------------
- Program name: 6 characters, left-justified, space-padded
- Addresses and lengths: upper-case hex, zero-padded
- Modification length: counted in half-bytes (hex digits)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


# =============================================================================
# Record Constants
# =============================================================================

HEADER_PREFIX = "H"
TEXT_PREFIX = "T"
MODIFICATION_PREFIX = "M"
END_PREFIX = "E"

NAME_WIDTH = 6
ADDRESS_WIDTH = 6
MODIFICATION_LENGTH_WIDTH = 2

# Address field of a SIC instruction, in half-bytes
ADDRESS_FIELD_HALF_BYTES = 4


# =============================================================================
# Record Types
# =============================================================================

@dataclass(frozen=True)
class HeaderRecord:
    """
    Header record: program name, load address and length.

    Attributes:
        name: Program name (at most 6 characters are kept)
        load_address: Absolute load address
        length: Program length in bytes
    """
    name: str
    load_address: int
    length: int

    def to_text(self) -> str:
        """Serialize as 'H' + name + load + length + newline."""
        name = self.name[:NAME_WIDTH].ljust(NAME_WIDTH)
        return f"{HEADER_PREFIX}{name}{self.load_address:06X}{self.length:06X}\n"

    @classmethod
    def from_text(cls, line: str) -> "HeaderRecord":
        """Parse a header record line (without newline)."""
        body = line[1:]
        if not line.startswith(HEADER_PREFIX) or len(body) != NAME_WIDTH + 2 * ADDRESS_WIDTH:
            raise ValueError(f"malformed header record '{line}'")
        name = body[:NAME_WIDTH].rstrip()
        load = _hex_field(body[NAME_WIDTH:NAME_WIDTH + ADDRESS_WIDTH])
        length = _hex_field(body[NAME_WIDTH + ADDRESS_WIDTH:])
        return cls(name, load, length)


@dataclass(frozen=True)
class TextRecord:
    """
    Text record: the object code of one statement.

    Attributes:
        object_code: Upper-case hex digits (two per byte)
    """
    object_code: str

    def to_text(self) -> str:
        return f"{TEXT_PREFIX}{self.object_code}\n"

    def to_bytes(self) -> bytes:
        """Decode the object code into raw bytes."""
        return bytes.fromhex(self.object_code)

    @classmethod
    def from_text(cls, line: str) -> "TextRecord":
        body = line[1:]
        if not line.startswith(TEXT_PREFIX) or len(body) % 2:
            raise ValueError(f"malformed text record '{line}'")
        if body:
            _hex_field(body)
        return cls(body)


@dataclass(frozen=True)
class ModificationEntry:
    """
    Relocation note for the linker/loader.

    Attributes:
        starting_address: Address of the field to adjust
        length_in_half_bytes: Width of that field in hex digits
        symbol: Symbol whose address must be added
    """
    starting_address: int
    length_in_half_bytes: int
    symbol: str

    def to_text(self) -> str:
        """Serialize as 'M' + start + length + '+' + symbol + newline."""
        return (
            f"{MODIFICATION_PREFIX}{self.starting_address:06X}"
            f"{self.length_in_half_bytes:02X}+{self.symbol}\n"
        )

    @classmethod
    def from_text(cls, line: str) -> "ModificationEntry":
        sign_pos = 1 + ADDRESS_WIDTH + MODIFICATION_LENGTH_WIDTH
        if (
            not line.startswith(MODIFICATION_PREFIX)
            or len(line) <= sign_pos + 1
            or line[sign_pos] != "+"
        ):
            raise ValueError(f"malformed modification record '{line}'")
        start = _hex_field(line[1:1 + ADDRESS_WIDTH])
        length = _hex_field(line[1 + ADDRESS_WIDTH:sign_pos])
        return cls(start, length, line[sign_pos + 1:])


@dataclass(frozen=True)
class EndRecord:
    """
    End record: address where execution begins.

    Attributes:
        entry_address: First instruction to execute
    """
    entry_address: int

    def to_text(self) -> str:
        return f"{END_PREFIX}{self.entry_address:06X}\n"

    @classmethod
    def from_text(cls, line: str) -> "EndRecord":
        body = line[1:]
        if not line.startswith(END_PREFIX) or len(body) != ADDRESS_WIDTH:
            raise ValueError(f"malformed end record '{line}'")
        return cls(_hex_field(body))


def _hex_field(text: str) -> int:
    if not text or not all(c in "0123456789ABCDEFabcdef" for c in text):
        raise ValueError(f"'{text}' is not a hex field")
    return int(text, 16)


# =============================================================================
# Object Program Accumulator
# =============================================================================

@dataclass
class ObjectProgram:
    """
    Object program under construction.

    Filled by pass 2: one head record at START, text records in source
    order, modification records and the end record at END. Rendering
    always emits Head, Text*, Modification*, End.

    Attributes:
        head_record: Serialized header record ("" until START)
        end_record: Serialized end record ("" until END)
        text_records: Serialized text records in source order
        mod_records: Serialized modification records in source order
    """
    head_record: str = ""
    end_record: str = ""
    text_records: list[str] = field(default_factory=list)
    mod_records: list[str] = field(default_factory=list)

    def set_header(self, name: str, load_address: int, length: int) -> None:
        self.head_record = HeaderRecord(name, load_address, length).to_text()

    def add_text(self, object_code: str) -> None:
        self.text_records.append(TextRecord(object_code).to_text())

    def add_modifications(self, entries: list[ModificationEntry]) -> None:
        self.mod_records.extend(entry.to_text() for entry in entries)

    def set_end(self, entry_address: int) -> None:
        self.end_record = EndRecord(entry_address).to_text()

    @property
    def is_complete(self) -> bool:
        """True once both the head and end records are present."""
        return bool(self.head_record and self.end_record)

    def records(self) -> list[str]:
        """Return every record in file order."""
        result: list[str] = []
        if self.head_record:
            result.append(self.head_record)
        result.extend(self.text_records)
        result.extend(self.mod_records)
        if self.end_record:
            result.append(self.end_record)
        return result

    def render(self) -> str:
        """Return the object file contents."""
        return "".join(self.records())

    def write(self, filepath: str | Path) -> None:
        """Write the object file in one go."""
        with open(filepath, "w", newline="\n") as f:
            f.write(self.render())

    def get_object_code(self) -> bytes:
        """Return the concatenated bytes of all text records."""
        return b"".join(
            TextRecord.from_text(record.rstrip("\n")).to_bytes()
            for record in self.text_records
        )


@dataclass
class ObjectFile:
    """
    Decoded object file, as read back by the object file parser.

    Attributes:
        header: Header record
        text: Text records in file order
        modifications: Modification records in file order
        end: End record
    """
    header: HeaderRecord
    text: list[TextRecord] = field(default_factory=list)
    modifications: list[ModificationEntry] = field(default_factory=list)
    end: Optional[EndRecord] = None

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def load_address(self) -> int:
        return self.header.load_address

    @property
    def object_code(self) -> bytes:
        """Concatenated bytes of all text records."""
        return b"".join(record.to_bytes() for record in self.text)
