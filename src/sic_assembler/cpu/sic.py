"""
SIC Instruction Set Definition
==============================

This module defines the instruction set of the Simplified Instructional
Computer (SIC), the teaching machine described in Beck's "System Software".

Machine Overview
----------------
- 24-bit words, byte addressed
- 15-bit address space ($0000-$7FFF)
- Every instruction is 3 bytes: an 8-bit opcode followed by a 16-bit
  address field (the top bit of which is the index flag on real SIC;
  indexed addressing is not supported here)

Instruction Format
------------------
```
+--------+----------------+
| opcode |    address     |
| 8 bits |    16 bits     |
+--------+----------------+
```
Encoded in a text record as six hex digits: OOAAAA.

RSUB is the only instruction without an operand; its address field is
always zero.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

INSTRUCTION_SIZE = 3        # Bytes per instruction
WORD_SIZE = 3               # Bytes per word
MAX_ADDRESS = 0x7FFF        # Top of the 15-bit address space


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Information about a SIC machine instruction.

    Attributes:
        mnemonic: Instruction mnemonic (uppercase)
        opcode: Opcode byte
    """
    mnemonic: str
    opcode: int

    def __repr__(self) -> str:
        return f"InstructionInfo({self.mnemonic}, opcode=${self.opcode:02X})"


# =============================================================================
# Opcode Table
# =============================================================================
# Key: mnemonic
# Value: InstructionInfo(mnemonic, opcode)
# =============================================================================

OPCODE_TABLE: dict[str, InstructionInfo] = {
    info.mnemonic: info
    for info in (
        # Arithmetic
        InstructionInfo("ADD", 0x18),
        InstructionInfo("SUB", 0x1C),
        InstructionInfo("MUL", 0x20),
        InstructionInfo("DIV", 0x24),
        InstructionInfo("COMP", 0x28),
        InstructionInfo("TIX", 0x2C),

        # Logic
        InstructionInfo("AND", 0x40),
        InstructionInfo("OR", 0x44),

        # Jumps and subroutines
        InstructionInfo("J", 0x3C),
        InstructionInfo("JEQ", 0x30),
        InstructionInfo("JGT", 0x34),
        InstructionInfo("JLT", 0x38),
        InstructionInfo("JSUB", 0x48),
        InstructionInfo("RSUB", 0x4C),

        # Loads
        InstructionInfo("LDA", 0x00),
        InstructionInfo("LDCH", 0x50),
        InstructionInfo("LDL", 0x08),
        InstructionInfo("LDX", 0x04),

        # Stores
        InstructionInfo("STA", 0x0C),
        InstructionInfo("STCH", 0x54),
        InstructionInfo("STL", 0x14),
        InstructionInfo("STSW", 0xE8),
        InstructionInfo("STX", 0x10),

        # Device I/O
        InstructionInfo("RD", 0xD8),
        InstructionInfo("TD", 0xE0),
        InstructionInfo("WD", 0xDC),
    )
}

MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)

# Instructions that take no operand (address field is zero)
NO_OPERAND_INSTRUCTIONS: frozenset[str] = frozenset({"RSUB"})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up a mnemonic in the opcode table.

    Args:
        mnemonic: Instruction mnemonic (case-sensitive, SIC uses uppercase)

    Returns:
        InstructionInfo, or None if the mnemonic is not a SIC instruction
    """
    return OPCODE_TABLE.get(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a SIC machine instruction."""
    return mnemonic in OPCODE_TABLE


def takes_operand(mnemonic: str) -> bool:
    """Check if an instruction has a meaningful address operand."""
    return mnemonic not in NO_OPERAND_INSTRUCTIONS
