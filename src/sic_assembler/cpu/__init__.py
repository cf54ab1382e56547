"""
SIC CPU Package
===============

This package contains the SIC machine definitions used by the assembler
and the object file reader.

Modules:
    sic: Opcode table, machine constants and lookup helpers.

Usage:
    from sic_assembler.cpu import (
        InstructionInfo,
        OPCODE_TABLE,
        get_instruction_info,
    )
"""

# =============================================================================
# Public API Exports
# =============================================================================

from sic_assembler.cpu.sic import (
    # Machine constants
    INSTRUCTION_SIZE,
    WORD_SIZE,
    MAX_ADDRESS,
    # Core types
    InstructionInfo,
    # Master instruction database
    OPCODE_TABLE,
    MNEMONICS,
    NO_OPERAND_INSTRUCTIONS,
    # Lookup functions
    get_instruction_info,
    is_valid_instruction,
    takes_operand,
)

__all__ = [
    "INSTRUCTION_SIZE",
    "WORD_SIZE",
    "MAX_ADDRESS",
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
    "NO_OPERAND_INSTRUCTIONS",
    "get_instruction_info",
    "is_valid_instruction",
    "takes_operand",
]
