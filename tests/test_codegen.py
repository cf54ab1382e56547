# =============================================================================
# test_codegen.py - Two-Pass Code Generator Tests
# =============================================================================
# Test coverage includes:
#   - Complete programs assembled end to end
#   - Address counter agreement between pass 1 and pass 2
#   - Instruction, WORD and BYTE encoding
#   - START/END handling and the address space limit
#   - Undefined and duplicate symbol policies
# =============================================================================

from io import StringIO
import logging

import pytest

from sic_assembler.assembler.codegen import (
    CodeGenerator,
    Pass1Result,
    encode_byte,
    encode_instruction,
    encode_word,
)
from sic_assembler.assembler.symbols import SymbolTable
from sic_assembler.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    DuplicateSymbolError,
    MemoryBoundsError,
    MissingOperandError,
    NumberFormatError,
    OperandTooLongError,
    PhaseError,
    SourceLocation,
    UndefinedSymbolError,
    UnknownInstructionError,
)


def generate(source: str, **kwargs) -> str:
    """Assemble a source string and return the object file text."""
    codegen = CodeGenerator(**kwargs)
    return codegen.generate(StringIO(source), "test.asm").render()


# =============================================================================
# Encoding Helpers
# =============================================================================

class TestEncoding:
    """Test object code for single operands."""

    def test_instruction(self):
        assert encode_instruction(0x00, 0x102C) == "00102C"
        assert encode_instruction(0x4C, 0) == "4C0000"

    def test_word(self):
        assert encode_word("5") == "000005"
        assert encode_word("4096") == "001000"

    def test_negative_word_is_twos_complement(self):
        assert encode_word("-1") == "FFFFFF"

    def test_word_round_trip(self):
        for value in (0, 1, 255, 65536, 8388607):
            assert int(encode_word(str(value)), 16) == value

    def test_word_out_of_range(self):
        with pytest.raises(AssemblerError):
            encode_word("16777216")

    def test_word_not_decimal(self):
        with pytest.raises(NumberFormatError):
            encode_word("1F")

    def test_byte_hex(self):
        assert encode_byte("X'1F'") == "1F"

    def test_byte_hex_keeps_digits(self):
        assert encode_byte("X'0a0B'") == "0a0B"

    def test_byte_characters(self):
        assert encode_byte("C'AB'") == "4142"
        assert encode_byte("C'EOF'") == "454F46"

    def test_byte_non_ascii(self):
        with pytest.raises(AssemblySyntaxError):
            encode_byte("C'é'")


# =============================================================================
# Complete Programs
# =============================================================================

class TestPrograms:
    """Test whole programs through both passes."""

    def test_minimal_program(self):
        source = "PROG START 1000\n\tRSUB\nEND\n"
        assert generate(source) == "HPROG  001000000003\nT4C0000\nE001000\n"

    def test_copy_program(self, copy_source, copy_object):
        assert generate(copy_source) == copy_object

    def test_idempotent(self, copy_source):
        codegen = CodeGenerator()
        first = codegen.generate(StringIO(copy_source)).render()
        second = codegen.generate(StringIO(copy_source)).render()
        assert first == second

    def test_record_order(self, copy_source):
        prefixes = [line[0] for line in generate(copy_source).splitlines()]
        assert prefixes[0] == "H"
        assert prefixes[-1] == "E"
        assert prefixes == sorted(prefixes, key="HTME".index)

    def test_symbols(self, copy_source):
        codegen = CodeGenerator()
        codegen.generate(StringIO(copy_source))
        symbols = codegen.get_symbols()
        assert symbols["FIRST"] == 0x1000
        assert symbols["SUBR"] == 0x100F
        assert symbols["EOF"] == 0x1015
        assert symbols["ALPHA"] == 0x101C
        assert symbols["BUFFER"] == 0x101F
        assert symbols["FIVE"] == 0x102C
        assert "COPY" not in symbols

    def test_program_attributes(self, copy_source):
        codegen = CodeGenerator()
        codegen.generate(StringIO(copy_source))
        assert codegen.get_program_name() == "COPY"
        assert codegen.get_load_address() == 0x1000
        assert codegen.get_program_length() == 0x2F

    def test_long_name_truncated(self):
        source = "LONGNAME START 0\n\tRSUB\n\tEND\n"
        assert generate(source).startswith("HLONGNA000000000003\n")

    def test_storage_directives_emit_no_text(self):
        source = (
            "PROG START 0\n"
            "BUF RESB 4\n"
            "WRDS RESW 2\n"
            "\tRESR\n"
            "\tEXPORTS\n"
            "\tEND\n"
        )
        output = generate(source)
        assert "T" not in {line[0] for line in output.splitlines()}
        # 4 + 6 + 3 + 3
        assert output.startswith("HPROG  000000000010\n")

    def test_space_separated_fields(self):
        source = "PROG START 2000\nLOOP J LOOP\n    END LOOP\n"
        assert generate(source) == (
            "HPROG  002000000003\n"
            "T3C2000\n"
            "M00200004+LOOP\n"
            "E002000\n"
        )

    def test_lines_after_end_ignored(self):
        source = "PROG START 1000\n\tRSUB\n\tEND\n\tLDA\tALPHA\n"
        output = generate(source)
        assert output.count("T") == 1
        assert "M" not in output

    def test_character_literal_with_space(self):
        source = "PROG START 0\nMSG BYTE C'A B'\n\tEND\n"
        assert "T412042\n" in generate(source)

    def test_crlf_source(self):
        source = "PROG START 1000\r\n\tRSUB\r\nEND\r\n"
        assert generate(source) == "HPROG  001000000003\nT4C0000\nE001000\n"


# =============================================================================
# Address Counter
# =============================================================================

class TestAddressCounter:
    """Test the address counter maintained by both passes."""

    def test_reserve_words(self):
        source = "PROG START 1000\nALPHA RESW 2\n\tRSUB\n\tEND\n"
        codegen = CodeGenerator()
        pass1 = codegen._pass1(StringIO(source), "test.asm")
        assert pass1.symbols.address_of("ALPHA") == 0x1000
        assert pass1.final_address == 0x1009

    def test_reserve_words_counter_after_label(self):
        source = "PROG START 1000\nALPHA RESW 2\n"
        pass1 = CodeGenerator()._pass1(StringIO(source), "test.asm")
        assert pass1.final_address == 0x1006

    def test_indented_directives_use_their_own_size(self):
        source = "PROG START 0\n\tBYTE\tX'1F'\n\tRESB\t10\n\tWORD\t7\n\tEND\n"
        pass1 = CodeGenerator()._pass1(StringIO(source), "test.asm")
        assert pass1.final_address == 1 + 10 + 3

    def test_passes_agree(self, copy_source):
        """Pass 2 reaches each statement at the address pass 1 computes for it."""
        codegen = CodeGenerator()
        codegen.generate(StringIO(copy_source))
        lines = copy_source.splitlines(keepends=True)

        for entry in codegen.get_listing_lines():
            if entry.address is None or entry.line <= 2:
                continue
            prefix = "".join(lines[:entry.line - 1])
            pass1 = CodeGenerator()._pass1(StringIO(prefix), "test.asm")
            assert pass1.final_address == entry.address, entry.text

    def test_memory_bounds(self):
        source = "PROG START 7FF0\nBIG RESB 15\n\tRSUB\n\tEND\n"
        with pytest.raises(MemoryBoundsError) as exc_info:
            generate(source)
        assert exc_info.value.location.line == 3
        assert "Memory out of bounds" in str(exc_info.value)

    def test_custom_max_address(self):
        source = "PROG START 0100\n\tRSUB\n\tRSUB\n\tEND\n"
        with pytest.raises(MemoryBoundsError):
            generate(source, max_address=0x0103)

    def test_below_limit_assembles(self):
        source = "PROG START 7FF0\nBIG RESB 14\n\tEND\n"
        assert generate(source).startswith("HPROG  007FF000000E\n")

    def test_bad_start_address(self):
        with pytest.raises(NumberFormatError):
            generate("PROG START 10G0\n\tEND\n")

    def test_start_without_address(self):
        with pytest.raises(MissingOperandError):
            generate("PROG START\n\tEND\n")


# =============================================================================
# START and END
# =============================================================================

class TestStartEnd:
    """Test START/END misuse."""

    def test_duplicate_start(self):
        source = "PROG START 1000\n\tRSUB\nAGAIN START 2000\n\tEND\n"
        with pytest.raises(DirectiveError) as exc_info:
            generate(source)
        assert "Starting address was already defined" in str(exc_info.value)
        assert exc_info.value.location.line == 3

    def test_end_without_start(self):
        with pytest.raises(DirectiveError) as exc_info:
            generate("\tRSUB\n\tEND\n")
        assert "without a preceding START" in str(exc_info.value)

    def test_missing_end(self):
        with pytest.raises(DirectiveError) as exc_info:
            generate("PROG START 1000\n\tRSUB\n")
        assert "missing END" in str(exc_info.value)
        assert "test.asm" in str(exc_info.value)

    def test_end_operand_not_used_as_entry(self):
        source = "PROG START 1000\n\tRSUB\nHERE\tRSUB\n\tEND\tHERE\n"
        assert generate(source).endswith("E001000\n")


# =============================================================================
# Statement Errors
# =============================================================================

class TestStatementErrors:
    """Test statements that cannot be encoded."""

    def test_unknown_instruction(self):
        with pytest.raises(UnknownInstructionError) as exc_info:
            generate("PROG START 0\n\tFOO\tBAR\n\tEND\n")
        assert "FOO" in str(exc_info.value)

    def test_instruction_without_operand(self):
        with pytest.raises(MissingOperandError):
            generate("PROG START 0\n\tLDA\n\tEND\n")

    def test_word_without_operand(self):
        with pytest.raises(MissingOperandError):
            generate("PROG START 0\nVAL WORD\n\tEND\n")

    def test_operand_too_long(self):
        literal = "C'" + "A" * 60 + "'"
        with pytest.raises(OperandTooLongError) as exc_info:
            generate(f"PROG START 0\nMSG BYTE {literal}\n\tEND\n")
        assert exc_info.value.limit == 60

    def test_operand_at_limit(self):
        literal = "C'" + "A" * 57 + "'"
        assert len(literal) == 60
        output = generate(f"PROG START 0\nMSG BYTE {literal}\n\tEND\n")
        assert "T" + "41" * 57 + "\n" in output

    def test_byte_bad_literal(self):
        with pytest.raises(AssemblySyntaxError):
            generate("PROG START 0\nV BYTE F1\n\tEND\n")

    def test_byte_odd_hex(self):
        with pytest.raises(NumberFormatError):
            generate("PROG START 0\nV BYTE X'F1F'\n\tEND\n")

    def test_error_location(self):
        with pytest.raises(UnknownInstructionError) as exc_info:
            generate("# header\nPROG START 0\n\tNOPE\tX\n\tEND\n")
        assert exc_info.value.location == SourceLocation("test.asm", 3)
        assert "\tNOPE\tX" in str(exc_info.value)


# =============================================================================
# Symbol Policies
# =============================================================================

class TestSymbolPolicies:
    """Test handling of undefined and duplicate symbols."""

    def test_undefined_symbol_defaults_to_zero(self, caplog):
        source = "PROG START 1000\n\tLDA\tNOWHERE\n\tEND\n"
        with caplog.at_level(logging.WARNING):
            output = generate(source)
        assert "T000000\n" in output
        assert "M00100004+NOWHERE\n" in output
        assert "NOWHERE" in caplog.text

    def test_undefined_symbol_rejected(self):
        source = "PROG START 1000\nALPHA WORD 1\n\tLDA\tALPAH\n\tEND\n"
        with pytest.raises(UndefinedSymbolError) as exc_info:
            generate(source, reject_undefined_symbols=True)
        assert exc_info.value.symbol == "ALPAH"
        assert "ALPHA" in exc_info.value.similar_symbols

    def test_duplicate_symbol_first_wins(self, caplog):
        source = (
            "PROG START 1000\n"
            "ALPHA WORD 1\n"
            "ALPHA WORD 2\n"
            "\tLDA\tALPHA\n"
            "\tEND\n"
        )
        with caplog.at_level(logging.WARNING):
            output = generate(source)
        assert "T001000\n" in output
        assert "duplicate symbol 'ALPHA'" in caplog.text

    def test_duplicate_symbol_rejected(self):
        source = "PROG START 1000\nALPHA WORD 1\nALPHA WORD 2\n\tEND\n"
        with pytest.raises(DuplicateSymbolError) as exc_info:
            generate(source, reject_duplicate_symbols=True)
        assert exc_info.value.original_location == SourceLocation("test.asm", 2)

    def test_forward_reference(self):
        source = "PROG START 1000\n\tJ\tLATER\nLATER\tRSUB\n\tEND\n"
        assert "T3C1003\n" in generate(source)

    def test_phase_error(self):
        source = "PROG START 1000\nALPHA WORD 1\n\tEND\n"
        symbols = SymbolTable()
        symbols.define("ALPHA", 0x1234, SourceLocation("test.asm", 2))
        pass1 = Pass1Result(symbols, load_address=0x1000, final_address=0x1003)
        with pytest.raises(PhaseError) as exc_info:
            CodeGenerator()._pass2(StringIO(source), pass1, "test.asm")
        assert exc_info.value.pass1_address == 0x1234
        assert exc_info.value.pass2_address == 0x1000


# =============================================================================
# Listing and Symbol Files
# =============================================================================

class TestListing:
    """Test listing and symbol table output."""

    def test_listing_contents(self, copy_source):
        codegen = CodeGenerator()
        codegen.generate(StringIO(copy_source))
        listing = codegen.get_listing()
        assert listing.startswith("SIC Assembler Listing\n")
        assert "1000  141029" in listing
        assert "Symbol Table" in listing

    def test_listing_line_per_source_line(self, copy_source):
        codegen = CodeGenerator()
        codegen.generate(StringIO(copy_source))
        entries = codegen.get_listing_lines()
        assert len(entries) == len(copy_source.splitlines())
        assert entries[0].address is None

    def test_write_symbols(self, copy_source, tmp_path):
        codegen = CodeGenerator()
        codegen.generate(StringIO(copy_source))
        path = tmp_path / "copy.sym"
        codegen.write_symbols(path)
        lines = path.read_text().splitlines()
        assert lines[0] == "# Symbol table"
        assert "FIRST 1000" in lines
        assert "FIVE 102C" in lines


# =============================================================================
# Source Edge Cases
# =============================================================================

class TestSourceEdgeCases:
    """Test labels named like mnemonics and malformed counts."""

    def test_mnemonic_named_label(self):
        source = "PROG START 1000\nJ LDA J\n\tRSUB\n\tEND\n"
        assert generate(source) == (
            "HPROG  001000000006\n"
            "T001000\n"
            "T4C0000\n"
            "M00100004+J\n"
            "E001000\n"
        )

    def test_mnemonic_named_label_in_symbol_table(self):
        codegen = CodeGenerator()
        codegen.generate(StringIO("PROG START 1000\n\tRSUB\nRD WORD 7\n\tEND\n"))
        assert codegen.get_symbols() == {"RD": 0x1003}

    def test_negative_reserve_count(self):
        with pytest.raises(DirectiveError) as exc_info:
            generate("PROG START 1000\nA RESB -5\n\tEND\n")
        assert exc_info.value.location.line == 2

    def test_word_with_underscore(self):
        with pytest.raises(NumberFormatError):
            generate("PROG START 0\nV WORD 1_0\n\tEND\n")

    def test_word_with_plus_sign(self):
        with pytest.raises(NumberFormatError):
            generate("PROG START 0\nV WORD +5\n\tEND\n")

    def test_indented_hash_is_not_a_comment(self):
        """Only a '#' in column 1 starts a comment."""
        with pytest.raises(UnknownInstructionError) as exc_info:
            generate("PROG START 0\n\t# remark\n\tEND\n")
        assert exc_info.value.mnemonic == "#"
