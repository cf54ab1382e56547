# =============================================================================
# conftest.py - Shared fixtures for the SIC assembler tests
# =============================================================================

import pytest


# A complete program exercising every encoding rule. Addresses:
#   1000 FIRST  STL RETADR      1015 EOF    BYTE C'EOF'
#   1003        LDA FIVE        1018 THREE  WORD 3
#   1006        STA ALPHA       101B HEXVAL BYTE X'F1'
#   1009        JSUB SUBR       101C ALPHA  RESW 1
#   100C        RSUB            101F BUFFER RESB 10
#   100F SUBR   LDCH EOF        1029 RETADR RESW 1
#   1012        RSUB            102C FIVE   WORD 5
#                               102F        END
COPY_SOURCE = (
    "# sample program\n"
    "COPY\tSTART\t1000\n"
    "FIRST\tSTL\tRETADR\n"
    "\tLDA\tFIVE\n"
    "\tSTA\tALPHA\n"
    "\tJSUB\tSUBR\n"
    "\tRSUB\n"
    "SUBR\tLDCH\tEOF\n"
    "\tRSUB\n"
    "EOF\tBYTE\tC'EOF'\n"
    "THREE\tWORD\t3\n"
    "HEXVAL\tBYTE\tX'F1'\n"
    "ALPHA\tRESW\t1\n"
    "BUFFER\tRESB\t10\n"
    "RETADR\tRESW\t1\n"
    "FIVE\tWORD\t5\n"
    "\tEND\tFIRST\n"
)

COPY_OBJECT = (
    "HCOPY  00100000002F\n"
    "T141029\n"
    "T00102C\n"
    "T0C101C\n"
    "T48100F\n"
    "T4C0000\n"
    "T501015\n"
    "T4C0000\n"
    "T454F46\n"
    "T000003\n"
    "TF1\n"
    "T000005\n"
    "M00100004+RETADR\n"
    "M00100004+FIVE\n"
    "M00100004+ALPHA\n"
    "M00100004+SUBR\n"
    "M00100004+EOF\n"
    "E001000\n"
)


@pytest.fixture
def copy_source() -> str:
    """Source of the sample COPY program."""
    return COPY_SOURCE


@pytest.fixture
def copy_object() -> str:
    """Expected object file for the sample COPY program."""
    return COPY_OBJECT


@pytest.fixture
def copy_file(tmp_path):
    """The sample COPY program written to a temporary file."""
    path = tmp_path / "copy.asm"
    path.write_text(COPY_SOURCE)
    return path
