"""
SIC Assembler - Main Interface
==============================

This module provides the main Assembler class, the primary interface for
assembling SIC source code. It owns the source stream for the duration of
both passes and writes the object program once assembly has succeeded.

Example Usage
-------------
>>> from sic_assembler.assembler import Assembler
>>>
>>> asm = Assembler()
>>> program = asm.assemble_string('''COPY    START   1000
... FIRST   LDA     FIVE
...         RSUB
... FIVE    WORD    5
...         END     FIRST
... ''')
>>> print(program.render(), end="")
HCOPY  001000000009
T001006
T4C0000
T000005
M00100004+FIVE
E001000
>>> asm.write_object("copy.obj")

Command-Line Usage
------------------
    $ sicasm copy.asm                  # writes copy.asm.obj
    $ sicasm copy.asm -o copy.obj -l copy.lst -s copy.sym

Configuration
-------------
AssemblerOptions carries every tunable. It can be built from environment
variables with AssemblerOptions.from_env():

    SICASM_STRICT       "1"/"true": reject undefined and duplicate symbols
    SICASM_MAX_ADDRESS  Hex address at which assembly aborts (default 7FFF)
"""

from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Optional
import logging
import os

from sic_assembler.assembler.codegen import CodeGenerator
from sic_assembler.cpu import MAX_ADDRESS
from sic_assembler.errors import AssemblerError
from sic_assembler.objfile.records import ObjectProgram

logger = logging.getLogger(__name__)


OBJECT_SUFFIX = ".obj"


def default_object_path(source: str | Path) -> Path:
    """Return <source>.obj, the default destination for a source file."""
    return Path(f"{source}{OBJECT_SUFFIX}")


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class AssemblerOptions:
    """
    Assembler configuration options.

    Attributes:
        reject_undefined_symbols: Treat an operand naming no known symbol as
                                  an error. When False (default) it assembles
                                  as address 0 and a warning is logged.
        reject_duplicate_symbols: Treat a second definition of a label as an
                                  error. When False (default) the first
                                  definition wins and a warning is logged.
        max_address: Address counter value that aborts assembly
                     (top of the SIC address space by default).
        verbose: Print progress messages.
    """
    reject_undefined_symbols: bool = False
    reject_duplicate_symbols: bool = False
    max_address: int = MAX_ADDRESS
    verbose: bool = False

    @property
    def strict(self) -> bool:
        return self.reject_undefined_symbols and self.reject_duplicate_symbols

    @classmethod
    def from_env(cls) -> "AssemblerOptions":
        """
        Create AssemblerOptions from environment variables.

        Environment variables (all optional):
            SICASM_STRICT: "1", "true" or "yes" enables both rejections
            SICASM_MAX_ADDRESS: Hexadecimal abort address

        Returns:
            AssemblerOptions with values from environment variables
        """
        options = cls()

        if strict := os.environ.get("SICASM_STRICT"):
            if strict.strip().lower() in ("1", "true", "yes"):
                options.reject_undefined_symbols = True
                options.reject_duplicate_symbols = True

        if max_address := os.environ.get("SICASM_MAX_ADDRESS"):
            try:
                options.max_address = int(max_address, 16)
            except ValueError:
                logger.warning(f"ignoring invalid SICASM_MAX_ADDRESS '{max_address}'")

        return options


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main SIC assembler class.

    Attributes:
        options: Active AssemblerOptions
    """

    def __init__(self, options: Optional[AssemblerOptions] = None, **overrides):
        """
        Initialize the assembler.

        Args:
            options: Configuration (defaults to AssemblerOptions())
            **overrides: Individual AssemblerOptions fields to override,
                         e.g. Assembler(reject_undefined_symbols=True)
        """
        self.options = options or AssemblerOptions()
        for name, value in overrides.items():
            if not hasattr(self.options, name):
                raise TypeError(f"unknown assembler option '{name}'")
            setattr(self.options, name, value)

        self._codegen = CodeGenerator(
            reject_undefined_symbols=self.options.reject_undefined_symbols,
            reject_duplicate_symbols=self.options.reject_duplicate_symbols,
            max_address=self.options.max_address,
        )
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> ObjectProgram:
        """
        Assemble source code held in a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The completed ObjectProgram

        Raises:
            AssemblerError: If assembly fails
        """
        if self.options.verbose:
            print("Assembling from string...")
        return self._codegen.generate(StringIO(source), filename)

    def assemble_file(self, filepath: str | Path) -> ObjectProgram:
        """
        Assemble source code from a file.

        The file stays open for both passes and is rewound in between.

        Args:
            filepath: Path to assembly source file

        Returns:
            The completed ObjectProgram

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath

        if self.options.verbose:
            print(f"Assembling {filepath}...")

        with open(filepath, "r", newline="") as stream:
            return self._codegen.generate(stream, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_program(self) -> ObjectProgram:
        """
        Get the generated object program.

        Raises:
            AssemblerError: If nothing has been assembled yet
        """
        program = self._codegen.get_program()
        if program is None:
            raise AssemblerError("no program has been assembled")
        return program

    def get_object_text(self) -> str:
        """Return the object file contents."""
        return self.get_program().render()

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary mapping symbol names to addresses."""
        return self._codegen.get_symbols()

    def get_load_address(self) -> int:
        return self._codegen.get_load_address()

    def get_program_length(self) -> int:
        return self._codegen.get_program_length()

    def get_program_name(self) -> str:
        return self._codegen.get_program_name()

    def get_listing(self) -> str:
        """Return the assembly listing with addresses, code and source."""
        return self._codegen.get_listing()

    def default_output_path(self) -> Optional[Path]:
        """Return <source>.obj for the last assembled file, if any."""
        if self._source_file is None:
            return None
        return default_object_path(self._source_file)

    def write_object(self, filepath: str | Path | None = None) -> Path:
        """
        Write the object program.

        Args:
            filepath: Output path (default: <source>.obj)

        Returns:
            The path written
        """
        if filepath is None:
            filepath = self.default_output_path()
            if filepath is None:
                raise AssemblerError("no output path given for string input")
        filepath = Path(filepath)

        self.get_program().write(filepath)

        if self.options.verbose:
            print(f"Wrote {filepath}")
        return filepath

    def write_listing(self, filepath: str | Path) -> None:
        self._codegen.write_listing(filepath)

        if self.options.verbose:
            print(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        self._codegen.write_symbols(filepath)

        if self.options.verbose:
            print(f"Wrote symbols to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>", **options) -> str:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        **options: AssemblerOptions fields

    Returns:
        Object file contents

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(**options)
    return asm.assemble_string(source, filename).render()


def assemble_file(
    filepath: str | Path,
    output: str | Path | None = None,
    **options,
) -> Path:
    """
    Convenience function to assemble a file and write its object program.

    Args:
        filepath: Path to source file
        output: Object file path (default: <filepath>.obj)
        **options: AssemblerOptions fields

    Returns:
        Path of the written object file

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(**options)
    asm.assemble_file(filepath)
    return asm.write_object(output)
