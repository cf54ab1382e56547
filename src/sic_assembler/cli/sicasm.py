"""
sicasm - SIC Assembler Command-Line Interface
=============================================

Usage Examples
--------------
Basic assembly (writes copy.asm.obj):
    $ sicasm copy.asm

With output file:
    $ sicasm copy.asm -o copy.obj

Generate all output files:
    $ sicasm copy.asm -o copy.obj -l copy.lst -s copy.sym

Reject undefined and duplicate symbols:
    $ sicasm --strict copy.asm

Verbose mode:
    $ sicasm -v copy.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from sic_assembler import __version__
from sic_assembler.assembler import Assembler, AssemblerOptions, default_object_path
from sic_assembler.cli.errors import handle_cli_exception


def _parse_hex_address(ctx, param, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value, 16)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a hexadecimal address") from None


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output object file (default: INPUT_FILE.obj)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject undefined operand symbols and duplicate labels "
         "instead of warning. Default: SICASM_STRICT or off.",
)
@click.option(
    "--max-address",
    callback=_parse_hex_address,
    help="Hex address at which assembly aborts. Default: 7FFF.",
)
@click.option(
    "-e", "--echo",
    is_flag=True,
    help="Print the object records to standard output",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="sicasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    strict: Optional[bool],
    max_address: Optional[int],
    echo: bool,
    verbose: bool,
) -> None:
    """
    Assemble SIC source code into an object program.

    INPUT_FILE is the assembly source file to assemble.

    The object program is written as Header, Text, Modification and
    End records, one per line.

    \b
    Examples:
        sicasm copy.asm              # Outputs copy.asm.obj
        sicasm copy.asm -o copy.obj  # Specify output file
        sicasm -l copy.lst copy.asm  # Also write a listing
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    options = AssemblerOptions.from_env()
    options.verbose = verbose
    if strict is not None:
        options.reject_undefined_symbols = strict
        options.reject_duplicate_symbols = strict
    if max_address is not None:
        options.max_address = max_address

    output_file = output if output is not None else default_object_path(input_file)
    asm = Assembler(options)

    try:
        asm.assemble_file(input_file)

        # Nothing is written unless both passes succeeded
        asm.write_object(output_file)

        if listing:
            asm.write_listing(listing)

        if symbols:
            asm.write_symbols(symbols)

        if echo:
            click.echo(asm.get_object_text(), nl=False)

        if verbose:
            program = asm.get_program()
            click.echo(
                f"Assembly complete: {asm.get_program_name() or '(unnamed)'} "
                f"at {asm.get_load_address():06X}, "
                f"{asm.get_program_length()} bytes"
            )
            click.echo(
                f"{len(program.text_records)} text records, "
                f"{len(program.mod_records)} modification records, "
                f"{len(asm.get_symbols())} symbols"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
