#!/usr/bin/env python3
"""
SIC Assembler API Demo
======================

This script assembles examples/copy.asm through the Python API and then
reads the object program back:
1. Assemble the source file
2. Write the object program, a listing and a symbol file
3. Decode the object file and print a short summary

Usage:
    python examples/assemble_copy.py

The same result from the command line:
    sicasm examples/copy.asm -l copy.lst -s copy.sym
"""

from pathlib import Path

from sic_assembler import Assembler, SicError, read_object_file


def main():
    source = Path(__file__).with_name("copy.asm")
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    asm = Assembler(verbose=True)
    try:
        asm.assemble_file(source)
    except SicError as e:
        print(e)
        return 1

    # ==========================================================================
    # 2. Write output files
    # ==========================================================================
    obj_path = asm.write_object(output_dir / "copy.obj")
    asm.write_listing(output_dir / "copy.lst")
    asm.write_symbols(output_dir / "copy.sym")

    # ==========================================================================
    # 3. Read the object program back
    # ==========================================================================
    obj = read_object_file(obj_path)
    print(f"\nProgram {obj.name} loads at {obj.load_address:06X}, "
          f"{obj.header.length} bytes")
    print(f"  {len(obj.text)} text records, {len(obj.object_code)} bytes of code")
    print(f"  {len(obj.modifications)} relocations:")
    for mod in obj.modifications:
        print(f"    {mod.symbol}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
