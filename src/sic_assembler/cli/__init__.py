"""
SIC Assembler Command-Line Interface
====================================

- **sicasm**: SIC two-pass assembler

The tool is a Click-based CLI application with built-in help and
consistent exit codes (see cli.errors.ExitCode).
"""

__all__ = ["sicasm"]
