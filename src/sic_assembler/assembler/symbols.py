"""
Symbol Table
============

Append-only mapping from label name to the address it was defined at.

Symbols are created during pass 1 and never removed or modified. When a
label is defined twice the first definition wins; the table reports the
clash so the caller can decide whether it is fatal.
"""

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Iterator, Optional

from sic_assembler.errors import SourceLocation


@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label as written in column 1
        address: Address counter value when the label was seen
        location: Where the symbol was defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Ordered, append-only symbol table.

    Iteration yields symbols in definition order.
    """

    def __init__(self) -> None:
        self._symbols: dict[str, Symbol] = {}

    def define(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
    ) -> Optional[Symbol]:
        """
        Add a symbol unless it already exists.

        Args:
            name: Symbol name
            address: Address to bind it to
            location: Defining source location

        Returns:
            None if the symbol was added, otherwise the existing Symbol
            that kept its binding
        """
        existing = self._symbols.get(name)
        if existing is not None:
            return existing
        self._symbols[name] = Symbol(name, address, location)
        return None

    def lookup(self, name: Optional[str]) -> Optional[Symbol]:
        """Return the symbol bound to name, or None."""
        if name is None:
            return None
        return self._symbols.get(name)

    def address_of(self, name: Optional[str], default: int = 0) -> int:
        """Return the address bound to name, or default when undefined."""
        symbol = self.lookup(name)
        return symbol.address if symbol is not None else default

    def similar(self, name: str) -> list[str]:
        """Return defined names that look like name (for error hints)."""
        return get_close_matches(name, list(self._symbols), n=3)

    def as_dict(self) -> dict[str, int]:
        """Return a plain name -> address mapping."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)
