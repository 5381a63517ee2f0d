"""
Addressable state for a single Intcode VM.

Memory owns the cell array, the instruction pointer, and the relative base
register. Cells grow on write and read as ``default_value`` past the end, so a
program can use addresses well beyond its initial length. Negative addresses
are always rejected.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .errors import InvalidAddress


@dataclass
class Memory:
    """
    Mutable memory for one VM run.

    Attributes:
        cells: Backing cell list. Length never decreases.
        instruction_pointer: Address of the next instruction word.
        relative_base: Offset register used by relative addressing.
        default_value: Value read from, and used to fill, cells past the end.
    """

    cells: list[int] = field(default_factory=list)
    instruction_pointer: int = 0
    relative_base: int = 0
    default_value: int = 0

    def __post_init__(self) -> None:
        if self.instruction_pointer < 0:
            raise InvalidAddress(self.instruction_pointer)

    @classmethod
    def from_program(cls, program: Iterable[int], default_value: int = 0) -> Memory:
        """Build fresh memory holding a copy of *program*."""
        return cls(cells=[int(value) for value in program], default_value=default_value)

    def get(self, address: int, default: int | None = None) -> int:
        """Return the cell at *address*, or the default if it is past the end."""
        if address < 0:
            raise InvalidAddress(address)
        if address >= len(self.cells):
            return self.default_value if default is None else default
        return self.cells[address]

    def set(self, address: int, value: int) -> None:
        """Store *value* at *address*, growing the cell list as needed."""
        if address < 0:
            raise InvalidAddress(address)
        if address >= len(self.cells):
            self.cells.extend([self.default_value] * (address + 1 - len(self.cells)))
        self.cells[address] = value

    def adjust_relative_base(self, delta: int) -> None:
        self.relative_base += delta

    def jump(self, address: int) -> None:
        """Move the instruction pointer to *address*."""
        if address < 0:
            raise InvalidAddress(address)
        self.instruction_pointer = address

    @property
    def current_word(self) -> int:
        return self.get(self.instruction_pointer)

    def snapshot(self) -> tuple[int, ...]:
        """Return an immutable copy of the current cell contents."""
        return tuple(self.cells)

    def __getitem__(self, address: int) -> int:
        return self.get(address)

    def __setitem__(self, address: int, value: int) -> None:
        self.set(address, value)

    def __len__(self) -> int:
        return len(self.cells)
