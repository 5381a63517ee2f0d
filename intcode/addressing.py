"""
Parameter addressing for Intcode instructions.

An instruction word packs the opcode in its low two digits and one mode digit
per parameter above that, least-significant digit first. Resolution turns
each parameter slot into an effective memory address so operations only ever
deal with plain reads and writes:

  - POSITION  (0): the parameter cell holds the address
  - IMMEDIATE (1): the parameter cell itself is the operand
  - RELATIVE  (2): the parameter cell holds an offset from the relative base
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from .errors import ImmediateWriteError, InvalidAddress, UnknownAddressingMode
from .instructions.types import ParamRole
from .memory import Memory


class AddressingMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


def opcode_of(word: int) -> int:
    """
    Return the operation-selecting low two digits of *word*.

    The sign is kept, so a negative word never aliases a real opcode.
    """
    if word < 0:
        return -(-word % 100)
    return word % 100


def decode_modes(word: int, count: int) -> tuple[AddressingMode, ...]:
    """
    Decode the addressing mode of each of *count* parameters of *word*.

    Missing leading digits default to POSITION. Raises UnknownAddressingMode
    for any digit outside {0, 1, 2}.
    """
    digits = word // 100
    modes: list[AddressingMode] = []
    for parameter in range(count):
        digit = digits % 10
        digits //= 10
        try:
            modes.append(AddressingMode(digit))
        except ValueError:
            raise UnknownAddressingMode(digit, word, parameter) from None
    return tuple(modes)


def encode_instruction(opcode: int, modes: Sequence[int] = ()) -> int:
    """Build an instruction word from an opcode and per-parameter mode digits."""
    digits = 0
    for mode in reversed(modes):
        digits = digits * 10 + int(mode)
    return digits * 100 + opcode


def resolve_addresses(
    memory: Memory,
    count: int,
    roles: Sequence[ParamRole] | None = None,
) -> list[int]:
    """
    Return the effective address of each parameter of the current instruction.

    When *roles* is given, a WRITE parameter encoded in IMMEDIATE mode raises
    ImmediateWriteError. Any negative effective address raises InvalidAddress.
    """
    ip = memory.instruction_pointer
    word = memory.get(ip)
    addresses: list[int] = []
    for parameter, mode in enumerate(decode_modes(word, count)):
        slot = ip + parameter + 1
        if mode == AddressingMode.POSITION:
            address = memory.get(slot)
        elif mode == AddressingMode.IMMEDIATE:
            if roles is not None and roles[parameter] == ParamRole.WRITE:
                raise ImmediateWriteError(word, parameter)
            address = slot
        else:
            address = memory.relative_base + memory.get(slot)
        if address < 0:
            raise InvalidAddress(address)
        addresses.append(address)
    return addresses
