"""
Core type definitions for the instruction set layer.

Enums are the canonical vocabulary. InstructionEntry values are loaded from the
YAML instruction table and frozen after startup; nothing writes to them at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ── Enums ──────────────────────────────────────────────────────────────────────


class ParamRole(str, Enum):
    """How an operation uses one of its parameters."""

    READ = "read"  # operand value is fetched through the resolved address
    WRITE = "write"  # resolved address is the destination cell


# ── Registry entry types (frozen, loaded from YAML) ───────────────────────────


@dataclass(frozen=True)
class InstructionEntry:
    """
    Metadata for a single opcode.

    Attributes:
        opcode: Value of the low two digits of the instruction word.
        mnemonic: Short upper-case name used in logs and error messages.
        handler: Name of the handler function in ``intcode.operations``.
        params: Role of each parameter, in parameter order.
        description: Human-readable summary of the effect.
    """

    opcode: int
    mnemonic: str
    handler: str
    params: tuple[ParamRole, ...]
    description: str = ""
