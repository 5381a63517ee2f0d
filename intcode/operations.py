"""
Single-instruction execution for the Intcode VM.

Each opcode is dispatched to a handler that receives the resolved parameter
addresses, applies the instruction's full effect to Memory (and the I/O
channel where relevant), and returns a StepResult carrying the next
instruction pointer and any emitted value. Halt returns None.

Handlers read every operand before writing, so an instruction that fails
leaves memory exactly as the previous instruction committed it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from .addressing import opcode_of, resolve_addresses
from .errors import InstructionSetError, UnknownOpcode
from .instructions.registry import InstructionSetRegistry, get_registry
from .instructions.types import InstructionEntry, ParamRole
from .io import IOChannel
from .memory import Memory


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one executed instruction.

    Attributes:
        next_pointer: Instruction pointer to continue from.
        output: Value emitted by the instruction, if any.
    """

    next_pointer: int
    output: int | None = None


_OpHandler = Callable[[Memory, IOChannel, Sequence[int]], "StepResult | None"]


@dataclass(frozen=True)
class Operation:
    """An instruction's metadata bound to the handler that implements it."""

    entry: InstructionEntry
    handler: _OpHandler

    @property
    def opcode(self) -> int:
        return self.entry.opcode

    @property
    def mnemonic(self) -> str:
        return self.entry.mnemonic

    @property
    def params(self) -> tuple[ParamRole, ...]:
        return self.entry.params

    def execute(self, memory: Memory, io: IOChannel) -> StepResult | None:
        addresses = resolve_addresses(memory, len(self.params), self.params)
        return self.handler(memory, io, addresses)


OperationTable = Mapping[int, Operation]


def execute_op(memory: Memory, io: IOChannel, operations: OperationTable) -> StepResult | None:
    """
    Execute the instruction at the current instruction pointer.

    Returns the handler's StepResult, or None if the instruction halts. Raises
    UnknownOpcode if the word's low two digits have no entry in *operations*.
    """
    word = memory.current_word
    operation = operations.get(opcode_of(word))
    if operation is None:
        raise UnknownOpcode(opcode_of(word), word, memory.instruction_pointer)
    return operation.execute(memory, io)


# ── Handlers ───────────────────────────────────────────────────────────────────


def _exec_add(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    a, b, dst = addresses
    memory.set(dst, memory.get(a) + memory.get(b))
    return StepResult(memory.instruction_pointer + 4)


def _exec_multiply(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    a, b, dst = addresses
    memory.set(dst, memory.get(a) * memory.get(b))
    return StepResult(memory.instruction_pointer + 4)


def _exec_input(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    (dst,) = addresses
    memory.set(dst, io.read())
    return StepResult(memory.instruction_pointer + 2)


def _exec_output(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    (a,) = addresses
    value = memory.get(a)
    io.write(value)
    return StepResult(memory.instruction_pointer + 2, output=value)


def _exec_jump_if_true(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    a, b = addresses
    if memory.get(a) != 0:
        return StepResult(memory.get(b))
    return StepResult(memory.instruction_pointer + 3)


def _exec_jump_if_false(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    a, b = addresses
    if memory.get(a) == 0:
        return StepResult(memory.get(b))
    return StepResult(memory.instruction_pointer + 3)


def _exec_less_than(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    a, b, dst = addresses
    memory.set(dst, 1 if memory.get(a) < memory.get(b) else 0)
    return StepResult(memory.instruction_pointer + 4)


def _exec_equals(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> StepResult:
    a, b, dst = addresses
    memory.set(dst, 1 if memory.get(a) == memory.get(b) else 0)
    return StepResult(memory.instruction_pointer + 4)


def _exec_adjust_relative_base(
    memory: Memory, io: IOChannel, addresses: Sequence[int]
) -> StepResult:
    (a,) = addresses
    memory.adjust_relative_base(memory.get(a))
    return StepResult(memory.instruction_pointer + 2)


def _exec_halt(memory: Memory, io: IOChannel, addresses: Sequence[int]) -> None:
    return None


_HANDLERS: dict[str, _OpHandler] = {
    "add": _exec_add,
    "multiply": _exec_multiply,
    "input": _exec_input,
    "output": _exec_output,
    "jump_if_true": _exec_jump_if_true,
    "jump_if_false": _exec_jump_if_false,
    "less_than": _exec_less_than,
    "equals": _exec_equals,
    "adjust_relative_base": _exec_adjust_relative_base,
    "halt": _exec_halt,
}


# ── Table construction ─────────────────────────────────────────────────────────


def build_operations(registry: InstructionSetRegistry | None = None) -> dict[int, Operation]:
    """
    Bind every registry entry to its handler.

    Returns a fresh, mutable table that callers may extend or override before
    handing it to a VM. Raises InstructionSetError listing every entry whose
    handler name is unknown.
    """
    registry = registry if registry is not None else get_registry()
    unknown = [
        f"opcode {opcode}: unknown handler {entry.handler!r}"
        for opcode, entry in registry.entries.items()
        if entry.handler not in _HANDLERS
    ]
    if unknown:
        raise InstructionSetError(
            "Instruction set handler resolution failed:\n"
            + "\n".join(f"  • {e}" for e in unknown)
        )
    return {
        opcode: Operation(entry=entry, handler=_HANDLERS[entry.handler])
        for opcode, entry in registry.entries.items()
    }


_DEFAULT_OPERATIONS: MappingProxyType[int, Operation] = MappingProxyType(build_operations())


def default_operations() -> MappingProxyType[int, Operation]:
    """Return the read-only operation table for the standard instruction set."""
    return _DEFAULT_OPERATIONS
