"""
Execution loop for the Intcode VM.

IntcodeVM runs fetch → decode → dispatch over its Memory until an Output
instruction emits a value or Halt is reached. The loop is pull-driven: each
request for the next output resumes from where the previous one stopped, so a
VM behaves as a lazy, non-restartable iterator of its output values. Running
a program again means building a new VM from the original program.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from .addressing import opcode_of
from .io import IOChannel, OutputSink
from .memory import Memory
from .operations import OperationTable, StepResult, default_operations, execute_op

logger = logging.getLogger(__name__)


class VMStatus(str, Enum):
    RUNNING = "running"
    HALTED = "halted"


class IntcodeVM:
    """
    A single Intcode program run.

    Parameters
    ----------
    program:
        Initial memory contents. The VM keeps its own copy.
    operations:
        Opcode → Operation table. Defaults to the standard instruction set.
    input:
        Optional iterable of input values, pulled lazily.
    output:
        Optional sink called with every emitted value, in addition to the
        value being returned from the loop.
    default_value:
        Value of memory cells that were never written.

    Consumers may read and write ``memory`` or replace ``io.input`` between
    pulls, but never while a pull is in progress.
    """

    def __init__(
        self,
        program: Iterable[int],
        operations: OperationTable | None = None,
        input: Iterable[int] | None = None,
        output: OutputSink | None = None,
        default_value: int = 0,
    ) -> None:
        self.memory = Memory.from_program(program, default_value=default_value)
        self.operations: OperationTable = (
            operations if operations is not None else default_operations()
        )
        self.io = IOChannel(input=input, output=output)
        self.status = VMStatus.RUNNING
        self.steps = 0

    @property
    def halted(self) -> bool:
        return self.status == VMStatus.HALTED

    def step(self) -> StepResult | None:
        """
        Execute exactly one instruction.

        Returns its StepResult, or None if the VM is (now) halted. Errors from
        the instruction propagate and leave the instruction pointer on the
        failing instruction.
        """
        if self.halted:
            return None

        ip = self.memory.instruction_pointer
        word = self.memory.current_word
        result = execute_op(self.memory, self.io, self.operations)
        self.steps += 1
        if result is None:
            self.status = VMStatus.HALTED
            logger.info("Halted at %d after %d instructions", ip, self.steps)
            return None

        self.memory.jump(result.next_pointer)
        if logger.isEnabledFor(logging.DEBUG):
            operation = self.operations.get(opcode_of(word))
            logger.debug(
                "ip=%d word=%d op=%s next=%d",
                ip,
                word,
                operation.mnemonic if operation else "?",
                result.next_pointer,
            )
        return result

    def run_until_output_or_halt(self) -> int | None:
        """Resume the loop and return the next output, or None once halted."""
        while not self.halted:
            result = self.step()
            if result is not None and result.output is not None:
                return result.output
        return None

    def run(self) -> tuple[int, ...]:
        """Run to halt and return every value emitted along the way."""
        return tuple(self)

    def __iter__(self) -> IntcodeVM:
        return self

    def __next__(self) -> int:
        value = self.run_until_output_or_halt()
        if value is None:
            raise StopIteration
        return value
