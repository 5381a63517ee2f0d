"""
Error taxonomy for the Intcode VM.

Every error is fatal for the run that raised it: the VM never retries or
recovers, it propagates the exception to whoever pulled the next output.
Front ends translate these into user-facing diagnostics.
"""

from __future__ import annotations


class IntcodeError(Exception):
    """Base class for every error raised by the intcode package."""


class ParseError(IntcodeError, ValueError):
    """Raised when program text or console input holds a non-integer token."""

    def __init__(self, token: str, index: int, message: str | None = None) -> None:
        super().__init__(message or f"Invalid program token {token!r} at index {index}")
        self.token = token
        self.index = index


class UnknownOpcode(IntcodeError):
    """Raised when an instruction word's low two digits match no operation.

    Attributes:
        opcode: The decoded opcode (``word % 100``).
        word: The full instruction word.
        address: Instruction pointer where the word was fetched.
    """

    def __init__(self, opcode: int, word: int, address: int) -> None:
        super().__init__(f"Unknown opcode {opcode} (word {word}) at address {address}")
        self.opcode = opcode
        self.word = word
        self.address = address


class UnknownAddressingMode(IntcodeError):
    """Raised when a parameter mode digit is outside {0, 1, 2}."""

    def __init__(self, mode: int, word: int, parameter: int, message: str | None = None) -> None:
        super().__init__(
            message
            or f"Unknown addressing mode {mode} for parameter {parameter} of word {word}"
        )
        self.mode = mode
        self.word = word
        self.parameter = parameter


class ImmediateWriteError(UnknownAddressingMode):
    """Raised when a write parameter is encoded in immediate mode."""

    def __init__(self, word: int, parameter: int) -> None:
        super().__init__(
            1,
            word,
            parameter,
            f"Immediate mode cannot be used for write parameter {parameter} of word {word}",
        )


class InvalidAddress(IntcodeError, IndexError):
    """Raised when a read, write, or jump targets a negative address."""

    def __init__(self, address: int) -> None:
        super().__init__(f"Invalid memory address {address}")
        self.address = address


class InputError(IntcodeError):
    """Base class for failures to obtain an input value."""


class NoInputConfigured(InputError):
    """Raised when an Input instruction runs on a VM with no input source."""


class InputExhausted(InputError):
    """Raised when the input source has no more values to give."""


class FeedbackDeadlock(InputError):
    """Raised when a feedback cycle asks for a value its own pull is still producing."""


class InstructionSetError(IntcodeError, ValueError):
    """Raised when the instruction set data file is malformed or inconsistent."""
