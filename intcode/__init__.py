"""
Intcode: a small, reusable instruction-set virtual machine.

Programs are flat lists of integers interpreted by a fetch-decode-execute
loop with per-parameter addressing modes, a relative base register, and
memory that grows on demand. VMs are lazy iterators of their output values,
so they can be chained into pipelines and feedback cycles.
"""

from .addressing import AddressingMode, decode_modes, encode_instruction, opcode_of
from .compose import PhaseSetting, best_phase_setting, chain, feedback_loop, linear_signal
from .errors import (
    FeedbackDeadlock,
    ImmediateWriteError,
    InputError,
    InputExhausted,
    InstructionSetError,
    IntcodeError,
    InvalidAddress,
    NoInputConfigured,
    ParseError,
    UnknownAddressingMode,
    UnknownOpcode,
)
from .io import (
    FeedbackBuffer,
    FeedbackReader,
    InputQueue,
    IOChannel,
    console_input,
    console_output,
    with_prefix,
)
from .loader import load_from_file, load_from_str, load_program, parse_program
from .memory import Memory
from .operations import (
    Operation,
    StepResult,
    build_operations,
    default_operations,
    execute_op,
)
from .vm import IntcodeVM, VMStatus

__all__ = [
    # VM
    "IntcodeVM",
    "VMStatus",
    "Memory",
    # Addressing
    "AddressingMode",
    "decode_modes",
    "encode_instruction",
    "opcode_of",
    # Operations
    "Operation",
    "StepResult",
    "build_operations",
    "default_operations",
    "execute_op",
    # I/O
    "IOChannel",
    "InputQueue",
    "FeedbackBuffer",
    "FeedbackReader",
    "console_input",
    "console_output",
    "with_prefix",
    # Loading
    "parse_program",
    "load_program",
    "load_from_str",
    "load_from_file",
    # Composition
    "PhaseSetting",
    "chain",
    "linear_signal",
    "feedback_loop",
    "best_phase_setting",
    # Errors
    "IntcodeError",
    "ParseError",
    "UnknownOpcode",
    "UnknownAddressingMode",
    "ImmediateWriteError",
    "InvalidAddress",
    "InputError",
    "InputExhausted",
    "NoInputConfigured",
    "FeedbackDeadlock",
    "InstructionSetError",
]
