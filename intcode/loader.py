"""
Program loading: comma-separated integer text → initial memory → VM.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from .errors import ParseError
from .vm import IntcodeVM

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_program(text: str) -> list[int]:
    """
    Parse comma-separated base-10 integers.

    Whitespace around the text and around each token is ignored. Raises
    ParseError naming the first token that is not an integer (including empty
    tokens such as a trailing comma).
    """
    program: list[int] = []
    for index, raw in enumerate(text.strip().split(",")):
        token = raw.strip()
        if not _INTEGER.fullmatch(token):
            raise ParseError(token, index)
        program.append(int(token))
    return program


def load_program(path: str | Path) -> list[int]:
    """Read and parse the program stored at *path*."""
    return parse_program(Path(path).read_text(encoding="utf-8"))


def load_from_str(text: str, **vm_kwargs: Any) -> IntcodeVM:
    """Build a VM from program text; keyword arguments go to IntcodeVM."""
    return IntcodeVM(parse_program(text), **vm_kwargs)


def load_from_file(path: str | Path, **vm_kwargs: Any) -> IntcodeVM:
    """Build a VM from a program file; keyword arguments go to IntcodeVM."""
    return IntcodeVM(load_program(path), **vm_kwargs)
