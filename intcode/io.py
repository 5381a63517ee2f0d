"""
Input and output channels for the Intcode VM.

Input is any iterator of ints, pulled lazily one value per Input instruction.
Output is an optional sink called once per emitted value; the VM surfaces
every output as its own next value whether or not a sink is configured.

Because a VM is itself an iterator of ints, one VM's output can be another's
input. FeedbackBuffer closes such a chain into a cycle: it records every value
pulled from its source in an append-only history, and each FeedbackReader
walks that history with its own cursor, pulling the source forward only when
the cursor reaches the end.
"""

from __future__ import annotations

import itertools
import logging
import sys
import threading
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from typing import TextIO

from .errors import (
    FeedbackDeadlock,
    InputExhausted,
    NoInputConfigured,
    ParseError,
)

logger = logging.getLogger(__name__)

OutputSink = Callable[[int], None]


class IOChannel:
    """
    Input source and output sink of a single VM.

    Either side may be absent. Assigning to ``input`` accepts any iterable and
    may be done between pulls to change where the VM reads from.
    """

    def __init__(
        self,
        input: Iterable[int] | None = None,
        output: OutputSink | None = None,
    ) -> None:
        self._input: Iterator[int] | None = None
        self.input = input
        self.output = output

    @property
    def input(self) -> Iterator[int] | None:
        return self._input

    @input.setter
    def input(self, source: Iterable[int] | None) -> None:
        self._input = iter(source) if source is not None else None

    def read(self) -> int:
        """Pull the next input value."""
        if self._input is None:
            raise NoInputConfigured("Input instruction executed with no input configured")
        try:
            return next(self._input)
        except StopIteration:
            raise InputExhausted("Input source is exhausted") from None

    def write(self, value: int) -> None:
        if self.output is not None:
            self.output(value)


# ── Input sources ──────────────────────────────────────────────────────────────


def with_prefix(values: Iterable[int], source: Iterable[int]) -> Iterator[int]:
    """Yield *values* first, then everything from *source*."""
    return itertools.chain(values, source)


class InputQueue:
    """
    Push-driven input for interactive consumers.

    The consumer pushes control values between pulls of the VM's output. An
    empty queue reports exhaustion for that pull only; values pushed later
    are still delivered, so the same queue can stay attached for the whole run.
    """

    def __init__(self, values: Iterable[int] = ()) -> None:
        self._pending: deque[int] = deque(values)

    def push(self, *values: int) -> None:
        self._pending.extend(values)

    def __iter__(self) -> InputQueue:
        return self

    def __next__(self) -> int:
        if not self._pending:
            raise StopIteration
        return self._pending.popleft()

    def __len__(self) -> int:
        return len(self._pending)


def console_input(stream: TextIO | None = None) -> Iterator[int]:
    """Yield one integer per line read from *stream* (stdin by default) until EOF."""
    source = stream if stream is not None else sys.stdin
    for index, line in enumerate(source):
        token = line.strip()
        try:
            yield int(token)
        except ValueError:
            raise ParseError(
                token, index, f"Invalid input {token!r} on input line {index + 1}"
            ) from None


def console_output(value: int) -> None:
    print(f"Output: {value}")


# ── Feedback composition ───────────────────────────────────────────────────────


class FeedbackBuffer:
    """
    Append-only history of values pulled from a wrapped source.

    Readers created with reader() each keep their own position, so several
    stages of a chain can consume the same history at their own pace without
    re-pulling values that were already produced. The source can be attached
    after readers exist, which is how a chain's last stage is looped back to
    its first.

    Advancing and appending are serialised by a re-entrant lock.
    """

    def __init__(
        self,
        initial: Iterable[int] = (),
        source: Iterable[int] | None = None,
    ) -> None:
        self._history: list[int] = list(initial)
        self._source: Iterator[int] | None = None
        self._exhausted = False
        self._pulling = False
        self._lock = threading.RLock()
        if source is not None:
            self.attach(source)

    def attach(self, source: Iterable[int]) -> None:
        """Set the iterable that new history values are pulled from."""
        with self._lock:
            self._source = iter(source)
            self._exhausted = False

    def get(self, position: int) -> int | None:
        """
        Return the value at *position*, pulling the source until it exists.

        Returns None once the source is exhausted short of *position*.
        """
        with self._lock:
            while position >= len(self._history):
                if self._exhausted:
                    return None
                if self._source is None:
                    raise NoInputConfigured("Feedback buffer has no source attached")
                if self._pulling:
                    raise FeedbackDeadlock(
                        f"Feedback cycle requested position {position} while producing it"
                    )
                self._pulling = True
                try:
                    value = next(self._source)
                except StopIteration:
                    self._exhausted = True
                    return None
                finally:
                    self._pulling = False
                self._history.append(value)
                logger.debug("Feedback history grew to %d values", len(self._history))
            return self._history[position]

    def reader(self, position: int = 0) -> FeedbackReader:
        return FeedbackReader(self, position)

    @property
    def history(self) -> tuple[int, ...]:
        with self._lock:
            return tuple(self._history)

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)


class FeedbackReader:
    """Independent cursor over a FeedbackBuffer's history."""

    def __init__(self, buffer: FeedbackBuffer, position: int = 0) -> None:
        self._buffer = buffer
        self.position = position

    def __iter__(self) -> FeedbackReader:
        return self

    def __next__(self) -> int:
        value = self._buffer.get(self.position)
        if value is None:
            raise StopIteration
        self.position += 1
        return value
