"""
Composition of VM instances into signal chains.

Stages:

  1. Each stage is a fresh VM over the same program.
  2. A stage's input is its phase setting followed by the previous stage's
     output (the first stage gets the seed signal instead).
  3. chain() / linear_signal() stop there: the last stage's final output is
     the signal.
  4. feedback_loop() additionally routes the last stage's output back into
     the first stage through a FeedbackBuffer seeded with the seed signal,
     and runs the cycle until every stage halts.

Evaluation is pure demand-pull: reading the last stage drives every earlier
stage synchronously, one value at a time.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from .io import FeedbackBuffer, with_prefix
from .vm import IntcodeVM

logger = logging.getLogger(__name__)


class PhaseSetting(NamedTuple):
    """Best signal found by best_phase_setting() and the phases that produced it."""

    signal: int
    phases: tuple[int, ...]


def chain(program: Sequence[int], phases: Sequence[int], seed: int = 0) -> IntcodeVM:
    """Build a linear chain of one VM per phase and return the last stage."""
    if not phases:
        raise ValueError("chain requires at least one phase")
    vm = IntcodeVM(program, input=[phases[0], seed])
    for phase in phases[1:]:
        vm = IntcodeVM(program, input=with_prefix([phase], vm))
    return vm


def linear_signal(program: Sequence[int], phases: Sequence[int], seed: int = 0) -> int:
    """Run a linear chain to completion and return the last stage's final output."""
    return _last(chain(program, phases, seed), "linear chain")


def feedback_loop(program: Sequence[int], phases: Sequence[int], seed: int = 0) -> int:
    """
    Run a chain whose last stage feeds back into its first.

    Returns the final value in the loop-back history once the last stage
    halts: the last signal it emitted, or *seed* if it emitted nothing.
    """
    if not phases:
        raise ValueError("feedback_loop requires at least one phase")
    buffer = FeedbackBuffer(initial=[seed])
    stage: Iterable[int] = buffer.reader()
    for phase in phases:
        stage = IntcodeVM(program, input=with_prefix([phase], stage))
    buffer.attach(stage)
    return _last(buffer.reader(), "feedback loop")


def best_phase_setting(
    program: Sequence[int],
    phase_values: Iterable[int],
    feedback: bool = False,
    seed: int = 0,
) -> PhaseSetting:
    """
    Try every ordering of *phase_values* and return the one with the highest signal.

    Uses feedback_loop() when *feedback* is set, linear_signal() otherwise.
    The first ordering reaching the maximum wins ties.
    """
    values = tuple(phase_values)
    if not values:
        raise ValueError("best_phase_setting requires at least one phase value")
    run = feedback_loop if feedback else linear_signal
    best: PhaseSetting | None = None
    for phases in itertools.permutations(values):
        signal = run(program, phases, seed)
        logger.debug("phases=%s signal=%d", phases, signal)
        if best is None or signal > best.signal:
            best = PhaseSetting(signal, phases)
    assert best is not None
    return best


def _last(values: Iterable[int], what: str) -> int:
    last: int | None = None
    for last in values:
        pass
    if last is None:
        raise ValueError(f"{what} produced no output")
    return last
