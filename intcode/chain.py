"""Chains of cooperating machines.

Each machine is seeded with one value (pushed before anything else), then the
signal travels machine 0 -> 1 -> ... -> n-1. With ``loopback`` the output of
the last machine is fed back into machine 0 until the machines halt.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Sequence

from intcode.errors import InputStarved, IntcodeError
from intcode.machine import Machine
from intcode.program import Program

logger = logging.getLogger(__name__)


class StageHalted(IntcodeError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"machine #{index} halted without producing a signal")


class MachineChain:
    def __init__(
        self,
        program: Program | Sequence[int] | str,
        seeds: Sequence[int],
        *,
        loopback: bool = False,
        max_steps: int | None = None,
    ) -> None:
        if not seeds:
            raise ValueError("a chain needs at least one seed")
        image = Program.coerce(program)
        self.machines = [Machine(image, inputs=[seed], max_steps=max_steps) for seed in seeds]
        self.loopback = loopback

    @property
    def halted(self) -> bool:
        return all(m.is_halted for m in self.machines)

    def _forward(self, index: int, signal: int) -> int | None:
        machine = self.machines[index]
        machine.push_input(signal)
        output = machine.next_output()
        if output is None and machine.awaiting_input:
            # Fed a signal and still starving: the program wants more than one value per hop.
            raise InputStarved(address=machine.ip)
        logger.debug("machine #%d: input=%d output=%s", index, signal, output)
        return output

    def run(self, signal: int = 0) -> int:
        """Return the last signal produced by the final machine."""
        last = len(self.machines) - 1
        result: int | None = None
        done = False
        while not done:
            for index in range(len(self.machines)):
                output = self._forward(index, signal)
                if output is None:
                    logger.debug("machine #%d halted", index)
                    if not self.loopback:
                        raise StageHalted(index)
                    done = True
                    continue
                signal = output
                if index == last:
                    result = output
            if not self.loopback:
                done = True
        if result is None:
            raise StageHalted(last)
        return result


def run_chain(
    program: Program | Sequence[int] | str,
    seeds: Sequence[int],
    *,
    signal: int = 0,
    loopback: bool = False,
    max_steps: int | None = None,
) -> int:
    chain = MachineChain(program, seeds, loopback=loopback, max_steps=max_steps)
    return chain.run(signal)


def search_seeds(
    program: Program | Sequence[int] | str,
    candidates: Iterable[int],
    *,
    signal: int = 0,
    loopback: bool = False,
    max_steps: int | None = None,
) -> tuple[int, tuple[int, ...]]:
    """Try every ordering of ``candidates`` as seeds; return the best signal and its seeds."""
    image = Program.coerce(program)
    pool = list(candidates)
    if not pool:
        raise ValueError("no seed candidates")

    best: tuple[int, tuple[int, ...]] | None = None
    for seeds in itertools.permutations(pool):
        result = run_chain(image, seeds, signal=signal, loopback=loopback, max_steps=max_steps)
        logger.debug("seeds %s -> %d", seeds, result)
        if best is None or result > best[0]:
            best = (result, tuple(seeds))
    assert best is not None
    return best
