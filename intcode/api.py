from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from intcode.machine import Machine, MachineState, StarvePolicy
from intcode.program import Program
from intcode.trace import Tracer


@dataclass(frozen=True)
class ExecutionResult:
    state: MachineState
    output: list[int] = field(default_factory=list)
    memory: list[int] = field(default_factory=list)
    steps: int = 0

    @property
    def halted(self) -> bool:
        return self.state == MachineState.HALTED

    @property
    def last_output(self) -> int | None:
        return self.output[-1] if self.output else None


def run_program(
    program: Program | Sequence[int] | str,
    inputs: Iterable[int] = (),
    *,
    on_starve: StarvePolicy = StarvePolicy.FAIL,
    max_steps: int | None = None,
    patches: Mapping[int, int] | None = None,
    tracer: Tracer | None = None,
) -> ExecutionResult:
    """Run a program to completion and collect its output and final memory.

    With ``on_starve=PAUSE`` a run that runs out of input returns early with
    ``state == AWAITING_INPUT`` instead of raising.
    """
    image = Program.coerce(program).patched(patches or {})
    machine = Machine(
        image, inputs=inputs, on_starve=on_starve, max_steps=max_steps, tracer=tracer
    )
    state = machine.run()
    return ExecutionResult(
        state=state,
        output=machine.drain_output(),
        memory=machine.memory_snapshot(),
        steps=machine.steps,
    )
