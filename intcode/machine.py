from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence
from enum import Enum

from intcode.errors import InputStarved, InvalidAddress, MachineHalted, StepLimitExceeded
from intcode.memory import Memory
from intcode.opcodes import Instruction, Opcode, ParamMode, decode
from intcode.program import Program
from intcode.trace import TraceEvent, Tracer

logger = logging.getLogger(__name__)


class MachineState(str, Enum):
    RUNNING = "running"
    AWAITING_INPUT = "awaiting_input"
    HALTED = "halted"


class StarvePolicy(str, Enum):
    # PAUSE: enter AWAITING_INPUT and retry the same instruction once fed.
    # FAIL: raise InputStarved.
    PAUSE = "pause"
    FAIL = "fail"


class Machine:
    """Intcode interpreter.

    One machine owns its memory, instruction pointer, relative base and I/O
    queues. ``step()`` executes a single instruction; ``run()`` steps until the
    machine halts or pauses for input. Callers that chain several machines
    drive each one with ``push_input()`` / ``next_output()``.
    """

    def __init__(
        self,
        program: Program | Sequence[int] | str,
        *,
        inputs: Iterable[int] = (),
        on_starve: StarvePolicy = StarvePolicy.PAUSE,
        max_steps: int | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        if max_steps is not None and max_steps <= 0:
            raise ValueError("max_steps must be positive")
        self._memory = Memory(Program.coerce(program))
        self._ip = 0
        self._relative_base = 0
        self._inputs: deque[int] = deque(int(v) for v in inputs)
        self._outputs: deque[int] = deque()
        self._constant_input: int | None = None
        self._state = MachineState.RUNNING
        self._steps = 0
        self.on_starve = StarvePolicy(on_starve)
        self.max_steps = max_steps
        self.tracer = tracer

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def is_halted(self) -> bool:
        return self._state == MachineState.HALTED

    @property
    def awaiting_input(self) -> bool:
        return self._state == MachineState.AWAITING_INPUT

    @property
    def ip(self) -> int:
        return self._ip

    @ip.setter
    def ip(self, value: int) -> None:
        if value < 0:
            raise InvalidAddress(value)
        self._ip = int(value)

    @property
    def relative_base(self) -> int:
        return self._relative_base

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def pending_inputs(self) -> int:
        return len(self._inputs)

    # -- memory ---------------------------------------------------------------

    def read(self, address: int) -> int:
        return self._memory.read(address)

    def write(self, address: int, value: int) -> None:
        self._memory.write(address, value)

    def memory_snapshot(self) -> list[int]:
        return self._memory.snapshot()

    # -- I/O ------------------------------------------------------------------

    def push_input(self, *values: int) -> None:
        self._inputs.extend(int(v) for v in values)
        if values and self._state == MachineState.AWAITING_INPUT:
            self._state = MachineState.RUNNING

    def set_constant_input(self, value: int | None) -> None:
        """Value read whenever the input queue is empty (``None`` disables it)."""
        self._constant_input = None if value is None else int(value)
        if value is not None and self._state == MachineState.AWAITING_INPUT:
            self._state = MachineState.RUNNING

    def drain_output(self) -> list[int]:
        out = list(self._outputs)
        self._outputs.clear()
        return out

    def pop_output(self) -> int | None:
        if not self._outputs:
            return None
        return self._outputs.popleft()

    def next_output(self) -> int | None:
        """Run until one output value is available and return it.

        Returns ``None`` when the machine halts or pauses for input first.
        """
        while not self._outputs:
            if self._state == MachineState.HALTED:
                return None
            if self.step() == MachineState.AWAITING_INPUT:
                return None
        return self._outputs.popleft()

    # -- execution ------------------------------------------------------------

    def run(self) -> MachineState:
        while True:
            state = self.step()
            if state != MachineState.RUNNING:
                return state

    def step(self) -> MachineState:
        if self._state == MachineState.HALTED:
            raise MachineHalted()
        if self.max_steps is not None and self._steps >= self.max_steps:
            raise StepLimitExceeded(self.max_steps)

        instr = decode(self._memory.read(self._ip), address=self._ip)
        op = instr.opcode
        next_ip = self._ip + instr.size

        if op == Opcode.INPUT:
            # Resolve the target first so a bad address does not consume input.
            target = self._address(instr, 0)
            value = self._take_input(instr)
            if value is None:
                if self._state != MachineState.AWAITING_INPUT:
                    logger.info("paused for input at %d", self._ip)
                self._state = MachineState.AWAITING_INPUT
                return self._state
            self._trace(instr)
            self._memory.write(target, value)
        else:
            self._trace(instr)

        if op == Opcode.ADD:
            self._write(instr, 2, self._param(instr, 0) + self._param(instr, 1))
        elif op == Opcode.MULTIPLY:
            self._write(instr, 2, self._param(instr, 0) * self._param(instr, 1))
        elif op == Opcode.INPUT:
            pass
        elif op == Opcode.OUTPUT:
            self._outputs.append(self._param(instr, 0))
        elif op == Opcode.JUMP_IF_TRUE:
            if self._param(instr, 0) != 0:
                next_ip = self._jump_target(instr)
        elif op == Opcode.JUMP_IF_FALSE:
            if self._param(instr, 0) == 0:
                next_ip = self._jump_target(instr)
        elif op == Opcode.LESS_THAN:
            self._write(instr, 2, 1 if self._param(instr, 0) < self._param(instr, 1) else 0)
        elif op == Opcode.EQUALS:
            self._write(instr, 2, 1 if self._param(instr, 0) == self._param(instr, 1) else 0)
        elif op == Opcode.ADJUST_RELATIVE_BASE:
            self._relative_base += self._param(instr, 0)
        elif op == Opcode.HALT:
            next_ip = self._ip
            self._state = MachineState.HALTED
            logger.info("halted at %d after %d steps", self._ip, self._steps + 1)
        else:
            raise AssertionError(f"unhandled opcode: {op!r}")

        self._steps += 1
        self._ip = next_ip
        if self._state == MachineState.AWAITING_INPUT:
            self._state = MachineState.RUNNING
        return self._state

    def copy(self) -> Machine:
        """Independent clone of the full machine state (tracer is shared)."""
        clone = Machine((), on_starve=self.on_starve, max_steps=self.max_steps, tracer=self.tracer)
        clone._memory = self._memory.copy()
        clone._ip = self._ip
        clone._relative_base = self._relative_base
        clone._inputs = deque(self._inputs)
        clone._outputs = deque(self._outputs)
        clone._constant_input = self._constant_input
        clone._state = self._state
        clone._steps = self._steps
        return clone

    def _take_input(self, instr: Instruction) -> int | None:
        if self._inputs:
            return self._inputs.popleft()
        if self._constant_input is not None:
            return self._constant_input
        if self.on_starve == StarvePolicy.FAIL:
            raise InputStarved(address=instr.address)
        return None

    def _raw(self, instr: Instruction, index: int) -> int:
        return self._memory.read(instr.address + 1 + index)

    def _address(self, instr: Instruction, index: int) -> int:
        raw = self._raw(instr, index)
        mode = instr.modes[index]
        if mode == ParamMode.RELATIVE:
            address = self._relative_base + raw
        elif mode == ParamMode.POSITION:
            address = raw
        else:
            raise AssertionError("immediate operands have no address")
        if address < 0:
            raise InvalidAddress(address, ip=instr.address)
        return address

    def _param(self, instr: Instruction, index: int) -> int:
        if instr.modes[index] == ParamMode.IMMEDIATE:
            return self._raw(instr, index)
        return self._memory.read(self._address(instr, index))

    def _write(self, instr: Instruction, index: int, value: int) -> None:
        self._memory.write(self._address(instr, index), value)

    def _jump_target(self, instr: Instruction) -> int:
        target = self._param(instr, 1)
        if target < 0:
            raise InvalidAddress(target, ip=instr.address)
        return target

    def _trace(self, instr: Instruction) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%d: %s %s",
                instr.address,
                instr.opcode.mnemonic,
                [self._raw(instr, i) for i in range(len(instr.modes))],
            )
        if self.tracer is None:
            return
        self.tracer.record(
            TraceEvent(
                step=self._steps + 1,
                ip=instr.address,
                relative_base=self._relative_base,
                opcode=instr.opcode.mnemonic,
                modes=[int(m) for m in instr.modes],
                operands=[self._raw(instr, i) for i in range(len(instr.modes))],
            )
        )
