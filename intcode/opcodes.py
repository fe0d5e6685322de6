from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum

from intcode.errors import ImmediateWriteTarget, IntcodeError, InvalidOpcode, InvalidParameterMode


class Opcode(IntEnum):
    ADD = 1
    MULTIPLY = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    ADJUST_RELATIVE_BASE = 9
    HALT = 99

    @property
    def mnemonic(self) -> str:
        return _SIGNATURES[self].mnemonic

    @property
    def num_params(self) -> int:
        return _SIGNATURES[self].num_params

    @property
    def write_param(self) -> int | None:
        return _SIGNATURES[self].write_param


class ParamMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


@dataclass(frozen=True, slots=True)
class _Signature:
    mnemonic: str
    num_params: int
    # Index of the operand written to, if any.
    write_param: int | None = None


_SIGNATURES: dict[Opcode, _Signature] = {
    Opcode.ADD: _Signature("add", 3, write_param=2),
    Opcode.MULTIPLY: _Signature("mul", 3, write_param=2),
    Opcode.INPUT: _Signature("in", 1, write_param=0),
    Opcode.OUTPUT: _Signature("out", 1),
    Opcode.JUMP_IF_TRUE: _Signature("jnz", 2),
    Opcode.JUMP_IF_FALSE: _Signature("jz", 2),
    Opcode.LESS_THAN: _Signature("lt", 3, write_param=2),
    Opcode.EQUALS: _Signature("eq", 3, write_param=2),
    Opcode.ADJUST_RELATIVE_BASE: _Signature("arb", 1),
    Opcode.HALT: _Signature("hlt", 0),
}


@dataclass(frozen=True, slots=True)
class Instruction:
    opcode: Opcode
    modes: tuple[ParamMode, ...]
    address: int

    @property
    def size(self) -> int:
        return 1 + len(self.modes)


def decode(word: int, *, address: int) -> Instruction:
    if word < 0:
        raise InvalidOpcode(word, address=address)

    mode_digits, raw_opcode = divmod(word, 100)
    try:
        opcode = Opcode(raw_opcode)
    except ValueError as e:
        raise InvalidOpcode(word, address=address) from e

    modes: list[ParamMode] = []
    for _ in range(opcode.num_params):
        mode_digits, digit = divmod(mode_digits, 10)
        try:
            modes.append(ParamMode(digit))
        except ValueError as e:
            raise InvalidParameterMode(digit, address=address) from e

    write_param = opcode.write_param
    if write_param is not None and modes[write_param] == ParamMode.IMMEDIATE:
        raise ImmediateWriteTarget(address=address)

    return Instruction(opcode=opcode, modes=tuple(modes), address=address)


def format_operand(mode: ParamMode, raw: int) -> str:
    if mode == ParamMode.IMMEDIATE:
        return str(raw)
    if mode == ParamMode.RELATIVE:
        return f"[rb{raw:+d}]"
    return f"[{raw}]"


def disassemble(words: Sequence[int]) -> Iterator[tuple[int, str]]:
    """Yield ``(address, text)`` pairs for a memory image.

    Words that do not decode (or whose operands run past the end) are shown
    as ``data`` and skipped one at a time.
    """
    address = 0
    while address < len(words):
        word = words[address]
        try:
            instr = decode(word, address=address)
        except IntcodeError:
            instr = None
        if instr is None or address + instr.size > len(words):
            yield address, f"data {word}"
            address += 1
            continue

        operands = [
            format_operand(mode, words[address + 1 + i]) for i, mode in enumerate(instr.modes)
        ]
        text = instr.opcode.mnemonic
        if operands:
            text += " " + ", ".join(operands)
        yield address, text
        address += instr.size
