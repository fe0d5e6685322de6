from __future__ import annotations

import pytest

from intcode.errors import ImmediateWriteTarget, InvalidOpcode, InvalidParameterMode
from intcode.opcodes import Opcode, ParamMode, decode, disassemble
from tests.helpers import QUINE


def test_decode_splits_opcode_and_modes() -> None:
    instr = decode(1002, address=4)
    assert instr.opcode == Opcode.MULTIPLY
    assert instr.modes == (ParamMode.POSITION, ParamMode.IMMEDIATE, ParamMode.POSITION)
    assert instr.address == 4
    assert instr.size == 4


def test_missing_mode_digits_default_to_position() -> None:
    instr = decode(7, address=0)
    assert instr.opcode == Opcode.LESS_THAN
    assert instr.modes == (ParamMode.POSITION,) * 3


def test_relative_mode_and_halt() -> None:
    assert decode(204, address=0).modes == (ParamMode.RELATIVE,)
    halt = decode(99, address=0)
    assert halt.opcode == Opcode.HALT
    assert halt.modes == ()
    assert halt.size == 1


@pytest.mark.parametrize("word", [0, 10, 77, 98, -1, -99])
def test_unknown_or_negative_words_are_invalid(word: int) -> None:
    with pytest.raises(InvalidOpcode) as exc:
        decode(word, address=12)
    assert exc.value.opcode == word
    assert exc.value.address == 12


def test_unknown_mode_digit() -> None:
    with pytest.raises(InvalidParameterMode) as exc:
        decode(301, address=3)
    assert exc.value.mode == 3
    assert exc.value.address == 3


def test_immediate_write_target_is_rejected() -> None:
    with pytest.raises(ImmediateWriteTarget):
        decode(11101, address=0)
    with pytest.raises(ImmediateWriteTarget):
        decode(103, address=0)


def test_opcode_metadata() -> None:
    assert Opcode.INPUT.mnemonic == "in"
    assert Opcode.INPUT.write_param == 0
    assert Opcode.OUTPUT.write_param is None
    assert Opcode.EQUALS.num_params == 3


def test_disassemble_program() -> None:
    lines = list(disassemble([1101, 4, 3, 5, 99]))
    assert lines == [(0, "add 4, 3, [5]"), (4, "hlt")]


def test_disassemble_relative_operands() -> None:
    lines = dict(disassemble(QUINE))
    assert lines[0] == "arb 1"
    assert lines[2] == "out [rb-1]"


def test_disassemble_marks_undecodable_words_as_data() -> None:
    assert list(disassemble([77, 99])) == [(0, "data 77"), (1, "hlt")]
    # Operands past the end.
    assert list(disassemble([1, 0])) == [(0, "data 1"), (1, "data 0")]
