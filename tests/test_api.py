from __future__ import annotations

import pytest

from intcode.api import run_program
from intcode.errors import InputStarved
from intcode.machine import MachineState, StarvePolicy
from tests.helpers import ADD_TWO_INPUTS, QUINE


def test_run_program_returns_output_and_final_memory() -> None:
    result = run_program("1101,4,3,5,99")
    assert result.halted
    assert result.output == []
    assert result.memory == [1101, 4, 3, 5, 99, 7]
    assert result.steps == 2
    assert result.last_output is None


def test_run_program_applies_patches() -> None:
    result = run_program([1, 0, 0, 0, 99], patches={1: 4, 2: 4})
    # [0] = [4] + [4] = 99 + 99
    assert result.memory[0] == 198


def test_run_program_is_deterministic() -> None:
    first = run_program(QUINE)
    second = run_program(QUINE)
    assert first == second
    assert first.output == QUINE
    assert first.last_output == 99


def test_batch_run_fails_on_starvation_by_default() -> None:
    with pytest.raises(InputStarved):
        run_program(ADD_TWO_INPUTS, [1])


def test_paused_batch_run_reports_state() -> None:
    result = run_program(ADD_TWO_INPUTS, [1], on_starve=StarvePolicy.PAUSE)
    assert result.state == MachineState.AWAITING_INPUT
    assert not result.halted
    assert result.output == []
