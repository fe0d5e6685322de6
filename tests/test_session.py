from __future__ import annotations

from pathlib import Path

import pytest

from intcode.errors import InputStarved
from intcode.machine import MachineState, StarvePolicy
from intcode.session import SessionSpec, load_session, run_session
from tests.helpers import ADD_TWO_INPUTS, write_program


def test_load_session_with_inline_source(tmp_path: Path) -> None:
    p = tmp_path / "add.yml"
    p.write_text(
        "source: '1101,4,3,5,99'\ndump_memory: true\n",
        encoding="utf-8",
    )
    spec = load_session(p)
    assert spec.session_id == "add"
    assert spec.on_starve == StarvePolicy.FAIL
    result = run_session(spec)
    assert result.halted
    assert result.memory[5] == 7


def test_program_path_is_resolved_relative_to_session(tmp_path: Path) -> None:
    write_program(tmp_path / "prog.txt", ADD_TWO_INPUTS)
    p = tmp_path / "s.yaml"
    p.write_text(
        "session_id: adder\nprogram: prog.txt\ninputs: [3, 4]\n",
        encoding="utf-8",
    )
    spec = load_session(p)
    assert spec.session_id == "adder"
    assert spec.program == (tmp_path / "prog.txt").resolve()
    assert run_session(spec).output == [7]


def test_patches_and_pause_policy(tmp_path: Path) -> None:
    p = tmp_path / "s.yml"
    p.write_text(
        "source: '3,0,3,1,1,0,1,2,4,2,99'\n"
        "inputs: [1]\n"
        "on_starve: pause\n"
        "patches:\n  9: 0\n",
        encoding="utf-8",
    )
    spec = load_session(p)
    assert spec.patches == {9: 0}
    result = run_session(spec)
    assert result.state == MachineState.AWAITING_INPUT


def test_starving_session_fails_by_default(tmp_path: Path) -> None:
    p = tmp_path / "s.yml"
    p.write_text("source: '3,0,99'\n", encoding="utf-8")
    with pytest.raises(InputStarved):
        run_session(load_session(p))


def test_session_needs_exactly_one_source() -> None:
    with pytest.raises(ValueError):
        SessionSpec()
    with pytest.raises(ValueError):
        SessionSpec(source="99", program=Path("x.txt"))


def test_session_must_be_mapping(tmp_path: Path) -> None:
    p = tmp_path / "bad.yml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_session(p)


def test_session_validates_max_steps(tmp_path: Path) -> None:
    p = tmp_path / "bad.yml"
    p.write_text("source: '99'\nmax_steps: 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_session(p)


def test_unquoted_numeric_source_is_text(tmp_path: Path) -> None:
    p = tmp_path / "halt.yml"
    p.write_text("source: 99\n", encoding="utf-8")
    spec = load_session(p)
    assert spec.source == "99"
    assert run_session(spec).halted


def test_broken_yaml_is_a_value_error(tmp_path: Path) -> None:
    p = tmp_path / "bad.yml"
    p.write_text("source: [1, 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid session YAML"):
        load_session(p)
