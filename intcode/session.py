from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from intcode.api import ExecutionResult, run_program
from intcode.machine import StarvePolicy
from intcode.program import Program, load_program, parse_program

logger = logging.getLogger(__name__)


class SessionSpec(BaseModel):
    session_id: str = "session"
    # Exactly one of `program` (path to a program file) or `source` (inline text).
    program: Path | None = None
    source: str | None = None
    inputs: list[int] = Field(default_factory=list)
    patches: dict[int, int] = Field(default_factory=dict)
    on_starve: StarvePolicy = StarvePolicy.FAIL
    max_steps: int | None = Field(default=None, ge=1)
    dump_memory: bool = False

    @field_validator("source", mode="before")
    @classmethod
    def _source_as_text(cls, value: Any) -> Any:
        # YAML reads an unquoted single-item program such as `99` as an int.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "SessionSpec":
        if (self.program is None) == (self.source is None):
            raise ValueError("session needs exactly one of `program` or `source`")
        return self

    def load(self) -> Program:
        if self.source is not None:
            return parse_program(self.source)
        assert self.program is not None
        return load_program(self.program)


def _resolve_program_path(raw: Any, *, session_path: Path) -> Any:
    if not isinstance(raw, str) or not raw.strip():
        return raw
    p = Path(raw)
    if p.is_absolute():
        return p
    # Session-relative first, then CWD-relative.
    cand = (session_path.parent / p).resolve()
    if cand.exists():
        return cand
    return p


def load_session(path: Path) -> SessionSpec:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"invalid session YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("session must be a YAML mapping")
    data = dict(data)
    data.setdefault("session_id", path.stem)
    if "program" in data:
        data["program"] = _resolve_program_path(data["program"], session_path=path)
    return SessionSpec.model_validate(data)


def run_session(spec: SessionSpec) -> ExecutionResult:
    logger.info("session %s: %d inputs, %d patches", spec.session_id, len(spec.inputs), len(spec.patches))
    result = run_program(
        spec.load(),
        spec.inputs,
        on_starve=spec.on_starve,
        max_steps=spec.max_steps,
        patches=spec.patches,
    )
    logger.info("session %s finished: %s after %d steps", spec.session_id, result.state.value, result.steps)
    return result
