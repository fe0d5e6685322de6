from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field


class TraceEvent(BaseModel):
    step: int = Field(ge=1)
    ip: int = Field(ge=0)
    relative_base: int
    opcode: str
    modes: list[int] = Field(default_factory=list)
    operands: list[int] = Field(default_factory=list)


class Tracer(Protocol):
    def record(self, event: TraceEvent) -> None: ...


class ListTracer:
    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    def record(self, event: TraceEvent) -> None:
        self.events.append(event)


class JsonlTracer:
    """Append one JSON line per executed instruction."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def reset(self) -> None:
        self._path.write_text("", encoding="utf-8")

    def record(self, event: TraceEvent) -> None:
        with self._path.open("a", encoding="utf-8") as f:
            f.write(event.model_dump_json())
            f.write("\n")

    def iter_events(self) -> Iterator[TraceEvent]:
        if not self._path.exists():
            return iter(())
        return self._iter_lines()

    def _iter_lines(self) -> Iterator[TraceEvent]:
        with self._path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                yield TraceEvent.model_validate_json(line)


def summarize_trace(events: Iterable[TraceEvent]) -> dict[str, Any]:
    """Instruction counts and hot spots of a recorded trace."""
    by_opcode: Counter[str] = Counter()
    by_ip: Counter[int] = Counter()
    steps = 0
    max_relative_base: int | None = None
    for event in events:
        steps += 1
        by_opcode[event.opcode] += 1
        by_ip[event.ip] += 1
        if max_relative_base is None or event.relative_base > max_relative_base:
            max_relative_base = event.relative_base
    return {
        "steps": steps,
        "opcodes": dict(sorted(by_opcode.items())),
        "hot_ips": [ip for ip, _ in by_ip.most_common(5)],
        "max_relative_base": max_relative_base,
    }
