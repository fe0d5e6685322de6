from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from intcode.errors import InvalidProgram


@dataclass(frozen=True, slots=True)
class Program:
    """Immutable intcode memory image."""

    words: tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> Program:
        return parse_program(text)

    @classmethod
    def coerce(cls, raw: Program | Sequence[int] | str) -> Program:
        if isinstance(raw, Program):
            return raw
        if isinstance(raw, str):
            return parse_program(raw)
        return cls(words=tuple(int(w) for w in raw))

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[int]:
        return iter(self.words)

    def __getitem__(self, index: int) -> int:
        return self.words[index]

    def patched(self, overrides: Mapping[int, int]) -> Program:
        if not overrides:
            return self
        words = list(self.words)
        for address, value in overrides.items():
            address = int(address)
            if address < 0:
                raise InvalidProgram(f"cannot patch negative address {address}")
            if address >= len(words):
                words.extend([0] * (address + 1 - len(words)))
            words[address] = int(value)
        return Program(words=tuple(words))

    def to_text(self) -> str:
        return ",".join(str(w) for w in self.words)


def parse_program(text: str) -> Program:
    raw = text.strip()
    if not raw:
        raise InvalidProgram("empty program")

    words: list[int] = []
    for i, item in enumerate(raw.split(","), start=1):
        item = item.strip()
        try:
            words.append(int(item))
        except ValueError as e:
            raise InvalidProgram(f"not an integer: {item!r}", position=i) from e
    return Program(words=tuple(words))


def load_program(path: str | Path) -> Program:
    return parse_program(Path(path).read_text(encoding="utf-8"))
