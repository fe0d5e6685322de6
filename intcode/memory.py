from __future__ import annotations

from collections.abc import Iterable

from intcode.errors import InvalidAddress


class Memory:
    """Contiguous memory that zero-fills up to any address it is asked about."""

    def __init__(self, image: Iterable[int] = ()) -> None:
        self._cells: list[int] = [int(v) for v in image]

    def __len__(self) -> int:
        return len(self._cells)

    def _ensure(self, address: int) -> None:
        if address < 0:
            raise InvalidAddress(address)
        if address >= len(self._cells):
            self._cells.extend([0] * (address + 1 - len(self._cells)))

    def read(self, address: int) -> int:
        self._ensure(address)
        return self._cells[address]

    def write(self, address: int, value: int) -> None:
        self._ensure(address)
        self._cells[address] = int(value)

    def snapshot(self) -> list[int]:
        return list(self._cells)

    def copy(self) -> Memory:
        return Memory(self._cells)
