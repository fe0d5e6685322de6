from __future__ import annotations

from pathlib import Path

# Copies its own memory image to the output.
QUINE = [109, 1, 204, -1, 1001, 100, 1, 100, 1008, 100, 16, 101, 1006, 101, 0, 99]

# in -> [0], in -> [1], out [0] + [1].
ADD_TWO_INPUTS = [3, 0, 3, 1, 1, 0, 1, 2, 4, 2, 99]

# Outputs the three inputs in reverse order.
REVERSE_THREE = [3, 20, 3, 21, 3, 22, 4, 22, 4, 21, 4, 20, 99]

# Outputs 1 if the input equals 8, else 0 (position mode).
EQUALS_8_POSITION = [3, 9, 8, 9, 10, 9, 4, 9, 99, -1, 8]

# Outputs 1 if the input is less than 8, else 0 (immediate mode).
LESS_THAN_8_IMMEDIATE = [3, 3, 1107, -1, 8, 3, 4, 3, 99]

# Outputs 0 if the input is 0, else 1 (jumps, position mode).
JUMP_IS_NONZERO = [3, 12, 6, 12, 15, 1, 13, 14, 13, 4, 13, 99, -1, 0, 1, 9]

# 999 below 8, 1000 at 8, 1001 above 8.
COMPARE_TO_8 = [
    3, 21, 1008, 21, 8, 20, 1005, 20, 22, 107, 8, 21, 20, 1006, 20, 31,
    1106, 0, 36, 98, 0, 0, 1002, 21, 125, 20, 4, 20, 1105, 1, 46, 104,
    999, 1105, 1, 46, 1101, 1000, 1, 20, 4, 20, 1105, 1, 46, 98, 99,
]  # fmt: skip

# Each stage computes signal * 10 + seed.
CHAIN_SERIAL = [3, 15, 3, 16, 1002, 16, 10, 16, 1, 16, 15, 15, 4, 15, 99, 0, 0]

CHAIN_FEEDBACK = [
    3, 26, 1001, 26, -4, 26, 3, 27, 1002, 27, 2, 27, 1, 27, 26, 27, 4, 27,
    1001, 28, -1, 28, 1005, 28, 6, 99, 0, 0, 5,
]  # fmt: skip

# Wall, block and paddle on row 0, then a score of 500.
ARCADE_STATIC = [
    104, 0, 104, 0, 104, 1,
    104, 1, 104, 0, 104, 2,
    104, 2, 104, 0, 104, 3,
    104, -1, 104, 0, 104, 500,
    99,
]  # fmt: skip


def arcade_joystick_echo(*, ball_x: int, paddle_x: int = 1) -> list[int]:
    """Draw paddle and ball, read the joystick once and report it as the score."""
    return [
        104, paddle_x, 104, 1, 104, 3,
        104, ball_x, 104, 0, 104, 4,
        3, 50,
        104, -1, 104, 0, 4, 50,
        99,
    ]  # fmt: skip


def write_program(path: Path, words: list[int]) -> Path:
    path.write_text(",".join(str(w) for w in words) + "\n", encoding="utf-8")
    return path
