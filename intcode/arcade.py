"""Arcade cabinet driven by an intcode program.

The program emits triples ``(x, y, tile)``; ``(-1, 0, score)`` updates the
score display instead. The joystick is read as a constant input so the game
keeps running while the player does nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from intcode.errors import IntcodeError
from intcode.machine import Machine
from intcode.program import Program

logger = logging.getLogger(__name__)

FREE_PLAY_ADDRESS = 0
FREE_PLAY_VALUE = 2


class InvalidTile(IntcodeError):
    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid tile value: {value}")


class Tile(IntEnum):
    EMPTY = 0
    WALL = 1
    BLOCK = 2
    PADDLE = 3
    BALL = 4

    @classmethod
    def from_value(cls, value: int) -> Tile:
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidTile(value) from e


class Joystick(IntEnum):
    NEUTRAL = 0
    LEFT = -1
    RIGHT = 1


@dataclass(frozen=True, slots=True)
class Draw:
    x: int
    y: int
    tile: Tile


@dataclass(frozen=True, slots=True)
class Score:
    score: int


Command = Draw | Score


def decode_command(x: int, y: int, value: int) -> Command:
    if (x, y) == (-1, 0):
        return Score(score=value)
    return Draw(x=x, y=y, tile=Tile.from_value(value))


@dataclass
class Screen:
    framebuffer: dict[tuple[int, int], Tile] = field(default_factory=dict)
    score: int = 0
    last_command: Command | None = None

    def apply(self, command: Command) -> None:
        self.last_command = command
        if isinstance(command, Score):
            logger.debug("score: %d", command.score)
            self.score = command.score
        else:
            self.framebuffer[(command.x, command.y)] = command.tile

    def size(self) -> tuple[int, int] | None:
        if not self.framebuffer:
            return None
        max_x = max(x for x, _ in self.framebuffer)
        max_y = max(y for _, y in self.framebuffer)
        return (max_x + 1, max_y + 1)

    def count(self, tile: Tile) -> int:
        return sum(1 for t in self.framebuffer.values() if t == tile)

    def find(self, tile: Tile) -> tuple[int, int] | None:
        for pos, t in self.framebuffer.items():
            if t == tile:
                return pos
        return None

    @property
    def ball_x(self) -> int | None:
        pos = self.find(Tile.BALL)
        return pos[0] if pos is not None else None

    @property
    def paddle_x(self) -> int | None:
        pos = self.find(Tile.PADDLE)
        return pos[0] if pos is not None else None


class Arcade:
    def __init__(
        self,
        program: Program | Sequence[int] | str,
        *,
        free_play: bool = False,
        max_steps: int | None = None,
    ) -> None:
        image = Program.coerce(program)
        if free_play:
            image = image.patched({FREE_PLAY_ADDRESS: FREE_PLAY_VALUE})
        self.machine = Machine(image, max_steps=max_steps)
        self.machine.set_constant_input(Joystick.NEUTRAL)
        self.screen = Screen()
        self.joystick = Joystick.NEUTRAL
        self._pending: list[int] = []

    @property
    def halted(self) -> bool:
        return self.machine.is_halted

    @property
    def won(self) -> bool:
        return self.halted and self.screen.count(Tile.BLOCK) == 0

    def set_joystick(self, joystick: Joystick) -> None:
        self.joystick = Joystick(joystick)
        self.machine.set_constant_input(int(self.joystick))

    def read_command(self) -> Command | None:
        while len(self._pending) < 3:
            value = self.machine.next_output()
            if value is None:
                return None
            self._pending.append(value)
        x, y, value = self._pending
        self._pending = []
        return decode_command(x, y, value)

    def step(self) -> Command | None:
        command = self.read_command()
        if command is not None:
            self.screen.apply(command)
        return command

    def run(self) -> None:
        while not self.halted:
            self.step()

    def run_until(self, predicate: Callable[[Arcade], bool]) -> bool:
        """Step until ``predicate`` holds; ``False`` if the machine halts first."""
        while not predicate(self):
            if self.step() is None:
                return False
        return True

    def wait_for(self, predicate: Callable[[Command], bool]) -> Command | None:
        """Step until a command matching ``predicate`` is drawn."""
        while True:
            command = self.step()
            if command is None or predicate(command):
                return command

    def load_screen(self) -> bool:
        return self.run_until(lambda a: isinstance(a.screen.last_command, Score))

    def wait_frame(self) -> bool:
        # A frame ends when the ball's previous position is cleared.
        return self.wait_for(_is_tile(Tile.EMPTY)) is not None

    def autopilot(self) -> bool:
        """Wait for the ball to move, then steer the paddle towards it."""
        command = self.wait_for(_is_tile(Tile.BALL))
        if not isinstance(command, Draw):
            return False

        # Steer by the ball just drawn; the framebuffer may still hold stale balls.
        ball_x = command.x
        paddle_x = self.screen.paddle_x
        if paddle_x is None or ball_x == paddle_x:
            joystick = Joystick.NEUTRAL
        elif ball_x < paddle_x:
            joystick = Joystick.LEFT
        else:
            joystick = Joystick.RIGHT
        logger.debug("autopilot: ball_x=%s paddle_x=%s joystick=%s", ball_x, paddle_x, joystick.name)
        self.set_joystick(joystick)
        return True

    def play(self, *, max_frames: int | None = None) -> int:
        """Play headless on autopilot until the game ends; return the final score."""
        frames = 0
        while self.autopilot():
            frames += 1
            if max_frames is not None and frames >= max_frames:
                logger.info("stopped after %d frames", frames)
                break
        return self.screen.score


def _is_tile(tile: Tile) -> Callable[[Command], bool]:
    return lambda command: isinstance(command, Draw) and command.tile == tile
