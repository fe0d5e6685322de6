from __future__ import annotations

from intcode.arcade import Screen, Tile

TILE_CHARS: dict[Tile, str] = {
    Tile.EMPTY: " ",
    Tile.WALL: "#",
    Tile.BLOCK: "█",
    Tile.PADDLE: "=",
    Tile.BALL: "o",
}


def render_screen(screen: Screen, *, show_score: bool = True) -> str:
    lines: list[str] = []
    if screen.framebuffer:
        xs = [x for x, _ in screen.framebuffer]
        ys = [y for _, y in screen.framebuffer]
        for y in range(min(ys), max(ys) + 1):
            row = [
                TILE_CHARS[screen.framebuffer.get((x, y), Tile.EMPTY)]
                for x in range(min(xs), max(xs) + 1)
            ]
            lines.append("".join(row))
    if show_score:
        lines.append(f"Score: {screen.score}")
    return "\n".join(lines) + "\n"
