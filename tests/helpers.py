from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from game_logic import Direction, Player, Position, SnakeGame


def place_snake(
    game: SnakeGame,
    player: Player,
    cells: Iterable[tuple[int, int]],
    direction: Direction,
) -> None:
    """Put a snake exactly where a test wants it, with matching committed/pending direction."""
    game.snakes[player] = deque(Position(x, y) for x, y in cells)
    game.directions[player] = direction
    game.pending_directions[player] = direction


def serpentine(dimension: int) -> list[Position]:
    """Every cell of the board as one connected path, row by row."""
    path: list[Position] = []
    for y in range(dimension):
        xs = range(dimension) if y % 2 == 0 else range(dimension - 1, -1, -1)
        path.extend(Position(x, y) for x in xs)
    return path
