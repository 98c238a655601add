# Shared helpers for collaborators: snapshot -> numeric board / text board.
from __future__ import annotations

import numpy as np

from game_logic import GameSnapshot, Player


EMPTY = 0
FOOD = 1
CELL_CODES = {
    Player.P1: (2, 3),  # (head, body)
    Player.P2: (4, 5),
}
TEXT_SYMBOLS = {
    EMPTY: ".",
    FOOD: "*",
    2: "1",
    3: "o",
    4: "2",
    5: "x",
}


def encode_board(snapshot: GameSnapshot) -> np.ndarray:
    """
    Board encoding indexed as ``board[y, x]``:
    - 0: empty
    - 1: food
    - 2 / 3: player 1 head / body
    - 4 / 5: player 2 head / body
    """
    size = snapshot.dimension
    board = np.zeros((size, size), dtype=np.int8)

    if snapshot.food is not None:
        board[snapshot.food.y, snapshot.food.x] = FOOD

    for player, body in snapshot.snakes.items():
        head_code, body_code = CELL_CODES[player]
        for idx, (x, y) in enumerate(body):
            board[y, x] = head_code if idx == 0 else body_code

    return board


def board_to_text(snapshot: GameSnapshot) -> str:
    """Plain-text board, one row per line, top row first."""
    board = encode_board(snapshot)
    return "\n".join(" ".join(TEXT_SYMBOLS[int(cell)] for cell in row) for row in board)
