from __future__ import annotations

import pytest

from game_logic import SnakeConfig, SnakeGame
from storage import MemoryStore


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_game(store):
    def _make(*, on_event=None, **config) -> SnakeGame:
        config.setdefault("seed", 7)
        return SnakeGame(SnakeConfig(**config), store=store, on_event=on_event)

    return _make
