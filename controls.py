# Input intent resolver: decoded keys and swipe gestures -> per-snake directions.
from __future__ import annotations

import logging

from game_logic import Direction, GameStatus, Player, SnakeGame


logger = logging.getLogger(__name__)

MIN_SWIPE_DISTANCE = 30
PAUSE_KEYS = {"space", " "}

# WASD always drives P1. Arrows drive P1 alone, or P2 in two-player mode.
WASD_KEYS = {
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}
ARROW_KEYS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
}


def resolve_key(key: str, two_player: bool = False) -> tuple[Player, Direction] | None:
    """Map a key name (Tk keysym or DOM key) to a (player, direction) pair."""
    name = key.lower()
    if name in WASD_KEYS:
        return Player.P1, WASD_KEYS[name]
    if name in ARROW_KEYS:
        return (Player.P2 if two_player else Player.P1), ARROW_KEYS[name]
    return None


def resolve_swipe(dx: float, dy: float, threshold: float = MIN_SWIPE_DISTANCE) -> Direction | None:
    """Classify a swipe by its dominant axis; short gestures resolve to None."""
    if abs(dx) > abs(dy):
        if abs(dx) > threshold:
            return Direction.RIGHT if dx > 0 else Direction.LEFT
        return None
    if abs(dy) > threshold:
        return Direction.DOWN if dy > 0 else Direction.UP
    return None


class InputResolver:
    """Routes raw intents to a SnakeGame. Input only ever touches the pending buffer."""

    def __init__(self, game: SnakeGame, swipe_threshold: float = MIN_SWIPE_DISTANCE) -> None:
        self.game = game
        self.swipe_threshold = swipe_threshold
        self._swipe_start: tuple[float, float] | None = None

    def handle_key(self, key: str) -> bool:
        """Returns True when the key changed the game (direction buffered or pause toggled)."""
        if key.lower() in PAUSE_KEYS:
            before = self.game.status
            self.game.toggle_pause()
            return self.game.status != before

        resolved = resolve_key(key, self.game.config.two_player)
        if resolved is None:
            return False
        player, direction = resolved
        return self.game.submit_direction(player, direction)

    def begin_swipe(self, x: float, y: float) -> None:
        self._swipe_start = (x, y)

    def end_swipe(self, x: float, y: float, player: Player = Player.P1) -> bool:
        """Finish a gesture. A tap/swipe on an idle or finished game starts a new one."""
        start = self._swipe_start
        self._swipe_start = None

        if self.game.status in (GameStatus.IDLE, GameStatus.GAME_OVER):
            self.game.start_game()
            return True
        if start is None or self.game.status != GameStatus.PLAYING:
            return False

        direction = resolve_swipe(x - start[0], y - start[1], self.swipe_threshold)
        if direction is None:
            logger.debug("Ignored short swipe (%.1f, %.1f)", x - start[0], y - start[1])
            return False
        return self.game.submit_direction(player, direction)
