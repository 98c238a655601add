# Core Snake game state and rules, independent from GUI/storage/timing code.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
import logging
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, NamedTuple

import numpy as np

from storage import Preferences, SettingsStore


logger = logging.getLogger(__name__)

GRID_SIZES = {
    "small": 15,
    "medium": 20,
    "large": 30,
}
DEFAULT_GRID_SIZE = "medium"
INITIAL_SNAKE_LENGTH = 3
INITIAL_SPEED_MS = 150
FOOD_REWARD = 10
MIN_SPEED_MS = 40
MAX_SPEED_MS = 500


class Position(NamedTuple):
    x: int
    y: int


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class GameStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Player(str, Enum):
    P1 = "p1"
    P2 = "p2"


class GameEvent(str, Enum):
    FOOD_EATEN = "food_eaten"
    GAME_OVER = "game_over"


EventHook = Callable[[GameEvent], None]


def next_position(pos: Position, direction: Direction) -> Position:
    """Translate a position by exactly one cell. No wraparound."""
    x, y = pos
    if direction == Direction.UP:
        return Position(x, y - 1)
    if direction == Direction.DOWN:
        return Position(x, y + 1)
    if direction == Direction.LEFT:
        return Position(x - 1, y)
    return Position(x + 1, y)


def is_out_of_bounds(pos: Position, dimension: int) -> bool:
    x, y = pos
    return x < 0 or x >= dimension or y < 0 or y >= dimension


def is_opposite(current: Direction, requested: Direction) -> bool:
    return OPPOSITES[current] == requested


def collides_with(pos: Position, sequence: Iterable[Position]) -> bool:
    """True if ``pos`` equals any element of ``sequence``."""
    return any(pos == other for other in sequence)


def place_food(
    occupied: Iterable[Position],
    dimension: int,
    rng: np.random.Generator,
) -> Position | None:
    """
    Pick a random free cell for the food.

    Rejection sampling is bounded to one attempt per cell; after that the
    first free cell in row-major order is used. Returns None only when every
    cell is occupied.
    """
    taken = set(occupied)
    if len(taken) >= dimension * dimension:
        return None

    for _ in range(dimension * dimension):
        x, y = rng.integers(0, dimension, size=2)
        candidate = Position(int(x), int(y))
        if not collides_with(candidate, taken):
            return candidate

    # Deterministic fallback for crowded boards.
    mask = np.zeros((dimension, dimension), dtype=bool)
    for x, y in taken:
        if not is_out_of_bounds(Position(x, y), dimension):
            mask[y, x] = True
    free = np.argwhere(~mask)
    if free.size == 0:
        return None
    y, x = free[0]
    return Position(int(x), int(y))


@dataclass
class SnakeConfig:
    """Runtime settings shared between the logic layer and GUI."""
    grid_size: str = DEFAULT_GRID_SIZE
    tick_ms: int = INITIAL_SPEED_MS
    initial_length: int = INITIAL_SNAKE_LENGTH
    food_reward: int = FOOD_REWARD
    two_player: bool = False
    cell_size: int = 25
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_size not in GRID_SIZES:
            raise ValueError(f"Unknown grid size: {self.grid_size!r}")
        if not (MIN_SPEED_MS <= self.tick_ms <= MAX_SPEED_MS):
            raise ValueError(f"tick_ms must be between {MIN_SPEED_MS} and {MAX_SPEED_MS}.")
        if self.initial_length < 1:
            raise ValueError("initial_length must be >= 1")
        if self.initial_length > GRID_SIZES["small"] // 2:
            raise ValueError("initial_length does not fit the smallest grid")

    @property
    def dimension(self) -> int:
        return GRID_SIZES[self.grid_size]


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the game handed to renderers and audio triggers."""
    snakes: Mapping[Player, tuple[Position, ...]]
    directions: Mapping[Player, Direction]
    food: Position | None
    scores: Mapping[Player, int]
    high_score: int
    status: GameStatus
    grid_size: str
    dimension: int
    two_player: bool
    winner: Player | None
    muted: bool

    @property
    def score(self) -> int:
        return self.scores[Player.P1]


class SnakeGame:
    """Pure game state + rules (no Tkinter/UI code)."""
    def __init__(
        self,
        config: SnakeConfig | None = None,
        store: SettingsStore | None = None,
        on_event: EventHook | None = None,
    ) -> None:
        base = config if config is not None else SnakeConfig()
        self.preferences = Preferences(store)
        self.on_event = on_event
        self.rng = np.random.default_rng(base.seed)

        # Private copy; persisted preferences win over constructor defaults.
        self.config = replace(
            base,
            grid_size=self.preferences.load_grid_size(base.grid_size, GRID_SIZES),
            two_player=self.preferences.load_two_player(base.two_player),
        )
        self.high_score = self.preferences.load_high_score()
        self.muted = self.preferences.load_muted()

        self.status = GameStatus.IDLE
        self._init_entities()

    # ------------------------------------------------------------------
    # setup
    # ------------------------------------------------------------------
    @property
    def dimension(self) -> int:
        return self.config.dimension

    @property
    def players(self) -> tuple[Player, ...]:
        if self.config.two_player:
            return (Player.P1, Player.P2)
        return (Player.P1,)

    def _init_entities(self) -> None:
        """Recompute every entity from initial conditions."""
        self.snakes: dict[Player, deque[Position]] = {}       # head at index 0
        self.directions: dict[Player, Direction] = {}          # committed direction
        self.pending_directions: dict[Player, Direction] = {}  # applied next tick
        self.scores: dict[Player, int] = {}
        self.winner: Player | None = None

        for player in self.players:
            body, direction = self._initial_snake(player)
            self.snakes[player] = deque(body)
            self.directions[player] = direction
            self.pending_directions[player] = direction
            self.scores[player] = 0

        self.food = place_food(self.occupied_cells(), self.dimension, self.rng)

    def _initial_snake(self, player: Player) -> tuple[list[Position], Direction]:
        """P1 faces right from the centre; P2 is its mirror image through the centre."""
        size = self.dimension
        length = self.config.initial_length
        center_x = size // 2
        center_y = size // 2

        if player == Player.P1:
            return [Position(center_x - i, center_y) for i in range(length)], Direction.RIGHT

        head_x = size - 1 - center_x
        head_y = center_y - 1
        return [Position(head_x + i, head_y) for i in range(length)], Direction.LEFT

    def occupied_cells(self) -> set[Position]:
        cells: set[Position] = set()
        for body in self.snakes.values():
            cells.update(body)
        return cells

    # ------------------------------------------------------------------
    # state transitions
    # ------------------------------------------------------------------
    def start_game(self) -> None:
        """IDLE/GAME_OVER -> PLAYING with a freshly initialised board."""
        if self.status not in (GameStatus.IDLE, GameStatus.GAME_OVER):
            logger.debug("start_game ignored while %s", self.status.value)
            return
        self._init_entities()
        self.status = GameStatus.PLAYING
        logger.info(
            "Game started on %s grid (%dx%d), two_player=%s",
            self.config.grid_size,
            self.dimension,
            self.dimension,
            self.config.two_player,
        )

    def pause_game(self) -> None:
        if self.status != GameStatus.PLAYING:
            logger.debug("pause_game ignored while %s", self.status.value)
            return
        self.status = GameStatus.PAUSED

    def resume_game(self) -> None:
        if self.status != GameStatus.PAUSED:
            logger.debug("resume_game ignored while %s", self.status.value)
            return
        self.status = GameStatus.PLAYING

    def toggle_pause(self) -> None:
        """Pause/resume without losing current board state."""
        if self.status == GameStatus.PLAYING:
            self.pause_game()
        elif self.status == GameStatus.PAUSED:
            self.resume_game()

    def reset_game(self) -> None:
        """Any state -> IDLE with a fresh board."""
        self._init_entities()
        self.status = GameStatus.IDLE

    def change_grid_size(self, size: str) -> None:
        """Switch grid preset; only allowed while IDLE or GAME_OVER."""
        if size not in GRID_SIZES:
            raise ValueError(f"Unknown grid size: {size!r}")
        if self.status not in (GameStatus.IDLE, GameStatus.GAME_OVER):
            logger.debug("change_grid_size ignored while %s", self.status.value)
            return
        self.config = replace(self.config, grid_size=size)
        self.preferences.save_grid_size(size)
        self.reset_game()
        logger.info("Grid size changed to %s (%dx%d)", size, self.dimension, self.dimension)

    def toggle_two_player(self) -> None:
        """Switch between single and two-player mode; only while IDLE or GAME_OVER."""
        if self.status not in (GameStatus.IDLE, GameStatus.GAME_OVER):
            logger.debug("toggle_two_player ignored while %s", self.status.value)
            return
        self.config = replace(self.config, two_player=not self.config.two_player)
        self.preferences.save_two_player(self.config.two_player)
        self.reset_game()

    def toggle_mute(self) -> None:
        self.muted = not self.muted
        self.preferences.save_muted(self.muted)

    # ------------------------------------------------------------------
    # input
    # ------------------------------------------------------------------
    def submit_direction(self, player: Player, direction: Direction) -> bool:
        """Buffer a direction for the next tick; reject instant 180-degree turns."""
        if self.status != GameStatus.PLAYING:
            return False
        if player not in self.snakes:
            return False
        # Compare with the committed direction, not the buffered one.
        if is_opposite(self.directions[player], direction):
            logger.debug("Rejected reversal %s for %s", direction.value, player.value)
            return False
        self.pending_directions[player] = direction
        return True

    # ------------------------------------------------------------------
    # simulation
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """Advance one step. Returns False if the game is not running or ends this tick."""
        if self.status != GameStatus.PLAYING:
            return False

        for player in self.players:
            self.directions[player] = self.pending_directions[player]

        heads = {
            player: next_position(self.snakes[player][0], self.directions[player])
            for player in self.players
        }
        eating = {player: heads[player] == self.food for player in self.players}

        dead = [player for player in self.players if self._dies(player, heads, eating)]
        if self.config.two_player and heads[Player.P1] == heads[Player.P2]:
            dead = [Player.P1, Player.P2]

        if dead:
            self._end_game(dead)
            return False

        ate = False
        for player in self.players:
            body = self.snakes[player]
            body.appendleft(heads[player])
            if eating[player]:
                ate = True
                self._award(player)
            else:
                body.pop()

        if ate:
            self._notify(GameEvent.FOOD_EATEN)
            self.food = place_food(self.occupied_cells(), self.dimension, self.rng)
            if self.food is None:
                logger.info("Board is full")
                self._end_game([])
                return False
        return True

    def _dies(
        self,
        player: Player,
        heads: dict[Player, Position],
        eating: dict[Player, bool],
    ) -> bool:
        head = heads[player]
        if is_out_of_bounds(head, self.dimension):
            return True

        body = list(self.snakes[player])
        # The tail moves away this tick unless the snake grows.
        hazard = body if eating[player] else body[:-1]
        if collides_with(head, hazard):
            return True

        for other in self.players:
            if other != player and collides_with(head, self.snakes[other]):
                return True
        return False

    def _award(self, player: Player) -> None:
        self.scores[player] += self.config.food_reward
        if self.scores[player] > self.high_score:
            self.high_score = self.scores[player]
            self.preferences.save_high_score(self.high_score)

    def _end_game(self, dead: list[Player]) -> None:
        self.status = GameStatus.GAME_OVER
        if self.config.two_player and len(dead) == 1:
            self.winner = Player.P2 if dead[0] == Player.P1 else Player.P1
        else:
            self.winner = None
        logger.info(
            "Game over: scores=%s winner=%s",
            {player.value: score for player, score in self.scores.items()},
            self.winner.value if self.winner else None,
        )
        self._notify(GameEvent.GAME_OVER)

    def _notify(self, event: GameEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            snakes=MappingProxyType({player: tuple(body) for player, body in self.snakes.items()}),
            directions=MappingProxyType(dict(self.directions)),
            food=self.food,
            scores=MappingProxyType(dict(self.scores)),
            high_score=self.high_score,
            status=self.status,
            grid_size=self.config.grid_size,
            dimension=self.dimension,
            two_player=self.config.two_player,
            winner=self.winner,
            muted=self.muted,
        )

    # Single-player shortcuts.
    @property
    def snake(self) -> deque[Position]:
        return self.snakes[Player.P1]

    @property
    def direction(self) -> Direction:
        return self.directions[Player.P1]

    @property
    def score(self) -> int:
        return self.scores[Player.P1]
