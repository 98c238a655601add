# Settings/high-score persistence: a string key/value port plus typed preferences.
from __future__ import annotations

import json
import logging
import os
from typing import Protocol


logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "snakeHighScore"
GRID_SIZE_KEY = "gridSize"
GAME_MODE_KEY = "gameMode"
MUTED_KEY = "isSoundMuted"

MODE_SINGLE = "single"
MODE_TWO_PLAYER = "two_player"

DEFAULT_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".snake_grid.json")


class SettingsStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store; the default when nothing durable is wired in."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileStore:
    """
    Flat JSON object on disk, atomically rewritten on every set.

    A missing file starts empty. A corrupt or unreadable file is logged and
    treated as empty so a bad settings file never blocks a game.
    """

    def __init__(self, path: str = DEFAULT_SETTINGS_PATH) -> None:
        self.path = path
        self.values: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read settings from %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected a JSON object", self.path)
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        directory = os.path.dirname(self.path)
        tmp_path = f"{self.path}.tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            # Write beside the target, then swap in one step.
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(self.values, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.error("Could not save settings to %s: %s", self.path, exc)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class Preferences:
    """Typed load-on-init / save-on-change hooks over a SettingsStore."""

    def __init__(self, store: SettingsStore | None = None) -> None:
        self.store: SettingsStore = store if store is not None else MemoryStore()

    def load_high_score(self) -> int:
        raw = self.store.get(HIGH_SCORE_KEY)
        if raw is None:
            return 0
        try:
            value = int(raw)
        except ValueError:
            logger.warning("Ignoring invalid stored high score: %r", raw)
            return 0
        return max(0, value)

    def save_high_score(self, value: int) -> None:
        self.store.set(HIGH_SCORE_KEY, str(value))

    def load_grid_size(self, default: str, choices: dict[str, int]) -> str:
        raw = self.store.get(GRID_SIZE_KEY)
        if raw is None:
            return default
        if raw not in choices:
            logger.warning("Ignoring unknown stored grid size: %r", raw)
            return default
        return raw

    def save_grid_size(self, size: str) -> None:
        self.store.set(GRID_SIZE_KEY, size)

    def load_two_player(self, default: bool) -> bool:
        raw = self.store.get(GAME_MODE_KEY)
        if raw == MODE_TWO_PLAYER:
            return True
        if raw == MODE_SINGLE:
            return False
        return default

    def save_two_player(self, two_player: bool) -> None:
        self.store.set(GAME_MODE_KEY, MODE_TWO_PLAYER if two_player else MODE_SINGLE)

    def load_muted(self) -> bool:
        return self.store.get(MUTED_KEY) == "true"

    def save_muted(self, muted: bool) -> None:
        self.store.set(MUTED_KEY, "true" if muted else "false")
