from __future__ import annotations

import pytest

from controls import InputResolver, resolve_key, resolve_swipe
from game_logic import Direction, GameStatus, Player


@pytest.mark.parametrize(
    "key, expected",
    [
        ("w", (Player.P1, Direction.UP)),
        ("W", (Player.P1, Direction.UP)),
        ("s", (Player.P1, Direction.DOWN)),
        ("a", (Player.P1, Direction.LEFT)),
        ("D", (Player.P1, Direction.RIGHT)),
        ("Up", (Player.P1, Direction.UP)),
        ("ArrowLeft", (Player.P1, Direction.LEFT)),
        ("x", None),
        ("Return", None),
    ],
)
def test_resolve_key_single_player(key, expected) -> None:
    assert resolve_key(key) == expected


def test_arrows_drive_second_snake_in_two_player_mode() -> None:
    assert resolve_key("Down", two_player=True) == (Player.P2, Direction.DOWN)
    assert resolve_key("ArrowRight", two_player=True) == (Player.P2, Direction.RIGHT)
    assert resolve_key("w", two_player=True) == (Player.P1, Direction.UP)


@pytest.mark.parametrize(
    "dx, dy, expected",
    [
        (40, 5, Direction.RIGHT),
        (-40, 5, Direction.LEFT),
        (5, 31, Direction.DOWN),
        (5, -31, Direction.UP),
        (30, 0, None),
        (10, 10, None),
        (0, 0, None),
    ],
)
def test_resolve_swipe_uses_dominant_axis_and_threshold(dx, dy, expected) -> None:
    assert resolve_swipe(dx, dy) == expected


def test_custom_swipe_threshold() -> None:
    assert resolve_swipe(12, 0, threshold=10) == Direction.RIGHT


def test_handle_key_buffers_direction(make_game) -> None:
    game = make_game()
    resolver = InputResolver(game)
    assert resolver.handle_key("Up") is False  # not playing yet

    game.start_game()
    assert resolver.handle_key("Up") is True
    assert game.pending_directions[Player.P1] == Direction.UP
    assert resolver.handle_key("a") is False  # reversal of committed RIGHT
    assert game.pending_directions[Player.P1] == Direction.UP
    assert resolver.handle_key("F1") is False


def test_space_toggles_pause(make_game) -> None:
    game = make_game()
    resolver = InputResolver(game)
    assert resolver.handle_key("space") is False
    assert game.status == GameStatus.IDLE

    game.start_game()
    assert resolver.handle_key("space") is True
    assert game.status == GameStatus.PAUSED
    assert resolver.handle_key("space") is True
    assert game.status == GameStatus.PLAYING


def test_two_player_keys_route_to_each_snake(make_game) -> None:
    game = make_game(two_player=True)
    game.start_game()
    resolver = InputResolver(game)

    assert resolver.handle_key("Down") is True
    assert resolver.handle_key("w") is True
    assert game.pending_directions == {Player.P1: Direction.UP, Player.P2: Direction.DOWN}
    # P2 faces LEFT, so RIGHT is a reversal for it.
    assert resolver.handle_key("Right") is False


def test_tap_starts_idle_game(make_game) -> None:
    game = make_game()
    resolver = InputResolver(game)
    assert resolver.end_swipe(10, 10) is True
    assert game.status == GameStatus.PLAYING


def test_swipe_sets_direction_while_playing(make_game) -> None:
    game = make_game()
    game.start_game()
    resolver = InputResolver(game)

    resolver.begin_swipe(100, 100)
    assert resolver.end_swipe(100, 160) is True
    assert game.pending_directions[Player.P1] == Direction.DOWN


def test_short_swipe_is_ignored(make_game) -> None:
    game = make_game()
    game.start_game()
    resolver = InputResolver(game)

    resolver.begin_swipe(100, 100)
    assert resolver.end_swipe(110, 95) is False
    assert game.pending_directions[Player.P1] == Direction.RIGHT


def test_swipe_without_start_is_ignored_while_paused(make_game) -> None:
    game = make_game()
    game.start_game()
    game.pause_game()
    resolver = InputResolver(game)

    resolver.begin_swipe(0, 0)
    assert resolver.end_swipe(0, 100) is False
    assert game.status == GameStatus.PAUSED
