from __future__ import annotations

import itertools
import threading

import pytest

from game_logic import GameStatus, Position
from game_loop import TickDriver


class Switch:
    def __init__(self, on: bool = True) -> None:
        self.on = on

    def __call__(self) -> bool:
        return self.on


def make_driver(interval=150, running: Switch | None = None):
    fired: list[int] = []
    switch = running if running is not None else Switch()
    driver = TickDriver(lambda: fired.append(1), interval, switch)
    return driver, fired, switch


def test_first_frame_only_records_timestamp() -> None:
    driver, fired, _ = make_driver()
    assert driver.advance(0) is False
    assert driver.last_fired == 0
    assert fired == []


def test_fires_once_per_interval_and_keeps_leftover() -> None:
    driver, fired, _ = make_driver()
    driver.advance(0)
    assert driver.advance(100) is False
    assert driver.advance(150) is True
    assert driver.advance(310) is True
    assert driver.last_fired == 300
    assert driver.advance(449) is False
    assert driver.advance(450) is True
    assert len(fired) == 3


def test_tick_rate_is_not_rounded_up_to_frame_period() -> None:
    driver, fired, _ = make_driver(interval=150)
    for now in range(0, 1201, 100):
        driver.advance(now)
    assert len(fired) == 8
    assert driver.last_fired == 1200


def test_long_stall_fires_once_without_backlog() -> None:
    driver, fired, _ = make_driver()
    driver.advance(0)
    assert driver.advance(1000) is True
    assert driver.last_fired == 1000
    assert driver.advance(1100) is False
    assert len(fired) == 1


def test_paused_time_is_never_replayed() -> None:
    driver, fired, switch = make_driver()
    driver.advance(0)
    switch.on = False
    assert driver.advance(5000) is False
    assert driver.last_fired is None

    switch.on = True
    assert driver.advance(6000) is False
    assert driver.advance(6100) is False
    assert driver.advance(6150) is True
    assert len(fired) == 1


def test_interval_is_read_every_frame() -> None:
    speed = {"ms": 100}
    fired: list[int] = []
    driver = TickDriver(lambda: fired.append(1), lambda: speed["ms"], lambda: True)
    driver.advance(0)
    assert driver.advance(100) is True
    speed["ms"] = 200
    assert driver.advance(250) is False
    assert driver.advance(300) is True


def test_non_positive_interval_is_rejected() -> None:
    driver, _, _ = make_driver(interval=0)
    driver.advance(0)
    with pytest.raises(ValueError):
        driver.advance(10)


def test_stop_is_idempotent() -> None:
    driver, _, _ = make_driver()
    driver.advance(0)
    driver.stop()
    driver.stop()
    assert driver.last_fired is None


def test_uses_injected_clock() -> None:
    clock = itertools.count(0, 100)
    fired: list[int] = []
    driver = TickDriver(lambda: fired.append(1), 150, lambda: True, clock=lambda: next(clock))
    driver.advance()  # 0
    driver.advance()  # 100
    driver.advance()  # 200
    assert fired == [1]


def test_drives_the_game(make_game) -> None:
    game = make_game()
    game.start_game()
    game.food = Position(0, 0)
    driver = TickDriver(game.tick, game.config.tick_ms, lambda: game.status == GameStatus.PLAYING)

    driver.advance(0)
    driver.advance(149)
    assert game.snake[0] == (10, 10)
    driver.advance(150)
    assert game.snake[0] == (11, 10)

    game.pause_game()
    driver.advance(10_000)
    game.resume_game()
    driver.advance(20_000)
    assert game.snake[0] == (11, 10)


def test_run_returns_immediately_when_already_stopped() -> None:
    driver, fired, _ = make_driver()
    stop = threading.Event()
    stop.set()
    assert driver.run(stop) == 0
    assert fired == []


def test_run_loops_until_stopped() -> None:
    stop = threading.Event()
    clock = itertools.count(0, 100)
    driver = TickDriver(stop.set, 150, lambda: True, clock=lambda: next(clock))

    assert driver.run(stop, frame_ms=0) == 1
    assert driver.last_fired is None
