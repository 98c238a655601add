# Tkinter player window: renders snapshots and forwards input/timing to the core.
from __future__ import annotations

import argparse
import logging
import tkinter as tk

from controls import InputResolver
from game_logic import GRID_SIZES, GameEvent, GameStatus, Player, SnakeConfig, SnakeGame
from game_loop import DEFAULT_FRAME_MS, TickDriver
from storage import DEFAULT_SETTINGS_PATH, JsonFileStore
from utils import CELL_CODES, FOOD, encode_board


logger = logging.getLogger(__name__)


class SnakeApp:
    """Tkinter presentation layer for SnakeGame."""
    BG = "#1a1a2e"
    BOARD_BG = "#16213e"
    SIDEBAR_BG = "#0f1720"
    GRID_COLOR = "#1f2b4a"
    P1_HEAD = "#e94560"
    P1_BODY = "#0f3460"
    P2_HEAD = "#ff00ff"
    P2_BODY = "#00ff9d"
    FOOD_COLOR = "#f39c12"
    TEXT_PRIMARY = "#ffffff"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"

    GRID_PRESETS = {
        f"{name.capitalize()} ({size}x{size})": name for name, size in GRID_SIZES.items()
    }
    STATUS_LABELS = {
        GameStatus.IDLE: "Ready",
        GameStatus.PLAYING: "Running",
        GameStatus.PAUSED: "Paused",
        GameStatus.GAME_OVER: "Game Over",
    }

    def __init__(self, root: tk.Tk, game: SnakeGame) -> None:
        self.root = root
        self.root.title("Snake")
        self.root.configure(bg=self.BG)

        self.game = game
        self.game.on_event = self.on_game_event
        self.input = InputResolver(self.game)
        self.driver = TickDriver(
            callback=self.game.tick,
            interval_ms=lambda: self.game.config.tick_ms,
            is_running=lambda: self.game.status == GameStatus.PLAYING,
        )
        self.after_id: str | None = None  # Tkinter timer id for the frame loop

        self._build_layout()
        self._bind_input()
        self._apply_canvas_size()
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self.draw()

    def _build_layout(self) -> None:
        """Create game canvas + right sidebar panels."""
        container = tk.Frame(self.root, bg=self.BG)
        container.pack(fill="both", expand=True, padx=16, pady=16)

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.pack(side="left", padx=(0, 16))

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG)
        self.sidebar.pack(side="right", fill="y")

        self.score_var = tk.StringVar()
        self.high_var = tk.StringVar()
        self.state_var = tk.StringVar()
        for var in (self.score_var, self.high_var, self.state_var):
            tk.Label(
                self.sidebar,
                textvariable=var,
                fg=self.TEXT_PRIMARY,
                bg=self.SIDEBAR_BG,
                font=("Helvetica", 12),
                anchor="w",
            ).pack(fill="x", padx=12, pady=4)

        current = next(label for label, name in self.GRID_PRESETS.items() if name == self.game.config.grid_size)
        self.grid_size_var = tk.StringVar(value=current)
        tk.OptionMenu(
            self.sidebar, self.grid_size_var, *self.GRID_PRESETS.keys(), command=self.change_grid_size
        ).pack(fill="x", padx=12, pady=4)

        self.start_btn = self._button("Start", self.start_game)
        self.pause_btn = self._button("Pause", self.toggle_pause)
        self._button("Reset", self.reset_game)
        self.mode_btn = self._button("", self.toggle_two_player)
        self.mute_btn = self._button("", self.toggle_mute)

        tk.Label(
            self.sidebar,
            text="Move: WASD (P1) / Arrows\nSpace: pause, drag to swipe",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            justify="left",
            font=("Helvetica", 10),
        ).pack(anchor="w", padx=12, pady=(8, 12))

    def _button(self, text: str, command) -> tk.Button:
        button = tk.Button(
            self.sidebar,
            text=text,
            command=command,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            bd=0,
            relief="flat",
            font=("Helvetica", 11, "bold"),
            padx=12,
            pady=6,
        )
        button.pack(fill="x", padx=12, pady=4)
        return button

    def _bind_input(self) -> None:
        self.root.bind("<KeyPress>", self.on_key)
        self.canvas.bind("<ButtonPress-1>", lambda e: self.input.begin_swipe(e.x, e.y))
        self.canvas.bind("<ButtonRelease-1>", self.on_swipe_end)

    def _apply_canvas_size(self) -> None:
        side = self.game.dimension * self.game.config.cell_size
        self.canvas.configure(width=side, height=side)

    # ------------------------------------------------------------------
    # frame loop
    # ------------------------------------------------------------------
    def _cancel_loop(self) -> None:
        """Cancel scheduled frame callback if one exists."""
        if self.after_id is not None:
            self.root.after_cancel(self.after_id)
            self.after_id = None
        self.driver.stop()

    def _ensure_loop(self) -> None:
        if self.after_id is None and self.game.status == GameStatus.PLAYING:
            self.after_id = self.root.after(DEFAULT_FRAME_MS, self.frame)

    def frame(self) -> None:
        """One render frame; the driver decides whether a tick is due."""
        self.after_id = None
        self.driver.advance()
        self.draw()
        if self.game.status == GameStatus.PLAYING:
            self._ensure_loop()
        else:
            self._cancel_loop()

    # ------------------------------------------------------------------
    # actions
    # ------------------------------------------------------------------
    def start_game(self) -> None:
        self.game.start_game()
        self._ensure_loop()
        self.draw()

    def toggle_pause(self) -> None:
        self.game.toggle_pause()
        if self.game.status == GameStatus.PLAYING:
            self._ensure_loop()
        else:
            self._cancel_loop()
        self.draw()

    def reset_game(self) -> None:
        self._cancel_loop()
        self.game.reset_game()
        self.draw()

    def change_grid_size(self, label: str) -> None:
        self.game.change_grid_size(self.GRID_PRESETS[label])
        self._apply_canvas_size()
        self.draw()

    def toggle_two_player(self) -> None:
        self.game.toggle_two_player()
        self.draw()

    def toggle_mute(self) -> None:
        self.game.toggle_mute()
        self.draw()

    def on_key(self, event: tk.Event) -> None:
        self.input.handle_key(event.keysym)
        if self.game.status == GameStatus.PLAYING:
            self._ensure_loop()
        self.draw()

    def on_swipe_end(self, event: tk.Event) -> None:
        self.input.end_swipe(event.x, event.y)
        self._ensure_loop()
        self.draw()

    def on_game_event(self, event: GameEvent) -> None:
        """Audio stand-in: ring the bell unless muted."""
        if not self.game.muted:
            self.root.bell()
        logger.debug("Game event: %s", event.value)

    def close(self) -> None:
        self._cancel_loop()
        self.root.destroy()

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------
    def draw(self) -> None:
        """Render board, status labels, and game-over overlay."""
        snap = self.game.snapshot()
        board = encode_board(snap)
        cell = self.game.config.cell_size
        side = snap.dimension * cell
        colors = {
            FOOD: self.FOOD_COLOR,
            CELL_CODES[Player.P1][0]: self.P1_HEAD,
            CELL_CODES[Player.P1][1]: self.P1_BODY,
            CELL_CODES[Player.P2][0]: self.P2_HEAD,
            CELL_CODES[Player.P2][1]: self.P2_BODY,
        }

        self.canvas.delete("all")
        for i in range(snap.dimension + 1):
            pos = i * cell
            self.canvas.create_line(0, pos, side, pos, fill=self.GRID_COLOR)
            self.canvas.create_line(pos, 0, pos, side, fill=self.GRID_COLOR)

        for y, row in enumerate(board):
            for x, code in enumerate(row):
                if code == FOOD:
                    self.canvas.create_oval(
                        x * cell + 4, y * cell + 4, (x + 1) * cell - 4, (y + 1) * cell - 4,
                        fill=self.FOOD_COLOR, outline="",
                    )
                elif code:
                    self.canvas.create_rectangle(
                        x * cell + 2, y * cell + 2, (x + 1) * cell - 2, (y + 1) * cell - 2,
                        fill=colors[int(code)], outline="",
                    )

        if snap.two_player:
            self.score_var.set(f"P1: {snap.scores[Player.P1]}   P2: {snap.scores[Player.P2]}")
        else:
            self.score_var.set(f"Score: {snap.score}")
        self.high_var.set(f"High score: {snap.high_score}")
        self.state_var.set(f"State: {self.STATUS_LABELS[snap.status]}")
        self.pause_btn.config(text="Resume" if snap.status == GameStatus.PAUSED else "Pause")
        self.mode_btn.config(text="Mode: 2 players" if snap.two_player else "Mode: 1 player")
        self.mute_btn.config(text="Unmute" if snap.muted else "Mute")
        # Keep the dropdown honest when a size change was refused mid-game.
        self.grid_size_var.set(next(label for label, name in self.GRID_PRESETS.items() if name == snap.grid_size))

        if snap.status == GameStatus.GAME_OVER:
            if snap.two_player:
                headline = f"{snap.winner.value.upper()} wins" if snap.winner else "Draw"
            else:
                headline = "Game Over"
            self.canvas.create_text(
                side // 2, side // 2 - 12, text=headline, fill=self.TEXT_PRIMARY, font=("Helvetica", 22, "bold")
            )
            self.canvas.create_text(
                side // 2, side // 2 + 20, text="Press Start or tap", fill=self.TEXT_MUTED, font=("Helvetica", 12)
            )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake")
    parser.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help="JSON file for high score and preferences")
    parser.add_argument("--seed", type=int, default=None, help="Seed for food placement")
    parser.add_argument("--tick-ms", type=int, default=SnakeConfig.tick_ms)
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args()


def run_player_gui() -> None:
    """Launch the Snake player window."""
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    game = SnakeGame(SnakeConfig(tick_ms=args.tick_ms, seed=args.seed), store=JsonFileStore(args.settings))
    root = tk.Tk()
    SnakeApp(root, game)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
