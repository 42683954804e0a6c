"""
Game session for the 6-axis Minesweeper engine.

Wraps the lifetime of consecutive boards for a hosting UI: the first probe
creates the board, later input is forwarded as commands, and the chosen
highlight groups and timer are tracked alongside.
"""
import time
from typing import Any, Dict, Optional, Sequence

from .board import Board, GameState
from .cell import HIGHLIGHT_GROUPS
from .settings import GameSettings, format_seed


class GameSession:
    """
    A wrapper around Board that manages game start, input and timing.

    No board exists until the first probe, so the first probed cell can be
    used as the safe starting point of the layout.
    """

    def __init__(
        self, settings: Optional[GameSettings] = None, probe_marked: bool = False
    ) -> None:
        """
        Initialize the session.

        Args:
            settings: Parameters for new games (default: Tesseract-sized).
            probe_marked: Whether probing may uncover marked cells.
        """
        self.settings = settings or GameSettings()
        self.probe_marked = probe_marked
        self.selected_highlighters = 1
        self.reset()

    def reset(self) -> None:
        """Drop the current board; the next probe starts a new game."""
        self.board: Optional[Board] = None
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self, initial: Sequence[int]) -> GameState:
        """Create a board whose first probe is ``initial``."""
        self.board = Board.from_settings(self.settings, initial)
        self.start_time = time.monotonic()
        self.end_time = None
        self._note_game_end()
        return self.board.game_state

    def probe(self, coordinate: Sequence[int]) -> GameState:
        """Probe a cell, starting a game first if none is running."""
        if self.board is None:
            return self.start(coordinate)
        if not self.board.is_running:
            return self.board.game_state

        state = self.board.probe_at(coordinate, self.probe_marked)
        self._note_game_end()
        return state

    def mark(self, coordinate: Sequence[int]) -> None:
        """Toggle the mark on a cell of the running game."""
        if self.board is not None and self.board.is_running:
            self.board.mark_at(coordinate)

    def highlight(self, coordinate: Sequence[int], enable: bool = True) -> None:
        """Apply or remove the selected highlight groups on a cell."""
        if self.board is not None:
            self.board.highlight_at(coordinate, self.selected_highlighters, enable)

    def toggle_highlight_group(self, group: int) -> int:
        """
        Add or remove a highlight group from the selection.

        Returns:
            The new selection bitmask.
        """
        if not 0 <= group < HIGHLIGHT_GROUPS:
            raise ValueError(f"Highlight group must be within 0..{HIGHLIGHT_GROUPS - 1}")
        self.selected_highlighters ^= 1 << group
        return self.selected_highlighters

    def _note_game_end(self) -> None:
        """Stop the timer once the game is decided."""
        if self.board is not None and not self.board.is_running and self.end_time is None:
            self.end_time = time.monotonic()

    def elapsed(self) -> float:
        """Seconds since the first probe, frozen once the game ended."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.monotonic()
        return end - self.start_time

    def status(self) -> Dict[str, Any]:
        """
        Return a summary of the current game.
        """
        board = self.board
        return {
            "state": board.game_state.name if board else None,
            "marked": board.marked_count if board else 0,
            "mines": self.settings.mines,
            "undiscovered_empty": board.undiscovered_empty if board else None,
            "seed": format_seed(board.seed) if board else None,
            "dimensions": self.settings.describe(),
            "elapsed": self.elapsed(),
        }
