"""
6-axis Minesweeper engine.

Provides board generation, probing, marking and highlighting on boards with
up to six independently wrapping axes.
"""
from .wrapping import BoundedWrappingRange, axis_window
from .cell import Cell, CellState
from .settings import (
    DIMENSIONS,
    PRESETS,
    CLASSIC,
    TORUS,
    CUBE,
    TESSERACT,
    HEXERACT,
    GameSettings,
    format_seed,
    parse_seed,
)
from .board import Board, GameState
from .session import GameSession
from .environment import MinesweeperEnv, render_board

__all__ = [
    "BoundedWrappingRange",
    "axis_window",
    "Cell",
    "CellState",
    "DIMENSIONS",
    "PRESETS",
    "CLASSIC",
    "TORUS",
    "CUBE",
    "TESSERACT",
    "HEXERACT",
    "GameSettings",
    "format_seed",
    "parse_seed",
    "Board",
    "GameState",
    "GameSession",
    "MinesweeperEnv",
    "render_board",
]
