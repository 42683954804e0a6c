"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from itertools import product
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, Set, Tuple

# Add src to path for imports, and the repo root for main.py
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hypersweeper import Board, GameSettings, GameSession


NO_WRAP = (False,) * 6
ALL_WRAP = (True,) * 6


# ============================================================================
# Reference Helpers
# ============================================================================

def all_coordinates(size: Tuple[int, ...]) -> Iterable[Tuple[int, ...]]:
    """Every coordinate of a board, in no particular order."""
    return product(*(range(extent) for extent in size))


def reference_neighbors(
    size: Tuple[int, ...], wrap: Tuple[bool, ...], coordinate: Tuple[int, ...]
) -> Set[Tuple[int, ...]]:
    """Neighbour set computed with modular arithmetic instead of ranges."""
    axes = []
    for index, extent, flag in zip(coordinate, size, wrap):
        values = set()
        for step in (-1, 0, 1):
            value = index + step
            if flag:
                value %= extent
            if 0 <= value < extent:
                values.add(value)
        axes.append(sorted(values))
    return {
        neighbor for neighbor in product(*axes) if neighbor != tuple(coordinate)
    }


def mine_positions(board: Board) -> FrozenSet[Tuple[int, ...]]:
    """Coordinates of every mine on the board."""
    return frozenset(
        coordinate for coordinate in all_coordinates(board.size)
        if board.cell_at(coordinate).is_mine
    )


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def neighbors_of() -> Callable:
    """Reference neighbour function."""
    return reference_neighbors


@pytest.fixture
def mines_of() -> Callable:
    """Reference mine position lookup."""
    return mine_positions


@pytest.fixture
def coordinates_of() -> Callable:
    """Reference coordinate enumeration."""
    return all_coordinates


@pytest.fixture
def board_with_mines() -> Callable[..., Board]:
    """
    Factory searching for a seed that places mines exactly where asked.

    Only practical for a handful of mines on small boards.
    """
    def build(size, mines, wrap=NO_WRAP, initial=None) -> Board:
        wanted = frozenset(tuple(mine) for mine in mines)
        for seed in range(20000):
            board = Board(size, wrap, len(wanted), seed=seed)
            if mine_positions(board) == wanted:
                if initial is None:
                    return board
                return Board(size, wrap, len(wanted), initial, seed)
        pytest.fail(f"No seed places mines at {sorted(wanted)}")

    return build


@pytest.fixture
def tiny_board(board_with_mines) -> Board:
    """2x2 board with a single mine at (1, 1)."""
    return board_with_mines((2, 2, 1, 1, 1, 1), [(1, 1, 0, 0, 0, 0)])


@pytest.fixture
def cube_board() -> Board:
    """Seeded 5x5x3 board with a few mines, nothing probed yet."""
    return Board((5, 5, 3, 1, 1, 1), NO_WRAP, 6, seed=1234)


@pytest.fixture
def wrapped_board() -> Board:
    """Seeded 4x3x3x2 board wrapping on every axis."""
    return Board((4, 3, 3, 2, 1, 1), ALL_WRAP, 10, seed=99)


@pytest.fixture
def sparse_board() -> Board:
    """Seeded 8x8x2 board with very few mines, for flood fills."""
    return Board((8, 8, 2, 1, 1, 1), NO_WRAP, 3, seed=2024)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_settings() -> GameSettings:
    """Create a valid game configuration."""
    return GameSettings("Test", (4, 4, 2, 1, 1, 1), mines=5)


@pytest.fixture
def crowded_settings() -> GameSettings:
    """3x3 board where every cell but one is a mine."""
    return GameSettings("Crowded", (3, 3, 1, 1, 1, 1), mines=8)


@pytest.fixture
def session(valid_settings: GameSettings) -> GameSession:
    """Session that has not started a game yet."""
    return GameSession(valid_settings)
