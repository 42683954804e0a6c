"""
Game settings for the 6-axis Minesweeper engine.

Holds the parameters a new game is started with, their validation,
named presets and the text form of generation seeds.
"""
from dataclasses import dataclass, field
from math import prod
from typing import Dict, Optional, Sequence, Tuple


# ============================================================================
# Constants
# ============================================================================

DIMENSIONS = 6
MAX_AXIS_SIZE = 100
SEED_BITS = 64
SEED_HEX_DIGITS = SEED_BITS // 4

Coordinate = Tuple[int, int, int, int, int, int]


# ============================================================================
# Validation
# ============================================================================

def validate_dimensions(
    size: Sequence[int], wrap: Sequence[bool], mines: int
) -> None:
    """
    Ensure board dimensions and mine count are usable.

    Raises:
        ValueError: If an axis is out of range, ``wrap`` has the wrong
            length, or the mine count is not in ``1 .. total - 1``.
    """
    if len(size) != DIMENSIONS:
        raise ValueError(f"Size must have {DIMENSIONS} axes, got {len(size)}")
    if len(wrap) != DIMENSIONS:
        raise ValueError(f"Wrap must have {DIMENSIONS} axes, got {len(wrap)}")
    if any(extent < 1 for extent in size):
        raise ValueError("Board dimensions must be positive")
    if any(extent > MAX_AXIS_SIZE for extent in size):
        raise ValueError(f"Board dimensions must not exceed {MAX_AXIS_SIZE}")
    if mines < 1:
        raise ValueError("Board needs at least one mine")
    max_mines = prod(size) - 1
    if mines > max_mines:
        raise ValueError(f"Too many mines (max {max_mines})")


def validate_coordinate(coordinate: Sequence[int], size: Sequence[int]) -> None:
    """
    Ensure a coordinate lies on the board.

    Raises:
        IndexError: If any index is outside its axis.
    """
    if len(coordinate) != DIMENSIONS:
        raise IndexError(
            f"Coordinate must have {DIMENSIONS} axes, got {len(coordinate)}"
        )
    for axis, (index, extent) in enumerate(zip(coordinate, size)):
        if not 0 <= index < extent:
            raise IndexError(
                f"Index {index} out of range for axis {axis} of size {extent}"
            )


# ============================================================================
# Seed Text Form
# ============================================================================

def format_seed(seed: int) -> str:
    """Render a seed as zero-padded lowercase hex."""
    return f"{seed:0{SEED_HEX_DIGITS}x}"


def parse_seed(text: str) -> int:
    """
    Parse a seed typed as hex.

    Raises:
        ValueError: If the text is not hex or does not fit in 64 bits.
    """
    seed = int(text.strip(), 16)
    if not 0 <= seed < 1 << SEED_BITS:
        raise ValueError(f"Seed must fit in {SEED_BITS} bits")
    return seed


# ============================================================================
# Settings Data Class
# ============================================================================

@dataclass
class GameSettings:
    """
    Parameters for starting a new game.

    Attributes:
        name: Display name of the preset.
        size: Extent of each of the six axes.
        wrap: Whether each axis wraps around.
        mines: Total mines to place.
        seed: Fixed generation seed, or None for a fresh one every game.
    """

    name: str = "Custom"
    size: Coordinate = (4, 4, 4, 4, 1, 1)
    wrap: Tuple[bool, ...] = field(default=(False,) * DIMENSIONS)
    mines: int = 20
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Normalise sequences and validate after initialization."""
        self.size = tuple(int(extent) for extent in self.size)
        self.wrap = tuple(bool(flag) for flag in self.wrap)
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        validate_dimensions(self.size, self.wrap, self.mines)
        if self.seed is not None and not 0 <= self.seed < 1 << SEED_BITS:
            raise ValueError(f"Seed must fit in {SEED_BITS} bits")

    @property
    def total_fields(self) -> int:
        """Number of cells a board with these settings has."""
        return prod(self.size)

    def describe(self) -> str:
        """Short summary such as ``4 x 4w x 1 x 1 x 1 x 1, 3 mines``."""
        axes = " x ".join(
            f"{extent}{'w' if flag else ''}"
            for extent, flag in zip(self.size, self.wrap)
        )
        return f"{axes}, {self.mines} mines"


# Preset difficulty levels
CLASSIC = GameSettings("Classic", (9, 9, 1, 1, 1, 1), mines=10)
TORUS = GameSettings("Torus", (9, 9, 1, 1, 1, 1), (True, True, False, False, False, False), 10)
CUBE = GameSettings("Cube", (5, 5, 5, 1, 1, 1), mines=15)
TESSERACT = GameSettings("Tesseract", (4, 4, 4, 4, 1, 1), mines=20)
HEXERACT = GameSettings("Hexeract", (3, 3, 3, 3, 3, 3), mines=30)

PRESETS: Dict[str, GameSettings] = {
    preset.name.lower(): preset
    for preset in (CLASSIC, TORUS, CUBE, TESSERACT, HEXERACT)
}
