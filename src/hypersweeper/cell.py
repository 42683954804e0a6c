"""
Cell module for the 6-axis Minesweeper engine.

A cell is a small immutable value: one of six gameplay variants plus the
variant's payload (true neighbour mine count and the player-facing delta)
and a bitmask of eight cosmetic highlight groups.
"""
from dataclasses import dataclass, replace
from enum import Enum, auto


# ============================================================================
# Constants
# ============================================================================

HIGHLIGHT_GROUPS = 8
HIGHLIGHT_MASK = (1 << HIGHLIGHT_GROUPS) - 1


class CellState(Enum):
    """Gameplay variant of a cell."""

    UNDISCOVERED_MINE = auto()
    MARKED_MINE = auto()
    EXPLODED_MINE = auto()
    UNDISCOVERED_EMPTY = auto()
    MARKED_EMPTY = auto()
    DISCOVERED_EMPTY = auto()


MINE_STATES = frozenset(
    {CellState.UNDISCOVERED_MINE, CellState.MARKED_MINE, CellState.EXPLODED_MINE}
)
MARKED_STATES = frozenset({CellState.MARKED_MINE, CellState.MARKED_EMPTY})
UNMARKED_STATES = frozenset(
    {CellState.UNDISCOVERED_MINE, CellState.UNDISCOVERED_EMPTY}
)

# Undiscovered <-> marked
_MARK_TOGGLE = {
    CellState.UNDISCOVERED_MINE: CellState.MARKED_MINE,
    CellState.MARKED_MINE: CellState.UNDISCOVERED_MINE,
    CellState.UNDISCOVERED_EMPTY: CellState.MARKED_EMPTY,
    CellState.MARKED_EMPTY: CellState.UNDISCOVERED_EMPTY,
}

# Observation codes for non-numeric cells
OBS_UNDISCOVERED = -1
OBS_MARKED = -2
OBS_EXPLODED = -3


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass(frozen=True)
class Cell:
    """
    Represents a single cell of the board.

    Attributes:
        state: Gameplay variant.
        mine_count: Mines among the neighbours, fixed at generation
            (always 0 for mines).
        delta: ``mine_count`` minus the marked neighbours (always 0 for
            mines).
        highlight: Bitmask of the eight highlight groups.
    """

    state: CellState = CellState.UNDISCOVERED_EMPTY
    mine_count: int = 0
    delta: int = 0
    highlight: int = 0

    @classmethod
    def mine(cls, highlight: int = 0) -> "Cell":
        """Create an undiscovered mine."""
        return cls(CellState.UNDISCOVERED_MINE, highlight=highlight)

    @classmethod
    def empty(cls, mine_count: int, highlight: int = 0) -> "Cell":
        """Create an undiscovered empty cell with a fresh delta."""
        return cls(CellState.UNDISCOVERED_EMPTY, mine_count, mine_count, highlight)

    @property
    def is_mine(self) -> bool:
        """Check if the cell holds a mine, whatever its visibility."""
        return self.state in MINE_STATES

    @property
    def is_empty(self) -> bool:
        """Check if the cell holds no mine."""
        return self.state not in MINE_STATES

    @property
    def is_marked(self) -> bool:
        """Check if the player marked the cell."""
        return self.state in MARKED_STATES

    @property
    def is_discovered(self) -> bool:
        """Check if the cell is an uncovered empty cell."""
        return self.state == CellState.DISCOVERED_EMPTY

    @property
    def is_exploded(self) -> bool:
        """Check if the cell is a mine that went off."""
        return self.state == CellState.EXPLODED_MINE

    def toggled_mark(self) -> "Cell":
        """
        Flip between the undiscovered and marked form.

        Returns:
            The flipped cell, or this cell unchanged for terminal variants.
        """
        flipped = _MARK_TOGGLE.get(self.state)
        if flipped is None:
            return self
        return replace(self, state=flipped)

    def with_delta(self, change: int) -> "Cell":
        """Shift the delta of an empty cell; mines are returned unchanged."""
        if self.is_mine:
            return self
        return replace(self, delta=self.delta + change)

    def with_highlight(self, group_mask: int, enable: bool) -> "Cell":
        """Set or clear highlight groups."""
        if enable:
            highlight = self.highlight | group_mask
        else:
            highlight = self.highlight & ~group_mask & HIGHLIGHT_MASK
        return replace(self, highlight=highlight)

    def to_observation(self) -> int:
        """
        Convert cell to an observation value.

        Returns:
            -1: Undiscovered cell
            -2: Marked cell
            -3: Exploded mine
            0-728: Discovered empty cell with its neighbour mine count
        """
        if self.state in UNMARKED_STATES:
            return OBS_UNDISCOVERED
        if self.state in MARKED_STATES:
            return OBS_MARKED
        if self.state == CellState.EXPLODED_MINE:
            return OBS_EXPLODED
        return self.mine_count
