"""
Board module for the 6-axis Minesweeper engine.

Implements the game board with seeded mine placement, flood-fill probing,
marking with incremental neighbour deltas, highlighting and game state
management.
"""
import logging
import secrets
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from itertools import product
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .cell import HIGHLIGHT_MASK, MARKED_STATES, UNMARKED_STATES, Cell, CellState
from .settings import (
    SEED_BITS,
    Coordinate,
    GameSettings,
    format_seed,
    validate_coordinate,
    validate_dimensions,
)
from .wrapping import axis_window

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    RUNNING = auto()
    VICTORY = auto()
    LOSS = auto()


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    6-axis Minesweeper game board.

    Mines are placed when the board is created. If ``initial`` is given the
    board probes it straight away; without an explicit ``seed`` the layout is
    regenerated until ``initial`` is safe. After construction ``seed`` holds
    the seed the layout was generated from, explicit or not.

    Cells live in one flat list with axis 0 varying fastest.
    """

    size: Coordinate
    wrap: Tuple[bool, ...]
    mine_count: int
    initial: Optional[Coordinate] = None
    seed: Optional[int] = None
    _grid: List[Cell] = field(default_factory=list, init=False, repr=False)
    _game_state: GameState = field(default=GameState.RUNNING, init=False)
    _marked_count: int = field(default=0, init=False)
    _undiscovered_empty: int = field(default=0, init=False)
    _strides: Tuple[int, ...] = field(
        default=(), init=False, repr=False, compare=False
    )
    _axis_offsets: Tuple[Tuple[Tuple[int, ...], ...], ...] = field(
        default=(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Validate parameters, generate the layout and take the first probe."""
        self.size = tuple(int(extent) for extent in self.size)
        self.wrap = tuple(bool(flag) for flag in self.wrap)
        validate_dimensions(self.size, self.wrap, self.mine_count)
        if self.initial is not None:
            self.initial = tuple(self.initial)
            validate_coordinate(self.initial, self.size)
        if self.seed is not None and not 0 <= self.seed < 1 << SEED_BITS:
            raise ValueError(f"Seed must fit in {SEED_BITS} bits")

        self._init_topology()
        self._generate()
        self._undiscovered_empty = self.total_fields - self.mine_count

        if self.initial is not None:
            self.probe_at(self.initial)

    @classmethod
    def from_settings(
        cls, settings: GameSettings, initial: Optional[Sequence[int]] = None
    ) -> "Board":
        """Create a board from game settings."""
        return cls(
            settings.size,
            settings.wrap,
            settings.mines,
            None if initial is None else tuple(initial),
            settings.seed,
        )

    # ========================================================================
    # Topology (Low-level)
    # ========================================================================

    def _init_topology(self) -> None:
        """Precompute strides and each axis' neighbour windows as offsets."""
        strides = []
        stride = 1
        for extent in self.size:
            strides.append(stride)
            stride *= extent
        self._strides = tuple(strides)

        # Windows are deduplicated so short wrapped axes count a cell once
        self._axis_offsets = tuple(
            tuple(
                tuple(
                    value * stride
                    for value in dict.fromkeys(axis_window(index, extent, flag))
                )
                for index in range(extent)
            )
            for extent, flag, stride in zip(self.size, self.wrap, self._strides)
        )

    def _offset(self, coordinate: Sequence[int]) -> int:
        """Flat grid offset of a coordinate."""
        return sum(index * stride for index, stride in zip(coordinate, self._strides))

    def _checked_offset(self, coordinate: Sequence[int]) -> int:
        """Flat grid offset of a coordinate validated against the board."""
        validate_coordinate(coordinate, self.size)
        return self._offset(coordinate)

    def _neighbor_offsets(self, offset: int) -> Iterator[int]:
        """Yield flat offsets of every neighbour, the cell itself excluded."""
        windows = [
            axis_offsets[(offset // stride) % extent]
            for axis_offsets, stride, extent in zip(
                self._axis_offsets, self._strides, self.size
            )
        ]
        for parts in product(*windows):
            neighbor = sum(parts)
            if neighbor != offset:
                yield neighbor

    # ========================================================================
    # Generation (Low-level)
    # ========================================================================

    def _generate(self) -> None:
        """Lay out mines, regenerating until ``initial`` is safe if allowed."""
        explicit = self.seed is not None
        while True:
            seed = self.seed if explicit else secrets.randbits(SEED_BITS)
            self._init_grid()
            self._place_mines(seed)
            self._calculate_adjacent_mines()

            if explicit or self.initial is None:
                break
            if self._grid[self._offset(self.initial)].is_empty:
                break
            logger.debug(
                f"Seed {format_seed(seed)} put a mine under {self.initial}, "
                f"regenerating"
            )

        self.seed = seed
        logger.debug(f"Generated board {self.size} with seed {format_seed(seed)}")

    def _init_grid(self) -> None:
        """Create a grid of empty cells."""
        total = self._strides[-1] * self.size[-1]
        self._grid = [Cell() for _ in range(total)]

    def _place_mines(self, seed: int) -> None:
        """
        Place mines by rejection sampling.

        Args:
            seed: Seed for the deterministic generator driving placement.
        """
        rng = np.random.default_rng(seed)
        placed = 0
        while placed < self.mine_count:
            # Single-cell axes consume no randomness
            coordinate = [
                int(rng.integers(extent)) if extent > 1 else 0
                for extent in self.size
            ]
            offset = self._offset(coordinate)
            if self._grid[offset].is_empty:
                self._grid[offset] = Cell.mine()
                placed += 1

    def _calculate_adjacent_mines(self) -> None:
        """Calculate neighbour mine counts for all empty cells."""
        for offset in range(len(self._grid)):
            if self._grid[offset].is_mine:
                continue
            count = sum(
                1
                for neighbor in self._neighbor_offsets(offset)
                if self._grid[neighbor].is_mine
            )
            self._grid[offset] = Cell.empty(count)

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def probe_at(
        self, coordinate: Sequence[int], allow_probing_marked: bool = False
    ) -> GameState:
        """
        Probe a cell, flooding outwards through cells with no mines nearby.

        Marked cells are skipped unless ``allow_probing_marked`` is set, in
        which case they are unmarked first. Probing a finished game does
        nothing.

        Args:
            coordinate: Cell to probe.
            allow_probing_marked: Whether marked cells may be uncovered.

        Returns:
            The game state after the probe.
        """
        offset = self._checked_offset(coordinate)
        if self._game_state != GameState.RUNNING:
            return self._game_state

        queue = deque([offset])
        while queue:
            offset = queue.popleft()
            cell = self._grid[offset]

            if cell.state == CellState.UNDISCOVERED_MINE:
                self._explode(offset)
            elif cell.state == CellState.MARKED_MINE:
                if allow_probing_marked:
                    self._toggle_mark(offset)
                    self._explode(offset)
            elif cell.state == CellState.UNDISCOVERED_EMPTY:
                self._discover(offset)
                if cell.mine_count == 0:
                    # Settled cells may be queued again; they are no-ops
                    queue.extend(self._neighbor_offsets(offset))
            elif cell.state == CellState.MARKED_EMPTY:
                if allow_probing_marked:
                    self._toggle_mark(offset)
                    self._discover(offset)

        if self._game_state != GameState.LOSS and self._undiscovered_empty == 0:
            self._game_state = GameState.VICTORY
            logger.info(f"Game with seed {format_seed(self.seed)} won")

        return self._game_state

    def _explode(self, offset: int) -> None:
        """Set off a mine and lose the game."""
        self._grid[offset] = replace(
            self._grid[offset], state=CellState.EXPLODED_MINE
        )
        if self._game_state != GameState.LOSS:
            logger.info(f"Game with seed {format_seed(self.seed)} lost")
        self._game_state = GameState.LOSS

    def _discover(self, offset: int) -> None:
        """Uncover an empty cell."""
        self._grid[offset] = replace(
            self._grid[offset], state=CellState.DISCOVERED_EMPTY
        )
        self._undiscovered_empty -= 1

    def mark_at(self, coordinate: Sequence[int]) -> None:
        """
        Toggle the mark on an undiscovered cell.

        Discovered and exploded cells ignore the call, as does a finished
        game.

        Args:
            coordinate: Cell to mark or unmark.
        """
        offset = self._checked_offset(coordinate)
        if self._game_state != GameState.RUNNING:
            return
        self._toggle_mark(offset)

    def _toggle_mark(self, offset: int) -> None:
        """Flip a mark and shift the delta of every empty neighbour."""
        cell = self._grid[offset]
        if cell.state in UNMARKED_STATES:
            change = -1
        elif cell.state in MARKED_STATES:
            change = 1
        else:
            return

        for neighbor in self._neighbor_offsets(offset):
            self._grid[neighbor] = self._grid[neighbor].with_delta(change)

        self._grid[offset] = cell.toggled_mark()
        self._marked_count -= change

    def highlight_at(
        self, coordinate: Sequence[int], group_mask: int, enable: bool
    ) -> None:
        """
        Set or clear highlight groups on a cell.

        Works on any cell in any game state.

        Args:
            coordinate: Cell to highlight.
            group_mask: Bitmask of the groups to change.
            enable: True to set the groups, False to clear them.
        """
        if not 0 <= group_mask <= HIGHLIGHT_MASK:
            raise ValueError(f"Highlight mask must be within 0..{HIGHLIGHT_MASK}")
        offset = self._checked_offset(coordinate)
        self._grid[offset] = self._grid[offset].with_highlight(group_mask, enable)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_running(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.RUNNING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.VICTORY

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOSS

    @property
    def marked_count(self) -> int:
        """Number of cells currently marked."""
        return self._marked_count

    @property
    def undiscovered_empty(self) -> int:
        """Number of empty cells not yet discovered."""
        return self._undiscovered_empty

    @property
    def total_fields(self) -> int:
        """Number of cells on the board."""
        return self._strides[-1] * self.size[-1]

    def cell_at(self, coordinate: Sequence[int]) -> Cell:
        """Get cell at position."""
        return self._grid[self._checked_offset(coordinate)]

    def neighbors(self, coordinate: Sequence[int]) -> List[Coordinate]:
        """
        Get the neighbouring cell positions.

        Args:
            coordinate: Centre cell.

        Returns:
            Coordinates of every distinct neighbour, the centre excluded.
        """
        offset = self._checked_offset(coordinate)
        return [self.coordinate_of(neighbor) for neighbor in self._neighbor_offsets(offset)]

    def index_of(self, coordinate: Sequence[int]) -> int:
        """Flat index of a coordinate (axis 0 varies fastest)."""
        return self._checked_offset(coordinate)

    def coordinate_of(self, index: int) -> Coordinate:
        """Coordinate of a flat index."""
        if not 0 <= index < self.total_fields:
            raise IndexError(f"Index {index} out of range for {self.total_fields} cells")
        coordinate = []
        for extent in self.size:
            index, position = divmod(index, extent)
            coordinate.append(position)
        return tuple(coordinate)

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            6D int16 array indexed by coordinate where:
                -1 = undiscovered
                -2 = marked
                -3 = exploded mine
                0-728 = discovered with neighbour mine count
        """
        values = np.fromiter(
            (cell.to_observation() for cell in self._grid),
            dtype=np.int16,
            count=len(self._grid),
        )
        return values.reshape(self.size, order="F")

    def get_valid_actions(self) -> List[Coordinate]:
        """
        Get list of cells that can still be probed.

        Returns:
            Coordinates of undiscovered, unmarked cells.
        """
        return [
            self.coordinate_of(offset)
            for offset, cell in enumerate(self._grid)
            if cell.state in UNMARKED_STATES
        ]
