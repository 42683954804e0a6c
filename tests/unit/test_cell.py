"""
Unit tests for Cell values.

Tests variant transitions, delta shifts, highlighting and observation codes.
"""
import dataclasses

import pytest
from hypersweeper import Cell, CellState


# ============================================================================
# Cell Initialization Tests
# ============================================================================

class TestCellInitialization:
    """Test cell creation and default values."""

    def test_default_cell_is_undiscovered_empty(self) -> None:
        """New cell should be an undiscovered empty cell with no payload."""
        cell = Cell()
        assert cell.state == CellState.UNDISCOVERED_EMPTY
        assert (cell.mine_count, cell.delta, cell.highlight) == (0, 0, 0)

    def test_mine_factory(self) -> None:
        """Mine factory creates an undiscovered mine."""
        cell = Cell.mine()
        assert cell.state == CellState.UNDISCOVERED_MINE
        assert cell.is_mine is True
        assert cell.is_empty is False

    def test_empty_factory_starts_delta_at_count(self) -> None:
        """Empty factory copies the mine count into the delta."""
        cell = Cell.empty(5)
        assert cell.mine_count == 5
        assert cell.delta == 5

    def test_cells_are_immutable(self) -> None:
        """Cells cannot be modified in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            Cell().delta = 3


# ============================================================================
# Mark Toggle Tests
# ============================================================================

class TestMarkToggle:
    """Test flipping between undiscovered and marked forms."""

    @pytest.mark.parametrize("before, after", [
        (CellState.UNDISCOVERED_MINE, CellState.MARKED_MINE),
        (CellState.MARKED_MINE, CellState.UNDISCOVERED_MINE),
        (CellState.UNDISCOVERED_EMPTY, CellState.MARKED_EMPTY),
        (CellState.MARKED_EMPTY, CellState.UNDISCOVERED_EMPTY),
    ])
    def test_toggle_flips_variant(
        self, before: CellState, after: CellState
    ) -> None:
        """Undiscovered and marked variants swap."""
        cell = Cell(before, highlight=0b101)
        toggled = cell.toggled_mark()
        assert toggled.state == after
        assert toggled.highlight == 0b101

    @pytest.mark.parametrize("state", [
        CellState.EXPLODED_MINE, CellState.DISCOVERED_EMPTY,
    ])
    def test_toggle_ignores_terminal_variants(self, state: CellState) -> None:
        """Exploded and discovered cells stay as they are."""
        cell = Cell(state, 2, 1)
        assert cell.toggled_mark() == cell

    def test_toggle_keeps_counts(self) -> None:
        """Marking an empty cell keeps its count and delta."""
        cell = Cell(CellState.UNDISCOVERED_EMPTY, 4, 2)
        toggled = cell.toggled_mark()
        assert (toggled.mine_count, toggled.delta) == (4, 2)
        assert toggled.is_marked is True


# ============================================================================
# Delta and Highlight Tests
# ============================================================================

class TestDeltaAndHighlight:
    """Test payload updates."""

    def test_delta_shift_on_empty_cell(self) -> None:
        """Empty cells move their delta but not their count."""
        cell = Cell.empty(3).with_delta(-1)
        assert cell.delta == 2
        assert cell.mine_count == 3

    def test_delta_can_go_negative(self) -> None:
        """Over-marking drives the delta below zero."""
        assert Cell.empty(0).with_delta(-2).delta == -2

    def test_delta_shift_ignores_mines(self) -> None:
        """Mines carry no delta."""
        cell = Cell.mine()
        assert cell.with_delta(-1) == cell

    def test_highlight_enable_sets_bits(self) -> None:
        """Enabling ORs groups into the mask."""
        cell = Cell(highlight=0b0001).with_highlight(0b0110, True)
        assert cell.highlight == 0b0111

    def test_highlight_disable_clears_bits(self) -> None:
        """Disabling removes only the given groups."""
        cell = Cell(highlight=0b1111).with_highlight(0b0101, False)
        assert cell.highlight == 0b1010

    def test_highlight_leaves_gameplay_alone(self) -> None:
        """Highlighting keeps variant, count and delta."""
        cell = Cell(CellState.MARKED_EMPTY, 3, 1)
        highlighted = cell.with_highlight(0xFF, True)
        assert highlighted.state == CellState.MARKED_EMPTY
        assert (highlighted.mine_count, highlighted.delta) == (3, 1)


# ============================================================================
# Cell Observation Tests
# ============================================================================

class TestCellObservation:
    """Test cell observation values."""

    @pytest.mark.parametrize("state", [
        CellState.UNDISCOVERED_MINE, CellState.UNDISCOVERED_EMPTY,
    ])
    def test_undiscovered_observation_is_negative_one(
        self, state: CellState
    ) -> None:
        """Undiscovered cells hide what they are."""
        assert Cell(state).to_observation() == -1

    @pytest.mark.parametrize("state", [
        CellState.MARKED_MINE, CellState.MARKED_EMPTY,
    ])
    def test_marked_observation_is_negative_two(self, state: CellState) -> None:
        """Marked cells show as marks."""
        assert Cell(state).to_observation() == -2

    def test_exploded_observation_is_negative_three(self) -> None:
        """Exploded mine has its own code."""
        assert Cell(CellState.EXPLODED_MINE).to_observation() == -3

    @pytest.mark.parametrize("count", [0, 1, 26, 728])
    def test_discovered_observation_is_mine_count(self, count: int) -> None:
        """Discovered cell shows its true neighbour mine count."""
        cell = Cell(CellState.DISCOVERED_EMPTY, count, count - 1)
        assert cell.to_observation() == count
