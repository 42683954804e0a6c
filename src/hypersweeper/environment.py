"""
Gymnasium environment wrapper for 6-axis Minesweeper.

Provides a standard step/observe interface and a text rendering of the
board that lays out the six axes on a flat screen.
"""
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Sequence, SupportsFloat, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import GameState
from .cell import OBS_EXPLODED, OBS_MARKED, OBS_UNDISCOVERED, Cell, CellState
from .session import GameSession
from .settings import GameSettings

MAX_NEIGHBOR_MINES = 3 ** 6 - 1


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for 6-axis Minesweeper.

    Observation:
        6D array indexed by coordinate where:
        - -1 = undiscovered cell
        - -2 = marked cell
        - -3 = exploded mine
        - 0-728 = discovered cell with neighbour mine count

    Actions:
        Discrete action space of size ``total_fields``.
        Action i probes the cell at flat index i (axis 0 varies fastest).
        The first action of an episode creates the board around that cell.

    Rewards:
        - +1 for probing a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (already discovered or marked)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        render_mode: Optional[str] = None,
        show_delta: bool = True,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            settings: Game settings (default: 4x4x4x4x1x1 with 20 mines).
            render_mode: How to render the environment.
            show_delta: Render the remaining-mines delta instead of counts
                (default: True).
        """
        super().__init__()

        self.settings = settings or GameSettings()
        self.session = GameSession(self.settings)
        self.render_mode = render_mode
        self.show_delta = show_delta

        self.observation_space = spaces.Box(
            low=OBS_EXPLODED,
            high=MAX_NEIGHBOR_MINES,
            shape=self.settings.size,
            dtype=np.int16,
        )
        self.action_space = spaces.Discrete(self.settings.total_fields)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Board generation seed. A seeded reset always rebuilds the
                same layout; without one the settings' own seed applies.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is None:
            self.session.settings = self.settings
        else:
            self.session.settings = replace(self.settings, seed=seed)
        self.session.reset()
        self._steps = 0
        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Flat index of the cell to probe.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        coordinate = self._action_to_position(action)
        self._steps += 1

        reward = self._calculate_reward(coordinate)

        observation = self._get_observation()
        board = self.session.board
        terminated = board is not None and not board.is_running
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, ...]:
        """Convert flat action index to a coordinate."""
        if not 0 <= action < self.settings.total_fields:
            raise IndexError(
                f"Action {action} out of range for {self.settings.total_fields} cells"
            )
        coordinate = []
        remainder = int(action)
        for extent in self.settings.size:
            remainder, position = divmod(remainder, extent)
            coordinate.append(position)
        return tuple(coordinate)

    def _calculate_reward(self, coordinate: Tuple[int, ...]) -> float:
        """
        Calculate reward for probing a cell.

        Args:
            coordinate: Cell to probe.

        Returns:
            Reward value.
        """
        board = self.session.board
        if board is not None:
            cell = board.cell_at(coordinate)
            if cell.state not in (
                CellState.UNDISCOVERED_MINE, CellState.UNDISCOVERED_EMPTY
            ):
                return -0.1

        state = self.session.probe(coordinate)

        if state == GameState.VICTORY:
            return 10.0
        if state == GameState.LOSS:
            return -10.0
        return 1.0

    def _get_observation(self) -> np.ndarray:
        """Current observation; all cells undiscovered before the first probe."""
        if self.session.board is None:
            return np.full(self.settings.size, OBS_UNDISCOVERED, dtype=np.int16)
        return self.session.board.get_observation()

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        status = self.session.status()
        return {
            "steps": self._steps,
            "game_state": status["state"] or GameState.RUNNING.name,
            "marked": status["marked"],
            "undiscovered_empty": status["undiscovered_empty"],
            "seed": status["seed"],
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as text."""
        return render_board(
            self.settings.size, self._cell_symbol, show_delta=self.show_delta
        )

    def _cell_symbol(self, coordinate: Tuple[int, ...]) -> str:
        board = self.session.board
        if board is None:
            return "."
        return cell_symbol(
            board.cell_at(coordinate), self.show_delta, board.game_state
        )

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = valid action.
        """
        observation = self._get_observation()
        return (observation == OBS_UNDISCOVERED).flatten(order="F")


# ============================================================================
# Text Rendering
# ============================================================================

def cell_symbol(
    cell: Cell, show_delta: bool = False, game_state: Optional[GameState] = None
) -> str:
    """
    Single-token text form of a cell.

    ``.`` undiscovered, ``F`` marked, ``*`` exploded, blank for a discovered
    cell with nothing left around it, otherwise the count (or delta). Once
    the game is over, hidden mines show as ``M`` and wrong marks as ``X``.
    """
    finished = game_state in (GameState.VICTORY, GameState.LOSS)
    if finished and cell.state == CellState.UNDISCOVERED_MINE:
        return "M"
    if finished and cell.state == CellState.MARKED_EMPTY:
        return "X"

    value = cell.to_observation()
    if value == OBS_UNDISCOVERED:
        return "."
    if value == OBS_MARKED:
        return "F"
    if value == OBS_EXPLODED:
        return "*"
    if cell.mine_count == 0 and cell.delta == 0:
        return " "
    return str(cell.delta if show_delta else cell.mine_count)


def render_board(
    size: Sequence[int],
    symbol_at: Callable[[Tuple[int, ...]], str],
    show_delta: bool = False,
) -> str:
    """
    Lay out a 6-axis board as text.

    Axes 0, 2 and 4 run left to right (innermost first) and axes 1, 3 and 5
    run top to bottom, so each (axis 0, axis 1) slice forms a small grid.

    Args:
        size: Extent of each axis.
        symbol_at: Callable returning the text for a coordinate.
        show_delta: Widen cells for signed deltas.
    """
    size_x, size_y, size_z, size_u, size_v, size_w = size
    width = 4 if show_delta else 3

    blocks = []
    for ww in range(size_w):
        lines = []
        for uu in range(size_u):
            if uu:
                lines.append("")
            for yy in range(size_y):
                groups = []
                for vv in range(size_v):
                    tiles = []
                    for zz in range(size_z):
                        tiles.append("".join(
                            symbol_at((xx, yy, zz, uu, vv, ww)).rjust(width)
                            for xx in range(size_x)
                        ))
                    groups.append("  ".join(tiles))
                lines.append("  |".join(groups))
        blocks.append("\n".join(lines))

    separator = "\n" + "=" * max(len(line) for line in blocks[0].split("\n")) + "\n"
    return separator.join(blocks)
