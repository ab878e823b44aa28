"""
Game state and the pure transition function that drives a game of 2048.

Every transition takes a state and an action and returns a state; the input state is never modified. When an action
has no effect (a move on a finished game, a slide that changes nothing, a spawn onto an occupied or out-of-bounds
cell) the very same state object is returned.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from numpy import array_equal, ndarray
from numpy.random import Generator

from badge2048.core.gameboard import (
    as_board,
    create_empty_board,
    is_game_over,
    place_tile,
    slide,
    spawn_tile,
)
from badge2048.core.gamemove import Direction

_logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    """Whether the game still accepts moves."""

    PLAYING = 'playing'
    GAMEOVER = 'gameover'


class ActionType(str, Enum):
    """Kinds of action accepted by ``transition``."""

    RESTART = 'RESTART'
    SLIDE_LEFT = 'SLIDE_LEFT'
    SLIDE_UP = 'SLIDE_UP'
    SLIDE_RIGHT = 'SLIDE_RIGHT'
    SLIDE_DOWN = 'SLIDE_DOWN'
    SPAWN_TILE = 'SPAWN_TILE'


_SLIDE_DIRECTIONS = {
    ActionType.SLIDE_LEFT: Direction.LEFT,
    ActionType.SLIDE_UP: Direction.UP,
    ActionType.SLIDE_RIGHT: Direction.RIGHT,
    ActionType.SLIDE_DOWN: Direction.DOWN,
}


@dataclass(frozen=True)
class Action:
    """
    An action applied to a game state.

    ``row``, ``col`` and ``value`` are only meaningful for ``SPAWN_TILE``.
    """

    type: ActionType
    row: int = 0
    col: int = 0
    value: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'type', ActionType(self.type))

    @classmethod
    def restart(cls) -> 'Action':
        return cls(ActionType.RESTART)

    @classmethod
    def slide(cls, direction: Direction) -> 'Action':
        for action_type, action_direction in _SLIDE_DIRECTIONS.items():
            if action_direction == direction:
                return cls(action_type)
        raise ValueError(f'Unknown direction: {direction!r}')

    @classmethod
    def spawn_tile(cls, row: int, col: int, value: int) -> 'Action':
        return cls(ActionType.SPAWN_TILE, row=row, col=col, value=value)

    @property
    def direction(self) -> Direction | None:
        """The slide direction, or None for non-slide actions."""
        return _SLIDE_DIRECTIONS.get(self.type)


RESTART = Action.restart()
SLIDE_LEFT = Action(ActionType.SLIDE_LEFT)
SLIDE_UP = Action(ActionType.SLIDE_UP)
SLIDE_RIGHT = Action(ActionType.SLIDE_RIGHT)
SLIDE_DOWN = Action(ActionType.SLIDE_DOWN)


@dataclass(frozen=True, eq=False)
class GameState:
    """
    Snapshot of a game.

    Attributes
    ----------
    board : ndarray
        Read-only 4x4 board, ``0`` for empty cells.
    score : int
        Total value of all merges since the game started.
    status : GameStatus
        ``PLAYING`` or ``GAMEOVER``.
    """

    board: ndarray
    score: int = 0
    status: GameStatus = field(default=GameStatus.PLAYING)

    def __post_init__(self):
        # ##>: Own a private copy of the cells and freeze it, so states can be shared safely.
        board = as_board(self.board)
        board.setflags(write=False)
        object.__setattr__(self, 'board', board)
        object.__setattr__(self, 'status', GameStatus(self.status))

        if self.score < 0:
            raise ValueError(f'Score must be non-negative, got {self.score}')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return self.score == other.score and self.status == other.status and array_equal(self.board, other.board)

    __hash__ = None

    @property
    def is_over(self) -> bool:
        return self.status is GameStatus.GAMEOVER

    @property
    def max_tile(self) -> int:
        return int(self.board.max())


def create_initial_state(rng: Generator | None = None) -> GameState:
    """
    Start a new game: an empty board with two spawned tiles and a score of zero.

    Parameters
    ----------
    rng : Generator, optional
        Random generator used to spawn the two tiles.

    Returns
    -------
    GameState
        A fresh game in the ``PLAYING`` status.
    """
    board = spawn_tile(create_empty_board(), rng=rng)
    board = spawn_tile(board, rng=rng)
    return GameState(board=board, score=0, status=GameStatus.PLAYING)


def _apply_slide(state: GameState, direction: Direction, rng: Generator | None) -> GameState:
    if state.status is GameStatus.GAMEOVER:
        _logger.debug('Ignoring %s: game is over', direction.name)
        return state

    result = slide(state.board, direction)
    if not result.changed:
        _logger.debug('Ignoring %s: board unchanged', direction.name)
        return state

    # ##: Spawn a tile after every effective move, then check for the end of the game.
    board = spawn_tile(result.board, rng=rng)
    status = GameStatus.GAMEOVER if is_game_over(board) else GameStatus.PLAYING
    return GameState(board=board, score=state.score + result.score, status=status)


def _apply_spawn(state: GameState, row: int, col: int, value: int) -> GameState:
    if state.status is GameStatus.GAMEOVER:
        return state

    board = place_tile(state.board, row, col, value)
    if board is state.board:
        _logger.debug('Ignoring spawn at (%d, %d): cell unavailable', row, col)
        return state
    return GameState(board=board, score=state.score, status=state.status)


def transition(state: GameState, action: Action, rng: Generator | None = None) -> GameState:
    """
    Apply an action to a game state.

    Parameters
    ----------
    state : GameState
        The current state. It is not modified.
    action : Action
        ``RESTART``, one of the four slides, or ``SPAWN_TILE``.
    rng : Generator, optional
        Random generator used for tile spawning.

    Returns
    -------
    GameState
        The next state, or ``state`` itself when the action has no effect.

    Notes
    -----
    - A slide on a full board that changes nothing leaves the status untouched: the status is only evaluated after a
      move that spawned a tile.
    - ``RESTART`` is accepted in any status.
    """
    if action.type is ActionType.RESTART:
        return create_initial_state(rng=rng)

    if action.type is ActionType.SPAWN_TILE:
        return _apply_spawn(state, action.row, action.col, action.value)

    return _apply_slide(state, _SLIDE_DIRECTIONS[action.type], rng)
