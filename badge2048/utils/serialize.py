"""
Conversion of game states to and from plain data, for storage or transport by the surrounding application.
"""

from __future__ import annotations

import json
from typing import Any

from badge2048.core.gameboard import board_to_list
from badge2048.game.reducer import GameState, GameStatus

# ##>: Largest power of two an int64 board cell can hold.
_MAX_TILE = 2**62


def state_to_dict(state: GameState) -> dict[str, Any]:
    """
    Convert a game state into JSON-compatible data.

    Parameters
    ----------
    state : GameState
        State to convert.

    Returns
    -------
    dict
        ``board`` as nested lists with ``None`` for empty cells, ``score`` and ``status``.

    Example
    -------
    >>> state_to_dict(GameState(board=[[2, None, None, None]] + [[None] * 4] * 3))['board'][0]
    [2, None, None, None]
    """
    return {
        'board': board_to_list(state.board),
        'score': int(state.score),
        'status': state.status.value,
    }


def _is_tile(value: Any) -> bool:
    """A tile is a power of two from 2 up to the largest value the board can hold."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 2 <= value <= _MAX_TILE and value & (value - 1) == 0


def state_from_dict(payload: Any) -> GameState:
    """
    Rebuild a game state from data produced by ``state_to_dict``.

    Raises
    ------
    ValueError
        If the payload is not a mapping with a 4x4 board of power-of-two tiles, a non-negative integer score and a known status.
    """
    if not isinstance(payload, dict):
        raise ValueError('Game state must be an object')

    board = payload.get('board')
    if not isinstance(board, list) or not all(isinstance(row, list) for row in board):
        raise ValueError('Game state board must be a list of rows')
    for row in board:
        for cell in row:
            if cell is not None and not _is_tile(cell):
                raise ValueError(f'Invalid tile value: {cell!r}')

    score = payload.get('score')
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f'Invalid score: {score!r}')

    try:
        status = GameStatus(payload.get('status'))
    except ValueError as error:
        raise ValueError(f"Invalid status: {payload.get('status')!r}") from error

    return GameState(board=board, score=score, status=status)


def state_to_json(state: GameState) -> str:
    """Serialize a game state as a JSON string."""
    return json.dumps(state_to_dict(state))


def state_from_json(raw: str) -> GameState:
    """Parse a game state from a JSON string; invalid JSON raises ``ValueError``."""
    return state_from_dict(json.loads(raw))
