"""
Core functionality of the 2048 board: representation, sliding and merging, tile spawning and game-over detection.
"""

from typing import NamedTuple, Sequence

from numpy import all as np_all
from numpy import any as np_any
from numpy import argwhere, array, array_equal, int64, ndarray, rot90, zeros
from numpy.random import PCG64DXSM, Generator, default_rng

# ##>: The board is always 4x4.
BOARD_SIZE = 4

# ##>: Tile spawn probabilities (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

# ##>: Pre-computed tile values and probabilities for fast sampling.
_TILE_VALUES = list(TILE_SPAWN_PROBS)
_TILE_PROBS = list(TILE_SPAWN_PROBS.values())

# ##>: Module-level generator, used when the caller does not inject one.
_GENERATOR = default_rng(PCG64DXSM())


class SlideResult(NamedTuple):
    """
    Outcome of sliding a board in one direction.

    Attributes
    ----------
    board : ndarray
        The board after sliding and merging (a new array).
    score : int
        Sum of the values created by merges.
    changed : bool
        Whether any cell differs from the board before the move.
    """

    board: ndarray
    score: int
    changed: bool


def create_empty_board() -> ndarray:
    """Create an empty 4x4 board."""
    return zeros((BOARD_SIZE, BOARD_SIZE), dtype=int64)


def as_board(cells: ndarray | Sequence[Sequence[int | None]]) -> ndarray:
    """
    Build a board array from an array or nested sequences.

    Parameters
    ----------
    cells : ndarray or sequence of sequences
        Cell values; ``None`` and ``0`` both mean an empty cell.

    Returns
    -------
    ndarray
        A new ``int64`` array of shape (4, 4).

    Raises
    ------
    ValueError
        If the cells do not describe a 4x4 grid.
    """
    if isinstance(cells, ndarray):
        board = cells.astype(int64, copy=True)
    else:
        board = array([[0 if cell is None else cell for cell in row] for row in cells], dtype=int64)

    if board.shape != (BOARD_SIZE, BOARD_SIZE):
        raise ValueError(f'Board must be {BOARD_SIZE}x{BOARD_SIZE}, got shape {board.shape}')
    return board


def board_to_list(board: ndarray) -> list[list[int | None]]:
    """Convert a board into nested lists, with ``None`` for empty cells."""
    return [[int(cell) if cell else None for cell in row] for row in board.tolist()]


def empty_cells(board: ndarray) -> list[tuple[int, int]]:
    """Return the (row, col) positions of the empty cells, in row-major order."""
    return [(int(cell[0]), int(cell[1])) for cell in argwhere(board == 0)]


def merge_line(line: ndarray) -> tuple[int, ndarray]:
    """
    Merge adjacent equal values in a line and compute the score.

    Parameters
    ----------
    line : ndarray
        A 1D array representing one line of the board, read in the direction of travel.

    Returns
    -------
    score : int
        The total value of the merged tiles.
    merged_line : ndarray
        The non-empty values after merging (not padded).

    Notes
    -----
    - Zeros (empty cells) are removed before merging.
    - Merging occurs from the start of the line towards the end.
    - Each value can only be merged once per call.
    """
    # ##: Handle lines with nothing to merge.
    non_zero = line[line != 0]
    if len(non_zero) <= 1:
        return 0, non_zero

    result = []
    score = 0

    # ##: Iterate over the line and merge values.
    i = 0
    while i < len(non_zero) - 1:
        if non_zero[i] == non_zero[i + 1]:
            merged = int(non_zero[i]) * 2
            result.append(merged)
            score += merged
            i += 2
        else:
            result.append(non_zero[i])
            i += 1

    if i == len(non_zero) - 1:
        result.append(non_zero[-1])

    return score, array(result, dtype=line.dtype)


def slide_and_merge(board: ndarray) -> tuple[int, ndarray]:
    """
    Slide the board to the left, merge adjacent cells, and compute the score.

    Parameters
    ----------
    board : ndarray
        The game board.

    Returns
    -------
    score : int
        The total score obtained from all merges.
    updated_board : ndarray
        The updated board, padded with empty cells on the right.

    Notes
    -----
    For other directions, rotate the board before calling this function.
    """
    result = zeros(board.shape, dtype=board.dtype)
    score = 0

    for i, row in enumerate(board):
        score_row, merged_row = merge_line(row)
        score += score_row
        result[i, : len(merged_row)] = merged_row

    return score, result


def slide(board: ndarray, direction: int) -> SlideResult:
    """
    Slide every tile in one direction, merging equal neighbours.

    Parameters
    ----------
    board : ndarray
        The current board. It is not modified.
    direction : int
        The direction of travel (0: left, 1: up, 2: right, 3: down).

    Returns
    -------
    SlideResult
        The new board, the score delta and whether the board changed.
    """
    rotated = rot90(board, k=int(direction))
    score, updated = slide_and_merge(rotated)
    new_board = rot90(updated, k=-int(direction)).copy()
    return SlideResult(board=new_board, score=score, changed=not array_equal(board, new_board))


def spawn_tile(board: ndarray, rng: Generator | None = None) -> ndarray:
    """
    Place a new tile (2 or 4) in a random empty cell.

    Parameters
    ----------
    board : ndarray
        The current board. It is not modified.
    rng : Generator, optional
        Random generator; the module-level generator is used when omitted.

    Returns
    -------
    ndarray
        A new board with one more tile, or the given board itself when it has no empty cell.
    """
    available = argwhere(board == 0)
    if len(available) == 0:
        return board

    rng = rng if rng is not None else _GENERATOR
    row, col = available[rng.integers(len(available))]
    value = rng.choice(_TILE_VALUES, p=_TILE_PROBS)

    new_board = board.copy()
    new_board[row, col] = value
    return new_board


def place_tile(board: ndarray, row: int, col: int, value: int) -> ndarray:
    """
    Place a tile at a given cell.

    Returns a new board, or the given board itself when the position is out of bounds or already occupied.
    """
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        return board
    if board[row, col] != 0:
        return board

    new_board = board.copy()
    new_board[row, col] = value
    return new_board


def is_game_over(board: ndarray) -> bool:
    """
    Check if the game has ended.

    Parameters
    ----------
    board : ndarray
        The current board.

    Returns
    -------
    bool
        True if no move is possible, False otherwise.

    Notes
    -----
    The game is over when there are no empty cells AND no adjacent cells have the same value.
    """
    return bool(
        np_all(board != 0) and not np_any(board[:-1] == board[1:]) and not np_any(board[:, :-1] == board[:, 1:])
    )
