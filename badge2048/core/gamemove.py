"""
Move directions for the 2048 board, and helpers telling which of them would change the board.
"""

from enum import IntEnum

from numpy import ndarray


class Direction(IntEnum):
    """
    Direction of travel of the tiles.

    The value is the number of counter-clockwise quarter turns that turn the move into a left slide.
    """

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @classmethod
    def from_name(cls, name: str) -> 'Direction':
        """Look up a direction by its case-insensitive name."""
        try:
            return cls[name.strip().upper()]
        except KeyError as error:
            raise ValueError(f'Unknown direction: {name!r}') from error


def legal_directions_mask(board: ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions in a single pass.

    Parameters
    ----------
    board : ndarray
        The current board.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for (left, up, right, down) where True means the move changes the board.
    """
    # ##>: Horizontal adjacency, shared by left and right.
    left_cols, right_cols = board[:, :-1], board[:, 1:]
    h_can_merge = (left_cols != 0) & (left_cols == right_cols)

    # ##>: Vertical adjacency, shared by up and down.
    top_rows, bottom_rows = board[:-1, :], board[1:, :]
    v_can_merge = (top_rows != 0) & (top_rows == bottom_rows)

    # ##>: A tile can slide into an empty neighbour in the direction of travel.
    left = (left_cols == 0) & (right_cols != 0)
    right = (right_cols == 0) & (left_cols != 0)
    up = (top_rows == 0) & (bottom_rows != 0)
    down = (bottom_rows == 0) & (top_rows != 0)

    return (
        bool(left.any() or h_can_merge.any()),
        bool(up.any() or v_can_merge.any()),
        bool(right.any() or h_can_merge.any()),
        bool(down.any() or v_can_merge.any()),
    )


def legal_directions(board: ndarray) -> list[Direction]:
    """Directions whose slide would change the board."""
    mask = legal_directions_mask(board)
    return [direction for direction in Direction if mask[direction]]


def illegal_directions(board: ndarray) -> list[Direction]:
    """Directions whose slide would leave the board unchanged."""
    mask = legal_directions_mask(board)
    return [direction for direction in Direction if not mask[direction]]


def can_move(board: ndarray) -> bool:
    """Check if at least one direction changes the board."""
    return any(legal_directions_mask(board))
