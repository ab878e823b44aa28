# -*- coding: utf-8 -*-
"""
This module provides the board logic of the 2048 game.

It includes functions for sliding and merging tiles, spawning new tiles, checking if the game is over,
and determining which directions change the board.
"""

from .gameboard import (
    BOARD_SIZE,
    TILE_SPAWN_PROBS,
    SlideResult,
    as_board,
    board_to_list,
    create_empty_board,
    empty_cells,
    is_game_over,
    merge_line,
    place_tile,
    slide,
    slide_and_merge,
    spawn_tile,
)
from .gamemove import Direction, can_move, illegal_directions, legal_directions, legal_directions_mask

__all__ = [
    "BOARD_SIZE",
    "TILE_SPAWN_PROBS",
    "Direction",
    "SlideResult",
    "as_board",
    "board_to_list",
    "can_move",
    "create_empty_board",
    "empty_cells",
    "illegal_directions",
    "is_game_over",
    "legal_directions",
    "legal_directions_mask",
    "merge_line",
    "place_tile",
    "slide",
    "slide_and_merge",
    "spawn_tile",
]
