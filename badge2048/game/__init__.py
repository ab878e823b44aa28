# -*- coding: utf-8 -*-
"""
Game state machine of 2048.

The `transition` function is the only way to move from one `GameState` to the next.
"""

from .reducer import (
    RESTART,
    SLIDE_DOWN,
    SLIDE_LEFT,
    SLIDE_RIGHT,
    SLIDE_UP,
    Action,
    ActionType,
    GameState,
    GameStatus,
    create_initial_state,
    transition,
)

__all__ = [
    "RESTART",
    "SLIDE_DOWN",
    "SLIDE_LEFT",
    "SLIDE_RIGHT",
    "SLIDE_UP",
    "Action",
    "ActionType",
    "GameState",
    "GameStatus",
    "create_initial_state",
    "transition",
]
