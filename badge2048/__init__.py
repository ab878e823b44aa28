# -*- coding: utf-8 -*-
"""
2048 game engine with score badges.

The engine is made of pure functions: `create_initial_state` starts a game, `transition` applies an action,
`is_game_over` inspects a board, and `unlock_for_score` derives badge progress from a score.
"""

from badge2048.badges.badge import unlock_for_score
from badge2048.core.gameboard import is_game_over
from badge2048.game.reducer import Action, GameState, GameStatus, create_initial_state, transition

__all__ = ["Action", "GameState", "GameStatus", "create_initial_state", "is_game_over", "transition", "unlock_for_score"]
