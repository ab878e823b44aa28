# -*- coding: utf-8 -*-
"""
Python implementation of a 2048 game session.

This module provides the `TwentyFortyEight` class, which drives a game and keeps track of badges and high scores.
"""

from .twentyfortyeight import BadgeUnlocked, TwentyFortyEight

__all__ = ["BadgeUnlocked", "TwentyFortyEight"]
