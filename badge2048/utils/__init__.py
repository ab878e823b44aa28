# -*- coding: utf-8 -*-
"""
This module provides utilities for converting game states to and from plain data.
"""

from .serialize import state_from_dict, state_from_json, state_to_dict, state_to_json

__all__ = ["state_from_dict", "state_from_json", "state_to_dict", "state_to_json"]
