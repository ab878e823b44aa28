# -*- coding: utf-8 -*-
"""
Badge rewards: unlocking by score, claiming, on-chain mint bookkeeping, and persistence.
"""

from .badge import (
    DEFAULT_BADGES,
    Badge,
    BadgeState,
    BadgeTier,
    ClaimResult,
    UnlockResult,
    badge_needs_minting,
    badge_states_equal,
    claim_badge,
    create_default_badges,
    merge_onchain_badges,
    normalize_badge_state,
    reset_badges,
    unlock_for_score,
    with_onchain_data,
)
from .storage import (
    JsonFileStorage,
    MemoryStorage,
    Storage,
    load_badges,
    load_high_score,
    save_badges,
    save_high_score,
    update_high_score,
)

__all__ = [
    "DEFAULT_BADGES",
    "Badge",
    "BadgeState",
    "BadgeTier",
    "ClaimResult",
    "JsonFileStorage",
    "MemoryStorage",
    "Storage",
    "UnlockResult",
    "badge_needs_minting",
    "badge_states_equal",
    "claim_badge",
    "create_default_badges",
    "load_badges",
    "load_high_score",
    "merge_onchain_badges",
    "normalize_badge_state",
    "reset_badges",
    "save_badges",
    "save_high_score",
    "unlock_for_score",
    "update_high_score",
    "with_onchain_data",
]
