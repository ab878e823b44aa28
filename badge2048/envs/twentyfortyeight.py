"""2048 game session with badge rewards and high score tracking."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from numpy import ndarray
from numpy.random import default_rng

from badge2048.badges.badge import BadgeState, BadgeTier, claim_badge, unlock_for_score
from badge2048.badges.storage import (
    JsonFileStorage,
    MemoryStorage,
    Storage,
    load_badges,
    load_high_score,
    save_badges,
    update_high_score,
)
from badge2048.config import SessionConfig, default_config
from badge2048.core.gamemove import Direction
from badge2048.game.reducer import RESTART, Action, GameState, create_initial_state, transition

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeUnlocked:
    """Event sent to listeners when a move unlocks badges."""

    tiers: list[BadgeTier]
    score: int
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class TwentyFortyEight:
    """
    A game session.

    The session owns the current game state and drives it through ``transition``. After every effective move it
    unlocks the badges reached by the score, saves them, records the high score, and tells listeners about new
    unlocks.
    """

    # ##: All Actions.
    ACTIONS = {'left': Direction.LEFT, 'up': Direction.UP, 'right': Direction.RIGHT, 'down': Direction.DOWN}

    def __init__(self, config: Optional[SessionConfig] = None, storage: Optional[Storage] = None):
        """
        Start a session with a new game.

        Parameters
        ----------
        config : SessionConfig, optional
            Session configuration (default is ``default_config()``).
        storage : Storage, optional
            Where badges and high scores are kept. Defaults to a JSON file when the configuration names one, to
            memory otherwise.
        """
        self.config = config or default_config()
        if storage is None:
            storage = JsonFileStorage(self.config.storage_path) if self.config.storage_path else MemoryStorage()
        self._storage = storage
        self._rng = default_rng(self.config.seed)
        self._listeners: list[Callable[[BadgeUnlocked], None]] = []

        self._badges: BadgeState = load_badges(self._storage)
        self._high_score: int = load_high_score(self._storage, self.config.network)
        self._state: GameState = create_initial_state(rng=self._rng)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> ndarray:
        return self._state.board

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def is_finished(self) -> bool:
        """Whether the current game is over."""
        return self._state.is_over

    @property
    def badges(self) -> BadgeState:
        return self._badges

    @property
    def high_score(self) -> int:
        return self._high_score

    def add_listener(self, listener: Callable[[BadgeUnlocked], None]) -> None:
        """Register a callback for badge unlock events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[BadgeUnlocked], None]) -> None:
        self._listeners.remove(listener)

    def _notify(self, event: BadgeUnlocked) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.exception('Badge listener %r failed', listener)

    def _record_progress(self) -> None:
        """Unlock badges and update the high score for the current score."""
        result = unlock_for_score(self.score, self._badges)
        if result.changed:
            self._badges = result.badges
            save_badges(self._badges, self._storage)

        if result.newly_unlocked:
            _logger.info(
                'Unlocked badges %s at score %d', ', '.join(tier.value for tier in result.newly_unlocked), self.score
            )
            self._notify(BadgeUnlocked(tiers=list(result.newly_unlocked), score=self.score))

        high_score, updated = update_high_score(self.score, self._storage, self.config.network)
        if updated:
            _logger.info('New high score: %d', high_score)
        self._high_score = high_score

    def dispatch(self, action: Action) -> GameState:
        """
        Apply any action to the current game.

        Returns
        -------
        GameState
            The new current state.
        """
        previous = self._state
        self._state = transition(previous, action, rng=self._rng)
        if self._state is not previous:
            self._record_progress()
        return self._state

    def reset(self, seed: Optional[int] = None) -> ndarray:
        """
        Start a new game; badges and high score are kept.

        Parameters
        ----------
        seed : int, optional
            Reseed the tile-spawning generator.

        Returns
        -------
        ndarray
            The new board.
        """
        if seed is not None:
            self._rng = default_rng(seed)
        self._state = transition(self._state, RESTART, rng=self._rng)
        return self.board

    def step(self, direction: Direction | int | str) -> tuple[ndarray, int, bool]:
        """
        Slide the tiles in one direction.

        Parameters
        ----------
        direction : Direction, int or str
            Direction of the move (0: left, 1: up, 2: right, 3: down, or the direction name).

        Returns
        -------
        tuple[ndarray, int, bool]
            A tuple containing:
            - The board after the move
            - The score gained by this move (0 when the move had no effect)
            - Whether the game is over
        """
        direction = Direction.from_name(direction) if isinstance(direction, str) else Direction(direction)
        previous_score = self.score
        self.dispatch(Action.slide(direction))
        return self.board, self.score - previous_score, self.is_finished

    def spawn(self, row: int, col: int, value: int) -> ndarray:
        """Place a tile by hand; invalid positions are ignored."""
        self.dispatch(Action.spawn_tile(row, col, value))
        return self.board

    def claim(self, tier: BadgeTier | str) -> bool:
        """
        Claim an unlocked badge.

        Returns
        -------
        bool
            True if the badge is claimed after the call (whether now or earlier), False if it is still locked.
        """
        result = claim_badge(BadgeTier(tier), self._badges)
        if result.changed:
            self._badges = result.badges
            save_badges(self._badges, self._storage)
        return result.claimed_badge is not None

    def render(self) -> str:
        """Render the board, score and status as text."""
        lines = [f'Score: {self.score}    Best: {self.high_score}']
        for row in self.board.tolist():
            lines.append(' \t'.join(str(cell) if cell else '.' for cell in row))
        if self.is_finished:
            lines.append('GAME OVER')
        return '\n'.join(lines)
