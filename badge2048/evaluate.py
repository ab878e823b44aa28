# -*- coding: utf-8 -*-
"""
Evaluate how far a random player gets, in tiles and badges.
"""
import logging
from collections import Counter
from typing import Dict, NamedTuple, Optional

import numpy as np
from numpy.random import Generator, default_rng
from tqdm import trange

from badge2048.badges.badge import create_default_badges, unlock_for_score
from badge2048.core.gamemove import legal_directions
from badge2048.game.reducer import Action, GameState, create_initial_state, transition

_logger = logging.getLogger(__name__)


class Evaluation(NamedTuple):
    """Results of an evaluation run."""

    max_tiles: Dict[int, int]
    badges: Dict[str, int]
    mean_score: float


def play_random_game(rng: Generator, max_moves: Optional[int] = None) -> GameState:
    """
    Play one game with a uniformly random legal move at each step.

    Parameters
    ----------
    rng : Generator
        Generator used both for the moves and the tile spawns.
    max_moves : int, optional
        Stop after this many moves even if the game is not over.

    Returns
    -------
    GameState
        The final state.
    """
    state = create_initial_state(rng=rng)
    moves = 0
    while not state.is_over and (max_moves is None or moves < max_moves):
        directions = legal_directions(state.board)
        if not directions:
            break
        direction = directions[rng.integers(len(directions))]
        state = transition(state, Action.slide(direction), rng=rng)
        moves += 1
    return state


def evaluate(length: int = 10, seed: Optional[int] = None, max_moves: Optional[int] = None) -> Evaluation:
    """
    Play several random games.

    Parameters
    ----------
    length : int, optional
        The number of games to play (default is 10).
    seed : int, optional
        Seed for reproducible runs.
    max_moves : int, optional
        Move limit per game.

    Returns
    -------
    Evaluation
        Frequency of each max tile, number of games reaching each badge tier, and mean score.
    """
    rng = default_rng(seed)
    max_tiles = []
    tiers = Counter()
    scores = []

    with trange(length) as period:
        for num in period:
            state = play_random_game(rng, max_moves=max_moves)

            # ##: Badges reached by this game alone.
            unlocked = unlock_for_score(state.score, create_default_badges()).newly_unlocked
            tiers.update(tier.value for tier in unlocked)

            max_tiles.append(state.max_tile)
            scores.append(state.score)

            # ##: Log.
            period.set_description(f'Evaluation: {num + 1}')
            period.set_postfix(score=state.score, max=state.max_tile)

    mean_score = float(np.mean(scores)) if scores else 0.0
    _logger.info('Played %d games, mean score %.1f', length, mean_score)
    return Evaluation(max_tiles=dict(Counter(max_tiles)), badges=dict(tiers), mean_score=mean_score)


def main(argv=None) -> None:
    from argparse import ArgumentParser

    parser = ArgumentParser(description='Evaluate a random 2048 player.')
    parser.add_argument('--games', type=int, default=10)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--max-moves', type=int, default=None)
    parser.add_argument('--log-level', type=str, default='WARNING')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    result = evaluate(length=args.games, seed=args.seed, max_moves=args.max_moves)
    print(f'Max tiles: {dict(sorted(result.max_tiles.items()))}')
    print(f'Badges: {result.badges}')
    print(f'Mean score: {result.mean_score:.1f}')


if __name__ == '__main__':
    main()
