import numpy as np
import pytest

from badge2048.evaluate import evaluate, main, play_random_game


def test_random_game_reaches_game_over():
    state = play_random_game(np.random.default_rng(3))
    assert state.is_over
    assert state.score > 0


def test_move_limit():
    state = play_random_game(np.random.default_rng(3), max_moves=5)
    assert not state.is_over
    assert np.count_nonzero(state.board) <= 7


@pytest.mark.parametrize('seed', [0, 7])
def test_evaluate_is_reproducible(seed):
    first = evaluate(length=3, seed=seed, max_moves=50)
    second = evaluate(length=3, seed=seed, max_moves=50)
    assert first == second
    assert sum(first.max_tiles.values()) == 3


def test_main_prints_summary(capsys):
    main(['--games', '2', '--seed', '1', '--max-moves', '20'])
    out = capsys.readouterr().out
    assert 'Max tiles:' in out
    assert 'Mean score:' in out
