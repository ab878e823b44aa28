from unittest import TestCase, main

from badge2048.badges.badge import BadgeTier
from badge2048.badges.storage import MemoryStorage
from badge2048.config import SessionConfig
from badge2048.envs import TwentyFortyEight
from badge2048.game.reducer import GameState
from badge2048.manuals_control import describe_badges, handle_key, play


def scripted(keys):
    """Input function returning the given keys, then end of input."""
    keys = iter(keys)

    def read(prompt):
        try:
            return next(keys)
        except StopIteration:
            raise EOFError from None

    return read


class TestManualControl(TestCase):
    def setUp(self):
        self.env = TwentyFortyEight(config=SessionConfig(seed=0), storage=MemoryStorage())
        self.env._state = GameState(board=[[512, 512, None, None]] + [[None] * 4] * 3, score=0)

    def test_quit(self):
        self.assertFalse(handle_key(self.env, 'Q'))

    def test_move_and_claim(self):
        self.assertTrue(handle_key(self.env, 'a'))
        self.assertEqual(self.env.score, 1024)
        self.assertTrue(handle_key(self.env, 'c'))
        bronze = next(badge for badge in self.env.badges if badge.tier == BadgeTier.BRONZE)
        self.assertTrue(bronze.claimed)
        self.assertIn('claimed', describe_badges(self.env.badges))

    def test_restart(self):
        handle_key(self.env, 'a')
        self.assertTrue(handle_key(self.env, 'r'))
        self.assertEqual(self.env.score, 0)
        self.assertEqual(self.env.high_score, 1024)

    def test_unknown_key(self):
        before = self.env.state
        self.assertTrue(handle_key(self.env, 'x'))
        self.assertIs(self.env.state, before)

    def test_play_until_end_of_input(self):
        env = play(SessionConfig(seed=0), read=scripted(['a', 'd', 'w']))
        self.assertIsInstance(env, TwentyFortyEight)

    def test_play_until_quit(self):
        env = play(SessionConfig(seed=0), read=scripted(['q', 'a']))
        self.assertEqual(env.score, 0)


if __name__ == '__main__':
    main()
