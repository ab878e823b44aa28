# -*- coding: utf-8 -*-
"""
Play 2048 in the terminal.
"""
import logging
from typing import Callable, Optional

from badge2048.badges.badge import BadgeState
from badge2048.config import SessionConfig, config_from_env
from badge2048.envs import BadgeUnlocked, TwentyFortyEight

KEYS = {'w': 'up', 'a': 'left', 's': 'down', 'd': 'right'}

HELP = 'Move with W/A/S/D, R to restart, C to claim unlocked badges, Q to quit.'


def describe_badges(badges: BadgeState) -> str:
    """
    One line per badge with its progress.

    Parameters
    ----------
    badges: BadgeState
        Badges to describe
    """
    lines = []
    for badge in badges:
        if badge.claimed:
            progress = 'claimed'
        elif badge.unlocked:
            progress = 'unlocked'
        else:
            progress = f'locked ({badge.threshold})'
        lines.append(f'  {badge.tier.value:<7} {progress}')
    return '\n'.join(lines)


def announce(event: BadgeUnlocked):
    """Print newly unlocked badges."""
    tiers = ', '.join(tier.value for tier in event.tiers)
    print(f'*** Badge unlocked: {tiers} (score {event.score}) ***')


def handle_key(envs: TwentyFortyEight, key: str) -> bool:
    """
    Handle one line of input.

    Parameters
    ----------
    envs: TwentyFortyEight
        The game session

    key: str
        Key typed by the player

    Returns
    -------
    bool
        False when the player quits, True otherwise.
    """
    key = key.strip().lower()

    if key == 'q':
        return False

    if key == 'r':
        envs.reset()
        return True

    if key == 'c':
        for badge in envs.badges:
            if badge.unlocked and not badge.claimed:
                envs.claim(badge.tier)
                print(f'Claimed {badge.tier.value} badge.')
        print(describe_badges(envs.badges))
        return True

    if key in KEYS:
        _, reward, terminated = envs.step(KEYS[key])
        if reward:
            print(f'+{reward}')
        if terminated:
            print('Game over! Press R to restart or Q to quit.')
        return True

    print(HELP)
    return True


def play(config: Optional[SessionConfig] = None, read: Callable[[str], str] = input) -> TwentyFortyEight:
    """Run the interactive loop until the player quits or the input ends."""
    env = TwentyFortyEight(config=config)
    env.add_listener(announce)

    print(HELP)
    print(env.render())
    while True:
        try:
            key = read('> ')
        except EOFError:
            break
        if not handle_key(env, key):
            break
        print(env.render())

    print(describe_badges(env.badges))
    return env


def main(argv=None) -> None:
    from argparse import ArgumentParser

    parser = ArgumentParser(description='Play 2048 in the terminal.')
    parser.add_argument('--network', type=str, default=None, help='testnet or mainnet')
    parser.add_argument('--storage', type=str, default=None, help='JSON file keeping badges and high scores')
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--log-level', type=str, default='WARNING')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    config = config_from_env()
    config = SessionConfig(
        network=args.network or config.network,
        storage_path=args.storage or config.storage_path,
        seed=args.seed if args.seed is not None else config.seed,
    )
    play(config)


if __name__ == '__main__':
    main()
