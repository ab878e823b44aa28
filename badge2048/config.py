"""
Configuration of a game session.

Values come from the dataclass defaults, or from the environment through ``config_from_env``:

- ``BADGE2048_NETWORK``: ``testnet`` (default) or ``mainnet``. High scores are kept per network.
- ``BADGE2048_STORAGE``: path of the JSON file holding badges and high scores. Unset means in-memory storage.
- ``BADGE2048_SEED``: integer seed for tile spawning. Unset means a random seed.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

NETWORK_ENV = 'BADGE2048_NETWORK'
STORAGE_ENV = 'BADGE2048_STORAGE'
SEED_ENV = 'BADGE2048_SEED'


class Network(str, Enum):
    """
    Blockchain network the badges and scores belong to.

    TESTNET: development network, also holds scores saved before networks were separated.
    MAINNET: production network, starts from a clean slate.
    """

    TESTNET = 'testnet'
    MAINNET = 'mainnet'


@dataclass
class SessionConfig:
    """
    Configuration of a ``TwentyFortyEight`` session.

    Attributes are grouped by concern.
    """

    # ##>: Network scoping the high score.
    network: Network = Network.TESTNET

    # ##>: Persistence (None keeps everything in memory).
    storage_path: Optional[Path] = None

    # ##>: Seed of the tile-spawning generator (None for a random seed).
    seed: Optional[int] = None

    def __post_init__(self):
        try:
            self.network = Network(self.network)
        except ValueError as error:
            raise ValueError(f'Unknown network: {self.network!r}') from error
        if self.storage_path is not None:
            self.storage_path = Path(self.storage_path)


def default_config() -> SessionConfig:
    """
    Create the default configuration: testnet, in-memory storage, random seed.

    Returns
    -------
    SessionConfig
        Default configuration.
    """
    return SessionConfig()


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> SessionConfig:
    """
    Create a configuration from environment variables.

    Parameters
    ----------
    environ : mapping, optional
        Variables to read; defaults to ``os.environ``.

    Returns
    -------
    SessionConfig
        Configuration with every unset variable left at its default.

    Raises
    ------
    ValueError
        If the network is unknown or the seed is not an integer.
    """
    environ = os.environ if environ is None else environ

    network = environ.get(NETWORK_ENV, '').strip().lower() or Network.TESTNET
    storage = environ.get(STORAGE_ENV, '').strip()
    seed = environ.get(SEED_ENV, '').strip()

    return SessionConfig(
        network=network,
        storage_path=Path(storage).expanduser() if storage else None,
        seed=int(seed) if seed else None,
    )
