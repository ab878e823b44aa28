"""
Key/value persistence of badges and high scores.

Storage backends expose the small string-to-string interface of browser local storage, so that the same payloads
can be written by any front end. Reads never fail: missing or corrupt data falls back to defaults, and legacy keys
are migrated to the current ones. Write failures are logged and ignored.
"""

import json
import logging
import math
import os
from pathlib import Path
from typing import Iterable, Optional, Protocol

from badge2048.badges.badge import Badge, BadgeState, create_default_badges, normalize_badge_state
from badge2048.config import Network

_logger = logging.getLogger(__name__)

BADGES_STORAGE_KEY = 'badges_v1'
LEGACY_BADGES_STORAGE_KEY = 'badges'

HIGH_SCORE_KEY = 'highScore_v1'
LEGACY_HIGH_SCORE_KEY = 'highScore'


class Storage(Protocol):
    """String key/value store."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Storage kept in a dictionary, lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    Storage persisted as a single JSON object in a file.

    Every write rewrites the whole file through a temporary file and an atomic rename.

    Parameters
    ----------
    path : Path
        Location of the JSON file; parent directories are created on first write.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._items = self._read()

    def _read(self) -> dict[str, str]:
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError:
            _logger.warning('Failed to read storage file %s, starting empty', self.path, exc_info=True)
            return {}

        try:
            parsed = json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError):
            _logger.warning('Corrupt storage file %s, starting empty', self.path)
            return {}

        if not isinstance(parsed, dict):
            _logger.warning('Unexpected content in storage file %s, starting empty', self.path)
            return {}
        return {str(key): value for key, value in parsed.items() if isinstance(value, str)}

    def _write(self, items: dict[str, str]) -> None:
        """Write all items to the file; on failure the previous file is kept and no temporary file remains."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            tmp_path.write_text(json.dumps(items, indent=2, sort_keys=True), encoding='utf-8')
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        items = {**self._items, key: value}
        self._write(items)
        self._items = items

    def remove_item(self, key: str) -> None:
        if key not in self._items:
            return
        items = {name: value for name, value in self._items.items() if name != key}
        self._write(items)
        self._items = items


# ##: Badges.


def _extract_badges(payload: object) -> Optional[list[Badge]]:
    """Accept either a bare list of badges or an object with a ``badges`` list; drop invalid entries."""
    if isinstance(payload, dict):
        payload = payload.get('badges')
    if not isinstance(payload, list):
        return None

    badges = [Badge.from_dict(item) for item in payload]
    return [badge for badge in badges if badge is not None]


def _read_badges(storage: Storage, key: str) -> Optional[BadgeState]:
    raw = storage.get_item(key)
    if not raw:
        return None

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        _logger.warning('Ignoring corrupt badge data under %r', key)
        return None

    extracted = _extract_badges(payload)
    if extracted is None:
        return None
    return normalize_badge_state(extracted)


def save_badges(badges: Iterable[Badge], storage: Storage) -> None:
    """Persist a badge set, normalized, under the current key."""
    payload = {'badges': [badge.to_dict() for badge in normalize_badge_state(badges)]}
    try:
        storage.set_item(BADGES_STORAGE_KEY, json.dumps(payload))
    except OSError:
        _logger.warning('Failed to save badges', exc_info=True)


def load_badges(storage: Optional[Storage]) -> BadgeState:
    """
    Load the badge set.

    Parameters
    ----------
    storage : Storage, optional
        Where to read from; without storage the defaults are returned.

    Returns
    -------
    BadgeState
        The stored set, normalized; the legacy key is used and migrated when the current key holds nothing usable;
        the defaults otherwise.
    """
    if storage is None:
        return create_default_badges()

    current = _read_badges(storage, BADGES_STORAGE_KEY)
    if current is not None:
        return current

    legacy = _read_badges(storage, LEGACY_BADGES_STORAGE_KEY)
    if legacy is not None:
        _logger.info('Migrating badges from legacy key %r', LEGACY_BADGES_STORAGE_KEY)
        save_badges(legacy, storage)
        return legacy

    return create_default_badges()


# ##: High scores.


def high_score_key(network: Network = Network.TESTNET) -> str:
    """Storage key of the high score; each network keeps its own."""
    return f'{HIGH_SCORE_KEY}_{Network(network).value}'


def _parse_score(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return math.floor(value)


def save_high_score(score: float, storage: Optional[Storage], network: Network = Network.TESTNET) -> None:
    """Persist a high score; negative or non-finite scores are ignored."""
    if storage is None:
        return
    if not math.isfinite(score) or score < 0:
        return
    try:
        storage.set_item(high_score_key(network), str(math.floor(score)))
    except OSError:
        _logger.warning('Failed to save high score', exc_info=True)


def load_high_score(storage: Optional[Storage], network: Network = Network.TESTNET) -> int:
    """
    Load the high score of a network.

    On testnet, scores stored before networks were separated are migrated to the per-network key. Mainnet never
    reuses them.
    """
    if storage is None:
        return 0

    current = _parse_score(storage.get_item(high_score_key(network)))
    if current is not None:
        return current

    if Network(network) is Network.TESTNET:
        for legacy_key in (HIGH_SCORE_KEY, LEGACY_HIGH_SCORE_KEY):
            legacy = _parse_score(storage.get_item(legacy_key))
            if legacy is not None:
                _logger.info('Migrating high score from legacy key %r', legacy_key)
                save_high_score(legacy, storage, network)
                return legacy

    return 0


def update_high_score(
    score: int, storage: Optional[Storage], network: Network = Network.TESTNET
) -> tuple[int, bool]:
    """
    Record a score if it beats the stored high score.

    Returns
    -------
    tuple[int, bool]
        The high score after the update, and whether it changed.
    """
    current = load_high_score(storage, network)
    if score > current:
        save_high_score(score, storage, network)
        return score, True
    return current, False
