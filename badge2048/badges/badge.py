"""
Badges rewarded for reaching score thresholds.

A badge goes through three stages: it is unlocked once the score reaches its threshold, then the player may claim
it, and finally the external minting service records on-chain metadata on it. All functions here are pure: they take
a badge set and return a new one.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple, Optional

_logger = logging.getLogger(__name__)


class BadgeTier(str, Enum):
    """Badge levels, in threshold order."""

    BRONZE = 'bronze'
    SILVER = 'silver'
    GOLD = 'gold'
    ELITE = 'elite'


@dataclass(frozen=True)
class Badge:
    """
    A single badge and its progress.

    Attributes
    ----------
    tier : BadgeTier
        Badge level.
    threshold : int
        Score required to unlock the badge.
    unlocked : bool
        Whether the threshold has been reached.
    claimed : bool
        Whether the player claimed the badge. Only an unlocked badge can be claimed.
    claimed_at : str, optional
        ISO-8601 timestamp of the claim.
    onchain_minted : bool, optional
        Whether the badge was minted on chain.
    token_id : int, optional
        Token identifier assigned by the contract.
    tx_id : str, optional
        Identifier of the mint transaction.
    minted_at : str, optional
        ISO-8601 timestamp of the mint.
    """

    tier: BadgeTier
    threshold: int
    unlocked: bool = False
    claimed: bool = False
    claimed_at: Optional[str] = None
    onchain_minted: Optional[bool] = None
    token_id: Optional[int] = None
    tx_id: Optional[str] = None
    minted_at: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'tier', BadgeTier(self.tier))

    def to_dict(self) -> dict[str, Any]:
        """Serialize the badge with the storage field names, leaving out unset metadata."""
        payload = {
            'tier': self.tier.value,
            'threshold': self.threshold,
            'unlocked': self.unlocked,
            'claimed': self.claimed,
        }
        for key, value in (
            ('claimedAt', self.claimed_at),
            ('onchainMinted', self.onchain_minted),
            ('tokenId', self.token_id),
            ('txId', self.tx_id),
            ('mintedAt', self.minted_at),
        ):
            if value is not None:
                payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, payload: Any) -> Optional['Badge']:
        """
        Parse a stored badge.

        Returns None when the payload is not a valid badge: unknown tier, or any field with the wrong type.
        """
        if not isinstance(payload, Mapping):
            return None

        try:
            tier = BadgeTier(payload.get('tier'))
        except ValueError:
            return None

        threshold = payload.get('threshold')
        if not _is_number(threshold):
            return None
        if not isinstance(payload.get('unlocked'), bool) or not isinstance(payload.get('claimed'), bool):
            return None

        optional_types = {
            'claimedAt': str,
            'onchainMinted': bool,
            'tokenId': int,
            'txId': str,
            'mintedAt': str,
        }
        for key, expected in optional_types.items():
            value = payload.get(key)
            if value is None:
                continue
            if expected is int and not (_is_number(value) and (isinstance(value, int) or value.is_integer())):
                return None
            if expected is not int and not isinstance(value, expected):
                return None

        token_id = payload.get('tokenId')
        return cls(
            tier=tier,
            threshold=int(threshold),
            unlocked=payload['unlocked'],
            claimed=payload['claimed'],
            claimed_at=payload.get('claimedAt'),
            onchain_minted=payload.get('onchainMinted'),
            token_id=int(token_id) if token_id is not None else None,
            tx_id=payload.get('txId'),
            minted_at=payload.get('mintedAt'),
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


BadgeState = tuple[Badge, ...]

DEFAULT_BADGES: BadgeState = (
    Badge(tier=BadgeTier.BRONZE, threshold=1024),
    Badge(tier=BadgeTier.SILVER, threshold=2048),
    Badge(tier=BadgeTier.GOLD, threshold=4096),
    Badge(tier=BadgeTier.ELITE, threshold=8192),
)


class UnlockResult(NamedTuple):
    """Outcome of ``unlock_for_score``."""

    badges: BadgeState
    changed: bool
    newly_unlocked: list[BadgeTier]


class ClaimResult(NamedTuple):
    """Outcome of ``claim_badge``."""

    badges: BadgeState
    changed: bool
    claimed_badge: Optional[Badge]


def create_default_badges() -> BadgeState:
    """Return the badge set of a new player: every tier locked."""
    return DEFAULT_BADGES


def reset_badges() -> BadgeState:
    """Drop all progress. Unlocking is otherwise never reverted, so this is for tests and reset tooling only."""
    _logger.info('Resetting badges to defaults')
    return create_default_badges()


def normalize_badge_state(badges: Iterable[Badge]) -> BadgeState:
    """
    Bring a possibly partial badge set into canonical form.

    The result holds exactly one badge per tier, in tier order. Thresholds come from the defaults; flags and metadata
    come from the given badges, the last one winning when a tier appears twice. A claimed badge is always unlocked.
    """
    by_tier = {badge.tier: badge for badge in badges}

    normalized = []
    for default in DEFAULT_BADGES:
        stored = by_tier.get(default.tier)
        if stored is None:
            normalized.append(default)
            continue
        normalized.append(
            replace(stored, threshold=default.threshold, unlocked=stored.unlocked or stored.claimed)
        )
    return tuple(normalized)


def badge_states_equal(left: Iterable[Badge], right: Iterable[Badge]) -> bool:
    """Compare two badge sets field by field, metadata included."""
    return tuple(left) == tuple(right)


def unlock_for_score(score: int, badges: Iterable[Badge]) -> UnlockResult:
    """
    Unlock every badge whose threshold is reached by a score.

    Parameters
    ----------
    score : int
        Current score.
    badges : iterable of Badge
        Current badge set, normalized first.

    Returns
    -------
    UnlockResult
        - badges: the updated, normalized set.
        - changed: whether the result differs from the given set (normalization included).
        - newly_unlocked: the tiers unlocked by this call, in threshold order.
    """
    badges = tuple(badges)
    normalized = normalize_badge_state(badges)

    newly_unlocked = []
    updated = []
    for badge in normalized:
        if not badge.unlocked and score >= badge.threshold:
            newly_unlocked.append(badge.tier)
            badge = replace(badge, unlocked=True)
        updated.append(badge)
    updated = tuple(updated)

    changed = not badge_states_equal(normalized, badges) or not badge_states_equal(updated, normalized)
    return UnlockResult(badges=updated, changed=changed, newly_unlocked=newly_unlocked)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def claim_badge(tier: BadgeTier, badges: Iterable[Badge], claimed_at: Optional[str] = None) -> ClaimResult:
    """
    Claim an unlocked badge.

    Parameters
    ----------
    tier : BadgeTier
        Tier to claim.
    badges : iterable of Badge
        Current badge set.
    claimed_at : str, optional
        Timestamp recorded on the badge; defaults to now (UTC).

    Returns
    -------
    ClaimResult
        - badges: the updated, normalized set.
        - changed: whether anything changed.
        - claimed_badge: the claimed badge; the existing badge if it was already claimed; None if it is locked.
    """
    tier = BadgeTier(tier)
    badges = tuple(badges)
    normalized = normalize_badge_state(badges)
    index = [badge.tier for badge in normalized].index(tier)
    badge = normalized[index]

    if not badge.unlocked:
        _logger.debug('Cannot claim %s: badge is locked', tier.value)
        return ClaimResult(badges=normalized, changed=not badge_states_equal(normalized, badges), claimed_badge=None)

    if badge.claimed:
        return ClaimResult(badges=normalized, changed=not badge_states_equal(normalized, badges), claimed_badge=badge)

    claimed = replace(badge, claimed=True, claimed_at=claimed_at or _now_iso())
    updated = normalized[:index] + (claimed,) + normalized[index + 1 :]
    _logger.info('Claimed %s badge', tier.value)
    return ClaimResult(badges=updated, changed=True, claimed_badge=claimed)


def badge_needs_minting(badge: Badge) -> bool:
    """A badge needs minting once claimed, until the on-chain mint is recorded."""
    return badge.claimed and not badge.onchain_minted


def with_onchain_data(
    badge: Badge, token_id: int, tx_id: Optional[str] = None, minted_at: Optional[str] = None
) -> Badge:
    """Record the on-chain mint of a badge; other fields are kept."""
    return replace(badge, onchain_minted=True, token_id=token_id, tx_id=tx_id, minted_at=minted_at)


def merge_onchain_badges(badges: Iterable[Badge], onchain_by_tier: Mapping[BadgeTier, Mapping[str, Any]]) -> BadgeState:
    """
    Merge on-chain mint records into a badge set.

    Parameters
    ----------
    badges : iterable of Badge
        Current badge set.
    onchain_by_tier : mapping
        For each minted tier, a mapping with ``token_id`` and optionally ``tx_id`` and ``minted_at``.

    Returns
    -------
    BadgeState
        The normalized set; tiers absent from ``onchain_by_tier`` are unchanged.
    """
    merged = []
    for badge in normalize_badge_state(badges):
        record = onchain_by_tier.get(badge.tier)
        if record is None:
            merged.append(badge)
            continue
        merged.append(
            with_onchain_data(
                badge, token_id=record['token_id'], tx_id=record.get('tx_id'), minted_at=record.get('minted_at')
            )
        )
    return tuple(merged)
