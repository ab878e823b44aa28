"""
Tests for badge unlocking, claiming and on-chain bookkeeping.
"""

from dataclasses import replace
from unittest import TestCase, main

from badge2048.badges.badge import (
    DEFAULT_BADGES,
    Badge,
    BadgeTier,
    badge_needs_minting,
    badge_states_equal,
    claim_badge,
    merge_onchain_badges,
    normalize_badge_state,
    reset_badges,
    unlock_for_score,
    with_onchain_data,
)


def find(badges, tier):
    return next(badge for badge in badges if badge.tier == tier)


def with_badge(badge):
    """Default set where one tier is replaced."""
    return tuple(badge if default.tier == badge.tier else default for default in DEFAULT_BADGES)


MINTED_BRONZE = Badge(
    tier=BadgeTier.BRONZE,
    threshold=1024,
    unlocked=True,
    claimed=True,
    claimed_at='2026-01-25T10:00:00.000Z',
    onchain_minted=True,
    token_id=1,
    tx_id='0xabc',
    minted_at='2026-01-25T10:00:00.000Z',
)


class TestUnlock(TestCase):
    """unlock_for_score."""

    def test_low_score(self):
        result = unlock_for_score(512, DEFAULT_BADGES)
        self.assertEqual(result.badges, DEFAULT_BADGES)
        self.assertFalse(result.changed)
        self.assertEqual(result.newly_unlocked, [])

    def test_bronze_at_threshold(self):
        result = unlock_for_score(1024, DEFAULT_BADGES)
        unlocked = [badge.tier for badge in result.badges if badge.unlocked]
        self.assertEqual(unlocked, [BadgeTier.BRONZE])
        self.assertFalse(find(result.badges, BadgeTier.BRONZE).claimed)
        self.assertEqual(result.newly_unlocked, [BadgeTier.BRONZE])
        self.assertTrue(result.changed)

    def test_multiple_tiers(self):
        result = unlock_for_score(5000, DEFAULT_BADGES)
        unlocked = [badge.tier for badge in result.badges if badge.unlocked]
        self.assertEqual(unlocked, [BadgeTier.BRONZE, BadgeTier.SILVER, BadgeTier.GOLD])
        self.assertEqual(result.newly_unlocked, [BadgeTier.BRONZE, BadgeTier.SILVER, BadgeTier.GOLD])
        self.assertFalse(find(result.badges, BadgeTier.ELITE).unlocked)

    def test_no_relock(self):
        pre_unlocked = with_badge(replace(DEFAULT_BADGES[0], unlocked=True))
        result = unlock_for_score(1024, pre_unlocked)
        self.assertEqual(result.badges, pre_unlocked)
        self.assertEqual(result.newly_unlocked, [])
        self.assertFalse(result.changed)

        lower = unlock_for_score(0, pre_unlocked)
        self.assertTrue(find(lower.badges, BadgeTier.BRONZE).unlocked)

    def test_partial_input_is_normalized(self):
        partial = [Badge(tier=BadgeTier.SILVER, threshold=2048, unlocked=True)]
        result = unlock_for_score(0, partial)
        self.assertEqual(len(result.badges), 4)
        self.assertTrue(result.changed)
        self.assertEqual(result.newly_unlocked, [])

    def test_preserves_onchain_fields(self):
        result = unlock_for_score(2048, with_badge(MINTED_BRONZE))
        self.assertEqual(find(result.badges, BadgeTier.BRONZE), MINTED_BRONZE)
        self.assertEqual(result.newly_unlocked, [BadgeTier.SILVER])


class TestNormalize(TestCase):
    """normalize_badge_state."""

    def test_fills_missing_tiers(self):
        normalized = normalize_badge_state([Badge(tier=BadgeTier.SILVER, threshold=2048, unlocked=True)])
        self.assertEqual([badge.tier for badge in normalized], list(BadgeTier))
        self.assertTrue(find(normalized, BadgeTier.SILVER).unlocked)
        self.assertFalse(find(normalized, BadgeTier.BRONZE).unlocked)

    def test_threshold_comes_from_defaults(self):
        normalized = normalize_badge_state([Badge(tier=BadgeTier.GOLD, threshold=1, unlocked=False)])
        self.assertEqual(find(normalized, BadgeTier.GOLD).threshold, 4096)

    def test_claimed_implies_unlocked(self):
        normalized = normalize_badge_state([Badge(tier=BadgeTier.GOLD, threshold=4096, claimed=True)])
        self.assertTrue(find(normalized, BadgeTier.GOLD).unlocked)

    def test_keeps_metadata(self):
        normalized = normalize_badge_state([MINTED_BRONZE])
        self.assertEqual(find(normalized, BadgeTier.BRONZE).token_id, 1)
        self.assertIsNone(find(normalized, BadgeTier.SILVER).token_id)

    def test_reset(self):
        self.assertEqual(reset_badges(), DEFAULT_BADGES)


class TestClaim(TestCase):
    """claim_badge."""

    def test_claim_unlocked(self):
        unlocked = unlock_for_score(2048, DEFAULT_BADGES).badges
        result = claim_badge(BadgeTier.BRONZE, unlocked, claimed_at='2026-01-24T10:15:30.000Z')
        self.assertTrue(result.changed)
        self.assertTrue(result.claimed_badge.claimed)
        self.assertEqual(result.claimed_badge.claimed_at, '2026-01-24T10:15:30.000Z')
        self.assertTrue(find(result.badges, BadgeTier.BRONZE).claimed)
        self.assertFalse(find(result.badges, BadgeTier.SILVER).claimed)

    def test_claim_defaults_to_now(self):
        unlocked = unlock_for_score(1024, DEFAULT_BADGES).badges
        result = claim_badge('bronze', unlocked)
        self.assertTrue(result.claimed_badge.claimed_at.endswith('Z'))

    def test_claim_locked(self):
        result = claim_badge(BadgeTier.ELITE, DEFAULT_BADGES)
        self.assertFalse(result.changed)
        self.assertIsNone(result.claimed_badge)
        self.assertFalse(find(result.badges, BadgeTier.ELITE).claimed)

    def test_claim_twice(self):
        unlocked = unlock_for_score(1024, DEFAULT_BADGES).badges
        first = claim_badge(BadgeTier.BRONZE, unlocked, claimed_at='2026-01-01T00:00:00.000Z')
        second = claim_badge(BadgeTier.BRONZE, first.badges, claimed_at='2026-02-01T00:00:00.000Z')
        self.assertFalse(second.changed)
        self.assertEqual(second.claimed_badge.claimed_at, '2026-01-01T00:00:00.000Z')

    def test_claim_keeps_other_onchain_fields(self):
        silver = replace(DEFAULT_BADGES[1], unlocked=True)
        state = (MINTED_BRONZE, silver) + DEFAULT_BADGES[2:]
        result = claim_badge(BadgeTier.SILVER, state, claimed_at='2026-01-25T12:00:00.000Z')
        self.assertEqual(find(result.badges, BadgeTier.BRONZE), MINTED_BRONZE)

    def test_claim_keeps_own_metadata(self):
        silver = Badge(
            tier=BadgeTier.SILVER,
            threshold=2048,
            unlocked=True,
            onchain_minted=False,
            token_id=0,
            tx_id='0xprev',
        )
        result = claim_badge(BadgeTier.SILVER, with_badge(silver), claimed_at='2026-01-25T12:00:00.000Z')
        self.assertFalse(result.claimed_badge.onchain_minted)
        self.assertEqual(result.claimed_badge.token_id, 0)
        self.assertEqual(result.claimed_badge.tx_id, '0xprev')


class TestOnchain(TestCase):
    """Mint bookkeeping helpers."""

    def test_needs_minting(self):
        claimed = Badge(tier=BadgeTier.BRONZE, threshold=1024, unlocked=True, claimed=True)
        self.assertTrue(badge_needs_minting(claimed))
        self.assertFalse(badge_needs_minting(MINTED_BRONZE))
        self.assertFalse(badge_needs_minting(replace(claimed, claimed=False)))
        self.assertFalse(badge_needs_minting(DEFAULT_BADGES[2]))

    def test_with_onchain_data(self):
        claimed = Badge(
            tier=BadgeTier.BRONZE, threshold=1024, unlocked=True, claimed=True, claimed_at='2026-01-25T10:00:00.000Z'
        )
        updated = with_onchain_data(claimed, token_id=42, tx_id='0xabc', minted_at='2026-01-25T10:10:00.000Z')
        self.assertTrue(updated.onchain_minted)
        self.assertEqual(updated.token_id, 42)
        self.assertEqual(updated.tx_id, '0xabc')
        self.assertEqual(updated.claimed_at, '2026-01-25T10:00:00.000Z')
        self.assertTrue(updated.claimed)

    def test_merge_onchain(self):
        offchain = normalize_badge_state([Badge(tier=BadgeTier.BRONZE, threshold=1024, unlocked=True, claimed=True)])
        merged = merge_onchain_badges(offchain, {BadgeTier.BRONZE: {'token_id': 1, 'tx_id': '0xbronze'}})
        bronze = find(merged, BadgeTier.BRONZE)
        self.assertTrue(bronze.onchain_minted)
        self.assertEqual(bronze.tx_id, '0xbronze')
        self.assertIsNone(bronze.minted_at)
        self.assertIsNone(find(merged, BadgeTier.SILVER).onchain_minted)

    def test_merge_without_records(self):
        offchain = normalize_badge_state(DEFAULT_BADGES)
        self.assertTrue(badge_states_equal(merge_onchain_badges(offchain, {}), offchain))

    def test_states_differ_on_metadata(self):
        other = replace(MINTED_BRONZE, token_id=2)
        self.assertFalse(badge_states_equal(with_badge(MINTED_BRONZE), with_badge(other)))
        self.assertTrue(badge_states_equal(list(with_badge(MINTED_BRONZE)), with_badge(MINTED_BRONZE)))


class TestBadgeSerialization(TestCase):
    """Badge.to_dict and Badge.from_dict."""

    def test_to_dict_omits_unset_metadata(self):
        self.assertEqual(
            DEFAULT_BADGES[0].to_dict(), {'tier': 'bronze', 'threshold': 1024, 'unlocked': False, 'claimed': False}
        )
        self.assertEqual(MINTED_BRONZE.to_dict()['tokenId'], 1)

    def test_from_dict(self):
        self.assertEqual(Badge.from_dict(MINTED_BRONZE.to_dict()), MINTED_BRONZE)

    def test_from_dict_accepts_integral_float_token(self):
        payload = {**MINTED_BRONZE.to_dict(), 'tokenId': 3.0}
        self.assertEqual(Badge.from_dict(payload).token_id, 3)

    def test_from_dict_rejects_invalid(self):
        valid = {'tier': 'gold', 'threshold': 4096, 'unlocked': True, 'claimed': False}
        self.assertIsNotNone(Badge.from_dict(valid))
        for key, value in (
            ('tier', 'platinum'),
            ('threshold', '4096'),
            ('unlocked', 1),
            ('onchainMinted', 'true'),
            ('tokenId', '1'),
            ('tokenId', True),
            ('tokenId', 1.5),
            ('txId', 12345),
            ('mintedAt', 1234567890),
        ):
            self.assertIsNone(Badge.from_dict({**valid, key: value}), key)
        self.assertIsNone(Badge.from_dict(['gold']))


if __name__ == '__main__':
    main()
