"""
Rank classification for five-rank multisets.

Hand score layout (plain int, numeric order == hand strength):
    bits 24–27  tier (HandCategory)
    bits  0–23  tie-break nibbles, most significant first

Tier order (strongest to weakest):
    straight_flush > four_of_a_kind > full_house > flush > straight >
    three_of_a_kind > two_pair > one_pair > high_card > none

classify_ranks() only runs while the lookup tables are built; the
evaluators never call it.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from enum import IntEnum

from .cards import RANK_ACE, RANK_FIVE


class HandCategory(IntEnum):
    NONE = 0
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9


TIER_SHIFT: int = 24
TIEBREAK_MASK: int = (1 << TIER_SHIFT) - 1

_CATEGORY_NAMES: dict[HandCategory, str] = {
    HandCategory.NONE: "None",
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
}

# Multiplicity pattern (group sizes, largest first) -> category.
_PATTERN_CATEGORIES: dict[tuple[int, ...], HandCategory] = {
    (4, 1): HandCategory.FOUR_OF_A_KIND,
    (3, 2): HandCategory.FULL_HOUSE,
    (3, 1, 1): HandCategory.THREE_OF_A_KIND,
    (2, 2, 1): HandCategory.TWO_PAIR,
    (2, 1, 1, 1): HandCategory.ONE_PAIR,
}

WHEEL_RANKS: tuple[int, ...] = (RANK_ACE, 3, 2, 1, 0)


# ─── Score helpers ────────────────────────────────────────────────────────────


def tier_of(category: HandCategory) -> int:
    """Return the tier bits for a category.

    Examples:
        >>> hex(tier_of(HandCategory.STRAIGHT_FLUSH))
        '0x9000000'
    """
    return int(category) << TIER_SHIFT


def pack_ranks(ranks: Iterable[int]) -> int:
    """Pack rank indices into tie-break nibbles, first rank most significant.

    Examples:
        >>> hex(pack_ranks([12, 11, 10, 9, 7]))
        '0xcba97'
    """
    packed = 0
    for rank in ranks:
        packed = (packed << 4) | rank
    return packed


def hand_category(score: int) -> HandCategory:
    """Return the HandCategory encoded in a hand score."""
    return HandCategory(score >> TIER_SHIFT)


def category_name(score: int) -> str:
    """Return a human-readable category name for a hand score.

    Examples:
        >>> category_name(classify_ranks([12, 12, 12, 12, 0]))
        'Four of a Kind'
    """
    return _CATEGORY_NAMES[hand_category(score)]


# ─── Classification ───────────────────────────────────────────────────────────


def classify_ranks(ranks: Iterable[int]) -> int:
    """Score five rank indices (repeats allowed), ignoring suits.

    Args:
        ranks: Five rank indices 0–12 in any order.

    Returns:
        Hand score. Five distinct ranks score as a straight or high card;
        repeated ranks score by multiplicity pattern. Five of one rank
        (impossible with a real deck) scores 0.

    Examples:
        >>> hex(classify_ranks([12, 11, 10, 9, 8]))   # broadway
        '0x500000c'
        >>> hex(classify_ranks([0, 1, 2, 3, 12]))     # wheel, 5-high
        '0x5000003'
        >>> hex(classify_ranks([5, 5, 5, 9, 9]))      # sevens full of jacks
        '0x7000059'
    """
    ordered = sorted(ranks, reverse=True)
    counts = Counter(ordered)

    if len(counts) == 5:
        if ordered[0] - ordered[4] == 4:
            return tier_of(HandCategory.STRAIGHT) | ordered[0]
        if tuple(ordered) == WHEEL_RANKS:
            return tier_of(HandCategory.STRAIGHT) | RANK_FIVE
        return tier_of(HandCategory.HIGH_CARD) | pack_ranks(ordered)

    # Larger groups first, higher rank first among equal sizes.
    groups = sorted(counts.items(), key=lambda rc: (rc[1], rc[0]), reverse=True)
    pattern = tuple(size for _, size in groups)
    category = _PATTERN_CATEGORIES.get(pattern)
    if category is None:
        return tier_of(HandCategory.NONE)
    return tier_of(category) | pack_ranks(rank for rank, _ in groups)


def is_straight_score(score: int) -> bool:
    """Return True if the score is in the straight tier."""
    return hand_category(score) == HandCategory.STRAIGHT
