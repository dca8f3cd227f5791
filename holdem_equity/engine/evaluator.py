"""
Five- and seven-card hand evaluation over packed cards.

Scalar path (evaluate5 / evaluate7) works on Python ints and the list views
of the lookup tables. Batch path (evaluate5_batch / evaluate7_batch) works
on int64 numpy arrays and is what the equity solver uses per chunk of
boards. Both return identical scores.

Higher score = stronger hand; equal scores tie.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .cards import PRIME_MASK, PRIME_SHIFT, RANK_MASK, SUIT_MASK
from .tables import LookupTables, get_tables

# The 21 five-card subsets of a seven-card hand, as index tuples.
SEVEN_CARD_SUBSETS: tuple[tuple[int, int, int, int, int], ...] = (
    (0, 1, 2, 3, 4), (0, 1, 2, 3, 5), (0, 1, 2, 3, 6), (0, 1, 2, 4, 5),
    (0, 1, 2, 4, 6), (0, 1, 2, 5, 6), (0, 1, 3, 4, 5), (0, 1, 3, 4, 6),
    (0, 1, 3, 5, 6), (0, 1, 4, 5, 6), (0, 2, 3, 4, 5), (0, 2, 3, 4, 6),
    (0, 2, 3, 5, 6), (0, 2, 4, 5, 6), (0, 3, 4, 5, 6), (1, 2, 3, 4, 5),
    (1, 2, 3, 4, 6), (1, 2, 3, 5, 6), (1, 2, 4, 5, 6), (1, 3, 4, 5, 6),
    (2, 3, 4, 5, 6),
)

_SUBSET_INDEX: np.ndarray = np.array(SEVEN_CARD_SUBSETS, dtype=np.intp)


# ─── Scalar evaluation ────────────────────────────────────────────────────────


def _score5(c1: int, c2: int, c3: int, c4: int, c5: int, tables: LookupTables) -> int:
    if c1 & c2 & c3 & c4 & c5 & SUIT_MASK:
        return tables.flush_list[(c1 | c2 | c3 | c4 | c5) & RANK_MASK]
    product = (
        ((c1 >> PRIME_SHIFT) & PRIME_MASK)
        * ((c2 >> PRIME_SHIFT) & PRIME_MASK)
        * ((c3 >> PRIME_SHIFT) & PRIME_MASK)
        * ((c4 >> PRIME_SHIFT) & PRIME_MASK)
        * ((c5 >> PRIME_SHIFT) & PRIME_MASK)
    )
    return tables.lookup(product)


def evaluate5(cards: Sequence[int], tables: LookupTables | None = None) -> int:
    """Return the score of exactly five packed cards.

    Args:
        cards:  Five packed card integers.
        tables: Lookup tables; defaults to the process-wide instance.

    Examples:
        >>> from holdem_equity.engine.cards import parse_cards
        >>> from holdem_equity.engine.classify import category_name
        >>> category_name(evaluate5(parse_cards('As Ks Qs Js Ts')))
        'Straight Flush'
    """
    if tables is None:
        tables = get_tables()
    c1, c2, c3, c4, c5 = cards
    return _score5(c1, c2, c3, c4, c5, tables)


def evaluate7(cards: Sequence[int], tables: LookupTables | None = None) -> int:
    """Return the best five-card score within seven packed cards.

    Examples:
        >>> from holdem_equity.engine.cards import parse_cards
        >>> from holdem_equity.engine.classify import category_name
        >>> category_name(evaluate7(parse_cards('Td Tc Qs Js 9h 8c 2d')))
        'Straight'
    """
    if tables is None:
        tables = get_tables()
    best = 0
    for a, b, c, d, e in SEVEN_CARD_SUBSETS:
        score = _score5(cards[a], cards[b], cards[c], cards[d], cards[e], tables)
        if score > best:
            best = score
    return best


# ─── Batch evaluation ─────────────────────────────────────────────────────────


def evaluate5_batch(hands: np.ndarray, tables: LookupTables | None = None) -> np.ndarray:
    """Score an (n, 5) array of packed cards.

    Returns:
        int64 array of shape (n,).
    """
    if tables is None:
        tables = get_tables()
    hands = np.asarray(hands, dtype=np.int64)
    suited = (np.bitwise_and.reduce(hands, axis=1) & SUIT_MASK) != 0
    products = np.prod((hands >> PRIME_SHIFT) & PRIME_MASK, axis=1)

    scores = np.empty(len(hands), dtype=np.int64)
    if suited.any():
        rank_masks = np.bitwise_or.reduce(hands[suited], axis=1) & RANK_MASK
        scores[suited] = tables.flush[rank_masks]
    unsuited = ~suited
    if unsuited.any():
        scores[unsuited] = tables.lookup_many(products[unsuited])
    return scores


def evaluate7_batch(hands: np.ndarray, tables: LookupTables | None = None) -> np.ndarray:
    """Score an (n, 7) array of packed cards (best of the 21 subsets).

    Returns:
        int64 array of shape (n,).
    """
    hands = np.asarray(hands, dtype=np.int64)
    n = len(hands)
    if n == 0:
        return np.zeros(0, dtype=np.int64)
    subsets = hands[:, _SUBSET_INDEX].reshape(n * len(SEVEN_CARD_SUBSETS), 5)
    return evaluate5_batch(subsets, tables).reshape(n, len(SEVEN_CARD_SUBSETS)).max(axis=1)
