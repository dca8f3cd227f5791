"""
Lookup tables for O(1) five-card evaluation.

Two independent tables, built once per process:

    flush table   8192 entries indexed directly by the 13-bit rank mask of a
                  five-card flush. Only masks with exactly five bits set hold
                  a score (straight flush or flush); every other entry is 0.

    prime table   Open-addressed hash table (linear probing, power-of-two
                  size) mapping the prime product of every five-rank
                  multiset (6188 of them, C(17, 5)) to its classified score.
                  Product 0 marks an empty slot.

Both tables are numpy arrays flagged read-only once built. Scalar lookups go
through plain-list views of the same data, which index faster than numpy
scalars in the per-card hot loop.

Initialisation is guarded by a lock: init_engine() / get_tables() may be
called from any thread, and every caller receives the same instance.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np

from .cards import NUM_RANKS, PRIMES
from .classify import HandCategory, TIEBREAK_MASK, classify_ranks, is_straight_score, pack_ranks, tier_of

logger = logging.getLogger(__name__)

# ─── Constants ────────────────────────────────────────────────────────────────

FLUSH_TABLE_SIZE: int = 1 << NUM_RANKS
"""One entry per 13-bit rank mask."""

HASH_BITS: int = 15
"""log2 of the prime-table size; 32768 slots for 6188 keys."""

NUM_RANK_MULTISETS: int = 6188
"""Non-decreasing five-rank sequences over 13 ranks: C(13 + 5 - 1, 5)."""

NUM_FLUSH_MASKS: int = 1287
"""13-bit masks with exactly five bits set: C(13, 5)."""


class TableBuildError(RuntimeError):
    """Raised when the lookup tables cannot be constructed."""


# ─── Hashing ──────────────────────────────────────────────────────────────────


def fold_hash(product: int | np.ndarray) -> int | np.ndarray:
    """Spread a prime product so high bits reach the low (masked) bits.

    Works on Python ints and on int64 numpy arrays alike; the caller masks
    the result to the table size.

    Examples:
        >>> fold_hash(2 ** 5) & 0x7FFF
        576
    """
    return product + (product >> 11) + product * 17


# ─── Enumeration ──────────────────────────────────────────────────────────────


def iter_rank_multisets(size: int = 5) -> Iterator[tuple[int, ...]]:
    """Yield every non-decreasing sequence of ``size`` rank indices.

    Iterative successor over combinations with repetition: each multiset is
    visited exactly once, starting from (0, 0, 0, 0, 0) and ending at
    (12, 12, 12, 12, 12).

    Examples:
        >>> sum(1 for _ in iter_rank_multisets())
        6188
        >>> next(iter_rank_multisets())
        (0, 0, 0, 0, 0)
    """
    ranks = [0] * size
    top = NUM_RANKS - 1
    while True:
        yield tuple(ranks)
        i = size - 1
        while i >= 0 and ranks[i] == top:
            i -= 1
        if i < 0:
            return
        value = ranks[i] + 1
        for j in range(i, size):
            ranks[j] = value


def prime_product(ranks: tuple[int, ...]) -> int:
    """Return the product of the primes of the given rank indices."""
    product = 1
    for rank in ranks:
        product *= PRIMES[rank]
    return product


# ─── Builders ─────────────────────────────────────────────────────────────────


def build_flush_table() -> np.ndarray:
    """Return the direct-indexed flush / straight-flush table.

    Returns:
        int32 array of shape (8192,). Entries for masks with five bits set
        hold a straight-flush or flush score; all others are 0.
    """
    table = np.zeros(FLUSH_TABLE_SIZE, dtype=np.int32)
    for mask in range(FLUSH_TABLE_SIZE):
        if mask.bit_count() != 5:
            continue
        ranks = [r for r in range(NUM_RANKS - 1, -1, -1) if (mask >> r) & 1]
        score = classify_ranks(ranks)
        if is_straight_score(score):
            table[mask] = tier_of(HandCategory.STRAIGHT_FLUSH) | (score & TIEBREAK_MASK)
        else:
            table[mask] = tier_of(HandCategory.FLUSH) | pack_ranks(ranks)
    return table


def _insert(products: np.ndarray, scores: np.ndarray, mask: int, product: int, score: int) -> None:
    """Insert (product, score) with linear probing; existing products are kept."""
    idx = fold_hash(product) & mask
    while products[idx] != 0:
        if products[idx] == product:
            return
        idx = (idx + 1) & mask
    products[idx] = product
    scores[idx] = score


def build_prime_table(hash_bits: int = HASH_BITS) -> tuple[np.ndarray, np.ndarray]:
    """Return the (products, scores) arrays of the open-addressed prime table.

    Args:
        hash_bits: log2 of the table size.

    Raises:
        TableBuildError: If the table cannot hold every rank multiset.
    """
    size = 1 << hash_bits
    if size <= NUM_RANK_MULTISETS:
        raise TableBuildError(
            f"Prime table of {size} slots cannot hold {NUM_RANK_MULTISETS} rank multisets."
        )
    mask = size - 1
    try:
        products = np.zeros(size, dtype=np.int64)
        scores = np.zeros(size, dtype=np.int32)
    except MemoryError as exc:
        raise TableBuildError(f"Could not allocate a prime table of {size} slots.") from exc

    for ranks in iter_rank_multisets():
        _insert(products, scores, mask, prime_product(ranks), classify_ranks(ranks))
    return products, scores


# ─── Table container ──────────────────────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class LookupTables:
    """Immutable evaluation tables.

    Attributes:
        flush:          int32[8192] flush / straight-flush scores by rank mask.
        products:       int64 prime products; 0 = empty slot.
        scores:         int32 scores, parallel to products.
        mask:           len(products) - 1.
        flush_list:     list view of flush for scalar lookups.
        products_list:  list view of products for scalar lookups.
        scores_list:    list view of scores for scalar lookups.
    """

    flush: np.ndarray
    products: np.ndarray
    scores: np.ndarray
    mask: int
    flush_list: list[int] = field(repr=False)
    products_list: list[int] = field(repr=False)
    scores_list: list[int] = field(repr=False)

    def lookup(self, product: int) -> int:
        """Return the score stored for a prime product.

        Raises:
            LookupError: If the product is not in the table.
        """
        products = self.products_list
        mask = self.mask
        idx = fold_hash(product) & mask
        stored = products[idx]
        while stored != product:
            if stored == 0:
                raise LookupError(f"Prime product {product} is not in the table.")
            idx = (idx + 1) & mask
            stored = products[idx]
        return self.scores_list[idx]

    def lookup_many(self, products: np.ndarray) -> np.ndarray:
        """Vectorised lookup of an int64 array of prime products.

        Raises:
            LookupError: If any product is not in the table.
        """
        products = np.asarray(products, dtype=np.int64)
        idx = fold_hash(products) & self.mask
        pending = np.flatnonzero(self.products[idx] != products)
        while pending.size:
            if np.any(self.products[idx[pending]] == 0):
                raise LookupError("Prime product missing from the table.")
            idx[pending] = (idx[pending] + 1) & self.mask
            pending = pending[self.products[idx[pending]] != products[pending]]
        return self.scores[idx]


def build_tables(hash_bits: int = HASH_BITS) -> LookupTables:
    """Build a fresh, read-only set of lookup tables.

    Raises:
        TableBuildError: If construction fails.
    """
    start = time.perf_counter()
    flush = build_flush_table()
    products, scores = build_prime_table(hash_bits)
    for arr in (flush, products, scores):
        arr.flags.writeable = False
    tables = LookupTables(
        flush=flush,
        products=products,
        scores=scores,
        mask=len(products) - 1,
        flush_list=flush.tolist(),
        products_list=products.tolist(),
        scores_list=scores.tolist(),
    )
    logger.info(
        "Built lookup tables: %d flush entries, %d prime entries in %d slots (%.3fs)",
        int(np.count_nonzero(flush)),
        int(np.count_nonzero(products)),
        len(products),
        time.perf_counter() - start,
    )
    return tables


# ─── Process-wide tables ──────────────────────────────────────────────────────

_TABLES: LookupTables | None = None
_TABLES_LOCK = threading.Lock()


def init_engine() -> LookupTables:
    """Build the process-wide tables once; later calls return the same object."""
    global _TABLES
    if _TABLES is None:
        with _TABLES_LOCK:
            if _TABLES is None:
                _TABLES = build_tables()
    return _TABLES


def get_tables() -> LookupTables:
    """Return the process-wide tables, building them on first use."""
    tables = _TABLES
    if tables is None:
        tables = init_engine()
    return tables


def reset_engine() -> None:
    """Drop the process-wide tables. Intended for tests only."""
    global _TABLES
    with _TABLES_LOCK:
        _TABLES = None
