"""
Iterative k-combination enumeration for board completion.

Combinations of k indices out of n are visited in lexicographic order by a
successor function (no recursion). The order is fixed, so any combination
can be addressed by its rank, which is what makes the space restartable
and shardable:

    unrank_combination(n, k, r)   -> the r-th combination
    iter_combinations(n, k, first) -> lazily continue from any combination
    combination_chunks(...)        -> numpy blocks of a [start, stop) range
    shard_ranges(total, shards)    -> contiguous rank ranges for workers
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

import numpy as np
from scipy.special import comb


def combination_count(n: int, k: int) -> int:
    """Return C(n, k) exactly (0 when k > n or k < 0).

    Examples:
        >>> combination_count(45, 2)
        990
        >>> combination_count(48, 5)
        1712304
        >>> combination_count(3, 5)
        0
    """
    if k < 0 or k > n:
        return 0
    return int(comb(n, k, exact=True))


def iter_combinations(
    n: int,
    k: int,
    first: tuple[int, ...] | None = None,
) -> Iterator[tuple[int, ...]]:
    """Yield strictly increasing k-tuples of indices in range(n).

    Args:
        n:     Number of items to choose from.
        k:     Combination size. k == 0 yields a single empty tuple.
        first: Combination to start from (inclusive). Defaults to the
               lexicographically smallest, (0, 1, ..., k-1).

    Examples:
        >>> list(iter_combinations(4, 2))
        [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]
        >>> list(iter_combinations(4, 2, first=(1, 3)))
        [(1, 3), (2, 3)]
        >>> list(iter_combinations(3, 0))
        [()]
        >>> list(iter_combinations(2, 3))
        []
    """
    if k < 0 or k > n:
        return
    combo = list(first) if first is not None else list(range(k))
    while True:
        yield tuple(combo)
        i = k - 1
        while i >= 0 and combo[i] == n - k + i:
            i -= 1
        if i < 0:
            return
        combo[i] += 1
        for j in range(i + 1, k):
            combo[j] = combo[j - 1] + 1


def unrank_combination(n: int, k: int, rank: int) -> tuple[int, ...]:
    """Return the combination at position ``rank`` in lexicographic order.

    Raises:
        ValueError: If rank is outside [0, C(n, k)).

    Examples:
        >>> unrank_combination(4, 2, 0)
        (0, 1)
        >>> unrank_combination(4, 2, 4)
        (1, 3)
    """
    total = combination_count(n, k)
    if not 0 <= rank < total:
        raise ValueError(f"Rank {rank} outside [0, {total}) for C({n}, {k}).")
    combo: list[int] = []
    candidate = 0
    for slot in range(k):
        while True:
            below = combination_count(n - candidate - 1, k - slot - 1)
            if rank < below:
                combo.append(candidate)
                candidate += 1
                break
            rank -= below
            candidate += 1
    return tuple(combo)


def combination_chunks(
    n: int,
    k: int,
    chunk_size: int,
    start: int = 0,
    stop: int | None = None,
) -> Iterator[np.ndarray]:
    """Yield the combinations ranked [start, stop) as (m, k) index arrays.

    Each block holds at most chunk_size rows; blocks are contiguous and
    together cover the range exactly once.

    Raises:
        ValueError: If chunk_size < 1 or the range is invalid.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}.")
    total = combination_count(n, k)
    if stop is None:
        stop = total
    if not 0 <= start <= stop <= total:
        raise ValueError(f"Invalid range [{start}, {stop}) for {total} combinations.")
    if start == stop:
        return

    remaining = stop - start
    combos = iter_combinations(n, k, first=unrank_combination(n, k, start))
    while remaining:
        batch = list(islice(combos, min(chunk_size, remaining)))
        remaining -= len(batch)
        yield np.array(batch, dtype=np.intp).reshape(len(batch), k)


def shard_ranges(total: int, n_shards: int) -> list[tuple[int, int]]:
    """Split [0, total) into n_shards contiguous, near-equal ranges.

    Examples:
        >>> shard_ranges(10, 3)
        [(0, 4), (4, 7), (7, 10)]
    """
    if n_shards < 1:
        raise ValueError(f"n_shards must be at least 1, got {n_shards}.")
    base, extra = divmod(total, n_shards)
    ranges = []
    start = 0
    for shard in range(n_shards):
        size = base + (1 if shard < extra else 0)
        ranges.append((start, start + size))
        start += size
    return ranges
