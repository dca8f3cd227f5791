"""
Tests for holdem_equity/engine/tables.py

Covers:
    - iter_rank_multisets(): count, order, uniqueness
    - build_flush_table(): populated exactly at five-bit masks
    - build_prime_table(): every multiset retrievable, size guard
    - LookupTables.lookup / lookup_many: agreement and missing products
    - init_engine() / get_tables(): idempotent, thread-safe, read-only
"""

from __future__ import annotations

import logging
import threading

import numpy as np
import pytest

from holdem_equity.engine.classify import HandCategory, classify_ranks, hand_category
from holdem_equity.engine.tables import (
    FLUSH_TABLE_SIZE,
    NUM_FLUSH_MASKS,
    NUM_RANK_MULTISETS,
    TableBuildError,
    build_flush_table,
    build_prime_table,
    build_tables,
    fold_hash,
    get_tables,
    init_engine,
    iter_rank_multisets,
    prime_product,
    reset_engine,
)


# ─── TestRankMultisets ────────────────────────────────────────────────────────


class TestRankMultisets:
    def test_count(self):
        assert sum(1 for _ in iter_rank_multisets()) == NUM_RANK_MULTISETS

    def test_unique(self):
        multisets = list(iter_rank_multisets())
        assert len(set(multisets)) == len(multisets)

    def test_non_decreasing(self):
        for ranks in iter_rank_multisets():
            assert list(ranks) == sorted(ranks)

    def test_endpoints(self):
        multisets = list(iter_rank_multisets())
        assert multisets[0] == (0, 0, 0, 0, 0)
        assert multisets[-1] == (12, 12, 12, 12, 12)

    def test_prime_products_distinct(self):
        products = {prime_product(r) for r in iter_rank_multisets()}
        assert len(products) == NUM_RANK_MULTISETS


# ─── TestFlushTable ───────────────────────────────────────────────────────────


class TestFlushTable:
    def test_shape(self):
        assert build_flush_table().shape == (FLUSH_TABLE_SIZE,)

    def test_nonzero_exactly_at_five_bit_masks(self):
        table = build_flush_table()
        for mask in range(FLUSH_TABLE_SIZE):
            assert (table[mask] != 0) == (mask.bit_count() == 5), mask

    def test_nonzero_count(self):
        assert np.count_nonzero(build_flush_table()) == NUM_FLUSH_MASKS

    def test_ten_straight_flushes(self):
        table = build_flush_table()
        categories = [hand_category(int(s)) for s in table if s]
        assert categories.count(HandCategory.STRAIGHT_FLUSH) == 10
        assert categories.count(HandCategory.FLUSH) == NUM_FLUSH_MASKS - 10

    def test_steel_wheel_below_six_high_straight_flush(self):
        table = build_flush_table()
        steel_wheel = 0b1_0000_0000_1111   # A 5 4 3 2
        six_high = 0b0_0000_0001_1111      # 6 5 4 3 2
        assert table[steel_wheel] < table[six_high]

    def test_ace_high_flush_beats_king_high(self):
        table = build_flush_table()
        ace_high = (1 << 12) | (1 << 5) | (1 << 3) | (1 << 1) | (1 << 0)   # A 7 5 3 2
        king_high = (1 << 11) | (1 << 10) | (1 << 9) | (1 << 8) | (1 << 6)  # K Q J T 8
        assert table[ace_high] > table[king_high]


# ─── TestPrimeTable ───────────────────────────────────────────────────────────


class TestPrimeTable:
    def test_every_multiset_retrievable(self, tables):
        for ranks in iter_rank_multisets():
            assert tables.lookup(prime_product(ranks)) == classify_ranks(ranks)

    def test_occupied_slots(self, tables):
        assert np.count_nonzero(tables.products) == NUM_RANK_MULTISETS

    def test_missing_product_raises(self, tables):
        six_ranks = 2 * 3 * 5 * 7 * 11 * 13
        with pytest.raises(LookupError):
            tables.lookup(six_ranks)

    def test_lookup_many_matches_lookup(self, tables):
        products = np.array([prime_product(r) for r in iter_rank_multisets()], dtype=np.int64)
        expected = [tables.lookup(int(p)) for p in products]
        assert tables.lookup_many(products).tolist() == expected

    def test_lookup_many_missing_raises(self, tables):
        with pytest.raises(LookupError):
            tables.lookup_many(np.array([2 * 2 * 2 * 2 * 2, 2 * 3 * 5 * 7 * 11 * 13]))

    def test_too_small_raises(self):
        with pytest.raises(TableBuildError):
            build_prime_table(hash_bits=12)

    def test_allocation_failure_wrapped(self, monkeypatch):
        def no_memory(*args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(np, "zeros", no_memory)
        with pytest.raises(TableBuildError, match="allocate") as exc_info:
            build_prime_table()
        assert isinstance(exc_info.value.__cause__, MemoryError)

    def test_smaller_table_same_scores(self, tables):
        """A denser table probes further but stores the same scores."""
        small = build_tables(hash_bits=13)
        for ranks in iter_rank_multisets():
            product = prime_product(ranks)
            assert small.lookup(product) == tables.lookup(product)

    def test_fold_hash_array_matches_scalar(self):
        products = [32, 2 * 3 * 5 * 7 * 11, 41 ** 4 * 37]
        folded = fold_hash(np.array(products, dtype=np.int64))
        assert folded.tolist() == [fold_hash(p) for p in products]


# ─── TestEngineInit ───────────────────────────────────────────────────────────


class TestEngineInit:
    def test_idempotent(self):
        assert init_engine() is init_engine()
        assert get_tables() is init_engine()

    def test_arrays_read_only(self, tables):
        for arr in (tables.flush, tables.products, tables.scores):
            with pytest.raises(ValueError):
                arr[0] = 1

    def test_concurrent_init_builds_once(self):
        reset_engine()
        results = []

        def worker():
            results.append(get_tables())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_build_logs_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="holdem_equity.engine.tables"):
            build_tables()
        assert "Built lookup tables" in caplog.text
