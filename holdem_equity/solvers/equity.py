"""
Exact Hold'em equity by exhaustive board completion.

For k = 5 - len(board) missing board cards, every k-combination of the
remaining deck is visited exactly once. Each completed board is scored for
every player (best five of seven) and tallied:

    sole best score      -> that player's win += 1
    k-way best score     -> each tied player's tie += 1, equity += 1/k
    everyone else        -> loss += 1
    every board          -> total_boards += 1

Boards are processed in numpy chunks (default 16384 boards). Cancellation
and timeout are checked between chunks. Heads-up from an empty board is
C(48, 5) = 1,712,304 boards.

Sharding: solve_equity(start=, stop=) enumerates one rank range of the
fixed lexicographic order and returns raw counters; merge the SimStats of
all shards, then finalize once.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from holdem_equity.analysis.results import PlayerResult, finalize
from holdem_equity.engine.cards import hand_to_str, parse_cards
from holdem_equity.engine.deck import available_cards, build_deck_from_hands
from holdem_equity.engine.evaluator import evaluate7_batch
from holdem_equity.engine.tables import get_tables
from holdem_equity.solvers.combinations import combination_chunks, combination_count

logger = logging.getLogger(__name__)

# ─── Constants ────────────────────────────────────────────────────────────────

MIN_PLAYERS: int = 2
MAX_PLAYERS: int = 8
HOLE_CARDS: int = 2
BOARD_SIZE: int = 5
DEFAULT_CHUNK_SIZE: int = 16_384


class CalculationCancelledError(RuntimeError):
    """Raised when an enumeration is cancelled or runs past its timeout.

    Attributes:
        boards_done: Boards fully tallied before the calculation stopped.
    """

    def __init__(self, message: str, boards_done: int) -> None:
        self.boards_done = boards_done
        super().__init__(message)


# ─── Counters ─────────────────────────────────────────────────────────────────


@dataclass
class SimStats:
    """Raw per-player counters for one equity request (or one shard).

    Attributes:
        wins:         int64[num_players] boards won outright.
        ties:         int64[num_players] boards split.
        losses:       int64[num_players] boards lost.
        equity:       float64[num_players] pot shares (wins + split fractions).
        total_boards: Boards tallied.
    """

    wins: np.ndarray
    ties: np.ndarray
    losses: np.ndarray
    equity: np.ndarray
    total_boards: int = 0

    @classmethod
    def empty(cls, num_players: int) -> SimStats:
        return cls(
            wins=np.zeros(num_players, dtype=np.int64),
            ties=np.zeros(num_players, dtype=np.int64),
            losses=np.zeros(num_players, dtype=np.int64),
            equity=np.zeros(num_players, dtype=np.float64),
        )

    @property
    def num_players(self) -> int:
        return len(self.wins)

    def record_board(self, scores: Sequence[int]) -> None:
        """Tally one completed board given every player's hand score."""
        best = max(scores)
        winners = [p for p, score in enumerate(scores) if score == best]
        if len(winners) == 1:
            self.wins[winners[0]] += 1
            self.equity[winners[0]] += 1.0
        else:
            share = 1.0 / len(winners)
            for p in winners:
                self.ties[p] += 1
                self.equity[p] += share
        for p in range(len(scores)):
            if scores[p] != best:
                self.losses[p] += 1
        self.total_boards += 1

    def record_boards(self, scores: np.ndarray) -> None:
        """Tally many boards at once; row i holds every player's score on board i."""
        scores = np.asarray(scores)
        if scores.shape[0] == 0:
            return
        is_winner = scores == scores.max(axis=1, keepdims=True)
        n_winners = is_winner.sum(axis=1)
        sole = n_winners == 1

        self.wins += (is_winner & sole[:, None]).sum(axis=0)
        self.ties += (is_winner & ~sole[:, None]).sum(axis=0)
        self.losses += (~is_winner).sum(axis=0)
        self.equity += (is_winner / n_winners[:, None]).sum(axis=0)
        self.total_boards += int(scores.shape[0])

    def merge(self, other: SimStats) -> SimStats:
        """Return the element-wise sum of two counter sets for the same players."""
        if other.num_players != self.num_players:
            raise ValueError(
                f"Cannot merge stats for {self.num_players} and {other.num_players} players."
            )
        return SimStats(
            wins=self.wins + other.wins,
            ties=self.ties + other.ties,
            losses=self.losses + other.losses,
            equity=self.equity + other.equity,
            total_boards=self.total_boards + other.total_boards,
        )


# ─── Validation ───────────────────────────────────────────────────────────────


def _validate_request(hands: Sequence[Sequence[int]], board: Sequence[int]) -> None:
    if not MIN_PLAYERS <= len(hands) <= MAX_PLAYERS:
        raise ValueError(
            f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {len(hands)}."
        )
    for p, hand in enumerate(hands):
        if len(hand) != HOLE_CARDS:
            raise ValueError(
                f"Player {p + 1} must hold exactly {HOLE_CARDS} cards, got {len(hand)}."
            )
    if len(board) > BOARD_SIZE:
        raise ValueError(f"Board holds at most {BOARD_SIZE} cards, got {len(board)}.")


# ─── Solver ───────────────────────────────────────────────────────────────────


def solve_equity(
    hands: Sequence[Sequence[int]],
    board: Sequence[int] = (),
    *,
    deck: np.ndarray | None = None,
    start: int = 0,
    stop: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    timeout: float | None = None,
    cancel_event: threading.Event | None = None,
) -> SimStats:
    """Enumerate board completions and return raw counters.

    Args:
        hands:        One pair of packed hole cards per player (2–8 players).
        board:        0–5 known packed board cards.
        deck:         Packed cards to draw completions from. Defaults to the
                      52-card deck minus every hole and board card.
        start:        First combination rank to enumerate (sharding).
        stop:         One past the last rank; defaults to all combinations.
        chunk_size:   Boards scored per numpy batch.
        timeout:      Seconds before the calculation is abandoned.
        cancel_event: Set from another thread to abandon the calculation.

    Returns:
        SimStats for the enumerated range.

    Raises:
        ValueError:                Player count, hand size or board size invalid.
        DuplicateCardError:        A card is held or shown twice.
        CalculationCancelledError: Cancelled or timed out.
    """
    _validate_request(hands, board)
    if deck is None:
        deck = available_cards(build_deck_from_hands(*hands, board))
    deck = np.asarray(deck, dtype=np.int64)

    tables = get_tables()
    num_players = len(hands)
    missing = BOARD_SIZE - len(board)
    total = combination_count(len(deck), missing)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Solving %d players, board [%s], %d of %d completions from %d cards",
            num_players,
            hand_to_str(tuple(board)),
            (total if stop is None else stop) - start,
            total,
            len(deck),
        )

    deadline = None if timeout is None else time.monotonic() + timeout
    known_board = np.asarray(board, dtype=np.int64)
    holes = np.asarray(hands, dtype=np.int64)
    stats = SimStats.empty(num_players)

    for block in combination_chunks(len(deck), missing, chunk_size, start, stop):
        if cancel_event is not None and cancel_event.is_set():
            logger.warning("Equity calculation cancelled after %d boards", stats.total_boards)
            raise CalculationCancelledError("Equity calculation cancelled.", stats.total_boards)
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning("Equity calculation timed out after %d boards", stats.total_boards)
            raise CalculationCancelledError(
                f"Equity calculation exceeded {timeout}s.", stats.total_boards
            )

        n_boards = len(block)
        boards = np.concatenate(
            [np.broadcast_to(known_board, (n_boards, len(known_board))), deck[block]], axis=1
        )
        scores = np.empty((n_boards, num_players), dtype=np.int64)
        for p in range(num_players):
            seven = np.concatenate([np.broadcast_to(holes[p], (n_boards, HOLE_CARDS)), boards], axis=1)
            scores[:, p] = evaluate7_batch(seven, tables)
        stats.record_boards(scores)

    return stats


def calculate_equity(
    num_players: int,
    hole_card_strings: Sequence[str],
    board_string: str = "",
    **solver_options,
) -> list[PlayerResult]:
    """Exact equity for every player from card notation.

    Args:
        num_players:       Number of players (2–8).
        hole_card_strings: One string per player, e.g. ``"As Ks"``.
        board_string:      Known board cards, e.g. ``"Qs Js 9h"``, or "".
        **solver_options:  Passed through to solve_equity (chunk_size,
                           timeout, cancel_event).

    Returns:
        One PlayerResult per player, in input order.

    Raises:
        InvalidCardTokenError:     Malformed card tokens.
        DuplicateCardError:        A card appears twice.
        ValueError:                Counts outside the accepted ranges.
        CalculationCancelledError: Cancelled or timed out.

    Examples:
        >>> results = calculate_equity(2, ["As Ks", "Td Tc"], "Qs Js 9h 2c 3d")
        >>> results[1].win_pct
        100.0
    """
    if len(hole_card_strings) != num_players:
        raise ValueError(
            f"Expected {num_players} hole-card strings, got {len(hole_card_strings)}."
        )
    hands = [parse_cards(text) for text in hole_card_strings]
    board = parse_cards(board_string or "")
    return finalize(solve_equity(hands, board, **solver_options))
