"""
Deck bookkeeping for exact enumeration.

The deck is a numpy int8 array of length 52, indexed by card index.
    1 = card is still available (may appear on a board completion)
    0 = card is known (held by a player or already on the board)

Integer encoding: index // 4 = rank index, index % 4 = suit index.
Available cards are handed to the solver as packed card integers.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from .cards import FULL_DECK, NUM_CARDS, card_index, card_to_str

_PACKED_DECK: np.ndarray = np.array(FULL_DECK, dtype=np.int64)


class DuplicateCardError(ValueError):
    """Raised when the same physical card is known twice.

    Attributes:
        card: The packed card that appears more than once.
    """

    def __init__(self, card: int) -> None:
        self.card = card
        super().__init__(f"Card {card_to_str(card)} appears more than once.")


def create_deck() -> np.ndarray:
    """Create a fresh, full 52-card deck.

    Returns:
        np.ndarray: int8 array of shape (52,), all 1s (all cards available).

    Examples:
        >>> deck = create_deck()
        >>> int(deck.sum())
        52
        >>> deck.dtype
        dtype('int8')
    """
    return np.ones(NUM_CARDS, dtype=np.int8)


def available_cards(deck: np.ndarray) -> np.ndarray:
    """Return the packed cards still available, in card-index order.

    Examples:
        >>> len(available_cards(create_deck()))
        52
    """
    return _PACKED_DECK[deck == 1]


def cards_remaining(deck: np.ndarray) -> int:
    """Return the count of cards still available in the deck.

    Examples:
        >>> cards_remaining(create_deck())
        52
    """
    return int(deck.sum())


def remove_card(deck: np.ndarray, card: int) -> None:
    """Mark a packed card as known.

    Args:
        deck: Mutable deck array — modified in place.
        card: Packed card integer.

    Raises:
        DuplicateCardError: If the card was already removed.
    """
    idx = card_index(card)
    if deck[idx] == 0:
        raise DuplicateCardError(card)
    deck[idx] = 0


def build_deck_from_hands(*hands: Iterable[int]) -> np.ndarray:
    """Create a deck with every card from the given groups already removed.

    Hole cards and board cards are passed as separate groups; a card that
    appears twice anywhere raises before any enumeration starts.

    Raises:
        DuplicateCardError: Naming the first card seen twice.

    Examples:
        >>> from holdem_equity.engine.cards import parse_cards
        >>> deck = build_deck_from_hands(parse_cards('As Ks'), parse_cards('Td Tc'))
        >>> cards_remaining(deck)
        48
    """
    deck = create_deck()
    for hand in hands:
        for card in hand:
            remove_card(deck, card)
    return deck
