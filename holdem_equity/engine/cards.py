"""
Card constants, packed encoding, and human-readable I/O helpers.

Packed card layout (one int carries three views of the same card):
    bits  0–12  one-hot rank presence   (bit index = rank index, 0=2 … 12=A)
    bits 13–18  prime of the rank        (2, 3, 5, … 41)
    bits 20–23  one-hot suit identity   (20=C, 21=D, 22=H, 23=S)

    AND over five cards leaves a suit bit set  -> all five share a suit.
    OR over five cards' rank bits              -> 13-bit rank mask.
    product of five primes                     -> rank multiset identity.

Card index (0–51) for deck bookkeeping:
    rank_index = index // 4,  suit_index = index % 4

String representations are used exclusively at I/O boundaries.
"""

from __future__ import annotations

RANK_NAMES: str = "23456789TJQKA"
SUIT_NAMES: str = "cdhs"

NUM_RANKS: int = 13
NUM_SUITS: int = 4
NUM_CARDS: int = 52

# One prime per rank index; the product of five is unique per rank multiset.
PRIMES: tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)

RANK_ACE: int = 12
RANK_FIVE: int = 3

# ─── Bit layout ───────────────────────────────────────────────────────────────

RANK_MASK: int = 0x1FFF
PRIME_SHIFT: int = 13
PRIME_MASK: int = 0x3F
SUIT_SHIFT: int = 20
SUIT_MASK: int = 0xF00000


class InvalidCardTokenError(ValueError):
    """Raised when one or more card tokens cannot be parsed.

    Attributes:
        tokens: Every defective token, in input order.
    """

    def __init__(self, tokens: list[str]) -> None:
        self.tokens = tokens
        quoted = ", ".join(repr(t) for t in tokens)
        super().__init__(f"Invalid card token(s): {quoted}")


# ─── Encoding ─────────────────────────────────────────────────────────────────


def encode(rank: int, suit: int) -> int:
    """Pack a (rank, suit) pair into a card integer.

    Examples:
        >>> hex(encode(0, 0))    # 2 of clubs
        '0x104001'
        >>> hex(encode(12, 3))   # ace of spades
        '0x853000'
    """
    return (1 << (SUIT_SHIFT + suit)) | (PRIMES[rank] << PRIME_SHIFT) | (1 << rank)


def card_rank(card: int) -> int:
    """Return the rank index (0–12) of a packed card.

    Examples:
        >>> card_rank(encode(12, 3))
        12
    """
    return (int(card) & RANK_MASK).bit_length() - 1


def card_suit(card: int) -> int:
    """Return the suit index (0–3) of a packed card.

    Examples:
        >>> card_suit(encode(12, 3))
        3
    """
    return ((int(card) & SUIT_MASK) >> SUIT_SHIFT).bit_length() - 1


def card_prime(card: int) -> int:
    """Return the prime embedded in a packed card."""
    return (card >> PRIME_SHIFT) & PRIME_MASK


def card_index(card: int) -> int:
    """Return the deck index (0–51) of a packed card.

    Examples:
        >>> card_index(encode(0, 0))
        0
        >>> card_index(encode(12, 3))
        51
    """
    return card_rank(card) * NUM_SUITS + card_suit(card)


FULL_DECK: tuple[int, ...] = tuple(
    encode(rank, suit) for rank in range(NUM_RANKS) for suit in range(NUM_SUITS)
)
"""All 52 packed cards, ordered by card index."""


def card_from_index(index: int) -> int:
    """Return the packed card for a deck index (0–51)."""
    return FULL_DECK[index]


# ─── String I/O ───────────────────────────────────────────────────────────────


def card_to_str(card: int) -> str:
    """Convert a packed card to its two-character notation.

    Examples:
        >>> card_to_str(encode(12, 3))
        'As'
        >>> card_to_str(encode(8, 1))
        'Td'
    """
    return RANK_NAMES[card_rank(card)] + SUIT_NAMES[card_suit(card)]


def _parse_token(token: str) -> int | None:
    """Return the packed card for a token, or None when it is defective."""
    if len(token) != 2:
        return None
    rank = RANK_NAMES.find(token[0].upper())
    suit = SUIT_NAMES.find(token[1].lower())
    if rank < 0 or suit < 0:
        return None
    return encode(rank, suit)


def str_to_card(s: str) -> int:
    """Parse a single two-character card token (case-insensitive).

    Raises:
        InvalidCardTokenError: If the token is not ``<Rank><Suit>``.

    Examples:
        >>> card_to_str(str_to_card('aS'))
        'As'
        >>> card_to_str(str_to_card('tc'))
        'Tc'
    """
    card = _parse_token(s)
    if card is None:
        raise InvalidCardTokenError([s])
    return card


def parse_cards(text: str) -> tuple[int, ...]:
    """Parse whitespace-separated card tokens into packed cards.

    Every token is checked; all defective tokens are reported together
    instead of being dropped. An empty or blank string yields no cards.

    Raises:
        InvalidCardTokenError: Listing every defective token.

    Examples:
        >>> hand_to_str(parse_cards('Qs Js 9h'))
        'Qs Js 9h'
        >>> parse_cards('')
        ()
    """
    cards: list[int] = []
    defects: list[str] = []
    for token in text.split():
        card = _parse_token(token)
        if card is None:
            defects.append(token)
        else:
            cards.append(card)
    if defects:
        raise InvalidCardTokenError(defects)
    return tuple(cards)


def hand_to_str(cards: tuple[int, ...]) -> str:
    """Convert a sequence of packed cards to space-separated notation.

    Examples:
        >>> hand_to_str((encode(12, 3), encode(11, 3)))
        'As Ks'
    """
    return " ".join(card_to_str(c) for c in cards)
