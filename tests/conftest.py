"""
Shared helpers and fixtures for the equity engine tests.

hand() builds packed cards from notation; the session-scoped tables
fixture shares one set of lookup tables across modules.
"""

from __future__ import annotations

import pytest

from holdem_equity.engine.cards import str_to_card
from holdem_equity.engine.tables import LookupTables, get_tables


def hand(*card_strs: str) -> tuple[int, ...]:
    """Build a tuple of packed cards from two-character card strings.

    Examples:
        >>> len(hand('As', 'Ks'))
        2
    """
    return tuple(str_to_card(s) for s in card_strs)


@pytest.fixture(scope="session")
def tables() -> LookupTables:
    """Process-wide lookup tables, built once for the whole session."""
    return get_tables()
