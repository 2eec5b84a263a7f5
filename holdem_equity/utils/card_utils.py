"""Card token parsing and display utilities.

Wire format is ``{rank}{suit}`` where rank is one of
``2 3 4 5 6 7 8 9 10 J Q K A`` and suit one of ``h d s c``.  The ten is the
only three-character token (``10h``); ``Th`` is accepted as an alias on
input but never produced.

This module is the **single source of truth** for card-string helpers
used across ``core``, ``tools`` and ``workflows``.
"""

from __future__ import annotations

from holdem_equity.core.errors import InvalidCardFormatError

RANKS: tuple[str, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
"""Ordered rank tokens (``2``–``A``). ``RANKS[value - 2]`` is the token for *value*."""

SUITS = "hdsc"
"""Suit characters (hearts, diamonds, spades, clubs). Unordered for play."""

RANK_VALUES: dict[str, int] = {token: value for value, token in enumerate(RANKS, start=2)}

_SUIT_SET = frozenset(SUITS)

SUIT_GLYPHS: dict[str, str] = {"h": "♥", "d": "♦", "s": "♠", "c": "♣"}

_RANK_NAMES: dict[int, tuple[str, str]] = {
    2: ("Two", "Twos"), 3: ("Three", "Threes"), 4: ("Four", "Fours"),
    5: ("Five", "Fives"), 6: ("Six", "Sixes"), 7: ("Seven", "Sevens"),
    8: ("Eight", "Eights"), 9: ("Nine", "Nines"), 10: ("Ten", "Tens"),
    11: ("Jack", "Jacks"), 12: ("Queen", "Queens"), 13: ("King", "Kings"),
    14: ("Ace", "Aces"),
}


# ── Parsing ───────────────────────────────────────────────────────


def parse_card(token: str) -> tuple[int, str]:
    """Split a card token into ``(rank_value, suit)``.

    Accepts ``"10h"``, ``"Th"``, ``"aS"`` and surrounding whitespace.
    Raises :class:`InvalidCardFormatError` for anything else.
    """
    if not isinstance(token, str):
        raise InvalidCardFormatError(f"Invalid card token: {token!r}")
    cleaned = token.strip().upper()
    if len(cleaned) not in (2, 3):
        raise InvalidCardFormatError(f"Invalid card token: {token!r}")
    rank, suit = cleaned[:-1], cleaned[-1].lower()
    if rank == "T":
        rank = "10"
    if rank not in RANK_VALUES or suit not in SUITS:
        raise InvalidCardFormatError(f"Invalid card token: {token!r}")
    return RANK_VALUES[rank], suit


def is_valid_card(rank: object, suit: object) -> bool:
    """True for an integer rank in ``2..14`` and a single suit character."""
    if isinstance(rank, bool) or not isinstance(rank, int):
        return False
    return rank in _RANK_NAMES and isinstance(suit, str) and suit in _SUIT_SET


def card_token(rank: int, suit: str) -> str:
    """Render a ``(rank_value, suit)`` pair in canonical wire form."""
    if not is_valid_card(rank, suit):
        raise InvalidCardFormatError(f"Invalid card: rank={rank!r} suit={suit!r}")
    return f"{RANKS[rank - 2]}{suit}"


# ── Display ───────────────────────────────────────────────────────


def rank_name(rank: int, plural: bool = False) -> str:
    """English name of a rank value (``14`` → ``"Ace"`` / ``"Aces"``)."""
    singular, many = _RANK_NAMES[rank]
    return many if plural else singular


def format_card(card: str, abbreviate_ten: bool = False) -> str:
    """Render a token with its suit glyph (``"10h"`` → ``"10♥"``)."""
    rank, suit = parse_card(card)
    label = RANKS[rank - 2]
    if abbreviate_ten and rank == 10:
        label = "T"
    return f"{label}{SUIT_GLYPHS[suit]}"


def format_cards(cards: list[str], abbreviate_ten: bool = False) -> str:
    """Space-separated glyph rendering of several cards."""
    return " ".join(format_card(card, abbreviate_ten) for card in cards)
