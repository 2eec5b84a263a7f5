"""Immutable card values and the 52-card deck.

A :class:`Card` is identified by ``(rank, suit)`` alone; two cards are
equal iff both fields match.  Ranks are numeric ``2..14`` (ace high);
the ace's low role in the wheel straight is handled by the ranker, not
by the card.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from holdem_equity.core.errors import InsufficientDeckError, InvalidCardFormatError
from holdem_equity.utils.card_utils import SUITS, card_token, is_valid_card, parse_card

MIN_REMAINING_DECK = 7
"""Opponent hole cards (2) plus the worst-case missing board (5)."""


@dataclass(frozen=True, slots=True)
class Card:
    """One of the 52 physical cards.

    Attributes:
        rank: Numeric rank, ``2`` (deuce) to ``14`` (ace).
        suit: One of ``h``, ``d``, ``s``, ``c``.
    """

    rank: int
    suit: str

    def __post_init__(self) -> None:
        if not is_valid_card(self.rank, self.suit):
            raise InvalidCardFormatError(f"Invalid card: rank={self.rank!r} suit={self.suit!r}")

    @classmethod
    def parse(cls, token: str) -> "Card":
        """Build a card from a wire token such as ``"10h"`` or ``"As"``."""
        rank, suit = parse_card(token)
        return cls(rank, suit)

    @property
    def token(self) -> str:
        return card_token(self.rank, self.suit)

    def __str__(self) -> str:
        return self.token

    def __repr__(self) -> str:
        return f"Card({self.token!r})"


CardLike = Union[Card, str]


def to_card(value: CardLike) -> Card:
    """Coerce a token or :class:`Card` into a :class:`Card`."""
    if isinstance(value, Card):
        if not is_valid_card(value.rank, value.suit):
            raise InvalidCardFormatError(f"Invalid card: rank={value.rank!r} suit={value.suit!r}")
        return value
    return Card.parse(value)


def to_cards(values: Iterable[CardLike]) -> list[Card]:
    return [to_card(value) for value in values]


def build_deck() -> tuple[Card, ...]:
    """All 52 cards in rank-major order (index ``(rank - 2) * 4 + suit``)."""
    return tuple(Card(rank, suit) for rank in range(2, 15) for suit in SUITS)


FULL_DECK: tuple[Card, ...] = build_deck()


def remaining_deck(known: Iterable[Card]) -> list[Card]:
    """Return the deck minus *known*, preserving deck order.

    Raises:
        InsufficientDeckError: fewer than :data:`MIN_REMAINING_DECK` cards remain.
    """
    blocked = set(known)
    remaining = [card for card in FULL_DECK if card not in blocked]
    if len(remaining) < MIN_REMAINING_DECK:
        raise InsufficientDeckError(
            f"Only {len(remaining)} cards remain after removing known cards "
            f"(need {MIN_REMAINING_DECK})"
        )
    return remaining
