"""Best-five-card hand ranking.

Evaluates every 5-card subset of a 5–7 card pool (at most C(7,5) = 21)
and keeps the strongest by ``(category, key)``.  Brute force is fast
enough for thousands of Monte-Carlo iterations and keeps the detection
rules readable.

Tie-break keys (compared lexicographically, higher wins):

=================  =========================================
Straight (flush)   ``(high,)`` — a wheel A-2-3-4-5 has high 5
Flush / high card  five values, descending
One pair           ``(pair, k1, k2, k3)``
Two pair           ``(high_pair, low_pair, kicker)``
Three of a kind    ``(trips, k1, k2)``
Full house         ``(trips, pair)``
Four of a kind     ``(quads, kicker)``
=================  =========================================

Royal flush is not a separate category: it is the straight flush with
key ``(14,)`` and only differs in its description.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum, IntEnum
from itertools import combinations
from typing import Iterable, Sequence

from holdem_equity.core.cards import Card, CardLike, to_card
from holdem_equity.core.errors import InvalidCardFormatError, InvalidInputError
from holdem_equity.utils.card_utils import rank_name

ACE_HIGH = 14
ACE_LOW = 1


class HandCategory(IntEnum):
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title().replace(" A ", " a ").replace(" Of ", " of ")


class Outcome(Enum):
    """Result of :func:`compare`."""

    A_WINS = "a_wins"
    B_WINS = "b_wins"
    TIE = "tie"


@dataclass(frozen=True, slots=True)
class RankedHand:
    """Best 5-card selection from a pool.

    Attributes:
        category:    Hand category.
        key:         Tie-break ranks, most significant first.
        cards:       The five cards forming the hand.
        description: Human-readable name, e.g. ``"Two Pair, Kings and Queens"``.
    """

    category: HandCategory
    key: tuple[int, ...]
    cards: tuple[Card, ...]
    description: str

    @property
    def strength(self) -> tuple[int, tuple[int, ...]]:
        """Comparable ``(category, key)`` pair."""
        return int(self.category), self.key

    @property
    def is_royal_flush(self) -> bool:
        return self.category is HandCategory.STRAIGHT_FLUSH and self.key == (ACE_HIGH,)


# ── Category detection ────────────────────────────────────────────


def _straight_high(values: Sequence[int]) -> int | None:
    """Return the top card of a straight formed by *values*, or ``None``.

    The ace is tried both as 14 and as 1; the better qualifying straight wins.
    """
    best: int | None = None
    for ace_value in (ACE_HIGH, ACE_LOW):
        ranks = sorted({ace_value if value == ACE_HIGH else value for value in values})
        if len(ranks) == 5 and ranks[-1] - ranks[0] == 4:
            if best is None or ranks[-1] > best:
                best = ranks[-1]
    return best


def evaluate_five(cards: Sequence[Card]) -> tuple[HandCategory, tuple[int, ...]]:
    """Classify exactly five cards into ``(category, key)``."""
    values = [card.rank for card in cards]
    is_flush = len({card.suit for card in cards}) == 1
    straight_high = _straight_high(values)

    if is_flush and straight_high is not None:
        return HandCategory.STRAIGHT_FLUSH, (straight_high,)

    # Group by multiplicity first, then by rank: [(rank, count), ...]
    groups = sorted(Counter(values).items(), key=lambda item: (item[1], item[0]), reverse=True)
    counts = [count for _, count in groups]
    ordered = tuple(rank for rank, _ in groups)

    if counts[0] == 4:
        return HandCategory.FOUR_OF_A_KIND, ordered
    if counts[:2] == [3, 2]:
        return HandCategory.FULL_HOUSE, ordered
    if is_flush:
        return HandCategory.FLUSH, tuple(sorted(values, reverse=True))
    if straight_high is not None:
        return HandCategory.STRAIGHT, (straight_high,)
    if counts[0] == 3:
        return HandCategory.THREE_OF_A_KIND, ordered
    if counts[:2] == [2, 2]:
        return HandCategory.TWO_PAIR, ordered
    if counts[0] == 2:
        return HandCategory.ONE_PAIR, ordered
    return HandCategory.HIGH_CARD, ordered


def describe(category: HandCategory, key: tuple[int, ...]) -> str:
    """Human-readable name for a ranked hand."""
    if category is HandCategory.STRAIGHT_FLUSH:
        if key == (ACE_HIGH,):
            return "Royal Flush"
        return f"Straight Flush, {rank_name(key[0])} High"
    if category is HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {rank_name(key[0], plural=True)}"
    if category is HandCategory.FULL_HOUSE:
        return f"Full House, {rank_name(key[0], plural=True)} over {rank_name(key[1], plural=True)}"
    if category is HandCategory.FLUSH:
        return f"Flush, {rank_name(key[0])} High"
    if category is HandCategory.STRAIGHT:
        return f"Straight, {rank_name(key[0])} High"
    if category is HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {rank_name(key[0], plural=True)}"
    if category is HandCategory.TWO_PAIR:
        return f"Two Pair, {rank_name(key[0], plural=True)} and {rank_name(key[1], plural=True)}"
    if category is HandCategory.ONE_PAIR:
        return f"Pair of {rank_name(key[0], plural=True)}"
    return f"{rank_name(key[0])} High"


# ── Public API ────────────────────────────────────────────────────


def _coerce_pool(cards: Iterable[CardLike]) -> list[Card]:
    try:
        pool = [to_card(card) for card in cards]
    except InvalidCardFormatError as exc:
        raise InvalidInputError(str(exc)) from exc
    if not 5 <= len(pool) <= 7:
        raise InvalidInputError(f"Need 5 to 7 cards to rank a hand, got {len(pool)}")
    if len(set(pool)) != len(pool):
        raise InvalidInputError("Duplicate cards in hand: " + " ".join(card.token for card in pool))
    return pool


def rank(cards: Iterable[CardLike]) -> RankedHand:
    """Return the best 5-card hand contained in *cards*.

    Args:
        cards: 5 to 7 distinct cards, as :class:`Card` values or tokens.

    Raises:
        InvalidInputError: wrong pool size, duplicates or malformed tokens.
    """
    pool = _coerce_pool(cards)

    subsets = combinations(pool, 5)
    best_cards = next(subsets)
    category, key = evaluate_five(best_cards)
    for subset in subsets:
        candidate, candidate_key = evaluate_five(subset)
        if (candidate, candidate_key) > (category, key):
            category, key = candidate, candidate_key
            best_cards = subset

    return RankedHand(
        category=category,
        key=key,
        cards=best_cards,
        description=describe(category, key),
    )


def compare(a: RankedHand, b: RankedHand) -> Outcome:
    """Decide which of two ranked hands wins; equal strength is a tie."""
    if a.strength > b.strength:
        return Outcome.A_WINS
    if a.strength < b.strength:
        return Outcome.B_WINS
    return Outcome.TIE


def hand_strength(category: HandCategory) -> str:
    """Coarse strength label used by the advisor prompts."""
    if category >= HandCategory.FOUR_OF_A_KIND:
        return "very strong"
    if category >= HandCategory.FLUSH:
        return "strong"
    if category >= HandCategory.THREE_OF_A_KIND:
        return "moderate"
    return "weak"
