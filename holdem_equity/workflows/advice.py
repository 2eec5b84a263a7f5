"""Betting advice for Ultimate Texas Hold'em.

Maps the hero's situation to a plain-text recommendation:

* **Pre-flop** — pattern lookup over the two hole cards (pairs, suited
  aces, broadway combinations, weak offsuit trash).
* **Post-flop** — thresholds over the Monte-Carlo win percentage.

Maintainer notes
-----------------
* When tuning, modify only the constant tables at the top of this module;
  the functions read them top-down.
* Advice text is for display.  Callers that need a machine-readable
  action should use :attr:`BettingAdvice.bet_multiplier`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from holdem_equity.core.cards import CardLike, to_cards
from holdem_equity.utils.card_utils import rank_name

BROADWAY = frozenset({10, 11, 12, 13, 14})

POSTFLOP_THRESHOLDS: tuple[tuple[float, str, str, int], ...] = (
    # (win % strictly above, action, confidence, multiplier)
    (60.0, "Bet 3x (Strong Position)", "high", 3),
    (40.0, "Bet 2x or Check (Decent Chance)", "medium", 2),
)

_TIPS: dict[str, str] = {
    "preflop": "Pre-flop analysis complete — add flop cards next",
    "turn": "Turn is where traps are set",
    "river": "Final card — make the right move",
}


@dataclass(frozen=True, slots=True)
class BettingAdvice:
    """Recommendation shown to the player.

    Attributes:
        action:         Display text, e.g. ``"4x Bet (Pair)"``.
        confidence:     ``high`` / ``medium`` / ``low``.
        reasoning:      One-line justification.
        stage:          ``preflop`` / ``flop`` / ``turn`` / ``river``.
        bet_multiplier: ``4``, ``3``, ``2`` or ``0`` for check/fold.
    """

    action: str
    confidence: str
    reasoning: str
    stage: str
    bet_multiplier: int = 0


def game_stage(card_count: int) -> str:
    """Stage implied by the total number of selected cards."""
    if card_count <= 2:
        return "preflop"
    if card_count <= 5:
        return "flop"
    if card_count == 6:
        return "turn"
    return "river"


def tip_message(stage: str, card_count: int) -> str:
    """Short contextual hint for the card picker."""
    if stage == "preflop":
        if card_count == 0:
            return "Pick 2 hole cards first"
        if card_count == 1:
            return "Select your second hole card"
    if stage == "flop":
        if card_count == 3:
            return "Flop time — let's see what connects!"
        if card_count == 4:
            return "Add one more flop card"
        return "Flop analysis running — checking your odds"
    return _TIPS.get(stage, "Select cards to get started")


def is_premium_hand(hole_cards: Sequence[CardLike]) -> bool:
    """Pairs, suited aces, suited broadway and AK are premium."""
    if len(hole_cards) != 2:
        return False
    first, second = to_cards(hole_cards)
    suited = first.suit == second.suit
    ranks = {first.rank, second.rank}
    if first.rank == second.rank:
        return True
    if 14 in ranks and suited:
        return True
    if ranks <= BROADWAY and suited:
        return True
    return ranks == {14, 13}


def preflop_advice(hole_cards: Sequence[CardLike]) -> BettingAdvice:
    """Pattern-based pre-flop recommendation for exactly two hole cards."""
    if len(hole_cards) != 2:
        return BettingAdvice("Select exactly 2 hole cards", "low", "Need hole cards to analyze", "preflop")

    first, second = to_cards(hole_cards)
    suited = first.suit == second.suit
    high, low = max(first.rank, second.rank), min(first.rank, second.rank)
    ranks = {high, low}

    if high == low:
        if high == 14:
            return BettingAdvice(
                "Pocket Rockets — Max it! (4x Bet)", "high",
                "Pocket Aces are the strongest starting hand", "preflop", 4,
            )
        return BettingAdvice(
            "4x Bet (Pair)", "high",
            f"Pocket {rank_name(high, plural=True)} are strong pre-flop", "preflop", 4,
        )

    if high == 14 and suited:
        return BettingAdvice("4x Bet (Suited Ace)", "high", "Suited Ace has excellent potential", "preflop", 4)

    if ranks <= BROADWAY:
        if suited:
            return BettingAdvice("4x Bet (Strong Combo)", "high", "Suited high cards are premium", "preflop", 4)
        if ranks == {14, 13}:
            return BettingAdvice("4x Bet (Big Slick)", "high", "AK offsuit is a premium hand", "preflop", 4)
        return BettingAdvice("2x Bet (Playable)", "medium", "Strong cards but wait for better spot", "preflop", 2)

    # K-x or Q-x suited with a six or better
    if suited and high in {12, 13} and low >= 6:
        return BettingAdvice("2x Bet (Playable)", "medium", "Decent suited hand with potential", "preflop", 2)

    if low <= 3 and not suited and not ranks & BROADWAY:
        return BettingAdvice("Check or Fold", "high", "Very weak starting hand", "preflop")

    return BettingAdvice("Check or Fold", "medium", "Marginal hand, wait for more information", "preflop")


def postflop_advice(win_percent: float, stage: str = "flop") -> BettingAdvice:
    """Threshold-based recommendation from a simulated win percentage."""
    for threshold, action, confidence, multiplier in POSTFLOP_THRESHOLDS:
        if win_percent > threshold:
            verdict = "excellent" if multiplier == 3 else "playable"
            return BettingAdvice(
                action, confidence, f"{win_percent:.1f}% win rate is {verdict}", stage, multiplier,
            )
    return BettingAdvice("Fold (Too Risky)", "high", f"{win_percent:.1f}% win rate is too low", stage)
