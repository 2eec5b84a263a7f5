"""Monte-Carlo equity estimation tool.

Wraps :mod:`core.equity_simulator` and :mod:`core.hand_ranker` with a
configured interface for the workflow layer and the CLI: iteration counts
come from :class:`SimulationConfig`, runs and failures are logged, and hand
descriptions degrade to display prompts instead of raising.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from holdem_equity.core.cards import CardLike
from holdem_equity.core.equity_simulator import (
    CancellationToken,
    SimulationResult,
    SimulationRun,
    simulate,
    simulate_parallel,
)
from holdem_equity.core.errors import HoldemEquityError
from holdem_equity.core.hand_ranker import HandCategory, hand_strength, rank
from holdem_equity.utils.card_utils import format_cards
from holdem_equity.utils.config import SimulationConfig
from holdem_equity.utils.logger import AdvisorLogger

_log = AdvisorLogger("Equity")


@dataclass(slots=True)
class HandAnalysis:
    """Display-oriented summary of the best hand in a pool.

    Attributes:
        hand_name: Ranker description, or a prompt when not rankable.
        category:  Hand category, ``None`` when fewer than 5 cards.
        strength:  ``very strong`` / ``strong`` / ``moderate`` / ``weak`` / ``unknown``.
        cards:     Tokens of the five cards forming the hand.
    """

    hand_name: str
    category: HandCategory | None
    strength: str
    cards: list[str]


class EquityTool:
    """Facade over the simulator and ranker for the advisor layers."""

    def __init__(self, config: SimulationConfig | None = None, verbose: bool = True) -> None:
        self.config = config or SimulationConfig()
        self.verbose = verbose

    # ── Simulation ────────────────────────────────────────────────

    def estimate(
        self,
        known_cards: Sequence[CardLike],
        iterations: int | None = None,
        fast_mode: bool = False,
    ) -> SimulationResult:
        """Run a Monte-Carlo simulation and return win/tie/lose percentages.

        Args:
            known_cards: 2 hole cards followed by 0–5 community cards.
            iterations:  Explicit count; defaults to the configured fast/full count.
            fast_mode:   Use the quick iteration count when *iterations* is unset.

        Raises:
            HoldemEquityError: any validation or aggregation failure.
        """
        count = iterations if iterations is not None else self.config.iterations_for(fast_mode)
        try:
            if self.config.workers > 1:
                result = simulate_parallel(
                    known_cards,
                    count,
                    max_workers=self.config.workers,
                    seed=self.config.seed,
                    min_iterations=self.config.min_iterations,
                    max_iterations=self.config.max_iterations,
                )
            else:
                result = simulate(
                    known_cards,
                    count,
                    seed=self.config.seed,
                    min_iterations=self.config.min_iterations,
                    max_iterations=self.config.max_iterations,
                )
        except HoldemEquityError as exc:
            _log.error(f"simulation failed kind={exc.kind}: {exc}")
            raise
        if self.verbose:
            _log.status(
                f"win={result.win:.1f}% tie={result.tie:.1f}% lose={result.lose:.1f}% "
                f"iterations={result.iterations} confidence={result.confidence}"
            )
        return result

    def start_run(
        self,
        known_cards: Sequence[CardLike],
        token: CancellationToken | None = None,
        iterations: int | None = None,
        fast_mode: bool = False,
    ) -> SimulationRun:
        """Validate inputs and return a batched run for a host to drive."""
        count = iterations if iterations is not None else self.config.iterations_for(fast_mode)
        rng = random.Random(self.config.seed)
        return SimulationRun.start(
            known_cards,
            count,
            rng=rng,
            batch_size=self.config.batch_size,
            token=token,
            min_iterations=self.config.min_iterations,
            max_iterations=self.config.max_iterations,
        )

    # ── Hand description ──────────────────────────────────────────

    @staticmethod
    def describe_hand(cards: Sequence[CardLike]) -> str:
        """Best-hand description, or a prompt when fewer than 5 cards."""
        return EquityTool.analyze_hand(cards).hand_name

    @staticmethod
    def analyze_hand(cards: Sequence[CardLike]) -> HandAnalysis:
        if len(cards) < 5:
            return HandAnalysis("Need at least 5 cards to evaluate hand", None, "unknown", [])
        try:
            ranked = rank(cards)
        except HoldemEquityError as exc:
            _log.warn(f"cannot evaluate hand: {exc}")
            return HandAnalysis("Error evaluating hand", None, "unknown", [])
        return HandAnalysis(
            hand_name=ranked.description,
            category=ranked.category,
            strength=hand_strength(ranked.category),
            cards=[card.token for card in ranked.cards],
        )

    @staticmethod
    def format_known(cards: Sequence[CardLike]) -> str:
        """Glyph rendering of the known cards, e.g. ``"A♥ 10♠"``."""
        return format_cards([str(card) for card in cards])
