"""Monte-Carlo equity engine: hero versus one random opponent, best 5 of 7.

Each iteration shuffles the remaining deck (52 minus the known cards),
deals the opponent two hole cards and completes the board, ranks both
7-card pools and records a win, tie or loss.

The iteration loop is exposed as a resumable :class:`SimulationRun`
(``start`` → ``step`` … → ``finalize``) so that a single-threaded host can
run it in batches and abandon it between batches.  :func:`simulate` drives
a run to completion; :func:`simulate_parallel` partitions the iterations
across worker processes and merges their tallies.

Performance:
    Every iteration is a full shuffle of up to 50 cards plus up to 42
    five-card evaluations, so large counts are CPU-bound.  Keep batches in
    the tens to low hundreds when yielding to a UI loop.
"""

from __future__ import annotations

import os
import random
import threading
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, MutableSequence, Sequence

from holdem_equity.core.cards import Card, CardLike, remaining_deck, to_card
from holdem_equity.core.errors import (
    DuplicateCardsError,
    InvalidIterationCountError,
    NoValidSimulationsError,
    SimulationCancelledError,
    TooFewCardsError,
    TooManyCardsError,
)
from holdem_equity.core.hand_ranker import Outcome, compare, rank

HOLE_CARDS = 2
BOARD_CARDS = 5
MAX_KNOWN_CARDS = HOLE_CARDS + BOARD_CARDS

DEFAULT_MIN_ITERATIONS = 10
DEFAULT_MAX_ITERATIONS = 10_000
DEFAULT_BATCH_SIZE = 50

CONFIDENCE_TIERS: tuple[tuple[int, int], ...] = (
    (2000, 95),
    (1000, 85),
    (500, 70),
    (250, 50),
)
"""``(min_valid_iterations, score)`` pairs, highest first."""

BASE_CONFIDENCE = 25


# ── Results ───────────────────────────────────────────────────────


def confidence_score(valid_iterations: int) -> int:
    """Coarse 0–100 score that only ever grows with the iteration count.

    This is an advisory label for display, not a statistical interval.
    """
    for threshold, score in CONFIDENCE_TIERS:
        if valid_iterations >= threshold:
            return score
    return BASE_CONFIDENCE


def confidence_label(score: int) -> str:
    if score >= 95:
        return "very high"
    if score >= 85:
        return "high"
    if score >= 50:
        return "medium"
    return "low"


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Aggregated outcome of one simulation call.

    Attributes:
        win:        Percentage of counted iterations the hero won.
        tie:        Percentage of counted iterations that split.
        lose:       Percentage of counted iterations the hero lost.
        iterations: Iterations that produced a classification.
        confidence: Coarse 0–100 score from :func:`confidence_score`.
    """

    win: float
    tie: float
    lose: float
    iterations: int
    confidence: int

    @property
    def confidence_label(self) -> str:
        return confidence_label(self.confidence)

    def as_dict(self) -> dict[str, Any]:
        return {
            "win": self.win,
            "tie": self.tie,
            "lose": self.lose,
            "iterations": self.iterations,
            "confidence": self.confidence,
        }


@dataclass(slots=True)
class Tallies:
    """Mutable per-run counters. ``skipped`` iterations never count."""

    wins: int = 0
    ties: int = 0
    losses: int = 0
    skipped: int = 0

    @property
    def valid(self) -> int:
        return self.wins + self.ties + self.losses

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.A_WINS:
            self.wins += 1
        elif outcome is Outcome.TIE:
            self.ties += 1
        else:
            self.losses += 1

    def merge(self, other: "Tallies") -> "Tallies":
        return Tallies(
            wins=self.wins + other.wins,
            ties=self.ties + other.ties,
            losses=self.losses + other.losses,
            skipped=self.skipped + other.skipped,
        )

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.wins, self.ties, self.losses, self.skipped


def aggregate(tallies: Tallies) -> SimulationResult:
    """Turn raw counters into percentages plus a confidence score.

    Raises:
        NoValidSimulationsError: no iteration produced a classification.
    """
    valid = tallies.valid
    if valid == 0:
        raise NoValidSimulationsError(
            f"No valid iterations completed ({tallies.skipped} skipped)"
        )
    return SimulationResult(
        win=tallies.wins / valid * 100.0,
        tie=tallies.ties / valid * 100.0,
        lose=tallies.losses / valid * 100.0,
        iterations=valid,
        confidence=confidence_score(valid),
    )


# ── Validation ────────────────────────────────────────────────────


def validate_known(known: Sequence[CardLike]) -> list[Card]:
    """Check and parse the caller's known cards (2 hole + 0–5 board).

    Raises, in this order: :class:`TooFewCardsError`,
    :class:`TooManyCardsError`, :class:`InvalidCardFormatError`,
    :class:`DuplicateCardsError`.
    """
    if len(known) < HOLE_CARDS:
        raise TooFewCardsError(
            f"Need at least {HOLE_CARDS} cards (hole cards), got {len(known)}"
        )
    if len(known) > MAX_KNOWN_CARDS:
        raise TooManyCardsError(
            f"Too many cards: max {MAX_KNOWN_CARDS} (2 hole + 5 community), got {len(known)}"
        )
    cards = [to_card(card) for card in known]
    seen: set[Card] = set()
    for card in cards:
        if card in seen:
            raise DuplicateCardsError(f"Card {card.token} appears more than once")
        seen.add(card)
    return cards


def validate_iterations(
    iterations: Any,
    minimum: int = DEFAULT_MIN_ITERATIONS,
    maximum: int = DEFAULT_MAX_ITERATIONS,
) -> int:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidIterationCountError(f"Iteration count must be an integer, got {iterations!r}")
    if not minimum <= iterations <= maximum:
        raise InvalidIterationCountError(
            f"Iteration count must be in [{minimum}, {maximum}], got {iterations}"
        )
    return iterations


# ── Sampling ──────────────────────────────────────────────────────


def fisher_yates_shuffle(cards: MutableSequence[Card], rng: random.Random) -> None:
    """Shuffle *cards* in place; every permutation is equally likely."""
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]


class CancellationToken:
    """Thread-safe flag shared between a host and the runs it started."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class SimulationRun:
    """Incremental Monte-Carlo run over one validated set of known cards.

    The run owns its copy of the remaining deck and its counters; nothing
    is shared between runs, so several may execute concurrently.

    Usage::

        run = SimulationRun.start(["Ah", "Kd", "2c", "7d", "9h"], 1000)
        while run.step():
            yield_to_host()
        result = run.finalize()
    """

    def __init__(
        self,
        known: Sequence[Card],
        iterations: int,
        rng: random.Random,
        batch_size: int = DEFAULT_BATCH_SIZE,
        token: CancellationToken | None = None,
    ) -> None:
        self.known = tuple(known)
        self.requested = iterations
        self.batch_size = max(1, int(batch_size))
        self.token = token or CancellationToken()
        self._rng = rng
        self._hole = list(self.known[:HOLE_CARDS])
        self._board = list(self.known[HOLE_CARDS:])
        self._missing = BOARD_CARDS - len(self._board)
        self._deck = remaining_deck(self.known)
        self._tallies = Tallies()
        self._attempted = 0

    @classmethod
    def start(
        cls,
        known: Sequence[CardLike],
        iterations: int,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        token: CancellationToken | None = None,
        min_iterations: int = DEFAULT_MIN_ITERATIONS,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> "SimulationRun":
        """Validate inputs and build the remaining deck once.

        Raises:
            TooFewCardsError, TooManyCardsError, InvalidCardFormatError,
            DuplicateCardsError, InvalidIterationCountError,
            InsufficientDeckError
        """
        cards = validate_known(known)
        count = validate_iterations(iterations, min_iterations, max_iterations)
        if rng is None:
            rng = random.Random(seed)
        return cls(cards, count, rng, batch_size=batch_size, token=token)

    # ── State ─────────────────────────────────────────────────────

    @property
    def tallies(self) -> Tallies:
        return Tallies(*self._tallies.as_tuple())

    @property
    def attempted(self) -> int:
        return self._attempted

    @property
    def remaining(self) -> int:
        return self.requested - self._attempted

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def done(self) -> bool:
        return self.remaining <= 0 or self.cancelled

    @property
    def progress(self) -> float:
        return self._attempted / self.requested

    # ── Driving ───────────────────────────────────────────────────

    def _play_once(self) -> Outcome:
        deck = self._deck
        fisher_yates_shuffle(deck, self._rng)
        opponent = deck[:HOLE_CARDS]
        board = self._board + deck[HOLE_CARDS:HOLE_CARDS + self._missing]
        hero_hand = rank(self._hole + board)
        opponent_hand = rank(opponent + board)
        return compare(hero_hand, opponent_hand)

    def step(self) -> bool:
        """Run one batch; return ``True`` while more batches remain.

        A batch already started always completes; cancellation is only
        observed between batches.
        """
        if self.done:
            return False
        for _ in range(min(self.batch_size, self.remaining)):
            self._attempted += 1
            try:
                outcome = self._play_once()
            except Exception:
                self._tallies.skipped += 1
                continue
            self._tallies.record(outcome)
        return not self.done

    def run(self) -> "SimulationRun":
        while self.step():
            pass
        return self

    def cancel(self) -> None:
        self.token.cancel()

    def finalize(self) -> SimulationResult:
        """Aggregate the counters into a :class:`SimulationResult`.

        Raises:
            SimulationCancelledError: the run was abandoned.
            NoValidSimulationsError:  every attempted iteration was skipped.
        """
        if self.cancelled:
            raise SimulationCancelledError(
                f"Simulation abandoned after {self._attempted}/{self.requested} iterations"
            )
        return aggregate(self._tallies)


# ── Entry points ──────────────────────────────────────────────────


def simulate(
    known: Sequence[CardLike],
    iterations: int,
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
    min_iterations: int = DEFAULT_MIN_ITERATIONS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> SimulationResult:
    """Estimate win/tie/lose percentages for *known* against one random hand.

    Args:
        known:      2 hole cards followed by 0–5 community cards.
        iterations: Number of random run-outs to sample.
        rng:        Random source; a fresh ``random.Random`` by default.
        seed:       Seed for the fresh random source (ignored with *rng*).

    Returns:
        :class:`SimulationResult` with percentages summing to 100.
    """
    run = SimulationRun.start(
        known,
        iterations,
        rng=rng,
        seed=seed,
        batch_size=iterations,
        min_iterations=min_iterations,
        max_iterations=max_iterations,
    )
    return run.run().finalize()


def _run_chunk(tokens: Sequence[str], iterations: int, seed: int) -> tuple[int, int, int, int]:
    """Worker entry point: play *iterations* trials and return raw counters."""
    run = SimulationRun.start(
        tokens,
        iterations,
        seed=seed,
        batch_size=iterations,
        min_iterations=1,
        max_iterations=iterations,
    )
    return run.run().tallies.as_tuple()


def partition(iterations: int, workers: int) -> list[int]:
    """Split *iterations* into at most *workers* non-empty, near-equal chunks."""
    workers = max(1, min(workers, iterations))
    base, extra = divmod(iterations, workers)
    return [base + (1 if index < extra else 0) for index in range(workers)]


def simulate_parallel(
    known: Sequence[CardLike],
    iterations: int,
    *,
    max_workers: int | None = None,
    seed: int | None = None,
    min_iterations: int = DEFAULT_MIN_ITERATIONS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> SimulationResult:
    """Like :func:`simulate`, with iterations spread over worker processes.

    Each worker gets its own seeded random source; per-worker counters are
    merged before aggregation.  ``max_workers <= 1`` runs in-process.
    """
    cards = validate_known(known)
    count = validate_iterations(iterations, min_iterations, max_iterations)
    remaining_deck(cards)

    workers = max_workers if max_workers is not None else (os.cpu_count() or 1)
    if workers <= 1:
        return simulate(
            cards,
            count,
            seed=seed,
            min_iterations=min_iterations,
            max_iterations=max_iterations,
        )

    seeder = random.Random(seed)
    tokens = [card.token for card in cards]
    chunks = partition(count, workers)
    seeds = [seeder.randrange(1, 2**31) for _ in chunks]

    totals = Tallies()
    with ProcessPoolExecutor(max_workers=len(chunks)) as executor:
        futures = [
            executor.submit(_run_chunk, tokens, chunk, chunk_seed)
            for chunk, chunk_seed in zip(chunks, seeds)
        ]
        for future in futures:
            totals = totals.merge(Tallies(*future.result()))
    return aggregate(totals)
