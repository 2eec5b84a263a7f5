"""Typed failures raised by the ranking and simulation core.

Every class carries a ``kind`` string naming the failure category so that
callers (CLI, advisor session, any HTTP wrapper) can map failures to
fallback messages without matching on exception types.

The core only raises these; it never logs them or substitutes defaults.
"""

from __future__ import annotations


class HoldemEquityError(ValueError):
    """Base class for all call-level failures of the equity core."""

    kind = "HoldemEquityError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)


class InvalidInputError(HoldemEquityError):
    """Hand Ranker received a malformed or too-small card pool."""

    kind = "InvalidInput"


class TooFewCardsError(HoldemEquityError):
    kind = "TooFewCards"


class TooManyCardsError(HoldemEquityError):
    kind = "TooManyCards"


class DuplicateCardsError(HoldemEquityError):
    kind = "DuplicateCards"


class InvalidCardFormatError(HoldemEquityError):
    """A token is not a valid ``{rank}{suit}`` card."""

    kind = "InvalidCardFormat"


class InvalidIterationCountError(HoldemEquityError):
    kind = "InvalidIterationCount"


class InsufficientDeckError(HoldemEquityError):
    """Fewer than 7 cards left once the known cards are removed."""

    kind = "InsufficientDeck"


class NoValidSimulationsError(HoldemEquityError):
    """Every iteration of a run was skipped."""

    kind = "NoValidSimulations"


class SimulationCancelledError(HoldemEquityError):
    """``finalize()`` was called on a run that had been abandoned."""

    kind = "SimulationCancelled"
