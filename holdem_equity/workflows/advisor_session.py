"""Advisor session — thread-safe state between the card picker and the engine.

The host calls :meth:`AdvisorSession.submit` every time the selected cards
change and reads :meth:`AdvisorSession.snapshot` whenever it repaints.
With 5–7 cards the session starts a batched simulation in a worker
thread; otherwise advice is computed immediately.

Every submission takes a new, monotonically increasing request id.  A
worker checks its id after each batch: once a newer request exists it
cancels its run and exits without publishing, so an abandoned result can
never overwrite a newer one.

Usage (host side)::

    session = AdvisorSession()
    session.submit(["Ah", "Kd", "2c", "7d", "9h"])
    snap = session.snapshot()   # simulating=True, then the final advice
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from typing import Sequence

from holdem_equity.core.equity_simulator import CancellationToken, SimulationResult, SimulationRun
from holdem_equity.core.errors import HoldemEquityError
from holdem_equity.tools.equity_tool import EquityTool
from holdem_equity.utils.config import AdvisorConfig
from holdem_equity.utils.logger import AdvisorLogger
from holdem_equity.workflows.advice import (
    BettingAdvice,
    game_stage,
    postflop_advice,
    preflop_advice,
    tip_message,
)

_log = AdvisorLogger("Session")

_IDLE_ADVICE = BettingAdvice("Select your 2 hole cards to begin", "low", "Need cards to analyze", "preflop")


@dataclass(frozen=True)
class AdvisorSnapshot:
    """Immutable view of the advisor state for one request."""

    request_id: int = 0
    cards: tuple[str, ...] = ()
    stage: str = "preflop"
    advice: BettingAdvice = _IDLE_ADVICE
    hand_description: str = "Select hole cards first"
    tip: str = "Pick 2 hole cards first"
    result: SimulationResult | None = None
    error: str | None = None
    simulating: bool = False
    updated_at: float = field(default_factory=time.time)


def _hand_description(cards: Sequence[str]) -> str:
    if len(cards) >= 5:
        return EquityTool.describe_hand(cards)
    if len(cards) >= 2:
        return "Select community cards to evaluate hand"
    return "Select hole cards first"


class AdvisorSession:
    """Owns the current request id and the published snapshot."""

    def __init__(
        self,
        tool: EquityTool | None = None,
        config: AdvisorConfig | None = None,
        yield_seconds: float = 0.0,
    ) -> None:
        self.tool = tool or EquityTool()
        self.config = config or AdvisorConfig()
        self.yield_seconds = yield_seconds
        self._lock = threading.Lock()
        self._request_id = 0
        self._token: CancellationToken | None = None
        self._worker: threading.Thread | None = None
        self._state = AdvisorSnapshot()

    # ── Host-side API ──────────────────────────────────────────────

    @property
    def current_request(self) -> int:
        with self._lock:
            return self._request_id

    def snapshot(self) -> AdvisorSnapshot:
        with self._lock:
            return self._state

    def submit(self, cards: Sequence[str], fast_mode: bool | None = None) -> int:
        """Register a new card selection and return its request id."""
        selected = tuple(str(card) for card in cards)
        fast = self.config.fast_mode if fast_mode is None else fast_mode
        stage = game_stage(len(selected))
        token = CancellationToken()

        with self._lock:
            self._request_id += 1
            request_id = self._request_id
            if self._token is not None:
                self._token.cancel()
            self._token = token
            self._state = AdvisorSnapshot(
                request_id=request_id,
                cards=selected,
                stage=stage,
                hand_description=_hand_description(selected),
                tip=tip_message(stage, len(selected)),
            )

        if len(selected) < 2:
            return request_id
        if len(selected) == 2:
            self._publish(request_id, advice=preflop_advice(selected))
            return request_id
        if len(selected) < 5:
            self._publish(
                request_id,
                advice=BettingAdvice(
                    "Add more community cards for analysis", "low", "Need at least 5 cards total", stage,
                ),
            )
            return request_id

        try:
            run = self.tool.start_run(selected, token=token, fast_mode=fast)
        except HoldemEquityError as exc:
            self._publish_error(request_id, stage, exc)
            return request_id

        self._publish(
            request_id,
            simulating=True,
            advice=BettingAdvice("Calculating odds...", "medium", "Running Monte Carlo simulation", stage),
        )
        worker = threading.Thread(
            target=self._drive,
            args=(request_id, stage, run),
            name=f"advisor-sim-{request_id}",
            daemon=True,
        )
        with self._lock:
            self._worker = worker
        worker.start()
        return request_id

    def reset(self) -> int:
        """Clear the selection; any running simulation is abandoned."""
        return self.submit([])

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the latest worker finishes; ``False`` on timeout."""
        with self._lock:
            worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def close(self) -> None:
        """Abandon any running simulation and publish a settled snapshot."""
        with self._lock:
            self._request_id += 1
            if self._token is not None:
                self._token.cancel()
            self._token = None
            if not self._state.simulating:
                return
            self._state = replace(
                self._state,
                request_id=self._request_id,
                simulating=False,
                advice=BettingAdvice("Analysis stopped", "low", "Simulation was cancelled", self._state.stage),
                updated_at=time.time(),
            )

    # ── Worker side ────────────────────────────────────────────────

    def _is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._request_id

    def _publish(self, request_id: int, **changes: object) -> bool:
        """Apply *changes* only if *request_id* is still the latest request."""
        with self._lock:
            if request_id != self._request_id:
                return False
            self._state = replace(self._state, updated_at=time.time(), **changes)
            return True

    def _publish_error(self, request_id: int, stage: str, exc: HoldemEquityError) -> None:
        _log.error(f"request={request_id} kind={exc.kind}: {exc}")
        self._publish(
            request_id,
            simulating=False,
            error=str(exc),
            advice=BettingAdvice("Simulation Error", "low", "Please try selecting different cards", stage),
        )

    def _drive(self, request_id: int, stage: str, run: SimulationRun) -> None:
        while True:
            more = run.step()
            if not self._is_current(request_id):
                run.cancel()
                _log.status(f"request={request_id} abandoned after {run.attempted} iterations")
                return
            if not more:
                break
            if self.yield_seconds > 0:
                time.sleep(self.yield_seconds)

        if run.cancelled:
            return
        try:
            result = run.finalize()
        except HoldemEquityError as exc:
            self._publish_error(request_id, stage, exc)
            return

        if self._publish(
            request_id,
            simulating=False,
            result=result,
            error=None,
            advice=postflop_advice(result.win, stage),
        ):
            _log.info(f"request={request_id} win={result.win:.1f}% iterations={result.iterations}")
