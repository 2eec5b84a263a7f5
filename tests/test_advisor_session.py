"""Tests for workflows.advisor_session — request tokens and publishing."""

from __future__ import annotations

import threading
from typing import Any, Sequence

from holdem_equity.core.equity_simulator import CancellationToken, SimulationRun
from holdem_equity.tools.equity_tool import EquityTool
from holdem_equity.utils.config import AdvisorConfig, SimulationConfig
from holdem_equity.workflows.advisor_session import AdvisorSession


def _tool() -> EquityTool:
    return EquityTool(
        SimulationConfig(
            iterations=200,
            fast_iterations=100,
            batch_size=20,
            min_iterations=10,
            max_iterations=10_000,
            workers=1,
            seed=5,
        )
    )


class GatedRun:
    """Wraps a real run; the first batch waits until the test opens the gate."""

    def __init__(self, run: SimulationRun, gate: threading.Event) -> None:
        self._run = run
        self._gate = gate
        self.cancel_called = threading.Event()

    def step(self) -> bool:
        self._gate.wait(timeout=5)
        return self._run.step()

    def cancel(self) -> None:
        self._run.cancel()
        self.cancel_called.set()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._run, name)


class GatedTool(EquityTool):
    def __init__(self) -> None:
        super().__init__(_tool().config)
        self.gate = threading.Event()
        self.runs: list[GatedRun] = []

    def start_run(
        self,
        known_cards: Sequence[Any],
        token: CancellationToken | None = None,
        iterations: int | None = None,
        fast_mode: bool = False,
    ) -> Any:
        run = GatedRun(super().start_run(known_cards, token, iterations, fast_mode), self.gate)
        self.runs.append(run)
        return run


def _session(tool: EquityTool | None = None) -> AdvisorSession:
    return AdvisorSession(tool=tool or _tool(), config=AdvisorConfig(fast_mode=True))


class TestImmediateAdvice:
    def test_idle(self) -> None:
        snap = _session().snapshot()
        assert snap.advice.action == "Select your 2 hole cards to begin"
        assert snap.result is None

    def test_hole_cards_only_gives_preflop_advice(self) -> None:
        session = _session()
        request_id = session.submit(["Ah", "As"])
        snap = session.snapshot()
        assert snap.request_id == request_id
        assert "Pocket Rockets" in snap.advice.action
        assert snap.result is None
        assert not snap.simulating

    def test_partial_flop_asks_for_more(self) -> None:
        session = _session()
        session.submit(["Ah", "As", "2c", "7d"])
        snap = session.snapshot()
        assert snap.advice.action == "Add more community cards for analysis"
        assert snap.stage == "flop"
        assert snap.hand_description == "Select community cards to evaluate hand"

    def test_reset(self) -> None:
        session = _session()
        session.submit(["Ah", "As"])
        session.reset()
        snap = session.snapshot()
        assert snap.cards == ()
        assert snap.tip == "Pick 2 hole cards first"


class TestSimulatedAdvice:
    def test_publishes_result_and_postflop_advice(self) -> None:
        session = _session()
        session.submit(["Ah", "Ad", "Ac", "Kd", "Ks"])
        assert session.wait(timeout=30)

        snap = session.snapshot()
        assert not snap.simulating
        assert snap.result is not None
        assert snap.result.iterations == 100
        assert snap.hand_description == "Full House, Aces over Kings"
        assert snap.advice.action == "Bet 3x (Strong Position)"
        assert snap.stage == "flop"

    def test_full_mode_uses_full_iterations(self) -> None:
        session = _session()
        session.submit(["Ah", "Kd", "2c", "7d", "9h"], fast_mode=False)
        assert session.wait(timeout=30)
        result = session.snapshot().result
        assert result is not None
        assert result.iterations == 200

    def test_validation_error_publishes_fallback(self, capsys: Any) -> None:
        session = _session()
        session.submit(["Ah", "Ah", "2c", "7d", "9h"])
        snap = session.snapshot()
        assert snap.advice.action == "Simulation Error"
        assert snap.error is not None
        assert not snap.simulating
        assert "kind=DuplicateCards" in capsys.readouterr().out

    def test_request_ids_increase(self) -> None:
        session = _session()
        first = session.submit(["Ah", "As"])
        second = session.submit(["Kh", "Ks"])
        assert second > first
        assert session.current_request == second


class TestStaleRequests:
    def test_abandoned_run_never_publishes(self) -> None:
        tool = GatedTool()
        session = _session(tool)

        stale_id = session.submit(["2h", "7d", "Ac", "Kc", "Qc"])
        stale_run = tool.runs[0]
        assert session.snapshot().simulating

        latest_id = session.submit(["Ah", "As"])
        tool.gate.set()

        assert stale_run.cancel_called.wait(timeout=10)
        snap = session.snapshot()
        assert snap.request_id == latest_id != stale_id
        assert snap.result is None
        assert "Pocket Rockets" in snap.advice.action
        assert stale_run.attempted <= 20

    def test_newer_simulation_wins(self) -> None:
        tool = GatedTool()
        session = _session(tool)

        session.submit(["2h", "7d", "Ac", "Kc", "Qc"])
        latest_id = session.submit(["Ah", "Ad", "Ac", "Kd", "Ks"])
        tool.gate.set()
        assert session.wait(timeout=30)
        assert tool.runs[0].cancel_called.wait(timeout=10)

        snap = session.snapshot()
        assert snap.request_id == latest_id
        assert snap.result is not None
        assert snap.cards == ("Ah", "Ad", "Ac", "Kd", "Ks")


class TestClose:
    def test_close_settles_running_simulation(self) -> None:
        tool = GatedTool()
        session = _session(tool)
        session.submit(["2h", "7d", "Ac", "Kc", "Qc"])
        assert session.snapshot().simulating

        session.close()
        tool.gate.set()
        assert session.wait(timeout=10)
        assert tool.runs[0].cancel_called.wait(timeout=10)

        snap = session.snapshot()
        assert not snap.simulating
        assert snap.result is None
        assert snap.advice.action == "Analysis stopped"
        assert snap.stage == "flop"
        assert snap.request_id == session.current_request

    def test_close_keeps_finished_result(self) -> None:
        session = _session()
        session.submit(["Ah", "Ad", "Ac", "Kd", "Ks"])
        assert session.wait(timeout=30)
        session.close()

        snap = session.snapshot()
        assert snap.result is not None
        assert snap.advice.action == "Bet 3x (Strong Position)"
