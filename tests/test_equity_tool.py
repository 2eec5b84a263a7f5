from __future__ import annotations

import pytest

from holdem_equity.core.equity_simulator import CancellationToken
from holdem_equity.core.errors import DuplicateCardsError, InvalidIterationCountError
from holdem_equity.core.hand_ranker import HandCategory
from holdem_equity.tools.equity_tool import EquityTool
from holdem_equity.utils.config import SimulationConfig


def _config(**overrides: object) -> SimulationConfig:
    values: dict[str, object] = {
        "iterations": 200,
        "fast_iterations": 60,
        "batch_size": 25,
        "min_iterations": 10,
        "max_iterations": 10_000,
        "workers": 1,
        "seed": 3,
    }
    values.update(overrides)
    return SimulationConfig(**values)  # type: ignore[arg-type]


class TestEstimate:
    def test_uses_configured_counts(self) -> None:
        tool = EquityTool(_config())
        assert tool.estimate(["Ah", "Kd", "2c", "7d", "9h"]).iterations == 200
        assert tool.estimate(["Ah", "Kd"], fast_mode=True).iterations == 60

    def test_explicit_iterations_win(self) -> None:
        tool = EquityTool(_config())
        assert tool.estimate(["Ah", "Kd"], iterations=40).iterations == 40

    def test_seeded_config_is_reproducible(self) -> None:
        tool = EquityTool(_config())
        assert tool.estimate(["Qh", "Qd"]) == tool.estimate(["Qh", "Qd"])

    def test_parallel_workers(self) -> None:
        tool = EquityTool(_config(workers=2))
        result = tool.estimate(["Ah", "Kd", "2c", "7d", "9h"])
        assert result.iterations == 200

    def test_failure_is_logged_and_raised(self, capsys: pytest.CaptureFixture[str]) -> None:
        tool = EquityTool(_config())
        with pytest.raises(DuplicateCardsError):
            tool.estimate(["Ah", "Ah"])
        assert "kind=DuplicateCards" in capsys.readouterr().out

    def test_bounds_from_config(self) -> None:
        tool = EquityTool(_config(max_iterations=100))
        with pytest.raises(InvalidIterationCountError):
            tool.estimate(["Ah", "Kd"], iterations=150)


class TestStartRun:
    def test_run_uses_batch_size_and_token(self) -> None:
        token = CancellationToken()
        run = EquityTool(_config()).start_run(["Ah", "Kd", "2c", "7d", "9h"], token=token)
        assert run.step() is True
        assert run.attempted == 25
        token.cancel()
        assert run.step() is False


class TestHandAnalysis:
    def test_describe_hand(self) -> None:
        assert EquityTool.describe_hand(["Ah", "Ad", "Ac", "Kd", "Ks"]) == "Full House, Aces over Kings"

    def test_too_few_cards_prompt(self) -> None:
        analysis = EquityTool.analyze_hand(["Ah", "Kd", "2c"])
        assert analysis.hand_name == "Need at least 5 cards to evaluate hand"
        assert analysis.category is None
        assert analysis.strength == "unknown"

    def test_analysis_fields(self) -> None:
        analysis = EquityTool.analyze_hand(["9h", "10h", "Jh", "Qh", "Kh", "2c", "2d"])
        assert analysis.category is HandCategory.STRAIGHT_FLUSH
        assert analysis.strength == "very strong"
        assert sorted(analysis.cards) == sorted(["9h", "10h", "Jh", "Qh", "Kh"])

    def test_invalid_pool_degrades(self, capsys: pytest.CaptureFixture[str]) -> None:
        analysis = EquityTool.analyze_hand(["Ah", "Ah", "2c", "3d", "4s"])
        assert analysis.hand_name == "Error evaluating hand"
        assert "cannot evaluate hand" in capsys.readouterr().out

    def test_format_known(self) -> None:
        assert EquityTool.format_known(["Ah", "10s"]) == "A♥ 10♠"
