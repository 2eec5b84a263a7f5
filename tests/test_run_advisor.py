from __future__ import annotations

import json

import pytest

from holdem_equity import run_advisor


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOLDEM_NO_COLOR", "1")
    monkeypatch.setenv("HOLDEM_SIMULATION_WORKERS", "1")


def test_json_output(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_advisor.main(
        ["Ah", "Ad", "Ac", "Kd", "Ks", "--iterations", "200", "--seed", "4", "--json"]
    )
    assert code == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["cards"] == ["Ah", "Ad", "Ac", "Kd", "Ks"]
    assert payload["stage"] == "flop"
    assert payload["hand"] == "Full House, Aces over Kings"
    assert payload["result"]["iterations"] == 200
    assert payload["advice"]["action"] == "Bet 3x (Strong Position)"


def test_preflop_uses_pattern_advice(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_advisor.main(["Ah", "As", "--iterations", "100", "--seed", "1", "--json"])
    assert code == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["hand"] is None
    assert payload["stage"] == "preflop"
    assert payload["advice"]["action"].startswith("Pocket Rockets")


def test_seed_is_reproducible(capsys: pytest.CaptureFixture[str]) -> None:
    argv = ["Kh", "Qh", "2h", "7h", "Jc", "--iterations", "300", "--seed", "9", "--json"]
    run_advisor.main(argv)
    first = json.loads(capsys.readouterr().out)
    run_advisor.main(argv)
    second = json.loads(capsys.readouterr().out)
    assert first["result"] == second["result"]


def test_text_output(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_advisor.main(["Ah", "Kd", "2c", "7d", "9h", "--iterations", "100", "--seed", "2"])
    assert code == 0

    out = capsys.readouterr().out
    assert "A♥ K♦ 2♣ 7♦ 9♥" in out
    assert "Hand:       Ace High (weak)" in out
    assert "Iterations: 100" in out


@pytest.mark.parametrize(
    ("argv", "kind"),
    [
        (["Ah"], "TooFewCards"),
        (["Ah", "Ah"], "DuplicateCards"),
        (["Ah", "Zz"], "InvalidCardFormat"),
        (["Ah", "Kd", "--iterations", "5"], "InvalidIterationCount"),
    ],
)
def test_errors_exit_with_code_2(
    argv: list[str], kind: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_advisor.main(argv) == 2
    assert f"{kind}:" in capsys.readouterr().out
