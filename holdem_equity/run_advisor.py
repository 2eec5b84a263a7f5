"""run_advisor.py — command-line entry point for the equity advisor.

Prints the best hand, a Monte-Carlo equity estimate against one random
opponent and the matching betting advice.

Usage::

    holdem-advisor Ah Kd
    holdem-advisor Ah Kd 2c 7d 9h --iterations 5000
    holdem-advisor 10h 10s Jc 4d 4s --workers 4 --seed 7 --json

Environment variables (optional, CLI flags win)
-----------------------------------------------
``HOLDEM_SIMULATION_ITERATIONS``       Full-mode iteration count.
``HOLDEM_SIMULATION_FAST_ITERATIONS``  ``--fast`` iteration count.
``HOLDEM_SIMULATION_WORKERS``          Worker processes (``1`` = in-process).
``HOLDEM_SIMULATION_SEED``             Seed for reproducible runs.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from holdem_equity.core.errors import HoldemEquityError
from holdem_equity.tools.equity_tool import EquityTool
from holdem_equity.utils.config import SimulationConfig
from holdem_equity.utils.logger import AdvisorLogger
from holdem_equity.workflows.advice import game_stage, postflop_advice, preflop_advice

_log = AdvisorLogger("CLI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="holdem-advisor",
        description="Hold'em equity advisor — Monte-Carlo win/tie/lose vs one random hand",
    )
    parser.add_argument(
        "cards", nargs="+",
        help="2 hole cards then 0-5 community cards, e.g. Ah Kd 2c 7d 9h",
    )
    parser.add_argument(
        "--iterations", type=int, default=None,
        help="Number of simulations (default: from config)",
    )
    parser.add_argument(
        "--fast", action="store_true",
        help="Use the quick iteration count",
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Worker processes for the simulation (default: from config)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for a reproducible run",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the result as JSON",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = SimulationConfig()
    if args.workers is not None:
        config.workers = args.workers
    if args.seed is not None:
        config.seed = args.seed
    tool = EquityTool(config, verbose=not args.json)

    try:
        result = tool.estimate(args.cards, iterations=args.iterations, fast_mode=args.fast)
    except HoldemEquityError as exc:
        _log.error(f"{exc.kind}: {exc}")
        return 2

    stage = game_stage(len(args.cards))
    if len(args.cards) == 2:
        advice = preflop_advice(args.cards)
    else:
        advice = postflop_advice(result.win, stage)
    analysis = tool.analyze_hand(args.cards)

    if args.json:
        payload = {
            "cards": list(args.cards),
            "stage": stage,
            "hand": analysis.hand_name if analysis.category is not None else None,
            "result": result.as_dict(),
            "advice": {
                "action": advice.action,
                "confidence": advice.confidence,
                "reasoning": advice.reasoning,
            },
        }
        print(json.dumps(payload, ensure_ascii=False))
        return 0

    _log.info(f"Cards:      {tool.format_known(args.cards)}")
    if analysis.category is not None:
        _log.info(f"Hand:       {analysis.hand_name} ({analysis.strength})")
    _log.info(
        f"Equity:     win {result.win:.1f}%  tie {result.tie:.1f}%  lose {result.lose:.1f}%"
    )
    _log.info(
        f"Iterations: {result.iterations}  confidence {result.confidence} ({result.confidence_label})"
    )
    _log.success(f"{advice.action} — {advice.reasoning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
