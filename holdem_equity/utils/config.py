"""Runtime configuration dataclasses for the simulator and the advisor.

Each dataclass reads its defaults through :data:`settings.cfg` at
construction time (environment first, then ``config.yaml``, then the
code default).  Override individual fields when constructing from code
(e.g. in tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from holdem_equity.core.equity_simulator import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MIN_ITERATIONS,
)
from holdem_equity.utils.settings import cfg


@dataclass(slots=True)
class SimulationConfig:
    """Monte-Carlo settings.

    NOTE: All fields use ``default_factory`` so that environment variables
    are read at **instantiation** time, not at import time.  This keeps
    ``monkeypatch.setenv`` in tests effective.
    """

    iterations: int = field(default_factory=lambda: cfg.get_int("simulation.iterations", 1000))
    fast_iterations: int = field(default_factory=lambda: cfg.get_int("simulation.fast_iterations", 300))
    batch_size: int = field(default_factory=lambda: cfg.get_int("simulation.batch_size", DEFAULT_BATCH_SIZE))
    min_iterations: int = field(default_factory=lambda: cfg.get_int("simulation.min_iterations", DEFAULT_MIN_ITERATIONS))
    max_iterations: int = field(default_factory=lambda: cfg.get_int("simulation.max_iterations", DEFAULT_MAX_ITERATIONS))
    workers: int = field(default_factory=lambda: cfg.get_int("simulation.workers", 1))
    seed: int | None = field(default_factory=lambda: cfg.get_optional_int("simulation.seed"))

    def iterations_for(self, fast_mode: bool) -> int:
        """Iteration count for quick (interactive) or full runs, clamped to bounds."""
        count = self.fast_iterations if fast_mode else self.iterations
        return min(max(count, self.min_iterations), self.max_iterations)


@dataclass(slots=True)
class AdvisorConfig:
    """Advisor session settings."""

    fast_mode: bool = field(default_factory=lambda: cfg.get_bool("advisor.fast_mode", True))
