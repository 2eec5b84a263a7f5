"""Colored terminal logger for the Hold'em equity advisor.

Provides ANSI-coloured output with a per-module prefix.  Falls back to
plain text when the terminal does not support ANSI or when
``HOLDEM_NO_COLOR=1`` (or ``NO_COLOR``) is set.

The ranking and simulation core never log; only the tool, workflow and
CLI layers do.
"""

from __future__ import annotations

import os
import sys


# ---------------------------------------------------------------------------
# ANSI colour codes
# ---------------------------------------------------------------------------

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"

_FG_RED = "\033[31m"
_FG_GREEN = "\033[32m"
_FG_YELLOW = "\033[33m"
_FG_BLUE = "\033[34m"
_FG_MAGENTA = "\033[35m"
_FG_CYAN = "\033[36m"
_FG_WHITE = "\033[37m"
_FG_BRIGHT_GREEN = "\033[92m"


def _supports_color() -> bool:
    """Heuristic check for ANSI colour support."""
    if os.getenv("HOLDEM_NO_COLOR", "").strip().lower() in {"1", "true", "yes"}:
        return False
    if os.getenv("NO_COLOR"):
        return False
    if os.name == "nt":
        # Windows Terminal and VS Code render ANSI; legacy conhost may not
        return bool(os.getenv("WT_SESSION") or os.getenv("TERM_PROGRAM") == "vscode")
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class AdvisorLogger:
    """Simple coloured logger with module prefix."""

    _MODULE_COLORS: dict[str, str] = {
        "Equity": _FG_YELLOW,
        "Ranker": _FG_BLUE,
        "Advisor": _FG_GREEN,
        "Session": _FG_CYAN,
        "CLI": _FG_MAGENTA,
    }

    def __init__(self, module: str, color: bool | None = None) -> None:
        self.module = module
        self._prefix_color = self._MODULE_COLORS.get(module, _FG_WHITE)
        self._color = _supports_color() if color is None else color

    def _format(self, level_color: str, level: str, message: str) -> str:
        if self._color:
            return (
                f"{self._prefix_color}{_BOLD}[{self.module}]{_RESET} "
                f"{level_color}{level}{_RESET} {message}"
            )
        return f"[{self.module}] {level} {message}"

    def info(self, message: str) -> None:
        print(self._format(_FG_GREEN, ">", message))

    def success(self, message: str) -> None:
        print(self._format(_FG_BRIGHT_GREEN, "+", message))

    def warn(self, message: str) -> None:
        print(self._format(_FG_YELLOW, "!", message))

    def error(self, message: str) -> None:
        print(self._format(_FG_RED, "X", message))

    def status(self, message: str) -> None:
        """Dimmed status line for non-critical events."""
        if self._color:
            print(f"{self._prefix_color}{_BOLD}[{self.module}]{_RESET} {_DIM}{message}{_RESET}")
        else:
            print(f"[{self.module}] {message}")
