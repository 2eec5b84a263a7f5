from __future__ import annotations

from typing import Any

__all__ = ["AdvisorSession", "AdvisorSnapshot"]


def __getattr__(name: str) -> Any:
	if name in {"AdvisorSession", "AdvisorSnapshot"}:
		from .advisor_session import AdvisorSession, AdvisorSnapshot

		return {"AdvisorSession": AdvisorSession, "AdvisorSnapshot": AdvisorSnapshot}[name]
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
