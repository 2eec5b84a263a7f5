"""Ranking and simulation core: pure functions, no logging, no shared state."""
