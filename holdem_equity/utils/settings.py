"""Settings — centralised loader for ``config.yaml``.

Reads ``config.yaml`` at the project root and exposes its values through
dotted keys.  ``HOLDEM_*`` environment variables **always take priority**
over the YAML file; the file is the friendly fallback.

Usage::

    from holdem_equity.utils.settings import cfg

    print(cfg.get_int("simulation.iterations"))      # 1000
    print(cfg.get_bool("advisor.fast_mode"))         # True

Equivalent environment variable: the YAML key ``simulation.iterations``
becomes ``HOLDEM_SIMULATION_ITERATIONS``.

Loading is lazy (on first access) and thread-safe.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any

import yaml

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _find_config_path() -> Path:
    """Resolve ``config.yaml`` by walking up towards the project root."""
    env_path = os.getenv("HOLDEM_CONFIG_FILE", "").strip()
    if env_path:
        return Path(env_path)

    start = Path(__file__).resolve().parent
    for ancestor in [start, start.parent, start.parent.parent]:
        candidate = ancestor / "config.yaml"
        if candidate.exists():
            return candidate

    return start.parent.parent / "config.yaml"


class Settings:
    """Dotted-key access with ``env > yaml > default`` priority.

    Attributes:
        _data:   Raw dictionary loaded from YAML.
        _loaded: Whether the YAML has been read yet.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._loaded: bool = False
        self._lock = threading.Lock()

    # ── Lazy loading ──────────────────────────────────────────────

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            self._load()
            self._loaded = True

    def _load(self) -> None:
        config_path = _find_config_path()
        if not config_path.exists():
            self._data = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError):
            raw = None
        self._data = raw if isinstance(raw, dict) else {}

    def reload(self) -> None:
        """Force a re-read of the file (tests, hot reload)."""
        with self._lock:
            self._loaded = False
            self._load()
            self._loaded = True

    # ── Dotted-key access ─────────────────────────────────────────

    def _resolve(self, dotted_key: str) -> Any:
        """Resolve ``simulation.iterations`` → data[simulation][iterations]."""
        self._ensure_loaded()
        node: Any = self._data
        for part in dotted_key.split("."):
            if isinstance(node, dict):
                node = node.get(part)
            else:
                return None
        return node

    @staticmethod
    def _env_key(dotted_key: str) -> str:
        """Convert ``simulation.iterations`` → ``HOLDEM_SIMULATION_ITERATIONS``."""
        return "HOLDEM_" + dotted_key.upper().replace(".", "_")

    # ── Typed getters ─────────────────────────────────────────────

    def get_str(self, key: str, default: str = "") -> str:
        env_val = os.getenv(self._env_key(key), "").strip()
        if env_val:
            return env_val
        yaml_val = self._resolve(key)
        if yaml_val is not None:
            return str(yaml_val)
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        env_val = os.getenv(self._env_key(key), "").strip()
        if env_val:
            try:
                return int(env_val)
            except ValueError:
                pass
        yaml_val = self._resolve(key)
        if yaml_val is not None:
            try:
                return int(yaml_val)
            except (ValueError, TypeError):
                pass
        return default

    def get_optional_int(self, key: str) -> int | None:
        """Like :meth:`get_int` but ``None`` when unset or unparsable."""
        env_val = os.getenv(self._env_key(key), "").strip()
        raw: Any = env_val if env_val else self._resolve(key)
        if raw is None or isinstance(raw, bool):
            return None
        try:
            return int(raw)
        except (ValueError, TypeError):
            return None

    def get_bool(self, key: str, default: bool = False) -> bool:
        env_val = os.getenv(self._env_key(key), "").strip().lower()
        if env_val in _TRUE:
            return True
        if env_val in _FALSE:
            return False
        yaml_val = self._resolve(key)
        if isinstance(yaml_val, bool):
            return yaml_val
        if yaml_val is not None:
            raw = str(yaml_val).strip().lower()
            if raw in _TRUE:
                return True
            if raw in _FALSE:
                return False
        return default

    def get_dict(self, key: str) -> dict[str, Any]:
        """Return a whole section as a dictionary."""
        yaml_val = self._resolve(key)
        if isinstance(yaml_val, dict):
            return dict(yaml_val)
        return {}

    def __repr__(self) -> str:
        self._ensure_loaded()
        return f"<Settings sections={list(self._data.keys())}>"


# ── Global singleton ─────────────────────────────────────────────
cfg = Settings()
