"""Key-value persistence for best scores and checkpoint passwords.

The store is injected into the orchestration layer; the rules engine
never sees it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from mordicus.config import LevelType

logger = logging.getLogger(__name__)


class Store(Protocol):
    """Minimal string key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, used by tests and the API server."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def to_dict(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileStore(MemoryStore):
    """Store persisted as a flat JSON object, rewritten on every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        data: dict[str, str] = {}
        if self.path.exists():
            raw = json.loads(self.path.read_text())
            if not isinstance(raw, dict):
                raise ValueError(f"Store file {self.path} must hold a JSON object.")
            data = {str(k): str(v) for k, v in raw.items()}
        super().__init__(data)

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self._flush()

    def remove(self, key: str) -> None:
        super().remove(key)
        self._flush()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, sort_keys=True))
        logger.debug("Store written to %s", self.path)


def _read_int(store: Store, key: str) -> int:
    raw = store.get(key)
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric store value for %s: %r", key, raw)
        return 0


def best_bonus(store: Store, password: str) -> int:
    """Best bonus left when clearing the level with *password*."""
    return _read_int(store, password)


def update_best_bonus(store: Store, password: str, bonus: int) -> int:
    best = max(bonus, best_bonus(store, password))
    store.set(password, str(best))
    return best


def _total_score_key(level_type: LevelType) -> str:
    return f"best-total-score-{LevelType(level_type).value}-levels"


def best_total_score(store: Store, level_type: LevelType) -> int:
    return _read_int(store, _total_score_key(level_type))


def update_best_total_score(store: Store, level_type: LevelType, score: int) -> int:
    best = max(score, best_total_score(store, level_type))
    store.set(_total_score_key(level_type), str(best))
    return best
