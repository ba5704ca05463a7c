"""core/environment.py — Where flattened environment variables are written."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Protocol


class EnvironmentScope(Protocol):
    """Set-many; unset is reserved for restoring keys the runner introduced."""

    def set_many(self, values: Mapping[str, str]) -> None: ...

    def unset_many(self, keys: Iterable[str]) -> None: ...

    def get(self, key: str, default: str | None = None) -> str | None: ...


class ProcessEnvironment:
    """Writes straight into ``os.environ`` (or another mutable mapping)."""

    def __init__(self, target: MutableMapping[str, str] | None = None) -> None:
        self._target = os.environ if target is None else target

    def set_many(self, values: Mapping[str, str]) -> None:
        for key, value in values.items():
            self._target[key] = value

    def unset_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._target.pop(key, None)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._target.get(key, default)


class MemoryEnvironment:
    """In-memory scope for tests; also records every write in order."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.writes: list[dict[str, str]] = []

    def set_many(self, values: Mapping[str, str]) -> None:
        self.values.update(values)
        self.writes.append(dict(values))

    def unset_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.values.pop(key, None)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)
