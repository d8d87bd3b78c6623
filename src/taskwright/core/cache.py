"""Nested-path helpers and the per-run output cache."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from taskwright.core.errors import CacheConflictError
from taskwright.core.naming import SEPARATOR


def get_value_at_path(tree: Mapping[str, Any], path: Sequence[str]) -> Any | None:
    current: Any = tree
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def set_value_at_path(tree: MutableMapping[str, Any], path: Sequence[str], value: Any) -> None:
    current = tree
    for key in path[:-1]:
        child = current.setdefault(key, {})
        if not isinstance(child, MutableMapping):
            raise ValueError(f"{key!r} already holds a value; cannot nest {SEPARATOR.join(path)}")
        current = child
    current[path[-1]] = value


def flatten(tree: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys; non-mapping values are leaves."""

    flat: dict[str, Any] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            flat.update(flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def merge_missing(dst: MutableMapping[str, Any], src: Mapping[str, Any]) -> None:
    """Deep-merge `src` into `dst` without overwriting values already in `dst`."""

    for key, value in src.items():
        if key not in dst:
            dst[key] = _copy_tree(value)
        elif isinstance(dst[key], MutableMapping) and isinstance(value, Mapping):
            merge_missing(dst[key], value)


def _copy_tree(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _copy_tree(v) for k, v in value.items()}
    return value


class OutputCache:
    """Outputs of tasks run to satisfy inputs, keyed by input path.

    Scoped to one top-level run. Entries are write-once, so each dependency
    executes at most once per run.
    """

    def __init__(self) -> None:
        self._tree: dict[str, Any] = {}

    def get(self, path: Sequence[str]) -> str | None:
        value = get_value_at_path(self._tree, path)
        return value if isinstance(value, str) else None

    def put(self, path: Sequence[str], output: str) -> None:
        if get_value_at_path(self._tree, path) is not None:
            raise CacheConflictError(path)
        try:
            set_value_at_path(self._tree, path, output)
        except ValueError:
            raise CacheConflictError(path) from None

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (tuple, list)):
            return False
        return self.get(path) is not None

    def snapshot(self) -> dict[str, Any]:
        return _copy_tree(self._tree)
