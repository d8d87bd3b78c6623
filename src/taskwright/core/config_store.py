"""Hierarchical, read-only configuration sources consulted during resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

import yaml

from taskwright.core.cache import merge_missing, set_value_at_path
from taskwright.core.errors import ConfigFileError
from taskwright.core.naming import SEPARATOR

logger = logging.getLogger(__name__)


class ConfigStore(Protocol):
    """Key/value lookup where composite keys are written `parent.child`."""

    def get(self, key: str) -> object | None:
        """Return the leaf value at `key`, or None when absent.

        Mapping nodes are scopes, not values, and are reported as absent.
        """
        ...

    def sub(self, key: str) -> Mapping[str, Any] | None:
        """Return the whole scope at `key` as a nested mapping."""
        ...


class MappingConfigStore:
    """A ConfigStore over a nested mapping (typically parsed YAML)."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: Mapping[str, Any] = data or {}

    def _lookup(self, key: str) -> object | None:
        node: Any = self._data
        parts = key.split(SEPARATOR)
        for i, part in enumerate(parts):
            if not isinstance(node, Mapping):
                return None
            # a literal dotted key at this level wins over walking
            rest = SEPARATOR.join(parts[i:])
            if i < len(parts) - 1 and rest in node:
                return node[rest]
            if part not in node:
                return None
            node = node[part]
        return node

    def get(self, key: str) -> object | None:
        value = self._lookup(key)
        if isinstance(value, Mapping):
            return None
        return value

    def sub(self, key: str) -> Mapping[str, Any] | None:
        value = self._lookup(key)
        return value if isinstance(value, Mapping) else None


class FlagConfigStore(MappingConfigStore):
    """Values set on the command line. An empty string counts as unset."""

    @classmethod
    def from_assignments(cls, assignments: Iterable[str]) -> FlagConfigStore:
        data: dict[str, Any] = {}
        for item in assignments:
            key, sep, value = item.partition("=")
            if not sep or not key.strip():
                raise ConfigFileError(f"expected KEY=VALUE, got {item!r}")
            try:
                set_value_at_path(data, key.strip().split(SEPARATOR), value)
            except ValueError as e:
                raise ConfigFileError(str(e)) from e
        return cls(data)

    def get(self, key: str) -> object | None:
        value = super().get(key)
        if value == "":
            return None
        return value


class LayeredConfigStore:
    """Stack of stores; the first store holding a value wins."""

    def __init__(self, *layers: ConfigStore) -> None:
        self._layers = layers

    def get(self, key: str) -> object | None:
        for layer in self._layers:
            value = layer.get(key)
            if value is not None:
                return value
        return None

    def sub(self, key: str) -> Mapping[str, Any] | None:
        merged: dict[str, Any] | None = None
        for layer in self._layers:
            scope = layer.sub(key)
            if scope is None:
                continue
            if merged is None:
                merged = {}
            merge_missing(merged, scope)
        return merged


def load_config_file(path: Path) -> MappingConfigStore:
    """Load a YAML configuration file into a store."""

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFileError(f"config file {path} is not valid YAML: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigFileError(f"config file {path} must contain a mapping at the top level")

    logger.debug("Loaded config file", extra={"path": str(path), "keys": sorted(map(str, raw))})
    return MappingConfigStore(raw)
