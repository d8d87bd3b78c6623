"""Load task definitions from a YAML task file.

Tasks nest through `tasks:` blocks; a nested task's name is its parent's name
plus its own key, so `deploy: {tasks: {artifact: ...}}` defines `deploy` and
`deploy.artifact`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from taskwright.core.errors import TaskFileError
from taskwright.core.models import TaskDefinition
from taskwright.core.naming import SEPARATOR
from taskwright.core.registry import TaskRegistry

logger = logging.getLogger(__name__)


def _collect(
    tasks: Mapping[str, Any], prefix: str, registry: TaskRegistry, source: str
) -> None:
    for key, body in tasks.items():
        name = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        if body is None:
            body = {}
        if not isinstance(body, Mapping):
            raise TaskFileError(f"{source}: task {name} must be a mapping")

        children = body.get("tasks") or {}
        if not isinstance(children, Mapping):
            raise TaskFileError(f"{source}: `tasks` of {name} must be a mapping")

        fields = {k: v for k, v in body.items() if k != "tasks"}
        try:
            task = TaskDefinition.model_validate({**fields, "name": name})
        except ValidationError as e:
            raise TaskFileError(f"{source}: invalid task {name}: {e}") from e

        registry.register(task)
        _collect(children, name, registry, source)


def registry_from_mapping(data: Mapping[str, Any], source: str = "<mapping>") -> TaskRegistry:
    tasks = data.get("tasks")
    if tasks is None:
        tasks = {}
    if not isinstance(tasks, Mapping):
        raise TaskFileError(f"{source}: top-level `tasks` must be a mapping")

    registry = TaskRegistry()
    _collect(tasks, "", registry, source)
    return registry


def load_task_file(path: Path) -> TaskRegistry:
    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise TaskFileError(f"cannot read task file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise TaskFileError(f"task file {path} is not valid YAML: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise TaskFileError(f"task file {path} must contain a mapping at the top level")

    registry = registry_from_mapping(raw, source=str(path))
    logger.debug("Loaded task file", extra={"path": str(path), "tasks": len(registry)})
    return registry
