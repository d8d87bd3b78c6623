"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from unittest.mock import Mock

import pytest

from taskwright.core.config_store import MappingConfigStore
from taskwright.core.invoker import TaskInvoker
from taskwright.core.models import InputSpec, TaskDefinition
from taskwright.core.registry import TaskRegistry


def make_task(name: str, *inputs: dict[str, Any], script: str | None = None) -> TaskDefinition:
    return TaskDefinition(
        name=name,
        inputs=[InputSpec.model_validate(i) for i in inputs],
        script=script,
    )


@pytest.fixture
def outputs() -> dict[str, str]:
    """Canned executor output per task name."""
    return {}


@pytest.fixture
def executor(outputs: dict[str, str]) -> Mock:
    """An executor spy returning canned output, or `<task> done`."""

    def _run(task: TaskDefinition, inputs: Mapping[str, Any]) -> str:
        return outputs.get(task.name, f"{task.name} done")

    mock = Mock()
    mock.run.side_effect = _run
    return mock


@pytest.fixture
def make_invoker(executor: Mock) -> Callable[..., TaskInvoker]:
    """Build an invoker over the given tasks and config mapping."""

    def _make(*tasks: TaskDefinition, config: Mapping[str, Any] | None = None) -> TaskInvoker:
        return TaskInvoker(TaskRegistry(tasks), executor, MappingConfigStore(config or {}))

    return _make


def executed(executor: Mock) -> list[str]:
    """Names of the tasks the executor ran, in order."""
    return [c.args[0].name for c in executor.run.call_args_list]


def inputs_of(executor: Mock, task_name: str) -> Mapping[str, Any]:
    for c in executor.run.call_args_list:
        if c.args[0].name == task_name:
            return dict(c.args[1])
    raise AssertionError(f"task {task_name} was not executed")
