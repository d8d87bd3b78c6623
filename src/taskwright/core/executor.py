from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from taskwright.core.models import ScalarValue, TaskDefinition


class Executor(Protocol):
    """Runs a task body with its validated, flattened inputs.

    Returns the task's textual output. Failures are raised; any exception that
    is not a TaskRunnerError is wrapped into TaskExecutionError by the invoker.
    """

    def run(self, task: TaskDefinition, inputs: Mapping[str, ScalarValue]) -> str: ...
