"""Task invocation: resolve inputs, validate them, run the task.

Every invocation moves through an explicit state machine:

    resolving_inputs -> validating -> executing -> completed

and any non-terminal state may move to `failed`. Errors are annotated with the
task name on the way out so the top-level caller sees the full task path.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from taskwright.core.cache import flatten
from taskwright.core.config_store import ConfigStore, MappingConfigStore
from taskwright.core.errors import (
    DependencyCycleError,
    IllegalTransitionError,
    TaskExecutionError,
    TaskRunnerError,
)
from taskwright.core.executor import Executor
from taskwright.core.models import ScalarValue
from taskwright.core.naming import TaskName
from taskwright.core.registry import TaskRegistry
from taskwright.core.resolver import InputResolver, RunContext
from taskwright.core.schema import SchemaValidator

logger = logging.getLogger(__name__)


class InvocationState(str, Enum):
    RESOLVING_INPUTS = "resolving_inputs"
    VALIDATING = "validating"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[InvocationState, set[InvocationState]] = {
    InvocationState.RESOLVING_INPUTS: {InvocationState.VALIDATING, InvocationState.FAILED},
    InvocationState.VALIDATING: {InvocationState.EXECUTING, InvocationState.FAILED},
    InvocationState.EXECUTING: {InvocationState.COMPLETED, InvocationState.FAILED},
    InvocationState.COMPLETED: set(),
    InvocationState.FAILED: set(),
}


def transition(*, current: InvocationState, to: InvocationState) -> InvocationState:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to


@dataclass(slots=True)
class Invocation:
    """One run of one task within a top-level run."""

    task: TaskName
    caller: TaskName | None = None
    state: InvocationState = InvocationState.RESOLVING_INPUTS
    inputs: dict[str, ScalarValue] = field(default_factory=dict)
    output: str | None = None
    error: TaskRunnerError | None = None

    def advance(self, to: InvocationState) -> None:
        self.state = transition(current=self.state, to=to)
        logger.debug(
            "Task state changed",
            extra={"task": str(self.task), "state": self.state.value},
        )

    def complete(self, output: str) -> None:
        self.advance(InvocationState.COMPLETED)
        self.output = output

    def fail(self, error: TaskRunnerError) -> None:
        self.advance(InvocationState.FAILED)
        self.error = error


def _as_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class TaskInvoker:
    """Entry point for running tasks.

    Each top-level `run_task` call gets a fresh RunContext, so outputs of
    tasks run to satisfy inputs are shared within that call only.
    """

    def __init__(
        self,
        registry: TaskRegistry,
        executor: Executor,
        config: ConfigStore | None = None,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._config: ConfigStore = config if config is not None else MappingConfigStore()
        self._resolver = InputResolver(registry, self)

    @property
    def registry(self) -> TaskRegistry:
        return self._registry

    def new_context(self) -> RunContext:
        return RunContext(config=self._config)

    def run_task(
        self,
        name: TaskName | str,
        positional_args: Sequence[str] = (),
        explicit_args: Mapping[str, Any] | None = None,
        caller: TaskName | str | None = None,
        *,
        context: RunContext | None = None,
    ) -> str:
        task_name = TaskName.parse(name)
        caller_name = TaskName.parse(caller) if caller is not None else None
        if context is None:
            context = self.new_context()
        log_extra = {"task": str(task_name), "caller": str(caller_name) if caller_name else None}

        logger.debug("Started task", extra=log_extra)

        provided = context.config.get(str(task_name))
        if provided is not None:
            output = _as_text(provided)
            logger.info("Skipped task via provided value", extra={**log_extra, "value": output})
            return output

        if str(task_name) in context.active:
            raise DependencyCycleError([*context.active, str(task_name)])

        invocation = Invocation(task=task_name, caller=caller_name)
        context.invocations.append(invocation)
        context.active.append(str(task_name))
        try:
            output = self._invoke(
                invocation, positional_args, explicit_args or {}, caller_name, context
            )
        except TaskRunnerError as e:
            invocation.fail(e)
            e.annotate(str(task_name))
            logger.debug("Task failed", extra={**log_extra, "error": str(e)})
            raise
        finally:
            context.active.pop()

        logger.debug("Finished task", extra=log_extra)
        return output

    def _invoke(
        self,
        invocation: Invocation,
        positional_args: Sequence[str],
        explicit_args: Mapping[str, Any],
        caller: TaskName | None,
        context: RunContext,
    ) -> str:
        task = self._registry.find(invocation.task)
        bound = self._resolver.resolve_inherited(
            invocation.task, positional_args, explicit_args, caller, context
        )

        invocation.advance(InvocationState.VALIDATING)
        SchemaValidator(task).check(bound)
        invocation.inputs = flatten(bound)
        logger.debug(
            "Bound inputs",
            extra={"task": task.name, "variables": invocation.inputs},
        )

        invocation.advance(InvocationState.EXECUTING)
        try:
            output = self._executor.run(task, invocation.inputs)
        except TaskRunnerError:
            raise
        except Exception as e:
            raise TaskExecutionError(task.name, str(e) or type(e).__name__) from e

        if not isinstance(output, str):
            raise TaskExecutionError(task.name, f"executor returned {type(output).__name__}, not text")

        logger.debug("Received task output", extra={"task": task.name, "output": output})
        invocation.complete(output)
        return output
