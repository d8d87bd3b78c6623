"""Input resolution for a single task.

Each declared input takes its value from the first source that has one:

1. an explicit argument named after the input
2. the positional argument at the input's `argument-index`
3. config under `<caller>.<input>` when the task was invoked by another task
4. config under `<task>.<input>`, unless the task's short name occurs anywhere
   in the input name
5. config under the bare input name
6. the input's default
7. an empty string for an input named `env`
8. the output of the task providing the input, run on demand and cached for
   the rest of the run

Ancestor tasks contribute their own inputs underneath; values resolved for the
task itself win over inherited ones. An ancestor input whose provider is
nested under that ancestor, or is already running, is left out instead of
starting its provider; any other provider runs as in step 8.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from taskwright.core.cache import OutputCache, get_value_at_path, merge_missing, set_value_at_path
from taskwright.core.coercion import coerce
from taskwright.core.config_store import ConfigStore
from taskwright.core.errors import MissingRequiredInput, SubtaskExecutionError, TaskRunnerError
from taskwright.core.models import InputSpec, ScalarValue, TaskDefinition
from taskwright.core.naming import TaskName
from taskwright.core.registry import TaskRegistry

if TYPE_CHECKING:
    from taskwright.core.invoker import Invocation

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunContext:
    """State shared by every task invoked within one top-level run."""

    config: ConfigStore
    cache: OutputCache = field(default_factory=OutputCache)
    invocations: list[Invocation] = field(default_factory=list)
    active: list[str] = field(default_factory=list)


class SubtaskRunner(Protocol):
    def run_task(
        self,
        name: TaskName | str,
        positional_args: Sequence[str] = (),
        explicit_args: Mapping[str, Any] | None = None,
        caller: TaskName | str | None = None,
        *,
        context: RunContext | None = None,
    ) -> str: ...


def _explicit_value(explicit_args: Mapping[str, Any], spec: InputSpec) -> object | None:
    if spec.name in explicit_args:
        return explicit_args[spec.name]
    if len(spec.path) > 1:
        return get_value_at_path(explicit_args, spec.path)
    return None


class InputResolver:
    def __init__(self, registry: TaskRegistry, runner: SubtaskRunner) -> None:
        self._registry = registry
        self._runner = runner

    def resolve_inherited(
        self,
        task_name: TaskName,
        positional_args: Sequence[str],
        explicit_args: Mapping[str, Any],
        caller: TaskName | None,
        context: RunContext,
    ) -> dict[str, Any]:
        """Resolve the task's inputs, then fill in inputs of its ancestors."""

        values = self.resolve_direct(task_name, positional_args, explicit_args, caller, context)

        for ancestor in task_name.ancestors():
            if ancestor not in self._registry:
                logger.debug(
                    "Ancestor has no definition; skipping",
                    extra={"task": str(task_name), "ancestor": str(ancestor)},
                )
                continue
            inherited = self.resolve_direct(
                ancestor, (), explicit_args, caller, context, inherited=True
            )
            merge_missing(values, inherited)

        return values

    def resolve_direct(
        self,
        task_name: TaskName,
        positional_args: Sequence[str],
        explicit_args: Mapping[str, Any],
        caller: TaskName | None,
        context: RunContext,
        *,
        inherited: bool = False,
    ) -> dict[str, Any]:
        task = self._registry.find(task_name)
        log_extra = {"task": task.name, "caller": str(caller) if caller else None}
        logger.debug("Collecting inputs", extra=log_extra)

        values: dict[str, Any] = {}
        for spec in task.inputs:
            value = self._resolve_input(
                task, spec, positional_args, explicit_args, caller, context, inherited
            )
            if value is not None:
                set_value_at_path(values, spec.path, value)

        logger.debug("Collected inputs", extra={**log_extra, "values": values})
        return values

    def _resolve_input(
        self,
        task: TaskDefinition,
        spec: InputSpec,
        positional_args: Sequence[str],
        explicit_args: Mapping[str, Any],
        caller: TaskName | None,
        context: RunContext,
        inherited: bool,
    ) -> ScalarValue | None:
        for source, raw in self._candidates(
            task, spec, positional_args, explicit_args, caller, context.config
        ):
            if raw is not None:
                logger.debug(
                    "Found input value",
                    extra={"task": task.name, "input": spec.name, "source": source},
                )
                return coerce(raw, spec)

        output = self._from_provider_task(task, spec, context, inherited)
        return None if output is None else coerce(output, spec)

    def _candidates(
        self,
        task: TaskDefinition,
        spec: InputSpec,
        positional_args: Sequence[str],
        explicit_args: Mapping[str, Any],
        caller: TaskName | None,
        config: ConfigStore,
    ) -> Iterator[tuple[str, object | None]]:
        yield "argument", _explicit_value(explicit_args, spec)

        index = spec.argument_index
        if index is not None and len(positional_args) > index:
            yield "positional", positional_args[index]

        if caller is not None:
            yield "caller config", config.get(f"{caller}.{spec.short_name}")

        if task.task_name.short_name not in spec.short_name:
            yield "task config", config.get(f"{task.name}.{spec.short_name}")

        yield "global config", config.get(spec.short_name)
        yield "default", spec.default

        if spec.name == "env":
            yield "env", ""

    def provider_for(self, task: TaskDefinition, spec: InputSpec) -> TaskName | None:
        """Find the task whose output supplies `spec`.

        Candidates are `<task>.<input>`, then the same suffix under each
        ancestor, then the input name as a top-level task.
        """

        scopes = [task.task_name, *task.task_name.ancestors()]
        for scope in scopes:
            candidate = scope.join(spec.name)
            if candidate != task.task_name and candidate in self._registry:
                return candidate
        top_level = TaskName.parse(spec.name)
        if top_level in self._registry and top_level != task.task_name:
            return top_level
        return None

    def _from_provider_task(
        self, task: TaskDefinition, spec: InputSpec, context: RunContext, inherited: bool
    ) -> str | None:
        cached = context.cache.get(spec.path)
        if cached is not None:
            logger.debug(
                "Using cached task output",
                extra={"task": task.name, "input": spec.name},
            )
            return cached

        provider = self.provider_for(task, spec)
        if provider is None:
            raise MissingRequiredInput(task.name, spec.name)

        if inherited and (provider.is_within(task.task_name) or str(provider) in context.active):
            logger.debug(
                "Provider of inherited input belongs to the running subtree; not inheriting",
                extra={"task": task.name, "input": spec.name, "provider": str(provider)},
            )
            return None

        logger.debug(
            "Running task to provide input",
            extra={"task": task.name, "input": spec.name, "provider": str(provider)},
        )
        try:
            output = self._runner.run_task(provider, caller=task.task_name, context=context)
        except TaskRunnerError as e:
            raise SubtaskExecutionError(task.name, spec.name, str(provider)) from e

        context.cache.put(spec.path, output)
        return output
