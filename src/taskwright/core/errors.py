"""Error taxonomy for task resolution and invocation.

Every error raised by the core derives from `TaskRunnerError`. As an error
unwinds through nested task invocations, each invocation annotates it with its
own fully-qualified task name, so the top-level caller sees the whole causal
path from the failing input back to the task it asked for.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class TaskRunnerError(Exception):
    """Base class for all task runner errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.trail: list[str] = []

    def annotate(self, task_name: str) -> TaskRunnerError:
        self.trail.append(task_name)
        self.add_note(f"while running task {task_name}")
        return self


class TaskNotFound(TaskRunnerError):
    def __init__(self, name: str) -> None:
        super().__init__(f"task not found: {name}")
        self.name = name


class MissingRequiredInput(TaskRunnerError):
    def __init__(self, task_name: str, input_name: str, reason: str = "") -> None:
        message = (
            f"missing value for input `{input_name}` of task {task_name}. "
            "Provide an argument, a positional argument, a config value or a task for it"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.task_name = task_name
        self.input_name = input_name


class SubtaskExecutionError(MissingRequiredInput):
    """The task providing an input's value failed."""

    def __init__(self, task_name: str, input_name: str, dependency: str) -> None:
        super().__init__(task_name, input_name, reason=f"task {dependency} failed")
        self.dependency = dependency


class TypeCoercionError(TaskRunnerError):
    def __init__(self, input_name: str, raw_value: object, target_type: str) -> None:
        super().__init__(f"{raw_value!r} can't be converted to {target_type} for input `{input_name}`")
        self.input_name = input_name
        self.raw_value = raw_value
        self.target_type = target_type


class UnsupportedInputType(TaskRunnerError):
    def __init__(self, input_name: str, type_name: str) -> None:
        super().__init__(
            f"unsupported input type `{type_name}` found for input `{input_name}`. "
            "The type should be one of: string, integer, boolean"
        )
        self.input_name = input_name
        self.type_name = type_name


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class SchemaValidationError(TaskRunnerError):
    def __init__(self, task_name: str, field_errors: Sequence[FieldError]) -> None:
        details = "; ".join(str(e) for e in field_errors)
        super().__init__(f"one or more inputs of task {task_name} are not valid: {details}")
        self.task_name = task_name
        self.field_errors = list(field_errors)


class TaskExecutionError(TaskRunnerError):
    """The executor failed to run a task body."""

    def __init__(self, task_name: str, reason: str) -> None:
        super().__init__(f"task {task_name} failed: {reason}")
        self.task_name = task_name
        self.reason = reason


class CacheConflictError(TaskRunnerError):
    def __init__(self, path: Sequence[str]) -> None:
        super().__init__(f"output already cached at {'.'.join(path)}")
        self.path = tuple(path)


class ConfigFileError(TaskRunnerError):
    pass


class TaskFileError(TaskRunnerError):
    pass


def describe_error(exc: BaseException) -> str:
    """Render an exception and everything that caused it as one message."""

    lines: list[str] = []
    current: BaseException | None = exc
    depth = 0
    while current is not None:
        prefix = "  " * depth + ("caused by: " if depth else "")
        lines.append(f"{prefix}{current}")
        trail = getattr(current, "trail", None)
        if trail:
            lines.append("  " * depth + "  task path: " + " <- ".join(trail))
        current = current.__cause__
        depth += 1
    return "\n".join(lines)


class IllegalTransitionError(TaskRunnerError, ValueError):
    pass


class DependencyCycleError(TaskRunnerError):
    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__(f"task dependency cycle: {' -> '.join(chain)}")
        self.chain = list(chain)
