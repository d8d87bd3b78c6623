"""Task and input definitions."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskwright.core.errors import UnsupportedInputType
from taskwright.core.naming import SEPARATOR, TaskName

ScalarValue = str | int | bool


class InputType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"


class InputSpec(BaseModel):
    """A declared input of a task.

    Keys other than the declared fields (for example `enum` or `minLength`)
    are kept as extra schema properties for validation.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    description: str = Field(default="")
    type: str = Field(default="", description="One of: string | integer | boolean")
    argument_index: int | None = Field(default=None, alias="argument-index", ge=0)
    default: Any = Field(default=None)

    def required(self) -> bool:
        return self.default is None

    @property
    def short_name(self) -> str:
        return self.name

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self.name.split(SEPARATOR))

    @property
    def type_name(self) -> str:
        return self.type or InputType.STRING.value

    def input_type(self) -> InputType:
        try:
            return InputType(self.type_name)
        except ValueError:
            raise UnsupportedInputType(self.name, self.type_name) from None

    def schema_extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class TaskDefinition(BaseModel):
    """A named unit of work and the inputs it needs.

    `script` is the execution body; it is only interpreted by executors, as
    are any extra keys.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    description: str = Field(default="")
    inputs: list[InputSpec] = Field(default_factory=list)
    script: str | None = Field(default=None)

    @field_validator("name")
    @classmethod
    def _valid_task_name(cls, value: str) -> str:
        return str(TaskName.parse(value))

    @field_validator("inputs")
    @classmethod
    def _distinct_input_paths(cls, value: list[InputSpec]) -> list[InputSpec]:
        seen: dict[tuple[str, ...], str] = {}
        for spec in value:
            for path, other in seen.items():
                shorter = min(len(path), len(spec.path))
                if path[:shorter] == spec.path[:shorter]:
                    raise ValueError(f"input `{spec.name}` conflicts with input `{other}`")
            seen[spec.path] = spec.name
        return value

    @property
    def task_name(self) -> TaskName:
        return TaskName.parse(self.name)
