"""Structural validation of bound inputs.

A task's inputs are turned into a pydantic model, one field per input keyed by
the input's dotted name. Bound inputs are flattened to dotted keys before
validation so nested inputs line up with their fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from taskwright.core.cache import flatten
from taskwright.core.errors import FieldError, SchemaValidationError
from taskwright.core.models import InputSpec, InputType, TaskDefinition

_PYTHON_TYPES: dict[InputType, type] = {
    InputType.STRING: str,
    InputType.INTEGER: int,
    InputType.BOOLEAN: bool,
}

# JSON-schema keyword -> pydantic Field argument
_CONSTRAINTS: dict[str, str] = {
    "minimum": "ge",
    "maximum": "le",
    "exclusiveMinimum": "gt",
    "exclusiveMaximum": "lt",
    "minLength": "min_length",
    "maxLength": "max_length",
    "pattern": "pattern",
}


def _field_for(spec: InputSpec) -> tuple[Any, Any]:
    annotation: Any = _PYTHON_TYPES[spec.input_type()]
    extras = spec.schema_extras()

    enum = extras.pop("enum", None)
    if isinstance(enum, list) and enum:
        annotation = Literal[tuple(enum)]

    kwargs: dict[str, Any] = {}
    for keyword, argument in _CONSTRAINTS.items():
        if keyword in extras:
            kwargs[argument] = extras.pop(keyword)

    field = Field(
        default=... if spec.required() else None,
        alias=spec.name,
        description=spec.description or None,
        json_schema_extra=extras or None,
        **kwargs,
    )
    return annotation, field


def build_input_model(task: TaskDefinition) -> type[BaseModel]:
    """Map each InputSpec of `task` to a field of a new model."""

    fields = {f"input_{i}": _field_for(spec) for i, spec in enumerate(task.inputs)}
    return create_model(  # type: ignore[call-overload,no-any-return]
        "TaskInputs",
        __config__=ConfigDict(strict=True, extra="ignore"),
        **fields,
    )


class SchemaValidator:
    def __init__(self, task: TaskDefinition) -> None:
        self._task = task
        self._model = build_input_model(task)

    def validate(self, bound: Mapping[str, Any]) -> list[FieldError]:
        """Return every violated field; an empty list means valid."""

        try:
            self._model.model_validate(flatten(bound))
        except ValidationError as e:
            return [
                FieldError(field=".".join(str(p) for p in err["loc"]), message=err["msg"])
                for err in e.errors()
            ]
        return []

    def check(self, bound: Mapping[str, Any]) -> None:
        errors = self.validate(bound)
        if errors:
            raise SchemaValidationError(self._task.name, errors)

    def json_schema(self) -> dict[str, Any]:
        return self._model.model_json_schema(by_alias=True)
