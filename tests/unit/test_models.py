"""Unit tests for task and input definitions."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from taskwright.core.errors import UnsupportedInputType
from taskwright.core.models import InputSpec, InputType, TaskDefinition


def test_input_without_default_is_required() -> None:
    assert InputSpec(name="artifact").required() is True
    assert InputSpec(name="region", default="us-east-1").required() is False


def test_false_default_still_counts_as_a_default() -> None:
    assert InputSpec(name="dry_run", type="boolean", default=False).required() is False


def test_type_defaults_to_string() -> None:
    spec = InputSpec(name="artifact")
    assert spec.type_name == "string"
    assert spec.input_type() is InputType.STRING


def test_unknown_type_is_reported_not_fatal() -> None:
    spec = InputSpec(name="ratio", type="float")
    with pytest.raises(UnsupportedInputType) as exc_info:
        spec.input_type()
    assert exc_info.value.type_name == "float"
    assert exc_info.value.input_name == "ratio"


def test_argument_index_alias_and_extra_schema_properties() -> None:
    spec = InputSpec.model_validate(
        {"name": "replicas", "type": "integer", "argument-index": 0, "minimum": 1}
    )
    assert spec.argument_index == 0
    assert spec.schema_extras() == {"minimum": 1}


def test_dotted_input_name_is_a_path() -> None:
    assert InputSpec(name="db.host").path == ("db", "host")


def test_task_definition_normalizes_and_checks_name() -> None:
    task = TaskDefinition(name="deploy.artifact")
    assert task.task_name.short_name == "artifact"
    assert task.inputs == []

    with pytest.raises(ValidationError):
        TaskDefinition(name="deploy..artifact")


@pytest.mark.parametrize(
    "names",
    [
        ["db", "db.host"],
        ["db.host", "db"],
        ["region", "region"],
    ],
)
def test_inputs_with_overlapping_paths_are_rejected(names: list[str]) -> None:
    with pytest.raises(ValidationError, match="conflicts with input"):
        TaskDefinition(name="deploy", inputs=[{"name": n} for n in names])


def test_inputs_sharing_a_prefix_segment_are_allowed() -> None:
    task = TaskDefinition(name="deploy", inputs=[{"name": "db.host"}, {"name": "db.port"}])
    assert [spec.path for spec in task.inputs] == [("db", "host"), ("db", "port")]
