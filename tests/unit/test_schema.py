"""Unit tests for validating bound inputs against a task's declared inputs."""

from __future__ import annotations

import pytest

from taskwright.core.errors import SchemaValidationError
from taskwright.core.schema import SchemaValidator
from tests.conftest import make_task


def test_valid_tree_has_no_errors() -> None:
    task = make_task(
        "deploy",
        {"name": "artifact"},
        {"name": "replicas", "type": "integer", "default": 1},
        {"name": "db.host"},
    )
    bound = {"artifact": "app.tar.gz", "replicas": 3, "db": {"host": "localhost"}}
    assert SchemaValidator(task).validate(bound) == []


def test_every_violated_field_is_reported() -> None:
    task = make_task(
        "deploy",
        {"name": "artifact"},
        {"name": "replicas", "type": "integer"},
        {"name": "dry_run", "type": "boolean"},
    )
    errors = SchemaValidator(task).validate({"replicas": "3", "dry_run": "yes"})

    assert sorted(e.field for e in errors) == ["artifact", "dry_run", "replicas"]


def test_nested_inputs_are_validated_by_dotted_path() -> None:
    task = make_task("deploy", {"name": "db.port", "type": "integer"})
    errors = SchemaValidator(task).validate({"db": {"port": "5432"}})
    assert [e.field for e in errors] == ["db.port"]


def test_extra_schema_properties_become_constraints() -> None:
    task = make_task(
        "deploy",
        {"name": "region", "enum": ["us-east-1", "eu-west-1"]},
        {"name": "replicas", "type": "integer", "minimum": 1, "maximum": 10},
        {"name": "tag", "pattern": "^v[0-9]+$"},
    )
    validator = SchemaValidator(task)

    assert validator.validate({"region": "eu-west-1", "replicas": 10, "tag": "v2"}) == []
    errors = validator.validate({"region": "ap-south-1", "replicas": 0, "tag": "latest"})
    assert sorted(e.field for e in errors) == ["region", "replicas", "tag"]


def test_values_for_undeclared_inputs_are_ignored() -> None:
    task = make_task("deploy.artifact", {"name": "version", "default": "1"})
    assert SchemaValidator(task).validate({"version": "2", "region": "inherited"}) == []


def test_check_raises_aggregate_error() -> None:
    task = make_task("deploy", {"name": "artifact"}, {"name": "region"})
    with pytest.raises(SchemaValidationError) as exc_info:
        SchemaValidator(task).check({})
    assert exc_info.value.task_name == "deploy"
    assert len(exc_info.value.field_errors) == 2


def test_json_schema_uses_input_names() -> None:
    task = make_task(
        "deploy",
        {"name": "artifact", "description": "Archive to deploy"},
        {"name": "region", "default": "us-east-1"},
    )
    schema = SchemaValidator(task).json_schema()

    assert set(schema["properties"]) == {"artifact", "region"}
    assert schema["properties"]["artifact"]["type"] == "string"
    assert schema["properties"]["artifact"]["description"] == "Archive to deploy"
    assert schema["required"] == ["artifact"]
