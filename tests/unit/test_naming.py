"""Unit tests for hierarchical task names."""

from __future__ import annotations

import pytest

from taskwright.core.naming import TaskName


def test_parse_and_render() -> None:
    name = TaskName.parse("deploy.artifact.build")
    assert name.segments == ("deploy", "artifact", "build")
    assert str(name) == "deploy.artifact.build"
    assert name.short_name == "build"


def test_parent_strips_last_segment() -> None:
    assert TaskName.parse("a.b.c").parent() == TaskName.parse("a.b")


def test_top_level_name_has_no_parent() -> None:
    assert TaskName.parse("deploy").parent() is None


def test_ancestors_are_nearest_first() -> None:
    assert [str(a) for a in TaskName.parse("a.b.c").ancestors()] == ["a.b", "a"]


def test_join_appends_dotted_suffix() -> None:
    assert str(TaskName.parse("deploy").join("db.host")) == "deploy.db.host"


@pytest.mark.parametrize("raw", ["", "a..b", ".a", "a."])
def test_empty_segments_are_rejected(raw: str) -> None:
    with pytest.raises(ValueError):
        TaskName.parse(raw)


def test_names_are_hashable_values() -> None:
    assert {TaskName.parse("a.b"), TaskName.parse("a.b")} == {TaskName(("a", "b"))}


def test_is_within() -> None:
    deploy = TaskName.parse("deploy")
    assert TaskName.parse("deploy.artifact").is_within(deploy)
    assert deploy.is_within(deploy)
    assert not TaskName.parse("deployment").is_within(deploy)
    assert not deploy.is_within(TaskName.parse("deploy.artifact"))
