"""Unit tests for running task scripts in a shell."""

from __future__ import annotations

import shutil

import pytest

from taskwright.core.errors import TaskExecutionError
from taskwright.runner.shell import ShellExecutor, env_var_name
from tests.conftest import make_task

needs_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="requires a POSIX shell")


def test_env_var_names() -> None:
    assert env_var_name("artifact") == "ARTIFACT"
    assert env_var_name("db.host") == "DB_HOST"
    assert env_var_name("dry-run") == "DRY_RUN"


def test_environment_renders_scalars() -> None:
    executor = ShellExecutor(base_env={"PATH": "/bin"})
    env = executor.environment({"replicas": 3, "dry_run": False, "db.host": "h"})
    assert env == {"PATH": "/bin", "REPLICAS": "3", "DRY_RUN": "false", "DB_HOST": "h"}


def test_task_without_script_outputs_nothing() -> None:
    assert ShellExecutor().run(make_task("noop"), {}) == ""


@needs_sh
def test_script_sees_inputs_and_output_is_trimmed() -> None:
    task = make_task("greet", script='echo "hello $NAME"')
    assert ShellExecutor(shell="sh").run(task, {"name": "world"}) == "hello world"


@needs_sh
def test_failing_script_raises_with_stderr() -> None:
    task = make_task("broken", script="echo oops >&2; exit 3")
    with pytest.raises(TaskExecutionError) as exc_info:
        ShellExecutor(shell="sh").run(task, {})
    assert "status 3" in exc_info.value.reason
    assert "oops" in exc_info.value.reason


def test_missing_shell_raises() -> None:
    task = make_task("greet", script="echo hi")
    with pytest.raises(TaskExecutionError):
        ShellExecutor(shell="definitely-not-a-shell-binary").run(task, {})
