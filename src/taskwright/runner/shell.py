"""Run task scripts in a shell.

Inputs are exported as environment variables: `db.host` becomes `DB_HOST`.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from collections.abc import Mapping

from taskwright.core.errors import TaskExecutionError
from taskwright.core.models import ScalarValue, TaskDefinition

logger = logging.getLogger(__name__)

_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]")


def env_var_name(input_name: str) -> str:
    return _NON_IDENTIFIER.sub("_", input_name).upper()


def env_var_value(value: ScalarValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ShellExecutor:
    def __init__(self, shell: str = "bash", base_env: Mapping[str, str] | None = None) -> None:
        self._shell = shell
        self._base_env = dict(os.environ if base_env is None else base_env)

    def environment(self, inputs: Mapping[str, ScalarValue]) -> dict[str, str]:
        env = dict(self._base_env)
        for name, value in inputs.items():
            env[env_var_name(name)] = env_var_value(value)
        return env

    def run(self, task: TaskDefinition, inputs: Mapping[str, ScalarValue]) -> str:
        if not task.script:
            return ""

        logger.debug("Running task script", extra={"task": task.name, "shell": self._shell})
        try:
            result = subprocess.run(
                [self._shell, "-c", task.script],
                env=self.environment(inputs),
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise TaskExecutionError(task.name, f"cannot start {self._shell}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            reason = f"script exited with status {result.returncode}"
            if stderr:
                reason = f"{reason}: {stderr}"
            raise TaskExecutionError(task.name, reason)

        return result.stdout.rstrip("\n")
