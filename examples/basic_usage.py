#!/usr/bin/env python3
"""Programmatic task run example.

This demonstrates using the engine directly:

* define tasks in code instead of a task file
* layer command-line style flags over a config mapping
* run a task whose input is produced by another task

Positional arguments are passed through to the `deploy` task.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from typing import Sequence

from taskwright.core import (
    FlagConfigStore,
    InputSpec,
    LayeredConfigStore,
    MappingConfigStore,
    TaskDefinition,
    TaskInvoker,
    TaskRegistry,
)
from taskwright.core.errors import TaskRunnerError, describe_error
from taskwright.core.models import ScalarValue
from taskwright.runner.logging import configure_logging


class PrintingExecutor:
    """Pretend to run tasks; report what each one received."""

    def run(self, task: TaskDefinition, inputs: Mapping[str, ScalarValue]) -> str:
        if task.name == "deploy.artifact":
            return "app-1.2.3.tar.gz"
        rendered = ", ".join(f"{k}={v}" for k, v in sorted(inputs.items()))
        return f"{task.name}({rendered})"


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the example deploy task.")
    parser.add_argument("--set", dest="assignments", action="append", default=[])
    parser.add_argument("args", nargs="*", help="Positional arguments for `deploy`")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO", "message")

    registry = TaskRegistry(
        [
            TaskDefinition(
                name="deploy",
                inputs=[
                    InputSpec(name="artifact"),
                    InputSpec(name="region", default="us-east-1"),
                    InputSpec.model_validate(
                        {"name": "replicas", "type": "integer", "default": 1, "argument-index": 0}
                    ),
                ],
            ),
            TaskDefinition(name="deploy.artifact"),
        ]
    )
    config = LayeredConfigStore(
        FlagConfigStore.from_assignments(args.assignments),
        MappingConfigStore({"deploy": {"region": "eu-west-1"}}),
    )

    invoker = TaskInvoker(registry, PrintingExecutor(), config)
    try:
        print(invoker.run_task("deploy", args.args))
    except TaskRunnerError as e:
        print(describe_error(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
