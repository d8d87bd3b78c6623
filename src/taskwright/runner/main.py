"""CLI entrypoint for the task runner."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from taskwright import __version__
from taskwright.core.config_store import (
    ConfigStore,
    FlagConfigStore,
    LayeredConfigStore,
    load_config_file,
)
from taskwright.core.errors import TaskRunnerError, describe_error
from taskwright.core.invoker import TaskInvoker
from taskwright.runner.config import LOG_FORMATS, RunnerSettings
from taskwright.runner.loader import load_task_file
from taskwright.runner.logging import configure_logging
from taskwright.runner.shell import ShellExecutor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskwright",
        description="Run declarative tasks whose inputs come from arguments, config or other tasks",
    )
    parser.add_argument("--version", action="version", version=f"taskwright {__version__}")
    parser.add_argument(
        "--tasks",
        type=Path,
        default=None,
        help="Task file (defaults to TASKWRIGHT_TASKS_FILE or tasks.yaml)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with input values (defaults to TASKWRIGHT_CONFIG_FILE)",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a config value, e.g. 'deploy.region=eu-west-1'. Repeatable",
    )
    parser.add_argument("--log-level", default=None, help="Root logging level")
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=None, help="Log output format")
    parser.add_argument(
        "--log-to-stderr",
        action="store_true",
        help="Write logs to stderr instead of stdout",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run a task and print its output")
    run.add_argument("task", help="Fully-qualified task name, e.g. 'deploy.artifact'")
    run.add_argument("args", nargs="*", help="Positional arguments for the task")

    subparsers.add_parser("list", help="List the defined tasks")

    return parser


def _build_config(args: argparse.Namespace, settings: RunnerSettings) -> ConfigStore:
    layers: list[ConfigStore] = [FlagConfigStore.from_assignments(args.assignments)]
    config_file = args.config or settings.config_file
    if config_file is not None:
        layers.append(load_config_file(config_file))
    return LayeredConfigStore(*layers)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = RunnerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment and .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(
        args.log_level or settings.log_level,
        args.log_format or settings.log_format,
        stream=sys.stderr if args.log_to_stderr or settings.log_to_stderr else None,
    )

    try:
        registry = load_task_file(args.tasks or settings.tasks_file)
        config = _build_config(args, settings)
    except TaskRunnerError as e:
        print(describe_error(e), file=sys.stderr)
        return 2

    if args.command == "list":
        for task in registry:
            print(f"{task.name}\t{task.description}".rstrip())
        return 0

    if args.command == "run":
        invoker = TaskInvoker(registry, ShellExecutor(shell=settings.shell), config)
        try:
            output = invoker.run_task(args.task, args.args)
        except TaskRunnerError as e:
            logger.error("Task failed", extra={"task": args.task})
            print(describe_error(e), file=sys.stderr)
            return 1
        except Exception:
            logger.exception("Command failed")
            return 1
        print(output)
        return 0

    logger.error("Unknown command", extra={"command": args.command})
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
