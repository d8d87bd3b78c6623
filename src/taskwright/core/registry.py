"""Lookup table of task definitions by fully-qualified name."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from taskwright.core.errors import TaskFileError, TaskNotFound
from taskwright.core.models import TaskDefinition
from taskwright.core.naming import TaskName

logger = logging.getLogger(__name__)


class TaskRegistry:
    """Read model of the tasks known to a run.

    Populated once before resolution starts; one definition per name.
    """

    def __init__(self, tasks: Iterable[TaskDefinition] = ()) -> None:
        self._tasks: dict[str, TaskDefinition] = {}
        for task in tasks:
            self.register(task)

    def register(self, task: TaskDefinition) -> None:
        if task.name in self._tasks:
            raise TaskFileError(f"task {task.name} is defined more than once")
        self._tasks[task.name] = task
        logger.debug("Registered task", extra={"task": task.name})

    def find(self, name: TaskName | str) -> TaskDefinition:
        key = str(name)
        try:
            return self._tasks[key]
        except KeyError:
            raise TaskNotFound(key) from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, (str, TaskName)) and str(name) in self._tasks

    def __iter__(self) -> Iterator[TaskDefinition]:
        return iter(self._tasks[name] for name in sorted(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)
