"""Taskwright: a declarative task runner.

Tasks are named, hierarchically namespaced units of work. Their inputs are
gathered from explicit arguments, positional arguments, scoped configuration,
defaults or the output of other tasks before the task runs.
"""

__version__ = "0.1.0"

from taskwright.core.invoker import TaskInvoker
from taskwright.core.naming import TaskName
from taskwright.core.registry import TaskRegistry

__all__ = ["__version__", "TaskInvoker", "TaskName", "TaskRegistry"]
