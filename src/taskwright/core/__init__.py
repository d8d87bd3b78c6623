"""Input resolution and invocation engine."""

from taskwright.core.config_store import (
    ConfigStore,
    FlagConfigStore,
    LayeredConfigStore,
    MappingConfigStore,
    load_config_file,
)
from taskwright.core.invoker import Invocation, InvocationState, TaskInvoker
from taskwright.core.models import InputSpec, InputType, TaskDefinition
from taskwright.core.naming import TaskName
from taskwright.core.registry import TaskRegistry

__all__ = [
    "ConfigStore",
    "FlagConfigStore",
    "InputSpec",
    "InputType",
    "Invocation",
    "InvocationState",
    "LayeredConfigStore",
    "MappingConfigStore",
    "TaskDefinition",
    "TaskInvoker",
    "TaskName",
    "TaskRegistry",
    "load_config_file",
]
