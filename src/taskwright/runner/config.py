"""Settings for the command-line runner.

Configuration is loaded from:
- environment variables prefixed with `TASKWRIGHT_`
- and a local `.env` file (if present)

Command-line options take precedence over both.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMATS = ("json", "text", "message")


class RunnerSettings(BaseSettings):
    """Settings for the task runner.

    Environment variables:
    - TASKWRIGHT_LOG_LEVEL
    - TASKWRIGHT_LOG_FORMAT     (json | text | message)
    - TASKWRIGHT_LOG_TO_STDERR
    - TASKWRIGHT_TASKS_FILE
    - TASKWRIGHT_CONFIG_FILE    (optional)
    - TASKWRIGHT_SHELL
    """

    log_level: str = Field(default="INFO", description="Root logging level")
    log_format: str = Field(default="text", description="One of: json | text | message")
    log_to_stderr: bool = Field(
        default=False,
        description="Write logs to stderr so stdout only carries task output",
    )

    tasks_file: Path = Field(
        default=Path("tasks.yaml"),
        description="YAML file defining the available tasks",
    )
    config_file: Path | None = Field(
        default=None,
        description="YAML file with input values, scoped by task name",
    )
    shell: str = Field(default="bash", description="Shell used to run task scripts")

    model_config = SettingsConfigDict(
        env_prefix="TASKWRIGHT_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_format")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in LOG_FORMATS:
            raise ValueError(f"Unexpected log format {value!r}; expected one of {', '.join(LOG_FORMATS)}")
        return normalized
