"""Unit tests for runner settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from taskwright.runner.config import RunnerSettings

_ENV_VARS = (
    "TASKWRIGHT_LOG_LEVEL",
    "TASKWRIGHT_LOG_FORMAT",
    "TASKWRIGHT_LOG_TO_STDERR",
    "TASKWRIGHT_TASKS_FILE",
    "TASKWRIGHT_CONFIG_FILE",
    "TASKWRIGHT_SHELL",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_defaults() -> None:
    settings = RunnerSettings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "text"
    assert settings.log_to_stderr is False
    assert settings.tasks_file == Path("tasks.yaml")
    assert settings.config_file is None
    assert settings.shell == "bash"


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "TASKWRIGHT_LOG_FORMAT=JSON",
                "TASKWRIGHT_CONFIG_FILE=values.yaml",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = RunnerSettings()

    assert settings.log_format == "json"
    assert settings.config_file == Path("values.yaml")


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKWRIGHT_LOG_TO_STDERR", "true")
    monkeypatch.setenv("TASKWRIGHT_SHELL", "sh")

    settings = RunnerSettings()

    assert settings.log_to_stderr is True
    assert settings.shell == "sh"


def test_unknown_log_format_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKWRIGHT_LOG_FORMAT", "bunyan")
    with pytest.raises(ValidationError):
        RunnerSettings()
