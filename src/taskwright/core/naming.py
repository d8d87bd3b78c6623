"""Hierarchical, dot-separated task names."""

from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = "."


@dataclass(frozen=True, slots=True)
class TaskName:
    """A fully-qualified task name such as `deploy.artifact`.

    A name with a single segment is top level: `parent()` returns None.
    """

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("task name must have at least one segment")
        if any(not s for s in self.segments):
            raise ValueError(f"task name has an empty segment: {SEPARATOR.join(self.segments)!r}")

    @classmethod
    def parse(cls, value: str | TaskName) -> TaskName:
        if isinstance(value, TaskName):
            return value
        return cls(tuple(value.split(SEPARATOR)))

    @property
    def short_name(self) -> str:
        return self.segments[-1]

    def parent(self) -> TaskName | None:
        if len(self.segments) == 1:
            return None
        return TaskName(self.segments[:-1])

    def ancestors(self) -> list[TaskName]:
        """Return the parent, grandparent, ... up to the top-level name."""

        out: list[TaskName] = []
        current = self.parent()
        while current is not None:
            out.append(current)
            current = current.parent()
        return out

    def is_within(self, other: TaskName) -> bool:
        """True when this name is `other` or nested somewhere under it."""

        return self.segments[: len(other.segments)] == other.segments

    def join(self, suffix: str) -> TaskName:
        return TaskName(self.segments + tuple(suffix.split(SEPARATOR)))

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)
