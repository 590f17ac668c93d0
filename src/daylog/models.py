"""
Data model shared by the providers, the aggregation pipeline and the session.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class Source(Enum):
    """Where a task suggestion came from"""
    LOCAL_HISTORY = "Git"
    TRACKER = "Jira"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class TaskSuggestion:
    key: str
    origin: Source


@dataclass(frozen=True)
class TaskRecord:
    """Issue resolved from the tracker"""
    key: str
    name: str


@dataclass(frozen=True)
class DisplayTask:
    """A TaskRecord annotated with the source that suggested it"""
    key: str
    name: str
    origin: Source

    @property
    def label(self) -> str:
        return f"{self.key} - {self.name}"


@dataclass
class TaskGroups:
    """Resolved tasks partitioned by originating source"""
    by_source: dict[Source, list[DisplayTask]] = field(
        default_factory=lambda: {source: [] for source in Source}
    )

    def __getitem__(self, source: Source) -> list[DisplayTask]:
        return self.by_source.get(source, [])

    def is_empty(self) -> bool:
        return not any(self.by_source.values())

    def keys(self) -> list[str]:
        """All keys across groups, each listed once"""
        seen = []
        for tasks in self.by_source.values():
            for task in tasks:
                if task.key not in seen:
                    seen.append(task.key)
        return seen


@dataclass(frozen=True)
class Worklog:
    """One persisted unit of logged time"""
    date: date
    hours: float


@dataclass
class SessionState:
    """Transient choices made during one invocation"""
    day: Optional[date] = None
    task: Optional[str] = None
    hours: Optional[int] = None
    confirmed: bool = False
