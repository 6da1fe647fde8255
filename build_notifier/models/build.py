"""Build snapshot models - immutable views of host builds and their causes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union


class Result(Enum):
    """Build result as reported by the host."""
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"
    BUILDING = "BUILDING"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['Result']:
        """Parse a host result string, returning None for unknown values."""
        if value is None:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


class Color(Enum):
    """Severity color tag understood by the chat transport."""
    GOOD = "good"
    DANGER = "danger"
    WARNING = "warning"


@dataclass(frozen=True)
class UserCause:
    """Build started manually by a user."""
    user_id: str
    user_name: Optional[str] = None

    @property
    def short_description(self) -> str:
        return f"Started by user {self.user_name or self.user_id}"


@dataclass(frozen=True)
class UpstreamCause:
    """Build triggered by another project's build."""
    project_name: str
    build_number: int
    causes: Tuple['Cause', ...] = ()

    @property
    def short_description(self) -> str:
        return f'Started by upstream project "{self.project_name}" build number {self.build_number}'


@dataclass(frozen=True)
class ScmTriggerCause:
    """Build started by a source-control poll."""

    @property
    def short_description(self) -> str:
        return "Started by an SCM change"


@dataclass(frozen=True)
class OtherCause:
    """Any other trigger (timer, remote call, ...)."""
    description: str

    @property
    def short_description(self) -> str:
        return self.description


Cause = Union[UserCause, UpstreamCause, ScmTriggerCause, OtherCause]


@dataclass(frozen=True)
class ChangeEntry:
    """One source-control change record."""
    author: str
    message: str
    affected_files: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'affected_files', tuple(self.affected_files))


@dataclass(frozen=True)
class TestSummary:
    """Aggregated test counts attached to a build."""
    total: int
    failed: int = 0
    skipped: int = 0

    __test__ = False  # keep pytest from collecting this class

    @property
    def passed(self) -> int:
        return self.total - self.failed - self.skipped


@dataclass(frozen=True)
class BuildEvent:
    """
    Immutable snapshot of one build.

    The same snapshot type is used for the build being notified about and for
    history lookups (previous build, upstream build, last successful build).
    `changes` is None while the host has not computed the change set yet.
    """
    project_name: str
    number: int
    result: Optional[Result] = None
    project_display_name: str = ""
    display_name: str = ""
    url: str = ""
    duration_string: str = ""
    started_at: Optional[datetime] = None
    environment: Mapping[str, str] = field(default_factory=dict)
    causes: Tuple[Cause, ...] = ()
    changes: Optional[Tuple[ChangeEntry, ...]] = ()
    test_summary: Optional[TestSummary] = None

    def __post_init__(self):
        # Copy on construction so the snapshot never observes later host mutation
        object.__setattr__(self, 'environment', MappingProxyType(dict(self.environment)))
        object.__setattr__(self, 'causes', tuple(self.causes))
        if self.changes is not None:
            object.__setattr__(self, 'changes', tuple(self.changes))
        if not self.project_display_name:
            object.__setattr__(self, 'project_display_name', self.project_name)
        if not self.display_name:
            object.__setattr__(self, 'display_name', f"#{self.number}")

    @classmethod
    def snapshot(
        cls,
        project_name: str,
        number: int,
        result: Optional[Union[Result, str]] = None,
        environment: Optional[Mapping[str, str]] = None,
        causes: Iterable[Cause] = (),
        changes: Optional[Iterable[ChangeEntry]] = (),
        **kwargs,
    ) -> 'BuildEvent':
        """Build a snapshot from (possibly mutable) host data."""
        if isinstance(result, str):
            result = Result.parse(result)
        return cls(
            project_name=project_name,
            number=number,
            result=result,
            environment=dict(environment or {}),
            causes=tuple(causes),
            changes=tuple(changes) if changes is not None else None,
            **kwargs,
        )

    @property
    def full_display_name(self) -> str:
        return f"{self.project_display_name} {self.display_name}"

    @property
    def is_building(self) -> bool:
        return self.result is Result.BUILDING

    @property
    def is_completed(self) -> bool:
        return self.result is not None and self.result is not Result.BUILDING

    @property
    def has_change_set_computed(self) -> bool:
        return self.changes is not None

    @property
    def branch(self) -> Optional[str]:
        """Branch from BUILD_BRANCH, falling back to BRANCH."""
        branch = self.environment.get("BUILD_BRANCH")
        return branch if branch is not None else self.environment.get("BRANCH")
