"""Build host contracts - the narrow read-only interfaces the notifier depends on."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.build import BuildEvent
from ..models.job import JobNotificationConfig


class BuildSnapshotProvider(ABC):
    """Abstract interface for build history lookups."""

    @abstractmethod
    def get_build(self, project_name: str, number: int) -> Optional[BuildEvent]:
        """Get a build of a project by number."""
        pass

    @abstractmethod
    def get_last_build(self, project_name: str) -> Optional[BuildEvent]:
        """Get the most recent build of a project."""
        pass

    @abstractmethod
    def get_last_successful_build(self, project_name: str) -> Optional[BuildEvent]:
        """Get the most recent SUCCESS build of a project."""
        pass

    @abstractmethod
    def get_previous_completed_build(self, build: BuildEvent) -> Optional[BuildEvent]:
        """Get the closest completed build before the given one."""
        pass

    @abstractmethod
    def get_next_build(self, build: BuildEvent) -> Optional[BuildEvent]:
        """Get the build right after the given one."""
        pass

    @abstractmethod
    def expand(self, build: BuildEvent, text: str) -> str:
        """
        Expand environment variable references in text for a build.

        Raises:
            EnvironmentResolutionError: If the build environment is unavailable
        """
        pass


class ProjectRegistry(ABC):
    """Abstract interface for project lookups."""

    @abstractmethod
    def list_projects(self) -> List[str]:
        """List all known project names."""
        pass

    @abstractmethod
    def get_job_config(self, project_name: str) -> Optional[JobNotificationConfig]:
        """Get the notification configuration of a project, if any."""
        pass


class BuildHost(BuildSnapshotProvider, ProjectRegistry):
    """Everything the notifier needs from the CI host."""
    pass
