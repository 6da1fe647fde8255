"""In-memory build host - reference adapter for embedders and tests."""

import threading
from string import Template
from typing import Dict, List, Optional

from ..errors import EnvironmentResolutionError
from ..models.build import BuildEvent, Result
from ..models.job import JobNotificationConfig
from .base import BuildHost


class InMemoryBuildHost(BuildHost):
    """
    Build host backed by plain dictionaries.

    Usage:
        host = InMemoryBuildHost()
        host.add_project("api", JobNotificationConfig(channel="#ci"))
        host.record_build(BuildEvent.snapshot("api", 1, result="SUCCESS"))
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._builds: Dict[str, Dict[int, BuildEvent]] = {}
        self._configs: Dict[str, JobNotificationConfig] = {}
        self._broken_environments: set = set()

    def add_project(self, project_name: str, config: Optional[JobNotificationConfig] = None) -> None:
        with self._lock:
            self._builds.setdefault(project_name, {})
            if config is not None:
                self._configs[project_name] = config

    def set_job_config(self, project_name: str, config: Optional[JobNotificationConfig]) -> None:
        with self._lock:
            if config is None:
                self._configs.pop(project_name, None)
            else:
                self._configs[project_name] = config

    def record_build(self, build: BuildEvent) -> BuildEvent:
        """Add or replace a build snapshot in the project's history."""
        with self._lock:
            self._builds.setdefault(build.project_name, {})[build.number] = build
        return build

    def break_environment(self, project_name: str) -> None:
        """Make environment expansion fail for a project (simulates host errors)."""
        self._broken_environments.add(project_name)

    def _history(self, project_name: str) -> List[BuildEvent]:
        with self._lock:
            builds = self._builds.get(project_name, {})
            return [builds[n] for n in sorted(builds)]

    def get_build(self, project_name: str, number: int) -> Optional[BuildEvent]:
        with self._lock:
            return self._builds.get(project_name, {}).get(number)

    def get_last_build(self, project_name: str) -> Optional[BuildEvent]:
        history = self._history(project_name)
        return history[-1] if history else None

    def get_last_successful_build(self, project_name: str) -> Optional[BuildEvent]:
        for build in reversed(self._history(project_name)):
            if build.result is Result.SUCCESS:
                return build
        return None

    def get_previous_completed_build(self, build: BuildEvent) -> Optional[BuildEvent]:
        for candidate in reversed(self._history(build.project_name)):
            if candidate.number < build.number and candidate.is_completed:
                return candidate
        return None

    def get_next_build(self, build: BuildEvent) -> Optional[BuildEvent]:
        for candidate in self._history(build.project_name):
            if candidate.number > build.number:
                return candidate
        return None

    def expand(self, build: BuildEvent, text: str) -> str:
        if build.project_name in self._broken_environments:
            raise EnvironmentResolutionError(
                f"Environment unavailable for {build.full_display_name}"
            )
        # $VAR and ${VAR}; unknown references are left untouched
        return Template(text).safe_substitute(build.environment)

    def list_projects(self) -> List[str]:
        with self._lock:
            return list(self._builds)

    def get_job_config(self, project_name: str) -> Optional[JobNotificationConfig]:
        with self._lock:
            return self._configs.get(project_name)
