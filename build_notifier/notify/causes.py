"""Cause resolution - attribute a build to the user or upstream job behind it."""

import logging
from typing import Optional, Sequence

from ..host.base import BuildSnapshotProvider
from ..models.build import (
    BuildEvent,
    Cause,
    ScmTriggerCause,
    UpstreamCause,
    UserCause,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CAUSE_DEPTH = 32


def _first(causes: Sequence[Cause], kind: type) -> Optional[Cause]:
    for cause in causes:
        if isinstance(cause, kind):
            return cause
    return None


class CauseResolver:
    """Walks cause chains of build snapshots."""

    def __init__(self, host: BuildSnapshotProvider, max_depth: int = DEFAULT_MAX_CAUSE_DEPTH):
        self.host = host
        self.max_depth = max_depth

    def find_user_cause(self, build: Optional[BuildEvent]) -> Optional[UserCause]:
        """
        Find the user behind a build.

        A direct user cause wins. Otherwise upstream causes are followed one
        level at a time: a user cause at a level is returned, else the first
        upstream cause at that level is descended into.
        """
        if build is None:
            return None

        user_cause = _first(build.causes, UserCause)
        if user_cause is not None:
            return user_cause

        upstream = _first(build.causes, UpstreamCause)
        depth = 0
        while upstream is not None:
            if depth >= self.max_depth:
                logger.warning(
                    "Cause chain of %s deeper than %d levels, giving up",
                    build.full_display_name,
                    self.max_depth,
                )
                return None
            depth += 1

            user_cause = _first(upstream.causes, UserCause)
            if user_cause is not None:
                return user_cause
            upstream = _first(upstream.causes, UpstreamCause)

        return None

    def find_responsible_user(self, build: Optional[BuildEvent]) -> Optional[str]:
        cause = self.find_user_cause(build)
        return cause.user_id if cause is not None else None

    def find_first_failed_build(self, project_name: str) -> Optional[BuildEvent]:
        """Build right after the project's last success, i.e. start of the failing streak."""
        last_success = self.host.get_last_successful_build(project_name)
        if last_success is None:
            return None
        return self.host.get_next_build(last_success)

    @staticmethod
    def find_upstream_cause(build: BuildEvent) -> Optional[UpstreamCause]:
        return _first(build.causes, UpstreamCause)

    @staticmethod
    def is_scm_triggered(build: BuildEvent) -> bool:
        return _first(build.causes, ScmTriggerCause) is not None

    @staticmethod
    def describe(build: BuildEvent) -> str:
        """Short human description of what started the build."""
        return ", ".join(cause.short_description for cause in build.causes)
