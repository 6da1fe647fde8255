"""Notification policy - decides whether a completed build warrants a message."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..host.base import BuildSnapshotProvider
from ..models.build import BuildEvent, Color, Result
from ..models.job import JobNotificationConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy evaluation."""
    notify: bool
    color: Color
    config_missing: bool = False


def build_color(result: Optional[Result]) -> Color:
    """Map a build result to its severity color."""
    if result is Result.SUCCESS:
        return Color.GOOD
    elif result is Result.FAILURE:
        return Color.DANGER
    return Color.WARNING


def find_previous_completed_build(
    host: BuildSnapshotProvider,
    build: BuildEvent,
) -> Optional[BuildEvent]:
    """
    Find the closest completed build before `build`, skipping aborted ones.

    Args:
        host: Build history provider
        build: Build to look back from

    Returns:
        Previous non-aborted completed build, or None
    """
    previous = host.get_previous_completed_build(build)
    while previous is not None and previous.result is Result.ABORTED:
        previous = host.get_previous_completed_build(previous)
    return previous


def previous_result(host: BuildSnapshotProvider, build: BuildEvent) -> Result:
    """Result of the previous non-aborted build; SUCCESS when there is none."""
    previous = find_previous_completed_build(host, build)
    if previous is None or previous.result is None:
        return Result.SUCCESS
    return previous.result


class NotificationPolicy:
    """Eligibility rules for completed-build notifications."""

    @staticmethod
    def decide(
        current: Optional[Result],
        previous: Optional[Result],
        flags: JobNotificationConfig,
    ) -> Decision:
        """
        Decide whether to notify for a result transition.

        Args:
            current: Result of the build that just completed
            previous: Result of the previous non-aborted completed build
            flags: Project notification flags

        Returns:
            Decision with the notify flag and the current build's color
        """
        if previous is None:
            previous = Result.SUCCESS

        notify = (
            (current is Result.ABORTED and flags.notify_aborted)
            or (current is Result.FAILURE
                and (previous is not Result.FAILURE or flags.notify_repeated_failure)
                and flags.notify_failure)
            or (current is Result.NOT_BUILT and flags.notify_not_built)
            or (current is Result.SUCCESS
                and previous in (Result.FAILURE, Result.UNSTABLE)
                and flags.notify_back_to_normal)
            or (current is Result.SUCCESS and flags.notify_success)
            or (current is Result.UNSTABLE and flags.notify_unstable)
        )
        return Decision(notify=bool(notify), color=build_color(current))

    def evaluate(
        self,
        host: BuildSnapshotProvider,
        build: BuildEvent,
        flags: Optional[JobNotificationConfig],
    ) -> Decision:
        """Evaluate the policy for a completed build against its history."""
        if flags is None:
            logger.warning("Project %s has no Slack configuration.", build.project_name)
            return Decision(notify=False, color=build_color(build.result), config_missing=True)

        previous = previous_result(host, build)
        decision = self.decide(build.result, previous, flags)
        logger.debug(
            "Policy for %s: %s after %s -> notify=%s",
            build.full_display_name,
            build.result.value if build.result else None,
            previous.value,
            decision.notify,
        )
        return decision
