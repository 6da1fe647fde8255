"""
Notification Tasks

One task per build lifecycle event. A task owns its build snapshot and
config, talks to the chat transport, and reports what it did through a
NotificationOutcome. Nothing raised inside a task escapes run().
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..host.base import BuildHost
from ..models.build import BuildEvent, Color
from ..models.job import JobNotificationConfig
from ..monitoring.sentry.setup import add_breadcrumb, build_scope, capture_exception
from ..monitoring.slack.client import ChatTransport, TransportFactory
from ..monitoring.types import NotificationOutcome, PublishRecord, TaskKind
from .causes import CauseResolver
from .changes import ChangeAggregator
from .message import MessageContext, build_cause_message, build_status_message
from .policy import NotificationPolicy, build_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationServices:
    """Stateless collaborators shared by all tasks."""
    host: BuildHost
    context: MessageContext
    changes: ChangeAggregator
    policy: NotificationPolicy
    transport_factory: TransportFactory

    @property
    def resolver(self) -> CauseResolver:
        return self.context.resolver


class NotificationTask(ABC):
    """Base class for lifecycle notification tasks."""

    kind: TaskKind

    def __init__(
        self,
        build: BuildEvent,
        job_config: Optional[JobNotificationConfig],
        services: NotificationServices,
    ):
        self.build = build
        self.job_config = job_config
        self.services = services

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.build.full_display_name})"

    def run(self) -> NotificationOutcome:
        """Execute the task, never raising."""
        build = self.build
        with build_scope(
            build.project_name,
            build.number,
            self.kind.value,
            result=build.result.value if build.result else None,
        ):
            return self._run_in_scope()

    def _run_in_scope(self) -> NotificationOutcome:
        build = self.build
        outcome = NotificationOutcome(
            kind=self.kind,
            project_name=build.project_name,
            build_number=build.number,
            started_at=datetime.now(),
        )
        add_breadcrumb(f"Starting {self.kind.value} notification for {build.full_display_name}")
        start_time = time.time()

        try:
            if self.job_config is None:
                logger.warning("Project %s has no Slack configuration.", build.project_name)
                outcome.skip("no configuration")
            else:
                config = self.job_config.resolve(
                    lambda text: self.services.host.expand(build, text)
                )
                transport = self.services.transport_factory(
                    config.team_domain, config.token, config.channel
                )
                self.execute(config, transport, outcome)

        except Exception as e:
            logger.exception("Notification for %s failed: %s", build.full_display_name, e)
            capture_exception(e, tags={"project": build.project_name, "event": self.kind.value})
            outcome.error = str(e)

        finally:
            outcome.ended_at = datetime.now()
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.info("Sending Slack notification took: %dms at %s", elapsed_ms, build.full_display_name)

        return outcome

    @abstractmethod
    def execute(
        self,
        config: JobNotificationConfig,
        transport: ChatTransport,
        outcome: NotificationOutcome,
    ) -> None:
        """Compose and send the messages for this event."""
        pass

    def publish(
        self,
        transport: ChatTransport,
        text: str,
        color: Color,
        outcome: NotificationOutcome,
    ) -> bool:
        """Send one message; transport failures are logged and recorded, never retried."""
        try:
            delivered = transport.publish(text, color.value)
        except Exception as e:
            logger.error(
                "Slack delivery for %s raised: %s",
                self.build.full_display_name,
                e,
            )
            capture_exception(e, level="warning", tags={"project": self.build.project_name})
            delivered = False

        if not delivered:
            logger.warning("Slack notification for %s was not delivered", self.build.full_display_name)
        outcome.add_publish(PublishRecord(text=text, color=color.value, delivered=delivered))
        return delivered


class OnStartedTask(NotificationTask):
    """Announce a build start with its cause and changes."""

    kind = TaskKind.STARTED

    def start_color(self) -> Color:
        """Color of the previous completed build, or good when there is none."""
        previous = self.services.host.get_previous_completed_build(self.build)
        if previous is None:
            return Color.GOOD
        return build_color(previous.result)

    def execute(self, config, transport, outcome) -> None:
        build = self.build
        color = self.start_color()

        if build.causes and not self.services.resolver.is_scm_triggered(build):
            self.publish(transport, build_cause_message(self.services.context, build), color, outcome)

        changes = self.services.changes.get_changes(build)
        if changes is not None:
            self.publish(transport, changes, color, outcome)
        else:
            text = build_status_message(
                self.services.context,
                build,
                include_test_summary=False,
                custom_message=config.custom_message,
                include_custom_message=config.include_custom_message,
            )
            self.publish(transport, text, color, outcome)


class OnCompletedTask(NotificationTask):
    """Report a completed build when the policy allows it."""

    kind = TaskKind.COMPLETED

    def execute(self, config, transport, outcome) -> None:
        build = self.build
        decision = self.services.policy.evaluate(self.services.host, build, config)
        if not decision.notify:
            outcome.skip("not eligible")
            return

        text = build_status_message(
            self.services.context,
            build,
            include_test_summary=config.include_test_summary,
            custom_message=config.custom_message,
            include_custom_message=config.include_custom_message,
        )
        self.publish(transport, text, decision.color, outcome)

        if config.show_commit_list:
            self.publish(transport, self.services.changes.get_commit_list(build), decision.color, outcome)
