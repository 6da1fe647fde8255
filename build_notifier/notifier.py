"""
Build Notifier - facade the CI host calls on build lifecycle events.

Each callback loads the project's notification config fresh, wraps it with
the build snapshot in a task and hands the task to the dispatcher. The
callbacks return immediately and never raise into the host.
"""

import logging
from typing import Optional

from .config import Config
from .host.base import BuildHost
from .models.build import BuildEvent
from .monitoring.slack.client import TransportFactory
from .notify.causes import CauseResolver
from .notify.changes import ChangeAggregator
from .notify.dispatcher import Dispatcher
from .notify.message import MessageContext
from .notify.policy import NotificationPolicy
from .notify.tasks import NotificationServices, NotificationTask, OnCompletedTask, OnStartedTask

logger = logging.getLogger(__name__)


class BuildNotifier:
    """Turns host build events into queued notification tasks."""

    def __init__(
        self,
        host: BuildHost,
        dispatcher: Dispatcher,
        transport_factory: TransportFactory,
        config: Optional[Config] = None,
    ):
        self.host = host
        self.dispatcher = dispatcher
        self.config = config or Config.from_env()

        resolver = CauseResolver(host, max_depth=self.config.max_cause_depth)
        context = MessageContext(
            host=host,
            resolver=resolver,
            build_server_url=self.config.build_server_url,
            qa_gate=self.config.qa_gate,
        )
        self.services = NotificationServices(
            host=host,
            context=context,
            changes=ChangeAggregator(context, max_upstream_depth=self.config.max_upstream_depth),
            policy=NotificationPolicy(),
            transport_factory=transport_factory,
        )

    def started(self, build: BuildEvent) -> bool:
        """Queue the start notification for a build."""
        return self._enqueue(OnStartedTask, build)

    def completed(self, build: BuildEvent) -> bool:
        """Queue the completion notification for a build."""
        return self._enqueue(OnCompletedTask, build)

    def deleted(self, build: BuildEvent) -> None:
        pass

    def finalized(self, build: BuildEvent) -> None:
        pass

    def _enqueue(self, task_cls, build: BuildEvent) -> bool:
        try:
            job_config = self.host.get_job_config(build.project_name)
            task: NotificationTask = task_cls(build, job_config, self.services)
            return self.dispatcher.submit(task)
        except Exception as e:
            logger.error("Could not queue notification for %s: %s", build.full_display_name, e)
            return False
