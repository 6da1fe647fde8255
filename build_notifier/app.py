"""
Application wiring

Builds a ready-to-use BuildNotifier for a host adapter.

Usage:
    notifier = create_notifier(host)
    notifier.started(build)
    ...
    shutdown()
"""

import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from .config import Config
from .host.base import BuildHost
from .monitoring.config import MonitoringConfig
from .monitoring.sentry.setup import init_sentry
from .monitoring.slack.client import TransportFactory, slack_service_factory
from .notifier import BuildNotifier
from .notify.dispatcher import init_dispatcher, shutdown_dispatcher


def setup_logging(verbose: bool = False):
    """Configure logging to output to stdout."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_notifier(
    host: BuildHost,
    config: Optional[Config] = None,
    monitoring: Optional[MonitoringConfig] = None,
    transport_factory: Optional[TransportFactory] = None,
    verbose: bool = False,
) -> BuildNotifier:
    """
    Create the notifier and the process-wide dispatcher.

    Args:
        host: Host adapter implementing BuildHost
        config: Notifier config (defaults to environment)
        monitoring: Transport and Sentry config (defaults to environment)
        transport_factory: Override for the Slack transport
        verbose: Enable DEBUG logs

    Returns:
        BuildNotifier bound to the process-wide dispatcher
    """
    load_dotenv()
    setup_logging(verbose)

    config = config or Config.from_env()
    monitoring = monitoring or MonitoringConfig.from_env()
    init_sentry(monitoring)

    dispatcher = init_dispatcher(
        pool_size=config.dispatch.pool_size,
        queue_capacity=config.dispatch.queue_capacity,
    )
    return BuildNotifier(
        host=host,
        dispatcher=dispatcher,
        transport_factory=transport_factory or slack_service_factory(monitoring),
        config=config,
    )


def shutdown(wait: bool = True) -> None:
    """Drain pending notifications at process exit."""
    shutdown_dispatcher(wait=wait)
