"""
Sentry Setup and Build Scopes

Initializes the Sentry SDK once per process and gives each notification task
its own isolated scope, so tags from one build never leak into another
worker's events.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from ..config import MonitoringConfig

logger = logging.getLogger(__name__)

_sentry_initialized = False


def init_sentry(config: Optional[MonitoringConfig] = None) -> bool:
    """
    Initialize Sentry SDK when a DSN is configured.

    Returns:
        True if Sentry is active after the call
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    config = config or MonitoringConfig.from_env()
    if not config.sentry_enabled:
        logger.debug("SENTRY_DSN not set, error tracking disabled")
        return False

    try:
        sentry_sdk.init(
            dsn=config.sentry_dsn,
            environment=config.sentry_environment,
            traces_sample_rate=config.sentry_traces_sample_rate,
            # Notifier logs become breadcrumbs; errors become events
            integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
            send_default_pii=False,
        )
        sentry_sdk.set_tag("service", config.service_name)
    except Exception as e:
        logger.error("Failed to initialize Sentry: %s", e)
        return False

    _sentry_initialized = True
    logger.info("Sentry error tracking enabled (%s)", config.sentry_environment)
    return True


@contextmanager
def build_scope(
    project_name: str,
    build_number: int,
    event: str,
    result: Optional[str] = None,
) -> Iterator[None]:
    """
    Run a block inside a Sentry scope tagged with one build.

    Args:
        project_name: Project the build belongs to
        build_number: Build number
        event: Lifecycle event (started, completed)
        result: Build result, if known
    """
    if not _sentry_initialized:
        yield
        return

    with sentry_sdk.isolation_scope() as scope:
        scope.set_context("build", {
            "project": project_name,
            "number": build_number,
            "event": event,
            "result": result,
        })
        scope.set_tag("project", project_name)
        scope.set_tag("event", event)
        yield


def add_breadcrumb(
    message: str,
    category: str = "notification",
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> None:
    """Record a breadcrumb (notification, dispatch, transport) on the current scope."""
    if _sentry_initialized:
        sentry_sdk.add_breadcrumb(message=message, category=category, level=level, data=data or {})


def capture_exception(
    exception: Exception,
    level: str = "error",
    tags: Optional[Dict[str, str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """
    Report an exception to Sentry.

    Returns:
        Sentry event ID, or None when Sentry is disabled or reporting failed
    """
    if not _sentry_initialized:
        return None

    try:
        with sentry_sdk.new_scope() as scope:
            scope.set_level(level)
            for key, value in (tags or {}).items():
                scope.set_tag(key, value)
            for key, value in (extra or {}).items():
                scope.set_extra(key, value)
            return sentry_sdk.capture_exception(exception)
    except Exception as e:
        logger.warning("Could not report %s to Sentry: %s", type(exception).__name__, e)
        return None
