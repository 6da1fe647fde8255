"""Build Notifier - Main package.

This package turns CI build lifecycle events into Slack notifications.

Modules:
    models - Build snapshots and project configuration (dataclasses)
    host - Contracts for the CI host and an in-memory adapter
    notify - Notification policy, message composition and dispatch
    monitoring - Slack transport, Sentry tracking and task outcomes
    config - Configuration
    notifier - Facade called by the host on build events
"""

from .config import Config, DispatchConfig
from .notifier import BuildNotifier

__all__ = [
    'Config',
    'DispatchConfig',
    'BuildNotifier',
]

__version__ = '1.0.0'
