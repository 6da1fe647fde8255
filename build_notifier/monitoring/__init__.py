"""
Monitoring and Delivery for Build Notifications

Provides:
- Slack chat transport with colored attachments
- Sentry error tracking with build context
- Task outcome records for reporting
"""

from .config import MonitoringConfig
from .types import (
    DeliveryStatus,
    NotificationOutcome,
    PublishRecord,
    TaskKind,
)
from .decorators import (
    capture_errors,
    track_performance,
)
from .slack import ChatTransport, MockSlackService, SlackService, slack_service_factory
from .sentry import (
    init_sentry,
    build_scope,
    add_breadcrumb,
    capture_exception,
)

__all__ = [
    # Config
    'MonitoringConfig',
    # Types
    'DeliveryStatus',
    'NotificationOutcome',
    'PublishRecord',
    'TaskKind',
    # Decorators
    'capture_errors',
    'track_performance',
    # Slack
    'ChatTransport',
    'MockSlackService',
    'SlackService',
    'slack_service_factory',
    # Sentry
    'init_sentry',
    'build_scope',
    'add_breadcrumb',
    'capture_exception',
]
