"""
Slack Notification Module

Provides the chat transport used to deliver build notifications.
"""

from .client import ChatTransport, MockSlackService, SlackService, slack_service_factory
from .payload import build_attachment_payload

__all__ = [
    'ChatTransport',
    'MockSlackService',
    'SlackService',
    'slack_service_factory',
    'build_attachment_payload',
]
