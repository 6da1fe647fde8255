"""
Slack Notification Client

Posts colored attachment messages to Slack channels.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

import requests

from ...errors import TransportError
from ..config import MonitoringConfig
from ..decorators import track_performance
from .payload import build_attachment_payload, encode_payload, split_channels

logger = logging.getLogger(__name__)


class ChatTransport(ABC):
    """Abstract interface for sending one message to a chat channel."""

    @abstractmethod
    def publish(self, text: str, color: str) -> bool:
        """
        Send a message.

        Args:
            text: Message text
            color: Severity color tag (good, danger, warning)

        Returns:
            True if sent successfully
        """
        pass


TransportFactory = Callable[[Optional[str], Optional[str], Optional[str]], ChatTransport]


class SlackService(ChatTransport):
    """
    Sends notifications to Slack through the incoming-hook endpoint.

    Usage:
        service = SlackService(team_domain="acme", token="xyz", channel="#ci")
        service.publish("api - #12 Success after 3 min", "good")
    """

    def __init__(
        self,
        team_domain: Optional[str],
        token: Optional[str],
        channel: Optional[str],
        config: Optional[MonitoringConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Slack service.

        Args:
            team_domain: Slack team domain (subdomain of slack.com)
            token: Integration token
            channel: Comma/space separated target channels
            config: MonitoringConfig with endpoint and timeout settings
            session: Optional requests session to reuse connections
        """
        self.config = config or MonitoringConfig.from_env()
        self.team_domain = team_domain
        self.token = token
        self.channel = channel or ""
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        """Check if the service has somewhere to post."""
        return bool(self.config.slack_webhook_url) or bool(self.team_domain and self.token)

    def _endpoint(self) -> str:
        if self.config.slack_webhook_url:
            return self.config.slack_webhook_url
        return self.config.slack_endpoint_template.format(
            team_domain=self.team_domain,
            token=self.token,
        )

    @track_performance(operation_name="slack_publish")
    def publish(self, text: str, color: str) -> bool:
        if not self.enabled:
            logger.warning("Slack not configured (team domain/token missing), skipping notification")
            return False

        delivered = True
        for room in split_channels(self.channel):
            try:
                self._post(build_attachment_payload(text, color, room))
                logger.debug("Slack notification sent to %s", room or "<default>")
            except TransportError as e:
                logger.error("Failed to send Slack notification to %s: %s", room or "<default>", e)
                delivered = False
        return delivered

    def _post(self, payload) -> None:
        try:
            response = self._session.post(
                self._endpoint(),
                data=encode_payload(payload),
                timeout=self.config.slack_timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(str(e)) from e


class MockSlackService(ChatTransport):
    """Chat transport that records messages in memory."""

    def __init__(self, fail: bool = False, error: Optional[Exception] = None):
        self.fail = fail
        self.error = error
        self.messages: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def publish(self, text: str, color: str) -> bool:
        if self.error is not None:
            raise self.error
        with self._lock:
            self.messages.append((text, color))
        return not self.fail


def slack_service_factory(
    config: Optional[MonitoringConfig] = None,
    session: Optional[requests.Session] = None,
) -> TransportFactory:
    """Create a factory building one SlackService per resolved project config.

    All services built by the factory share one requests session, so
    connections are pooled across notifications.
    """
    config = config or MonitoringConfig.from_env()
    session = session or requests.Session()

    def factory(team_domain: Optional[str], token: Optional[str], channel: Optional[str]) -> ChatTransport:
        return SlackService(team_domain, token, channel, config=config, session=session)

    return factory
