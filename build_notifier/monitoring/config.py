"""
Monitoring Configuration

Loads chat transport and error tracking settings from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_ENDPOINT_TEMPLATE = "https://{team_domain}.slack.com/services/hooks/jenkins-ci?token={token}"


@dataclass
class MonitoringConfig:
    """Configuration for monitoring services."""

    # Slack settings
    slack_webhook_url: Optional[str] = field(default=None)
    slack_endpoint_template: str = DEFAULT_ENDPOINT_TEMPLATE
    slack_timeout_seconds: float = 10.0

    # Sentry settings
    sentry_dsn: Optional[str] = field(default=None)
    sentry_environment: str = "production"
    sentry_traces_sample_rate: float = 0.1

    # Service metadata
    service_name: str = "build-notifier"

    @classmethod
    def from_env(cls) -> "MonitoringConfig":
        """Create config from environment variables."""
        return cls(
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL"),
            slack_endpoint_template=os.getenv("SLACK_ENDPOINT_TEMPLATE", DEFAULT_ENDPOINT_TEMPLATE),
            slack_timeout_seconds=float(os.getenv("SLACK_TIMEOUT", "10")),
            sentry_dsn=os.getenv("SENTRY_DSN"),
            sentry_environment=os.getenv("SENTRY_ENVIRONMENT", "production"),
            sentry_traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
            service_name=os.getenv("NOTIFIER_SERVICE_NAME", "build-notifier"),
        )

    @property
    def sentry_enabled(self) -> bool:
        """Check if Sentry tracking is configured."""
        return bool(self.sentry_dsn)
