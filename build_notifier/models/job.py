"""Per-project notification configuration."""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from ..errors import EnvironmentResolutionError

logger = logging.getLogger(__name__)


def fix_empty(value: Optional[str]) -> Optional[str]:
    """Normalize empty strings to None."""
    if value is None or value == "":
        return None
    return value


@dataclass(frozen=True)
class JobNotificationConfig:
    """Notification settings attached to one project."""

    channel: Optional[str] = None
    team_domain: Optional[str] = None
    token: Optional[str] = None

    # Eligibility flags
    notify_aborted: bool = False
    notify_failure: bool = True
    notify_repeated_failure: bool = False
    notify_not_built: bool = False
    notify_back_to_normal: bool = True
    notify_success: bool = False
    notify_unstable: bool = False

    # Composition flags
    include_test_summary: bool = False
    include_custom_message: bool = False
    show_commit_list: bool = False
    custom_message: Optional[str] = None

    def resolve(self, expand: Callable[[str], str]) -> 'JobNotificationConfig':
        """
        Expand environment variables in the transport settings.

        Args:
            expand: Host expansion function for the current build

        Returns:
            New config with channel, team domain and token expanded. On an
            expansion failure the unexpanded values are kept.
        """
        channel = fix_empty(self.channel)
        team_domain = fix_empty(self.team_domain)
        token = fix_empty(self.token)

        try:
            return replace(
                self,
                channel=expand(channel) if channel else None,
                team_domain=expand(team_domain) if team_domain else None,
                token=expand(token) if token else None,
            )
        except EnvironmentResolutionError as e:
            logger.error("Error retrieving environment vars: %s", e)
            return replace(self, channel=channel, team_domain=team_domain, token=token)
