"""QA gate - warn when a release job starts while QA test projects are broken."""

import logging
import os
from dataclasses import dataclass
from typing import List

from ..host.base import BuildHost
from ..models.build import Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QaGatePolicy:
    """
    Project-name conventions that drive the QA gate warning.

    All matches are case-insensitive substring checks.
    """

    enabled: bool = True
    trigger_substring: str = "copy"
    watched_substring: str = "qa3_tests"
    excluded_substring: str = "experimental"

    @classmethod
    def from_env(cls) -> "QaGatePolicy":
        """Create policy from environment variables."""
        return cls(
            enabled=os.getenv("QA_GATE_ENABLED", "true").lower() == "true",
            trigger_substring=os.getenv("QA_GATE_TRIGGER", "copy"),
            watched_substring=os.getenv("QA_GATE_WATCHED", "qa3_tests"),
            excluded_substring=os.getenv("QA_GATE_EXCLUDED", "experimental"),
        )

    def applies_to(self, project_name: str) -> bool:
        """Check if starting this project should trigger the gate check."""
        return self.enabled and self.trigger_substring.lower() in project_name.lower()

    def is_watched(self, project_name: str) -> bool:
        name = project_name.lower()
        if self.watched_substring.lower() not in name:
            return False
        # e.g. Responsive_Experimental_QA3_Tests
        return self.excluded_substring.lower() not in name


def find_broken_projects(host: BuildHost, policy: QaGatePolicy) -> List[str]:
    """
    Find watched projects whose latest build failed.

    Args:
        host: Build host to scan
        policy: Name conventions to apply

    Returns:
        Names of broken watched projects, in registry order
    """
    broken = []
    for project_name in host.list_projects():
        if not policy.is_watched(project_name):
            continue
        last_build = host.get_last_build(project_name)
        if last_build is not None and last_build.result is Result.FAILURE:
            broken.append(project_name)

    if broken:
        logger.info("Broken QA projects: %s", ", ".join(broken))
    return broken
