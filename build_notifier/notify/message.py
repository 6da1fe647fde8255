"""
Message Builder

Composes chat message text from build snapshots. Composition is pure apart
from host lookups (history, environment expansion); nothing here sends.
"""

import logging
from dataclasses import dataclass
from string import Template
from typing import Optional

from ..errors import EnvironmentResolutionError
from ..host.base import BuildHost
from ..models.build import BuildEvent, Result
from .causes import CauseResolver
from .policy import previous_result
from .qa_gate import QaGatePolicy, find_broken_projects

logger = logging.getLogger(__name__)

STABLE_BRANCH = "stable"


def escape(text: str) -> str:
    """Neutralize chat markup characters in free text."""
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    return text


def get_status_message(
    current: Optional[Result],
    previous: Optional[Result],
    building: bool = False,
) -> str:
    """
    Map a result transition to its status label.

    Args:
        current: Result of the build
        previous: Result of the previous non-aborted completed build
        building: Whether the build is still running

    Returns:
        Exactly one status label
    """
    if building or current is Result.BUILDING:
        return "Starting..."
    if current is Result.SUCCESS and previous is Result.FAILURE:
        return "Back to normal"
    if current is Result.FAILURE and previous is Result.FAILURE:
        return "Still Failing"
    if current is Result.SUCCESS:
        return "Success"
    if current is Result.FAILURE:
        return "Failure"
    if current is Result.ABORTED:
        return "Aborted"
    if current is Result.NOT_BUILT:
        return "Not built"
    if current is Result.UNSTABLE:
        return "Unstable"
    return "Unknown"


@dataclass(frozen=True)
class MessageContext:
    """Collaborators shared by every message built for one notifier."""
    host: BuildHost
    resolver: CauseResolver
    build_server_url: str
    qa_gate: QaGatePolicy = QaGatePolicy()


class MessageBuilder:
    """
    Accumulates escaped message text for one build.

    The header (failure mentions, project name, branch, build name) is
    written on construction.

    Usage:
        message = MessageBuilder(context, build)
        text = message.append_status_message().append_duration().append_open_link().to_text()
    """

    def __init__(self, context: MessageContext, build: BuildEvent, verify_qa_gate: bool = False):
        self.context = context
        self.build = build
        self._parts = []

        if verify_qa_gate:
            self.append_qa_gate_alert()
        self._start_message()

    def append(self, text) -> 'MessageBuilder':
        """Append escaped free text."""
        self._parts.append(escape(str(text)))
        return self

    def append_raw(self, text: str) -> 'MessageBuilder':
        """Append builder-controlled markup without escaping."""
        self._parts.append(text)
        return self

    def append_mention(self, user_id: str) -> 'MessageBuilder':
        return self.append_raw(f"<@{user_id}>")

    def append_channel_mention(self) -> 'MessageBuilder':
        return self.append_raw("<!channel>")

    def _start_message(self) -> None:
        self._append_failure_notice()
        self.append(self.build.project_display_name)
        self._append_branch()
        self.append_raw(" - ")
        self.append(self.build.display_name)
        self.append_raw(" ")

    def _append_branch(self) -> None:
        branch = self.build.branch
        if branch is not None:
            self.append_raw(f"(branch: {branch})")

    def _append_failure_notice(self) -> None:
        if self.build.result is not Result.FAILURE:
            return
        resolver = self.context.resolver
        user_id = resolver.find_responsible_user(self.build)
        if user_id is None:
            return

        self.append_mention(user_id)
        branch = self.build.branch
        if branch is not None and branch.lower() == STABLE_BRANCH:
            self.append(": You have broken a STABLE build. Please fix it and don't let "
                        "your teammates waiting! :strobe: \n")
            first_failed = resolver.find_first_failed_build(self.build.project_name)
            first_failed_user = resolver.find_responsible_user(first_failed)
            if first_failed_user is not None and first_failed_user != user_id:
                self.append_mention(first_failed_user)
                self.append(": You are a reason why your teammate build has failed. "
                            "Please fix it and apologies!\n")
        else:
            self.append(": Just a kind reminder that your build has failed. "
                        "Don't shoot the messenger. :innocent: \n")

    def append_qa_gate_alert(self) -> 'MessageBuilder':
        """Warn everybody when a release job starts while QA projects are broken."""
        policy = self.context.qa_gate
        if not policy.applies_to(self.build.project_name):
            return self

        broken = find_broken_projects(self.context.host, policy)
        if not broken:
            return self

        self.append_channel_mention()
        self.append(": Watch out everybody!!! ")
        user_id = self.context.resolver.find_responsible_user(self.build)
        if user_id is not None:
            self.append_mention(user_id)
        else:
            self.append("Somebody")
        self.append(" is trying to release when there are QA3 tests failing!!! "
                    "Whoever punch him/her first will get a star. :punch: \n")
        self.append("Broken QA3 Tests:\n")
        for project_name in broken:
            self.append(project_name + "\n")
        return self

    def append_status_message(self) -> 'MessageBuilder':
        previous = previous_result(self.context.host, self.build)
        return self.append(get_status_message(self.build.result, previous, self.build.is_building))

    def append_duration(self) -> 'MessageBuilder':
        self.append(" after ")
        return self.append(self.build.duration_string)

    def append_open_link(self) -> 'MessageBuilder':
        url = self.context.build_server_url + self.build.url
        return self.append_raw(f" (<{url}|Open>)")

    def append_test_summary(self) -> 'MessageBuilder':
        summary = self.build.test_summary
        if summary is None:
            return self.append_raw("\nNo Tests found.")
        self.append_raw("\nTest Status:\n")
        self.append_raw(f"\tPassed: {summary.passed}")
        self.append_raw(f", Failed: {summary.failed}")
        return self.append_raw(f", Skipped: {summary.skipped}")

    def append_custom_message(self, template: Optional[str]) -> 'MessageBuilder':
        """Append the project's custom message after environment expansion."""
        template = template or ""
        try:
            expanded = self.context.host.expand(self.build, template)
        except EnvironmentResolutionError as e:
            logger.error("Custom message expansion failed for %s: %s",
                         self.build.full_display_name, e)
            # Unknown references stay as written
            expanded = Template(template).safe_substitute({})
        self.append_raw("\n")
        return self.append(expanded)

    def to_text(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.to_text()


def build_status_message(
    context: MessageContext,
    build: BuildEvent,
    include_test_summary: bool = False,
    custom_message: Optional[str] = None,
    include_custom_message: bool = False,
) -> str:
    """Full status message: header, status, duration, link and optional extras."""
    message = MessageBuilder(context, build)
    message.append_status_message()
    message.append_duration()
    message.append_open_link()
    if include_test_summary:
        message.append_test_summary()
    if include_custom_message:
        message.append_custom_message(custom_message)
    return message.to_text()


def build_cause_message(context: MessageContext, build: BuildEvent) -> str:
    """Message describing what started the build, with the QA gate check."""
    message = MessageBuilder(context, build, verify_qa_gate=True)
    message.append(context.resolver.describe(build))
    return message.append_open_link().to_text()
