"""Shared pytest fixtures for build notifier tests."""

import pytest

from build_notifier.config import Config
from build_notifier.host.memory import InMemoryBuildHost
from build_notifier.models.build import BuildEvent, ChangeEntry, UserCause
from build_notifier.models.job import JobNotificationConfig
from build_notifier.monitoring.slack.client import MockSlackService
from build_notifier.notify.causes import CauseResolver
from build_notifier.notify.changes import ChangeAggregator
from build_notifier.notify.message import MessageContext
from build_notifier.notify.policy import NotificationPolicy
from build_notifier.notify.qa_gate import QaGatePolicy
from build_notifier.notify.tasks import NotificationServices

SERVER_URL = "http://ci.example.com/"


def _build(project_name="api", number=1, result="SUCCESS", **kwargs) -> BuildEvent:
    kwargs.setdefault("url", f"job/{project_name}/{number}/")
    kwargs.setdefault("duration_string", "1 min 5 sec")
    return BuildEvent.snapshot(project_name, number, result=result, **kwargs)


@pytest.fixture
def make_build():
    """Factory for build snapshots with sensible defaults (url, duration)."""
    return _build


@pytest.fixture
def server_url():
    """Build server base URL used by the message context."""
    return SERVER_URL


@pytest.fixture
def host():
    """Empty in-memory build host."""
    return InMemoryBuildHost()


@pytest.fixture
def job_config():
    """Project config with the usual channel settings and default flags."""
    return JobNotificationConfig(channel="#ci", team_domain="acme", token="secret")


@pytest.fixture
def context(host):
    """Message context bound to the test host."""
    return MessageContext(
        host=host,
        resolver=CauseResolver(host),
        build_server_url=SERVER_URL,
        qa_gate=QaGatePolicy(),
    )


@pytest.fixture
def transport():
    """Recording chat transport."""
    return MockSlackService()


@pytest.fixture
def services(host, context, transport):
    """Task services wired to the recording transport."""
    return NotificationServices(
        host=host,
        context=context,
        changes=ChangeAggregator(context),
        policy=NotificationPolicy(),
        transport_factory=lambda team_domain, token, channel: transport,
    )


@pytest.fixture
def config():
    """Notifier config with a fixed server URL."""
    return Config(build_server_url=SERVER_URL)


@pytest.fixture
def sample_changes():
    """Two commits by the same author touching three distinct files."""
    return [
        ChangeEntry(author="alice", message="Fix login", affected_files=("a.py", "b.py")),
        ChangeEntry(author="alice", message="Add tests", affected_files=("b.py", "c.py")),
    ]


@pytest.fixture
def user_started_build():
    """Failed build started manually by alice."""
    return _build(result="FAILURE", causes=[UserCause("alice")])
