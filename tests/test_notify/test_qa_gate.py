"""Tests for the QA gate warning (qa_gate.py)."""

import pytest

from build_notifier.models.build import ScmTriggerCause, UserCause
from build_notifier.notify.message import build_cause_message
from build_notifier.notify.qa_gate import QaGatePolicy, find_broken_projects


@pytest.fixture
def broken_qa_host(host, make_build):
    """Host with one failing watched QA project among green and excluded ones."""
    host.record_build(make_build("Web_QA3_Tests", 5, result="FAILURE"))
    host.record_build(make_build("Api_qa3_tests", 2, result="SUCCESS"))
    host.record_build(make_build("Responsive_Experimental_QA3_Tests", 9, result="FAILURE"))
    host.add_project("Mobile_QA3_Tests")
    return host


class TestQaGatePolicy:
    def test_applies_to_copy_jobs(self):
        policy = QaGatePolicy()
        assert policy.applies_to("Copy_Artifact_To_Prod")
        assert not policy.applies_to("Build_Artifact")

    def test_disabled(self):
        assert not QaGatePolicy(enabled=False).applies_to("Copy_Artifact_To_Prod")

    def test_watched_excludes_experimental(self):
        policy = QaGatePolicy()
        assert policy.is_watched("Web_QA3_Tests")
        assert not policy.is_watched("Responsive_Experimental_QA3_Tests")
        assert not policy.is_watched("Web_Unit_Tests")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("QA_GATE_TRIGGER", "release")
        monkeypatch.setenv("QA_GATE_WATCHED", "e2e")
        policy = QaGatePolicy.from_env()
        assert policy.applies_to("Release_Prod")
        assert policy.is_watched("checkout_e2e")


class TestFindBrokenProjects:
    def test_only_failed_watched_projects(self, broken_qa_host):
        assert find_broken_projects(broken_qa_host, QaGatePolicy()) == ["Web_QA3_Tests"]

    def test_nothing_broken(self, host, make_build):
        host.record_build(make_build("Web_QA3_Tests", 1, result="SUCCESS"))
        assert find_broken_projects(host, QaGatePolicy()) == []


class TestCauseMessageAlert:
    def test_alert_prepended_for_copy_job(self, broken_qa_host, context, make_build):
        build = make_build("Copy_Artifact_To_Prod", 3, result="BUILDING", causes=[UserCause("alice")])
        text = build_cause_message(context, build)

        assert text.startswith("<!channel>: Watch out everybody!!! <@alice> is trying to release")
        assert "Broken QA3 Tests:\nWeb_QA3_Tests\n" in text
        assert "Experimental" not in text
        assert "Copy_Artifact_To_Prod - #3 Started by user alice" in text

    def test_no_alert_when_qa_green(self, host, context, make_build):
        host.record_build(make_build("Web_QA3_Tests", 1, result="SUCCESS"))
        build = make_build("Copy_Artifact_To_Prod", 3, result="BUILDING", causes=[UserCause("alice")])
        assert not build_cause_message(context, build).startswith("<!channel>")

    def test_no_alert_for_other_jobs(self, broken_qa_host, context, make_build):
        build = make_build("api", 3, result="BUILDING", causes=[UserCause("alice")])
        assert "<!channel>" not in build_cause_message(context, build)

    def test_alert_names_somebody_without_user(self, broken_qa_host, context, make_build):
        build = make_build("Copy_Artifact_To_Prod", 3, result="BUILDING", causes=[ScmTriggerCause()])
        text = build_cause_message(context, build)

        assert text.startswith("<!channel>: Watch out everybody!!! Somebody is trying to release")
        assert "<@" not in text
