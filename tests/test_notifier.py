"""Tests for the BuildNotifier facade (notifier.py) and app wiring (app.py)."""

from unittest.mock import MagicMock, patch

from build_notifier.app import create_notifier, shutdown
from build_notifier.models.build import UserCause
from build_notifier.models.job import JobNotificationConfig
from build_notifier.monitoring.config import MonitoringConfig
from build_notifier.monitoring.slack.client import MockSlackService
from build_notifier.notifier import BuildNotifier
from build_notifier.notify.dispatcher import Dispatcher
from build_notifier.notify.tasks import OnCompletedTask, OnStartedTask


class TestBuildNotifier:
    def test_completed_runs_through_dispatcher(self, host, config, make_build):
        transport = MockSlackService()
        host.add_project("api", JobNotificationConfig(notify_success=True))
        dispatcher = Dispatcher(pool_size=2, queue_capacity=4, outcome_sink=None)
        notifier = BuildNotifier(host, dispatcher, lambda *args: transport, config)

        build = host.record_build(make_build(number=1, result="SUCCESS"))
        assert notifier.completed(build) is True
        dispatcher.shutdown(wait=True)

        assert len(transport.messages) == 1
        assert transport.messages[0][1] == "good"

    def test_config_loaded_fresh_per_event(self, host, config, make_build):
        dispatcher = MagicMock()
        notifier = BuildNotifier(host, dispatcher, lambda *args: MockSlackService(), config)
        build = make_build(number=1, result="FAILURE")

        notifier.completed(build)
        host.set_job_config("api", JobNotificationConfig(channel="#late"))
        notifier.completed(build)

        first, second = [call.args[0] for call in dispatcher.submit.call_args_list]
        assert isinstance(first, OnCompletedTask)
        assert first.job_config is None
        assert second.job_config.channel == "#late"

    def test_started_builds_started_task(self, host, config, make_build):
        dispatcher = MagicMock()
        dispatcher.submit.return_value = True
        notifier = BuildNotifier(host, dispatcher, lambda *args: MockSlackService(), config)

        assert notifier.started(make_build(result="BUILDING", causes=[UserCause("a")])) is True
        assert isinstance(dispatcher.submit.call_args.args[0], OnStartedTask)

    def test_host_errors_never_raise(self, host, config, make_build):
        host.get_job_config = MagicMock(side_effect=RuntimeError("registry down"))
        notifier = BuildNotifier(host, MagicMock(), lambda *args: MockSlackService(), config)
        assert notifier.completed(make_build()) is False

    def test_deleted_and_finalized_are_noops(self, host, config, make_build):
        dispatcher = MagicMock()
        notifier = BuildNotifier(host, dispatcher, lambda *args: MockSlackService(), config)
        notifier.deleted(make_build())
        notifier.finalized(make_build())
        dispatcher.submit.assert_not_called()


class TestCreateNotifier:
    @patch("build_notifier.app.load_dotenv")
    def test_wires_process_wide_dispatcher(self, mock_load_dotenv, host, config):
        transport = MockSlackService()
        try:
            notifier = create_notifier(
                host,
                config=config,
                monitoring=MonitoringConfig(),
                transport_factory=lambda *args: transport,
            )
            assert notifier.dispatcher.pool_size == 10
            assert notifier.dispatcher.queue_capacity == 20
            mock_load_dotenv.assert_called_once()
        finally:
            shutdown()
