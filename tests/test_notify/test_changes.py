"""Tests for change aggregation (changes.py)."""

from build_notifier.models.build import ChangeEntry, UpstreamCause, UserCause
from build_notifier.notify.changes import NO_CHANGES, ChangeAggregator


class TestGetChanges:
    def test_not_computed(self, context, make_build):
        build = make_build(changes=None)
        assert ChangeAggregator(context).get_changes(build) is None

    def test_empty(self, context, make_build):
        build = make_build(changes=[])
        assert ChangeAggregator(context).get_changes(build) is None

    def test_same_author_three_files(self, context, sample_changes, make_build, server_url):
        build = make_build(display_name="#1", changes=sample_changes)
        text = ChangeAggregator(context).get_changes(build)
        assert text.startswith("api - #1 Started by changes from alice (3 file(s) changed)")
        assert text.endswith(f"(3 file(s) changed) (<{server_url}job/api/1/|Open>)")

    def test_distinct_authors_in_order(self, context, make_build):
        build = make_build(changes=[
            ChangeEntry("bob", "one", ("x",)),
            ChangeEntry("alice", "two", ("y",)),
            ChangeEntry("bob", "three", ("x",)),
        ])
        text = ChangeAggregator(context).get_changes(build)
        assert "Started by changes from bob, alice (2 file(s) changed)" in text

    def test_author_names_escaped(self, context, make_build):
        build = make_build(changes=[ChangeEntry("A & B", "msg", ())])
        assert "from A &amp; B (0 file(s) changed)" in ChangeAggregator(context).get_changes(build)


class TestGetCommitList:
    def test_commit_lines(self, context, sample_changes, make_build):
        build = make_build(display_name="#1", changes=sample_changes)
        text = ChangeAggregator(context).get_commit_list(build)
        assert text == "api - #1 Changes:\n- Fix login [alice]\n- Add tests [alice]"

    def test_duplicate_lines_collapsed(self, context, make_build):
        build = make_build(display_name="#1", changes=[
            ChangeEntry("bob", "Bump version", ("a",)),
            ChangeEntry("bob", "Bump version", ("b",)),
        ])
        text = ChangeAggregator(context).get_commit_list(build)
        assert text.count("Bump version [bob]") == 1

    def test_no_changes_without_upstream(self, context, make_build):
        build = make_build(changes=[], causes=[UserCause("alice")])
        assert ChangeAggregator(context).get_commit_list(build) == NO_CHANGES

    def test_follows_upstream(self, host, context, sample_changes, make_build):
        upstream = host.record_build(make_build("P", 7, changes=sample_changes))
        build = make_build("deploy", 3, changes=[], causes=[UpstreamCause("P", 7)])

        aggregator = ChangeAggregator(context)
        assert aggregator.get_commit_list(build) == aggregator.get_commit_list(upstream)
        assert "Fix login [alice]" in aggregator.get_commit_list(build)

    def test_follows_upstream_chain(self, host, context, sample_changes, make_build):
        host.record_build(make_build("lib", 2, changes=sample_changes))
        host.record_build(make_build("P", 7, changes=[], causes=[UpstreamCause("lib", 2)]))
        build = make_build("deploy", 3, changes=[], causes=[UpstreamCause("P", 7)])

        text = ChangeAggregator(context).get_commit_list(build)
        assert text.startswith("lib - #2 Changes:")

    def test_missing_upstream_build(self, context, make_build):
        build = make_build(changes=[], causes=[UpstreamCause("gone", 1)])
        assert ChangeAggregator(context).get_commit_list(build) == NO_CHANGES

    def test_upstream_cycle_is_bounded(self, host, context, make_build):
        host.record_build(make_build("a", 1, changes=[], causes=[UpstreamCause("b", 1)]))
        host.record_build(make_build("b", 1, changes=[], causes=[UpstreamCause("a", 1)]))
        build = make_build("a", 2, changes=[], causes=[UpstreamCause("a", 1)])

        assert ChangeAggregator(context, max_upstream_depth=5).get_commit_list(build) == NO_CHANGES
