"""Change aggregation - summarize source-control changes behind a build."""

import logging
from typing import Optional

from ..models.build import BuildEvent
from .message import MessageBuilder, MessageContext

logger = logging.getLogger(__name__)

NO_CHANGES = "No Changes."
DEFAULT_MAX_UPSTREAM_DEPTH = 10


class ChangeAggregator:
    """Builds change summaries and commit lists for builds."""

    def __init__(self, context: MessageContext, max_upstream_depth: int = DEFAULT_MAX_UPSTREAM_DEPTH):
        self.context = context
        self.max_upstream_depth = max_upstream_depth

    def get_changes(self, build: BuildEvent) -> Optional[str]:
        """
        Summarize the authors and files changed in a build.

        Args:
            build: Build snapshot

        Returns:
            Summary message, or None if the change set is missing or empty
        """
        if not build.has_change_set_computed:
            logger.info("No change set computed for %s", build.full_display_name)
            return None
        if not build.changes:
            logger.info("Empty change set for %s", build.full_display_name)
            return None

        authors = list(dict.fromkeys(entry.author for entry in build.changes))
        files = set()
        for entry in build.changes:
            files.update(entry.affected_files)

        message = MessageBuilder(self.context, build)
        message.append("Started by changes from ")
        message.append(", ".join(authors))
        message.append(f" ({len(files)} file(s) changed)")
        return message.append_open_link().to_text()

    def get_commit_list(self, build: BuildEvent) -> str:
        """
        List the commits behind a build.

        A build without changes of its own borrows the commit list of the
        upstream build that triggered it.
        """
        current = build
        for _ in range(self.max_upstream_depth + 1):
            if current.changes:
                return self._format_commits(current)

            upstream = self.context.resolver.find_upstream_cause(current)
            if upstream is None:
                return NO_CHANGES

            upstream_build = self.context.host.get_build(upstream.project_name, upstream.build_number)
            if upstream_build is None:
                logger.warning(
                    "Upstream build %s #%d of %s not found",
                    upstream.project_name,
                    upstream.build_number,
                    current.full_display_name,
                )
                return NO_CHANGES
            current = upstream_build

        logger.warning(
            "Upstream chain of %s exceeds %d builds, no commit list",
            build.full_display_name,
            self.max_upstream_depth,
        )
        return NO_CHANGES

    def _format_commits(self, build: BuildEvent) -> str:
        commits = list(dict.fromkeys(
            f"{entry.message} [{entry.author}]" for entry in build.changes
        ))
        message = MessageBuilder(self.context, build)
        message.append("Changes:\n- ")
        message.append("\n- ".join(commits))
        return message.to_text()
