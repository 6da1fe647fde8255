"""Data models - immutable build snapshots and project configuration."""

from .build import (
    BuildEvent,
    Cause,
    ChangeEntry,
    Color,
    OtherCause,
    Result,
    ScmTriggerCause,
    TestSummary,
    UpstreamCause,
    UserCause,
)
from .job import JobNotificationConfig

__all__ = [
    'BuildEvent',
    'Cause',
    'ChangeEntry',
    'Color',
    'OtherCause',
    'Result',
    'ScmTriggerCause',
    'TestSummary',
    'UpstreamCause',
    'UserCause',
    'JobNotificationConfig',
]
