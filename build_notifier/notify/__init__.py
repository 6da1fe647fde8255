"""Notification core - policy, composition and dispatch."""

from .causes import CauseResolver
from .changes import ChangeAggregator, NO_CHANGES
from .dispatcher import Dispatcher, get_dispatcher, init_dispatcher, shutdown_dispatcher
from .message import (
    MessageBuilder,
    MessageContext,
    build_cause_message,
    build_status_message,
    escape,
    get_status_message,
)
from .policy import Decision, NotificationPolicy, build_color, previous_result
from .qa_gate import QaGatePolicy, find_broken_projects
from .tasks import NotificationServices, OnCompletedTask, OnStartedTask

__all__ = [
    'CauseResolver',
    'ChangeAggregator',
    'NO_CHANGES',
    'Dispatcher',
    'get_dispatcher',
    'init_dispatcher',
    'shutdown_dispatcher',
    'MessageBuilder',
    'MessageContext',
    'build_cause_message',
    'build_status_message',
    'escape',
    'get_status_message',
    'Decision',
    'NotificationPolicy',
    'build_color',
    'previous_result',
    'QaGatePolicy',
    'find_broken_projects',
    'NotificationServices',
    'OnCompletedTask',
    'OnStartedTask',
]
