"""Host layer - contracts for the CI host and an in-memory adapter."""

from .base import BuildHost, BuildSnapshotProvider, ProjectRegistry
from .memory import InMemoryBuildHost

__all__ = [
    'BuildHost',
    'BuildSnapshotProvider',
    'ProjectRegistry',
    'InMemoryBuildHost',
]
