"""Error types for the build notifier.

Nothing raised here is allowed to reach the build host: each one is caught
and logged by the component that owns the failing step.
"""


class BuildNotifierError(Exception):
    """Base exception for the build notifier."""
    pass


class EnvironmentResolutionError(BuildNotifierError):
    """Expanding build environment variables failed."""
    pass


class TransportError(BuildNotifierError):
    """Chat message could not be delivered."""
    pass


class DispatcherNotInitializedError(BuildNotifierError):
    """Process-wide dispatcher was used before init_dispatcher()."""
    pass
