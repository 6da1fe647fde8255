"""
Monitoring Decorators

Error containment for dispatcher steps and timing for transport calls.
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional, Sequence, TypeVar, cast

from .sentry.setup import add_breadcrumb, capture_exception

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _build_tags(args: Sequence[Any]) -> Dict[str, str]:
    """Pick project/build tags from the first argument that carries them."""
    for arg in args:
        build = getattr(arg, "build", None)
        if build is not None and hasattr(build, "project_name"):
            return {"project": build.project_name, "build": str(build.number)}
        project_name = getattr(arg, "project_name", None)
        if isinstance(project_name, str):
            return {"project": project_name, "build": str(getattr(arg, "build_number", ""))}
    return {}


def capture_errors(
    step_name: Optional[str] = None,
    reraise: bool = True,
    tags: Optional[Dict[str, str]] = None,
) -> Callable[[F], F]:
    """
    Log and report exceptions raised by a dispatcher step.

    Tasks and outcomes passed to the wrapped function contribute their
    project and build number as Sentry tags.

    Args:
        step_name: Step name used in logs and the "step" tag
        reraise: Re-raise after reporting; otherwise the call returns None
        tags: Extra static tags

    Usage:
        @capture_errors(step_name="notification_task", reraise=False)
        def run_task(task):
            ...
    """

    def decorator(func: F) -> F:
        name = step_name or func.__name__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_tags = {"step": name, **_build_tags(args), **(tags or {})}
                logger.exception("%s failed for %s: %s", name, error_tags.get("project", "<unknown>"), e)
                capture_exception(e, tags=error_tags, extra={"function": func.__qualname__})
                if reraise:
                    raise
                return None

        return cast(F, wrapper)

    return decorator


def track_performance(
    operation_name: Optional[str] = None,
    warn_threshold_seconds: float = 5.0,
) -> Callable[[F], F]:
    """
    Time a transport call and warn when it is slow.

    Usage:
        @track_performance(operation_name="slack_publish")
        def publish(self, text, color):
            ...
    """

    def decorator(func: F) -> F:
        name = operation_name or func.__name__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.monotonic()
            succeeded = False
            try:
                result = func(*args, **kwargs)
                succeeded = bool(result)
                return result
            finally:
                duration = time.monotonic() - start_time
                add_breadcrumb(
                    message=f"{name} {'ok' if succeeded else 'failed'} in {duration:.2f}s",
                    category="transport",
                    level="info" if succeeded else "warning",
                    data={"duration_seconds": round(duration, 3)},
                )
                if duration > warn_threshold_seconds:
                    logger.warning("Slow %s: %.2fs (threshold %.2fs)", name, duration, warn_threshold_seconds)

        return cast(F, wrapper)

    return decorator
