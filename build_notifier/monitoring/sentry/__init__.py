"""
Sentry Error Tracking Module

Provides exception capture with build context for debugging.
"""

from .setup import (
    init_sentry,
    build_scope,
    add_breadcrumb,
    capture_exception,
)

__all__ = [
    'init_sentry',
    'build_scope',
    'add_breadcrumb',
    'capture_exception',
]
