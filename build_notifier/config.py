from dataclasses import dataclass
from typing import Optional
import os

from .notify.qa_gate import QaGatePolicy

# Matches the host's default worker pool
DEFAULT_POOL_SIZE = 10
DEFAULT_QUEUE_CAPACITY = 20


def get_build_server_url() -> str:
    """
    Get the build server base URL from environment variable.

    The URL is used as prefix for build-relative links and always ends
    with a slash.

    Returns:
        Base URL of the build server
    """
    url = os.getenv('BUILD_SERVER_URL', 'http://localhost:8080/')
    return url if url.endswith('/') else url + '/'


@dataclass
class DispatchConfig:
    pool_size: int = DEFAULT_POOL_SIZE
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY


@dataclass
class Config:
    build_server_url: str = 'http://localhost:8080/'
    dispatch: Optional[DispatchConfig] = None
    qa_gate: Optional[QaGatePolicy] = None
    max_cause_depth: int = 32
    max_upstream_depth: int = 10

    def __post_init__(self):
        if self.dispatch is None:
            self.dispatch = DispatchConfig()
        if self.qa_gate is None:
            self.qa_gate = QaGatePolicy()

    @classmethod
    def from_env(cls) -> 'Config':
        return cls(
            build_server_url = get_build_server_url(),
            dispatch=DispatchConfig(
                pool_size = int(os.getenv('NOTIFIER_POOL_SIZE', DEFAULT_POOL_SIZE)),
                queue_capacity = int(os.getenv('NOTIFIER_QUEUE_CAPACITY', DEFAULT_QUEUE_CAPACITY)),
            ),
            qa_gate = QaGatePolicy.from_env(),
            max_cause_depth = int(os.getenv('NOTIFIER_MAX_CAUSE_DEPTH', 32)),
            max_upstream_depth = int(os.getenv('NOTIFIER_MAX_UPSTREAM_DEPTH', 10)),
        )
