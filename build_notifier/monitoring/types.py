"""
Monitoring Types

Data structures describing what a notification task did.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class DeliveryStatus(Enum):
    """Overall task status."""
    SENT = "sent"
    PARTIAL = "partial"  # Some messages went out, some failed
    FAILED = "failed"
    SKIPPED = "skipped"


class TaskKind(Enum):
    """Build lifecycle event a task reacts to."""
    STARTED = "started"
    COMPLETED = "completed"


@dataclass
class PublishRecord:
    """One message handed to the chat transport."""

    text: str
    color: str
    delivered: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "color": self.color, "delivered": self.delivered}


@dataclass
class NotificationOutcome:
    """Result of one notification task."""

    kind: TaskKind
    project_name: str
    build_number: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    published: List[PublishRecord] = field(default_factory=list)
    skip_reason: Optional[str] = None
    error: Optional[str] = None

    @property
    def status(self) -> DeliveryStatus:
        """Determine overall delivery status."""
        if self.error is not None and not self.published:
            return DeliveryStatus.FAILED
        if not self.published:
            return DeliveryStatus.SKIPPED

        delivered = [p for p in self.published if p.delivered]
        if not delivered:
            return DeliveryStatus.FAILED
        elif len(delivered) < len(self.published) or self.error is not None:
            return DeliveryStatus.PARTIAL
        return DeliveryStatus.SENT

    @property
    def duration_seconds(self) -> float:
        """Calculate task duration in seconds."""
        if self.ended_at is None:
            return 0.0
        return (self.ended_at - self.started_at).total_seconds()

    @property
    def duration_ms(self) -> int:
        return int(self.duration_seconds * 1000)

    def add_publish(self, record: PublishRecord) -> None:
        self.published.append(record)

    def skip(self, reason: str) -> None:
        self.skip_reason = reason

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "project_name": self.project_name,
            "build_number": self.build_number,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "published": [p.to_dict() for p in self.published],
            "skip_reason": self.skip_reason,
            "error": self.error,
        }
