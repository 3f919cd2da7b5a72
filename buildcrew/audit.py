"""
Audit Logging: structured trail of run lifecycle events.

One JSON line per event on the dedicated "audit" logger. Where those lines
end up (file, stdout, collector) is decided by the application's logging setup.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)


class AuditEventType(Enum):
    WORKFLOW_STARTED = "workflow.started"
    WORKFLOW_COMPLETED = "workflow.completed"
    WORKFLOW_FAILED = "workflow.failed"
    WORKFLOW_REJECTED = "workflow.rejected"


@dataclass
class AuditEvent:
    """Structured audit event."""
    timestamp: str
    event_type: str
    actor: Optional[str]  # "system" or the calling application
    resource: Optional[str]  # run id
    action: str
    outcome: str  # success, failure, error
    details: Dict[str, Any]

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=str)


def audit_log(
    event_type: Union[AuditEventType, str],
    details: Dict[str, Any],
    actor: Optional[str] = "system",
    resource: Optional[str] = None,
    outcome: str = "success",
) -> AuditEvent:
    """
    Log an audit event.

    Args:
        event_type: Type of event (AuditEventType or its string value)
        details: Event-specific details
        actor: Who triggered the event
        resource: Resource concerned, usually the run id
        outcome: success, failure, or error

    Returns:
        The event that was logged
    """
    event_type = event_type.value if isinstance(event_type, AuditEventType) else event_type
    event = AuditEvent(
        timestamp=datetime.now(timezone.utc).isoformat(),
        event_type=event_type,
        actor=actor,
        resource=resource,
        action=event_type.split(".")[-1],
        outcome=outcome,
        details=details,
    )

    if outcome == "success":
        audit_logger.info(event.to_json())
    else:
        audit_logger.warning(event.to_json())

    return event
