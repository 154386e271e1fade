"""
Entitlement audit logging.

Every denied write and every member-limit rejection is written as a
structured JSON event on the dedicated "entitlements.audit" logger.
"""

import json
import logging
import uuid
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

audit_logger = logging.getLogger("entitlements.audit")


@dataclass
class AccessDenialEvent:
    """Structured event for a rejected request."""

    account_id: str
    reason: str
    status_code: int
    billing_status: Optional[str] = None
    endpoint: Optional[str] = None
    method: Optional[str] = None
    current_count: Optional[int] = None
    limit: Optional[int] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def log_access_denied(event: AccessDenialEvent) -> None:
    """Write a denial event to the audit log."""
    audit_logger.warning(
        event.to_json(),
        extra={
            "event_type": "entitlement.access_denied",
            "account_id": event.account_id,
            "billing_status": event.billing_status,
            "status_code": event.status_code,
        },
    )
