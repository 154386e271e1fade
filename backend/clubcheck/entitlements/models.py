"""
Entitlement value types.

AccountSnapshot is the read-only input to the evaluator; EntitlementState is
its output. Both are frozen and recomputed on every request.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class SubscriptionStatus(str, Enum):
    """Processor-side subscription status. No subscription is None."""

    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class PlanType(str, Enum):
    """Plan types with a member ceiling."""

    STARTER = "starter"
    PRO = "pro"


class BillingStatus(str, Enum):
    """Evaluated billing status."""

    UNVERIFIED = "unverified"
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    GRACE_EXPIRED = "grace_expired"
    CANCELED = "canceled"
    EXPIRED = "expired"


class DenialReason(str, Enum):
    """Machine-readable reason a state does not allow writes."""

    EMAIL_UNVERIFIED = "email_unverified"
    TRIAL_EXPIRED = "trial_expired"
    GRACE_EXPIRED = "grace_expired"
    SUBSCRIPTION_CANCELED = "subscription_canceled"
    SUBSCRIPTION_EXPIRED = "subscription_expired"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC; leave aware ones untouched."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class AccountSnapshot:
    """Billing fields of an account as read from the account store."""

    account_id: str
    email_verified: Optional[datetime] = None
    subscription_status: Optional[str] = None
    current_period_end: Optional[datetime] = None
    trial_ends_at: Optional[datetime] = None
    plan_type: str = PlanType.STARTER.value

    def __post_init__(self) -> None:
        status = self.subscription_status
        if isinstance(status, Enum):
            status = status.value
        object.__setattr__(self, "subscription_status", status or None)
        plan_type = self.plan_type
        if isinstance(plan_type, Enum):
            plan_type = plan_type.value
        object.__setattr__(self, "plan_type", plan_type or PlanType.STARTER.value)
        object.__setattr__(self, "email_verified", as_utc(self.email_verified))
        object.__setattr__(self, "current_period_end", as_utc(self.current_period_end))
        object.__setattr__(self, "trial_ends_at", as_utc(self.trial_ends_at))


@dataclass(frozen=True)
class EntitlementState:
    """Access decision for one account at one instant."""

    status: BillingStatus
    can_read: bool
    can_write: bool
    member_limit: int
    plan_type: str
    message: Optional[str] = None
    days_remaining: Optional[int] = None
    reason_code: Optional[DenialReason] = None

    def __post_init__(self) -> None:
        if self.can_write and not self.can_read:
            raise ValueError("write access requires read access")
        if self.can_write and self.reason_code is not None:
            raise ValueError("reason_code only applies when writes are denied")
        if self.days_remaining is not None and self.days_remaining < 0:
            raise ValueError("days_remaining must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["reason_code"] = self.reason_code.value if self.reason_code else None
        return data
