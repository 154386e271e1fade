"""
Billing entitlement state machine.

This module provides:
- evaluate: pure (snapshot, now) -> EntitlementState
- require_write_access: gate for mutating operations
- check_member_limit: gate before creating an active member
- AccountSnapshot / EntitlementState: input and output values

Grace period: 7 days past current_period_end for past_due subscriptions.
"""

from clubcheck.entitlements.models import (
    AccountSnapshot,
    BillingStatus,
    DenialReason,
    EntitlementState,
    PlanType,
    SubscriptionStatus,
)
from clubcheck.entitlements.evaluator import (
    DEFAULT_PLAN_LIMITS,
    GRACE_PERIOD_DAYS,
    TRIAL_WARNING_DAYS,
    evaluate,
    resolve_member_limit,
    trial_end_date,
)
from clubcheck.entitlements.guards import (
    AccountStore,
    MemberLimitResult,
    WriteAccessResult,
    check_member_limit,
    require_write_access,
)
from clubcheck.entitlements.errors import (
    AccountNotFoundError,
    EntitlementError,
    MemberLimitReachedError,
    WriteAccessDeniedError,
)

__all__ = [
    # Models
    "AccountSnapshot",
    "BillingStatus",
    "DenialReason",
    "EntitlementState",
    "PlanType",
    "SubscriptionStatus",
    # Evaluator
    "DEFAULT_PLAN_LIMITS",
    "GRACE_PERIOD_DAYS",
    "TRIAL_WARNING_DAYS",
    "evaluate",
    "resolve_member_limit",
    "trial_end_date",
    # Guards
    "AccountStore",
    "MemberLimitResult",
    "WriteAccessResult",
    "check_member_limit",
    "require_write_access",
    # Errors
    "AccountNotFoundError",
    "EntitlementError",
    "MemberLimitReachedError",
    "WriteAccessDeniedError",
]
