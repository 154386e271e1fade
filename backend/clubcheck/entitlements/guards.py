"""
Write-access and member-quota guards.

Both guards load a fresh AccountSnapshot from the account store, run the
evaluator, and return a result value. Neither raises nor mutates billing
state; the HTTP layer decides how to surface a rejection.

Entitlement is checked at the start of an operation, not held for its
duration. check_member_limit is check-then-act: concurrent creations for the
same account can each pass before either commits, so the active-member count
may overshoot the ceiling slightly. The ceiling is a soft quota.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional, Protocol

from clubcheck.entitlements.evaluator import DEFAULT_PLAN_LIMITS, evaluate
from clubcheck.entitlements.models import AccountSnapshot, PlanType

logger = logging.getLogger(__name__)

ACCOUNT_NOT_FOUND_MESSAGE = "Account not found"
WRITE_DENIED_FALLBACK_MESSAGE = (
    "Write access not allowed. Please check your subscription status."
)


class AccountStore(Protocol):
    """Read accessor the guards consume from the account store."""

    def get_account_snapshot(self, account_id: str) -> Optional[AccountSnapshot]:
        ...

    def count_active_members(self, account_id: str) -> int:
        ...


@dataclass(frozen=True)
class WriteAccessResult:
    """Result of require_write_access."""

    allowed: bool
    reason: Optional[str] = None
    status_code: Optional[int] = None
    billing_status: Optional[str] = None
    reason_code: Optional[str] = None

    @classmethod
    def ok(cls, billing_status: Optional[str] = None) -> "WriteAccessResult":
        return cls(allowed=True, billing_status=billing_status)

    @classmethod
    def rejected(
        cls,
        reason: str,
        status_code: int,
        billing_status: Optional[str] = None,
        reason_code: Optional[str] = None,
    ) -> "WriteAccessResult":
        return cls(
            allowed=False,
            reason=reason,
            status_code=status_code,
            billing_status=billing_status,
            reason_code=reason_code,
        )


@dataclass(frozen=True)
class MemberLimitResult:
    """Result of check_member_limit."""

    allowed: bool
    current_count: int
    limit: int
    reason: Optional[str] = None
    account_found: bool = True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def require_write_access(
    store: AccountStore,
    account_id: str,
    *,
    now: Optional[datetime] = None,
    plan_limits: Optional[Mapping[str, int]] = None,
    default_plan: str = PlanType.STARTER.value,
) -> WriteAccessResult:
    """
    Gate a mutating operation on the account's billing state.

    Returns:
        Ok, Rejected("Account not found", 404), or
        Rejected(state message or fallback text, 403)
    """
    snapshot = store.get_account_snapshot(account_id)
    if snapshot is None:
        logger.warning("Write access check for unknown account", extra={
            "account_id": account_id,
        })
        return WriteAccessResult.rejected(ACCOUNT_NOT_FOUND_MESSAGE, 404)

    if plan_limits is None:
        plan_limits = DEFAULT_PLAN_LIMITS
    state = evaluate(snapshot, now or _utcnow(), plan_limits, default_plan)
    if not state.can_write:
        logger.info("Write access denied by billing state", extra={
            "account_id": account_id,
            "billing_status": state.status.value,
        })
        return WriteAccessResult.rejected(
            state.message or WRITE_DENIED_FALLBACK_MESSAGE,
            403,
            billing_status=state.status.value,
            reason_code=state.reason_code.value if state.reason_code else None,
        )

    return WriteAccessResult.ok(billing_status=state.status.value)


def check_member_limit(
    store: AccountStore,
    account_id: str,
    *,
    now: Optional[datetime] = None,
    plan_limits: Optional[Mapping[str, int]] = None,
    default_plan: str = PlanType.STARTER.value,
) -> MemberLimitResult:
    """
    Check whether one more active member fits under the plan ceiling.

    Returns:
        MemberLimitResult; allowed is False when the account is unknown or
        the active-member count has reached the ceiling.
    """
    snapshot = store.get_account_snapshot(account_id)
    if snapshot is None:
        logger.warning("Member limit check for unknown account", extra={
            "account_id": account_id,
        })
        return MemberLimitResult(
            allowed=False,
            current_count=0,
            limit=0,
            reason=ACCOUNT_NOT_FOUND_MESSAGE,
            account_found=False,
        )

    if plan_limits is None:
        plan_limits = DEFAULT_PLAN_LIMITS
    state = evaluate(snapshot, now or _utcnow(), plan_limits, default_plan)
    limit = state.member_limit
    current_count = store.count_active_members(account_id)

    if current_count >= limit:
        logger.info("Member limit reached", extra={
            "account_id": account_id,
            "current_count": current_count,
            "limit": limit,
            "plan_type": state.plan_type,
        })
        return MemberLimitResult(
            allowed=False,
            current_count=current_count,
            limit=limit,
            reason=(
                f"Member limit reached ({current_count}/{limit}). "
                "Upgrade your plan to add more members."
            ),
        )

    return MemberLimitResult(allowed=True, current_count=current_count, limit=limit)
