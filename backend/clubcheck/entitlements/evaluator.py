"""
Entitlement evaluation.

Determines, for an account snapshot at a given instant, whether the account
may read, may write, and how many active members it may hold.

EVALUATION ORDER (first match wins):
1. unverified email      -> no access
2. active / trialing sub -> full access (processor "trialing" is paid setup)
3. no sub, trial window  -> full access until trial end, then read-only
4. past_due              -> full access for 7 days past period end, then read-only
5. canceled              -> read-only; wind-down until period end
6. anything else         -> read-only

Read access survives every billing failure; only email verification gates it.

CRITICAL: evaluate() is pure and total. It never reads the clock, never
touches storage, and never raises for any snapshot.
"""

import math
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping, Optional

from clubcheck.entitlements.models import (
    AccountSnapshot,
    BillingStatus,
    DenialReason,
    EntitlementState,
    PlanType,
    SubscriptionStatus,
    as_utc,
)

GRACE_PERIOD_DAYS = 7
TRIAL_WARNING_DAYS = 3
DEFAULT_TRIAL_DAYS = 14

DEFAULT_PLAN_LIMITS: Mapping[str, int] = MappingProxyType({
    PlanType.STARTER.value: 75,
    PlanType.PRO.value: 150,
})

_SECONDS_PER_DAY = 24 * 60 * 60


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def days_until(end: datetime, now: datetime) -> int:
    """Whole days from now until end, rounded up and never negative."""
    seconds = (end - now).total_seconds()
    return max(0, math.ceil(seconds / _SECONDS_PER_DAY))


def resolve_member_limit(
    plan_type: str,
    plan_limits: Mapping[str, int],
    default_plan: str = PlanType.STARTER.value,
) -> int:
    """
    Resolve the member ceiling for a plan type.

    Unknown plan types get the default plan's ceiling, or the smallest
    configured ceiling when the table has no entry for the default plan.
    """
    if plan_type in plan_limits:
        return plan_limits[plan_type]
    if default_plan in plan_limits:
        return plan_limits[default_plan]
    return min(plan_limits.values()) if plan_limits else 0


def trial_end_date(now: datetime, trial_days: int = DEFAULT_TRIAL_DAYS) -> datetime:
    """Trial end stamped on an account when its email is verified."""
    return as_utc(now) + timedelta(days=trial_days)


def evaluate(
    snapshot: AccountSnapshot,
    now: datetime,
    plan_limits: Mapping[str, int] = DEFAULT_PLAN_LIMITS,
    default_plan: str = PlanType.STARTER.value,
) -> EntitlementState:
    """
    Evaluate the entitlement state of an account.

    Args:
        snapshot: Billing fields of the account
        now: Evaluation instant (naive values are read as UTC)
        plan_limits: Plan type -> member ceiling
        default_plan: Plan whose ceiling applies to unknown plan types

    Returns:
        EntitlementState for (snapshot, now)
    """
    now = as_utc(now)
    plan_type = snapshot.plan_type
    member_limit = resolve_member_limit(plan_type, plan_limits, default_plan)

    def state(
        status: BillingStatus,
        can_read: bool,
        can_write: bool,
        message: Optional[str] = None,
        days_remaining: Optional[int] = None,
        reason_code: Optional[DenialReason] = None,
    ) -> EntitlementState:
        return EntitlementState(
            status=status,
            can_read=can_read,
            can_write=can_write,
            message=message,
            days_remaining=days_remaining,
            member_limit=member_limit,
            plan_type=plan_type,
            reason_code=reason_code,
        )

    subscription_status = snapshot.subscription_status
    period_end = snapshot.current_period_end

    if snapshot.email_verified is None:
        return state(
            BillingStatus.UNVERIFIED,
            can_read=False,
            can_write=False,
            message="Please verify your email to access ClubCheck.",
            reason_code=DenialReason.EMAIL_UNVERIFIED,
        )

    if subscription_status in (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value):
        return state(
            BillingStatus.ACTIVE,
            can_read=True,
            can_write=True,
            days_remaining=days_until(period_end, now) if period_end else None,
        )

    if subscription_status is None and snapshot.trial_ends_at is not None:
        if now < snapshot.trial_ends_at:
            remaining = days_until(snapshot.trial_ends_at, now)
            message = None
            if remaining <= TRIAL_WARNING_DAYS:
                message = f"Trial ends in {_days(remaining)}"
            return state(
                BillingStatus.TRIALING,
                can_read=True,
                can_write=True,
                message=message,
                days_remaining=remaining,
            )
        return state(
            BillingStatus.EXPIRED,
            can_read=True,
            can_write=False,
            message="Your trial has expired. Subscribe to continue using ClubCheck.",
            days_remaining=0,
            reason_code=DenialReason.TRIAL_EXPIRED,
        )

    if subscription_status == SubscriptionStatus.PAST_DUE.value:
        grace_end = None
        if period_end is not None:
            grace_end = period_end + timedelta(days=GRACE_PERIOD_DAYS)
        if grace_end is not None and now < grace_end:
            remaining = days_until(grace_end, now)
            return state(
                BillingStatus.PAST_DUE,
                can_read=True,
                can_write=True,
                message=(
                    "Payment failed. Update your payment method "
                    f"within {_days(remaining)}."
                ),
                days_remaining=remaining,
            )
        # Grace window elapsed, or no period end to measure it from
        return state(
            BillingStatus.GRACE_EXPIRED,
            can_read=True,
            can_write=False,
            message="Your account is suspended. Update your payment method to restore access.",
            days_remaining=0,
            reason_code=DenialReason.GRACE_EXPIRED,
        )

    if subscription_status == SubscriptionStatus.CANCELED.value:
        if period_end is not None and now < period_end:
            remaining = days_until(period_end, now)
            return state(
                BillingStatus.CANCELED,
                can_read=True,
                can_write=False,
                message=(
                    f"Subscription canceled. Read-only access for {remaining} "
                    f"more {'day' if remaining == 1 else 'days'}."
                ),
                days_remaining=remaining,
                reason_code=DenialReason.SUBSCRIPTION_CANCELED,
            )
        return state(
            BillingStatus.EXPIRED,
            can_read=True,
            can_write=False,
            message="Your subscription has ended. Resubscribe to continue using ClubCheck.",
            days_remaining=0,
            reason_code=DenialReason.SUBSCRIPTION_EXPIRED,
        )

    if subscription_status is None:
        # Legacy accounts created before trial tracking
        return state(
            BillingStatus.EXPIRED,
            can_read=True,
            can_write=False,
            message="Please subscribe to use ClubCheck.",
            days_remaining=0,
            reason_code=DenialReason.SUBSCRIPTION_EXPIRED,
        )

    # Unrecognised processor status
    return state(
        BillingStatus.EXPIRED,
        can_read=True,
        can_write=False,
        message="Please subscribe to continue.",
        days_remaining=0,
        reason_code=DenialReason.SUBSCRIPTION_EXPIRED,
    )
