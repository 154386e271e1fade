"""
Billing status route.

Read-only surface used by dashboards and status banners to show trial and
grace countdowns. All routes require an authenticated account context.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from clubcheck.api.dependencies.entitlements import (
    get_account_repository,
    get_billing_settings,
)
from clubcheck.config.billing import BillingConfig
from clubcheck.entitlements.evaluator import evaluate, resolve_member_limit
from clubcheck.entitlements.models import BillingStatus, PlanType
from clubcheck.platform.account_context import get_account_context
from clubcheck.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["billing"])


class BillingStatusResponse(BaseModel):
    """Evaluated entitlement state plus live member usage."""
    status: str
    can_read: bool
    can_write: bool
    message: Optional[str] = None
    days_remaining: Optional[int] = None
    reason_code: Optional[str] = None
    plan_type: str
    member_limit: int
    member_count: int
    is_demo: bool


@router.get("/billing-status", response_model=BillingStatusResponse)
async def get_billing_status(
    request: Request,
    repository: AccountRepository = Depends(get_account_repository),
    billing_config: BillingConfig = Depends(get_billing_settings),
):
    """
    Return the account's current entitlement state.

    The demo account always reports an active pro plan.
    """
    account_id = get_account_context(request).account_id

    if billing_config.is_demo_account(account_id):
        return BillingStatusResponse(
            status=BillingStatus.ACTIVE.value,
            can_read=True,
            can_write=True,
            plan_type=PlanType.PRO.value,
            member_limit=resolve_member_limit(
                PlanType.PRO.value,
                billing_config.plan_limits,
                billing_config.default_plan,
            ),
            member_count=0,
            is_demo=True,
        )

    snapshot = repository.get_account_snapshot(account_id)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )

    state = evaluate(
        snapshot,
        datetime.now(timezone.utc),
        billing_config.plan_limits,
        billing_config.default_plan,
    )
    member_count = repository.count_active_members(account_id)

    logger.debug("Billing status evaluated", extra={
        "account_id": account_id,
        "billing_status": state.status.value,
        "member_count": member_count,
    })

    return BillingStatusResponse(
        **state.to_dict(),
        member_count=member_count,
        is_demo=False,
    )
