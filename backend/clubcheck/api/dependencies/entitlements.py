"""
Entitlement check dependencies.

Every mutating route depends on require_write_access_dependency; routes that
create an active member additionally depend on require_member_capacity.

Usage:
    @router.post("/api/members")
    async def create_member(
        ctx: AccountContext = Depends(require_write_access_dependency),
        _quota=Depends(require_member_capacity),
    ):
        ...
"""

import logging
from typing import NoReturn

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from clubcheck.config.billing import BillingConfig, get_billing_config
from clubcheck.database.session import get_db_session
from clubcheck.entitlements.audit import AccessDenialEvent, log_access_denied
from clubcheck.entitlements.errors import (
    DEMO_READ_ONLY_MESSAGE,
    AccountNotFoundError,
    MemberLimitReachedError,
    WriteAccessDeniedError,
)
from clubcheck.entitlements.guards import (
    MemberLimitResult,
    check_member_limit,
    require_write_access,
)
from clubcheck.platform.account_context import AccountContext, get_account_context
from clubcheck.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)


def get_account_repository(db_session: Session = Depends(get_db_session)) -> AccountRepository:
    """Account store backed by the request's database session."""
    return AccountRepository(db_session)


def get_billing_settings() -> BillingConfig:
    """Billing configuration (plan ceilings, default plan, demo account)."""
    return get_billing_config()


def _deny(request: Request, error, billing_status=None, current_count=None, limit=None) -> NoReturn:
    log_access_denied(AccessDenialEvent(
        account_id=error.account_id,
        reason=getattr(error, "reason", str(error)),
        status_code=error.http_status,
        billing_status=billing_status,
        endpoint=request.url.path,
        method=request.method,
        current_count=current_count,
        limit=limit,
    ))
    raise HTTPException(status_code=error.http_status, detail=error.to_dict())


def require_write_access_dependency(
    request: Request,
    repository: AccountRepository = Depends(get_account_repository),
    billing_config: BillingConfig = Depends(get_billing_settings),
) -> AccountContext:
    """
    Dependency that blocks writes the account's billing state does not allow.

    Raises 403 for the demo account or a non-writable state, 404 for an
    unknown account. Returns the AccountContext when the write may proceed.
    """
    account_ctx = get_account_context(request)
    account_id = account_ctx.account_id

    if billing_config.is_demo_account(account_id):
        _deny(request, WriteAccessDeniedError(
            account_id=account_id,
            reason=DEMO_READ_ONLY_MESSAGE,
            is_demo=True,
        ))

    result = require_write_access(
        repository,
        account_id,
        plan_limits=billing_config.plan_limits,
        default_plan=billing_config.default_plan,
    )
    if not result.allowed:
        if result.status_code == 404:
            _deny(request, AccountNotFoundError(account_id))
        _deny(
            request,
            WriteAccessDeniedError(
                account_id=account_id,
                reason=result.reason,
                billing_status=result.billing_status,
                http_status=result.status_code,
                reason_code=result.reason_code,
            ),
            billing_status=result.billing_status,
        )

    return account_ctx


def require_member_capacity(
    request: Request,
    repository: AccountRepository = Depends(get_account_repository),
    billing_config: BillingConfig = Depends(get_billing_settings),
) -> MemberLimitResult:
    """
    Dependency that blocks active-member creation at the plan ceiling.

    Raises 403 with current_count and limit when the ceiling is reached,
    404 for an unknown account.
    """
    account_id = get_account_context(request).account_id

    result = check_member_limit(
        repository,
        account_id,
        plan_limits=billing_config.plan_limits,
        default_plan=billing_config.default_plan,
    )
    if not result.allowed:
        if not result.account_found:
            _deny(request, AccountNotFoundError(account_id))
        _deny(
            request,
            MemberLimitReachedError(
                account_id=account_id,
                reason=result.reason,
                current_count=result.current_count,
                limit=result.limit,
            ),
            current_count=result.current_count,
            limit=result.limit,
        )

    return result
