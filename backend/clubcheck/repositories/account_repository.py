"""
Account repository for entitlement data access.

Implements the AccountStore read contract consumed by the entitlement guards.
Billing fields are returned verbatim; the only conversion is reading naive
timestamps (SQLite) as UTC.

start_trial is the one write: the email-verification flow calls it to stamp
the verification time and the trial end.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from clubcheck.config.billing import get_billing_config
from clubcheck.entitlements.evaluator import trial_end_date
from clubcheck.entitlements.models import AccountSnapshot
from clubcheck.models.owner import Owner
from clubcheck.models.member import Member, MemberStatus

logger = logging.getLogger(__name__)


class AccountRepository:
    """Repository for owner billing snapshots and member counts."""

    def __init__(self, db_session: Session):
        """
        Initialize repository with database session.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db = db_session

    def get_account_snapshot(self, account_id: str) -> Optional[AccountSnapshot]:
        """
        Read the billing fields of an account.

        Args:
            account_id: Owner ID

        Returns:
            AccountSnapshot if the owner exists, None otherwise
        """
        if not account_id:
            return None

        row = self.db.query(
            Owner.id,
            Owner.email_verified,
            Owner.subscription_status,
            Owner.current_period_end,
            Owner.trial_ends_at,
            Owner.plan_type,
        ).filter(Owner.id == account_id).first()

        if row is None:
            return None

        return AccountSnapshot(
            account_id=row.id,
            email_verified=row.email_verified,
            subscription_status=row.subscription_status,
            current_period_end=row.current_period_end,
            trial_ends_at=row.trial_ends_at,
            plan_type=row.plan_type,
        )

    def count_active_members(self, account_id: str) -> int:
        """
        Count members with status "active" for an account.

        Args:
            account_id: Owner ID

        Returns:
            Number of active members
        """
        count = self.db.query(func.count(Member.id)).filter(
            Member.owner_id == account_id,
            Member.status == MemberStatus.ACTIVE,
        ).scalar()
        return int(count or 0)

    def start_trial(
        self,
        account_id: str,
        verified_at: datetime,
        trial_days: Optional[int] = None,
    ) -> Optional[AccountSnapshot]:
        """
        Mark an account's email verified and start its trial.

        Accounts that are already verified keep their existing trial end.
        The change is flushed; committing is left to the caller.

        Args:
            account_id: Owner ID
            verified_at: Verification instant
            trial_days: Trial length; defaults to the configured trial_days

        Returns:
            Updated AccountSnapshot, or None if the owner does not exist
        """
        owner = self.db.query(Owner).filter(Owner.id == account_id).first()
        if owner is None:
            return None

        if owner.email_verified is None:
            if trial_days is None:
                trial_days = get_billing_config().trial_days
            owner.email_verified = verified_at
            owner.trial_ends_at = trial_end_date(verified_at, trial_days)
            self.db.flush()

            logger.info("Trial started", extra={
                "account_id": account_id,
                "trial_days": trial_days,
                "trial_ends_at": owner.trial_ends_at.isoformat(),
            })

        return self.get_account_snapshot(account_id)
