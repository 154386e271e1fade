"""
Owner model: the gym account that holds a ClubCheck subscription.

CRITICAL: Billing columns are written only by the payment-processor webhook
pipeline and the signup/verification flow. The entitlement core reads them
through AccountRepository and never mutates them.
"""

from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.orm import relationship

from clubcheck.models.base import Base, TimestampMixin, generate_uuid


class Owner(Base, TimestampMixin):
    """
    A gym owner account.

    Billing fields mirror the processor's view of the subscription:
    - subscription_status: None until the owner subscribes
    - current_period_end: end of the paid period (grace and wind-down anchor)
    - trial_ends_at: set only on the no-subscription trial path
    """

    __tablename__ = "owners"

    id = Column(
        String(64),
        primary_key=True,
        default=generate_uuid
    )
    email = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login email"
    )
    gym_name = Column(
        String(255),
        nullable=True
    )

    email_verified = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the email was verified; NULL means unverified"
    )

    # Processor-side subscription state
    subscription_status = Column(
        String(32),
        nullable=True,
        index=True,
        comment="active, trialing, past_due, canceled or NULL (no subscription)"
    )
    current_period_end = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="End of the current billing period"
    )
    trial_ends_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="End of the pre-subscription trial window"
    )
    plan_type = Column(
        String(20),
        nullable=False,
        default="starter",
        comment="starter or pro; determines the member ceiling"
    )
    stripe_customer_id = Column(
        String(100),
        nullable=True,
        index=True
    )

    members = relationship(
        "Member",
        back_populates="owner",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_owners_status_period_end", "subscription_status", "current_period_end"),
    )

    def __repr__(self) -> str:
        return (
            f"<Owner(id={self.id}, plan_type={self.plan_type}, "
            f"subscription_status={self.subscription_status})>"
        )
