"""
Member model: a gym member belonging to an owner account.

Only members with status "active" count against the plan's member ceiling.
"""

from sqlalchemy import Column, String, ForeignKey, Index
from sqlalchemy.orm import relationship

from clubcheck.models.base import Base, TimestampMixin, generate_uuid


class MemberStatus:
    """Member status values."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    FROZEN = "frozen"


class Member(Base, TimestampMixin):
    """A gym member."""

    __tablename__ = "members"

    id = Column(
        String(64),
        primary_key=True,
        default=generate_uuid
    )
    owner_id = Column(
        String(64),
        ForeignKey("owners.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    status = Column(
        String(20),
        nullable=False,
        default=MemberStatus.ACTIVE,
        comment="active, inactive or frozen"
    )

    owner = relationship("Owner", back_populates="members")

    __table_args__ = (
        Index("ix_members_owner_status", "owner_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, owner_id={self.owner_id}, status={self.status})>"
