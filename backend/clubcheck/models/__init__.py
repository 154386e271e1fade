"""
Database models for ClubCheck.

All models share the declarative Base from clubcheck.db_base.
"""

from clubcheck.models.base import Base, TimestampMixin, generate_uuid
from clubcheck.models.owner import Owner
from clubcheck.models.member import Member, MemberStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "Owner",
    "Member",
    "MemberStatus",
]
