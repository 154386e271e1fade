"""
Structured error classes for entitlement enforcement.

The evaluator and guards never raise; these errors exist for the HTTP
boundary, which turns a guard rejection into a response.
"""

from typing import Optional
from fastapi import status


DEMO_READ_ONLY_MESSAGE = "Demo mode is read-only. Sign up for a free account to make changes!"


class EntitlementError(Exception):
    """Base exception for entitlement errors."""
    pass


class AccountNotFoundError(EntitlementError):
    """Raised when the account id does not resolve to an account."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        self.http_status = status.HTTP_404_NOT_FOUND
        super().__init__(f"Account {account_id} not found")

    def to_dict(self) -> dict:
        return {
            "error": "account_not_found",
            "message": "Account not found",
        }


class WriteAccessDeniedError(EntitlementError):
    """
    Raised when a mutating request is blocked by the account's billing state.

    Includes machine-readable reason codes for programmatic handling.
    """

    def __init__(
        self,
        account_id: str,
        reason: str,
        billing_status: Optional[str] = None,
        http_status: int = status.HTTP_403_FORBIDDEN,
        is_demo: bool = False,
        reason_code: Optional[str] = None,
    ):
        """
        Initialize write access denied error.

        Args:
            account_id: Account that attempted the write
            reason: Human-readable reason, shown to the user verbatim
            billing_status: Evaluated billing status, if evaluation ran
            http_status: HTTP status code (default 403)
            is_demo: True when the demo account attempted the write
            reason_code: Reason code from the evaluated state, if any
        """
        self.account_id = account_id
        self.reason = reason
        self.billing_status = billing_status
        self.http_status = http_status
        self.is_demo = is_demo
        self.reason_code = reason_code
        super().__init__(f"Write access denied for {account_id}: {reason}")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON response."""
        return {
            "error": "write_access_denied",
            "message": self.reason,
            "billing_status": self.billing_status,
            "code": self._get_reason_code(),
        }

    def _get_reason_code(self) -> str:
        if self.is_demo:
            return "demo_read_only"
        if self.reason_code:
            return self.reason_code
        if self.billing_status == "unverified":
            return "email_unverified"
        elif self.billing_status == "grace_expired":
            return "grace_expired"
        elif self.billing_status == "canceled":
            return "subscription_canceled"
        elif self.billing_status == "expired":
            return "subscription_expired"
        return "write_not_allowed"


class MemberLimitReachedError(EntitlementError):
    """Raised when adding an active member would exceed the plan ceiling."""

    def __init__(self, account_id: str, reason: str, current_count: int, limit: int):
        self.account_id = account_id
        self.reason = reason
        self.current_count = current_count
        self.limit = limit
        self.http_status = status.HTTP_403_FORBIDDEN
        super().__init__(reason)

    def to_dict(self) -> dict:
        return {
            "error": "member_limit_reached",
            "message": self.reason,
            "current_count": self.current_count,
            "limit": self.limit,
            "limit_reached": True,
        }
